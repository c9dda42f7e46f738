"""Build the include dependency graph from a materialized file set."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple, Union

from .models import DependencyGraph, Edge, GraphNode, SourceFile
from .resolver import TIE_BREAK_FIRST, PathResolver

logger = logging.getLogger(__name__)

FileRecord = Union[
    Tuple[str, str, Optional[int]],
    Tuple[str, str, Optional[int], Optional[int]],
]


def files_from_records(records: Iterable[FileRecord]) -> List[SourceFile]:
    """Turn ``(path, content, size[, churn])`` tuples into SourceFiles.

    ``size`` may be ``None`` to use the UTF-8 length of the content; a
    missing churn is the same as ``None``.
    """
    files: List[SourceFile] = []
    for record in records:
        if len(record) not in (3, 4):
            raise ValueError(f"File record needs 3 or 4 fields, got {len(record)}")
        path, content, size = record[:3]
        churn = record[3] if len(record) == 4 else None
        files.append(SourceFile.from_content(path, content, size=size, churn=churn))
    return files


def index_files(files: Iterable[SourceFile]) -> Dict[str, SourceFile]:
    """Path -> file, keeping input order; a repeated path keeps the last file."""
    index: Dict[str, SourceFile] = {}
    for source in files:
        if source.path in index:
            logger.warning("Duplicate path '%s' in file set; keeping the last copy", source.path)
            del index[source.path]
        index[source.path] = source
    return index


def build_graph(files: Iterable[SourceFile], tie_break: str = TIE_BREAK_FIRST) -> DependencyGraph:
    """Resolve every include of every file and collect the resulting edges.

    Self-includes and repeated includes of the same file collapse; unresolved
    includes leave no trace in the edge list.
    """
    index = index_files(files)
    resolver = PathResolver(index.keys(), tie_break=tie_break)

    nodes = {path: GraphNode.for_file(source) for path, source in index.items()}
    edges: List[Edge] = []
    seen: Set[Edge] = set()
    unresolved = 0

    for path, source in index.items():
        directory = source.directory
        for target in source.includes:
            resolved = resolver.resolve(target, directory)
            if resolved is None:
                unresolved += 1
                continue
            if resolved == path:
                continue
            edge = Edge(path, resolved)
            if edge not in seen:
                seen.add(edge)
                edges.append(edge)

    logger.debug(
        "Built graph: %d nodes, %d edges, %d unresolved includes",
        len(nodes), len(edges), unresolved,
    )
    return DependencyGraph(nodes=nodes, edges=edges, files=index)


def unresolved_includes(graph: DependencyGraph, path: str, tie_break: str = TIE_BREAK_FIRST) -> List[str]:
    """Include targets of *path* that match no file in the graph."""
    source = graph.files.get(path)
    if source is None:
        return []
    resolver = PathResolver(graph.files.keys(), tie_break=tie_break)
    return [t for t in source.includes if resolver.resolve(t, source.directory) is None]


def unresolved_map(graph: DependencyGraph, tie_break: str = TIE_BREAK_FIRST) -> Dict[str, List[str]]:
    """Every file with at least one unresolved include, mapped to those targets."""
    resolver = PathResolver(graph.files.keys(), tie_break=tie_break)
    missing: Dict[str, List[str]] = {}
    for path, source in graph.files.items():
        targets = [t for t in source.includes if resolver.resolve(t, source.directory) is None]
        if targets:
            missing[path] = targets
    return missing


def top_hubs(graph: DependencyGraph, limit: int = 10) -> Sequence[Tuple[str, int]]:
    """Most-included files, highest dependent count first, ties by path."""
    counts: Dict[str, int] = {}
    for edge in graph.edges:
        counts[edge.target] = counts.get(edge.target, 0) + 1
    ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return ranked[:limit]

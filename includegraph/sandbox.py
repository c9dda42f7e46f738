"""What-if analysis for moving a file to a new path.

A move never touches the live file set: the simulator builds a new snapshot
in which the moved file carries its new path (same content, same includes)
and rebuilds the graph over it.

Breakage is judged per include directive, comparing the snapshots before and
after the move:

* a quoted include (``"b.h"``) must resolve relative to the declaring file's
  directory, or as a verbatim repository path;
* an angle include (``<b.h>``) may use the full resolution chain, filename
  fallback included, as a search-path lookup would.

Only includes that resolved before the move can break.  Headers that were
never in the file set (``<vector>``) are not reported.  Both paths of a move
are normalized first, so ``a/./b.h`` names the same location as ``a/b.h``.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Sequence, Tuple

from .graph import build_graph, index_files
from .models import BreakageReport, DependencyGraph, IncludeDirective, SourceFile
from .resolver import TIE_BREAK_FIRST, PathResolver, dirname, normalize_path

logger = logging.getLogger(__name__)


def simulate_move(
    files: Sequence[SourceFile],
    old_path: str,
    new_path: str,
    tie_break: str = TIE_BREAK_FIRST,
) -> DependencyGraph:
    """Graph of *files* with *old_path* moved to *new_path*, broken nodes flagged."""
    return predict_breakage(files, old_path, new_path, tie_break=tie_break).graph


def predict_breakage(
    files: Sequence[SourceFile],
    old_path: str,
    new_path: str,
    tie_break: str = TIE_BREAK_FIRST,
) -> BreakageReport:
    index = index_files(files)
    if old_path not in index:
        old_path = normalize_path(old_path)
    new_path = normalize_path(new_path)
    if old_path not in index:
        logger.debug("Sandbox move ignored: '%s' is not in the file set", old_path)
        return BreakageReport(old_path, new_path, build_graph(index.values(), tie_break=tie_break))

    moved = move_file(list(index.values()), old_path, new_path)
    graph = build_graph(moved, tie_break=tie_break)

    before = PathResolver(index.keys(), tie_break=tie_break)
    after = PathResolver(graph.files.keys(), tie_break=tie_break)
    broken: Dict[str, Tuple[IncludeDirective, ...]] = {}

    for path, source in graph.files.items():
        previous_dir = dirname(old_path) if path == new_path else source.directory
        lost: List[IncludeDirective] = []
        for directive in source.directives:
            if before.resolve_directive(directive, previous_dir) is None:
                continue
            if after.resolve_directive(directive, source.directory) is None:
                lost.append(directive)
        if lost:
            broken[path] = tuple(lost)
            graph.nodes[path].is_broken = True

    logger.debug(
        "Sandbox move %s -> %s: %d broken file(s)", old_path, new_path, len(broken),
    )
    return BreakageReport(old_path, new_path, graph, moved=old_path != new_path, broken=broken)


def move_file(files: Sequence[SourceFile], old_path: str, new_path: str) -> List[SourceFile]:
    """New file list with the file at *old_path* re-identified as *new_path*.

    If *new_path* is already taken, the moved file replaces the occupant.
    """
    moved: List[SourceFile] = []
    for source in files:
        if source.path == old_path:
            moved.append(source.with_path(new_path))
        elif source.path == new_path and old_path != new_path:
            logger.warning("Sandbox move overwrites existing file '%s'", new_path)
        else:
            moved.append(source)
    return moved

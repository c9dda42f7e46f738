"""Core data models shared by the extractor, resolver, graph and sandbox layers."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

ROOT_GROUP = "root"


class Direction(str, Enum):
    """Edge directions a reachability query may follow."""

    OUT = "out"
    IN = "in"
    ALL = "all"

    @property
    def follows_outbound(self) -> bool:
        return self in (Direction.OUT, Direction.ALL)

    @property
    def follows_inbound(self) -> bool:
        return self in (Direction.IN, Direction.ALL)


@dataclass(frozen=True)
class IncludeDirective:
    """One ``#include`` line as written in a source file."""

    target: str
    quoted: bool
    line: int = 0

    def __str__(self) -> str:
        if self.quoted:
            return f'"{self.target}"'
        return f"<{self.target}>"


@dataclass(frozen=True)
class SourceFile:
    """A file under analysis.

    ``includes`` and ``directives`` are derived from ``content`` by
    :meth:`from_content`; build files that way rather than through the
    constructor so the two never drift apart.
    """

    path: str
    content: str
    size: int
    directives: Tuple[IncludeDirective, ...] = ()
    churn: Optional[int] = None

    @classmethod
    def from_content(
        cls,
        path: str,
        content: str,
        size: Optional[int] = None,
        churn: Optional[int] = None,
    ) -> "SourceFile":
        from .parser import scan_directives

        if size is None:
            size = len(content.encode("utf-8"))
        return cls(
            path=path,
            content=content,
            size=size,
            directives=tuple(scan_directives(content)),
            churn=churn,
        )

    @property
    def name(self) -> str:
        return self.path.rsplit("/", 1)[-1]

    @property
    def directory(self) -> str:
        if "/" not in self.path:
            return ""
        return self.path.rsplit("/", 1)[0]

    @property
    def includes(self) -> Tuple[str, ...]:
        return tuple(d.target for d in self.directives)

    def with_path(self, new_path: str) -> "SourceFile":
        """Same content at a different identity; includes are not re-derived."""
        return replace(self, path=new_path)

    def with_churn(self, churn: int) -> "SourceFile":
        return replace(self, churn=churn)


@dataclass(frozen=True)
class Edge:
    source: str
    target: str


@dataclass
class GraphNode:
    id: str
    name: str
    path: str
    group: str
    size: float
    churn: Optional[int] = None
    is_broken: bool = False

    @classmethod
    def for_file(cls, source: SourceFile) -> "GraphNode":
        return cls(
            id=source.path,
            name=source.name,
            path=source.path,
            group=source.directory or ROOT_GROUP,
            size=display_size(source.size),
            churn=source.churn,
        )

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "path": self.path,
            "group": self.group,
            "size": self.size,
        }
        if self.churn is not None:
            payload["churn"] = self.churn
        if self.is_broken:
            payload["isBroken"] = True
        return payload


def display_size(byte_size: int) -> float:
    """Dampened node radius; zero-byte files keep the floor."""
    return math.sqrt(max(byte_size, 0)) / 2 + 5


@dataclass
class DependencyGraph:
    nodes: Dict[str, GraphNode] = field(default_factory=dict)
    edges: List[Edge] = field(default_factory=list)
    files: Dict[str, SourceFile] = field(default_factory=dict)

    def dependencies(self, path: str) -> List[str]:
        """Files that *path* includes."""
        return [e.target for e in self.edges if e.source == path]

    def dependents(self, path: str) -> List[str]:
        """Files that include *path*."""
        return [e.source for e in self.edges if e.target == path]

    def broken_nodes(self) -> List[GraphNode]:
        return [n for n in self.nodes.values() if n.is_broken]

    def edge_set(self) -> FrozenSet[Edge]:
        return frozenset(self.edges)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": [n.to_dict() for n in self.nodes.values()],
            "links": [{"source": e.source, "target": e.target} for e in self.edges],
        }


@dataclass(frozen=True)
class ReachabilityResult:
    start: str
    direction: Direction
    depth: int
    nodes: FrozenSet[str]
    edges: FrozenSet[Edge]


@dataclass
class BreakageReport:
    """Outcome of a simulated move, summarised for display."""

    old_path: str
    new_path: str
    graph: DependencyGraph
    moved: bool = False
    broken: Dict[str, Tuple[IncludeDirective, ...]] = field(default_factory=dict)

    @property
    def broken_outbound(self) -> int:
        """Broken includes declared by the moved file itself."""
        return len(self.broken.get(self.new_path, ()))

    @property
    def broken_inbound(self) -> int:
        """Other files left with at least one broken include."""
        return sum(1 for path in self.broken if path != self.new_path)

"""IncludeGraph: C/C++ include dependency graphs, impact analysis and move simulation."""

from __future__ import annotations

from .graph import build_graph, files_from_records
from .models import (
    BreakageReport,
    DependencyGraph,
    Direction,
    Edge,
    GraphNode,
    IncludeDirective,
    ReachabilityResult,
    SourceFile,
)
from .parser import extract_comments, extract_documentation, extract_includes
from .reachability import reachability
from .resolver import PathResolver, normalize_path
from .sandbox import predict_breakage, simulate_move

__version__ = "0.1.0"

__all__ = [
    "BreakageReport",
    "DependencyGraph",
    "Direction",
    "Edge",
    "GraphNode",
    "IncludeDirective",
    "PathResolver",
    "ReachabilityResult",
    "SourceFile",
    "build_graph",
    "extract_comments",
    "extract_documentation",
    "extract_includes",
    "files_from_records",
    "normalize_path",
    "predict_breakage",
    "reachability",
    "simulate_move",
]

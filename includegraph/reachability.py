"""Depth-bounded neighbourhood of a file ("impact analysis")."""

from __future__ import annotations

import logging
from typing import List, Set, Union

from .models import DependencyGraph, Direction, Edge, ReachabilityResult

logger = logging.getLogger(__name__)


def reachability(
    graph: DependencyGraph,
    start: str,
    direction: Union[Direction, str] = Direction.ALL,
    depth: int = 1,
) -> ReachabilityResult:
    """Breadth-first expansion from *start* for at most *depth* levels.

    Every edge touching the current frontier in an allowed direction is
    reported, including edges whose far end was already visited.  The graph
    is only read.
    """
    direction = Direction(direction)
    seen: Set[str] = {start}
    used: Set[Edge] = set()

    if start not in graph.nodes:
        logger.debug("Reachability start '%s' is not in the graph", start)
        return ReachabilityResult(start, direction, depth, frozenset(seen), frozenset())

    frontier: Set[str] = {start}
    for level in range(depth):
        next_level: List[str] = []
        for edge in graph.edges:
            if direction.follows_outbound and edge.source in frontier:
                used.add(edge)
                if edge.target not in seen:
                    seen.add(edge.target)
                    next_level.append(edge.target)
            if direction.follows_inbound and edge.target in frontier:
                used.add(edge)
                if edge.source not in seen:
                    seen.add(edge.source)
                    next_level.append(edge.source)
        if not next_level:
            logger.debug("Reachability from '%s' settled after %d level(s)", start, level + 1)
            break
        frontier = set(next_level)

    return ReachabilityResult(start, direction, depth, frozenset(seen), frozenset(used))

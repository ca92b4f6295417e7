"""Topological ordering of the dependency graph with cycle detection."""

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import List, Sequence

from .model import DependencyGraph

logger = logging.getLogger(__name__)


@dataclass
class SortResult:
    """
    Outcome of a topological sort.

    ``order`` is only meaningful when ``ok`` is True; on failure it is empty
    and ``blocked`` lists the nodes left waiting on a cycle.
    """

    order: List[int] = field(default_factory=list)
    ok: bool = True
    blocked: List[int] = field(default_factory=list)


def topological_sort(graph: DependencyGraph) -> SortResult:
    """
    Order the graph's nodes so every dependency precedes its dependents.

    Uses Kahn's algorithm with a FIFO ready queue seeded in ascending node
    order, so ties are broken by discovery order. The graph is not modified.

    Args:
        graph: The dependency graph to sort.

    Returns:
        SortResult with the full order, or ``ok=False`` and no order if the
        graph contains a cycle.
    """
    in_degree = graph.in_degree
    queue = deque(node for node, degree in enumerate(in_degree) if degree == 0)
    order: List[int] = []

    while queue:
        node = queue.popleft()
        order.append(node)
        for target in graph.get_targets(node):
            in_degree[target] -= 1
            if in_degree[target] == 0:
                queue.append(target)

    if len(order) != len(graph):
        blocked = [node for node, degree in enumerate(in_degree) if degree > 0]
        logger.debug("Sort stopped after %d of %d nodes; %d blocked", len(order), len(graph), len(blocked))
        return SortResult(order=[], ok=False, blocked=blocked)

    logger.debug("Sorted %d nodes", len(order))
    return SortResult(order=order, ok=True)


def find_cycle(graph: DependencyGraph, blocked: Sequence[int]) -> List[int]:
    """
    Find one concrete cycle among the nodes a failed sort left blocked.

    Every blocked node still waits on at least one blocked dependency, so
    walking dependencies inside the blocked set must revisit a node.

    Returns:
        The cycle's nodes, each one a dependency of the next (the last is a
        dependency of the first), or an empty list if ``blocked`` is empty.
    """
    if not blocked:
        return []

    remaining = set(blocked)
    position = {}
    path: List[int] = []
    node = blocked[0]

    while node not in position:
        position[node] = len(path)
        path.append(node)
        node = next(dep for dep in graph.get_dependencies(node) if dep in remaining)

    cycle = path[position[node]:]
    cycle.reverse()
    return cycle

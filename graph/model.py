"""Graph data model for storing module dependencies between source files."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Set, Tuple

from errors import LimitExceededError


DEFAULT_MAX_EDGES_PER_NODE = 100000


@dataclass
class SourceFile:
    """
    One discovered source file.

    ``defined_modules`` holds every module declared in the file in file
    order; ``used_modules`` holds the referenced names de-duplicated in
    first-seen order, before resolution to files.
    """

    path: Path
    defined_modules: List[str] = field(default_factory=list)
    used_modules: List[str] = field(default_factory=list)

    @property
    def defined_module(self) -> Optional[str]:
        """The module this file declares; the last definition line wins."""
        if not self.defined_modules:
            return None
        return self.defined_modules[-1]


class DependencyGraph:
    """
    A directed graph over file indices ``0..N-1``.

    An edge ``source -> target`` means ``target`` uses a module defined by
    ``source``, so ``source`` must be built first. Alongside the out-edge
    lists the graph keeps each node's in-degree and its dependencies in the
    order they were discovered.
    """

    def __init__(self, node_count: int, max_edges_per_node: int = DEFAULT_MAX_EDGES_PER_NODE):
        if node_count < 0:
            raise ValueError("node_count must be non-negative")
        self._max_edges_per_node = max_edges_per_node
        self._edges: List[List[int]] = [[] for _ in range(node_count)]
        self._edge_sets: List[Set[int]] = [set() for _ in range(node_count)]
        self._in_degree: List[int] = [0] * node_count
        self._dependencies: List[List[int]] = [[] for _ in range(node_count)]

    @property
    def edges(self) -> Dict[int, List[int]]:
        """Return adjacency list representation of edges."""
        return {node: targets.copy() for node, targets in enumerate(self._edges) if targets}

    @property
    def in_degree(self) -> List[int]:
        """Return a copy of the per-node in-degree counts."""
        return self._in_degree.copy()

    def add_edge(self, source: int, target: int) -> bool:
        """
        Add a directed edge from ``source`` (dependency) to ``target`` (dependent).

        Adding an edge that already exists is a no-op. A self-loop is
        accepted and makes the graph unsortable.

        Returns:
            True if the edge was new, False if it already existed.

        Raises:
            LimitExceededError: If ``source`` already has the maximum number
                of out-edges.
        """
        self._check_node(source)
        self._check_node(target)

        if target in self._edge_sets[source]:
            return False
        if len(self._edges[source]) >= self._max_edges_per_node:
            raise LimitExceededError("edges per node", self._max_edges_per_node)

        self._edges[source].append(target)
        self._edge_sets[source].add(target)
        self._in_degree[target] += 1
        self._dependencies[target].append(source)
        return True

    def get_targets(self, source: int) -> List[int]:
        """Get the nodes that depend on ``source``, in edge insertion order."""
        self._check_node(source)
        return self._edges[source].copy()

    def get_dependencies(self, target: int) -> List[int]:
        """Get the nodes ``target`` depends on, in discovery order."""
        self._check_node(target)
        return self._dependencies[target].copy()

    def get_roots(self) -> List[int]:
        """Get nodes with no dependencies, in ascending order."""
        return [node for node, degree in enumerate(self._in_degree) if degree == 0]

    def has_edge(self, source: int, target: int) -> bool:
        """Check whether the edge ``source -> target`` exists."""
        self._check_node(source)
        return target in self._edge_sets[source]

    def iter_edges(self) -> Iterator[Tuple[int, int]]:
        """Iterate over all edges as (source, target) tuples."""
        for source, targets in enumerate(self._edges):
            for target in targets:
                yield source, target

    def edge_count(self) -> int:
        """Return the total number of edges."""
        return sum(len(targets) for targets in self._edges)

    def _check_node(self, node: int) -> None:
        if not 0 <= node < len(self._edges):
            raise IndexError(f"node {node} out of range for graph of {len(self._edges)} nodes")

    def __len__(self) -> int:
        """Return the number of nodes in the graph."""
        return len(self._edges)

    def __contains__(self, node: int) -> bool:
        """Check if a node is in the graph."""
        return isinstance(node, int) and 0 <= node < len(self._edges)

    def __repr__(self) -> str:
        return f"DependencyGraph(nodes={len(self._edges)}, edges={self.edge_count()})"

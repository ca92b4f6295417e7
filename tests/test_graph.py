"""Tests for graph data model and topological ordering."""

import pytest
from pathlib import Path

from errors import LimitExceededError
from graph.model import DependencyGraph, SourceFile
from graph.toposort import find_cycle, topological_sort


def _graph(node_count, edges):
    graph = DependencyGraph(node_count)
    for source, target in edges:
        graph.add_edge(source, target)
    return graph


def _assert_valid_order(graph, order):
    assert sorted(order) == list(range(len(graph)))
    position = {node: i for i, node in enumerate(order)}
    for source, target in graph.iter_edges():
        assert position[source] < position[target]


class TestSourceFile:
    """Tests for SourceFile class."""

    def test_defined_module(self):
        """Test that the last defined module is the file's module."""
        source = SourceFile(Path("a.f90"), defined_modules=["a", "b"])

        assert source.defined_module == "b"

    def test_no_module(self):
        """Test a file that defines nothing."""
        source = SourceFile(Path("main.f90"))

        assert source.defined_module is None
        assert source.used_modules == []


class TestDependencyGraph:
    """Tests for DependencyGraph class."""

    def test_empty_graph(self):
        """Test empty graph initialization."""
        graph = DependencyGraph(0)
        assert len(graph) == 0
        assert graph.edges == {}
        assert graph.in_degree == []

    def test_nodes_without_edges(self):
        """Test a graph with isolated nodes."""
        graph = DependencyGraph(3)

        assert len(graph) == 3
        assert 2 in graph
        assert 3 not in graph
        assert graph.get_roots() == [0, 1, 2]

    def test_add_edge(self):
        """Test adding edges."""
        graph = DependencyGraph(2)

        assert graph.add_edge(0, 1)

        assert graph.get_targets(0) == [1]
        assert graph.get_dependencies(1) == [0]
        assert graph.in_degree == [0, 1]
        assert graph.has_edge(0, 1)
        assert not graph.has_edge(1, 0)

    def test_add_edge_is_idempotent(self):
        """Test that a duplicate edge is not added twice."""
        graph = DependencyGraph(2)
        graph.add_edge(0, 1)

        assert not graph.add_edge(0, 1)

        assert graph.get_targets(0) == [1]
        assert graph.in_degree == [0, 1]
        assert graph.edge_count() == 1

    def test_dependencies_in_discovery_order(self):
        """Test that dependencies keep the order they were added in."""
        graph = _graph(4, [(2, 3), (0, 3), (1, 3)])

        assert graph.get_dependencies(3) == [2, 0, 1]

    def test_self_loop(self):
        """Test that a self-reference is kept as a self-loop."""
        graph = _graph(1, [(0, 0)])

        assert graph.in_degree == [1]
        assert graph.get_roots() == []

    def test_out_of_range(self):
        """Test that unknown nodes are rejected."""
        graph = DependencyGraph(2)

        with pytest.raises(IndexError):
            graph.add_edge(0, 2)
        with pytest.raises(IndexError):
            graph.get_targets(-1)

    def test_negative_size(self):
        """Test that a negative node count is rejected."""
        with pytest.raises(ValueError):
            DependencyGraph(-1)

    def test_max_edges_per_node(self):
        """Test that too many dependents of one node is fatal."""
        graph = DependencyGraph(4, max_edges_per_node=2)
        graph.add_edge(0, 1)
        graph.add_edge(0, 2)

        with pytest.raises(LimitExceededError):
            graph.add_edge(0, 3)

    def test_duplicate_edge_at_limit(self):
        """Test that re-adding an existing edge never trips the limit."""
        graph = DependencyGraph(2, max_edges_per_node=1)
        graph.add_edge(0, 1)

        assert not graph.add_edge(0, 1)

    def test_properties_return_copies(self):
        """Test that callers cannot mutate the graph through accessors."""
        graph = _graph(2, [(0, 1)])

        graph.in_degree[1] = 7
        graph.edges[0].append(0)
        graph.get_targets(0).append(0)

        assert graph.in_degree == [0, 1]
        assert graph.get_targets(0) == [1]

    def test_iter_edges(self):
        """Test iterating over edges."""
        edges = [(0, 1), (0, 2), (1, 2)]
        graph = _graph(3, edges)

        assert list(graph.iter_edges()) == edges

    def test_repr(self):
        """Test string representation."""
        graph = _graph(2, [(0, 1)])

        assert "nodes=2" in repr(graph)
        assert "edges=1" in repr(graph)


class TestTopologicalSort:
    """Tests for topological_sort."""

    def test_empty_graph(self):
        """Test sorting an empty graph."""
        result = topological_sort(DependencyGraph(0))

        assert result.ok
        assert result.order == []

    def test_chain(self):
        """Test a simple chain."""
        result = topological_sort(_graph(3, [(0, 1), (1, 2)]))

        assert result.ok
        assert result.order == [0, 1, 2]

    def test_dependencies_before_dependents(self):
        """Test a graph whose discovery order is not a valid build order."""
        graph = _graph(4, [(3, 0), (2, 0), (3, 1), (1, 2)])

        result = topological_sort(graph)

        assert result.ok
        assert len(result.order) == 4
        _assert_valid_order(graph, result.order)

    def test_ties_follow_discovery_order(self):
        """Test that independent nodes keep their index order."""
        result = topological_sort(DependencyGraph(4))

        assert result.order == [0, 1, 2, 3]

    def test_fifo_tie_break(self):
        """Test that nodes freed later are queued behind earlier ready nodes."""
        # 0 and 2 are ready first; 0 frees 1 and 3, which wait behind 2
        graph = _graph(4, [(0, 3), (0, 1)])

        result = topological_sort(graph)

        assert result.order == [0, 2, 3, 1]

    def test_larger_acyclic_graph(self):
        """Test a layered graph of many nodes."""
        edges = [(i, j) for i in range(10) for j in range(i + 1, 10) if (i + j) % 3 == 0]
        graph = _graph(10, edges)

        result = topological_sort(graph)

        assert result.ok
        _assert_valid_order(graph, result.order)

    def test_does_not_modify_graph(self):
        """Test that sorting leaves the in-degrees intact."""
        graph = _graph(3, [(0, 1), (1, 2)])

        topological_sort(graph)

        assert graph.in_degree == [0, 1, 1]

    def test_two_node_cycle(self):
        """Test that a cycle fails with no order."""
        graph = _graph(2, [(0, 1), (1, 0)])

        result = topological_sort(graph)

        assert not result.ok
        assert result.order == []
        assert result.blocked == [0, 1]

    def test_self_loop_is_cycle(self):
        """Test that a self-loop is an unsortable cycle of length one."""
        result = topological_sort(_graph(1, [(0, 0)]))

        assert not result.ok
        assert result.order == []

    def test_cycle_blocks_downstream_only(self):
        """Test that nodes outside and upstream of a cycle are not blocked."""
        # 0 -> 1 <-> 2 -> 3, plus isolated 4
        graph = _graph(5, [(0, 1), (1, 2), (2, 1), (2, 3)])

        result = topological_sort(graph)

        assert not result.ok
        assert result.blocked == [1, 2, 3]


class TestFindCycle:
    """Tests for find_cycle."""

    def test_two_node_cycle(self):
        """Test naming a two-node cycle."""
        graph = _graph(2, [(0, 1), (1, 0)])

        cycle = find_cycle(graph, topological_sort(graph).blocked)

        assert sorted(cycle) == [0, 1]

    def test_cycle_edges_exist(self):
        """Test that consecutive cycle members are joined by edges."""
        graph = _graph(5, [(0, 1), (1, 2), (2, 3), (3, 1), (3, 4)])

        cycle = find_cycle(graph, topological_sort(graph).blocked)

        assert sorted(cycle) == [1, 2, 3]
        for i, node in enumerate(cycle):
            assert graph.has_edge(node, cycle[(i + 1) % len(cycle)])

    def test_self_loop(self):
        """Test naming a self-loop."""
        graph = _graph(2, [(0, 1), (1, 1)])

        assert find_cycle(graph, topological_sort(graph).blocked) == [1]

    def test_nothing_blocked(self):
        """Test that an acyclic graph has no cycle to report."""
        assert find_cycle(DependencyGraph(2), []) == []

#!/usr/bin/env python3
"""
Tests for Circular Dependency Detection
=======================================

Tests the depth-first cycle search over import edges.
"""

from depgraph.dependency.cycle_detector import CycleDetector, detect_circular_dependencies
from depgraph.models.graph_models import FileNode, Graph, GraphEdge


def graph_with_imports(*pairs: tuple[str, str]) -> Graph:
    graph = Graph()
    for source, target in pairs:
        for module_id in (source, target):
            if module_id not in graph.nodes:
                graph.add_node(FileNode(id=module_id))
        graph.edges.append(GraphEdge.import_edge(source, target))
    return graph


class TestCycleDetection:
    """Tests for circular import detection."""

    def test_acyclic_graph(self):
        """A DAG has no cycles."""
        graph = graph_with_imports(("a", "b"), ("b", "c"), ("a", "c"))

        assert detect_circular_dependencies(graph) == []

    def test_three_module_cycle(self):
        """A -> B -> C -> A is reported once, starting at A."""
        graph = graph_with_imports(("a", "b"), ("b", "c"), ("c", "a"))

        assert detect_circular_dependencies(graph) == [["a", "b", "c"]]

    def test_self_import(self):
        """A module importing itself is a one-element cycle."""
        graph = graph_with_imports(("a", "a"))

        assert detect_circular_dependencies(graph) == [["a"]]

    def test_cycle_below_the_root(self):
        """The cycle starts at the revisited module, not at the root."""
        graph = graph_with_imports(("main", "a"), ("a", "b"), ("b", "a"))

        assert detect_circular_dependencies(graph) == [["a", "b"]]

    def test_call_edges_are_ignored(self):
        """Only import edges form cycles."""
        graph = graph_with_imports(("a", "b"))
        graph.edges.append(GraphEdge.call_edge("b", "a", "run"))

        assert detect_circular_dependencies(graph) == []

    def test_independent_cycles(self):
        """Cycles in separate components are all found."""
        graph = graph_with_imports(("a", "b"), ("b", "a"), ("x", "y"), ("y", "x"))

        assert detect_circular_dependencies(graph) == [["a", "b"], ["x", "y"]]

    def test_closing_module_stops_exploring(self):
        """Only the first cycle through the closing module is reported."""
        graph = graph_with_imports(("a", "b"), ("b", "a"), ("b", "c"), ("c", "b"))

        # b -> c -> b is not reported: b stops at its first back edge
        assert detect_circular_dependencies(graph) == [["a", "b"]]

    def test_unexplored_targets_become_roots(self):
        """Imports skipped by a closing module are searched later as roots."""
        graph = graph_with_imports(("a", "b"), ("b", "a"), ("b", "c"), ("c", "d"), ("d", "c"))

        assert detect_circular_dependencies(graph) == [["a", "b"], ["c", "d"]]

    def test_shared_module_reported_once(self):
        """A module reached twice without a loop is not a cycle."""
        graph = graph_with_imports(("a", "shared"), ("b", "shared"), ("a", "b"))

        assert CycleDetector(graph).detect() == []

    def test_adjacency_keeps_edge_order(self):
        """Adjacency lists follow import edge order."""
        graph = graph_with_imports(("a", "c"), ("a", "b"))

        assert CycleDetector(graph).adjacency() == {"a": ["c", "b"]}

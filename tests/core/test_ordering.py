"""
Test suite for the topological ordering helpers.

System role: Verification of the ordering primitive shared by builder and differ
"""

import networkx as nx
import pytest

from reconciler.core.ordering import cycle_path, dependency_graph, topological_order


class TestDependencyGraph:
    """Test suite for dependency_graph()."""

    def test_edges_should_point_from_prerequisite_to_item(self) -> None:
        graph = dependency_graph(["A", "B"], {"B": ["A"]})

        assert list(graph.edges) == [("A", "B")]

    def test_unknown_prerequisites_should_be_ignored(self) -> None:
        graph = dependency_graph(["A"], {"A": ["Missing"]})

        assert list(graph.nodes) == ["A"]
        assert graph.number_of_edges() == 0


class TestTopologicalOrder:
    """Test suite for topological_order()."""

    def test_ties_should_follow_priority(self) -> None:
        """Test independent items come out by ascending priority key."""
        graph = dependency_graph(["A", "B", "C"], {})

        ordered = topological_order(graph, {"A": 2, "B": 0, "C": 1})

        assert ordered == ["B", "C", "A"]

    def test_prerequisites_should_win_over_priority(self) -> None:
        graph = dependency_graph(["A", "B"], {"A": ["B"]})

        ordered = topological_order(graph, {"A": 0, "B": 1})

        assert ordered == ["B", "A"]

    def test_cycle_should_raise_unfeasible(self) -> None:
        graph = dependency_graph(["A", "B"], {"A": ["B"], "B": ["A"]})

        with pytest.raises(nx.NetworkXUnfeasible):
            topological_order(graph, {"A": 0, "B": 1})


class TestCyclePath:
    """Test suite for cycle_path()."""

    def test_cycle_path_should_close_on_first_node(self) -> None:
        graph = dependency_graph(["A", "B", "C", "D"], {"A": ["C"], "B": ["A"], "C": ["B"], "D": ["A"]})

        cycle = cycle_path(graph)

        assert cycle[0] == cycle[-1]
        assert set(cycle) == {"A", "B", "C"}

    def test_self_loop_should_be_a_cycle(self) -> None:
        graph = dependency_graph(["A"], {"A": ["A"]})

        assert cycle_path(graph) == ["A", "A"]

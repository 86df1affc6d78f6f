"""
Deterministic topological ordering on networkx digraphs.

Edges point from a prerequisite to the item that needs it. Among items whose
prerequisites are all placed, the one with the lowest priority key comes
first. Shared by the builder (node order) and the differ (entry order).

Dependencies: networkx
System role: Ordering primitive for graphs and change sets
"""

from typing import Any, Iterable, Mapping, Sequence

import networkx as nx


def dependency_graph(
    items: Sequence[str],
    prerequisites: Mapping[str, Iterable[str]],
) -> nx.DiGraph:
    """
    Build a prerequisite -> item digraph.

    Prerequisites naming items outside `items` are ignored. An item listing
    itself becomes a self-loop.

    Args:
        items: Graph nodes
        prerequisites: item -> items that must come before it

    Returns:
        nx.DiGraph: One node per item
    """
    graph = nx.DiGraph()
    graph.add_nodes_from(items)
    for item in items:
        for prerequisite in prerequisites.get(item, ()):
            if prerequisite in graph:
                graph.add_edge(prerequisite, item)
    return graph


def topological_order(graph: nx.DiGraph, priority: Mapping[str, Any]) -> list[str]:
    """
    Order nodes so that every prerequisite precedes its dependents.

    Args:
        graph: Prerequisite -> item digraph
        priority: node -> sortable tie-break key

    Returns:
        list[str]: Nodes in order

    Raises:
        nx.NetworkXUnfeasible: If the graph contains a cycle
    """
    return list(nx.lexicographical_topological_sort(graph, key=priority.__getitem__))


def cycle_path(graph: nx.DiGraph) -> list[str]:
    """
    One cycle of a graph known to be cyclic.

    Args:
        graph: Prerequisite -> item digraph

    Returns:
        list[str]: Cycle path with the first node repeated at the end
    """
    edges = nx.find_cycle(graph)
    return [source for source, _ in edges] + [edges[0][0]]

"""Steiner minimal tree routing over a flow's graph."""

from __future__ import annotations

from typing import Sequence

from omrss.dijkstra import V2V, V2VEdge, dijkstra, graph_from_topology
from omrss.topology import Topology
from omrss.tree import Tree

Candidates = dict[int, list[list[int]]]


def _save_shortest_paths(
    candidates: Candidates, v2v_edge: V2VEdge, target: int, origin: int, topology: Topology
) -> None:
    if not v2v_edge.has_graph(origin):
        graph = graph_from_topology(topology)
        graph.to_vertex = target
        dijkstra(graph, origin, target)
        v2v_edge.graphs.append(graph)
        paths = graph.paths
    else:
        paths = v2v_edge.paths_to(target)
    for path in paths:
        candidates.setdefault(len(path), []).append(path)


def _grown_size(tree: Tree, path: Sequence[int], cost: float) -> int:
    grown = tree.deep_copy()
    grown.into_tree(path, cost)
    return len(grown.nodes)


def choose_best_path(candidates: Candidates, tree: Tree, cost: float) -> list[int]:
    """Add the shortest candidate that grows the tree least, and return it."""
    if not candidates:
        raise ValueError("no path connects the remaining terminals")
    shortest = candidates[min(candidates)]
    if not tree.nodes:
        best = shortest[0]
    else:
        best = min(shortest, key=lambda path: _grown_size(tree, path, cost))
    tree.into_tree(best, cost)
    return best


def steiner_tree(
    v2v: V2V, topology: Topology, source: int, destinations: Sequence[int], cost: float
) -> Tree:
    """Grow a tree joining the source and destinations by repeated shortest paths."""
    terminals = [source, *destinations]
    tree = Tree()
    used: list[int] = []

    while len(used) != len(terminals):
        candidates: Candidates = {}
        if not tree.nodes:
            for origin in terminals:
                v2v_edge, created = v2v.get_edge(origin)
                for target in terminals:
                    if origin != target:
                        _save_shortest_paths(candidates, v2v_edge, target, origin, topology)
                if created:
                    v2v.edges.append(v2v_edge)
            best = choose_best_path(candidates, tree, cost)
            used.extend((best[0], best[-1]))
        else:
            for target in terminals:
                if target in used:
                    continue
                for node in tree.nodes:
                    v2v_edge, created = v2v.get_edge(node.id)
                    if target != node.id:
                        _save_shortest_paths(candidates, v2v_edge, target, node.id, topology)
                    if created:
                        v2v.edges.append(v2v_edge)
            best = choose_best_path(candidates, tree, cost)
            used.append(best[0])
    return tree
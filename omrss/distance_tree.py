"""Minimal distance tree construction from per-destination shortest paths."""

from __future__ import annotations

from typing import Iterable, Sequence

from omrss.topology import Node, Topology
from omrss.tree import Tree

MAX_PATH_LENGTH = 100


def distance_tree(
    topology: Topology, source: int, destinations: Iterable[int], cost: float
) -> Tree:
    """Join the shortest path from ``source`` to every destination into one tree."""
    tree = Tree()
    for destination in destinations:
        tree.into_tree(dp_tsp(topology, source, destination), cost)
    return tree


def dp_tsp(topology: Topology, source: int, destination: int) -> list[int]:
    """The shortest loop-free path from ``source`` to ``destination``, or []."""
    node = topology.node_by_id(source)
    if node is None:
        return []
    return _shortest_path(topology, node, [], destination)


def _shortest_path(
    topology: Topology, node: Node, visited: Sequence[int], end: int
) -> list[int]:
    visited = [*visited, node.id]
    if node.id == end:
        return visited

    paths = []
    for conn in node.connections:
        if conn.to_id in visited:
            continue
        following = topology.node_by_id(conn.to_id)
        if following is None:
            continue
        path = _shortest_path(topology, following, visited, end)
        if path:
            paths.append(path)
    return select_min_path(paths)


def select_min_path(paths: Iterable[Sequence[int]]) -> list[int]:
    """A copy of the first shortest path under the length limit, or []."""
    best: list[int] = []
    best_length = MAX_PATH_LENGTH
    for path in paths:
        if len(path) < best_length:
            best = list(path)
            best_length = len(path)
    return best
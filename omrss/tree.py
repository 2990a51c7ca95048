"""Routing trees built from paths, with cycle detection and comparison helpers."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Iterable, Sequence


def _format_ids(ids: Iterable[int]) -> str:
    return "[" + " ".join(str(value) for value in ids) + "]"


@dataclass
class Connection:
    """A directed tree edge with a per-byte cost."""

    from_id: int
    to_id: int
    cost: float


@dataclass
class Node:
    """A tree node and its outgoing connections."""

    id: int
    connections: list[Connection] = field(default_factory=list)

    def same_as(self, other: Node) -> bool:
        """Whether both nodes have the same id and lead to the same neighbours."""
        return (
            self.id == other.id
            and len(self.connections) == len(other.connections)
            and connections_match(self.connections, other.connections)
        )


@dataclass
class Tree:
    """An undirected routing tree stored as nodes with links in both directions."""

    nodes: list[Node] = field(default_factory=list)
    weight: int = 0

    def check_node(self, node_id: int) -> tuple[Node, bool]:
        """Return the node with this id and True, or a fresh node and False."""
        node = self.node_by_id(node_id)
        if node is None:
            return Node(node_id), False
        return node, True

    def node_by_id(self, node_id: int) -> Node | None:
        """Return the node with this id, or None."""
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def into_tree(self, path: Sequence[int], cost: float) -> None:
        """Add a path, walked from its last vertex to its first, to the tree."""
        for near, far in reversed(list(zip(path, path[1:]))):
            far_node, far_found = self.check_node(far)
            near_node, near_found = self.check_node(near)
            if not far_found:
                self.nodes.append(far_node)
            if not near_found:
                self.nodes.append(near_node)
            if all(conn.to_id != near for conn in far_node.connections):
                far_node.connections.append(Connection(far, near, cost))
                near_node.connections.append(Connection(near, far, cost))

    def remove_edge(self, edge: Sequence[int]) -> None:
        """Remove an edge in both directions, dropping nodes left without links."""
        first = self.node_by_id(edge[0])
        second = self.node_by_id(edge[1])
        if first is None or second is None:
            raise KeyError(f"edge {tuple(edge)} is not in the tree")

        first.connections = [c for c in first.connections if c.to_id != second.id]
        if not first.connections:
            self.nodes = [node for node in self.nodes if node.id != edge[0]]

        second.connections = [c for c in second.connections if c.to_id != first.id]
        if not second.connections:
            self.nodes = [node for node in self.nodes if node.id != edge[1]]

    def is_tree(self, terminals: Iterable[int]) -> bool:
        """Whether the graph is connected, acyclic and has only terminals as leaves."""
        if not self.nodes:
            raise ValueError("cannot check an empty tree")
        terminal_ids = set(terminals)
        visited: set[int] = set()
        return (
            self._walk_tree(self.nodes[0], None, visited, terminal_ids)
            and len(visited) == len(self.nodes)
        )

    def _walk_tree(
        self, node: Node, parent: Node | None, visited: set[int], terminals: set[int]
    ) -> bool:
        if id(node) in visited:
            return False
        visited.add(id(node))
        for conn in node.connections:
            if len(node.connections) == 1 and node.id not in terminals:
                return False
            child = self.node_by_id(conn.to_id)
            if child is parent:
                continue
            if child is None or not self._walk_tree(child, node, visited, terminals):
                return False
        return True

    def same_as(self, other: Tree) -> bool:
        """Whether both trees have the same weight, nodes and neighbours."""
        if self.weight != other.weight or len(self.nodes) != len(other.nodes):
            return False
        for node in self.nodes:
            mine = self.node_by_id(node.id)
            theirs = other.node_by_id(node.id)
            if mine is None or theirs is None or not mine.same_as(theirs):
                return False
        return True

    def deep_copy(self) -> Tree:
        """Return an independent copy of the tree."""
        return copy.deepcopy(self)

    def find_cycle(self) -> list[int]:
        """Ids of the nodes that lie on a cycle; empty when there is none."""
        return [
            node.id
            for node in self.nodes
            if self._returns_to_start(node, set(), -1, node.id)
        ]

    def _returns_to_start(
        self, node: Node, visited: set[int], parent_id: int, start_id: int
    ) -> bool:
        visited.add(node.id)
        for conn in node.connections:
            if conn.to_id == parent_id:
                continue
            if conn.to_id == start_id:
                return True
            if conn.to_id in visited:
                continue
            child = self.node_by_id(conn.to_id)
            if child is not None and self._returns_to_start(child, visited, node.id, start_id):
                return True
        return False

    def feedback_edge_set(
        self, cycle_list: Sequence[int], path: Sequence[int]
    ) -> list[tuple[int, int]]:
        """Edges between cycle nodes that are not on ``path``, each listed once."""
        edges: list[tuple[int, int]] = []
        for node_id in cycle_list:
            node = self.node_by_id(node_id)
            if node is None:
                continue
            for conn in node.connections:
                if conn.to_id not in cycle_list:
                    continue
                edge = (conn.from_id, conn.to_id)
                if in_path_edges(path, edge):
                    continue
                if not in_edge_set(edges, edge):
                    edges.append(edge)
        return edges

    def show(self) -> None:
        """Print every node and its connections."""
        for node in self.nodes:
            print(node.id)
            for conn in node.connections:
                print(f"{conn.from_id} --> {conn.to_id} ")

    def show_cycle(self) -> None:
        """Print whether the tree has a cycle and which nodes are on it."""
        cycle = self.find_cycle()
        if cycle:
            print("The MST has cycle")
            print(_format_ids(cycle))
        else:
            print("The MST has no cycle")


@dataclass
class KTrees:
    """Candidate trees for one flow."""

    trees: list[Tree] = field(default_factory=list)

    def show(self) -> None:
        for index, tree in enumerate(self.trees):
            print(f"tree{index} ")
            print(f"tree weight: {tree.weight} ")
            tree.show()


@dataclass
class TreesSet:
    """One selected tree per TSN flow and per AVB flow."""

    tsn_trees: list[Tree] = field(default_factory=list)
    avb_trees: list[Tree] = field(default_factory=list)

    def input_set(self, bg_tsn: int, bg_avb: int) -> TreesSet:
        """The trees of the input flows."""
        return TreesSet(list(self.tsn_trees[bg_tsn:]), list(self.avb_trees[bg_avb:]))

    def background_set(self, bg_tsn: int, bg_avb: int) -> TreesSet:
        """The trees of the background flows."""
        return TreesSet(list(self.tsn_trees[:bg_tsn]), list(self.avb_trees[:bg_avb]))

    def show(self) -> None:
        """Print the first TSN tree and the first AVB tree."""
        for label, trees in (("TSN", self.tsn_trees), ("AVB", self.avb_trees)):
            if trees:
                print(f"\n{label} Tree 1 ")
                trees[0].show()


@dataclass
class KTreesSet:
    """Candidate trees for every TSN flow and every AVB flow."""

    tsn_trees: list[KTrees] = field(default_factory=list)
    avb_trees: list[KTrees] = field(default_factory=list)

    def input_set(self, bg_tsn: int, bg_avb: int) -> KTreesSet:
        """The candidates of the input flows; both kinds split at the TSN boundary."""
        return KTreesSet(list(self.tsn_trees[bg_tsn:]), list(self.avb_trees[bg_tsn:]))

    def background_set(self, bg_tsn: int, bg_avb: int) -> KTreesSet:
        """The candidates of the background flows; both kinds split at the TSN boundary."""
        return KTreesSet(list(self.tsn_trees[:bg_tsn]), list(self.avb_trees[:bg_tsn]))

    def show(self) -> None:
        """Print the candidates of the first TSN flow and the first AVB flow."""
        for label, groups in (("TSN", self.tsn_trees), ("AVB", self.avb_trees)):
            if groups:
                print(f"\n{label} Tree 1 ")
                groups[0].show()


def connections_match(first: Sequence[Connection], second: Sequence[Connection]) -> bool:
    """Whether the number of matching target pairs equals the length of ``first``."""
    matches = sum(1 for a in first for b in second if b.to_id == a.to_id)
    return matches == len(first)


def in_path_edges(path: Sequence[int], edge: Sequence[int]) -> bool:
    """Whether ``edge`` joins two neighbouring vertices of ``path``."""
    for index, vertex in enumerate(path):
        if vertex != edge[0]:
            continue
        if index + 1 < len(path) and path[index + 1] == edge[1]:
            return True
        if index > 0 and path[index - 1] == edge[1]:
            return True
    return False


def in_edge_set(edges: Iterable[Sequence[int]], edge: Sequence[int]) -> bool:
    """Whether ``edge`` is in ``edges`` in either direction."""
    return any(
        (known[0], known[1]) in ((edge[0], edge[1]), (edge[1], edge[0])) for known in edges
    )
"""Shortest-path search over flow graphs and a cache of terminal-to-terminal paths."""

from __future__ import annotations

from dataclasses import dataclass, field

from omrss.topology import Topology

INFINITY = 127


@dataclass
class Edge:
    """A unit-cost directed edge."""

    start: int
    end: int
    cost: int = 1


@dataclass
class Vertex:
    """A search vertex with its tentative cost and predecessor."""

    id: int
    visited: bool = False
    cost: int = 0
    path: int = -1
    edges: list[Edge] = field(default_factory=list)


@dataclass
class PathGraph:
    """Vertices of a flow graph and the shortest paths found to ``to_vertex``.

    Each path is listed from the terminal back to the start.
    """

    vertices: list[Vertex] = field(default_factory=list)
    to_vertex: int = 0
    paths: list[list[int]] = field(default_factory=list)

    def find_vertex(self, vertex_id: int) -> Vertex | None:
        """Return the vertex with this id, or None."""
        for vertex in self.vertices:
            if vertex.id == vertex_id:
                return vertex
        return None

    def add_path(self, terminal: int) -> None:
        """Record the predecessor chain ending at ``terminal`` unless already known."""
        path = [terminal]
        vertex = self.find_vertex(terminal)
        while vertex is not None and vertex.path != -1:
            path.append(vertex.path)
            vertex = self.find_vertex(vertex.path)
        if path not in self.paths:
            self.paths.append(path)

    def show(self) -> None:
        print(f"To Vertex: {self.to_vertex}")
        for path in self.paths:
            print("[" + " ".join(str(v) for v in path) + "]")


@dataclass
class V2VEdge:
    """Path graphs computed from one vertex to several others."""

    from_vertex: int
    graphs: list[PathGraph] = field(default_factory=list)

    def has_graph(self, terminal: int) -> bool:
        """Whether paths to ``terminal`` were already computed."""
        return any(graph.to_vertex == terminal for graph in self.graphs)

    def paths_to(self, terminal: int) -> list[list[int]]:
        """The stored paths to ``terminal`` (the last matching graph wins)."""
        paths: list[list[int]] = []
        for graph in self.graphs:
            if graph.to_vertex == terminal:
                paths = graph.paths
        return paths

    def show(self) -> None:
        for graph in self.graphs:
            print(f"From Vertex: {self.from_vertex}")
            graph.show()


@dataclass
class V2V:
    """All cached paths connecting terminals to terminals."""

    edges: list[V2VEdge] = field(default_factory=list)

    def get_edge(self, terminal: int) -> tuple[V2VEdge, bool]:
        """Return the entry for ``terminal`` and whether it was newly created.

        A new entry is not stored; the caller appends it.
        """
        for edge in self.edges:
            if edge.from_vertex == terminal:
                return edge, False
        return V2VEdge(terminal), True

    def show(self) -> None:
        for edge in self.edges:
            edge.show()


def graph_from_topology(topology: Topology) -> PathGraph:
    """Build a unit-cost search graph from talkers, switches and listeners."""
    graph = PathGraph()
    for group in (topology.talker, topology.switch, topology.listener):
        for node in group:
            graph.vertices.append(
                Vertex(
                    node.id,
                    edges=[Edge(conn.from_id, conn.to_id, 1) for conn in node.connections],
                )
            )
    return graph


def _search(graph: PathGraph, start: int, terminal: int) -> None:
    vertex = graph.find_vertex(start)
    if vertex is None:
        return
    vertex.visited = True
    for edge in vertex.edges:
        following = graph.find_vertex(edge.end)
        if following is not None:
            if following.visited:
                continue
            if following.cost >= vertex.cost + edge.cost:
                following.path = vertex.id
                following.cost = vertex.cost + edge.cost
                if following.id == terminal:
                    graph.add_path(terminal)
        _search(graph, edge.end, terminal)
    vertex.visited = False


def dijkstra(graph: PathGraph, start: int, terminal: int) -> PathGraph:
    """Collect the shortest paths from ``start`` to ``terminal``, shortest first."""
    for vertex in graph.vertices:
        vertex.visited = False
        vertex.cost = 0 if vertex.id == start else INFINITY
        vertex.path = -1
    _search(graph, start, terminal)
    graph.paths.sort(key=len)
    return graph
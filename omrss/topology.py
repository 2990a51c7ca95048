"""Network topology: switches, end stations and the links between them."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable

import yaml

END_STATION_BASE = 3000


class TopologyError(Exception):
    """Raised when a topology cannot be built or modified as requested."""


@dataclass
class Connection:
    """A directed link from one node to another with a per-byte cost."""

    from_id: int
    to_id: int
    cost: float


@dataclass
class Node:
    """A topology node and its outgoing connections."""

    id: int
    connections: list[Connection] = field(default_factory=list)


@dataclass
class Topology:
    """Talkers, switches, listeners and unused end-station nodes."""

    talker: list[Node] = field(default_factory=list)
    switch: list[Node] = field(default_factory=list)
    listener: list[Node] = field(default_factory=list)
    nodes: list[Node] = field(default_factory=list)

    def _switch_at(self, index: int) -> Node:
        if not 0 <= index < len(self.switch):
            raise TopologyError(f"no switch with index {index}")
        return self.switch[index]

    def _end_station(self, device_id: int) -> Node:
        node = self.node_by_id(device_id % 1000 + END_STATION_BASE)
        if node is None or not node.connections:
            raise TopologyError(f"no connected end station for device {device_id}")
        return node

    def add_switch_link(self, from_id: int, to_id: int, cost: float) -> None:
        """Link two switches in both directions."""
        first = self._switch_at(from_id)
        second = self._switch_at(to_id)
        first.connections.append(Connection(from_id, to_id, cost))
        second.connections.append(Connection(to_id, from_id, cost))

    def add_end_station_link(self, from_id: int, to_id: int, cost: float) -> None:
        """Connect an end station to a switch (one direction only)."""
        index = from_id % 1000
        if not 0 <= index < len(self.nodes):
            raise TopologyError(f"no end station with index {index}")
        self.nodes[index].connections.append(Connection(from_id, to_id, cost))

    def attach_flow(self, source: int, destinations: Iterable[int], cost: float) -> None:
        """Turn end stations into the talker and listeners of a flow, linked both ways."""
        talker = self._end_station(source)
        talker.id = source
        talker.connections[0].from_id = source
        self.talker.append(talker)
        switch_id = talker.connections[0].to_id
        self._switch_at(switch_id).connections.append(Connection(switch_id, source, cost))

        for destination in destinations:
            listener = self._end_station(destination)
            listener.id = destination
            listener.connections[0].from_id = destination
            self.listener.append(listener)
            switch_id = listener.connections[0].to_id
            self._switch_at(switch_id).connections.append(
                Connection(switch_id, destination, cost)
            )

    def add_talker(self, source: int, cost: float) -> None:
        """Mark an end station as the talker of a directed flow."""
        talker = self._end_station(source)
        talker.id = source
        talker.connections[0].from_id = source
        self.talker.append(talker)

    def add_listeners(self, destinations: Iterable[int], cost: float) -> None:
        """Mark end stations as listeners and link their switches to them."""
        for destination in destinations:
            listener = self._end_station(destination)
            listener.id = destination
            self.listener.append(listener)
            switch_id = listener.connections[0].to_id
            self._switch_at(switch_id).connections.append(
                Connection(switch_id, destination, cost)
            )

    def deep_copy(self) -> Topology:
        """Return an independent copy of the topology."""
        return copy.deepcopy(self)

    def node_by_id(self, node_id: int) -> Node | None:
        """Find a node by id, searching talkers, switches, listeners, then nodes."""
        for group in (self.talker, self.switch, self.listener, self.nodes):
            for node in group:
                if node.id == node_id:
                    return node
        return None

    def show(self) -> None:
        """Print every connection of talkers, switches and listeners."""
        for title, group in (("Talker", self.talker), ("Switch ", self.switch),
                             ("Listener", self.listener)):
            print(title)
            print("-------------------")
            for node in group:
                for conn in node.connections:
                    print(f"{conn.from_id} --> {conn.to_id} cost: {conn.cost:.6f} bytes/s")


def _edge_ends(edges: Any) -> list[tuple[int, int]]:
    result = []
    for edge in edges or []:
        ends = (edge or {}).get("ends") or []
        if len(ends) < 2:
            raise TopologyError(f"edge needs two ends: {edge!r}")
        result.append((int(ends[0]), int(ends[1])))
    return result


def topology_from_data(data: dict[str, Any] | None, cost: float) -> Topology:
    """Build a topology from a parsed topology description."""
    data = data or {}
    scale = data.get("scale") or {}
    topology = Topology()
    topology.switch = [Node(index) for index in range(int(scale.get("bridges") or 0))]
    for first, second in _edge_ends(data.get("bridge_edges")):
        topology.add_switch_link(first, second, cost)
    topology.nodes = [
        Node(index + END_STATION_BASE)
        for index in range(int(scale.get("end_stations") or 0))
    ]
    for first, second in _edge_ends(data.get("end_station_edges")):
        topology.add_end_station_link(first, second, cost)
    return topology


def load_topology(topology_name: str, cost: float, directory: str | Path = "yaml") -> Topology:
    """Read ``<directory>/<topology_name>.yaml`` and build its topology."""
    path = Path(directory) / f"{topology_name}.yaml"
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise TopologyError(f"error: {exc}") from exc
    if data is not None and not isinstance(data, dict):
        raise TopologyError(f"error: {path} does not hold a mapping")
    return topology_from_data(data, cost)
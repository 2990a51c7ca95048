"""Per-flow copies of the topology with the flow's endpoints attached."""

from __future__ import annotations

from dataclasses import dataclass, field

from omrss.flow import TSNFlows
from omrss.topology import Topology


@dataclass
class Graphs:
    """One topology per TSN flow and one per AVB flow."""

    tsn_graphs: list[Topology] = field(default_factory=list)
    avb_graphs: list[Topology] = field(default_factory=list)

    def show(self) -> None:
        """Print the first TSN graph and the first AVB graph."""
        for group in (self.tsn_graphs, self.avb_graphs):
            if group:
                group[0].show()


def _flow_graph(topology: Topology, source: int, destinations: list[int], bytes_rate: float) -> Topology:
    graph = topology.deep_copy()
    graph.attach_flow(source, destinations, bytes_rate)
    return graph


def generate_graphs(topology: Topology, flows: TSNFlows, bytes_rate: float) -> Graphs:
    """Build an undirected graph per flow from copies of the topology."""
    return Graphs(
        tsn_graphs=[
            _flow_graph(topology, flow.source, flow.destinations, bytes_rate)
            for flow in flows.tsn_flows
        ],
        avb_graphs=[
            _flow_graph(topology, flow.source, flow.destinations, bytes_rate)
            for flow in flows.avb_flows
        ],
    )
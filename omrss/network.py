"""Network parameters together with its topology, flows and graphs."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from omrss.flow import CANFlows, TSNFlows
from omrss.flowgen import (
    generate_tsn_flows,
    show_first_flows,
    show_first_streams,
    show_totals,
)
from omrss.graph import Graphs, generate_graphs
from omrss.topology import Topology, load_topology

_RULE = "----------------------------------------"


@dataclass
class Network:
    """All inputs of one experiment: parameters, topology, flows and graphs."""

    hyperperiod: int
    bytes_rate: float
    bandwidth: float
    topology_name: str
    bg_tsn: int
    bg_avb: int
    input_tsn: int
    input_avb: int
    important_can: int = 0
    unimportant_can: int = 0
    topology: Topology = field(default_factory=Topology)
    tsn_flows: TSNFlows = field(default_factory=TSNFlows)
    can_flows: CANFlows = field(default_factory=CANFlows)
    graphs: Graphs = field(default_factory=Graphs)

    def generate(self, yaml_dir: str | Path = "yaml") -> None:
        """Load the topology, generate flows and build per-flow graphs."""
        print("Generate Topology")
        print(_RULE)
        self.topology = load_topology(self.topology_name, self.bytes_rate, yaml_dir)
        print("Complete Generating Topology.")
        print()

        print("Generate Flows")
        print(_RULE)
        self.tsn_flows = generate_tsn_flows(
            len(self.topology.nodes),
            self.bg_tsn,
            self.bg_avb,
            self.input_tsn,
            self.input_avb,
            self.hyperperiod,
        )
        print("Complete Generating Flows.")
        print()

        print("Simulating Graphs")
        print(_RULE)
        self.graphs = generate_graphs(self.topology, self.tsn_flows, self.bytes_rate)
        print("Complete Simulating Graphs.")
        print()

    def show(self) -> None:
        """Print the topology, flows and first graphs."""
        self.topology.show()
        for flows in (self.tsn_flows, self.can_flows):
            show_totals(flows)
            show_first_flows(flows)
            show_first_streams(flows)
        self.graphs.show()


def new_network(
    topology_name: str,
    bg_tsn: int,
    bg_avb: int,
    input_tsn: int,
    input_avb: int,
    important_can: int,
    unimportant_can: int,
    hyperperiod: int,
    bandwidth: float,
) -> Network:
    """Derive per-microsecond rates from the link bandwidth (bits/s) and print them."""
    bytes_per_us = (bandwidth / 8) * 1e-6
    bytes_rate = 1.0 / bytes_per_us
    network = Network(
        hyperperiod=hyperperiod,
        bytes_rate=bytes_rate,
        bandwidth=bytes_per_us * hyperperiod,
        topology_name=topology_name,
        bg_tsn=bg_tsn,
        bg_avb=bg_avb,
        input_tsn=input_tsn,
        input_avb=input_avb,
        important_can=important_can,
        unimportant_can=unimportant_can,
    )

    print("Define network parameters")
    print(_RULE)
    print(f"HyperPeriod: {network.hyperperiod} us ")
    print(f"Bandwidth:  {network.bandwidth:.6f} bytes/6000us ")
    print(f"BytesRate:  {network.bytes_rate:.6f} BPS ")
    print(f"Topology file name: {network.topology_name} ")
    print(
        f"TSN flow: {network.input_tsn + network.bg_tsn}, "
        f"AVB flow: {network.input_avb + network.bg_avb} "
    )
    print(
        f"ImportantCAN flow: {network.important_can}, "
        f"UnimportantCAN flow: {network.unimportant_can} "
    )
    print()
    return network


def generate_network(
    topology_name: str,
    bg_tsn: int,
    bg_avb: int,
    input_tsn: int,
    input_avb: int,
    important_can: int,
    unimportant_can: int,
    hyperperiod: int,
    bandwidth: float,
    yaml_dir: str | Path = "yaml",
) -> Network:
    """Create a network and generate its topology, flows and graphs."""
    network = new_network(
        topology_name,
        bg_tsn,
        bg_avb,
        input_tsn,
        input_avb,
        important_can,
        unimportant_can,
        hyperperiod,
        bandwidth,
    )
    network.generate(yaml_dir)
    return network
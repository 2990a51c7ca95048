"""Random generation of TSN, AVB and CAN flows and their streams."""

from __future__ import annotations

from typing import Callable, Union

from omrss.flow import (
    CANFlows,
    Flow,
    FlowSpec,
    Stream,
    TSNFlows,
    avb_spec,
    important_can_spec,
    random_devices,
    tsn_spec,
    unimportant_can_spec,
)

AnyFlows = Union[TSNFlows, CANFlows]


def generate_stream(period: int, deadline: int, datasize: float, hyperperiod: int) -> Flow:
    """Build a flow whose streams repeat every ``period`` until the hyperperiod is covered."""
    flow = Flow(period, deadline, datasize, hyperperiod)
    arrival = 0
    finish = 0
    number = 0
    while finish < hyperperiod:
        finish += period
        flow.streams.append(Stream(f"stream{number}", arrival, datasize, deadline, finish))
        arrival += period
        number += 1
    return flow


def _random_flows(
    spec_factory: Callable[[], FlowSpec], node_count: int, count: int, hyperperiod: int
) -> list[Flow]:
    flows = []
    for _ in range(count):
        spec = spec_factory()
        source, destinations = random_devices(node_count)
        flow = generate_stream(spec.period, spec.deadline, spec.datasize, hyperperiod)
        flow.source = source
        flow.destinations = destinations
        flows.append(flow)
    return flows


def add_tsn_flows(flows: TSNFlows, node_count: int, count: int, hyperperiod: int) -> None:
    """Append ``count`` random TSN flows."""
    flows.tsn_flows.extend(_random_flows(tsn_spec, node_count, count, hyperperiod))


def add_avb_flows(flows: TSNFlows, node_count: int, count: int, hyperperiod: int) -> None:
    """Append ``count`` random AVB flows."""
    flows.avb_flows.extend(_random_flows(avb_spec, node_count, count, hyperperiod))


def add_important_can_flows(flows: CANFlows, node_count: int, count: int, hyperperiod: int) -> None:
    """Append ``count`` important CAN flows with random endpoints."""
    flows.important.extend(_random_flows(important_can_spec, node_count, count, hyperperiod))


def add_unimportant_can_flows(
    flows: CANFlows, node_count: int, count: int, hyperperiod: int
) -> None:
    """Append ``count`` random unimportant CAN flows."""
    flows.unimportant.extend(_random_flows(unimportant_can_spec, node_count, count, hyperperiod))


def generate_tsn_flows(
    node_count: int, bg_tsn: int, bg_avb: int, input_tsn: int, input_avb: int, hyperperiod: int
) -> TSNFlows:
    """Generate background flows first, then input flows."""
    flows = TSNFlows(bg_tsn=bg_tsn, bg_avb=bg_avb)
    add_tsn_flows(flows, node_count, bg_tsn, hyperperiod)
    add_avb_flows(flows, node_count, bg_avb, hyperperiod)
    print("Complete generating round1 streams.")
    add_tsn_flows(flows, node_count, input_tsn, hyperperiod)
    add_avb_flows(flows, node_count, input_avb, hyperperiod)
    print("Complete generating round2 streams.")
    return flows


def generate_can_flows(
    node_count: int, important_can: int, unimportant_can: int, hyperperiod: int
) -> CANFlows:
    """Generate important and unimportant CAN flows."""
    flows = CANFlows()
    add_important_can_flows(flows, node_count, important_can, hyperperiod)
    add_unimportant_can_flows(flows, node_count, unimportant_can, hyperperiod)
    print("Complete generating round2 streams.")
    return flows


def _format_ids(ids: list[int]) -> str:
    return "[" + " ".join(str(value) for value in ids) + "]"


def show_totals(flows: AnyFlows) -> None:
    """Print flow counts."""
    (first_label, first), (second_label, second) = flows.groups()
    if isinstance(flows, CANFlows):
        print(
            f"Total CAN Flows:{len(first) + len(second)} "
            f"( importantCANFlows:{len(first)}  unimportantCANFlows:{len(second)} )"
        )
    else:
        print(
            f"Total Flows:{len(first) + len(second)} "
            f"( TSN Flows:{len(first)}  AVB Flows:{len(second)} )"
        )


def show_first_flows(flows: AnyFlows) -> None:
    """Print the parameters of the first flow of each kind."""
    for label, group in flows.groups():
        if not group:
            continue
        flow = group[0]
        print(f"Source: {flow.source}")
        print(f"Destinations: {_format_ids(flow.destinations)}")
        print(
            f"{label}1 : period:{flow.period} us, deadline:{flow.deadline} us, "
            f"datasize:{flow.datasize:.6f} bytes"
        )


def show_first_streams(flows: AnyFlows) -> None:
    """Print the streams of the first flow of each kind."""
    for label, group in flows.groups():
        if not group:
            continue
        print(f"{label}1")
        for stream in group[0].streams:
            print(
                f"{stream.name} ArrivalTime:{stream.arrival_time} "
                f"DataSize:{stream.datasize:.6f} Deadline:{stream.deadline} "
                f"FinishTime:{stream.finish_time}"
            )
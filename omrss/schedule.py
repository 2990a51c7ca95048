"""Schedulability objectives and worst-case delay of routed flows.

Durations are integer counts of nanoseconds.
"""

from __future__ import annotations

from typing import Iterable, Sequence, TypeVar

from omrss.flow import Flow, TSNFlows
from omrss.network import Network
from omrss.tree import Connection, KTreesSet, Node, Tree, TreesSet

MICROSECOND = 1000
MAX_AVB_SETTING = 0.75
AVB_FAILURE_PENALTY = 1_000_000
TSN_FAILURE_PENALTY = 100_000_000

_T = TypeVar("_T")


def _paired(routes: Sequence[_T], flows: Sequence[Flow]) -> Iterable[tuple[_T, Flow]]:
    if len(routes) > len(flows):
        raise ValueError(f"{len(routes)} routes but only {len(flows)} flows")
    return zip(routes, flows)


def _to_microseconds(nanoseconds: int) -> int:
    whole = abs(nanoseconds) // MICROSECOND
    return whole if nanoseconds >= 0 else -whole


def _require(tree: Tree, node_id: int) -> Node:
    node = tree.node_by_id(node_id)
    if node is None:
        raise ValueError(f"route has no node {node_id}")
    return node


def objectives(
    network: Network, ktrees: KTreesSet, inputs: TreesSet, background: TreesSet
) -> tuple[list[float], int]:
    """Failed TSN, failed AVB, rerouted (always 0) and AVB delay sum in us, with a cost."""
    flows = network.tsn_flows
    input_flows = flows.input_set()
    background_flows = flows.background_set()
    linkmap: dict[str, float] = {}
    tsn_failed = 0
    avb_failed = 0
    delay_sum = 0

    for routes, flow_set in ((background, background_flows), (inputs, input_flows)):
        for route, flow in _paired(routes.tsn_trees, flow_set.tsn_flows):
            tsn_failed += 1 - schedulability(
                0, flow, route, linkmap, network.bandwidth, network.hyperperiod
            )
        for route, flow in _paired(routes.avb_trees, flow_set.avb_flows):
            delay = wcd(route, ktrees, flow, flows)
            delay_sum += delay
            avb_failed += 1 - schedulability(
                delay, flow, route, linkmap, network.bandwidth, network.hyperperiod
            )

    delay_us = _to_microseconds(delay_sum)
    result = [float(tsn_failed), float(avb_failed), 0.0, float(delay_us)]
    cost = delay_us + avb_failed * AVB_FAILURE_PENALTY + tsn_failed * TSN_FAILURE_PENALTY
    return result, cost


def schedulability(
    wcd: int,
    flow: Flow,
    route: Tree,
    linkmap: dict[str, float],
    bandwidth: float,
    hyperperiod: int,
) -> int:
    """1 if the flow meets its deadline and every link stays within bandwidth, else 0.

    Link loads are added to ``linkmap`` as a side effect.
    """
    within_deadline = wcd <= flow.deadline * MICROSECOND
    fits = _schedulable(
        _require(route, flow.source), -1, flow, route, linkmap, bandwidth, hyperperiod
    )
    return 1 if within_deadline and fits else 0


def _schedulable(
    node: Node,
    parent_id: int,
    flow: Flow,
    route: Tree,
    linkmap: dict[str, float],
    bandwidth: float,
    hyperperiod: int,
) -> bool:
    load = flow.datasize * float(hyperperiod // flow.period)
    for link in node.connections:
        if link.to_id == parent_id:
            continue
        if not (link.from_id == flow.source or link.to_id in flow.destinations):
            key = f"{link.from_id}>{link.to_id}"
            linkmap[key] = linkmap.get(key, 0.0) + load
            if linkmap[key] > bandwidth:
                return False
        child = _require(route, link.to_id)
        if not _schedulable(child, node.id, flow, route, linkmap, bandwidth, hyperperiod):
            return False
    return True


def wcd(tree: Tree, ktrees: KTreesSet, flow: Flow, flow_set: TSNFlows) -> int:
    """The largest end-to-end delay over all paths of the flow's tree."""
    return _end_to_end(_require(tree, flow.source), -1, 0, tree, ktrees, flow, flow_set)


def _end_to_end(
    node: Node,
    parent_id: int,
    elapsed: int,
    tree: Tree,
    ktrees: KTreesSet,
    flow: Flow,
    flow_set: TSNFlows,
) -> int:
    longest = elapsed
    for link in node.connections:
        if link.to_id == parent_id:
            continue
        per_hop = (
            transmit_time(flow.datasize, link.cost)
            + _avb_interference(link, ktrees, flow.datasize)
            + _tsn_interference(link, ktrees, flow_set)
        )
        child = _require(tree, link.to_id)
        longest = max(
            longest,
            _end_to_end(child, node.id, elapsed + per_hop, tree, ktrees, flow, flow_set),
        )
    return longest


def transmit_time(datasize: float, bytes_rate: float) -> int:
    """Transmission time of ``datasize`` bytes at the AVB share of the link."""
    return int(datasize * bytes_rate * MAX_AVB_SETTING)


def _link_uses(tree: Tree, link: Connection) -> int:
    node = tree.node_by_id(link.from_id)
    if node is None:
        return 0
    return sum(1 for conn in node.connections if conn.to_id == link.to_id)


def _avb_interference(link: Connection, ktrees: KTreesSet, datasize: float) -> int:
    uses = sum(
        _link_uses(tree, link) for candidates in ktrees.avb_trees for tree in candidates.trees
    )
    occupied = datasize * uses - datasize
    return transmit_time(occupied, link.cost)


def _tsn_interference(link: Connection, ktrees: KTreesSet, flow_set: TSNFlows) -> int:
    occupied = 0.0
    for candidates, flow in _paired(ktrees.tsn_trees, flow_set.tsn_flows):
        share = flow.datasize * (float(flow.hyperperiod) / float(flow.period))
        for tree in candidates.trees:
            occupied += share * _link_uses(tree, link)
    return transmit_time(occupied, link.cost)
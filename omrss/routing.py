"""Route every flow of a network with the Steiner, distance-tree and K-tree methods."""

from __future__ import annotations

from omrss.dijkstra import V2V
from omrss.distance_tree import distance_tree
from omrss.kspanning import k_spanning_tree
from omrss.network import Network
from omrss.steiner import steiner_tree
from omrss.tree import KTreesSet, TreesSet

DEFAULT_V2V = V2V()


def _cache(v2v: V2V | None) -> V2V:
    return DEFAULT_V2V if v2v is None else v2v


def steiner_routing(network: Network, v2v: V2V | None = None) -> TreesSet:
    """A Steiner tree for every TSN and AVB flow, sharing the path cache ``v2v``."""
    cache = _cache(v2v)
    flows = network.tsn_flows
    trees = TreesSet()
    for graph, flow in zip(network.graphs.tsn_graphs, flows.tsn_flows):
        trees.tsn_trees.append(
            steiner_tree(cache, graph, flow.source, flow.destinations, network.bytes_rate)
        )
    print(f"Finish Steiner Tree {len(trees.tsn_trees)} TSN streams routing")

    for graph, flow in zip(network.graphs.avb_graphs, flows.avb_flows):
        trees.avb_trees.append(
            steiner_tree(cache, graph, flow.source, flow.destinations, network.bytes_rate)
        )
    print(f"Finish Steiner Tree {len(trees.avb_trees)} AVB streams routing")
    return trees


def distance_routing(network: Network) -> TreesSet:
    """A minimal distance tree for every TSN and AVB flow."""
    flows = network.tsn_flows
    trees = TreesSet()
    for graph, flow in zip(network.graphs.tsn_graphs, flows.tsn_flows):
        trees.tsn_trees.append(
            distance_tree(graph, flow.source, flow.destinations, network.bytes_rate)
        )
    print(f"Finish Distance Tree {len(trees.tsn_trees)} TSN streams routing")

    for graph, flow in zip(network.graphs.avb_graphs, flows.avb_flows):
        trees.avb_trees.append(
            distance_tree(graph, flow.source, flow.destinations, network.bytes_rate)
        )
    print(f"Finish Distance Tree {len(trees.avb_trees)} AVB streams routing")
    return trees


def osaco_routing(
    network: Network,
    steiner_trees: TreesSet,
    k: int,
    method: int,
    v2v: V2V | None = None,
) -> KTreesSet:
    """Up to ``k`` candidate trees per flow, starting from its Steiner tree."""
    cache = _cache(v2v)
    flows = network.tsn_flows
    ktrees = KTreesSet()
    for nth, flow in enumerate(flows.tsn_flows):
        ktrees.tsn_trees.append(
            k_spanning_tree(
                cache, steiner_trees.tsn_trees[nth], k, flow.source, flow.destinations,
                network.bytes_rate, method,
            )
        )
    print(f"Finish OSACO {len(ktrees.tsn_trees)} TSN streams routing")

    for nth, flow in enumerate(flows.avb_flows):
        ktrees.avb_trees.append(
            k_spanning_tree(
                cache, steiner_trees.avb_trees[nth], k, flow.source, flow.destinations,
                network.bytes_rate, method,
            )
        )
    print(f"Finish OSACO {len(ktrees.avb_trees)} AVB streams routing")
    return ktrees
import copy
import math

import pytest

from omrss.algo import (
    MDTC,
    OSACO,
    SMT,
    Pheromone,
    choose_routes,
    compute_pheromone,
    compute_visibility,
    epoch,
)
from omrss.dijkstra import V2V
from omrss.flow import TSNFlows
from omrss.flowgen import generate_stream
from omrss.graph import generate_graphs
from omrss.network import Network
from omrss.schedule import objectives
from omrss.timer import MAX_TOTAL
from omrss.topology import topology_from_data
from omrss.tree import KTrees, KTreesSet, Tree

RING = {
    "scale": {"bridges": 4, "end_stations": 5},
    "bridge_edges": [{"ends": [0, 1]}, {"ends": [1, 2]}, {"ends": [2, 3]}, {"ends": [3, 0]}],
    "end_station_edges": [
        {"ends": [3000, 0]},
        {"ends": [3001, 1]},
        {"ends": [3002, 2]},
        {"ends": [3003, 3]},
        {"ends": [3004, 0]},
    ],
}


def _flow(period, deadline, size, source, destinations):
    flow = generate_stream(period, deadline, size, 6000)
    flow.source = source
    flow.destinations = destinations
    return flow


@pytest.fixture
def network():
    net = Network(
        hyperperiod=6000, bytes_rate=8.0, bandwidth=750.0, topology_name="ring",
        bg_tsn=1, bg_avb=1, input_tsn=1, input_avb=1,
    )
    net.topology = topology_from_data(RING, net.bytes_rate)
    net.tsn_flows = TSNFlows(
        tsn_flows=[_flow(1000, 1000, 50.0, 1000, [2002]), _flow(1000, 1000, 50.0, 1001, [2003])],
        avb_flows=[_flow(125, 2000, 1000.0, 1002, [2000]), _flow(125, 2000, 1000.0, 1003, [2001])],
        bg_tsn=1,
        bg_avb=1,
    )
    net.graphs = generate_graphs(net.topology, net.tsn_flows, net.bytes_rate)
    return net


@pytest.fixture
def prepared(network):
    cache = V2V()
    smt = SMT(v2v=cache)
    smt.run(network)
    osaco = OSACO(timeout=0, k=3, p=0.5, method=0, v2v=cache)
    osaco.initial_settings(network, smt.trees)
    return smt, osaco


def test_compute_pheromone_marks_background_and_input():
    ktrees = KTreesSet(
        tsn_trees=[KTrees([Tree(), Tree()]), KTrees([Tree()])],
        avb_trees=[KTrees([Tree()])],
    )
    prm = compute_pheromone(ktrees, 1, 0)
    assert prm.tsn == [[0.5, 0.5], [1.0]]
    assert prm.avb == [[1.0]]


def test_compute_visibility_prefers_first_background_candidate():
    ktrees = KTreesSet(tsn_trees=[KTrees([Tree(), Tree()]), KTrees([Tree()])])
    vb = compute_visibility(ktrees, TSNFlows(), 1, 0)
    assert vb.tsn == [[2.0, 1.0], [1.0]]
    assert vb.avb == []


def test_compute_visibility_tsn_depends_on_first_tree_weight():
    light = KTreesSet(tsn_trees=[KTrees([Tree(weight=1), Tree(weight=9)])])
    heavy = KTreesSet(tsn_trees=[KTrees([Tree(weight=3), Tree(weight=1)])])
    light_vb = compute_visibility(light, TSNFlows(), 0, 0)
    heavy_vb = compute_visibility(heavy, TSNFlows(), 0, 0)
    assert light_vb.tsn[0][0] == light_vb.tsn[0][1]
    assert heavy_vb.tsn[0][0] < light_vb.tsn[0][0]


def test_smt_run_routes_every_flow(network):
    smt = SMT(v2v=V2V())
    smt.run(network)
    assert len(smt.trees.tsn_trees) == 2
    assert len(smt.trees.avb_trees) == 2
    assert all(tree.find_cycle() == [] for tree in smt.trees.tsn_trees)


def test_mdtc_run_routes_every_flow_and_times_it(network):
    mdtc = MDTC()
    mdtc.run(network)
    assert len(mdtc.trees.tsn_trees) == 2
    assert len(mdtc.trees.avb_trees) == 2
    assert 0 <= mdtc.timer.total
    assert mdtc.timer.mission is True


def test_initial_settings_splits_steiner_routes(prepared):
    smt, osaco = prepared
    assert osaco.input_trees.tsn_trees[0] is smt.trees.tsn_trees[1]
    assert osaco.input_trees.avb_trees[0] is smt.trees.avb_trees[1]
    assert osaco.background_trees.tsn_trees[0] is smt.trees.tsn_trees[0]
    assert osaco.background_trees.avb_trees[0] is smt.trees.avb_trees[0]


def test_initial_settings_builds_levels_for_every_candidate(prepared):
    _, osaco = prepared
    for groups, levels, background in (
        (osaco.ktrees.tsn_trees, osaco.prm.tsn, osaco.bg_tsn),
        (osaco.ktrees.avb_trees, osaco.prm.avb, osaco.bg_avb),
    ):
        assert [len(g.trees) for g in groups] == [len(row) for row in levels]
        for nth, row in enumerate(levels):
            expected = 0.5 if nth < background else 1.0
            assert all(level == expected for level in row)


def test_initial_settings_visibility_is_positive(prepared):
    _, osaco = prepared
    for row in osaco.vb.avb + osaco.vb.tsn:
        assert all(value > 0 and math.isfinite(value) for value in row)


def test_initial_settings_timers_share_routing_time(prepared):
    _, osaco = prepared
    totals = {timer.total for timer in osaco.timers}
    assert len(osaco.timers) == 5
    assert len(totals) == 1
    assert all(0 <= total <= MAX_TOTAL for total in totals)


def test_choose_routes_picks_listed_candidates(prepared):
    _, osaco = prepared
    inputs, background, input_locs, bg_locs = choose_routes(osaco)
    assert len(inputs.tsn_trees) == 1 and len(inputs.avb_trees) == 1
    assert len(background.tsn_trees) == 1 and len(background.avb_trees) == 1
    assert inputs.tsn_trees[0] is osaco.ktrees.tsn_trees[1].trees[input_locs[0][0]]
    assert inputs.avb_trees[0] is osaco.ktrees.avb_trees[1].trees[input_locs[1][0]]
    assert background.tsn_trees[0] is osaco.ktrees.tsn_trees[0].trees[bg_locs[0][0]]
    assert background.avb_trees[0] is osaco.ktrees.avb_trees[0].trees[bg_locs[1][0]]


def test_choose_routes_rejects_zero_pheromone(prepared):
    _, osaco = prepared
    osaco.prm = Pheromone(
        tsn=[[0.0] * len(row) for row in osaco.prm.tsn],
        avb=[[0.0] * len(row) for row in osaco.prm.avb],
    )
    with pytest.raises(ValueError):
        choose_routes(osaco)


def test_epoch_evaporates_only_input_pheromone(network, prepared):
    _, osaco = prepared
    before = copy.deepcopy(osaco.prm)
    chosen = epoch(network, osaco, 0)
    assert len(chosen.tsn_trees) == 1 and len(chosen.avb_trees) == 1
    assert osaco.prm.tsn[0] == before.tsn[0]
    assert osaco.prm.avb[0] == before.avb[0]
    assert osaco.prm.tsn[1] == pytest.approx([level * osaco.p for level in before.tsn[1]])
    assert osaco.prm.avb[1] == pytest.approx([level * osaco.p for level in before.avb[1]])


def test_run_never_worsens_the_routes(network, prepared):
    _, osaco = prepared
    _, initial_cost = objectives(
        network, osaco.ktrees, osaco.input_trees, osaco.background_trees
    )
    result = osaco.run(network, 0)
    final, final_cost = objectives(
        network, osaco.ktrees, osaco.input_trees, osaco.background_trees
    )
    assert final_cost <= initial_cost
    assert result == final
    assert result[2] == 0.0
    assert osaco.timers[0].total <= MAX_TOTAL


def test_run_rejects_unknown_timeout_index(network, prepared):
    _, osaco = prepared
    with pytest.raises(IndexError):
        osaco.run(network, 5)
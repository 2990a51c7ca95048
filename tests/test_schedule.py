import pytest

from omrss.flow import Flow, TSNFlows
from omrss.network import Network
from omrss.schedule import (
    AVB_FAILURE_PENALTY,
    TSN_FAILURE_PENALTY,
    objectives,
    schedulability,
    transmit_time,
    wcd,
)
from omrss.tree import KTrees, KTreesSet, Tree, TreesSet

COST = 0.008


def _route(*paths):
    tree = Tree()
    for path in paths:
        tree.into_tree(list(path), COST)
    return tree


def _tsn_flow():
    return Flow(100, 100, 50.0, 6000, source=1000, destinations=[2001])


def _avb_flow():
    return Flow(125, 2000, 1000.0, 6000, source=1000, destinations=[2001])


def _network(bandwidth, bg_tsn=0, bg_avb=0):
    return Network(
        hyperperiod=6000,
        bytes_rate=COST,
        bandwidth=bandwidth,
        topology_name="triangle",
        bg_tsn=bg_tsn,
        bg_avb=bg_avb,
        input_tsn=1 - bg_tsn,
        input_avb=1 - bg_avb,
        tsn_flows=TSNFlows([_tsn_flow()], [_avb_flow()], bg_tsn, bg_avb),
    )


def _ktrees(route):
    return KTreesSet(tsn_trees=[KTrees([route])], avb_trees=[KTrees([route])])


def test_transmit_time_values():
    assert transmit_time(4.0, 1.0) == 3
    assert transmit_time(1.0, 1.0) == 0
    assert transmit_time(0.0, COST) == 0


def test_transmit_time_truncates_toward_zero():
    assert transmit_time(-4.0, 1.0) == -transmit_time(4.0, 1.0)


def test_schedulability_counts_inner_links():
    route = _route([1000, 0, 1, 2001])
    linkmap = {}
    assert schedulability(0, _tsn_flow(), route, linkmap, 1e9, 6000) == 1
    assert linkmap == {"0>1": 3000.0}
    schedulability(0, _tsn_flow(), route, linkmap, 1e9, 6000)
    assert linkmap["0>1"] == 2 * 3000.0


def test_schedulability_fails_over_bandwidth():
    route = _route([1000, 0, 1, 2001])
    assert schedulability(0, _tsn_flow(), route, {}, 1000.0, 6000) == 0


def test_schedulability_fails_past_deadline_but_records_load():
    route = _route([1000, 0, 1, 2001])
    flow = _tsn_flow()
    linkmap = {}
    assert schedulability(flow.deadline * 1000 + 1, flow, route, linkmap, 1e9, 6000) == 0
    assert "0>1" in linkmap


def test_schedulability_requires_source_in_route():
    route = _route([1005, 0, 1, 2001])
    with pytest.raises(ValueError):
        schedulability(0, _tsn_flow(), route, {}, 1e9, 6000)


def test_wcd_without_candidates_cancels_out():
    route = _route([1000, 0, 1, 2001])
    assert wcd(route, KTreesSet(), _avb_flow(), TSNFlows()) == 0


def test_wcd_counts_each_hop():
    route = _route([1000, 0, 1, 2001])
    ktrees = KTreesSet(avb_trees=[KTrees([route])])
    assert wcd(route, ktrees, _avb_flow(), TSNFlows()) == 3 * transmit_time(1000.0, COST)


def test_wcd_takes_longest_branch():
    route = _route([1000, 0, 1, 2001], [0, 2002])
    flow = Flow(125, 2000, 1000.0, 6000, source=1000, destinations=[2001, 2002])
    ktrees = KTreesSet(avb_trees=[KTrees([route])])
    assert wcd(route, ktrees, flow, TSNFlows()) == 3 * transmit_time(1000.0, COST)


def test_wcd_grows_with_tsn_interference():
    route = _route([1000, 0, 1, 2001])
    plain = wcd(route, KTreesSet(avb_trees=[KTrees([route])]), _avb_flow(), TSNFlows())
    loaded = wcd(route, _ktrees(route), _avb_flow(), TSNFlows([_tsn_flow()], []))
    assert loaded > plain


def test_objectives_all_schedulable():
    route = _route([1000, 0, 1, 2001])
    inputs = TreesSet([route], [route])
    result, cost = objectives(_network(750000.0), _ktrees(route), inputs, TreesSet())
    assert result[:3] == [0.0, 0.0, 0.0]
    assert cost == int(result[3])


def test_objectives_penalise_failures():
    route = _route([1000, 0, 1, 2001])
    inputs = TreesSet([route], [route])
    result, cost = objectives(_network(1.0), _ktrees(route), inputs, TreesSet())
    assert result[0] == 1.0
    assert result[1] == 1.0
    assert cost == int(result[3]) + AVB_FAILURE_PENALTY + TSN_FAILURE_PENALTY


def test_objectives_same_for_background_flows():
    route = _route([1000, 0, 1, 2001])
    as_input = objectives(
        _network(1.0), _ktrees(route), TreesSet([route], [route]), TreesSet()
    )
    as_background = objectives(
        _network(1.0, bg_tsn=1, bg_avb=1),
        _ktrees(route),
        TreesSet(),
        TreesSet([route], [route]),
    )
    assert as_input == as_background


def test_objectives_reject_more_routes_than_flows():
    route = _route([1000, 0, 1, 2001])
    inputs = TreesSet([route, route], [])
    with pytest.raises(ValueError):
        objectives(_network(750000.0), _ktrees(route), inputs, TreesSet())
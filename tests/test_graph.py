import pytest

from omrss.flowgen import generate_stream, generate_tsn_flows
from omrss.flow import TSNFlows
from omrss.graph import Graphs, generate_graphs
from omrss.topology import TopologyError, topology_from_data

COST = 0.008


def _topology(stations=6):
    data = {
        "scale": {"bridges": 2, "end_stations": stations},
        "bridge_edges": [{"ends": [0, 1]}],
        "end_station_edges": [{"ends": [i, i % 2]} for i in range(stations)],
    }
    return topology_from_data(data, COST)


def test_generate_graphs_attaches_endpoints():
    topology = _topology()
    flows = generate_tsn_flows(6, 1, 1, 2, 1, 6000)
    graphs = generate_graphs(topology, flows, COST)
    assert len(graphs.tsn_graphs) == len(flows.tsn_flows)
    assert len(graphs.avb_graphs) == len(flows.avb_flows)
    pairs = list(zip(graphs.tsn_graphs, flows.tsn_flows)) + list(
        zip(graphs.avb_graphs, flows.avb_flows)
    )
    for graph, flow in pairs:
        assert [node.id for node in graph.talker] == [flow.source]
        assert [node.id for node in graph.listener] == flow.destinations
        switch_targets = {
            conn.to_id for node in graph.switch for conn in node.connections
        }
        assert flow.source in switch_targets
        assert set(flow.destinations) <= switch_targets


def test_original_topology_untouched():
    topology = _topology()
    flows = generate_tsn_flows(6, 0, 0, 2, 0, 6000)
    generate_graphs(topology, flows, COST)
    assert topology.talker == []
    assert topology.listener == []
    assert all(node.id >= 3000 for node in topology.nodes)


def test_generate_graphs_unknown_station_raises():
    flow = generate_stream(100, 100, 30.0, 100)
    flow.source = 1009
    flow.destinations = [2001]
    with pytest.raises(TopologyError):
        generate_graphs(_topology(), TSNFlows(tsn_flows=[flow]), COST)


def test_show_prints_first_graphs(capsys):
    flow = generate_stream(100, 100, 30.0, 100)
    flow.source = 1000
    flow.destinations = [2001]
    graphs = generate_graphs(_topology(), TSNFlows(tsn_flows=[flow, flow]), COST)
    graphs.show()
    out = capsys.readouterr().out
    assert out.count("Talker\n") == 1
    assert "1000 --> 0 cost: 0.008000 bytes/s" in out


def test_empty_graphs_show_nothing(capsys):
    Graphs().show()
    assert capsys.readouterr().out == ""
import csv

import pytest

from omrss import routing
from omrss.cli import build_parser, main
from omrss.dijkstra import V2V

TINY_TOPOLOGY = """\
scale:
  end_stations: 5
  bridges: 2
bridge_edges:
  - ends: [0, 1]
end_station_edges:
  - ends: [0, 0]
  - ends: [1, 0]
  - ends: [2, 1]
  - ends: [3, 1]
  - ends: [4, 1]
"""


def test_parser_defaults():
    args = build_parser().parse_args([])
    assert args.test_case == 100
    assert args.topology_name == "typical_complex"
    assert args.bg_tsn == 35
    assert args.bg_avb == 15
    assert args.hyperperiod == 6000
    assert args.bandwidth == 1e9
    assert args.plan_name == "omaco"
    assert args.osaco_timeout == 200
    assert args.osaco_K == 5
    assert args.osaco_P == 0.6
    assert (args.show_network, args.show_plan, args.store_data) == (False, False, False)


def test_can_options_set_input_counts():
    defaults = build_parser().parse_args([])
    assert (defaults.input_tsn, defaults.input_avb) == (4, 16)
    args = build_parser().parse_args(["-importantCAN", "9", "-unimportantCAN=2"])
    assert (args.input_tsn, args.input_avb) == (9, 2)


def test_single_and_double_dash_forms():
    args = build_parser().parse_args(["-input_tsn=7", "--bg_avb", "3", "-store_data"])
    assert args.input_tsn == 7
    assert args.bg_avb == 3
    assert args.store_data is True


def test_unknown_plan_is_rejected():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["-plan_name", "other"])


def test_zero_test_cases_cannot_be_averaged(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    with pytest.raises(ZeroDivisionError):
        main(["-test_case", "0"])


def test_full_run_stores_results(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(routing, "DEFAULT_V2V", V2V())
    (tmp_path / "yaml").mkdir()
    (tmp_path / "yaml" / "tiny.yaml").write_text(TINY_TOPOLOGY)

    code = main([
        "-test_case", "1",
        "-topology_name", "tiny",
        "-importantCAN", "1",
        "-unimportantCAN", "1",
        "-bg_tsn", "0",
        "-bg_avb", "0",
        "-bandwidth", "1e6",
        "-osaco_timeout", "1",
        "-osaco_K", "2",
        "-store_data",
    ])
    assert code == 0

    for rate in ("0.8", "0.7", "0.6", "0.5"):
        path = tmp_path / "result" / f"tiny_testcase1_tsn1_avb1_K2_P{rate}.txt"
        text = path.read_text()
        assert text.startswith("--- The experimental results are as follows --- \n")
        assert text.count("O3: pass") == 12

    with open(tmp_path / "data" / "SMT.csv", newline="") as handle:
        rows = list(csv.reader(handle))
    assert len(rows) == 1
    assert len(rows[0]) == 4
    assert all(len(value.split(".")[1]) == 6 for value in rows[0])

    with open(tmp_path / "data" / "OSACO200ms.csv", newline="") as handle:
        assert len(list(csv.reader(handle))) == 2
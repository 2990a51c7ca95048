# omrss

`omrss` simulates online multicast routing for Time-Sensitive Networking
(TSN) and Audio Video Bridging (AVB) traffic. For every test case it builds a
network from a topology description, generates random background and input
flows, routes them with several planners and scores the result:

- **Steiner tree** (`SMT`): a Steiner minimal tree per multicast flow.
- **MDTC** (`MDTC`): a minimal distance tree joined from per-destination
  shortest paths.
- **OSACO** (`OSACO`): ant colony optimisation that picks among up to K
  candidate trees per flow, run five times per test case (the runs are
  labelled 200, 400, 600, 800 and 1000 ms; each run lasts for the configured
  timeout). Candidates are the lightest trees found.
- **OSACO_IAS**: the same search with candidates taken along an increasing
  sequence of weights (every second tree from the lightest).

Each route set is scored on four objectives: O1 (failed TSN flows), O2 (failed
AVB flows), O3 (rerouting, always 0 and reported as `pass`) and O4 (summed
AVB worst-case delay in microseconds).

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Topologies

Topologies are read from `<topology_name>.yaml` in a directory (`yaml` by
default). No topology files come with the package; supply your own:

```yaml
scale:
  end_stations: 10
  bridges: 4
bridge_edges:
  - ends: [0, 1]
  - ends: [1, 2]
  - ends: [2, 3]
end_station_edges:
  - ends: [3000, 0]
  - ends: [3001, 1]
```

Bridges are numbered from 0 and end stations from 3000; an end-station edge
links station `n` (`3000 + n`) to a bridge. Flow sources are labelled
`1000 + n` and destinations `2000 + n` for end station `n`. Picking random
flow endpoints needs at least 5 end stations. A file that cannot be read or
parsed raises `omrss.topology.TopologyError`.

## Command line

```
omrss --help
```

Options may be written with one or two dashes (`-test_case 10` or
`--test_case=10`):

| Option | Default | Meaning |
| --- | --- | --- |
| `test_case` | 100 | number of test cases |
| `topology_name` | `typical_complex` | topology file name without `.yaml` |
| `input_tsn` | 4 | number of TSN input flows |
| `input_avb` | 16 | number of AVB input flows |
| `importantCAN` | | also sets the number of TSN input flows |
| `unimportantCAN` | | also sets the number of AVB input flows |
| `bg_tsn` | 35 | number of TSN background flows |
| `bg_avb` | 15 | number of AVB background flows |
| `hyperperiod` | 6000 | hyperperiod in microseconds |
| `bandwidth` | 1e9 | link bandwidth in bits per second |
| `plan_name` | `omaco` | plan to run (only `omaco`) |
| `osaco_timeout` | 200 | duration of each colony run in milliseconds |
| `osaco_K` | 5 | candidate trees per flow |
| `osaco_P` | 0.6 | accepted, but the runs use the fixed rates below |
| `show_network` | off | print the topology, flows and first graphs |
| `show_plan` | off | print the selected routes and colony timers |
| `store_data` | off | append averaged objectives as CSV |
| `yaml_dir` | `yaml` | directory of topology files |
| `result_dir` | `result` | directory of result text files |
| `data_dir` | `data` | directory of CSV files |

Each test case is planned four times, with evaporation rates 0.8, 0.7, 0.6
and 0.5. After all test cases the averaged objectives and computing times are
printed and appended to one text file per rate in the result directory, named
`<topology>_testcase<N>_tsn<T>_avb<A>_K<K>_P<rate>.txt`.

With `store_data`, the averages of the first rate (0.8) are appended as rows
to `SMT.csv`, `MTDC.csv` and `OSACO<label>.csv` in the data directory; the
OSACO and OSACO_IAS rows go to the same `OSACO<label>.csv` files.

The command can also be run as `python -m omrss.cli`.

## Library use

```python
from omrss.memorizer import new_memorizers
from omrss.network import generate_network
from omrss.plan import new_plans

network = generate_network(
    "typical_complex", 35, 15, 35, 15, 0, 0, 6000, 1e9, "yaml"
)
plan = new_plans(network, 200, 5, 0.6)["omaco"]
plan.initiate()

memorizer = new_memorizers()["omaco"]
memorizer.accumulate(plan)
memorizer.average(1)
print(memorizer.report())
```

The building blocks can be used on their own:

- `omrss.topology`: `Topology`, `load_topology`, `topology_from_data`.
- `omrss.flow` and `omrss.flowgen`: flow specifications, `random_devices`,
  `generate_stream`, `generate_tsn_flows`, `generate_can_flows`.
- `omrss.graph`: `generate_graphs`, one topology copy per flow.
- `omrss.dijkstra`: `dijkstra`, `graph_from_topology` and the `V2V` path cache.
- `omrss.tree`: `Tree`, `KTrees`, `TreesSet`, `KTreesSet`.
- `omrss.steiner`, `omrss.distance_tree`, `omrss.kspanning`: tree construction.
- `omrss.routing`: route every flow of a `Network`.
- `omrss.schedule`: `objectives`, `schedulability`, `wcd`, `transmit_time`.
- `omrss.algo`: `SMT`, `MDTC`, `OSACO`.
- `omrss.timer`: `Timer` and `format_duration`.

## Limitations

- CAN flows are modelled and can be generated with
  `omrss.flowgen.generate_can_flows`, but a network never generates them and
  they are neither routed nor scheduled. The command passes 0 for both CAN
  counts; `importantCAN` and `unimportantCAN` set the TSN and AVB input counts.
- Rerouting (O3) is not evaluated.
- Background flows keep their Steiner routes; only input flows are re-routed
  by the colony search.
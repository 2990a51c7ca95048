"""Command line entry point running OMACO experiments."""

from __future__ import annotations

import argparse
from typing import Sequence

from omrss.memorizer import new_memorizers
from omrss.network import generate_network
from omrss.plan import new_plans

EVAPORATION_RATES = (0.8, 0.7, 0.6, 0.5)
_STARS = "****************************************"


def _option(parser: argparse.ArgumentParser, name: str, **kwargs) -> None:
    parser.add_argument(f"-{name}", f"--{name}", **kwargs)


def build_parser() -> argparse.ArgumentParser:
    """Parser accepting single- or double-dash options as ``-name value`` or ``-name=value``."""
    parser = argparse.ArgumentParser(prog="omrss", description="Run OMACO routing experiments.")
    _option(parser, "test_case", dest="test_case", type=int, default=100,
            help="Number of experiments to run.")
    _option(parser, "topology_name", dest="topology_name", default="typical_complex",
            help="Topology: typical_complex, typical_simple, ring, layered_ring or industrial.")
    _option(parser, "input_tsn", dest="input_tsn", type=int, default=35,
            help="Number of TSN input flows.")
    _option(parser, "input_avb", dest="input_avb", type=int, default=15,
            help="Number of AVB input flows.")
    # These two options set the input flow counts and override their defaults.
    _option(parser, "importantCAN", dest="input_tsn", type=int,
            help="Number of TSN input flows.")
    _option(parser, "unimportantCAN", dest="input_avb", type=int,
            help="Number of AVB input flows.")
    parser.set_defaults(input_tsn=4, input_avb=16)
    _option(parser, "bg_tsn", dest="bg_tsn", type=int, default=35,
            help="Number of TSN background flows.")
    _option(parser, "bg_avb", dest="bg_avb", type=int, default=15,
            help="Number of AVB background flows.")
    _option(parser, "hyperperiod", dest="hyperperiod", type=int, default=6000,
            help="Hyperperiod in microseconds.")
    _option(parser, "bandwidth", dest="bandwidth", type=float, default=1e9,
            help="Link bandwidth in bits per second.")
    _option(parser, "plan_name", dest="plan_name", default="omaco", choices=["omaco"],
            help="The plan to run.")
    _option(parser, "osaco_timeout", dest="osaco_timeout", type=int, default=200,
            help="Timeout in milliseconds.")
    _option(parser, "osaco_K", dest="osaco_K", type=int, default=5,
            help="Number of candidate trees per flow.")
    _option(parser, "osaco_P", dest="osaco_P", type=float, default=0.6,
            help="Pheromone evaporation coefficient (0 <= P <= 1).")
    _option(parser, "show_network", dest="show_network", action="store_true",
            help="Print all network information.")
    _option(parser, "show_plan", dest="show_plan", action="store_true",
            help="Print all plan information.")
    _option(parser, "store_data", dest="store_data", action="store_true",
            help="Store averaged objectives as CSV.")
    _option(parser, "yaml_dir", dest="yaml_dir", default="yaml",
            help="Directory holding topology YAML files.")
    _option(parser, "result_dir", dest="result_dir", default="result",
            help="Directory for result text files.")
    _option(parser, "data_dir", dest="data_dir", default="data",
            help="Directory for CSV data files.")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the experiments, print averaged results and store them."""
    args = build_parser().parse_args(argv)

    memorizers = [new_memorizers()[args.plan_name] for _ in EVAPORATION_RATES]

    for number in range(1, args.test_case + 1):
        print(f"\nTestCase{number}")
        print(_STARS)
        # CAN flow counts are not set from the command line.
        network = generate_network(
            args.topology_name,
            args.bg_tsn,
            args.bg_avb,
            args.input_tsn,
            args.input_avb,
            0,
            0,
            args.hyperperiod,
            args.bandwidth,
            args.yaml_dir,
        )
        if args.show_network:
            network.show()

        plans = [
            new_plans(network, args.osaco_timeout, args.osaco_K, rate)[args.plan_name]
            for rate in EVAPORATION_RATES
        ]
        for plan in plans:
            plan.initiate()
        if args.show_plan:
            for plan in plans:
                plan.show()

        for memorizer, plan in zip(memorizers, plans):
            memorizer.accumulate(plan)
        print(_STARS)

    for memorizer in memorizers:
        memorizer.average(args.test_case)
    for memorizer in memorizers:
        memorizer.output_results()
    for memorizer, rate in zip(memorizers, EVAPORATION_RATES):
        memorizer.store_files(
            args.topology_name,
            args.test_case,
            args.input_tsn,
            args.input_avb,
            args.osaco_K,
            rate,
            args.result_dir,
        )

    if args.store_data:
        memorizers[0].store_data(args.data_dir)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
"""Command line entry point: plan routes for every car and write the answer."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence

from trafficplan.planner import Strategy, plan_routes, save_answer
from trafficplan.scheduler import Network

_USAGE = "please input args: carPath, roadPath, crossPath, answerPath"


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="trafficplan",
        description="Plan departure times and routes for the cars of a road network.",
    )
    parser.add_argument(
        "paths",
        nargs="*",
        metavar="PATH",
        help="car file, road file, cross file and answer file, in that order",
    )
    parser.add_argument(
        "--strategy",
        choices=[strategy.value for strategy in Strategy],
        default=Strategy.IN_START_ORDER.value,
        help="order in which cars are routed",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Read the network files, plan every car and write the answer file.

    Returns 1 when fewer than four paths are given, 0 otherwise.
    """
    args = _parser().parse_args(sys.argv[1:] if argv is None else list(argv))
    print("Begin")
    if len(args.paths) < 4:
        print(_USAGE)
        return 1
    car_path, road_path, cross_path, answer_path = args.paths[:4]
    print(f"carPath is {car_path}")
    print(f"roadPath is {road_path}")
    print(f"crossPath is {cross_path}")
    print(f"answerPath is {answer_path}")

    network = Network.load(car_path, road_path, cross_path)
    planned = plan_routes(network, Strategy(args.strategy))
    save_answer(planned, answer_path)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
"""Command line interface for AQI estimation from JSON files."""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict

from .config import SAMPLE_INTERVAL_METERS, EstimationOptions
from .estimator import estimate_aqi
from .route_aqi import aggregate_estimates, estimate_route
from .sampling import sample_route_points

logger = logging.getLogger(__name__)


def _load_json(path: str) -> Any:
    with Path(path).open("r", encoding="utf-8") as f:
        return json.load(f)


def _options_from_args(args: argparse.Namespace) -> EstimationOptions:
    overrides = {
        "power": args.power,
        "max_stations": args.max_stations,
        "max_distance_meters": args.max_distance,
        "min_stations": args.min_stations,
    }
    return EstimationOptions.from_mapping(
        {k: v for k, v in overrides.items() if v is not None},
        base=EstimationOptions.from_env(),
    )


def run_point(args: argparse.Namespace) -> Dict[str, Any]:
    stations = _load_json(args.stations)
    result = estimate_aqi((args.lat, args.lon), stations, _options_from_args(args))
    return result.to_dict()


def run_route(args: argparse.Namespace) -> Dict[str, Any]:
    stations = _load_json(args.stations)
    route = _load_json(args.route)
    points = sample_route_points(route, args.interval)
    estimates = estimate_route(points, stations, _options_from_args(args))
    return {
        "points": [list(p) for p in points],
        "results": [e.to_dict() for e in estimates],
        "aggregate": aggregate_estimates(estimates).to_dict(),
    }


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Estimate AQI from nearby sensor stations")
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--stations", required=True, help="JSON file with a list of station records")
    common.add_argument("--power", type=float, default=None)
    common.add_argument("--max-stations", dest="max_stations", type=int, default=None)
    common.add_argument("--max-distance", dest="max_distance", type=float, default=None,
                        help="Maximum station distance in meters")
    common.add_argument("--min-stations", dest="min_stations", type=int, default=None)

    sub = parser.add_subparsers(dest="command", required=True)

    point = sub.add_parser("point", parents=[common], help="Estimate AQI at one location")
    point.add_argument("--lat", type=float, required=True)
    point.add_argument("--lon", type=float, required=True)
    point.set_defaults(func=run_point)

    route = sub.add_parser("route", parents=[common], help="Estimate AQI along a route")
    route.add_argument("--route", required=True, help="JSON file with [[lat, lon], ...] vertices")
    route.add_argument("--interval", type=float, default=SAMPLE_INTERVAL_METERS,
                       help="Sampling interval in meters")
    route.set_defaults(func=run_route)

    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=logging.INFO)
    args = parse_args(argv)
    try:
        payload = args.func(args)
    except (OSError, ValueError) as exc:
        logger.error("%s", exc)
        return 1
    json.dump(payload, sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())

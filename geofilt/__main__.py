# geofilt/__main__.py
"""
Command line interface.

Usage:
    python -m geofilt filter --input arcs.csv --output filtered.csv --filter chain.json
    python -m geofilt noise-orbit --input orbit.csv --output noisy.csv --sigma-position 0.02
    python -m geofilt star-camera --input orbit.csv --output starCamera.csv
"""

import argparse
import logging
import sys
from typing import List, Optional

from geofilt import __version__
from geofilt.core.config import get_config, set_config
from geofilt.core.exceptions import GeoFiltError
from geofilt.filters.chain import DigitalFilter
from geofilt.simulation.instrument import arc_statistics, read_arcs, write_arcs
from geofilt.simulation.noise import FilteredNoiseGenerator, WhiteNoiseGenerator
from geofilt.simulation.programs import ATTITUDE_MODES, filter_arcs, noise_orbit, simulate_star_camera

logger = logging.getLogger("geofilt.cli")


def _noise_generator(sigma: float, seed: Optional[int], filter_file: Optional[str], warmup: int):
    if sigma == 0.0:
        return None
    generator = WhiteNoiseGenerator(sigma, seed)
    if filter_file is not None:
        generator = FilteredNoiseGenerator(generator, DigitalFilter.from_file(filter_file), warmup)
    return generator


def run_filter(args: argparse.Namespace) -> None:
    digital_filter = DigitalFilter.from_file(args.filter)
    arcs = read_arcs(args.input)
    filtered = filter_arcs(arcs, digital_filter, columns=args.columns, max_workers=args.workers)
    write_arcs(args.output, filtered)
    arc_statistics(filtered)


def run_noise_orbit(args: argparse.Namespace) -> None:
    seed = args.seed if args.seed is not None else get_config("core", "random_seed")
    velocity_seed = None if seed is None else seed + 1
    noise_position = _noise_generator(args.sigma_position, seed, args.noise_filter, args.warmup)
    noise_velocity = _noise_generator(args.sigma_velocity, velocity_seed, args.noise_filter, args.warmup)

    arcs = read_arcs(args.input)
    noisy = noise_orbit(arcs, noise_position, noise_velocity, max_workers=args.workers)
    write_arcs(args.output, noisy)
    arc_statistics(noisy)


def run_star_camera(args: argparse.Namespace) -> None:
    arcs = read_arcs(args.input)
    star_camera = simulate_star_camera(arcs, args.attitude_mode, max_workers=args.workers)
    write_arcs(args.output, star_camera)
    arc_statistics(star_camera)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="geofilt",
        description="Digital filters and simulation programs for satellite geodesy arcs"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                        help="Override the configured log level")
    parser.add_argument("--workers", type=int, default=None,
                        help="Number of parallel workers (default: configuration)")

    subparsers = parser.add_subparsers(dest="command", required=True)

    filter_parser = subparsers.add_parser("filter", help="Filter the data columns of all arcs")
    filter_parser.add_argument("--input", required=True, help="Input instrument file (CSV)")
    filter_parser.add_argument("--output", required=True, help="Output instrument file (CSV)")
    filter_parser.add_argument("--filter", required=True, help="Filter chain description (JSON)")
    filter_parser.add_argument("--columns", nargs="+", default=None,
                               help="Columns to filter (default: all data columns)")
    filter_parser.set_defaults(handler=run_filter)

    noise_parser = subparsers.add_parser("noise-orbit",
                                         help="Add along/cross/radial noise to an orbit")
    noise_parser.add_argument("--input", required=True, help="Input orbit file (CSV)")
    noise_parser.add_argument("--output", required=True, help="Output orbit file (CSV)")
    noise_parser.add_argument("--sigma-position", type=float, default=0.0,
                              help="Standard deviation of the position noise [m]")
    noise_parser.add_argument("--sigma-velocity", type=float, default=0.0,
                              help="Standard deviation of the velocity noise [m/s]")
    noise_parser.add_argument("--noise-filter", default=None,
                              help="Filter chain description (JSON) colouring the noise")
    noise_parser.add_argument("--warmup", type=int, default=0,
                              help="Discarded leading samples of coloured noise")
    noise_parser.add_argument("--seed", type=int, default=None, help="Random seed")
    noise_parser.set_defaults(handler=run_noise_orbit)

    star_parser = subparsers.add_parser("star-camera", help="Simulate star camera quaternions")
    star_parser.add_argument("--input", required=True, help="Input orbit file (CSV)")
    star_parser.add_argument("--output", required=True, help="Output star camera file (CSV)")
    star_parser.add_argument("--attitude-mode", choices=ATTITUDE_MODES, default="earth_pointing",
                             help="Orientation of the satellite")
    star_parser.set_defaults(handler=run_star_camera)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.log_level is not None:
        set_config("logging", "log_level", args.log_level)

    try:
        args.handler(args)
    except GeoFiltError as e:
        logger.error(f"{args.command} failed: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

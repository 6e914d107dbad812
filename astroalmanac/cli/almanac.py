"""``almanac`` subcommand: print a full-year table."""

from __future__ import annotations

import argparse
import sys

from ..engine.observational.almanac import AlmanacFormatter, stream_sink
from ._common import (
    add_config_argument,
    add_event_argument,
    add_site_arguments,
    build_solver,
    resolve_site,
    settings_from,
)


def add_subparser(sub: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    """Register the ``almanac`` subcommand."""

    parser = sub.add_parser(
        "almanac",
        help="Print a year of rise/set or twilight times",
        description=(
            "Tabulate rise and set (or twilight begin and end) times for every day "
            "of a year in the USNO fixed-width layout."
        ),
    )
    add_event_argument(parser)
    parser.add_argument("--year", type=int, required=True, help="Year (1900-2052)")
    add_site_arguments(parser)
    add_config_argument(parser)
    parser.add_argument(
        "--output",
        "-o",
        type=argparse.FileType("w", encoding="utf-8"),
        default=None,
        help="Write the table to a file instead of stdout",
    )
    parser.set_defaults(func=run)


def run(args: argparse.Namespace) -> int:
    """Execute the almanac subcommand."""

    settings = settings_from(args)
    latitude, longitude, time_zone = resolve_site(args, settings)
    formatter = AlmanacFormatter(build_solver(settings))
    stream = args.output or sys.stdout
    try:
        formatter.write(args.event, args.year, latitude, longitude, time_zone, stream_sink(stream))
    finally:
        if args.output is not None:
            args.output.close()
    return 0

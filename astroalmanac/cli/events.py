"""``events`` subcommand: rise/set instants for a single day."""

from __future__ import annotations

import argparse
import datetime as _dt
import json

from ..engine.observational.almanac import round_hour
from ._common import (
    add_config_argument,
    add_event_argument,
    add_site_arguments,
    build_solver,
    resolve_site,
    settings_from,
)


def add_subparser(sub: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    """Register the ``events`` subcommand."""

    parser = sub.add_parser(
        "events",
        help="Rise/set or twilight times for one day",
        description="Compute the events of one local calendar day at a site.",
    )
    add_event_argument(parser)
    parser.add_argument(
        "--date",
        type=_dt.date.fromisoformat,
        required=True,
        help="Local calendar date (YYYY-MM-DD)",
    )
    add_site_arguments(parser)
    add_config_argument(parser)
    parser.add_argument("--json", action="store_true", help="Emit JSON output")
    parser.set_defaults(func=run)


def run(args: argparse.Namespace) -> int:
    """Execute the events subcommand."""

    settings = settings_from(args)
    latitude, longitude, time_zone = resolve_site(args, settings)
    solver = build_solver(settings)
    date = args.date
    result = solver.event_times(
        args.event, date.day, date.month, date.year, latitude, longitude, time_zone
    )

    if args.json:
        payload = {
            "event": args.event.value,
            "date": date.isoformat(),
            "latitude": latitude,
            "longitude": longitude,
            "time_zone": time_zone,
            "above_threshold_at_midnight": result.above_threshold_at_midnight,
            "rises": result.rises,
            "sets": result.sets,
        }
        print(json.dumps(payload, indent=2))
        return 0

    print(f"{args.event.label} on {date.isoformat()}")
    for label, times in (("Rise", result.rises), ("Set", result.sets)):
        rendered = ", ".join(round_hour(value) for value in times) or "none"
        print(f"  {label}: {rendered}")
    if not result.has_events:
        state = "above" if result.above_threshold_at_midnight else "below"
        print(f"  No events: {state} the threshold all day")
    return 0

"""``deltat`` and ``julian`` subcommands."""

from __future__ import annotations

import argparse
import datetime as _dt

from ..config import build_delta_t_model
from ..core.time import julian_day, julian_to_calendar
from ._common import add_config_argument, settings_from


def _parse_moment(text: str) -> _dt.datetime:
    moment = _dt.datetime.fromisoformat(text.replace("Z", "+00:00"))
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=_dt.UTC)
    return moment


def add_subparser(sub: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    """Register the ``deltat`` and ``julian`` subcommands."""

    deltat = sub.add_parser(
        "deltat",
        help="Report ΔT (TT - UT) in seconds",
        description="Evaluate the ΔT model for a Julian date or a UTC timestamp.",
    )
    group = deltat.add_mutually_exclusive_group(required=True)
    group.add_argument("--jd", type=float, help="UTC Julian date")
    group.add_argument("--utc", type=_parse_moment, help="ISO-8601 UTC timestamp")
    add_config_argument(deltat)
    deltat.set_defaults(func=run_deltat)

    julian = sub.add_parser(
        "julian",
        help="Convert between Julian dates and calendar dates",
        description="Convert a Julian date to a UTC calendar date, or the reverse.",
    )
    group = julian.add_mutually_exclusive_group(required=True)
    group.add_argument("--jd", type=float, help="Julian date to convert to calendar fields")
    group.add_argument("--utc", type=_parse_moment, help="ISO-8601 UTC timestamp to convert")
    julian.set_defaults(func=run_julian)


def run_deltat(args: argparse.Namespace) -> int:
    """Execute the deltat subcommand."""

    model = build_delta_t_model(settings_from(args))
    jd = args.jd if args.jd is not None else julian_day(args.utc)
    print(f"JD {jd:.6f}  ΔT = {model.delta_t(jd):.3f} s")
    return 0


def run_julian(args: argparse.Namespace) -> int:
    """Execute the julian subcommand."""

    if args.jd is not None:
        fields = julian_to_calendar(args.jd)
        print(
            f"{fields.year:04d}-{fields.month:02d}-{fields.day:02d}T"
            f"{fields.hour:02d}:{fields.minute:02d}:{fields.second:02d}."
            f"{fields.millisecond:03d}Z"
        )
        return 0

    print(f"{julian_day(args.utc):.6f}")
    return 0

"""Entry point for the astroalmanac CLI."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

from ..boot.logging import configure_logging
from ..errors import AlmanacError
from . import almanac, events, timescales

LOG = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="astroalmanac", description="Rise, set and twilight almanac"
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (defaults to $ASTROALMANAC_LOG_LEVEL or WARNING)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    almanac.add_subparser(sub)
    events.add_subparser(sub)
    timescales.add_subparser(sub)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    configure_logging(level=args.log_level)
    try:
        return args.func(args)
    except AlmanacError as exc:
        LOG.debug("Command %s failed", args.command, exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())

"""Helpers shared by the CLI subcommands."""

from __future__ import annotations

import argparse
from pathlib import Path

from ..config import Settings, build_delta_t_model, build_provider, load_settings
from ..core.bodies import EventType
from ..engine.observational.events import RiseSetSolver

EVENT_CHOICES = [member.value for member in EventType]


def add_config_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Settings YAML file (defaults to $ASTROALMANAC_HOME/config.yaml)",
    )


def add_site_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--lat", type=float, default=None, help="Latitude in degrees, north positive")
    parser.add_argument("--lon", type=float, default=None, help="Longitude in degrees, east positive")
    parser.add_argument(
        "--tz",
        type=float,
        default=None,
        help="Time zone in hours east of Greenwich (e.g. -5 for US Eastern)",
    )


def add_event_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--event",
        default=EventType.SUN_RISE_SUNSET.value,
        type=EventType.parse,
        metavar="EVENT",
        help="Event kind: " + ", ".join(EVENT_CHOICES),
    )


def settings_from(args: argparse.Namespace) -> Settings:
    return load_settings(getattr(args, "config", None))


def resolve_site(args: argparse.Namespace, settings: Settings) -> tuple[float, float, float]:
    """Return latitude, longitude and time zone, filling gaps from ``settings``."""

    latitude = args.lat if args.lat is not None else settings.site.latitude
    longitude = args.lon if args.lon is not None else settings.site.longitude
    time_zone = args.tz if args.tz is not None else settings.site.time_zone
    return latitude, longitude, time_zone


def build_solver(settings: Settings) -> RiseSetSolver:
    return RiseSetSolver(build_provider(settings), build_delta_t_model(settings))

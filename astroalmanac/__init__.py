"""astroalmanac: rise, set and twilight almanacs for the Sun, Moon and planets."""

from __future__ import annotations

import logging
from importlib.metadata import PackageNotFoundError, version as _get_version

try:
    __version__ = _get_version("astroalmanac")
except PackageNotFoundError:  # pragma: no cover - running from a source checkout
    __version__ = "0.0.0"

# Library logging stays silent until the application configures handlers.
logging.getLogger(__name__).addHandler(logging.NullHandler())

from .core.bodies import Body, EventType
from .core.deltat import DeltaTModel, delta_t, set_leap_seconds
from .core.time import calendar_to_julian, julian_to_calendar
from .engine.observational import (
    AlmanacFormatter,
    DayOutcome,
    RiseSetResult,
    RiseSetSolver,
    almanac,
    event_times,
    moon_illumination,
    moon_phase,
    try_event_times,
)
from .errors import (
    AlmanacError,
    InvalidArgumentError,
    InvalidDateError,
    UpstreamFailureError,
)


def get_version() -> str:
    """Return the resolved package version."""

    return __version__


__all__ = [
    "AlmanacError",
    "AlmanacFormatter",
    "Body",
    "DayOutcome",
    "DeltaTModel",
    "EventType",
    "InvalidArgumentError",
    "InvalidDateError",
    "RiseSetResult",
    "RiseSetSolver",
    "UpstreamFailureError",
    "__version__",
    "almanac",
    "calendar_to_julian",
    "delta_t",
    "event_times",
    "get_version",
    "julian_to_calendar",
    "moon_illumination",
    "moon_phase",
    "set_leap_seconds",
    "try_event_times",
]

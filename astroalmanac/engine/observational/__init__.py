"""Observational events: horizon crossings, twilight and lunar phase."""

from __future__ import annotations

from .almanac import (
    AlmanacCell,
    AlmanacFormatter,
    AlmanacTable,
    almanac,
    format_cell,
    logger_sink,
    round_hour,
    stream_sink,
)
from .events import (
    DayOutcome,
    RiseSetResult,
    RiseSetSolver,
    event_times,
    try_event_times,
    window_roots,
)
from .lunar import moon_illumination, moon_phase
from .sampler import BodyAltitudeSampler, BodySample

__all__ = [
    "AlmanacCell",
    "AlmanacFormatter",
    "AlmanacTable",
    "BodyAltitudeSampler",
    "BodySample",
    "DayOutcome",
    "RiseSetResult",
    "RiseSetSolver",
    "almanac",
    "event_times",
    "format_cell",
    "logger_sink",
    "moon_illumination",
    "moon_phase",
    "round_hour",
    "stream_sink",
    "try_event_times",
    "window_roots",
]

"""Leap-second (TAI - UTC) sources consumed by the ΔT model."""

from __future__ import annotations

import datetime as _dt
import logging
import math
import warnings
from typing import Final, Protocol, runtime_checkable

import erfa

from ..errors import InvalidArgumentError, UpstreamFailureError
from .time import ensure_utc

__all__ = [
    "DEFAULT_LEAP_SECONDS",
    "ErfaLeapSecondSource",
    "LeapSecondLookupError",
    "LeapSecondSource",
    "StaticLeapSecondSource",
]

LOG = logging.getLogger(__name__)

DEFAULT_LEAP_SECONDS: Final[float] = 37.0


class LeapSecondLookupError(UpstreamFailureError):
    """Raised when a leap-second source cannot answer a query."""


@runtime_checkable
class LeapSecondSource(Protocol):
    """Anything able to report TAI - UTC for a UTC instant."""

    def leap_seconds_at(self, moment: _dt.datetime) -> float:
        ...


class ErfaLeapSecondSource:
    """Leap seconds from the table compiled into ERFA (``eraDat``)."""

    def leap_seconds_at(self, moment: _dt.datetime) -> float:
        utc = ensure_utc(moment)
        fraction = (
            utc.hour * 3600.0 + utc.minute * 60.0 + utc.second + utc.microsecond / 1e6
        ) / 86_400.0
        try:
            with warnings.catch_warnings():
                # eraDat flags years past its table as "dubious" but still answers.
                warnings.simplefilter("ignore", erfa.ErfaWarning)
                value = erfa.dat(utc.year, utc.month, utc.day, fraction)
        except (erfa.ErfaError, ValueError) as exc:
            LOG.debug("erfa.dat failed for %s: %s", utc.isoformat(), exc)
            raise LeapSecondLookupError(
                f"ERFA leap-second lookup failed for {utc.date().isoformat()}"
            ) from exc
        return float(value)


class StaticLeapSecondSource:
    """Source that always reports the same TAI - UTC value."""

    def __init__(self, value: float = DEFAULT_LEAP_SECONDS) -> None:
        try:
            numeric = float(value)
        except (TypeError, ValueError) as exc:
            raise InvalidArgumentError(f"Leap seconds must be a number, got {value!r}") from exc
        if not math.isfinite(numeric) or numeric < 0:
            raise InvalidArgumentError(
                f"Leap seconds must be finite and non-negative, got {value!r}"
            )
        self.value = numeric

    def leap_seconds_at(self, moment: _dt.datetime) -> float:
        return self.value

    def __repr__(self) -> str:
        return f"StaticLeapSecondSource({self.value!r})"

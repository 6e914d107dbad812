"""Julian date and calendar conversions.

Two independent closed-form algorithms are used: the integer formula from
the NOVAS ``julian_date`` routine for the forward direction, and the
Explanatory Supplement to the Astronomical Almanac (3rd edition, 2013,
pp. 617-619) for the inverse.  Both operate on the proleptic Gregorian
calendar.  The inverse is only defined from the introduction of the
Gregorian calendar on 15 October 1582 (JD 2299161.0) onwards.
"""

from __future__ import annotations

import datetime as _dt
import math
from collections.abc import Callable
from typing import Final, NamedTuple

from ..errors import InvalidArgumentError

__all__ = [
    "CalendarFields",
    "J2000",
    "JD_GREGORIAN_START",
    "MJD_OFFSET",
    "SECONDS_PER_DAY",
    "calendar_to_julian",
    "degrees_to_dms",
    "ensure_utc",
    "julian_date_utc_now",
    "julian_day",
    "julian_to_calendar",
    "julian_to_datetime",
]


SECONDS_PER_DAY: Final[float] = 86_400.0
J2000: Final[float] = 2_451_545.0
MJD_OFFSET: Final[float] = 2_400_000.5
JD_GREGORIAN_START: Final[float] = 2_299_161.0

# Explanatory Supplement constants for the Gregorian calendar.
_ES_Y: Final[int] = 4716
_ES_J: Final[int] = 1401
_ES_M: Final[int] = 2
_ES_N: Final[int] = 12
_ES_R: Final[int] = 4
_ES_P: Final[int] = 1461
_ES_V: Final[int] = 3
_ES_U: Final[int] = 5
_ES_S: Final[int] = 153
_ES_W: Final[int] = 2
_ES_B: Final[int] = 274_277
_ES_C: Final[int] = -38


class CalendarFields(NamedTuple):
    """Broken-down UTC calendar instant."""

    year: int
    month: int
    day: int
    hour: int
    minute: int
    second: int
    millisecond: int

    def as_datetime(self) -> _dt.datetime:
        return _dt.datetime(
            self.year,
            self.month,
            self.day,
            self.hour,
            self.minute,
            self.second,
            self.millisecond * 1000,
            tzinfo=_dt.UTC,
        )


def _tdiv(numerator: int, denominator: int) -> int:
    """Integer division truncating toward zero."""

    quotient = abs(numerator) // abs(denominator)
    if (numerator < 0) != (denominator < 0):
        return -quotient
    return quotient


def calendar_to_julian(year: int, month: int, day: int, hour: float = 0.0) -> float:
    """Return the Julian date for a Gregorian calendar date and UT hour."""

    year = int(year)
    month = int(month)
    day = int(day)
    shift = _tdiv(month - 14, 12)
    jd12h = (
        day
        - 32075
        + _tdiv(1461 * (year + 4800 + shift), 4)
        + _tdiv(367 * (month - 2 - shift * 12), 12)
        - _tdiv(3 * _tdiv(year + 4900 + shift, 100), 4)
    )
    return jd12h - 0.5 + float(hour) / 24.0


def julian_to_calendar(jd: float) -> CalendarFields:
    """Return the UTC calendar fields for the Julian date ``jd``.

    Raises :class:`~astroalmanac.errors.InvalidArgumentError` for dates
    that precede the Gregorian calendar.
    """

    if not math.isfinite(jd) or jd < JD_GREGORIAN_START:
        raise InvalidArgumentError(
            f"Julian date {jd} precedes introduction of the Gregorian calendar "
            "on 15th October 1582"
        )

    jd_int = math.floor(jd)
    fraction = jd - jd_int
    # A Julian day starts at noon, so the second half belongs to the next civil day.
    if fraction >= 0.5:
        jd_int += 1
        fraction -= 1.0

    f = jd_int + _ES_J + (((4 * jd_int + _ES_B) // 146_097) * 3) // 4 + _ES_C
    e = _ES_R * f + _ES_V
    g = (e % _ES_P) // _ES_R
    h = _ES_U * g + _ES_W
    day = (h % _ES_S) // _ES_U + 1
    month = ((h // _ES_S + _ES_M) % _ES_N) + 1
    year = e // _ES_P - _ES_Y + (_ES_N + _ES_M - month) // _ES_N

    day_fraction = fraction + 0.5
    hours = day_fraction * 24.0
    hour = int(hours)
    minutes = (hours - hour) * 60.0
    minute = int(minutes)
    seconds = (minutes - minute) * 60.0
    second = int(seconds)
    millisecond = int((seconds - second) * 1000.0)
    return CalendarFields(year, month, day, hour, minute, second, millisecond)


def julian_to_datetime(jd: float) -> _dt.datetime:
    """Return an aware UTC :class:`datetime.datetime` for ``jd``."""

    return julian_to_calendar(jd).as_datetime()


def ensure_utc(moment: _dt.datetime) -> _dt.datetime:
    """Return ``moment`` converted to UTC, treating naive values as UTC."""

    if moment.tzinfo is None:
        return moment.replace(tzinfo=_dt.UTC)
    return moment.astimezone(_dt.UTC)


def julian_day(moment: _dt.datetime) -> float:
    """Return the Julian date for ``moment``."""

    moment = ensure_utc(moment)
    hours = (
        moment.hour
        + moment.minute / 60.0
        + (moment.second + moment.microsecond / 1e6) / 3600.0
    )
    return calendar_to_julian(moment.year, moment.month, moment.day, hours)


def julian_date_utc_now(clock: Callable[[], _dt.datetime] | None = None) -> float:
    """Return the Julian date of the current UTC instant."""

    now = clock() if clock is not None else _dt.datetime.now(_dt.UTC)
    return julian_day(now)


def degrees_to_dms(value: float, *, separator: str = ":") -> str:
    """Format ``value`` as ``DD:MM:SS`` rounded to whole seconds.

    Units are zero padded to two digits and a leading ``-`` marks negative
    values.
    """

    sign = "-" if value < 0 else ""
    total_seconds = int(round(abs(value) * 3600.0))
    units, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{sign}{units:02d}{separator}{minutes:02d}{separator}{seconds:02d}"

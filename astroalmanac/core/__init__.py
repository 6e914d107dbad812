"""Time scales, calendar conversions and body metadata."""

from __future__ import annotations

from .bodies import AU_KM, BODY_RADIUS_KM, EARTH_RADIUS_KM, Body, EventType
from .deltat import DeltaTModel, delta_t, fractional_year, set_leap_seconds
from .leapseconds import (
    DEFAULT_LEAP_SECONDS,
    ErfaLeapSecondSource,
    LeapSecondLookupError,
    LeapSecondSource,
    StaticLeapSecondSource,
)
from .time import (
    CalendarFields,
    calendar_to_julian,
    degrees_to_dms,
    julian_date_utc_now,
    julian_day,
    julian_to_calendar,
    julian_to_datetime,
)

__all__ = [
    "AU_KM",
    "BODY_RADIUS_KM",
    "Body",
    "CalendarFields",
    "DEFAULT_LEAP_SECONDS",
    "DeltaTModel",
    "EARTH_RADIUS_KM",
    "ErfaLeapSecondSource",
    "EventType",
    "LeapSecondLookupError",
    "LeapSecondSource",
    "StaticLeapSecondSource",
    "calendar_to_julian",
    "degrees_to_dms",
    "delta_t",
    "fractional_year",
    "julian_date_utc_now",
    "julian_day",
    "julian_to_calendar",
    "julian_to_datetime",
    "set_leap_seconds",
]

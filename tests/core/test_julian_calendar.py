from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

import pytest

from astroalmanac.core.time import (
    CalendarFields,
    calendar_to_julian,
    degrees_to_dms,
    julian_date_utc_now,
    julian_day,
    julian_to_calendar,
    julian_to_datetime,
)
from astroalmanac.errors import InvalidArgumentError


@pytest.mark.parametrize(
    "args, expected",
    [
        ((2000, 1, 1, 12.0), 2451545.0),
        ((2000, 1, 1, 0.0), 2451544.5),
        ((1582, 10, 15, 0.0), 2299160.5),
        ((1900, 1, 1, 0.0), 2415020.5),
        ((2012, 1, 1, 0.0), 2455927.5),
        ((1999, 12, 31, 18.0), 2451544.25),
        ((2052, 12, 31, 0.0), 2470902.5),
    ],
)
def test_calendar_to_julian_reference_dates(args, expected):
    assert calendar_to_julian(*args) == pytest.approx(expected, abs=1e-9)


def test_calendar_to_julian_defaults_to_midnight():
    assert calendar_to_julian(2024, 3, 1) == calendar_to_julian(2024, 3, 1, 0.0)


@pytest.mark.parametrize(
    "jd, expected",
    [
        (2451545.0, CalendarFields(2000, 1, 1, 12, 0, 0, 0)),
        (2451544.5, CalendarFields(2000, 1, 1, 0, 0, 0, 0)),
        (2451545.25, CalendarFields(2000, 1, 1, 18, 0, 0, 0)),
        (2451544.75, CalendarFields(2000, 1, 1, 6, 0, 0, 0)),
        (2299161.0, CalendarFields(1582, 10, 15, 12, 0, 0, 0)),
        (2460310.5, CalendarFields(2024, 1, 1, 0, 0, 0, 0)),
    ],
)
def test_julian_to_calendar_reference_dates(jd, expected):
    assert julian_to_calendar(jd) == expected


def test_julian_to_calendar_half_day_belongs_to_next_civil_day():
    fields = julian_to_calendar(2451545.9)
    assert (fields.year, fields.month, fields.day) == (2000, 1, 2)
    assert fields.hour == 9


def test_julian_to_calendar_leap_day():
    fields = julian_to_calendar(calendar_to_julian(2024, 2, 29, 18.0))
    assert (fields.year, fields.month, fields.day, fields.hour, fields.minute) == (2024, 2, 29, 18, 0)


@pytest.mark.parametrize("jd", [2299160.999, 2000000.0, 0.0, -1.0])
def test_julian_to_calendar_rejects_pre_gregorian(jd):
    with pytest.raises(InvalidArgumentError):
        julian_to_calendar(jd)


def test_julian_to_calendar_rejects_nan():
    with pytest.raises(InvalidArgumentError):
        julian_to_calendar(float("nan"))


def test_julian_to_datetime_is_utc_aware():
    moment = julian_to_datetime(2451545.0)
    assert moment == datetime(2000, 1, 1, 12, tzinfo=UTC)


def test_julian_day_accepts_aware_and_naive_datetimes():
    aware = datetime(2000, 1, 1, 17, 0, tzinfo=timezone(timedelta(hours=5)))
    naive = datetime(2000, 1, 1, 12, 0)
    assert julian_day(aware) == pytest.approx(2451545.0, abs=1e-9)
    assert julian_day(naive) == pytest.approx(2451545.0, abs=1e-9)


def test_julian_date_utc_now_uses_clock():
    clock = lambda: datetime(2024, 1, 1, tzinfo=UTC)  # noqa: E731
    assert julian_date_utc_now(clock) == pytest.approx(2460310.5)


@pytest.mark.parametrize(
    "value, expected",
    [
        (0.0, "00:00:00"),
        (51.4779, "51:28:40"),
        (-0.0015, "-00:00:05"),
        (12.5, "12:30:00"),
        (179.99999, "180:00:00"),
        (-75.0, "-75:00:00"),
        (5.9999999, "06:00:00"),
    ],
)
def test_degrees_to_dms(value, expected):
    assert degrees_to_dms(value) == expected

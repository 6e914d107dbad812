"""Daily rise, set and twilight instants.

A day (local midnight to midnight) is scanned in twelve two-hour windows
centred on 01:00, 03:00, ... 23:00.  Within each window the corrected
altitude is sampled at the start, centre and end, a parabola is fitted
through the three samples in window-local coordinates ``x`` in ``[-1, 1]``
and its zeros inside the window become rise or set events.  This is the
method of Montenbruck & Pfleger, *Astronomy on the Personal Computer*,
used by the USNO and HMNAO almanacs.
"""

from __future__ import annotations

import datetime as _dt
import logging
import math
from dataclasses import dataclass, field

from ...core.bodies import EventType
from ...core.deltat import DeltaTModel
from ...core.time import calendar_to_julian
from ...ephemeris.adapter import EphemerisProvider, SwissEphemerisProvider
from ...errors import InvalidArgumentError, InvalidDateError
from .sampler import BodyAltitudeSampler

__all__ = [
    "DayOutcome",
    "MAX_YEAR",
    "MIN_YEAR",
    "RiseSetResult",
    "RiseSetSolver",
    "default_solver",
    "event_times",
    "try_event_times",
    "validate_calendar_date",
    "validate_site",
    "window_roots",
]

LOG = logging.getLogger(__name__)

# Coverage of the DE421 ephemeris the tabulated comparison data rely on.
MIN_YEAR = 1900
MAX_YEAR = 2052
WINDOW_CENTRES: tuple[float, ...] = tuple(float(hour) for hour in range(1, 24, 2))
# Above this latitude every window is scanned; several events per day are possible.
POLAR_LATITUDE = 60.0


@dataclass(slots=True)
class RiseSetResult:
    """Events of one local day, in hours after local midnight."""

    above_threshold_at_midnight: bool
    rises: list[float] = field(default_factory=list)
    sets: list[float] = field(default_factory=list)

    @property
    def has_events(self) -> bool:
        return bool(self.rises or self.sets)


@dataclass(frozen=True, slots=True)
class DayOutcome:
    """Either a computed :class:`RiseSetResult` or the reason a day was skipped."""

    result: RiseSetResult | None = None
    skip_reason: str | None = None

    @classmethod
    def ok(cls, result: RiseSetResult) -> "DayOutcome":
        return cls(result=result)

    @classmethod
    def skip(cls, reason: str) -> "DayOutcome":
        return cls(skip_reason=reason)

    @property
    def skipped(self) -> bool:
        return self.result is None


def _finite(name: str, value: float) -> float:
    try:
        numeric = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidArgumentError(f"{name} must be a number, got {value!r}") from exc
    if not math.isfinite(numeric):
        raise InvalidArgumentError(f"{name} must be finite, got {value!r}")
    return numeric


def validate_site(
    event: EventType | str,
    year: int,
    latitude: float,
    longitude: float,
    time_zone: float,
) -> EventType:
    """Check the arguments shared by :func:`event_times` and the almanac.

    Returns the resolved :class:`EventType`; raises
    :class:`~astroalmanac.errors.InvalidArgumentError` otherwise.
    """

    try:
        kind = EventType.parse(event)
    except ValueError as exc:
        raise InvalidArgumentError(f"Unknown event type: {event!r}") from exc
    if not isinstance(year, int) or isinstance(year, bool):
        raise InvalidArgumentError(f"Year must be an integer, got {year!r}")
    if year < MIN_YEAR or year > MAX_YEAR:
        raise InvalidArgumentError(
            f"Year {year} is outside the supported ephemeris range ({MIN_YEAR} to {MAX_YEAR})"
        )
    if not -90.0 <= _finite("Latitude", latitude) <= 90.0:
        raise InvalidArgumentError(f"Latitude is outside the valid range (-90 to +90): {latitude}")
    if not -180.0 <= _finite("Longitude", longitude) <= 180.0:
        raise InvalidArgumentError(
            f"Longitude is outside the valid range (-180 to +180): {longitude}"
        )
    if not -12.0 <= _finite("Time zone", time_zone) <= 14.0:
        raise InvalidArgumentError(
            f"Time zone is outside the valid range (-12 to +14): {time_zone}"
        )
    return kind


def validate_calendar_date(day: int, month: int, year: int) -> _dt.date:
    """Return the date or raise :class:`~astroalmanac.errors.InvalidDateError`."""

    try:
        return _dt.date(year, month, day)
    except (TypeError, ValueError) as exc:
        raise InvalidDateError(
            f"{day}/{month}/{year} is not a calendar date: day must not exceed "
            "the number of days in the month"
        ) from exc


def window_roots(minus: float, centre: float, plus: float) -> tuple[list[float], list[float]]:
    """Return window-local rise and set offsets for three altitude samples.

    The parabola through ``(-1, minus)``, ``(0, centre)`` and ``(1, plus)``
    is solved for zeros within ``[-1, 1]``.  A zero below the window start
    belongs to the previous window and is replaced by the other zero.
    """

    c = centre
    b = 0.5 * (plus - minus)
    a = 0.5 * (plus + minus) - centre

    zeros = 0
    zero1 = zero2 = math.nan
    if a == 0.0:
        if b != 0.0:
            zero1 = -c / b
            if abs(zero1) <= 1.0:
                zeros = 1
    else:
        discriminant = b * b - 4.0 * a * c
        if discriminant > 0.0:
            # Nearly straight samples leave ``a`` tiny; this form keeps the
            # near root accurate where -b +/- sqrt(d) would cancel.
            q = -0.5 * (b + math.copysign(math.sqrt(discriminant), b))
            zero1, zero2 = sorted((q / a, c / q))
            if abs(zero1) <= 1.0:
                zeros += 1
            if abs(zero2) <= 1.0:
                zeros += 1
            if zero1 < -1.0:
                zero1 = zero2

    rises: list[float] = []
    sets: list[float] = []
    starts_below = minus < 0.0
    if zeros == 1:
        (rises if starts_below else sets).append(zero1)
    elif zeros == 2:
        if starts_below:
            rises.append(zero1)
            sets.append(zero2)
        else:
            sets.append(zero1)
            rises.append(zero2)
    return rises, sets


class RiseSetSolver:
    """Find rise/set (or twilight begin/end) instants for a site and day."""

    def __init__(
        self,
        provider: EphemerisProvider | None = None,
        delta_t_model: DeltaTModel | None = None,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self._log = logger or LOG
        self.sampler = BodyAltitudeSampler(
            provider if provider is not None else SwissEphemerisProvider(),
            delta_t_model,
            logger=self._log,
        )

    @property
    def provider(self) -> EphemerisProvider:
        return self.sampler.provider

    def event_times(
        self,
        event: EventType | str,
        day: int,
        month: int,
        year: int,
        latitude: float,
        longitude: float,
        time_zone: float,
    ) -> RiseSetResult:
        """Return the events of ``event`` on the given local calendar day.

        Times are hours after local midnight in the zone ``time_zone``
        (hours east of Greenwich).
        """

        kind = validate_site(event, year, latitude, longitude, time_zone)
        try:
            validate_calendar_date(day, month, year)
        except InvalidDateError:
            self._log.debug("Rejected date day=%s month=%s year=%s", day, month, year)
            raise
        return self._solve(kind, day, month, year, float(latitude), float(longitude), float(time_zone))

    def try_event_times(
        self,
        event: EventType | str,
        day: int,
        month: int,
        year: int,
        latitude: float,
        longitude: float,
        time_zone: float,
    ) -> DayOutcome:
        """Like :meth:`event_times` but report impossible dates as a skip."""

        kind = validate_site(event, year, latitude, longitude, time_zone)
        try:
            validate_calendar_date(day, month, year)
        except InvalidDateError as exc:
            return DayOutcome.skip(str(exc))
        return DayOutcome.ok(
            self._solve(kind, day, month, year, float(latitude), float(longitude), float(time_zone))
        )

    def _solve(
        self,
        event: EventType,
        day: int,
        month: int,
        year: int,
        latitude: float,
        longitude: float,
        time_zone: float,
    ) -> RiseSetResult:
        jd = calendar_to_julian(year, month, day, 0.0) - time_zone / 24.0
        refraction = self.sampler.horizon_refraction(latitude, longitude)

        result = RiseSetResult(above_threshold_at_midnight=False)
        for index, centre in enumerate(WINDOW_CENTRES):
            minus, mid, plus = self.sampler.window(
                event, jd, centre, latitude, longitude, refraction
            )
            if index == 0:
                result.above_threshold_at_midnight = minus >= 0.0

            rises, sets = window_roots(minus, mid, plus)
            result.rises.extend(centre + offset for offset in rises)
            result.sets.extend(centre + offset for offset in sets)

            if result.rises and result.sets and abs(latitude) < POLAR_LATITUDE:
                break

        self._log.debug(
            "%s %04d-%02d-%02d lat=%.4f lon=%.4f tz=%.2f: rises=%s sets=%s above=%s",
            event.value,
            year,
            month,
            day,
            latitude,
            longitude,
            time_zone,
            result.rises,
            result.sets,
            result.above_threshold_at_midnight,
        )
        return result


_DEFAULT_SOLVER: RiseSetSolver | None = None


def default_solver() -> RiseSetSolver:
    """Return a lazily created solver backed by Swiss Ephemeris."""

    global _DEFAULT_SOLVER
    if _DEFAULT_SOLVER is None:
        _DEFAULT_SOLVER = RiseSetSolver()
    return _DEFAULT_SOLVER


def event_times(
    event: EventType | str,
    day: int,
    month: int,
    year: int,
    latitude: float,
    longitude: float,
    time_zone: float,
    *,
    solver: RiseSetSolver | None = None,
) -> RiseSetResult:
    """Module-level shortcut for :meth:`RiseSetSolver.event_times`."""

    return (solver or default_solver()).event_times(
        event, day, month, year, latitude, longitude, time_zone
    )


def try_event_times(
    event: EventType | str,
    day: int,
    month: int,
    year: int,
    latitude: float,
    longitude: float,
    time_zone: float,
    *,
    solver: RiseSetSolver | None = None,
) -> DayOutcome:
    """Module-level shortcut for :meth:`RiseSetSolver.try_event_times`."""

    return (solver or default_solver()).try_event_times(
        event, day, month, year, latitude, longitude, time_zone
    )

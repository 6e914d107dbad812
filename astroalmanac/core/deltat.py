"""ΔT (TT - UT) model.

ΔT is selected by the fractional year of the requested Julian date:

* from 2025 onwards it is the current leap-second count plus 32.184 s;
* between 2011 and 2025 a sequence of short-term empirical fits to the
  IERS/USNO observations is used, most recent band first;
* between 1620 and 2011 the value is interpolated (Besselian, up to fourth
  differences) in a table tabulated at one-year steps;
* before 1620 the Stephenson-Morrison (948-1620) and Borkowski (< 948)
  quadratics apply.

Adjacent fits are not continuous at their boundaries.  The jumps are part
of the published fits and are kept as they are.
"""

from __future__ import annotations

import datetime as _dt
import logging
import math
from collections.abc import Callable
from dataclasses import dataclass
from typing import Final

from ..errors import InvalidArgumentError
from .leapseconds import DEFAULT_LEAP_SECONDS, ErfaLeapSecondSource, LeapSecondSource
from .time import J2000, MJD_OFFSET

__all__ = [
    "DeltaTModel",
    "TT_TAI_OFFSET",
    "default_model",
    "delta_t",
    "fractional_year",
    "set_leap_seconds",
]

LOG = logging.getLogger(__name__)

TT_TAI_OFFSET: Final[float] = 32.184
TROPICAL_YEAR_DAYS: Final[float] = 365.24219
LEAP_SECOND_YEAR: Final[float] = 2025.0
TABLE_START_YEAR: Final[float] = 1620.0
TABLE_END_YEAR: Final[float] = 2011.0
STEPHENSON_MORRISON_START: Final[float] = 948.0
ATOMIC_TIME_YEAR: Final[float] = 1955.0
# Secular tidal acceleration of the Moon (arcsec/century^2) assumed by the table.
LUNAR_NDOT: Final[float] = -25.8

# ΔT in centiseconds, one entry per year from 1620 (Stephenson & Morrison /
# Astronomical Almanac).
_DELTA_T_TABLE: Final[tuple[int, ...]] = (
    12400, 11900, 11500, 11000, 10600, 10200, 9800, 9500, 9100, 8800, 8500, 8200, 7900,
    7700, 7400, 7200, 7000, 6700, 6500, 6300, 6200, 6000, 5800, 5700, 5500, 5400, 5300,
    5100, 5000, 4900, 4800, 4700, 4600, 4500, 4400, 4300, 4200, 4100, 4000, 3800, 3700,
    3600, 3500, 3400, 3300, 3200, 3100, 3000, 2800, 2700, 2600, 2500, 2400, 2300, 2200,
    2100, 2000, 1900, 1800, 1700, 1600, 1500, 1400, 1400, 1300, 1200, 1200, 1100, 1100,
    1000, 1000, 1000, 900, 900, 900, 900, 900, 900, 900, 900, 900, 900, 900, 900, 900,
    900, 900, 900, 1000, 1000, 1000, 1000, 1000, 1000, 1000, 1000, 1000, 1100, 1100,
    1100, 1100, 1100, 1100, 1100, 1100, 1100, 1100, 1100, 1100, 1100, 1100, 1100, 1100,
    1100, 1200, 1200, 1200, 1200, 1200, 1200, 1200, 1200, 1200, 1200, 1300, 1300, 1300,
    1300, 1300, 1300, 1300, 1400, 1400, 1400, 1400, 1400, 1400, 1400, 1500, 1500, 1500,
    1500, 1500, 1500, 1500, 1600, 1600, 1600, 1600, 1600, 1600, 1600, 1600, 1600, 1600,
    1700, 1700, 1700, 1700, 1700, 1700, 1700, 1700, 1700, 1700, 1700, 1700, 1700, 1700,
    1700, 1700, 1700, 1600, 1600, 1600, 1600, 1500, 1500, 1400, 1400, 1370, 1340, 1310,
    1290, 1270, 1260, 1250, 1250, 1250, 1250, 1250, 1250, 1250, 1250, 1250, 1250, 1250,
    1240, 1230, 1220, 1200, 1170, 1140, 1110, 1060, 1020, 960, 910, 860, 800, 750, 700,
    660, 630, 600, 580, 570, 560, 560, 560, 570, 580, 590, 610, 620, 630, 650, 660,
    680, 690, 710, 720, 730, 740, 750, 760, 770, 770, 780, 780, 788, 782, 754, 697,
    640, 602, 541, 410, 292, 182, 161, 10, -102, -128, -269, -324, -364, -454, -471,
    -511, -540, -542, -520, -546, -546, -579, -563, -564, -580, -566, -587, -601, -619,
    -664, -644, -647, -609, -576, -466, -374, -272, -154, -2, 124, 264, 386, 537, 614,
    775, 913, 1046, 1153, 1336, 1465, 1601, 1720, 1824, 1906, 2025, 2095, 2116, 2225,
    2241, 2303, 2349, 2362, 2386, 2449, 2434, 2408, 2402, 2400, 2387, 2395, 2386, 2393,
    2373, 2392, 2396, 2402, 2433, 2483, 2530, 2570, 2624, 2677, 2728, 2778, 2825, 2871,
    2915, 2957, 2997, 3036, 3072, 3107, 3135, 3168, 3218, 3268, 3315, 3359, 3400, 3447,
    3503, 3573, 3654, 3743, 3829, 3920, 4018, 4117, 4223, 4337, 4449, 4548, 4646, 4752,
    4853, 4959, 5054, 5138, 5217, 5296, 5379, 5434, 5487, 5532, 5582, 5630, 5686, 5757,
    5831, 5912, 5998, 6078, 6163, 6230, 6296, 6347, 6383, 6409, 6430, 6447, 6457, 6469,
    6485, 6515, 6546, 6570, 6650, 6710,
)
_TABLE_SIZE: Final[int] = len(_DELTA_T_TABLE)


@dataclass(frozen=True, slots=True)
class _Fit:
    """Polynomial fit valid from ``start`` (fractional year) onwards.

    ``coefficients`` are ordered from the highest power down to the
    constant term; ``argument`` selects whether the polynomial is evaluated
    in Modified Julian Day or in fractional year.
    """

    start: float
    argument: str
    coefficients: tuple[float, ...]

    def evaluate(self, year: float, mjd: float) -> float:
        x = mjd if self.argument == "mjd" else year
        degree = len(self.coefficients) - 1
        return sum(
            coefficient * x ** (degree - index)
            for index, coefficient in enumerate(self.coefficients)
        )


# Most recent band first; the first band whose start is reached wins.
_RECENT_FITS: Final[tuple[_Fit, ...]] = (
    _Fit(
        2023.6,
        "mjd",
        (
            -8.3655273366064300e-09,
            +1.5133847966003900e-03,
            -9.1260465097482900e01,
            +1.8344658890493000e06,
        ),
    ),
    _Fit(
        2022.55,
        "mjd",
        (
            -0.000000000000528908084762244,
            +0.000000158529137391645,
            -0.0190063060965729,
            +1139.34719487418,
            -34149488.355673,
            +409422822837.639,
        ),
    ),
    _Fit(
        2021.79,
        "mjd",
        (
            0.000000000000926333089959963,
            -0.000000276351646101278,
            0.0329773938043592,
            -1967.61450470546,
            58699325.5212533,
            -700463653286.072,
        ),
    ),
    _Fit(
        2020.79,
        "mjd",
        (
            0.0000000000526391114738186,
            -0.0000124987447353606,
            1.1128953517557,
            -44041.1402447551,
            653571203.42671,
        ),
    ),
    _Fit(
        2020.5,
        "mjd",
        (
            0.0000000000234066661113585,
            -0.00000555556956413194,
            0.494477925757861,
            -19560.53496991,
            290164271.563078,
        ),
    ),
    _Fit(2018.3, "mjd", (0.00000161128367083801, -0.187474214389602, 5522.26034874982)),
    _Fit(
        2018.0,
        "year",
        (0.0024855297566049, -15.0681141702439, 30449.647471213, -20511035.5077593),
    ),
    _Fit(2017.0, "year", (0.02465436, -98.92626556, 99301.85784308)),
    _Fit(2015.75, "year", (0.02002376, -80.27921003, 80529.32)),
    _Fit(2011.75, "year", (0.00231189, -8.85231952, 8518.54)),
)


def fractional_year(jd: float) -> float:
    """Return the approximate fractional year for the Julian date ``jd``."""

    return 2000.0 + (jd - J2000) / TROPICAL_YEAR_DAYS


def _recent_fit(year: float, mjd: float) -> float:
    for fit in _RECENT_FITS:
        if year >= fit.start:
            return fit.evaluate(year, mjd)
    # 2011.0 <= year < 2011.75: NASA (Espenak & Meeus) polynomial.
    b = year - 2000.0
    return 62.92 + b * (0.32217 + b * 0.005589)


def _besselian(year: float) -> float:
    """Interpolate :data:`_DELTA_T_TABLE` in centiseconds (AA page K11).

    Higher difference orders are dropped where the table runs out.
    """

    table = _DELTA_T_TABLE
    start = math.floor(year)
    iy = int(start - TABLE_START_YEAR)
    value = float(table[iy])
    if iy + 1 >= _TABLE_SIZE:
        return value

    p = year - start
    value += p * (table[iy + 1] - table[iy])
    if iy - 1 < 0 or iy + 2 >= _TABLE_SIZE:
        return value

    d = []
    for k in range(iy - 2, iy + 3):
        if k < 0 or k + 1 >= _TABLE_SIZE:
            d.append(0)
        else:
            d.append(table[k + 1] - table[k])

    for i in range(4):
        d[i] = d[i + 1] - d[i]
    b = 0.25 * p * (p - 1.0)
    value += b * (d[1] + d[2])

    for i in range(3):
        d[i] = d[i + 1] - d[i]
    b = 2.0 * b / 3.0
    value += (p - 0.5) * b * d[1]
    if iy - 2 < 0 or iy + 3 > _TABLE_SIZE:
        return value

    for i in range(2):
        d[i] = d[i + 1] - d[i]
    b = 0.125 * b * (p + 1.0) * (p - 2.0)
    value += b * (d[0] + d[1])
    return value


def _tabulated(year: float) -> float:
    value = 0.01 * _besselian(year)
    if year < ATOMIC_TIME_YEAR:
        # Entries before 1955 predate atomic time and assume a different
        # lunar secular acceleration (AA page K8).
        b = year - ATOMIC_TIME_YEAR
        value += -0.000091 * (LUNAR_NDOT + 26.0) * b * b
    return value


def _historical(year: float) -> float:
    if year >= STEPHENSON_MORRISON_START:
        b = 0.01 * (year - 2000.0)
        return (23.58 * b + 100.3) * b + 101.6
    b = 0.01 * (year - 2000.0) + 3.75
    return 35.0 * b * b + 40.0


class DeltaTModel:
    """Compute ΔT = TT - UT in seconds for a UTC Julian date.

    Parameters
    ----------
    leap_seconds:
        TAI - UTC used when ``source`` cannot answer for dates from 2025
        onwards.
    source:
        Leap-second authority queried for the current UTC date. Defaults to
        :class:`~astroalmanac.core.leapseconds.ErfaLeapSecondSource`.
    clock:
        Callable returning "now"; injected so tests can pin the date.
    logger:
        Logger used to report leap-second fallbacks.
    """

    def __init__(
        self,
        leap_seconds: float = DEFAULT_LEAP_SECONDS,
        *,
        source: LeapSecondSource | None = None,
        clock: Callable[[], _dt.datetime] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._leap_seconds = self._validated(leap_seconds)
        self.source: LeapSecondSource = source if source is not None else ErfaLeapSecondSource()
        self._clock = clock or (lambda: _dt.datetime.now(_dt.UTC))
        self._log = logger or LOG

    @staticmethod
    def _validated(value: float) -> float:
        try:
            numeric = float(value)
        except (TypeError, ValueError) as exc:
            raise InvalidArgumentError(f"Leap seconds must be a number, got {value!r}") from exc
        if not math.isfinite(numeric) or numeric < 0:
            raise InvalidArgumentError(
                f"Leap seconds must be finite and non-negative, got {value!r}"
            )
        return numeric

    @property
    def leap_seconds(self) -> float:
        """Configured TAI - UTC fallback value."""

        return self._leap_seconds

    def set_leap_seconds(self, value: float) -> None:
        """Override the configured leap-second count."""

        self._leap_seconds = self._validated(value)

    def current_leap_seconds(self) -> float:
        """Return TAI - UTC for today, falling back to :attr:`leap_seconds`."""

        now = self._clock()
        try:
            return float(self.source.leap_seconds_at(now))
        except Exception as exc:
            self._log.warning(
                "Leap-second lookup failed (%s); using configured value %.1f",
                exc,
                self._leap_seconds,
            )
            return self._leap_seconds

    def delta_t(self, jd_utc: float) -> float:
        """Return ΔT in seconds for the UTC Julian date ``jd_utc``."""

        year = fractional_year(jd_utc)
        mjd = jd_utc - MJD_OFFSET

        if year >= LEAP_SECOND_YEAR:
            return self.current_leap_seconds() + TT_TAI_OFFSET
        if year >= TABLE_END_YEAR:
            return _recent_fit(year, mjd)
        if year >= TABLE_START_YEAR:
            return _tabulated(year)
        return _historical(year)

    __call__ = delta_t


_DEFAULT_MODEL: DeltaTModel | None = None


def default_model() -> DeltaTModel:
    """Return the lazily created model used by :func:`delta_t`."""

    global _DEFAULT_MODEL
    if _DEFAULT_MODEL is None:
        _DEFAULT_MODEL = DeltaTModel()
    return _DEFAULT_MODEL


def delta_t(jd_utc: float) -> float:
    """Return ΔT in seconds using the default model."""

    return default_model().delta_t(jd_utc)


def set_leap_seconds(value: float) -> None:
    """Override the leap-second count of the default model."""

    default_model().set_leap_seconds(value)

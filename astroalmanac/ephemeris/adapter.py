"""Ephemeris provider contract and the Swiss Ephemeris implementation."""

from __future__ import annotations

import importlib
import importlib.util
import logging
import math
import os
from collections import OrderedDict
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final, Protocol, runtime_checkable

from ..core.bodies import AU_KM, Body
from ..errors import UpstreamFailureError
from ..observability import COMPUTE_ERRORS, EPHEMERIS_CACHE_HITS

__all__ = [
    "EphemerisConfig",
    "EphemerisProvider",
    "EquatorialPlace",
    "SwissEphemerisProvider",
    "has_swisseph",
    "refraction_standard",
]

LOG = logging.getLogger(__name__)

_swe_mod: Any | None = None

# Standard atmosphere assumed by the NOVAS ``refract`` routine.
STANDARD_PRESSURE_HPA: Final[float] = 1010.0
STANDARD_TEMPERATURE_C: Final[float] = 10.0
_SCALE_HEIGHT_M: Final[float] = 9100.0


def _load_swisseph() -> Any:
    global _swe_mod
    if _swe_mod is None:
        try:
            _swe_mod = importlib.import_module("swisseph")
        except ImportError as exc:  # pragma: no cover - import errors depend on env
            raise UpstreamFailureError(
                "Swiss Ephemeris not available. Install pyswisseph (package: 'pyswisseph') "
                "or inject another EphemerisProvider."
            ) from exc
    return _swe_mod


def has_swisseph() -> bool:
    """Return ``True`` if pyswisseph is importable."""

    if _swe_mod is not None:
        return True
    return importlib.util.find_spec("swisseph") is not None


@dataclass(frozen=True, slots=True)
class EquatorialPlace:
    """Apparent geocentric place referred to the true equator and equinox of date."""

    ra_hours: float
    dec_deg: float
    distance_au: float

    @property
    def distance_km(self) -> float:
        return self.distance_au * AU_KM


@runtime_checkable
class EphemerisProvider(Protocol):
    """Positions, sidereal time and refraction needed by the altitude sampler."""

    def place(self, jd_tt: float, body: Body) -> EquatorialPlace:
        ...

    def sidereal_time(self, jd_ut: float, longitude_deg: float = 0.0) -> float:
        """Local apparent sidereal time in hours, in ``[0, 24)``."""
        ...

    def refraction(
        self, latitude_deg: float, longitude_deg: float, zenith_distance_deg: float
    ) -> float:
        """Refraction in degrees for an object at ``zenith_distance_deg``."""
        ...


def refraction_standard(zenith_distance_deg: float, height_m: float = 0.0) -> float:
    """Return standard-atmosphere refraction in degrees.

    Mirrors the NOVAS ``refract`` standard option: pressure 1010 hPa scaled
    for site height, temperature 10 °C, and zero outside ``0.1 <= zd <= 91``.
    """

    if zenith_distance_deg < 0.1 or zenith_distance_deg > 91.0:
        return 0.0
    pressure = STANDARD_PRESSURE_HPA * math.exp(-height_m / _SCALE_HEIGHT_M)
    altitude = 90.0 - zenith_distance_deg
    r = 0.016667 / math.tan(math.radians(altitude + 7.31 / (altitude + 4.4)))
    return r * (0.28 * pressure / (STANDARD_TEMPERATURE_C + 273.0))


@dataclass(frozen=True, slots=True)
class EphemerisConfig:
    """Configuration passed to :class:`SwissEphemerisProvider`."""

    ephemeris_path: str | None = None
    prefer_moshier: bool = False
    cache_size: int = 256


class SwissEphemerisProvider:
    """:class:`EphemerisProvider` backed by :mod:`swisseph`.

    Positions come from the Swiss Ephemeris data files when a path is
    configured (``ephemeris_path``, ``SE_EPHE_PATH`` or
    ``ASTROALMANAC_EPHEMERIS_PATH``), otherwise from the built-in Moshier
    theory.  Adjacent almanac windows share their boundary samples, so
    places are memoised in a small LRU cache.
    """

    def __init__(self, config: EphemerisConfig | None = None) -> None:
        self._config = config or EphemerisConfig()
        self._cache: OrderedDict[tuple[float, int], EquatorialPlace] = OrderedDict()
        self._use_files = self._probe_path()

    @property
    def config(self) -> EphemerisConfig:
        return self._config

    def _probe_path(self) -> bool:
        if self._config.prefer_moshier:
            return False

        candidate = None
        if self._config.ephemeris_path:
            candidate = Path(self._config.ephemeris_path)
        else:
            for env_var in ("SE_EPHE_PATH", "ASTROALMANAC_EPHEMERIS_PATH"):
                value = os.environ.get(env_var)
                if value:
                    candidate = Path(value)
                    break

        if candidate is None:
            LOG.debug("No Swiss Ephemeris path configured; using Moshier theory")
            return False
        if not candidate.exists():
            raise FileNotFoundError(
                f"Swiss Ephemeris path '{candidate}' does not exist. "
                "Set SE_EPHE_PATH or provide a valid EphemerisConfig.ephemeris_path."
            )
        _load_swisseph().set_ephe_path(str(candidate))
        LOG.debug("Swiss Ephemeris path configured: %s", candidate)
        return True

    def _flags(self, swe: Any) -> int:
        base = swe.FLG_SWIEPH if self._use_files else swe.FLG_MOSEPH
        return int(base | swe.FLG_EQUATORIAL)

    def place(self, jd_tt: float, body: Body) -> EquatorialPlace:
        key = (jd_tt, int(body))
        cached = self._cache.get(key)
        if cached is not None:
            EPHEMERIS_CACHE_HITS.inc()
            self._cache.move_to_end(key)
            return cached

        swe = _load_swisseph()
        try:
            xx, ret_flag = swe.calc(jd_tt, int(body), self._flags(swe))
        except Exception as exc:
            COMPUTE_ERRORS.labels(component="swiss_ephemeris", error=exc.__class__.__name__).inc()
            raise UpstreamFailureError(
                f"Swiss ephemeris failed for body {Body(body).name} at JD {jd_tt}: {exc}"
            ) from exc
        if ret_flag < 0:
            COMPUTE_ERRORS.labels(component="swiss_ephemeris", error="ret_flag").inc()
            raise UpstreamFailureError(f"Swiss ephemeris returned error code {ret_flag}")

        place = EquatorialPlace(ra_hours=xx[0] / 15.0, dec_deg=xx[1], distance_au=xx[2])
        if self._config.cache_size > 0:
            self._cache[key] = place
            if len(self._cache) > self._config.cache_size:
                self._cache.popitem(last=False)
        return place

    def sidereal_time(self, jd_ut: float, longitude_deg: float = 0.0) -> float:
        swe = _load_swisseph()
        try:
            gast = swe.sidtime(jd_ut)
        except Exception as exc:
            COMPUTE_ERRORS.labels(component="swiss_ephemeris", error=exc.__class__.__name__).inc()
            raise UpstreamFailureError(f"Swiss sidereal time failed at JD {jd_ut}: {exc}") from exc
        return (gast + longitude_deg / 15.0) % 24.0

    def refraction(
        self, latitude_deg: float, longitude_deg: float, zenith_distance_deg: float
    ) -> float:
        return refraction_standard(zenith_distance_deg)

    def clear_cache(self) -> None:
        self._cache.clear()

"""Altitude samples of a body above the observer's horizon.

The sampler converts a (local-midnight Julian date, hour offset) pair into
an apparent altitude using an injected :class:`EphemerisProvider`, then
applies the per-event correction that moves the crossing threshold to zero:

============  =========================================================
Event         Corrected altitude
============  =========================================================
Moon          alt - horizontal parallax + semi-diameter + refraction
Sun           alt + 50'
Twilight      alt - twilight depth
Planet        alt + refraction + semi-diameter
============  =========================================================
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from ...core.bodies import BODY_RADIUS_KM, EARTH_RADIUS_KM, Body, EventType
from ...core.deltat import DeltaTModel, default_model
from ...core.time import SECONDS_PER_DAY
from ...ephemeris.adapter import EphemerisProvider, EquatorialPlace
from ...errors import UpstreamFailureError
from ...observability import COMPUTE_ERRORS, EPHEMERIS_QUERIES

__all__ = ["BodyAltitudeSampler", "BodySample", "horizontal_altitude"]

LOG = logging.getLogger(__name__)

RAD2DEG = 180.0 / math.pi


@dataclass(frozen=True, slots=True)
class BodySample:
    """Uncorrected altitude of a body together with its size and distance."""

    altitude_deg: float
    distance_km: float
    radius_km: float

    @property
    def semi_diameter_deg(self) -> float:
        return RAD2DEG * self.radius_km / self.distance_km


def horizontal_altitude(
    latitude_deg: float, declination_deg: float, hour_angle_deg: float
) -> float:
    """Return altitude in degrees from latitude, declination and hour angle."""

    phi = math.radians(latitude_deg)
    delta = math.radians(declination_deg)
    tau = math.radians(hour_angle_deg)
    sin_alt = math.sin(phi) * math.sin(delta) + math.cos(phi) * math.cos(delta) * math.cos(tau)
    return math.degrees(math.asin(max(-1.0, min(1.0, sin_alt))))


class BodyAltitudeSampler:
    """Sample corrected altitudes for an :class:`EventType`."""

    def __init__(
        self,
        provider: EphemerisProvider,
        delta_t_model: DeltaTModel | None = None,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self.provider = provider
        self.delta_t_model = delta_t_model or default_model()
        self._log = logger or LOG

    def horizon_refraction(self, latitude_deg: float, longitude_deg: float) -> float:
        """Refraction at the true horizon for the site."""

        return self._call(
            "refraction", self.provider.refraction, latitude_deg, longitude_deg, 90.0
        )

    def place(self, jd_tt: float, body: Body) -> EquatorialPlace:
        """Geocentric place of ``body`` at ``jd_tt``; provider errors become upstream failures."""

        return self._call("place", self.provider.place, jd_tt, body)

    def sample(
        self,
        body: Body,
        jd: float,
        hour: float,
        latitude_deg: float,
        longitude_deg: float,
        *,
        delta_t_seconds: float | None = None,
    ) -> BodySample:
        """Return the uncorrected sample ``hour`` hours after ``jd``.

        ΔT is evaluated for ``jd`` itself rather than for the sampled instant.
        """

        if delta_t_seconds is None:
            delta_t_seconds = self.delta_t_model.delta_t(jd)
        instant = jd + hour / 24.0
        place = self.place(instant + delta_t_seconds / SECONDS_PER_DAY, body)
        lst = self._call("sidereal_time", self.provider.sidereal_time, instant, longitude_deg)
        hour_angle = 15.0 * (lst - place.ra_hours)
        altitude = horizontal_altitude(latitude_deg, place.dec_deg, hour_angle)
        return BodySample(
            altitude_deg=altitude,
            distance_km=place.distance_km,
            radius_km=BODY_RADIUS_KM[body],
        )

    def window(
        self,
        event: EventType,
        jd: float,
        centre_hour: float,
        latitude_deg: float,
        longitude_deg: float,
        refraction_deg: float,
    ) -> tuple[float, float, float]:
        """Return corrected altitudes at ``centre_hour`` - 1, ``centre_hour`` and + 1."""

        body = event.body
        delta_t_seconds = self.delta_t_model.delta_t(jd)
        minus, centre, plus = (
            self.sample(
                body,
                jd,
                centre_hour + offset,
                latitude_deg,
                longitude_deg,
                delta_t_seconds=delta_t_seconds,
            )
            for offset in (-1.0, 0.0, 1.0)
        )
        return (
            self.corrected(event, minus, refraction_deg, reference=centre),
            self.corrected(event, centre, refraction_deg, reference=centre),
            self.corrected(event, plus, refraction_deg, reference=centre),
        )

    @staticmethod
    def corrected(
        event: EventType,
        sample: BodySample,
        refraction_deg: float,
        *,
        reference: BodySample | None = None,
    ) -> float:
        """Shift ``sample`` so that the event threshold sits at zero altitude.

        Planets use the semi-diameter of ``reference`` (the window centre)
        for all three samples of a window.
        """

        altitude = sample.altitude_deg
        body = event.body
        if body is Body.SUN:
            # Sun rise/set and every twilight band use a fixed threshold.
            return altitude - event.threshold_deg
        if body is Body.MOON:
            return (
                altitude
                - EARTH_RADIUS_KM * RAD2DEG / sample.distance_km
                + sample.radius_km * RAD2DEG / sample.distance_km
                + refraction_deg
            )
        size = reference if reference is not None else sample
        return altitude + refraction_deg + size.semi_diameter_deg

    def _call(self, operation: str, func, *args):
        EPHEMERIS_QUERIES.labels(operation=operation).inc()
        try:
            return func(*args)
        except UpstreamFailureError as exc:
            COMPUTE_ERRORS.labels(component="altitude_sampler", error=exc.__class__.__name__).inc()
            raise
        except Exception as exc:
            COMPUTE_ERRORS.labels(component="altitude_sampler", error=exc.__class__.__name__).inc()
            self._log.debug("Ephemeris %s failed: %s", operation, exc)
            raise UpstreamFailureError(f"Ephemeris {operation} failed: {exc}") from exc

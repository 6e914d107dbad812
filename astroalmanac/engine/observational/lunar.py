"""Lunar phase angle and illuminated fraction (Meeus, *Astronomical Algorithms*, ch. 48)."""

from __future__ import annotations

import math

from ...core.bodies import Body
from ...core.deltat import DeltaTModel
from ...core.time import SECONDS_PER_DAY
from ...ephemeris.adapter import EphemerisProvider, EquatorialPlace
from .events import default_solver
from .sampler import BodyAltitudeSampler

__all__ = ["moon_illumination", "moon_phase"]


def _sun_and_moon(
    jd_utc: float,
    provider: EphemerisProvider | None,
    delta_t_model: DeltaTModel | None,
) -> tuple[EquatorialPlace, EquatorialPlace]:
    sampler = BodyAltitudeSampler(provider or default_solver().provider, delta_t_model)
    jd_tt = jd_utc + sampler.delta_t_model.delta_t(jd_utc) / SECONDS_PER_DAY
    return sampler.place(jd_tt, Body.SUN), sampler.place(jd_tt, Body.MOON)


def moon_illumination(
    jd_utc: float,
    *,
    provider: EphemerisProvider | None = None,
    delta_t_model: DeltaTModel | None = None,
) -> float:
    """Return the illuminated fraction of the Moon's disc (0 to 1)."""

    sun, moon = _sun_and_moon(jd_utc, provider, delta_t_model)
    dec_s = math.radians(sun.dec_deg)
    dec_m = math.radians(moon.dec_deg)
    elongation = math.acos(
        max(
            -1.0,
            min(
                1.0,
                math.sin(dec_s) * math.sin(dec_m)
                + math.cos(dec_s)
                * math.cos(dec_m)
                * math.cos(math.radians((sun.ra_hours - moon.ra_hours) * 15.0)),
            ),
        )
    )
    phase_angle = math.atan2(
        sun.distance_au * math.sin(elongation),
        moon.distance_au - sun.distance_au * math.cos(elongation),
    )
    return (1.0 + math.cos(phase_angle)) / 2.0


def moon_phase(
    jd_utc: float,
    *,
    provider: EphemerisProvider | None = None,
    delta_t_model: DeltaTModel | None = None,
) -> float:
    """Return the Moon-Sun right ascension difference in degrees, in ``(-180, 180]``.

    0 is new Moon, +90 first quarter, 180 full Moon and -90 last quarter.
    """

    sun, moon = _sun_and_moon(jd_utc, provider, delta_t_model)
    angle = ((moon.ra_hours - sun.ra_hours) * 15.0) % 360.0
    if angle > 180.0:
        angle -= 360.0
    return angle

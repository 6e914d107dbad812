"""Ephemeris providers."""

from __future__ import annotations

from .adapter import (
    EphemerisConfig,
    EphemerisProvider,
    EquatorialPlace,
    SwissEphemerisProvider,
    has_swisseph,
    refraction_standard,
)

__all__ = [
    "EphemerisConfig",
    "EphemerisProvider",
    "EquatorialPlace",
    "SwissEphemerisProvider",
    "has_swisseph",
    "refraction_standard",
]

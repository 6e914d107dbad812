"""Utilities shared across the test suites."""

from .ephemeris import (
    HORIZON_REFRACTION,
    MOON_DISTANCE_AU,
    FakeProvider,
    RaisingLeapSource,
)

__all__ = ["FakeProvider", "HORIZON_REFRACTION", "MOON_DISTANCE_AU", "RaisingLeapSource"]

"""Runtime observability primitives."""

from __future__ import annotations

from .metrics import (
    ALMANAC_CELLS,
    ALMANAC_DURATION,
    COMPUTE_ERRORS,
    EPHEMERIS_CACHE_HITS,
    EPHEMERIS_QUERIES,
    ensure_metrics_registered,
)

__all__ = [
    "ALMANAC_CELLS",
    "ALMANAC_DURATION",
    "COMPUTE_ERRORS",
    "EPHEMERIS_CACHE_HITS",
    "EPHEMERIS_QUERIES",
    "ensure_metrics_registered",
]

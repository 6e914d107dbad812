"""Prometheus metrics for ephemeris access and almanac generation.

Metrics are created unregistered; applications that expose a scrape
endpoint call :func:`ensure_metrics_registered` once at start-up.
"""

from __future__ import annotations

from collections.abc import Iterable

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Histogram

__all__ = [
    "ALMANAC_CELLS",
    "ALMANAC_DURATION",
    "COMPUTE_ERRORS",
    "EPHEMERIS_CACHE_HITS",
    "EPHEMERIS_QUERIES",
    "ensure_metrics_registered",
]


EPHEMERIS_QUERIES = Counter(
    "astroalmanac_ephemeris_queries_total",
    "Ephemeris provider calls issued by the altitude sampler.",
    ("operation",),
    registry=None,
)

EPHEMERIS_CACHE_HITS = Counter(
    "astroalmanac_ephemeris_cache_hits_total",
    "Swiss Ephemeris positions served from the in-memory cache.",
    registry=None,
)

COMPUTE_ERRORS = Counter(
    "astroalmanac_compute_errors_total",
    "Count of runtime failures across compute routines.",
    ("component", "error"),
    registry=None,
)

ALMANAC_CELLS = Counter(
    "astroalmanac_cells_total",
    "Almanac day/month cells rendered, by outcome.",
    ("outcome",),
    registry=None,
)

ALMANAC_DURATION = Histogram(
    "astroalmanac_duration_seconds",
    "Wall time spent building a full-year almanac table.",
    ("event",),
    registry=None,
)


def _iter_metrics() -> Iterable[Counter | Histogram]:
    yield EPHEMERIS_QUERIES
    yield EPHEMERIS_CACHE_HITS
    yield COMPUTE_ERRORS
    yield ALMANAC_CELLS
    yield ALMANAC_DURATION


def ensure_metrics_registered(
    registry: CollectorRegistry | None = None,
) -> None:
    """Register the metrics with ``registry`` if not already present."""

    target = registry or REGISTRY
    for metric in _iter_metrics():
        try:
            target.register(metric)
        except ValueError:
            # Already registered under this name.
            continue

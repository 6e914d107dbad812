from __future__ import annotations

from prometheus_client import CollectorRegistry

from astroalmanac.core.bodies import EventType
from astroalmanac.engine.observational.almanac import AlmanacFormatter
from astroalmanac.observability import ensure_metrics_registered


def test_ensure_metrics_registered_is_idempotent():
    registry = CollectorRegistry()
    ensure_metrics_registered(registry)
    ensure_metrics_registered(registry)
    names = {metric.name for metric in registry.collect()}
    assert {
        "astroalmanac_ephemeris_queries",
        "astroalmanac_ephemeris_cache_hits",
        "astroalmanac_compute_errors",
        "astroalmanac_cells",
        "astroalmanac_duration_seconds",
    } <= names


def test_almanac_counts_cells_by_outcome(make_solver):
    registry = CollectorRegistry()
    ensure_metrics_registered(registry)

    def sample(outcome: str) -> float:
        return registry.get_sample_value("astroalmanac_cells_total", {"outcome": outcome}) or 0.0

    events_before, skipped_before = sample("events"), sample("skipped")
    AlmanacFormatter(make_solver(dec_deg=10.0)).table(EventType.SUN_RISE_SUNSET, 2013, 0.0, 0.0, 0.0)
    # 2013 has 365 days; the remaining 7 cells of the 31x12 grid are impossible dates.
    assert sample("events") - events_before == 365
    assert sample("skipped") - skipped_before == 7

    count = registry.get_sample_value(
        "astroalmanac_duration_seconds_count", {"event": "SunRiseSunset"}
    )
    assert count is not None and count >= 1

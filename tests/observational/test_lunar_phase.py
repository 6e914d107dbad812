from __future__ import annotations

import math

import pytest
from prometheus_client import CollectorRegistry

from astroalmanac.core.bodies import Body
from astroalmanac.engine.observational.lunar import moon_illumination, moon_phase
from astroalmanac.ephemeris.adapter import EquatorialPlace
from astroalmanac.errors import UpstreamFailureError
from astroalmanac.observability import ensure_metrics_registered
from tests.helpers import MOON_DISTANCE_AU, FakeProvider

JD = 2455927.5


def _sky(sun_ra: float, moon_ra: float, moon_dec: float = 0.0) -> FakeProvider:
    provider = FakeProvider()
    provider.places[Body.SUN] = EquatorialPlace(sun_ra, 0.0, 1.0)
    provider.places[Body.MOON] = EquatorialPlace(moon_ra, moon_dec, MOON_DISTANCE_AU)
    return provider


@pytest.mark.parametrize(
    "sun_ra, moon_ra, expected",
    [
        (0.0, 0.0, 0.0),
        (0.0, 6.0, 90.0),
        (0.0, 12.0, 180.0),
        (0.0, 18.0, -90.0),
        (23.0, 1.0, 30.0),
        (1.0, 23.0, -30.0),
    ],
)
def test_moon_phase(sun_ra, moon_ra, expected, delta_t_model):
    phase = moon_phase(JD, provider=_sky(sun_ra, moon_ra), delta_t_model=delta_t_model)
    assert phase == pytest.approx(expected)


def test_full_moon_is_fully_lit(delta_t_model):
    value = moon_illumination(JD, provider=_sky(0.0, 12.0), delta_t_model=delta_t_model)
    assert value == pytest.approx(1.0)


def test_new_moon_is_dark(delta_t_model):
    value = moon_illumination(JD, provider=_sky(0.0, 0.0), delta_t_model=delta_t_model)
    assert value == pytest.approx(0.0, abs=1e-9)


def test_quarter_moon_is_half_lit(delta_t_model):
    value = moon_illumination(JD, provider=_sky(0.0, 6.0), delta_t_model=delta_t_model)
    # The Sun's finite distance tips the phase angle just under 90 degrees.
    assert value == pytest.approx(0.5013, abs=0.01)
    assert value > 0.5


def test_places_are_requested_in_terrestrial_time(delta_t_model):
    provider = _sky(0.0, 6.0)
    moon_phase(JD, provider=provider, delta_t_model=delta_t_model)
    expected = JD + delta_t_model.delta_t(JD) / 86_400.0
    assert [body for _, body in provider.place_calls] == [Body.SUN, Body.MOON]
    assert all(jd == pytest.approx(expected) for jd, _ in provider.place_calls)


def test_provider_failure_surfaces_as_upstream_error(delta_t_model):
    registry = CollectorRegistry()
    ensure_metrics_registered(registry)
    errors = {"component": "altitude_sampler", "error": "RuntimeError"}
    queries = {"operation": "place"}
    errors_before = registry.get_sample_value("astroalmanac_compute_errors_total", errors) or 0.0
    queries_before = (
        registry.get_sample_value("astroalmanac_ephemeris_queries_total", queries) or 0.0
    )

    provider = FakeProvider(fail_between=(0.0, math.inf))
    with pytest.raises(UpstreamFailureError) as excinfo:
        moon_phase(JD, provider=provider, delta_t_model=delta_t_model)

    assert isinstance(excinfo.value.__cause__, RuntimeError)
    assert registry.get_sample_value("astroalmanac_compute_errors_total", errors) == errors_before + 1.0
    assert (
        registry.get_sample_value("astroalmanac_ephemeris_queries_total", queries)
        == queries_before + 1.0
    )


def test_illumination_counts_both_places(delta_t_model):
    registry = CollectorRegistry()
    ensure_metrics_registered(registry)
    labels = {"operation": "place"}
    before = registry.get_sample_value("astroalmanac_ephemeris_queries_total", labels) or 0.0
    moon_illumination(JD, provider=_sky(0.0, 12.0), delta_t_model=delta_t_model)
    assert registry.get_sample_value("astroalmanac_ephemeris_queries_total", labels) == before + 2.0

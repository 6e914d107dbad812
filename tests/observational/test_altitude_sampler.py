from __future__ import annotations

import math

import pytest
from prometheus_client import CollectorRegistry

from astroalmanac.core.bodies import AU_KM, BODY_RADIUS_KM, Body, EventType
from astroalmanac.engine.observational.sampler import (
    BodyAltitudeSampler,
    BodySample,
    horizontal_altitude,
)
from astroalmanac.ephemeris.adapter import EquatorialPlace
from astroalmanac.errors import UpstreamFailureError
from astroalmanac.observability import ensure_metrics_registered
from tests.helpers import HORIZON_REFRACTION, MOON_DISTANCE_AU, FakeProvider

JD_2012 = 2455927.5
RAD2DEG = 180.0 / math.pi


@pytest.fixture
def sampler(fake_provider, delta_t_model) -> BodyAltitudeSampler:
    return BodyAltitudeSampler(fake_provider, delta_t_model)


@pytest.mark.parametrize(
    "lat, dec, tau, expected",
    [
        (0.0, 0.0, 0.0, 90.0),
        (0.0, 10.0, 0.0, 80.0),
        (45.0, 10.0, 0.0, 55.0),
        (0.0, 0.0, 90.0, 0.0),
        (80.0, 20.0, 180.0, 10.0),
        (-30.0, -30.0, 0.0, 90.0),
    ],
)
def test_horizontal_altitude(lat, dec, tau, expected):
    assert horizontal_altitude(lat, dec, tau) == pytest.approx(expected, abs=1e-9)


def test_sample_at_culmination(sampler):
    sample = sampler.sample(Body.SUN, JD_2012, 12.0, 0.0, 0.0)
    assert sample.altitude_deg == pytest.approx(80.0, abs=1e-6)
    assert sample.distance_km == pytest.approx(AU_KM)
    assert sample.radius_km == BODY_RADIUS_KM[Body.SUN]


def test_sample_queries_place_in_terrestrial_time(fake_provider, delta_t_model, sampler):
    sampler.sample(Body.MARS, JD_2012, 6.0, 0.0, 0.0)
    (jd_tt, body), = fake_provider.place_calls
    expected = JD_2012 + 6.0 / 24.0 + delta_t_model.delta_t(JD_2012) / 86_400.0
    assert body is Body.MARS
    assert jd_tt == pytest.approx(expected, abs=1e-9)
    assert fake_provider.sidereal_calls == pytest.approx([JD_2012 + 0.25], abs=1e-9)


def test_sample_uses_supplied_delta_t(fake_provider, sampler):
    sampler.sample(Body.SUN, JD_2012, 0.0, 0.0, 0.0, delta_t_seconds=86_400.0)
    assert fake_provider.place_calls[0][0] == pytest.approx(JD_2012 + 1.0)


def test_longitude_shifts_local_sidereal_time(sampler):
    # 90 degrees east moves culmination six hours earlier in UT.
    sample = sampler.sample(Body.SUN, JD_2012, 6.0, 0.0, 90.0)
    assert sample.altitude_deg == pytest.approx(80.0, abs=1e-6)


def test_sun_correction_is_fixed_threshold():
    sample = BodySample(altitude_deg=-1.0, distance_km=AU_KM, radius_km=696_342.0)
    value = BodyAltitudeSampler.corrected(EventType.SUN_RISE_SUNSET, sample, 0.57)
    assert value == pytest.approx(-1.0 + 50.0 / 60.0)


@pytest.mark.parametrize(
    "event, depth",
    [
        (EventType.CIVIL_TWILIGHT, 6.0),
        (EventType.NAUTICAL_TWILIGHT, 12.0),
        (EventType.AMATEUR_ASTRONOMICAL_TWILIGHT, 15.0),
        (EventType.ASTRONOMICAL_TWILIGHT, 18.0),
    ],
)
def test_twilight_correction_adds_depth(event, depth):
    sample = BodySample(altitude_deg=-10.0, distance_km=AU_KM, radius_km=696_342.0)
    assert BodyAltitudeSampler.corrected(event, sample, 0.57) == pytest.approx(-10.0 + depth)


def test_moon_correction_applies_parallax_semidiameter_and_refraction():
    distance = MOON_DISTANCE_AU * AU_KM
    sample = BodySample(altitude_deg=0.0, distance_km=distance, radius_km=1737.0)
    value = BodyAltitudeSampler.corrected(EventType.MOON_RISE_MOONSET, sample, HORIZON_REFRACTION)
    parallax = 6378.0 * RAD2DEG / distance
    semi_diameter = 1737.0 * RAD2DEG / distance
    assert value == pytest.approx(-parallax + semi_diameter + HORIZON_REFRACTION)
    assert value == pytest.approx(-0.9507 + 0.2589 + 0.5742, abs=1e-3)


def test_planet_correction_uses_reference_semidiameter():
    near = BodySample(altitude_deg=1.0, distance_km=1.0e8, radius_km=3396.2)
    far = BodySample(altitude_deg=2.0, distance_km=4.0e8, radius_km=3396.2)
    value = BodyAltitudeSampler.corrected(EventType.MARS_RISE_SET, far, 0.5, reference=near)
    assert value == pytest.approx(2.0 + 0.5 + near.semi_diameter_deg)
    alone = BodyAltitudeSampler.corrected(EventType.MARS_RISE_SET, far, 0.5)
    assert alone == pytest.approx(2.0 + 0.5 + far.semi_diameter_deg)


def test_window_returns_three_corrected_samples(sampler):
    minus, centre, plus = sampler.window(EventType.SUN_RISE_SUNSET, JD_2012, 5.0, 0.0, 0.0, 0.5)
    expected = [
        sampler.sample(Body.SUN, JD_2012, hour, 0.0, 0.0).altitude_deg + 50.0 / 60.0
        for hour in (4.0, 5.0, 6.0)
    ]
    assert [minus, centre, plus] == pytest.approx(expected)
    assert minus < 0.0 < plus


def test_window_evaluates_delta_t_once_per_window(fake_provider, delta_t_model):
    calls = []

    class Counting:
        def delta_t(self, jd):
            calls.append(jd)
            return delta_t_model.delta_t(jd)

    sampler = BodyAltitudeSampler(fake_provider, Counting())
    sampler.window(EventType.MARS_RISE_SET, JD_2012, 1.0, 0.0, 0.0, 0.5)
    assert calls == [JD_2012]
    assert len(fake_provider.place_calls) == 3


def test_window_uses_provider_place_per_body(fake_provider, sampler):
    fake_provider.places[Body.MOON] = EquatorialPlace(12.0, 0.0, MOON_DISTANCE_AU)
    _, centre, _ = sampler.window(
        EventType.MOON_RISE_MOONSET, JD_2012, 11.0, 0.0, 0.0, HORIZON_REFRACTION
    )
    assert fake_provider.place_calls[0][1] is Body.MOON
    assert centre == pytest.approx(75.0 - 0.9507 + 0.2589 + HORIZON_REFRACTION, abs=1e-3)


def test_horizon_refraction_comes_from_provider(sampler):
    assert sampler.horizon_refraction(10.0, 20.0) == pytest.approx(HORIZON_REFRACTION)


def test_provider_failure_is_wrapped_and_counted(delta_t_model):
    registry = CollectorRegistry()
    ensure_metrics_registered(registry)
    labels = {"component": "altitude_sampler", "error": "RuntimeError"}
    before = registry.get_sample_value("astroalmanac_compute_errors_total", labels) or 0.0

    provider = FakeProvider(fail_between=(0.0, math.inf))
    sampler = BodyAltitudeSampler(provider, delta_t_model)
    with pytest.raises(UpstreamFailureError) as excinfo:
        sampler.sample(Body.SUN, JD_2012, 1.0, 0.0, 0.0)

    assert isinstance(excinfo.value.__cause__, RuntimeError)
    after = registry.get_sample_value("astroalmanac_compute_errors_total", labels)
    assert after == before + 1.0


def test_queries_are_counted(sampler):
    registry = CollectorRegistry()
    ensure_metrics_registered(registry)
    labels = {"operation": "place"}
    before = registry.get_sample_value("astroalmanac_ephemeris_queries_total", labels) or 0.0
    sampler.sample(Body.SUN, JD_2012, 1.0, 0.0, 0.0)
    after = registry.get_sample_value("astroalmanac_ephemeris_queries_total", labels)
    assert after == before + 1.0

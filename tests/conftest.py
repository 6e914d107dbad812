from __future__ import annotations

import logging
from collections.abc import Iterable

import pytest

from astroalmanac.core.deltat import DeltaTModel
from astroalmanac.core.leapseconds import StaticLeapSecondSource
from astroalmanac.engine.observational.events import RiseSetSolver
from astroalmanac.ephemeris import has_swisseph
from tests.helpers import FakeProvider

LOG = logging.getLogger(__name__)

try:
    from hypothesis import settings as _hyp_settings
except ImportError:  # pragma: no cover - hypothesis optional
    LOG.debug("hypothesis not installed; property tests will be skipped")
else:
    _hyp_settings.register_profile("astroalmanac", deadline=None)
    _hyp_settings.load_profile("astroalmanac")


@pytest.fixture
def fake_provider() -> FakeProvider:
    return FakeProvider(dec_deg=10.0)


@pytest.fixture
def delta_t_model() -> DeltaTModel:
    return DeltaTModel(source=StaticLeapSecondSource(37.0))


@pytest.fixture
def make_solver(delta_t_model):
    def _make(provider: FakeProvider | None = None, **kwargs) -> RiseSetSolver:
        return RiseSetSolver(provider or FakeProvider(**kwargs), delta_t_model)

    return _make


@pytest.fixture(autouse=True)
def _isolated_config_home(tmp_path, monkeypatch):
    monkeypatch.setenv("ASTROALMANAC_HOME", str(tmp_path / "home"))
    monkeypatch.delenv("SE_EPHE_PATH", raising=False)
    monkeypatch.delenv("ASTROALMANAC_EPHEMERIS_PATH", raising=False)


def pytest_collection_modifyitems(config, items: Iterable[pytest.Item]) -> None:
    """Skip Swiss-marked tests when pyswisseph is not installed."""

    if has_swisseph():
        return
    skip_swiss = pytest.mark.skip(reason="Swiss Ephemeris unavailable (pyswisseph not installed).")
    for item in items:
        if "swiss" in item.keywords:
            item.add_marker(skip_swiss)

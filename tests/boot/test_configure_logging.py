from __future__ import annotations

import logging

import pytest

from astroalmanac.boot.logging import configure_logging, resolve_level


@pytest.fixture(autouse=True)
def _restore_root_logging():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, logging.WARNING),
        ("", logging.WARNING),
        ("debug", logging.DEBUG),
        (" Info ", logging.INFO),
        ("15", 15),
        (logging.ERROR, logging.ERROR),
        ("shouting", logging.WARNING),
    ],
)
def test_resolve_level(value, expected):
    assert resolve_level(value) == expected


def test_explicit_level_wins(monkeypatch):
    monkeypatch.setenv("ASTROALMANAC_LOG_LEVEL", "ERROR")
    assert configure_logging(level="DEBUG") == logging.DEBUG
    assert logging.getLogger().level == logging.DEBUG


def test_environment_levels(monkeypatch):
    monkeypatch.delenv("ASTROALMANAC_LOG_LEVEL", raising=False)
    monkeypatch.setenv("LOG_LEVEL", "INFO")
    assert configure_logging() == logging.INFO
    monkeypatch.setenv("ASTROALMANAC_LOG_LEVEL", "ERROR")
    assert configure_logging() == logging.ERROR


def test_default_is_warning(monkeypatch):
    monkeypatch.delenv("ASTROALMANAC_LOG_LEVEL", raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    assert configure_logging() == logging.WARNING

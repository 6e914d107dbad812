"""Configuration helpers exposed at :mod:`astroalmanac.config`."""

from __future__ import annotations

from .settings import (
    EphemerisCfg,
    LoggingCfg,
    Settings,
    SiteCfg,
    TimeCfg,
    build_delta_t_model,
    build_provider,
    config_path,
    default_settings,
    get_config_home,
    load_settings,
    save_settings,
)

__all__ = [
    "EphemerisCfg",
    "LoggingCfg",
    "Settings",
    "SiteCfg",
    "TimeCfg",
    "build_delta_t_model",
    "build_provider",
    "config_path",
    "default_settings",
    "get_config_home",
    "load_settings",
    "save_settings",
]

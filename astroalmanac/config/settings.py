"""Persisted settings: default site, ephemeris source, leap seconds and logging."""

from __future__ import annotations

import logging
import os
from copy import deepcopy
from pathlib import Path
from typing import TYPE_CHECKING, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from ..errors import InvalidArgumentError

if TYPE_CHECKING:  # pragma: no cover - typing only
    from ..core.deltat import DeltaTModel
    from ..ephemeris.adapter import SwissEphemerisProvider

CURRENT_SETTINGS_SCHEMA_VERSION = 1
CONFIG_FILENAME = "config.yaml"

# -------------------- Settings Schema --------------------


class SiteCfg(BaseModel):
    """Default observing site used when the CLI is not given one."""

    latitude: float = Field(default=0.0, ge=-90.0, le=90.0)
    longitude: float = Field(default=0.0, ge=-180.0, le=180.0)
    time_zone: float = Field(default=0.0, ge=-12.0, le=14.0)


class EphemerisCfg(BaseModel):
    """Ephemeris source configuration."""

    path: Optional[str] = None
    prefer_moshier: bool = False
    cache_size: int = 256

    @field_validator("cache_size", mode="before")
    @classmethod
    def _cap_cache_size(cls, value: int) -> int:
        return max(0, int(value))


class TimeCfg(BaseModel):
    """ΔT model configuration."""

    leap_seconds: float = Field(default=37.0, ge=0.0)
    use_erfa_leap_seconds: bool = True


class LoggingCfg(BaseModel):
    """Log level applied by :func:`~astroalmanac.boot.logging.configure_logging`."""

    level: str = "WARNING"

    @field_validator("level", mode="before")
    @classmethod
    def _normalise_level(cls, value: object) -> str:
        text = str(value).strip().upper()
        if not isinstance(logging.getLevelName(text), int):
            raise ValueError(f"unknown logging level: {value}")
        return text


class Settings(BaseModel):
    """Top-level settings model persisted on disk."""

    schema_version: int = Field(
        default=CURRENT_SETTINGS_SCHEMA_VERSION,
        ge=1,
        description="Version marker for persisted configuration payloads.",
    )
    site: SiteCfg = Field(default_factory=SiteCfg)
    ephemeris: EphemerisCfg = Field(default_factory=EphemerisCfg)
    time: TimeCfg = Field(default_factory=TimeCfg)
    logging: LoggingCfg = Field(default_factory=LoggingCfg)


# -------------------- Persistence --------------------


def get_config_home() -> Path:
    """Return the directory where settings should be stored."""

    if os.name == "nt":
        base = Path(
            os.environ.get(
                "LOCALAPPDATA", str(Path.home() / "AppData" / "Local")
            )
        )
        return base / "astroalmanac"
    return Path(os.environ.get("ASTROALMANAC_HOME", str(Path.home() / ".astroalmanac")))


def config_path() -> Path:
    """Return the full path to the configuration file, creating directories as needed."""

    home = get_config_home()
    home.mkdir(parents=True, exist_ok=True)
    return home / CONFIG_FILENAME


def default_settings() -> Settings:
    """Instantiate a Settings object populated with defaults."""

    return Settings()


def save_settings(settings: Settings, path: Optional[Path] = None) -> Path:
    """Persist the given settings to disk as YAML."""

    target_path = Path(path) if path else config_path()
    target_path.parent.mkdir(parents=True, exist_ok=True)
    data = settings.model_dump()
    with target_path.open("w", encoding="utf-8") as handle:
        yaml.safe_dump(data, handle, sort_keys=False, allow_unicode=True)
    return target_path


def _coerce_schema_version(raw: object) -> int:
    try:
        value = int(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 1
    return max(1, value)


def load_settings(path: Optional[Path] = None) -> Settings:
    """Load settings from disk, creating defaults if missing."""

    source_path = Path(path) if path else config_path()
    if not source_path.exists():
        settings = default_settings()
        save_settings(settings, source_path)
        return settings
    with source_path.open("r", encoding="utf-8") as handle:
        raw = yaml.safe_load(handle) or {}
    if not isinstance(raw, dict):
        raw = {}
    data = deepcopy(raw)
    data["schema_version"] = _coerce_schema_version(raw.get("schema_version"))
    return Settings(**data)


# -------------------- Factories --------------------


def build_delta_t_model(settings: Settings) -> "DeltaTModel":
    """Return a :class:`DeltaTModel` configured from ``settings``."""

    from ..core.deltat import DeltaTModel
    from ..core.leapseconds import StaticLeapSecondSource

    source = None
    if not settings.time.use_erfa_leap_seconds:
        source = StaticLeapSecondSource(settings.time.leap_seconds)
    return DeltaTModel(settings.time.leap_seconds, source=source)


def build_provider(settings: Settings) -> "SwissEphemerisProvider":
    """Return a Swiss Ephemeris provider configured from ``settings``.

    A configured ephemeris path that does not exist raises
    :class:`~astroalmanac.errors.InvalidArgumentError`.
    """

    from ..ephemeris.adapter import EphemerisConfig, SwissEphemerisProvider

    config = EphemerisConfig(
        ephemeris_path=settings.ephemeris.path,
        prefer_moshier=settings.ephemeris.prefer_moshier,
        cache_size=settings.ephemeris.cache_size,
    )
    try:
        return SwissEphemerisProvider(config)
    except FileNotFoundError as exc:
        raise InvalidArgumentError(str(exc)) from exc

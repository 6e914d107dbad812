"""Logging set-up for the command line entry points."""

from __future__ import annotations

import logging
import os
from typing import Any

__all__ = ["configure_logging", "resolve_level"]

_DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
_DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"
_ENV_VARS = ("ASTROALMANAC_LOG_LEVEL", "LOG_LEVEL")


def resolve_level(value: str | int | None, default: int = logging.WARNING) -> int:
    """Return a numeric logging level for a name, number or ``None``.

    Unknown names resolve to ``default``.
    """

    if value is None:
        return default
    if isinstance(value, int):
        return value

    candidate = value.strip()
    if not candidate:
        return default
    if candidate.isdigit():
        return int(candidate)

    resolved = logging.getLevelName(candidate.upper())
    if isinstance(resolved, int):
        return resolved
    return default


def configure_logging(*, level: str | int | None = None, **kwargs: Any) -> int:
    """Configure the root logger and return the effective level.

    When ``level`` is omitted ``ASTROALMANAC_LOG_LEVEL`` and then
    ``LOG_LEVEL`` are consulted.  Almanac tables are written to stdout, so
    log records go to stderr at ``WARNING`` unless asked otherwise.
    Remaining ``kwargs`` are forwarded to :func:`logging.basicConfig`.
    """

    requested: str | int | None = level
    if requested is None:
        for name in _ENV_VARS:
            if os.environ.get(name):
                requested = os.environ[name]
                break

    effective_level = resolve_level(requested)
    logging.basicConfig(
        level=effective_level,
        format=kwargs.pop("format", _DEFAULT_FORMAT),
        datefmt=kwargs.pop("datefmt", _DEFAULT_DATEFMT),
        force=kwargs.pop("force", True),
        **kwargs,
    )
    return effective_level

"""Exception hierarchy shared by the almanac components."""

from __future__ import annotations

__all__ = [
    "AlmanacError",
    "InvalidArgumentError",
    "InvalidDateError",
    "UpstreamFailureError",
]


class AlmanacError(Exception):
    """Base class for every error raised by :mod:`astroalmanac`."""


class InvalidArgumentError(AlmanacError, ValueError):
    """Raised when a caller supplies an out-of-range or unsupported value."""


class InvalidDateError(AlmanacError, ValueError):
    """Raised when a day/month/year combination does not exist.

    This is distinct from :class:`InvalidArgumentError`: year-long
    iteration expects to meet such days (31 April, 30 February, ...) and
    treats them as skipped cells rather than as contract violations.
    """


class UpstreamFailureError(AlmanacError, RuntimeError):
    """Raised when an ephemeris or leap-second collaborator fails.

    The original exception is always chained as ``__cause__``.
    """

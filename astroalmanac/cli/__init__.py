"""Command line interface for astroalmanac."""

from __future__ import annotations

from .__main__ import build_parser, main

__all__ = ["build_parser", "main"]

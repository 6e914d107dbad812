"""Computation engines built on the core time and ephemeris layers."""

"""Test suite package marker so helpers import as ``tests.helpers``."""

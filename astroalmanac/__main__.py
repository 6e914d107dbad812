"""Allow ``python -m astroalmanac``."""

from __future__ import annotations

from .cli.__main__ import main

if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())

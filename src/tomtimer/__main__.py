"""Allow ``python -m tomtimer``."""

from __future__ import annotations

from tomtimer.cli import main

if __name__ == "__main__":
    raise SystemExit(main())

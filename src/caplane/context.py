"""Process-wide CLI state: config location and the as-of date."""

from __future__ import annotations

from datetime import date
from pathlib import Path


class _Context:
    def __init__(self) -> None:
        self.config_path: Path | None = None
        self.today: date | None = None


_context = _Context()


def get_config_path() -> Path | None:
    """Get the config path given on the command line, if any."""
    return _context.config_path


def set_config_path(path: Path | None) -> None:
    _context.config_path = path


def get_today() -> date:
    """Return the as-of date, falling back to the real calendar date."""
    return _context.today or date.today()  # noqa: DTZ011 - local calendar days


def set_today(value: date | None) -> None:
    """Pin the as-of date (``None`` restores the real calendar date)."""
    _context.today = value

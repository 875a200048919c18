"""Calendar date keys and day arithmetic.

Dates are plain local calendar days. Keys are canonical ``YYYY-MM-DD``
strings; ``parse_date_key`` and ``format_date_key`` are exact inverses so
that iterating a day at a time never drifts.
"""

import re
from collections.abc import Iterator
from datetime import date, timedelta

DATE_KEY_PATTERN = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")

# date.weekday() values
SATURDAY = 5
SUNDAY = 6


def parse_date_key(key: str) -> date:
    """Parse a ``YYYY-MM-DD`` key into a date.

    Keys are not validated beyond their shape; callers supply well-formed keys.
    """
    match = DATE_KEY_PATTERN.match(key.strip())
    if not match:
        raise ValueError(f"Invalid date key '{key}', expected YYYY-MM-DD")
    year, month, day = (int(part) for part in match.groups())
    return date(year, month, day)


def format_date_key(day: date) -> str:
    """Format a date as its ``YYYY-MM-DD`` key."""
    return f"{day.year:04d}-{day.month:02d}-{day.day:02d}"


def add_days(day: date, days: int) -> date:
    return day + timedelta(days=days)


def span_days(start: date, end: date) -> int:
    """Inclusive number of calendar days from start to end.

    A task starting and ending on the same day spans 1 day; an end before the
    start gives 0 or less.
    """
    return (end - start).days + 1


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every day from start to end, both inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def is_weekend(day: date) -> bool:
    return day.weekday() in (SATURDAY, SUNDAY)

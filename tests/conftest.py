"""Pytest configuration and fixtures for caplane tests."""

from __future__ import annotations

from datetime import date

import pytest

from caplane.logger import reset_logger
from caplane.models import Priority, Status, Task
from caplane.scheduler import CapacityConfig, DayMode, WeekendConfig, parse_date_key

# 2024-01-01 is a Monday
MONDAY = date(2024, 1, 1)
FRIDAY = date(2024, 1, 5)
SATURDAY = date(2024, 1, 6)
NEXT_MONDAY = date(2024, 1, 8)


@pytest.fixture(autouse=True)
def clean_logger() -> None:
    """Reset logger state before each test for isolation."""
    reset_logger()


@pytest.fixture
def seven_day_week() -> CapacityConfig:
    """7 hours a day, every day of the week."""
    return CapacityConfig(
        daily_capacity_hours=7,
        weekend=WeekendConfig(saturday=DayMode.FULL, sunday=DayMode.FULL),
    )


@pytest.fixture
def weekdays_only() -> CapacityConfig:
    """7 hours a day, weekends off."""
    return CapacityConfig(daily_capacity_hours=7)


def make_task(  # noqa: PLR0913 - mirrors the Task fields tests care about
    task_id: str,
    estimated: float = 0.0,
    start: str | date | None = None,
    due: str | date | None = None,
    *,
    spent: float = 0.0,
    status: Status = Status.TODO,
    priority: Priority = Priority.NORMAL,
    project_id: str | None = None,
    title: str | None = None,
) -> Task:
    """Create a Task with date keys accepted in place of dates.

    Example:
        make_task("a", 60, "2024-01-01", "2024-01-05")
    """
    return Task(
        id=task_id,
        title=title if title is not None else task_id.upper(),
        status=status,
        priority=priority,
        estimated_duration=estimated,
        spent_duration=spent,
        start_date=parse_date_key(start) if isinstance(start, str) else start,
        due_date=parse_date_key(due) if isinstance(due, str) else due,
        project_id=project_id,
    )

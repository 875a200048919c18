"""Contention map: capacity already claimed by other scheduled tasks."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING

from caplane.logger import debug_enabled, get_logger

from .capacity import CapacityModel
from .policy import ContentionPolicy, shorter_or_equal_effort

if TYPE_CHECKING:
    from caplane.models import Task

logger = get_logger()


@dataclass(frozen=True, slots=True)
class ContentionEntry:
    """Even daily draw of one competing task over its own date range."""

    task_id: str
    start_date: date
    due_date: date
    daily_load: float  # minutes per capacity-bearing day

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.due_date


def build_contention_map(
    tasks: Iterable["Task"],
    exclude_task_id: str,
    total_estimated: float,
    capacity: CapacityModel,
    policy: ContentionPolicy = shorter_or_equal_effort,
) -> list[ContentionEntry]:
    """Build contention entries for the task being evaluated.

    Args:
        tasks: Snapshot of scheduled tasks
        exclude_task_id: The task being evaluated (never its own contention)
        total_estimated: Total estimate of the evaluated task, in minutes
        capacity: Capacity model used to count each task's working days
        policy: Decides which candidates compete with the evaluated task

    Returns:
        One entry per competing task with remaining work
    """
    entries: list[ContentionEntry] = []
    verbose = debug_enabled()
    for task in tasks:
        if task.id == exclude_task_id or task.is_terminal:
            continue
        if task.start_date is None or task.due_date is None:
            continue
        if not policy(task, total_estimated):
            if verbose:
                logger.debug(
                    f"    contention: skip {task.id} ({task.estimated_duration:g}m > "
                    f"{total_estimated:g}m)"
                )
            continue

        remaining = task.remaining_minutes
        if remaining <= 0:
            continue

        effective_days = max(1, capacity.count_capacity_days(task.start_date, task.due_date))
        entry = ContentionEntry(
            task_id=task.id,
            start_date=task.start_date,
            due_date=task.due_date,
            daily_load=remaining / effective_days,
        )
        if verbose:
            logger.debug(
                f"    contention: {task.id} draws {entry.daily_load:.1f}m/day "
                f"{task.start_date}..{task.due_date}"
            )
        entries.append(entry)
    return entries


def consumed_on(entries: Iterable[ContentionEntry], day: date) -> float:
    """Total minutes claimed by contention entries on the given day."""
    return sum(entry.daily_load for entry in entries if entry.covers(day))

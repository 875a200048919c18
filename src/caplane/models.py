"""Data models for caplane."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, replace
from datetime import date
from enum import Enum
from typing import Any

from .exceptions import TaskNotFoundError

SECONDS_PER_MINUTE = 60


class Status(str, Enum):
    """Task workflow status."""

    TODO = "todo"
    ANALYSIS = "analysis"
    DOING = "doing"
    BLOCKED = "blocked"
    REVIEW = "review"
    DONE = "done"
    ARCHIVED = "archived"

    @property
    def is_terminal(self) -> bool:
        return self in (Status.DONE, Status.ARCHIVED)


class Priority(str, Enum):
    """Task priority, lowest first."""

    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"

    @property
    def rank(self) -> int:
        return list(Priority).index(self)


@dataclass(frozen=True, slots=True)
class Task:
    """Scheduling view of a task owned by the surrounding application.

    Durations keep the units of the task store: ``estimated_duration`` is in
    minutes, ``spent_duration`` in seconds.
    """

    id: str
    title: str = ""
    status: Status = Status.TODO
    priority: Priority = Priority.NORMAL
    estimated_duration: float = 0.0
    spent_duration: float = 0.0
    start_date: date | None = None
    due_date: date | None = None
    project_id: str | None = None

    @property
    def remaining_minutes(self) -> float:
        """Planned work not yet consumed, never negative."""
        return max(0.0, self.estimated_duration - self.spent_duration / SECONDS_PER_MINUTE)

    @property
    def is_scheduled(self) -> bool:
        return self.start_date is not None and self.due_date is not None

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal


class TaskBoard:
    """In-memory task store holding immutable Task values.

    Stands in for the application's task CRUD layer: lookups by id, field
    updates that swap in a new Task value, and the scheduled/backlog split
    the calendar works from. Archived tasks never appear in either listing.
    """

    def __init__(self, tasks: Iterable[Task] = ()) -> None:
        self._tasks: dict[str, Task] = {}
        for task in tasks:
            self.add(task)

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(self._tasks.values())

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._tasks

    def add(self, task: Task) -> None:
        """Add a task; IDs must be unique."""
        if task.id in self._tasks:
            raise ValueError(f"Duplicate task id '{task.id}'")
        self._tasks[task.id] = task

    def get(self, task_id: str) -> Task:
        """Return the task with the given ID.

        Raises:
            TaskNotFoundError: If no such task exists
        """
        try:
            return self._tasks[task_id]
        except KeyError:
            raise TaskNotFoundError(f"Unknown task '{task_id}'") from None

    def update_task(self, task_id: str, **changes: Any) -> Task:
        """Replace a task with a copy carrying the given field changes."""
        updated = replace(self.get(task_id), **changes)
        self._tasks[task_id] = updated
        return updated

    def _visible(self, project_id: str | None) -> list[Task]:
        return [
            t
            for t in self._tasks.values()
            if t.status != Status.ARCHIVED and (project_id is None or t.project_id == project_id)
        ]

    def scheduled_tasks(self, project_id: str | None = None) -> list[Task]:
        """Tasks with both dates set, by start date then most urgent first."""
        scheduled = [t for t in self._visible(project_id) if t.is_scheduled]
        scheduled.sort(key=lambda t: (t.start_date, -t.priority.rank))
        return scheduled

    def backlog_tasks(self, project_id: str | None = None) -> list[Task]:
        """Tasks not yet placed on the calendar, in insertion order."""
        return [t for t in self._visible(project_id) if not t.is_scheduled]

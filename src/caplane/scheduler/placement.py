"""Interactive placement: drop-to-schedule, edge-drag resize and auto-repair.

The controller turns calendar gestures into task date changes. All
scheduling arithmetic is delegated to a SchedulingEngine built from the
board's current state for every decision, so no decision ever sees a
partially updated schedule.
"""

import math
from dataclasses import dataclass, replace
from datetime import date

from caplane.exceptions import ResizeSessionError
from caplane.logger import get_logger
from caplane.models import Task, TaskBoard

from .config import CapacityConfig, PlacementConfig, SchedulingConfig
from .dates import add_days, span_days
from .policy import effort_order_key
from .service import SchedulingEngine

logger = get_logger()


@dataclass(frozen=True, slots=True)
class Idle:
    """No resize in progress."""


@dataclass(frozen=True, slots=True)
class Resizing:
    """A resize drag between pointer-down and pointer-up.

    Only ``preview_days`` changes while the pointer moves; the task itself
    is untouched until the session ends.
    """

    task_id: str
    origin_x: float
    original_days: int
    min_days: int
    preview_days: int | None = None


ResizeSession = Idle | Resizing

IDLE = Idle()


@dataclass(frozen=True, slots=True)
class DueDateChange:
    """A due date moved forward by the repair pass."""

    task_id: str
    old_due: date
    new_due: date


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


class PlacementController:
    """Applies calendar gestures to tasks on a board."""

    def __init__(  # noqa: PLR0913 - optional configuration objects
        self,
        board: TaskBoard,
        capacity_config: CapacityConfig | None = None,
        config: SchedulingConfig | None = None,
        placement: PlacementConfig | None = None,
        project_id: str | None = None,
    ) -> None:
        self.board = board
        self.capacity_config = capacity_config or CapacityConfig()
        self.config = config or SchedulingConfig()
        self.placement = placement or PlacementConfig()
        self.project_id = project_id
        self.session: ResizeSession = IDLE

    def engine(self) -> SchedulingEngine:
        """Engine over the board's scheduled tasks as they are right now."""
        return SchedulingEngine(
            self.board.scheduled_tasks(self.project_id), self.capacity_config, self.config
        )

    # Drop

    def assign_via_drop(self, task_id: str, start: date) -> Task:
        """Place a task so it starts on ``start`` and ends as early as feasible.

        A task with nothing left to do is placed as if its full estimate
        remained, so a finished task dragged back onto the calendar still
        gets a sensible span.
        """
        task = self.board.get(task_id)
        remaining = task.remaining_minutes
        if remaining <= 0:
            remaining = task.estimated_duration or self.placement.default_drop_minutes

        due = self.engine().min_due_date(start, remaining, task.id, task.estimated_duration)
        logger.changes(f"Placed {task.id}: {start} -> {due}")
        return self.board.update_task(task_id, start_date=start, due_date=due)

    # Resize

    def begin_resize(self, task_id: str, pointer_x: float) -> Resizing:
        """Start a resize session on a task's trailing edge.

        Raises:
            ResizeSessionError: If a session is already active or the task is
                not on the calendar
        """
        if isinstance(self.session, Resizing):
            raise ResizeSessionError(
                f"Cannot resize '{task_id}' while '{self.session.task_id}' is being resized"
            )
        task = self.board.get(task_id)
        if task.start_date is None or task.due_date is None:
            raise ResizeSessionError(f"Task '{task_id}' is not scheduled")

        session = Resizing(
            task_id=task_id,
            origin_x=pointer_x,
            original_days=span_days(task.start_date, task.due_date),
            min_days=self.engine().min_days_required(task),
        )
        self.session = session
        return session

    def update_resize(self, pointer_x: float) -> int | None:
        """Recompute the previewed span for a pointer position.

        The span can grow freely but never shrinks below the feasible minimum.

        Returns:
            The previewed span in days, or None when no session is active
        """
        session = self.session
        if not isinstance(session, Resizing):
            return None
        days_delta = _round_half_up((pointer_x - session.origin_x) / self.placement.column_width)
        preview = max(session.min_days, session.original_days + days_delta)
        self.session = replace(session, preview_days=preview)
        return preview

    def end_resize(self) -> Task | None:
        """Finish the session, committing the preview if there is one.

        Returns:
            The updated task, or None when nothing was committed
        """
        session = self.session
        self.session = IDLE
        if not isinstance(session, Resizing) or session.preview_days is None:
            return None

        task = self.board.get(session.task_id)
        if task.start_date is None:
            return None
        new_due = add_days(task.start_date, session.preview_days - 1)
        logger.changes(f"Resized {task.id}: due {task.due_date} -> {new_due}")
        return self.board.update_task(task.id, due_date=new_due)

    def cancel_resize(self) -> None:
        """Abandon the session without touching the task."""
        self.session = IDLE

    # Repair

    def _repair_minutes(self, task: Task) -> float:
        remaining = task.remaining_minutes
        if remaining <= 0:
            return self.config.repair_floor_minutes
        return remaining

    def repair(self) -> list[DueDateChange]:
        """Push every due date that is earlier than its feasible minimum.

        Open scheduled tasks are checked shortest estimate first, each against
        the board as it stands at that moment. Passes repeat until nothing
        moves, so calling repair() again right after is a no-op.

        Returns:
            One change per moved task (first old date, last new date)
        """
        changes: dict[str, DueDateChange] = {}
        for round_number in range(1, self.config.max_repair_rounds + 1):
            moved = False
            ordered = sorted(self.board.scheduled_tasks(self.project_id), key=effort_order_key)
            for task_id in [t.id for t in ordered]:
                task = self.board.get(task_id)
                if task.is_terminal or task.start_date is None or task.due_date is None:
                    continue
                remaining = self._repair_minutes(task)
                if remaining <= 0:
                    continue

                min_due = self.engine().min_due_date(
                    task.start_date, remaining, task.id, task.estimated_duration
                )
                if task.due_date < min_due:
                    logger.changes(f"Repaired {task.id}: due {task.due_date} -> {min_due}")
                    first = changes.get(task.id)
                    changes[task.id] = DueDateChange(
                        task_id=task.id,
                        old_due=first.old_due if first else task.due_date,
                        new_due=min_due,
                    )
                    self.board.update_task(task.id, due_date=min_due)
                    moved = True
            if not moved:
                logger.checks(f"Repair settled after {round_number} pass(es)")
                return list(changes.values())

        logger.warning(
            f"Repair did not settle within {self.config.max_repair_rounds} passes; "
            "some due dates may still be behind"
        )
        return list(changes.values())

"""High-level scheduling engine over one snapshot of scheduled tasks."""

from collections.abc import Iterable
from datetime import date
from functools import cached_property

from caplane.logger import checks_enabled, get_logger
from caplane.models import Task

from .capacity import CapacityModel
from .config import CapacityConfig, SchedulingConfig
from .contention import ContentionEntry, build_contention_map
from .dates import format_date_key, parse_date_key, span_days
from .load import DailyLoadDistributor, DayLoad, LoadLevel, classify_load
from .policy import create_policy
from .solver import DueDateResult, MinDueDateSolver

logger = get_logger()


class SchedulingEngine:
    """Capacity queries, minimum due dates and daily load for a task snapshot.

    The engine coordinates:
    - CapacityModel (hours per calendar day)
    - Contention map building (what other tasks already draw)
    - MinDueDateSolver (earliest feasible finish)
    - DailyLoadDistributor (heat-map data)

    It holds an immutable snapshot; build a new engine whenever the tasks or
    the capacity configuration change. The daily load map is computed once
    per engine.
    """

    def __init__(
        self,
        tasks: Iterable[Task],
        capacity_config: CapacityConfig | None = None,
        config: SchedulingConfig | None = None,
    ) -> None:
        self.tasks: tuple[Task, ...] = tuple(tasks)
        self.config = config or SchedulingConfig()
        self.capacity = CapacityModel(capacity_config)
        self.policy = create_policy(self.config.contention_policy)
        self.solver = MinDueDateSolver(self.capacity, self.config)
        self.distributor = DailyLoadDistributor(self.capacity, self.config)

    def get_day_capacity(self, day: date) -> float:
        """Hours of capacity on the given day."""
        return self.capacity.day_capacity(day)

    def contention_for(self, exclude_task_id: str, total_estimated: float) -> list[ContentionEntry]:
        """Contention entries seen by a task with the given ID and estimate."""
        return build_contention_map(
            self.tasks, exclude_task_id, total_estimated, self.capacity, self.policy
        )

    def solve(
        self,
        start: date,
        remaining_minutes: float,
        exclude_task_id: str,
        total_estimated: float,
    ) -> DueDateResult:
        """Run the solver for one task against the snapshot's contention."""
        contention = self.contention_for(exclude_task_id, total_estimated)
        result = self.solver.solve(start, remaining_minutes, contention)
        if checks_enabled():
            logger.checks(
                f"  {exclude_task_id}: {remaining_minutes:.0f}m from {start} -> {result.due_date}"
                f" ({len(contention)} competing)"
            )
        return result

    def min_due_date(
        self,
        start: date,
        remaining_minutes: float,
        exclude_task_id: str,
        total_estimated: float,
    ) -> date:
        return self.solve(start, remaining_minutes, exclude_task_id, total_estimated).due_date

    def calculate_min_due_date(
        self,
        start_date_key: str,
        remaining_minutes: float,
        exclude_task_id: str,
        total_estimated_minutes: float,
    ) -> str:
        """Date-key form of min_due_date (``YYYY-MM-DD`` in and out)."""
        due = self.min_due_date(
            parse_date_key(start_date_key),
            remaining_minutes,
            exclude_task_id,
            total_estimated_minutes,
        )
        return format_date_key(due)

    def min_days_required(self, task: Task) -> int:
        """Shortest inclusive span the task's remaining work allows.

        Raises:
            ValueError: If the task has no start date
        """
        if task.start_date is None:
            raise ValueError(f"Task '{task.id}' has no start date")
        due = self.min_due_date(
            task.start_date, task.remaining_minutes, task.id, task.estimated_duration
        )
        return span_days(task.start_date, due)

    @cached_property
    def daily_load_map(self) -> dict[str, DayLoad]:
        """Per-day load of the snapshot, keyed by date key."""
        return self.distributor.distribute(self.tasks)

    def day_load(self, day: date) -> DayLoad:
        return self.daily_load_map.get(format_date_key(day), DayLoad())

    def load_level(self, day: date) -> LoadLevel:
        """Heat-map level of a day given its posted load."""
        return classify_load(
            self.day_load(day).total, self.get_day_capacity(day), self.config.thresholds
        )

"""Daily load distribution for the capacity heat map."""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date
from enum import Enum

from caplane.logger import get_logger
from caplane.models import Status, Task

from .capacity import MINUTES_PER_HOUR, CapacityModel
from .config import LoadThresholds, SchedulingConfig
from .dates import add_days, format_date_key, span_days
from .policy import effort_order_key

logger = get_logger()

DONE_COLOR_CLASS = "text-green-600"
OPEN_COLOR_CLASS = "text-slate-700"


class LoadLevel(str, Enum):
    """Heat-map state of one day."""

    OFF = "off"  # no capacity and nothing posted
    HEALTHY = "healthy"
    NEAR_CAPACITY = "near_capacity"
    OVERLOADED = "overloaded"


@dataclass(slots=True)
class TaskLoad:
    """Minutes one task contributes to one day."""

    id: str
    title: str
    load: float
    color_class: str


def _task_loads() -> list[TaskLoad]:
    return []


@dataclass(slots=True)
class DayLoad:
    """Aggregate load of one day with its per-task breakdown."""

    total: float = 0.0
    tasks: list[TaskLoad] = field(default_factory=_task_loads)

    def post(self, task: Task, minutes: float) -> None:
        """Add minutes for a task, merging into its existing entry."""
        for entry in self.tasks:
            if entry.id == task.id:
                entry.load += minutes
                break
        else:
            self.tasks.append(
                TaskLoad(
                    id=task.id,
                    title=task.title,
                    load=minutes,
                    color_class=(
                        DONE_COLOR_CLASS if task.status == Status.DONE else OPEN_COLOR_CLASS
                    ),
                )
            )
        self.total += minutes


def classify_load(
    minutes: float, capacity_hours: float, thresholds: LoadThresholds | None = None
) -> LoadLevel:
    """Classify a day's posted load against its capacity.

    A day without capacity is overloaded as soon as anything is posted on it.
    """
    thresholds = thresholds or LoadThresholds()
    if capacity_hours <= 0:
        return LoadLevel.OVERLOADED if minutes > 0 else LoadLevel.OFF
    ratio = (minutes / MINUTES_PER_HOUR) / capacity_hours
    if ratio > thresholds.overloaded:
        return LoadLevel.OVERLOADED
    if ratio > thresholds.near_capacity:
        return LoadLevel.NEAR_CAPACITY
    return LoadLevel.HEALTHY


@dataclass(slots=True)
class _RangeDay:
    key: str
    capacity: float  # minutes
    current_load: float


class DailyLoadDistributor:
    """Spreads each scheduled task's remaining work over its date range.

    Tasks are processed shortest estimate first, so shorter tasks claim a
    day's headroom before longer ones. A single-day task posts everything on
    its start day. A multi-day task first fills headroom on its
    capacity-bearing days in date order; whatever cannot fit is spread over
    the same days in proportion to their capacity, which is how overload
    shows up on the heat map.
    """

    def __init__(self, capacity: CapacityModel, config: SchedulingConfig | None = None) -> None:
        self.capacity = capacity
        self.config = config or SchedulingConfig()

    def distribute(self, tasks: Iterable[Task]) -> dict[str, DayLoad]:
        """Build the daily load map from scratch.

        Returns:
            Mapping of date key to DayLoad; days with nothing posted are absent
        """
        load_map: dict[str, DayLoad] = {}
        for task in sorted(tasks, key=effort_order_key):
            if task.start_date is None or task.due_date is None:
                continue
            work = task.remaining_minutes
            if work <= 0:
                continue

            span = span_days(task.start_date, task.due_date)
            if span <= 1:
                self._post(load_map, format_date_key(task.start_date), task, work)
            else:
                self._distribute_range(load_map, task, task.start_date, span, work)
        return load_map

    def _post(self, load_map: dict[str, DayLoad], key: str, task: Task, minutes: float) -> None:
        load_map.setdefault(key, DayLoad()).post(task, minutes)

    def _distribute_range(
        self,
        load_map: dict[str, DayLoad],
        task: Task,
        start: date,
        span: int,
        work: float,
    ) -> None:
        days: list[_RangeDay] = []
        for offset in range(span):
            day = add_days(start, offset)
            cap = self.capacity.capacity_minutes(day)
            if cap > 0:
                key = format_date_key(day)
                current = load_map[key].total if key in load_map else 0.0
                days.append(_RangeDay(key=key, capacity=cap, current_load=current))

        total_capacity = sum(d.capacity for d in days)
        if total_capacity <= 0:
            logger.warning(
                f"Task '{task.id}' has no working days between {task.start_date} and "
                f"{task.due_date}; its {work:.0f} minutes are not shown"
            )
            return

        for d in days:
            if work <= self.config.epsilon_minutes:
                break
            space = max(0.0, d.capacity - d.current_load)
            if space > 0:
                added = min(space, work)
                self._post(load_map, d.key, task, added)
                d.current_load += added
                work -= added

        if work > self.config.overflow_tolerance_minutes:
            logger.checks(f"    load: {task.id} overflows its range by {work:.0f}m")
            for d in days:
                self._post(load_map, d.key, task, work * d.capacity / total_capacity)

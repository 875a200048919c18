"""Minimum-due-date solver: earliest finish given shared daily capacity."""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, timedelta

from caplane.logger import debug_enabled, get_logger

from .capacity import CapacityModel
from .config import SchedulingConfig
from .contention import ContentionEntry, consumed_on

logger = get_logger()


@dataclass(frozen=True, slots=True)
class DueDateResult:
    """Outcome of a minimum-due-date walk.

    When ``feasible`` is False the walk hit its iteration bound and
    ``due_date`` is simply where it stopped; ``remaining_minutes`` is the
    work still unplaced at that point.
    """

    due_date: date
    feasible: bool
    days_walked: int
    remaining_minutes: float


class MinDueDateSolver:
    """Walks forward from a start date, spending each day's free capacity.

    Free capacity is the day's capacity minus what contention entries
    already draw on that day, clamped at zero. A day with no free capacity
    contributes nothing and the walk moves on.
    """

    def __init__(
        self,
        capacity: CapacityModel,
        config: SchedulingConfig | None = None,
    ) -> None:
        self.capacity = capacity
        self.config = config or SchedulingConfig()

    def available_minutes(self, day: date, contention: Sequence[ContentionEntry]) -> float:
        """Free capacity on a day after contention, never negative."""
        global_capacity = self.capacity.capacity_minutes(day)
        if global_capacity <= 0:
            return 0.0
        return max(0.0, global_capacity - consumed_on(contention, day))

    def solve(
        self,
        start: date,
        remaining_minutes: float,
        contention: Sequence[ContentionEntry] = (),
    ) -> DueDateResult:
        """Find the first day on which the remaining work is exhausted.

        Args:
            start: First day work may happen
            remaining_minutes: Work still to do
            contention: Capacity claimed by competing tasks

        Returns:
            DueDateResult; the start itself when there is no work left
        """
        if remaining_minutes <= 0:
            return DueDateResult(start, feasible=True, days_walked=0, remaining_minutes=0.0)

        epsilon = self.config.epsilon_minutes
        current = start
        minutes_left = remaining_minutes
        loops = 0

        while minutes_left > epsilon and loops < self.config.max_iterations:
            available = self.available_minutes(current, contention)
            if available > 0:
                minutes_left -= available
            if debug_enabled():
                logger.debug(
                    f"      {current}: {available:.1f}m free, {max(minutes_left, 0):.1f}m left"
                )
            if minutes_left <= epsilon:
                break
            current += timedelta(days=1)
            loops += 1

        feasible = minutes_left <= epsilon
        if not feasible:
            logger.warning(
                f"No feasible due date within {self.config.max_iterations} days of {start}: "
                f"{minutes_left:.0f} minutes still unplaced"
            )
        return DueDateResult(
            due_date=current,
            feasible=feasible,
            days_walked=loops,
            remaining_minutes=max(0.0, minutes_left),
        )

"""Calendar capacity model: hours of work available on each day."""

from datetime import date

from .config import CapacityConfig, DayMode
from .dates import SATURDAY, is_weekend, iter_days

MINUTES_PER_HOUR = 60

# Longest range walked when counting capacity-bearing days of one task
MAX_RANGE_SCAN_DAYS = 366


class CapacityModel:
    """Maps calendar days to available capacity.

    Weekdays always offer ``daily_capacity_hours``; Saturday and Sunday offer
    none, half or all of it according to the weekend configuration. Every
    method is a pure function of the configuration and the day.
    """

    def __init__(self, config: CapacityConfig | None = None) -> None:
        self.config = config or CapacityConfig()

    def _mode_for(self, day: date) -> DayMode:
        if not is_weekend(day):
            return DayMode.FULL
        if day.weekday() == SATURDAY:
            return self.config.weekend.saturday
        return self.config.weekend.sunday

    def day_capacity(self, day: date) -> float:
        """Hours available on the given day (always >= 0)."""
        mode = self._mode_for(day)
        if mode == DayMode.OFF:
            return 0.0
        if mode == DayMode.HALF:
            return self.config.daily_capacity_hours / 2
        return self.config.daily_capacity_hours

    def capacity_minutes(self, day: date) -> float:
        return self.day_capacity(day) * MINUTES_PER_HOUR

    def is_capacity_bearing(self, day: date) -> bool:
        return self.day_capacity(day) > 0

    def count_capacity_days(self, start: date, end: date) -> int:
        """Count capacity-bearing days in [start, end].

        The walk stops after MAX_RANGE_SCAN_DAYS days; the result may be 0.
        """
        count = 0
        for scanned, day in enumerate(iter_days(start, end)):
            if scanned >= MAX_RANGE_SCAN_DAYS:
                break
            if self.is_capacity_bearing(day):
                count += 1
        return count

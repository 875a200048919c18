"""Configuration classes for capacity and scheduling."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator

from .policy import create_policy


class DayMode(str, Enum):
    """How much of the base daily capacity a weekend day offers."""

    OFF = "off"
    HALF = "half"
    FULL = "full"


class WeekendConfig(BaseModel):
    """Independent capacity modes for Saturday and Sunday."""

    saturday: DayMode = DayMode.OFF
    sunday: DayMode = DayMode.OFF

    @field_validator("saturday", "sunday", mode="before")
    @classmethod
    def coerce_yaml_booleans(cls, v: Any) -> Any:
        """Accept unquoted YAML ``off``/``on``, which PyYAML loads as booleans."""
        if v is False:
            return DayMode.OFF
        if v is True:
            return DayMode.FULL
        return v


class CapacityConfig(BaseModel):
    """The single shared daily work budget."""

    daily_capacity_hours: float = Field(default=7.0, gt=0)
    weekend: WeekendConfig = WeekendConfig()


class LoadThresholds(BaseModel):
    """Load ratios (posted hours / capacity hours) for heat-map levels."""

    overloaded: float = 1.001
    near_capacity: float = 0.85


class SchedulingConfig(BaseModel):
    """Tuning for the solver, load distributor and repair pass."""

    # Solver day-walk bound; hitting it means the task is infeasible
    max_iterations: int = Field(default=365, gt=0)
    # Remaining work at or below this is considered done (float accumulation)
    epsilon_minutes: float = 0.01
    # Leftover work above this after filling headroom is spread as overload
    overflow_tolerance_minutes: float = 0.1
    # Name of the registered contention policy
    contention_policy: str = "shorter_or_equal_effort"
    # Work assumed for open tasks that have no time left on their estimate
    repair_floor_minutes: float = 60.0
    max_repair_rounds: int = Field(default=50, gt=0)
    thresholds: LoadThresholds = LoadThresholds()

    @field_validator("contention_policy")
    @classmethod
    def validate_policy_name(cls, v: str) -> str:
        """Reject policy names that are not registered."""
        create_policy(v)
        return v


class PlacementConfig(BaseModel):
    """Geometry of the interactive calendar."""

    column_width: float = Field(default=100.0, gt=0)  # pixels per day column
    # Work given to a dropped task with neither remaining nor estimated time
    default_drop_minutes: float = 60.0

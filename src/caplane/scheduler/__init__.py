"""Scheduler package - capacity-aware placement over one shared daily budget.

This package provides:
- A calendar capacity model with configurable weekends
- Contention maps built under a swappable contention policy
- A minimum-due-date solver walking day by day through free capacity
- A daily load distributor feeding the heat map
- An interactive placement controller (drop, resize, auto-repair)

Main entry points:
- SchedulingEngine: capacity, minimum due dates and daily load for a snapshot
- PlacementController: applies calendar gestures to a TaskBoard

Configuration:
- CapacityConfig / WeekendConfig: daily hours and weekend modes
- SchedulingConfig: solver bounds, tolerances and policy selection
- PlacementConfig: calendar geometry
"""

from .capacity import CapacityModel
from .config import (
    CapacityConfig,
    DayMode,
    LoadThresholds,
    PlacementConfig,
    SchedulingConfig,
    WeekendConfig,
)
from .contention import ContentionEntry, build_contention_map
from .dates import add_days, format_date_key, iter_days, parse_date_key, span_days
from .load import DailyLoadDistributor, DayLoad, LoadLevel, TaskLoad, classify_load
from .placement import DueDateChange, Idle, PlacementController, ResizeSession, Resizing
from .policy import (
    ContentionPolicy,
    all_scheduled,
    create_policy,
    effort_order_key,
    shorter_or_equal_effort,
)
from .service import SchedulingEngine
from .solver import DueDateResult, MinDueDateSolver

__all__ = [
    # Configuration
    "CapacityConfig",
    "DayMode",
    "LoadThresholds",
    "PlacementConfig",
    "SchedulingConfig",
    "WeekendConfig",
    # Date keys
    "add_days",
    "format_date_key",
    "iter_days",
    "parse_date_key",
    "span_days",
    # Capacity and contention
    "CapacityModel",
    "ContentionEntry",
    "build_contention_map",
    "ContentionPolicy",
    "all_scheduled",
    "create_policy",
    "effort_order_key",
    "shorter_or_equal_effort",
    # Solver
    "DueDateResult",
    "MinDueDateSolver",
    # Load
    "DailyLoadDistributor",
    "DayLoad",
    "LoadLevel",
    "TaskLoad",
    "classify_load",
    # High-level
    "SchedulingEngine",
    "PlacementController",
    "DueDateChange",
    "Idle",
    "Resizing",
    "ResizeSession",
]

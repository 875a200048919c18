"""Contention policies: which scheduled tasks compete for a task's capacity.

A policy is called as ``policy(candidate, evaluated_estimate)`` and answers
whether ``candidate`` consumes capacity ahead of a task whose total estimate
is ``evaluated_estimate`` minutes.
"""

from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from caplane.models import Task

ContentionPolicy = Callable[["Task", float], bool]


def shorter_or_equal_effort(candidate: "Task", evaluated_estimate: float) -> bool:
    """Tasks estimated at no more than the evaluated task take capacity first.

    Longer tasks are background work: they yield to quick wins and are
    ignored as contention. The same ordering drives the load distributor and
    the repair pass (shortest estimate first).
    """
    return candidate.estimated_duration <= evaluated_estimate


def all_scheduled(candidate: "Task", evaluated_estimate: float) -> bool:
    """Every other scheduled task competes, regardless of size."""
    return True


def effort_order_key(task: "Task") -> float:
    """Sort key placing shorter estimates first."""
    return task.estimated_duration


POLICIES: dict[str, ContentionPolicy] = {
    "shorter_or_equal_effort": shorter_or_equal_effort,
    "all_scheduled": all_scheduled,
}


def create_policy(name: str) -> ContentionPolicy:
    """Look up a contention policy by its registered name.

    Raises:
        ValueError: If no policy has that name
    """
    try:
        return POLICIES[name]
    except KeyError:
        raise ValueError(
            f"Unknown contention policy '{name}'. Available: {', '.join(sorted(POLICIES))}"
        ) from None

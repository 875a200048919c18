"""Pydantic schemas for task file validation."""

from __future__ import annotations

import re
from datetime import date
from typing import Any

from pydantic import BaseModel, Field, field_validator

from .models import Priority, Status

DURATION_PATTERN = re.compile(r"^(?:(?P<hours>[\d.]+)h)?\s*(?:(?P<minutes>[\d.]+)m)?$")


def parse_duration_minutes(value: Any) -> float:
    """Parse a duration into minutes.

    Supported formats:
    - 90 or 90.0 - plain number of minutes
    - "90m" - minutes
    - "1.5h" - hours
    - "2h30m", "2h 30m" - hours and minutes
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid duration: {value!r}")
    if isinstance(value, int | float):
        return float(value)

    text = str(value).strip().lower()
    try:
        return float(text)
    except ValueError:
        pass

    match = DURATION_PATTERN.match(text)
    if not text or not match or not (match.group("hours") or match.group("minutes")):
        raise ValueError(f"Invalid duration '{value}'. Use minutes or forms like 1.5h, 2h30m")
    hours = float(match.group("hours") or 0)
    minutes = float(match.group("minutes") or 0)
    return hours * 60 + minutes


class TaskSchema(BaseModel):
    """Schema for one task in the task file."""

    title: str = ""
    status: Status = Status.TODO
    priority: Priority = Priority.NORMAL
    project: str | None = None
    estimated_duration: float = Field(default=0.0, ge=0)  # minutes
    spent_duration: float = Field(default=0.0, ge=0)  # seconds
    start_date: date | None = None
    due_date: date | None = None

    @field_validator("estimated_duration", mode="before")
    @classmethod
    def parse_estimate(cls, v: Any) -> float:
        """Accept minutes or human durations for the estimate."""
        if v is None:
            return 0.0
        return parse_duration_minutes(v)

    @field_validator("spent_duration", mode="before")
    @classmethod
    def parse_spent(cls, v: Any) -> float:
        """Bare numbers (quoted or not) are seconds; human durations are converted."""
        if v is None:
            return 0.0
        if isinstance(v, int | float) and not isinstance(v, bool):
            return float(v)
        try:
            return float(str(v).strip())
        except ValueError:
            pass
        return parse_duration_minutes(v) * 60

    @field_validator("project", mode="before")
    @classmethod
    def coerce_project(cls, v: Any) -> str | None:
        """Project IDs are strings even when written as numbers."""
        if v is None:
            return None
        return str(v)


class TaskFileSchema(BaseModel):
    """Schema for the entire task file."""

    tasks: dict[str, TaskSchema] = Field(default_factory=dict)

    @field_validator("tasks", mode="before")
    @classmethod
    def ensure_mapping(cls, v: Any) -> Any:
        """Stringify task IDs and treat empty entries as default tasks."""
        if v is None:
            return {}
        if isinstance(v, dict):
            return {
                str(k): ({} if fields is None else fields)
                for k, fields in v.items()  # type: ignore[misc]
            }
        return v

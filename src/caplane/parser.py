"""YAML parser for caplane task files."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ParseError, ValidationError
from .models import Task, TaskBoard
from .schemas import TaskFileSchema


class TaskFileParser:
    """Parser for task YAML files.

    The file holds a ``tasks`` mapping of task ID to its fields::

        tasks:
          write-report:
            title: Write the quarterly report
            estimated_duration: 7h
            start_date: 2024-01-01
            due_date: 2024-01-02
    """

    def parse_file(self, file_path: Path | str) -> TaskBoard:
        """Parse a YAML file into a TaskBoard."""
        path = Path(file_path)
        if not path.exists():
            raise ParseError(f"File not found: {file_path}")

        try:
            with path.open(encoding="utf-8") as f:
                data: Any = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ParseError(f"Failed to parse YAML: {e}") from e

        if data is None:
            return TaskBoard()
        if not isinstance(data, dict):
            raise ParseError("YAML must contain a dictionary at the root level")

        return self.parse_data(data)  # type: ignore[arg-type]

    def parse_data(self, data: dict[str, Any]) -> TaskBoard:
        """Build a TaskBoard from already-loaded YAML data."""
        try:
            schema = TaskFileSchema.model_validate(data)
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid task file: {e}") from e

        board = TaskBoard()
        for task_id, task_data in schema.tasks.items():
            board.add(
                Task(
                    id=str(task_id),
                    title=task_data.title or str(task_id),
                    status=task_data.status,
                    priority=task_data.priority,
                    estimated_duration=task_data.estimated_duration,
                    spent_duration=task_data.spent_duration,
                    start_date=task_data.start_date,
                    due_date=task_data.due_date,
                    project_id=task_data.project,
                )
            )
        return board


def load_task_board(path: Path | str) -> TaskBoard:
    """Load a task file into a TaskBoard."""
    return TaskFileParser().parse_file(path)

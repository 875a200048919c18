"""Unified configuration file for capacity, scheduler and placement settings.

A single ``caplane_config.yaml`` holds every section; all are optional::

    capacity:
      daily_capacity_hours: 7
      weekend:
        saturday: half
        sunday: "off"
    scheduler:
      contention_policy: shorter_or_equal_effort
    placement:
      column_width: 100
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from . import context
from .exceptions import ParseError, ValidationError
from .scheduler import CapacityConfig, PlacementConfig, SchedulingConfig

CONFIG_FILENAME = "caplane_config.yaml"

KNOWN_SECTIONS = ("capacity", "scheduler", "placement")


class UnifiedConfig(BaseModel):
    """All caplane settings."""

    capacity: CapacityConfig = CapacityConfig()
    scheduler: SchedulingConfig = SchedulingConfig()
    placement: PlacementConfig = PlacementConfig()


def load_unified_config(config_path: Path | str) -> UnifiedConfig:
    """Load unified configuration from a YAML file.

    Args:
        config_path: Path to the caplane_config.yaml file

    Returns:
        UnifiedConfig with defaults for any missing section

    Raises:
        FileNotFoundError: If the config file doesn't exist
        ParseError: If the file is not valid YAML or not a mapping
        ValidationError: If a section holds invalid values
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        with config_path.open(encoding="utf-8") as f:
            data: Any = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ParseError(f"Failed to parse config {config_path}: {e}") from e

    if data is None:
        return UnifiedConfig()
    if not isinstance(data, dict):
        raise ParseError(f"Config {config_path} must contain a mapping at the root level")

    unknown = sorted(str(key) for key in data if key not in KNOWN_SECTIONS)  # type: ignore[misc]
    if unknown:
        raise ValidationError(
            f"Unknown config section(s): {', '.join(unknown)}. "
            f"Valid sections are: {', '.join(KNOWN_SECTIONS)}"
        )

    try:
        return UnifiedConfig.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid config {config_path}: {e}") from e


def discover_config(
    task_file_path: Path | str | None = None,
    config_path: Path | None = None,
) -> UnifiedConfig:
    """Find and load the config, falling back to defaults.

    Search order:
    1. Explicit config_path argument
    2. Global context (set via CLI --config)
    3. Task file directory / caplane_config.yaml
    4. Current directory / caplane_config.yaml
    """
    if config_path:
        return load_unified_config(config_path)

    ctx_config = context.get_config_path()
    if ctx_config:
        return load_unified_config(ctx_config)

    if task_file_path is not None:
        dir_config = Path(task_file_path).parent / CONFIG_FILENAME
        if dir_config.exists():
            return load_unified_config(dir_config)

    cwd_config = Path(CONFIG_FILENAME)
    if cwd_config.exists():
        return load_unified_config(cwd_config)

    return UnifiedConfig()

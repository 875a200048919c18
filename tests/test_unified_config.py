"""Tests for the unified configuration file."""

from pathlib import Path

import pytest

from caplane import context
from caplane.exceptions import ParseError, ValidationError
from caplane.scheduler import DayMode
from caplane.unified_config import (
    CONFIG_FILENAME,
    UnifiedConfig,
    discover_config,
    load_unified_config,
)


@pytest.fixture(autouse=True)
def clean_context():  # type: ignore[no-untyped-def]
    context.set_config_path(None)
    yield
    context.set_config_path(None)


def test_load_all_sections(tmp_path: Path) -> None:
    config_file = tmp_path / CONFIG_FILENAME
    config_file.write_text(
        """
capacity:
  daily_capacity_hours: 6
  weekend:
    saturday: half
    sunday: full
scheduler:
  contention_policy: all_scheduled
  thresholds:
    near_capacity: 0.9
placement:
  column_width: 48
"""
    )

    config = load_unified_config(config_file)

    assert config.capacity.daily_capacity_hours == 6
    assert config.capacity.weekend.saturday == DayMode.HALF
    assert config.capacity.weekend.sunday == DayMode.FULL
    assert config.scheduler.contention_policy == "all_scheduled"
    assert config.scheduler.thresholds.near_capacity == 0.9
    assert config.scheduler.thresholds.overloaded == 1.001
    assert config.placement.column_width == 48


def test_unquoted_off_is_accepted(tmp_path: Path) -> None:
    config_file = tmp_path / CONFIG_FILENAME
    config_file.write_text("capacity:\n  weekend:\n    saturday: off\n    sunday: on\n")

    config = load_unified_config(config_file)

    assert config.capacity.weekend.saturday == DayMode.OFF
    assert config.capacity.weekend.sunday == DayMode.FULL


def test_empty_file_gives_defaults(tmp_path: Path) -> None:
    config_file = tmp_path / CONFIG_FILENAME
    config_file.write_text("")
    assert load_unified_config(config_file) == UnifiedConfig()


def test_defaults() -> None:
    config = UnifiedConfig()
    assert config.capacity.daily_capacity_hours == 7
    assert config.capacity.weekend.saturday == DayMode.OFF
    assert config.scheduler.max_iterations == 365
    assert config.placement.column_width == 100


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_unified_config(tmp_path / "nope.yaml")


def test_unknown_section(tmp_path: Path) -> None:
    config_file = tmp_path / CONFIG_FILENAME
    config_file.write_text("jira:\n  base_url: https://example.com\n")
    with pytest.raises(ValidationError, match="Unknown config section"):
        load_unified_config(config_file)


def test_invalid_value(tmp_path: Path) -> None:
    config_file = tmp_path / CONFIG_FILENAME
    config_file.write_text("capacity:\n  daily_capacity_hours: -1\n")
    with pytest.raises(ValidationError, match="Invalid config"):
        load_unified_config(config_file)


def test_not_a_mapping(tmp_path: Path) -> None:
    config_file = tmp_path / CONFIG_FILENAME
    config_file.write_text("- capacity\n")
    with pytest.raises(ParseError):
        load_unified_config(config_file)


class TestDiscovery:
    def test_finds_config_next_to_task_file(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("capacity:\n  daily_capacity_hours: 5\n")
        config = discover_config(tmp_path / "tasks.yaml")
        assert config.capacity.daily_capacity_hours == 5

    def test_context_path_wins_over_task_directory(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("capacity:\n  daily_capacity_hours: 5\n")
        explicit = tmp_path / "other.yaml"
        explicit.write_text("capacity:\n  daily_capacity_hours: 3\n")
        context.set_config_path(explicit)

        config = discover_config(tmp_path / "tasks.yaml")

        assert config.capacity.daily_capacity_hours == 3

    def test_explicit_path_wins_over_context(self, tmp_path: Path) -> None:
        explicit = tmp_path / "explicit.yaml"
        explicit.write_text("capacity:\n  daily_capacity_hours: 2\n")
        other = tmp_path / "other.yaml"
        other.write_text("capacity:\n  daily_capacity_hours: 3\n")
        context.set_config_path(other)

        assert discover_config(config_path=explicit).capacity.daily_capacity_hours == 2

    def test_falls_back_to_defaults(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        assert discover_config(tmp_path / "sub" / "tasks.yaml") == UnifiedConfig()

    def test_current_directory(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("placement:\n  column_width: 64\n")
        monkeypatch.chdir(tmp_path)
        assert discover_config().placement.column_width == 64

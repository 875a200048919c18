"""Command-line interface for caplane."""

from __future__ import annotations

import csv
from datetime import date
from pathlib import Path
from typing import Annotated

import typer

from . import context
from .exceptions import CaplaneError
from .logger import setup_logger
from .models import TaskBoard
from .parser import load_task_board
from .scheduler import (
    LoadLevel,
    PlacementController,
    SchedulingEngine,
    add_days,
    format_date_key,
    iter_days,
)
from .unified_config import UnifiedConfig, discover_config

app = typer.Typer(
    name="caplane",
    help="Capacity-aware task scheduling - minimum due dates and daily load heat maps",
    add_completion=False,
)

LEVEL_MARKERS = {
    LoadLevel.OFF: " ",
    LoadLevel.HEALTHY: ".",
    LoadLevel.NEAR_CAPACITY: "!",
    LoadLevel.OVERLOADED: "X",
}

TaskFileArg = Annotated[Path, typer.Argument(help="Path to the task YAML file")]
ProjectOpt = Annotated[
    str | None, typer.Option("--project", "-p", help="Only consider tasks of this project")
]


@app.callback()
def main_callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            help="Verbosity level: 0=silent (default), 1=show changes, 2=show all checks, 3=debug",
            min=0,
            max=3,
        ),
    ] = 0,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to config file (default: caplane_config.yaml)",
        ),
    ] = None,
    today: Annotated[
        str | None,
        typer.Option("--today", help="As-of date (YYYY-MM-DD) used when a date is omitted"),
    ] = None,
) -> None:
    """Global options for caplane commands."""
    setup_logger(verbose)
    context.set_config_path(config)
    context.set_today(_parse_date_option(today))


def _parse_date_option(date_str: str | None) -> date | None:
    """Parse an optional YYYY-MM-DD CLI option."""
    if date_str is None:
        return None
    return _parse_date_argument(date_str)


def _parse_date_argument(date_str: str) -> date:
    """Parse a YYYY-MM-DD value, exiting on malformed input."""
    try:
        return date.fromisoformat(date_str)
    except ValueError:
        typer.echo(
            f"Error: Invalid date format '{date_str}'. Use YYYY-MM-DD format.",
            err=True,
        )
        raise typer.Exit(1) from None


def _fail(error: Exception) -> typer.Exit:
    typer.echo(f"Error: {error}", err=True)
    return typer.Exit(1)


def _load(file: Path | None) -> tuple[TaskBoard, UnifiedConfig]:
    """Load the task file (if any) and the discovered config."""
    try:
        config = discover_config(file)
        board = load_task_board(file) if file is not None else TaskBoard()
    except (CaplaneError, FileNotFoundError) as e:
        raise _fail(e) from e
    return board, config


def _controller(
    board: TaskBoard, config: UnifiedConfig, project: str | None
) -> PlacementController:
    return PlacementController(
        board,
        capacity_config=config.capacity,
        config=config.scheduler,
        placement=config.placement,
        project_id=project,
    )


def _format_hours(minutes: float) -> str:
    return f"{minutes / 60:.1f}h"


@app.command()
def capacity(
    start: Annotated[
        str | None, typer.Option("--from", help="First day to show (YYYY-MM-DD)")
    ] = None,
    days: Annotated[int, typer.Option("--days", "-d", min=1, help="Number of days")] = 14,
) -> None:
    """Show the capacity of each day in a date range."""
    _, config = _load(None)
    engine = SchedulingEngine([], config.capacity, config.scheduler)
    first = _parse_date_option(start) or context.get_today()

    for day in iter_days(first, add_days(first, days - 1)):
        typer.echo(f"{format_date_key(day)}  {day:%a}  {engine.get_day_capacity(day):g}h")


@app.command()
def due(
    file: TaskFileArg,
    task_id: Annotated[str, typer.Argument(help="Task to evaluate")],
    start: Annotated[
        str | None,
        typer.Option("--start", "-s", help="Start date (defaults to the task's, then today)"),
    ] = None,
    project: ProjectOpt = None,
) -> None:
    """Compute the minimum feasible due date of a task."""
    board, config = _load(file)
    try:
        task = board.get(task_id)
    except CaplaneError as e:
        raise _fail(e) from e

    start_date = _parse_date_option(start) or task.start_date or context.get_today()
    engine = _controller(board, config, project).engine()
    result = engine.solve(start_date, task.remaining_minutes, task.id, task.estimated_duration)

    typer.echo(f"{task.title} ({task.id})")
    typer.echo(f"  Start:          {start_date}")
    typer.echo(f"  Remaining work: {_format_hours(task.remaining_minutes)}")
    typer.echo(f"  Minimum due:    {result.due_date}")
    if task.due_date is not None:
        typer.echo(f"  Current due:    {task.due_date}")
    if not result.feasible:
        typer.echo(
            f"  ⚠️  Not feasible within {config.scheduler.max_iterations} days "
            f"({_format_hours(result.remaining_minutes)} unplaced)"
        )


def _export_load_csv(engine: SchedulingEngine, days: list[date], output_path: Path) -> None:
    """Export per-task daily load rows to CSV."""
    with output_path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["date", "capacity_hours", "total_minutes", "level", "task_id", "minutes"])
        for day in days:
            day_load = engine.day_load(day)
            row = [
                format_date_key(day),
                engine.get_day_capacity(day),
                round(day_load.total, 2),
                engine.load_level(day).value,
            ]
            if not day_load.tasks:
                writer.writerow([*row, "", ""])
            for entry in day_load.tasks:
                writer.writerow([*row, entry.id, round(entry.load, 2)])


@app.command()
def load(
    file: TaskFileArg,
    start: Annotated[
        str | None, typer.Option("--from", help="First day to show (YYYY-MM-DD)")
    ] = None,
    days: Annotated[int, typer.Option("--days", "-d", min=1, help="Number of days")] = 14,
    project: ProjectOpt = None,
    output_csv: Annotated[
        Path | None, typer.Option("--output-csv", help="Export the daily load to a CSV file")
    ] = None,
) -> None:
    """Show the daily load heat map of the scheduled tasks."""
    board, config = _load(file)
    engine = _controller(board, config, project).engine()
    first = _parse_date_option(start) or context.get_today()
    shown = list(iter_days(first, add_days(first, days - 1)))

    if output_csv:
        _export_load_csv(engine, shown, output_csv)
        typer.echo(f"Daily load exported to {output_csv}")
        return

    for day in shown:
        day_load = engine.day_load(day)
        level = engine.load_level(day)
        typer.echo(
            f"{LEVEL_MARKERS[level]} {format_date_key(day)}  {day:%a}  "
            f"{_format_hours(day_load.total)} / {engine.get_day_capacity(day):g}h  {level.value}"
        )
        for entry in day_load.tasks:
            typer.echo(f"      {entry.title} ({entry.id}): {_format_hours(entry.load)}")


@app.command()
def place(
    file: TaskFileArg,
    task_id: Annotated[str, typer.Argument(help="Task to place")],
    start: Annotated[str, typer.Argument(help="Start date (YYYY-MM-DD)")],
    project: ProjectOpt = None,
) -> None:
    """Preview placing a task on a start date (the task file is not modified)."""
    board, config = _load(file)
    start_date = _parse_date_argument(start)
    try:
        task = _controller(board, config, project).assign_via_drop(task_id, start_date)
    except CaplaneError as e:
        raise _fail(e) from e
    typer.echo(f"{task.title} ({task.id}): {task.start_date} -> {task.due_date}")


@app.command()
def resize(
    file: TaskFileArg,
    task_id: Annotated[str, typer.Argument(help="Task to resize")],
    days: Annotated[int, typer.Argument(min=1, help="Requested span in days, start included")],
    project: ProjectOpt = None,
) -> None:
    """Preview changing a task's span; it never shrinks below the feasible minimum."""
    board, config = _load(file)
    controller = _controller(board, config, project)
    try:
        session = controller.begin_resize(task_id, pointer_x=0.0)
    except CaplaneError as e:
        raise _fail(e) from e

    pixels = (days - session.original_days) * config.placement.column_width
    preview = controller.update_resize(pixels)
    task = controller.end_resize() or board.get(task_id)

    typer.echo(f"{task.title} ({task.id}): {task.start_date} -> {task.due_date}")
    if preview is not None and preview > days:
        typer.echo(f"  (clamped to the minimum of {session.min_days} days)")


@app.command()
def repair(
    file: TaskFileArg,
    project: ProjectOpt = None,
) -> None:
    """List due dates that fall before their feasible minimum, with the fix."""
    board, config = _load(file)
    changes = _controller(board, config, project).repair()

    if not changes:
        typer.echo("All due dates are feasible")
        return

    typer.echo("Due dates to move")
    typer.echo("=" * 80)
    for change in changes:
        title = board.get(change.task_id).title
        typer.echo(f"{title} ({change.task_id}): {change.old_due} -> {change.new_due}")


def main() -> int:
    """Main entry point."""
    # Typer handles sys.exit() internally
    app()
    return 0


if __name__ == "__main__":
    main()

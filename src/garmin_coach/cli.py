"""CLI entry point for garmin-coach.

Usage:
    garmin-coach validate workout.json           # Check a workout
    garmin-coach show workout.json               # Print the step breakdown
    garmin-coach export workout.json --format intervals
    garmin-coach readiness activities.json --stats daily.json
    garmin-coach config --show
"""

import json
import logging
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from garmin_coach.config import _LOCAL_ENV, Settings, get_settings
from garmin_coach.export.garmin import to_garmin_json
from garmin_coach.export.intervals import to_intervals_event
from garmin_coach.models.readiness import ReadinessFactor, ReadinessLevel
from garmin_coach.models.workout import RepeatStep, Workout
from garmin_coach.readiness.aggregate import calculate_readiness, group_factors
from garmin_coach.sources import SourceError, load_activities, load_daily_stats, load_json
from garmin_coach.workout.structure import estimate_duration, is_approximate, total_distance
from garmin_coach.workout.summary import fmt_distance, fmt_time, summarize
from garmin_coach.workout.validation import (
    DurationError,
    NestingError,
    StructuralError,
    TargetRangeError,
    WorkoutValidationError,
    validate,
)

app = typer.Typer(
    name="garmin-coach",
    help="Validate, display and export structured workouts; score training readiness.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()
err_console = Console(stderr=True)

_ERROR_TITLES: dict[type[WorkoutValidationError], str] = {
    StructuralError: "Malformed workout structure",
    DurationError: "Invalid step duration",
    TargetRangeError: "Invalid target range",
    NestingError: "Nested repeat blocks are not supported",
}

_LEVEL_STYLES = {
    ReadinessLevel.GREEN: "green",
    ReadinessLevel.YELLOW: "yellow",
    ReadinessLevel.RED: "red",
}


class ExportFormat(str, Enum):
    GARMIN = "garmin"
    INTERVALS = "intervals"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _get_settings() -> Settings:
    try:
        return get_settings()
    except ValidationError as exc:
        err_console.print(f"[red]Configuration error:[/red] {exc}")
        raise typer.Exit(1) from None


def _load_workout(source: str, settings: Settings) -> Workout:
    try:
        data = load_json(source, timeout=settings.http_timeout_s)
    except SourceError as exc:
        err_console.print(f"[red]Failed to load workout:[/red] {exc}")
        raise typer.Exit(1) from None

    result = validate(data)
    if result.error is not None:
        title = _ERROR_TITLES.get(type(result.error), "Invalid workout")
        err_console.print(f"[red]{title}:[/red] {result.error}")
        raise typer.Exit(1)
    return result.unwrap()


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging."),
    ] = False,
) -> None:
    """Configure logging for every command."""
    level = "DEBUG" if verbose else _get_settings().log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command()
def config(
    show: Annotated[
        bool,
        typer.Option("--show", help="Show current configuration."),
    ] = False,
) -> None:
    """Show the effective configuration.

    Values come from [cyan].env[/cyan] in the current directory and
    [bold]GARMIN_COACH_*[/bold] environment variables.
    """
    settings = _get_settings()
    if not show:
        console.print(
            f"Settings are read from [cyan]{_LOCAL_ENV}[/cyan] and GARMIN_COACH_* "
            "environment variables. Use [bold]--show[/bold] to print them."
        )
        return

    table = Table(title="garmin-coach settings")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    for name, value in settings.model_dump().items():
        table.add_row(name, "[dim]not set[/dim]" if value is None else str(value))
    console.print(table)


@app.command(name="validate")
def validate_cmd(
    source: Annotated[str, typer.Argument(help="Workout JSON file or URL.")],
) -> None:
    """Check that a workout is structurally valid."""
    settings = _get_settings()
    workout = _load_workout(source, settings)
    console.print(
        f"[green]✓ '{workout.name}' is valid ({len(workout.steps)} step(s)).[/green]"
    )


@app.command()
def show(
    source: Annotated[str, typer.Argument(help="Workout JSON file or URL.")],
) -> None:
    """Print the step-by-step breakdown of a workout."""
    settings = _get_settings()
    workout = _load_workout(source, settings)

    table = Table(title=workout.name)
    table.add_column("#", style="dim", justify="right")
    table.add_column("Step", style="bold")
    table.add_column("Duration", justify="right")
    table.add_column("Target")

    for index, step in enumerate(workout.steps, start=1):
        line = summarize(step)
        table.add_row(str(index), line.label, line.duration or line.badge, line.target)
        if isinstance(step, RepeatStep):
            for child in step.child_steps:
                child_line = summarize(child)
                table.add_row("", f"  {child_line.label}", child_line.duration, child_line.target)

    console.print(table)

    seconds = estimate_duration(workout, settings.easy_pace_sec_km)
    approx = "~" if is_approximate(workout) else ""
    footer = f"Estimated time: {approx}{fmt_time(seconds)}"
    distance = total_distance(workout)
    if distance:
        footer += f" • Distance: {fmt_distance(distance)}"
    console.print(f"[dim]{footer}[/dim]")


@app.command()
def export(
    source: Annotated[str, typer.Argument(help="Workout JSON file or URL.")],
    fmt: Annotated[
        ExportFormat,
        typer.Option("--format", "-f", help="Target platform."),
    ] = ExportFormat.GARMIN,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write JSON here instead of stdout."),
    ] = None,
) -> None:
    """Convert a workout to Garmin Connect or Intervals.icu JSON."""
    settings = _get_settings()
    workout = _load_workout(source, settings)

    if fmt == ExportFormat.GARMIN:
        payload = to_garmin_json(workout)
    else:
        event = to_intervals_event(
            workout, max_hr=settings.max_hr, pace_sec_per_km=settings.easy_pace_sec_km
        )
        payload = event.model_dump(exclude_none=True)

    text = json.dumps(payload, indent=2, ensure_ascii=False)
    if output is None:
        console.print_json(text)
        return
    output.write_text(text + "\n", encoding="utf-8")
    console.print(f"[green]✓ Wrote {fmt.value} workout to {output}[/green]")


def _factor_row(table: Table, factor: ReadinessFactor) -> None:
    table.add_row(
        factor.display_name,
        f"{factor.score}/{factor.max_score}",
        factor.label,
        factor.description,
    )


@app.command()
def readiness(
    activities_source: Annotated[
        str, typer.Argument(help="Activities JSON file or URL.")
    ],
    stats: Annotated[
        str | None,
        typer.Option("--stats", help="Daily stats JSON (stress, body battery, steps)."),
    ] = None,
    today: Annotated[
        str | None,
        typer.Option("--today", help="Score as of this date (YYYY-MM-DD)."),
    ] = None,
) -> None:
    """Score training readiness from recent activities and health telemetry."""
    settings = _get_settings()
    try:
        as_of = date.fromisoformat(today) if today else date.today()
    except ValueError:
        err_console.print(f"[red]Invalid date:[/red] {today}")
        raise typer.Exit(1) from None

    try:
        activities = load_activities(activities_source, timeout=settings.http_timeout_s)
        daily_stats = (
            load_daily_stats(stats, timeout=settings.http_timeout_s) if stats else None
        )
    except SourceError as exc:
        err_console.print(f"[red]Failed to load data:[/red] {exc}")
        raise typer.Exit(1) from None

    result = calculate_readiness(activities, daily_stats, today=as_of)
    fetched_at = datetime.now()
    style = _LEVEL_STYLES[result.level]

    console.print(
        Panel(
            result.summary,
            title=f"[{style}]{result.label} — {result.score}/100[/{style}]",
            border_style=style,
        )
    )

    training, health = group_factors(result.factors)
    table = Table()
    table.add_column("Factor", style="bold")
    table.add_column("Score", justify="right")
    table.add_column("Label")
    table.add_column("Details", style="dim")
    for factor in training:
        _factor_row(table, factor)
    if health:
        table.add_section()
        for factor in health:
            _factor_row(table, factor)
    console.print(table)

    refresh_at = fetched_at + settings.readiness_stale_after
    console.print(f"[dim]Refresh after {refresh_at:%H:%M}[/dim]")


if __name__ == "__main__":
    app()

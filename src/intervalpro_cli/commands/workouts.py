"""Workout management commands."""

from typing import Optional

import typer
from rich.prompt import Confirm

from intervalpro_cli.config import get_config_manager
from intervalpro_cli.models.workout.config import WorkoutConfig
from intervalpro_cli.ui.console import get_console
from intervalpro_cli.ui.formatters import (
    format_duration,
    format_error,
    format_output,
    format_success,
)
from intervalpro_cli.utils.exit_codes import ERROR_INVALID_ARGS

from .utils import find_workout_or_exit, get_workout_store, handle_storage_error

app = typer.Typer(help="Workout management commands")
console = get_console()


def _summary(workout: WorkoutConfig) -> dict:
    planned = workout.planned_duration
    return {
        "id": workout.id[:8],
        "name": workout.name,
        "work": f"{workout.work_duration}s",
        "reps": workout.repeat_label,
        "sets": workout.cycle_label,
        "prep": f"{workout.prep_time}s",
        "set_rest": f"{workout.cycle_rest_time}s",
        "total": format_duration(planned) if planned is not None else "∞",
    }


def _timing_options(**values: Optional[str]) -> dict:
    return {key: value for key, value in values.items() if value is not None}


@app.command("list")
def list_workouts(
    output: str = typer.Option("table", "--output", "-o", help="Output format"),
) -> None:
    """List saved workouts."""
    try:
        workouts = get_workout_store().get_workouts()
    except OSError as e:
        handle_storage_error(e, "loading workouts")
        return

    if output in ("json", "yaml"):
        format_output([w.to_dict() for w in workouts], output)
        return

    if not workouts:
        console.print("[yellow]No workouts yet. Add one with 'intervalpro workouts add'.[/yellow]")
        return
    format_output([_summary(w) for w in workouts], output, title="Workouts")


@app.command("add")
def add_workout(
    name: str = typer.Argument(..., help="Workout name"),
    work: Optional[str] = typer.Option(None, "--work", "-w", help="Work duration (seconds)"),
    reps: Optional[str] = typer.Option(
        None, "--reps", "-r", help="Repetitions per set (0 = unlimited)"
    ),
    sets: Optional[str] = typer.Option(None, "--sets", "-s", help="Sets (0 = unlimited)"),
    prep: Optional[str] = typer.Option(
        None, "--prep", "-p", help="Rest between repetitions (seconds)"
    ),
    pre_start: Optional[str] = typer.Option(
        None, "--pre-start", help="Countdown before the first repetition (seconds)"
    ),
    set_rest: Optional[str] = typer.Option(
        None, "--set-rest", help="Rest between sets (seconds)"
    ),
    color: Optional[str] = typer.Option(None, "--color", help="Card colour, e.g. #4CAF50"),
) -> None:
    """Add a workout.

    Unparsable or negative values fall back to the configured defaults.
    """
    fallbacks = get_config_manager().config.defaults.model_dump()
    workout = WorkoutConfig.from_input(
        name,
        color=color,
        fallbacks=fallbacks,
        **_timing_options(
            work_duration=work,
            repeat_count=reps,
            cycle_count=sets,
            prep_time=prep,
            pre_start_time=pre_start,
            cycle_rest_time=set_rest,
        ),
    )

    try:
        get_workout_store().add_workout(workout)
    except (OSError, ValueError) as e:
        handle_storage_error(e, "saving workout")

    format_success(f"Added workout '{workout.name}' ({workout.id[:8]})")


@app.command("edit")
def edit_workout(
    workout_ref: str = typer.Argument(..., help="Workout id, id prefix or name"),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="New name"),
    work: Optional[str] = typer.Option(None, "--work", "-w", help="Work duration (seconds)"),
    reps: Optional[str] = typer.Option(
        None, "--reps", "-r", help="Repetitions per set (0 = unlimited)"
    ),
    sets: Optional[str] = typer.Option(None, "--sets", "-s", help="Sets (0 = unlimited)"),
    prep: Optional[str] = typer.Option(
        None, "--prep", "-p", help="Rest between repetitions (seconds)"
    ),
    pre_start: Optional[str] = typer.Option(
        None, "--pre-start", help="Countdown before the first repetition (seconds)"
    ),
    set_rest: Optional[str] = typer.Option(
        None, "--set-rest", help="Rest between sets (seconds)"
    ),
    color: Optional[str] = typer.Option(None, "--color", help="Card colour"),
) -> None:
    """Edit a workout. Options that are not given keep their value."""
    store, workout = find_workout_or_exit(workout_ref)

    changes = _timing_options(
        work_duration=work,
        repeat_count=reps,
        cycle_count=sets,
        prep_time=prep,
        pre_start_time=pre_start,
        cycle_rest_time=set_rest,
    )
    if name is None and color is None and not changes:
        format_error("Nothing to change")
        raise typer.Exit(ERROR_INVALID_ARGS)

    updated = workout.with_changes(name=name, color=color, **changes)
    try:
        store.update_workout(updated)
    except (OSError, KeyError) as e:
        handle_storage_error(e, "updating workout")

    format_success(f"Updated workout '{updated.name}'")


@app.command("show")
def show_workout(
    workout_ref: str = typer.Argument(..., help="Workout id, id prefix or name"),
    output: str = typer.Option("table", "--output", "-o", help="Output format"),
) -> None:
    """Show one workout."""
    _, workout = find_workout_or_exit(workout_ref)

    if output in ("json", "yaml"):
        format_output(workout.to_dict(), output)
        return

    details = _summary(workout)
    details["id"] = workout.id
    details["pre_start"] = f"{workout.pre_start_time}s"
    details["color"] = workout.color
    format_output(details, output)


@app.command("delete")
def delete_workout(
    workout_ref: str = typer.Argument(..., help="Workout id, id prefix or name"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a workout. Its history is kept."""
    store, workout = find_workout_or_exit(workout_ref)

    if not yes and not Confirm.ask(f"Delete workout '{workout.name}'?", default=False):
        console.print("[yellow]Cancelled[/yellow]")
        raise typer.Exit(0)

    try:
        store.delete_workout(workout.id)
    except OSError as e:
        handle_storage_error(e, "deleting workout")

    format_success(f"Deleted workout '{workout.name}'")

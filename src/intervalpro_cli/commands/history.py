"""Workout history commands."""

from typing import Optional

import typer
from rich.prompt import Confirm
from rich.table import Table

from intervalpro_cli.models.workout.recorder import HistoryRecord
from intervalpro_cli.ui.console import get_console
from intervalpro_cli.ui.formatters import (
    format_duration,
    format_error,
    format_output,
    format_success,
)
from intervalpro_cli.utils.exit_codes import ERROR_NOT_FOUND

from .utils import (
    STORAGE_ERRORS,
    get_history_store,
    get_workout_store,
    handle_storage_error,
)

app = typer.Typer(help="Workout history commands")
console = get_console()


def _row(record: HistoryRecord) -> dict:
    return {
        "id": record.id[:8],
        "workout": record.workout_name,
        "started": record.start_datetime.strftime("%H:%M"),
        "duration": format_duration(record.duration_seconds),
        "reps": record.total_repetitions,
        "completed": record.completed,
    }


@app.command("list")
def list_history(
    workout_ref: Optional[str] = typer.Option(
        None, "--workout", "-w", help="Only runs of this workout (id or name)"
    ),
    limit: Optional[int] = typer.Option(None, "--limit", "-n", help="Maximum runs to show"),
    output: str = typer.Option("table", "--output", "-o", help="Output format"),
) -> None:
    """List recorded runs, grouped by day."""
    try:
        store = get_history_store()
        if workout_ref:
            workout = get_workout_store().find_workout(workout_ref)
            workout_id = workout.id if workout else workout_ref
            records = store.get_history_by_workout(workout_id)
            if limit is not None:
                records = records[:limit]
        else:
            records = store.get_history(limit=limit)
    except STORAGE_ERRORS as e:
        handle_storage_error(e, "loading history")
        return

    if output in ("json", "yaml"):
        format_output([r.to_dict() for r in records], output)
        return

    if not records:
        console.print("[yellow]No workout history yet[/yellow]")
        return

    days: dict = {}
    for record in records:
        days.setdefault(record.start_datetime.date(), []).append(record)

    for day, day_records in days.items():
        format_output(
            [_row(r) for r in day_records], output, title=day.strftime("%A, %B %d, %Y")
        )


@app.command("delete")
def delete_record(
    record_ref: str = typer.Argument(..., help="Record id or id prefix"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete one history record."""
    try:
        store = get_history_store()
        record = store.find_record(record_ref)
    except STORAGE_ERRORS as e:
        handle_storage_error(e, "loading history")
        return

    if record is None:
        format_error(f"History record '{record_ref}' not found")
        raise typer.Exit(ERROR_NOT_FOUND)

    if not yes and not Confirm.ask(
        f"Delete the {record.workout_name} run from "
        f"{record.start_datetime.strftime('%Y-%m-%d %H:%M')}?",
        default=False,
    ):
        console.print("[yellow]Cancelled[/yellow]")
        raise typer.Exit(0)

    try:
        store.delete_history_record(record.id)
    except STORAGE_ERRORS as e:
        handle_storage_error(e, "deleting history record")

    format_success(f"Deleted history record {record.id[:8]}")


@app.command("clear")
def clear_history(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete all workout history."""
    if not yes and not Confirm.ask(
        "Clear all workout history? This cannot be undone.", default=False
    ):
        console.print("[yellow]Cancelled[/yellow]")
        raise typer.Exit(0)

    try:
        deleted = get_history_store().clear_history()
    except STORAGE_ERRORS as e:
        handle_storage_error(e, "clearing history")
        return

    format_success(f"Cleared {deleted} history record(s)")


@app.command("stats")
def show_stats(
    days: int = typer.Option(7, "--days", "-d", min=1, help="Days in the daily chart"),
    output: str = typer.Option("table", "--output", "-o", help="Output format"),
) -> None:
    """Show workout statistics."""
    try:
        store = get_history_store()
        stats = store.get_stats()
        per_workout = store.get_stats_by_workout()
        daily = store.get_daily_counts(days=days)
    except STORAGE_ERRORS as e:
        handle_storage_error(e, "loading statistics")
        return

    if output in ("json", "yaml"):
        format_output(
            {
                **stats,
                "by_workout": per_workout,
                "daily": [{"date": d.isoformat(), "completed": c} for d, c in daily],
            },
            output,
        )
        return

    console.print("\n[bold cyan]📊 Workout Statistics[/bold cyan]\n")
    console.print(f"Workouts completed: [bold]{stats['completed_runs']}[/bold]")
    console.print(f"Stopped early: {stats['stopped_runs']}")
    console.print(f"Completion rate: {stats['completion_rate']}%")
    console.print(f"Total repetitions: [bold]{stats['total_repetitions']}[/bold]")
    console.print(f"Total time: {format_duration(stats['total_seconds'])}")

    if per_workout:
        table = Table(title="By workout", show_header=True, header_style="bold magenta")
        table.add_column("Workout", style="cyan")
        table.add_column("Runs", justify="right")
        table.add_column("Reps", justify="right")
        table.add_column("Time", justify="right")
        for entry in per_workout:
            table.add_row(
                entry["workout_name"],
                str(entry["runs"]),
                str(entry["total_repetitions"]),
                format_duration(entry["total_seconds"]),
            )
        console.print()
        console.print(table)

    peak = max((count for _, count in daily), default=0)
    console.print(f"\n[bold]Last {days} days[/bold]")
    for day, count in daily:
        bar = "█" * (count * 20 // peak) if peak else ""
        console.print(f"  {day.strftime('%a %d')}  {bar} {count}")

"""Main entry point for IntervalPro CLI."""

from typing import Optional

import typer

from intervalpro_cli import __version__
from intervalpro_cli.commands import history, settings, workouts
from intervalpro_cli.commands.run import run_workout
from intervalpro_cli.ui.console import get_console

app = typer.Typer(
    name="intervalpro",
    help="Interval workout timer for the terminal",
    no_args_is_help=True,
)

console = get_console()


# Add subcommands
app.add_typer(workouts.app, name="workouts", help="Workout management commands")
app.add_typer(history.app, name="history", help="Workout history and statistics")
app.add_typer(settings.app, name="settings", help="Settings management")


# Add top-level commands
@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]IntervalPro CLI[/bold] version [cyan]{__version__}[/cyan]")


@app.command()
def run(
    workout: str = typer.Argument(..., help="Workout id, id prefix or name"),
    fullscreen: Optional[bool] = typer.Option(
        None, "--fullscreen/--inline", help="Use the full terminal screen"
    ),
) -> None:
    """Run a workout.

    Controls: p pause, r resume, space toggle, s or q stop.
    """
    run_workout(workout, fullscreen=fullscreen)


if __name__ == "__main__":
    app()

"""Run a workout with the full-screen interval timer."""

from typing import Optional

import typer

from intervalpro_cli.config import get_config_manager
from intervalpro_cli.models.workout.cues import TerminalCueDispatcher
from intervalpro_cli.models.workout.recorder import HistoryRecord
from intervalpro_cli.models.workout.session import WorkoutSession
from intervalpro_cli.models.workout.storage import LocalPersistence
from intervalpro_cli.models.workout.ui import (
    TimerDisplay,
    show_completion_message,
    show_stopped_message,
)
from intervalpro_cli.ui.console import get_console
from intervalpro_cli.ui.formatters import format_warning
from intervalpro_cli.utils.exit_codes import RUN_ABORTED
from intervalpro_cli.utils.logger import get_logger

from .utils import STORAGE_ERRORS, find_workout_or_exit, get_history_store

console = get_console()
logger = get_logger("commands.run")


def run_workout(
    workout_ref: str,
    fullscreen: Optional[bool] = None,
    display: Optional[TimerDisplay] = None,
) -> None:
    """
    Run the workout named by *workout_ref* until it completes or is stopped.

    Args:
        workout_ref: Workout id, id prefix or name
        fullscreen: Use the alternate screen, defaults to the timer setting
        display: Timer display, built from the settings when omitted

    Raises:
        typer.Exit: ERROR_NOT_FOUND for an unknown workout, ERROR_STORAGE when
            the workouts file cannot be read, RUN_ABORTED when the run was
            stopped before completing

    An unusable history database does not prevent the run; it is reported
    as a session notice and the run is not recorded.
    """
    config = get_config_manager().config
    workouts, workout = find_workout_or_exit(workout_ref)

    history: Optional[LocalPersistence] = None
    history_error: Optional[Exception] = None
    try:
        history = LocalPersistence(workouts=workouts, history=get_history_store())
    except STORAGE_ERRORS as e:
        logger.error("Workout history is unavailable", exc_info=True)
        history_error = e

    if fullscreen is None:
        fullscreen = config.timer.fullscreen

    cues = TerminalCueDispatcher(
        console=console,
        volume=config.sound.effect_volume,
        bell=config.sound.bell,
        announce=not fullscreen,
    )
    records: list[HistoryRecord] = []
    session = WorkoutSession(
        workout,
        cues=cues,
        history=history,
        on_record=records.append,
    )
    if history_error is not None:
        session.notices.append(f"Workout history is unavailable: {history_error}")
    display = display or TimerDisplay(
        console=console, refresh_per_second=config.timer.refresh_per_second
    )

    def cue_message() -> Optional[str]:
        return cues.last_message if config.timer.show_cues else None

    logger.info("Running workout %r", workout.name)
    result = display.run_timer(session, cue_message=cue_message, screen=fullscreen)
    record = records[-1] if records else None
    saved = not session.notices

    if result == "completed":
        show_completion_message(session, record, console=console)
    else:
        show_stopped_message(record, workout.name, console=console, saved=saved)

    for notice in session.notices:
        format_warning(notice)

    if result != "completed":
        raise typer.Exit(RUN_ABORTED)

"""Helpers shared by the command modules."""

import sqlite3

import typer

from intervalpro_cli.config import get_config_manager
from intervalpro_cli.models.workout.config import WorkoutConfig
from intervalpro_cli.models.workout.history import HistoryStore
from intervalpro_cli.models.workout.storage import WorkoutStore
from intervalpro_cli.ui.formatters import format_error
from intervalpro_cli.utils.exit_codes import ERROR_NOT_FOUND, ERROR_STORAGE
from intervalpro_cli.utils.logger import get_logger

logger = get_logger("commands")

# Errors the stores raise when the data directory or database is unusable.
STORAGE_ERRORS = (sqlite3.Error, OSError)


def get_workout_store() -> WorkoutStore:
    """Workout store using the configured fallback durations."""
    defaults = get_config_manager().config.defaults.model_dump()
    return WorkoutStore(fallbacks=defaults)


def get_history_store() -> HistoryStore:
    return HistoryStore()


def find_workout_or_exit(workout_ref: str) -> tuple[WorkoutStore, WorkoutConfig]:
    """Look up a workout by id, id prefix or name.

    Exits with ERROR_STORAGE when the workouts file cannot be read and with
    ERROR_NOT_FOUND when nothing matches.
    """
    try:
        store = get_workout_store()
        workout = store.find_workout(workout_ref)
    except OSError as e:
        handle_storage_error(e, "loading workouts")

    if workout is None:
        format_error(f"Workout '{workout_ref}' not found")
        raise typer.Exit(ERROR_NOT_FOUND)
    return store, workout


def handle_storage_error(exception: Exception, action: str) -> None:
    """Handle storage errors uniformly."""
    logger.error("Error %s", action, exc_info=exception)
    format_error(f"Error {action}: {str(exception)}")
    raise typer.Exit(ERROR_STORAGE)

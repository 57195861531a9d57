"""Shared test fixtures and configuration.

Isolates every test from the real config, data and history files.
"""

from __future__ import annotations

import logging
from unittest.mock import patch

import pytest

from intervalpro_cli.models.workout.config import WorkoutConfig


# ---------------------------------------------------------------------------
# Filesystem isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def isolated_dirs(tmp_path):
    """Point platformdirs config/data/log lookups at *tmp_path*.

    Also drops the cached global ConfigManager so each test starts from
    default settings, and swaps the application log file for one under
    *tmp_path*.
    """
    import intervalpro_cli.config as config_mod
    import intervalpro_cli.utils.logger as logger_mod

    config_dir = str(tmp_path / "config")
    data_dir = str(tmp_path / "data")
    log_dir = str(tmp_path / "log")

    app_logger = logging.getLogger("intervalpro_cli")
    saved_handlers = list(app_logger.handlers)
    saved_logger = logger_mod._logger
    app_logger.handlers.clear()
    logger_mod._logger = None

    config_mod._config_manager = None
    with patch("intervalpro_cli.config.user_config_dir", return_value=config_dir):
        with patch("intervalpro_cli.config.user_data_dir", return_value=data_dir):
            with patch("platformdirs.user_data_dir", return_value=data_dir):
                with patch("intervalpro_cli.utils.logger.user_log_dir", return_value=log_dir):
                    logger_mod.get_logger()
                    yield tmp_path
    config_mod._config_manager = None

    for handler in app_logger.handlers:
        handler.close()
    app_logger.handlers[:] = saved_handlers
    logger_mod._logger = saved_logger


# ---------------------------------------------------------------------------
# Workout helpers
# ---------------------------------------------------------------------------


def make_workout(**overrides) -> WorkoutConfig:
    """Build a small finite workout; *overrides* replace any field."""
    values = {
        "id": "w-0001",
        "name": "Push-ups",
        "work_duration": 4,
        "repeat_count": 2,
        "cycle_count": 1,
        "prep_time": 2,
        "pre_start_time": 0,
        "cycle_rest_time": 0,
    }
    values.update(overrides)
    return WorkoutConfig(**values)


class FakeTime:
    """Manually advanced monotonic time source."""

    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def fake_time() -> FakeTime:
    return FakeTime()


class RecordingCues:
    """Cue dispatcher that remembers every call in order."""

    def __init__(self):
        self.calls: list[tuple] = []

    def on_phase_enter(self, phase, config) -> None:
        self.calls.append(("phase_enter", phase))

    def on_get_ready(self) -> None:
        self.calls.append(("get_ready",))

    def on_near_end(self) -> None:
        self.calls.append(("near_end",))

    def on_set_complete(self) -> None:
        self.calls.append(("set_complete",))

    def on_run_complete(self) -> None:
        self.calls.append(("run_complete",))

    def names(self) -> list[str]:
        return [call[0] for call in self.calls]


class MemoryHistory:
    """History sink that keeps records in a list."""

    def __init__(self):
        self.records = []

    def append_history_record(self, record) -> None:
        self.records.append(record)


@pytest.fixture()
def workout_factory():
    """Factory for small finite workouts."""
    return make_workout


@pytest.fixture()
def cues() -> RecordingCues:
    return RecordingCues()


@pytest.fixture()
def memory_history() -> MemoryHistory:
    return MemoryHistory()

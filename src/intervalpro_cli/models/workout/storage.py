"""Local storage for workout definitions and the persistence facade."""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Protocol

from intervalpro_cli.utils.logger import get_logger

from .config import WorkoutConfig
from .history import HistoryStore
from .recorder import HistoryRecord

logger = get_logger("storage")


class HistorySink(Protocol):
    """Where a session hands its history record."""

    def append_history_record(self, record: HistoryRecord) -> None: ...


class Persistence(HistorySink, Protocol):
    """Storage collaborator used by the CLI."""

    def get_workouts(self) -> list[WorkoutConfig]: ...

    def save_workouts(self, workouts: list[WorkoutConfig]) -> None: ...

    def get_history(self) -> list[HistoryRecord]: ...

    def delete_history_record(self, record_id: str) -> bool: ...

    def clear_history(self) -> int: ...


def default_data_dir() -> Path:
    from platformdirs import user_data_dir

    return Path(user_data_dir("intervalpro-cli"))


class WorkoutStore:
    """Workout definitions kept in a JSON file."""

    def __init__(
        self,
        path: Path | None = None,
        fallbacks: Mapping[str, int] | None = None,
    ):
        """Initialize the store.

        Args:
            path: JSON file, defaults to ``workouts.json`` in the user data dir
            fallbacks: Defaults applied to unparsable stored values
        """
        self.path = path or default_data_dir() / "workouts.json"
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.fallbacks = fallbacks

    def get_workouts(self) -> list[WorkoutConfig]:
        """Load all workouts. A missing or unreadable file yields an empty list."""
        if not self.path.exists():
            return []

        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError):
            logger.error("Workouts file %s is corrupt, ignoring it", self.path, exc_info=True)
            return []

        if not isinstance(data, list):
            logger.error("Workouts file %s does not hold a list, ignoring it", self.path)
            return []

        workouts = []
        for item in data:
            if not isinstance(item, dict):
                logger.warning("Skipping malformed workout entry %r", item)
                continue
            workouts.append(WorkoutConfig.from_dict(item, fallbacks=self.fallbacks))
        return workouts

    def save_workouts(self, workouts: list[WorkoutConfig]) -> None:
        """Replace the stored workouts."""
        tmp = self.path.with_suffix(".json.tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump([w.to_dict() for w in workouts], f, indent=2, ensure_ascii=False)
        tmp.replace(self.path)

    def get_workout(self, workout_id: str) -> WorkoutConfig | None:
        for workout in self.get_workouts():
            if workout.id == workout_id:
                return workout
        return None

    def find_workout(self, ref: str) -> WorkoutConfig | None:
        """
        Look a workout up by id, unique id prefix, or name (case-insensitive).

        Returns None when nothing matches or a prefix/name is ambiguous.
        """
        workouts = self.get_workouts()
        ref = ref.strip()
        if not ref:
            return None

        for workout in workouts:
            if workout.id == ref:
                return workout

        by_prefix = [w for w in workouts if w.id.startswith(ref)]
        if len(by_prefix) == 1:
            return by_prefix[0]

        by_name = [w for w in workouts if w.name.casefold() == ref.casefold()]
        if len(by_name) == 1:
            return by_name[0]
        return None

    def add_workout(self, workout: WorkoutConfig) -> WorkoutConfig:
        """Append a workout.

        Raises:
            ValueError: If a workout with the same id exists
        """
        workouts = self.get_workouts()
        if any(w.id == workout.id for w in workouts):
            raise ValueError(f"Workout {workout.id} already exists")
        workouts.append(workout)
        self.save_workouts(workouts)
        return workout

    def update_workout(self, workout: WorkoutConfig) -> WorkoutConfig:
        """Replace the stored workout with the same id.

        Raises:
            KeyError: If no such workout exists
        """
        workouts = self.get_workouts()
        for index, existing in enumerate(workouts):
            if existing.id == workout.id:
                workouts[index] = workout
                self.save_workouts(workouts)
                return workout
        raise KeyError(workout.id)

    def delete_workout(self, workout_id: str) -> bool:
        workouts = self.get_workouts()
        remaining = [w for w in workouts if w.id != workout_id]
        if len(remaining) == len(workouts):
            return False
        self.save_workouts(remaining)
        return True


class LocalPersistence:
    """Workouts in JSON, history in SQLite, behind one interface."""

    def __init__(
        self,
        workouts: WorkoutStore | None = None,
        history: HistoryStore | None = None,
    ):
        self.workouts = workouts or WorkoutStore()
        self.history = history or HistoryStore()

    def get_workouts(self) -> list[WorkoutConfig]:
        return self.workouts.get_workouts()

    def save_workouts(self, workouts: list[WorkoutConfig]) -> None:
        self.workouts.save_workouts(workouts)

    def append_history_record(self, record: HistoryRecord) -> None:
        self.history.append_history_record(record)

    def get_history(self) -> list[HistoryRecord]:
        return self.history.get_history()

    def delete_history_record(self, record_id: str) -> bool:
        return self.history.delete_history_record(record_id)

    def clear_history(self) -> int:
        return self.history.clear_history()

"""Unit tests for WorkoutStore and LocalPersistence."""

from __future__ import annotations

import json

import pytest

from intervalpro_cli.models.workout.config import WorkoutConfig
from intervalpro_cli.models.workout.history import HistoryStore
from intervalpro_cli.models.workout.recorder import HistoryRecord
from intervalpro_cli.models.workout.storage import (
    LocalPersistence,
    WorkoutStore,
    default_data_dir,
)


@pytest.fixture()
def store(tmp_path) -> WorkoutStore:
    return WorkoutStore(tmp_path / "workouts.json")


def _workout(id: str, name: str) -> WorkoutConfig:
    return WorkoutConfig(id=id, name=name, work_duration=20, repeat_count=3, cycle_count=2)


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


class TestLoad:
    """Tests for get_workouts."""

    def test_missing_file(self, store) -> None:
        assert store.get_workouts() == []

    def test_save_and_load(self, store) -> None:
        workouts = [_workout("a1", "Squats"), _workout("b2", "Lunges")]

        store.save_workouts(workouts)

        assert store.get_workouts() == workouts
        assert not store.path.with_suffix(".json.tmp").exists()

    def test_corrupt_file(self, store) -> None:
        store.path.write_text("{not json", encoding="utf-8")

        assert store.get_workouts() == []

    def test_not_a_list(self, store) -> None:
        store.path.write_text(json.dumps({"id": "a"}), encoding="utf-8")

        assert store.get_workouts() == []

    def test_skips_malformed_entries(self, store) -> None:
        store.path.write_text(
            json.dumps(["junk", {"id": "a", "name": "Plank", "duration": 60}]),
            encoding="utf-8",
        )

        workouts = store.get_workouts()

        assert [w.id for w in workouts] == ["a"]
        assert workouts[0].work_duration == 60

    def test_bad_values_use_fallbacks(self, tmp_path) -> None:
        path = tmp_path / "workouts.json"
        path.write_text(
            json.dumps([{"id": "a", "name": "x", "duration": "long"}]), encoding="utf-8"
        )

        store = WorkoutStore(path, fallbacks={"work_duration": 45})

        assert store.get_workouts()[0].work_duration == 45

    def test_default_location(self, isolated_dirs) -> None:
        store = WorkoutStore()

        assert store.path == default_data_dir() / "workouts.json"
        assert str(store.path).startswith(str(isolated_dirs))


# ---------------------------------------------------------------------------
# Lookup and edits
# ---------------------------------------------------------------------------


class TestFind:
    """Tests for find_workout."""

    @pytest.fixture(autouse=True)
    def _seed(self, store) -> None:
        store.save_workouts(
            [
                _workout("abc-111", "Squats"),
                _workout("abd-222", "Lunges"),
                _workout("xyz-333", "squats"),
            ]
        )

    def test_exact_id(self, store) -> None:
        assert store.find_workout("abd-222").name == "Lunges"

    def test_unique_prefix(self, store) -> None:
        assert store.find_workout("xy").id == "xyz-333"

    def test_ambiguous_prefix(self, store) -> None:
        assert store.find_workout("ab") is None

    def test_unique_name(self, store) -> None:
        assert store.find_workout("LUNGES").id == "abd-222"

    def test_ambiguous_name(self, store) -> None:
        assert store.find_workout("Squats") is None

    def test_blank(self, store) -> None:
        assert store.find_workout("  ") is None


class TestEdits:
    """Tests for add/update/delete."""

    def test_add(self, store) -> None:
        store.add_workout(_workout("a", "One"))

        assert store.get_workout("a").name == "One"

    def test_add_duplicate(self, store) -> None:
        store.add_workout(_workout("a", "One"))

        with pytest.raises(ValueError):
            store.add_workout(_workout("a", "Other"))

    def test_update(self, store) -> None:
        store.add_workout(_workout("a", "One"))

        store.update_workout(_workout("a", "Renamed"))

        assert store.get_workout("a").name == "Renamed"

    def test_update_missing(self, store) -> None:
        with pytest.raises(KeyError):
            store.update_workout(_workout("nope", "x"))

    def test_delete(self, store) -> None:
        store.add_workout(_workout("a", "One"))

        assert store.delete_workout("a") is True
        assert store.delete_workout("a") is False
        assert store.get_workouts() == []


# ---------------------------------------------------------------------------
# LocalPersistence
# ---------------------------------------------------------------------------


class TestLocalPersistence:
    def test_delegates(self, tmp_path) -> None:
        persistence = LocalPersistence(
            workouts=WorkoutStore(tmp_path / "w.json"),
            history=HistoryStore(tmp_path / "h.db"),
        )
        record = HistoryRecord(
            id="r1",
            workout_id="a",
            workout_name="One",
            start_time="2026-01-01T10:00:00+00:00",
            end_time="2026-01-01T10:05:00+00:00",
            total_repetitions=6,
            completed=True,
        )

        persistence.save_workouts([_workout("a", "One")])
        persistence.append_history_record(record)

        assert [w.id for w in persistence.get_workouts()] == ["a"]
        assert persistence.get_history() == [record]
        assert persistence.delete_history_record("r1") is True
        assert persistence.clear_history() == 0

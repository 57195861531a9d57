"""Workout run history with SQLite storage."""

from __future__ import annotations

import sqlite3
from collections import defaultdict
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Any

from .recorder import HistoryRecord


class HistoryStore:
    """Manages workout run history in a SQLite database."""

    def __init__(self, db_path: Path | None = None):
        """Initialize history store."""
        if db_path is None:
            from platformdirs import user_data_dir

            db_path = Path(user_data_dir("intervalpro-cli")) / "history.db"

        self.db_path = db_path
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_database()

    def _init_database(self) -> None:
        """Initialize database schema."""
        with sqlite3.connect(self.db_path) as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS workout_history (
                    id TEXT PRIMARY KEY,
                    workout_id TEXT NOT NULL,
                    workout_name TEXT NOT NULL,
                    start_time TEXT NOT NULL,
                    end_time TEXT NOT NULL,
                    total_repetitions INTEGER NOT NULL DEFAULT 0,
                    completed INTEGER NOT NULL DEFAULT 0,
                    created_at TEXT NOT NULL
                )
                """
            )
            conn.execute(
                """
                CREATE INDEX IF NOT EXISTS idx_history_start
                ON workout_history(start_time)
                """
            )
            conn.execute(
                """
                CREATE INDEX IF NOT EXISTS idx_history_workout
                ON workout_history(workout_id)
                """
            )
            conn.commit()

    @staticmethod
    def _to_record(row: sqlite3.Row) -> HistoryRecord:
        return HistoryRecord.from_dict(dict(row))

    def append_history_record(self, record: HistoryRecord) -> None:
        """Store a finished or abandoned run."""
        with sqlite3.connect(self.db_path) as conn:
            conn.execute(
                """
                INSERT INTO workout_history (
                    id, workout_id, workout_name, start_time, end_time,
                    total_repetitions, completed, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    record.id,
                    record.workout_id,
                    record.workout_name,
                    record.start_time,
                    record.end_time,
                    record.total_repetitions,
                    1 if record.completed else 0,
                    datetime.now().astimezone().isoformat(),
                ),
            )
            conn.commit()

    def get_history(self, limit: int | None = None) -> list[HistoryRecord]:
        """
        Get recorded runs, newest first.

        Args:
            limit: Maximum number of records, all when None
        """
        query = "SELECT * FROM workout_history ORDER BY start_time DESC"
        params: tuple[Any, ...] = ()
        if limit is not None:
            query += " LIMIT ?"
            params = (limit,)

        with sqlite3.connect(self.db_path) as conn:
            conn.row_factory = sqlite3.Row
            cursor = conn.execute(query, params)
            return [self._to_record(row) for row in cursor.fetchall()]

    def get_history_by_workout(self, workout_id: str) -> list[HistoryRecord]:
        """Get all runs of one workout, newest first."""
        with sqlite3.connect(self.db_path) as conn:
            conn.row_factory = sqlite3.Row
            cursor = conn.execute(
                """
                SELECT * FROM workout_history
                WHERE workout_id = ?
                ORDER BY start_time DESC
                """,
                (workout_id,),
            )
            return [self._to_record(row) for row in cursor.fetchall()]

    def find_record(self, ref: str) -> HistoryRecord | None:
        """Look a record up by id or unique id prefix."""
        with sqlite3.connect(self.db_path) as conn:
            conn.row_factory = sqlite3.Row
            rows = conn.execute(
                "SELECT * FROM workout_history WHERE id = ? OR id LIKE ? LIMIT 2",
                (ref, ref.replace("%", "").replace("_", "") + "%"),
            ).fetchall()

        exact = [row for row in rows if row["id"] == ref]
        if exact:
            return self._to_record(exact[0])
        if len(rows) == 1:
            return self._to_record(rows[0])
        return None

    def delete_history_record(self, record_id: str) -> bool:
        """Delete one record. Returns False if it did not exist."""
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute(
                "DELETE FROM workout_history WHERE id = ?", (record_id,)
            )
            conn.commit()
            return cursor.rowcount > 0

    def clear_history(self) -> int:
        """Delete every record. Returns the number deleted."""
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute("DELETE FROM workout_history")
            conn.commit()
            return cursor.rowcount

    def get_stats(self) -> dict[str, Any]:
        """
        Overall statistics.

        Returns:
            Dictionary with run counts, total repetitions and total time.
            Time is measured from each run's start to its end.
        """
        records = self.get_history()
        total = len(records)
        completed = sum(1 for r in records if r.completed)
        total_seconds = sum(r.duration_seconds for r in records)

        return {
            "total_runs": total,
            "completed_runs": completed,
            "stopped_runs": total - completed,
            "completion_rate": round((completed / total * 100) if total > 0 else 0, 1),
            "total_repetitions": sum(r.total_repetitions for r in records),
            "total_seconds": total_seconds,
            "total_minutes": round(total_seconds / 60, 1),
        }

    def get_stats_by_workout(self) -> list[dict[str, Any]]:
        """Repetitions and time per workout name, busiest first."""
        totals: dict[str, dict[str, Any]] = {}
        for record in self.get_history():
            entry = totals.setdefault(
                record.workout_name,
                {
                    "workout_name": record.workout_name,
                    "runs": 0,
                    "total_repetitions": 0,
                    "total_seconds": 0,
                },
            )
            entry["runs"] += 1
            entry["total_repetitions"] += record.total_repetitions
            entry["total_seconds"] += record.duration_seconds

        return sorted(
            totals.values(), key=lambda e: (-e["total_repetitions"], e["workout_name"])
        )

    def get_daily_counts(
        self, days: int = 7, today: date | None = None
    ) -> list[tuple[date, int]]:
        """
        Completed runs per day for the last *days* days, oldest first.

        Args:
            days: Number of days including today
            today: Reference day, defaults to the local date
        """
        today = today or datetime.now().date()
        counts = {today - timedelta(days=offset): 0 for offset in range(days - 1, -1, -1)}

        for record in self.get_history():
            if not record.completed:
                continue
            day = record.start_datetime.date()
            if day in counts:
                counts[day] += 1

        return list(counts.items())

    def group_by_date(self) -> dict[date, list[HistoryRecord]]:
        """Records grouped by the local date they started, newest first."""
        grouped: dict[date, list[HistoryRecord]] = defaultdict(list)
        for record in self.get_history():
            grouped[record.start_datetime.date()].append(record)
        return dict(grouped)

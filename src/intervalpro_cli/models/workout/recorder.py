"""History records built when a run finishes or is stopped."""

from __future__ import annotations

import uuid
from collections.abc import Callable
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any

from .config import WorkoutConfig
from .tracker import RepetitionTracker

if TYPE_CHECKING:
    from .session import TimerSession


def _now() -> datetime:
    return datetime.now().astimezone()


@dataclass(frozen=True)
class HistoryRecord:
    """Outcome of one workout run."""

    id: str
    workout_id: str
    workout_name: str
    start_time: str  # ISO 8601
    end_time: str  # ISO 8601
    total_repetitions: int
    completed: bool

    @property
    def start_datetime(self) -> datetime:
        return datetime.fromisoformat(self.start_time.replace("Z", "+00:00"))

    @property
    def end_datetime(self) -> datetime:
        return datetime.fromisoformat(self.end_time.replace("Z", "+00:00"))

    @property
    def duration_seconds(self) -> int:
        """Wall-clock length of the run, pauses included."""
        return max(0, int((self.end_datetime - self.start_datetime).total_seconds()))

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HistoryRecord:
        return cls(
            id=data["id"],
            workout_id=data["workout_id"],
            workout_name=data["workout_name"],
            start_time=data["start_time"],
            end_time=data["end_time"],
            total_repetitions=int(data["total_repetitions"]),
            completed=bool(data["completed"]),
        )


class CompletionRecorder:
    """Builds the :class:`HistoryRecord` for a finished or abandoned run."""

    def __init__(
        self,
        now: Callable[[], datetime] = _now,
        id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
    ):
        self._now = now
        self._id_factory = id_factory

    def build_record(
        self, session: TimerSession, config: WorkoutConfig, aborted: bool
    ) -> HistoryRecord:
        """
        Build the history record for *session*.

        Args:
            session: The run's timer state
            config: The workout that was run
            aborted: True when the user stopped or reset the run

        Raises:
            ValueError: If the session was never started
        """
        if session.started_at is None:
            raise ValueError("Cannot record a session that was never started")

        tracker = RepetitionTracker(config)
        return HistoryRecord(
            id=self._id_factory(),
            workout_id=config.id,
            workout_name=config.name,
            start_time=session.started_at.isoformat(),
            end_time=self._now().isoformat(),
            total_repetitions=tracker.total_repetitions(session.counters),
            completed=not aborted and session.phase == "completed",
        )

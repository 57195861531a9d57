"""A single workout run: timer state plus the object that drives it."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Literal

from intervalpro_cli.utils.logger import get_logger

from .clock import PhaseClock
from .config import WorkoutConfig
from .cues import CueDispatcher, NullCueDispatcher, SafeCueDispatcher
from .phases import PHASE_LABELS, RUNNING_PHASES, Phase, PhaseStateMachine, Transition
from .recorder import CompletionRecorder, HistoryRecord
from .tracker import Counters

if TYPE_CHECKING:
    from .storage import HistorySink

logger = get_logger("session")

ToggleResult = Literal["started", "paused", "resumed", "reset"]


def _now() -> datetime:
    return datetime.now().astimezone()


@dataclass
class TimerSession:
    """Mutable timing state of one run."""

    phase: Phase = "idle"
    remaining_seconds: int = 0
    phase_duration: int = 0
    repeat_index: int = 0
    set_index: int = 1
    completed_sets: int = 0
    completed_repetitions: int = 0
    is_paused: bool = False
    is_active: bool = False
    started_at: datetime | None = None

    @property
    def counters(self) -> Counters:
        return Counters(
            repeat_index=self.repeat_index,
            set_index=self.set_index,
            completed_sets=self.completed_sets,
            completed_repetitions=self.completed_repetitions,
        )

    def apply(self, transition: Transition) -> None:
        """Move into the phase described by *transition*."""
        self.phase = transition.phase
        self.remaining_seconds = max(0, transition.remaining_seconds)
        self.phase_duration = self.remaining_seconds
        self.repeat_index = transition.counters.repeat_index
        self.set_index = transition.counters.set_index
        self.completed_sets = transition.counters.completed_sets
        self.completed_repetitions = transition.counters.completed_repetitions

    def to_dict(self) -> dict:
        return {
            "phase": self.phase,
            "remaining_seconds": self.remaining_seconds,
            "phase_duration": self.phase_duration,
            "repeat_index": self.repeat_index,
            "set_index": self.set_index,
            "completed_sets": self.completed_sets,
            "completed_repetitions": self.completed_repetitions,
            "is_paused": self.is_paused,
            "is_active": self.is_active,
            "started_at": self.started_at.isoformat() if self.started_at else None,
        }


class WorkoutSession:
    """
    Runs one workout.

    Owns the run's :class:`TimerSession` and a single :class:`PhaseClock`
    whose ticks drive every transition. Cues go to the injected dispatcher
    (failures are logged and ignored); history records go to the injected
    sink exactly once per run that became active.

    Everything here is synchronous and single-threaded. The driver calls
    :meth:`poll` (or :meth:`tick` directly in tests).
    """

    def __init__(
        self,
        config: WorkoutConfig,
        cues: CueDispatcher | None = None,
        history: HistorySink | None = None,
        recorder: CompletionRecorder | None = None,
        time_source: Callable[[], float] = time.monotonic,
        now: Callable[[], datetime] = _now,
        on_record: Callable[[HistoryRecord], None] | None = None,
        on_transition: Callable[[Transition], None] | None = None,
    ):
        self.config = config
        self.machine = PhaseStateMachine(config)
        self.cues = SafeCueDispatcher(cues or NullCueDispatcher())
        self.history = history
        self.recorder = recorder or CompletionRecorder(now=now)
        self.on_record = on_record
        self.on_transition = on_transition
        self.notices: list[str] = []
        self._now = now
        self.clock = PhaseClock(self.tick, time_source=time_source)
        self.state = self._idle_state()

    def _idle_state(self) -> TimerSession:
        remaining = self.machine.idle_remaining()
        return TimerSession(remaining_seconds=remaining, phase_duration=remaining)

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def phase(self) -> Phase:
        return self.state.phase

    @property
    def phase_label(self) -> str:
        return PHASE_LABELS[self.state.phase]

    @property
    def is_completed(self) -> bool:
        return self.state.phase == "completed"

    @property
    def total_repetitions(self) -> int:
        return self.machine.tracker.total_repetitions(self.state.counters)

    @property
    def is_final_repetition(self) -> bool:
        return self.state.phase == "workout" and self.machine.tracker.is_final_repetition(
            self.state.counters
        )

    def phase_progress(self) -> float:
        """Fraction of the current phase that has elapsed (0.0 - 1.0)."""
        if self.state.phase_duration <= 0:
            return 1.0 if self.state.phase == "completed" else 0.0
        done = self.state.phase_duration - self.state.remaining_seconds
        return min(1.0, max(0.0, done / self.state.phase_duration))

    def elapsed_seconds(self) -> int:
        """Wall-clock seconds since the run started, pauses included."""
        if self.state.started_at is None:
            return 0
        return max(0, int((self._now() - self.state.started_at).total_seconds()))

    # ------------------------------------------------------------------
    # Controls
    # ------------------------------------------------------------------

    def start(self) -> bool:
        """Begin the run. Returns False if already running or not yet acknowledged."""
        if self.state.is_active or self.state.phase == "completed":
            return False

        self.state = TimerSession(started_at=self._now(), is_active=True)
        self.clock.stop()
        self.clock.start()
        logger.info("Started workout %r (%s)", self.config.name, self.config.id)
        self._enter(self.machine.start())
        return True

    def pause(self) -> bool:
        if not self.state.is_active or self.state.is_paused:
            return False
        self.state.is_paused = True
        self.clock.pause()
        logger.debug("Paused at %s with %ds left", self.state.phase, self.state.remaining_seconds)
        return True

    def resume(self) -> bool:
        if not self.state.is_active or not self.state.is_paused:
            return False
        self.state.is_paused = False
        self.clock.resume()
        logger.debug("Resumed %s with %ds left", self.state.phase, self.state.remaining_seconds)
        return True

    def toggle(self) -> ToggleResult:
        """Single-button control: start, pause/resume, or clear a finished run."""
        if self.state.phase == "completed":
            self.acknowledge()
            return "reset"
        if not self.state.is_active:
            self.start()
            return "started"
        if self.state.is_paused:
            self.resume()
            return "resumed"
        self.pause()
        return "paused"

    def reset(self) -> HistoryRecord | None:
        """
        Cancel the run and return to idle.

        If the run had become active, an abandoned (``completed=False``)
        record is produced and handed to the history sink. Calling this
        again, or on an idle or completed session, records nothing.
        """
        self.clock.stop()
        record = None
        if self.state.is_active:
            record = self._record(aborted=True)
            logger.info(
                "Stopped workout %r after %d repetitions",
                self.config.name,
                record.total_repetitions,
            )
        self.state = self._idle_state()
        return record

    stop = reset

    def acknowledge(self) -> None:
        """Clear a completed run back to idle."""
        if self.state.phase == "completed":
            self.reset()

    # ------------------------------------------------------------------
    # Ticking
    # ------------------------------------------------------------------

    def poll(self) -> int:
        """Deliver due clock ticks. Returns how many were delivered."""
        return self.clock.poll()

    def tick(self) -> Transition | None:
        """Advance the run by one second.

        Returns the transition taken when the current phase expired,
        otherwise None. Ticks on an idle, paused or completed session are
        ignored.
        """
        state = self.state
        if not state.is_active or state.is_paused or state.phase not in RUNNING_PHASES:
            return None

        state.remaining_seconds = self.machine.count_down(state.remaining_seconds)
        if not self.machine.is_expired(state.remaining_seconds):
            cue = self.machine.cue_for(state.phase, state.remaining_seconds)
            if cue == "get_ready":
                self.cues.on_get_ready()
            elif cue == "near_end":
                self.cues.on_near_end()
            return None

        transition = self.machine.next_phase(state.phase, state.counters)
        self._enter(transition)
        return transition

    def _enter(self, transition: Transition) -> None:
        self.state.apply(transition)
        logger.debug(
            "Entered %s (%ds) set=%d rep=%d",
            transition.phase,
            transition.remaining_seconds,
            transition.counters.set_index,
            transition.counters.repeat_index,
        )

        if transition.run_completed:
            self.clock.stop()
            self.state.is_active = False
            self.state.is_paused = False
            self._record(aborted=False)
            logger.info(
                "Completed workout %r with %d repetitions",
                self.config.name,
                self.total_repetitions,
            )

        if self.on_transition is not None:
            self.on_transition(transition)

        if transition.set_completed:
            self.cues.on_set_complete()
        if transition.run_completed:
            self.cues.on_run_complete()
        else:
            self.cues.on_phase_enter(transition.phase, self.config)

    def _record(self, aborted: bool) -> HistoryRecord:
        record = self.recorder.build_record(self.state, self.config, aborted=aborted)
        if self.history is not None:
            try:
                self.history.append_history_record(record)
            except Exception as e:
                logger.error("Failed to save history record %s", record.id, exc_info=True)
                self.notices.append(f"Workout history could not be saved: {e}")
        if self.on_record is not None:
            self.on_record(record)
        return record

"""Phase transition rules for an interval workout run.

A run moves through::

    pre_start -> workout -> (prep -> workout)* -> (cycle_rest -> workout)* -> completed

Zero-length prep and cycle rest phases are skipped. Finishing the last
repetition of the last set always ends the run, even when a rest phase
would otherwise follow.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from .config import WorkoutConfig
from .tracker import Counters, RepetitionTracker

Phase = Literal["idle", "pre_start", "workout", "prep", "cycle_rest", "completed"]
CueKind = Literal["get_ready", "near_end"]

PHASE_LABELS: dict[str, str] = {
    "idle": "Ready",
    "pre_start": "Get Ready",
    "workout": "Work",
    "prep": "Rest",
    "cycle_rest": "Set Rest",
    "completed": "Completed",
}

# Phases in which the clock counts down.
RUNNING_PHASES: frozenset[str] = frozenset({"pre_start", "workout", "prep", "cycle_rest"})

NEAR_END_SECONDS = 3


@dataclass(frozen=True)
class Transition:
    """The phase a run moves into, with its starting countdown and counters."""

    phase: Phase
    remaining_seconds: int
    counters: Counters
    repetition_completed: bool = False
    set_completed: bool = False
    run_completed: bool = False


class PhaseStateMachine:
    """Decides phase transitions for one workout.

    Pure decision logic: it never mutates a session and holds no
    run state beyond the workout and its :class:`RepetitionTracker`.
    """

    def __init__(self, config: WorkoutConfig, tracker: RepetitionTracker | None = None):
        self.config = config
        self.tracker = tracker or RepetitionTracker(config)

    def start(self) -> Transition:
        """First transition of a run; skips pre-start when it is zero."""
        counters = self.tracker.reset()
        if self.config.pre_start_time > 0:
            return Transition("pre_start", self.config.pre_start_time, counters)
        return Transition("workout", self.config.work_duration, counters)

    def idle_remaining(self) -> int:
        """Countdown shown before a run starts."""
        if self.config.pre_start_time > 0:
            return self.config.pre_start_time
        return self.config.work_duration

    @staticmethod
    def count_down(remaining_seconds: int) -> int:
        """Remaining time after one tick, clamped at zero."""
        return max(0, remaining_seconds - 1)

    @staticmethod
    def is_expired(remaining_seconds: int) -> bool:
        return remaining_seconds <= 0

    def next_phase(self, phase: Phase, counters: Counters) -> Transition:
        """Decide where an expired *phase* leads.

        Raises:
            ValueError: If *phase* does not count down (idle or completed).
        """
        work = self.config.work_duration

        if phase in ("pre_start", "prep"):
            return Transition("workout", work, counters)

        if phase == "cycle_rest":
            return Transition("workout", work, self.tracker.advance_set(counters))

        if phase != "workout":
            raise ValueError(f"Phase {phase!r} has no successor")

        outcome = self.tracker.on_workout_phase_complete(counters)

        if outcome.run_finished:
            return Transition(
                "completed",
                0,
                outcome.counters,
                repetition_completed=True,
                run_completed=True,
            )

        if outcome.is_last_rep:
            if self.config.cycle_rest_time > 0:
                return Transition(
                    "cycle_rest",
                    self.config.cycle_rest_time,
                    outcome.counters,
                    repetition_completed=True,
                    set_completed=True,
                )
            return Transition(
                "workout",
                work,
                self.tracker.advance_set(outcome.counters),
                repetition_completed=True,
                set_completed=True,
            )

        if self.config.prep_time > 0:
            return Transition(
                "prep",
                self.config.prep_time,
                outcome.counters,
                repetition_completed=True,
            )
        return Transition("workout", work, outcome.counters, repetition_completed=True)

    @staticmethod
    def cue_for(phase: Phase, remaining_seconds: int) -> CueKind | None:
        """Advisory cue for a phase that has *remaining_seconds* left after a tick."""
        if remaining_seconds <= 0 or phase not in RUNNING_PHASES:
            return None
        if phase == "pre_start":
            return "get_ready" if remaining_seconds == NEAR_END_SECONDS else None
        if remaining_seconds <= NEAR_END_SECONDS:
            return "near_end"
        return None

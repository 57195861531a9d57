"""Repetition and set counters for a workout run."""

from __future__ import annotations

from dataclasses import dataclass, replace

from .config import WorkoutConfig


@dataclass(frozen=True)
class Counters:
    """Progress counters of a run."""

    repeat_index: int = 0  # repetitions completed in the current set
    set_index: int = 1  # current set, 1-based
    completed_sets: int = 0
    completed_repetitions: int = 0  # across the whole run


@dataclass(frozen=True)
class RepOutcome:
    """Result of finishing one Workout phase."""

    counters: Counters
    is_last_rep: bool
    is_last_set: bool

    @property
    def run_finished(self) -> bool:
        return self.is_last_rep and self.is_last_set

    @property
    def set_finished(self) -> bool:
        return self.is_last_rep and not self.is_last_set


class RepetitionTracker:
    """Computes counter updates from the current counters and the workout.

    Holds no run state of its own; every method takes the current
    :class:`Counters` and returns new ones.
    """

    def __init__(self, config: WorkoutConfig):
        self.config = config

    def reset(self) -> Counters:
        """Counters for a fresh run."""
        return Counters()

    def is_last_rep(self, repeat_index: int) -> bool:
        return self.config.repeat_count > 0 and repeat_index >= self.config.repeat_count

    def is_last_set(self, set_index: int) -> bool:
        return self.config.cycle_count > 0 and set_index >= self.config.cycle_count

    def is_final_repetition(self, counters: Counters) -> bool:
        """Whether the repetition in progress is the last one of the last set."""
        return self.is_last_rep(counters.repeat_index + 1) and self.is_last_set(
            counters.set_index
        )

    def on_workout_phase_complete(self, counters: Counters) -> RepOutcome:
        """Count a finished repetition."""
        updated = replace(
            counters,
            repeat_index=counters.repeat_index + 1,
            completed_repetitions=counters.completed_repetitions + 1,
        )
        return RepOutcome(
            counters=updated,
            is_last_rep=self.is_last_rep(updated.repeat_index),
            is_last_set=self.is_last_set(updated.set_index),
        )

    def advance_set(self, counters: Counters) -> Counters:
        """Roll over to the next set."""
        return replace(
            counters,
            repeat_index=0,
            set_index=counters.set_index + 1,
            completed_sets=counters.completed_sets + 1,
        )

    def total_repetitions(self, counters: Counters) -> int:
        """Repetitions performed so far, including a partial current set."""
        if self.config.repeat_count == 0:
            return counters.completed_repetitions
        return counters.completed_sets * self.config.repeat_count + counters.repeat_index

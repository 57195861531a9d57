"""Unit tests for PhaseStateMachine transition rules.

Walks whole workouts through next_phase to check phase order, skip rules,
the last-rep-of-last-set tie-break and the advisory cue policy.
"""

from __future__ import annotations

import pytest

from intervalpro_cli.models.workout.phases import PhaseStateMachine, Transition
from intervalpro_cli.models.workout.tracker import Counters


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _walk(machine: PhaseStateMachine, limit: int = 50) -> list[Transition]:
    """Follow transitions from start() until Completed or *limit* steps."""
    transitions = [machine.start()]
    while transitions[-1].phase != "completed" and len(transitions) < limit:
        current = transitions[-1]
        transitions.append(machine.next_phase(current.phase, current.counters))
    return transitions


def _phases(transitions: list[Transition]) -> list[tuple[str, int]]:
    return [(t.phase, t.remaining_seconds) for t in transitions]


# ---------------------------------------------------------------------------
# Start
# ---------------------------------------------------------------------------


class TestStart:
    """Tests for the first transition of a run."""

    def test_starts_in_pre_start(self, workout_factory) -> None:
        machine = PhaseStateMachine(workout_factory(pre_start_time=3))

        transition = machine.start()

        assert transition.phase == "pre_start"
        assert transition.remaining_seconds == 3
        assert transition.counters == Counters()

    def test_zero_pre_start_goes_straight_to_work(self, workout_factory) -> None:
        machine = PhaseStateMachine(workout_factory(pre_start_time=0, work_duration=4))

        transition = machine.start()

        assert (transition.phase, transition.remaining_seconds) == ("workout", 4)

    def test_idle_remaining(self, workout_factory) -> None:
        assert PhaseStateMachine(workout_factory(pre_start_time=10)).idle_remaining() == 10
        assert (
            PhaseStateMachine(
                workout_factory(pre_start_time=0, work_duration=25)
            ).idle_remaining()
            == 25
        )


# ---------------------------------------------------------------------------
# Whole-run sequences
# ---------------------------------------------------------------------------


class TestSequences:
    """Tests for full phase sequences."""

    def test_work_and_prep(self, workout_factory) -> None:
        """Two reps with prep between, one set."""
        machine = PhaseStateMachine(
            workout_factory(
                work_duration=4, repeat_count=2, cycle_count=1, prep_time=2, pre_start_time=0
            )
        )

        transitions = _walk(machine)

        assert _phases(transitions) == [
            ("workout", 4),
            ("prep", 2),
            ("workout", 4),
            ("completed", 0),
        ]
        assert machine.tracker.total_repetitions(transitions[-1].counters) == 2
        assert [t.run_completed for t in transitions].count(True) == 1

    def test_cycle_rest_between_sets(self, workout_factory) -> None:
        machine = PhaseStateMachine(
            workout_factory(
                work_duration=1,
                repeat_count=1,
                cycle_count=2,
                prep_time=0,
                pre_start_time=0,
                cycle_rest_time=10,
            )
        )

        transitions = _walk(machine)

        assert _phases(transitions) == [
            ("workout", 1),
            ("cycle_rest", 10),
            ("workout", 1),
            ("completed", 0),
        ]
        assert transitions[1].set_completed
        assert transitions[2].counters.set_index == 2
        assert transitions[2].counters.repeat_index == 0
        assert machine.tracker.total_repetitions(transitions[-1].counters) == 2

    def test_pre_start_then_work(self, workout_factory) -> None:
        machine = PhaseStateMachine(
            workout_factory(pre_start_time=3, repeat_count=1, cycle_count=1)
        )

        assert [t.phase for t in _walk(machine)] == ["pre_start", "workout", "completed"]

    def test_zero_prep_is_skipped(self, workout_factory) -> None:
        machine = PhaseStateMachine(
            workout_factory(repeat_count=3, cycle_count=1, prep_time=0)
        )

        phases = [t.phase for t in _walk(machine)]

        assert "prep" not in phases
        assert phases == ["workout", "workout", "workout", "completed"]

    def test_zero_cycle_rest_is_skipped(self, workout_factory) -> None:
        machine = PhaseStateMachine(
            workout_factory(repeat_count=1, cycle_count=3, prep_time=5, cycle_rest_time=0)
        )

        transitions = _walk(machine)

        assert [t.phase for t in transitions] == [
            "workout",
            "workout",
            "workout",
            "completed",
        ]
        # the skipped rest still rolls the set over and reports it
        assert transitions[1].set_completed
        assert transitions[1].counters.set_index == 2
        assert transitions[2].counters.completed_sets == 2

    def test_last_rep_of_last_set_beats_rest(self, workout_factory) -> None:
        machine = PhaseStateMachine(
            workout_factory(repeat_count=1, cycle_count=1, prep_time=5, cycle_rest_time=30)
        )

        assert [t.phase for t in _walk(machine)] == ["workout", "completed"]

    @pytest.mark.parametrize(
        "repeat_count, cycle_count",
        [(0, 0), (0, 3), (2, 0)],
    )
    def test_unlimited_never_completes(self, workout_factory, repeat_count, cycle_count) -> None:
        machine = PhaseStateMachine(
            workout_factory(
                repeat_count=repeat_count, cycle_count=cycle_count, cycle_rest_time=5
            )
        )

        transitions = _walk(machine, limit=200)

        assert len(transitions) == 200
        assert all(t.phase != "completed" for t in transitions)

    def test_unlimited_sets_take_cycle_rest(self, workout_factory) -> None:
        machine = PhaseStateMachine(
            workout_factory(repeat_count=1, cycle_count=0, prep_time=0, cycle_rest_time=5)
        )

        phases = [t.phase for t in _walk(machine, limit=5)]

        assert phases == ["workout", "cycle_rest", "workout", "cycle_rest", "workout"]

    def test_zero_work_duration(self, workout_factory) -> None:
        machine = PhaseStateMachine(
            workout_factory(work_duration=0, repeat_count=2, cycle_count=1, prep_time=0)
        )

        assert _phases(_walk(machine)) == [("workout", 0), ("workout", 0), ("completed", 0)]


class TestNextPhaseErrors:
    @pytest.mark.parametrize("phase", ["idle", "completed"])
    def test_non_counting_phase(self, workout_factory, phase) -> None:
        machine = PhaseStateMachine(workout_factory())

        with pytest.raises(ValueError):
            machine.next_phase(phase, Counters())


# ---------------------------------------------------------------------------
# Countdown and cues
# ---------------------------------------------------------------------------


class TestCountDown:
    def test_decrements(self) -> None:
        assert PhaseStateMachine.count_down(5) == 4

    def test_clamps_at_zero(self) -> None:
        assert PhaseStateMachine.count_down(0) == 0
        assert PhaseStateMachine.count_down(-4) == 0

    def test_is_expired(self) -> None:
        assert PhaseStateMachine.is_expired(0)
        assert not PhaseStateMachine.is_expired(1)


class TestCuePolicy:
    """Tests for cue_for."""

    @pytest.mark.parametrize(
        "phase, remaining, expected",
        [
            ("pre_start", 3, "get_ready"),
            ("pre_start", 2, None),
            ("pre_start", 4, None),
            ("workout", 4, None),
            ("workout", 3, "near_end"),
            ("workout", 1, "near_end"),
            ("workout", 0, None),
            ("prep", 2, "near_end"),
            ("cycle_rest", 3, "near_end"),
            ("completed", 2, None),
            ("idle", 3, None),
        ],
    )
    def test_cues(self, phase, remaining, expected) -> None:
        assert PhaseStateMachine.cue_for(phase, remaining) == expected

"""Unit tests for models/workout/ui.py.

Tests TimerDisplay layout content, the run_timer driver loop with a fake
clock and scripted key presses, and the completion/stopped panels.
"""

from __future__ import annotations

from io import StringIO

import pytest
from rich.console import Console
from rich.layout import Layout

from intervalpro_cli.models.workout.session import WorkoutSession
from intervalpro_cli.models.workout.ui import (
    TimerDisplay,
    show_completion_message,
    show_stopped_message,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _string_console() -> tuple[Console, StringIO]:
    """Return a Console that writes to a StringIO buffer."""
    buf = StringIO()
    con = Console(file=buf, force_terminal=False, no_color=True, width=80, height=24)
    return con, buf


def _render(con: Console, buf: StringIO, renderable) -> str:
    con.print(renderable)
    return buf.getvalue()


def _keys(mocker, actions):
    """KeyReader stand-in returning *actions* in order, then None forever."""
    reader = mocker.Mock()
    queue = list(actions)
    reader.get_action.side_effect = lambda: queue.pop(0) if queue else None
    return reader


@pytest.fixture()
def session(workout_factory, fake_time, memory_history) -> WorkoutSession:
    return WorkoutSession(
        workout_factory(name="Burpees", work_duration=2, repeat_count=2, cycle_count=1),
        history=memory_history,
        time_source=fake_time,
    )


# ===========================================================================
# Layout
# ===========================================================================


class TestCreateLayout:
    """Tests for TimerDisplay.create_layout."""

    def test_returns_layout(self, session) -> None:
        con, _ = _string_console()

        assert isinstance(TimerDisplay(console=con).create_layout(session), Layout)

    def test_idle_content(self, session) -> None:
        con, buf = _string_console()

        output = _render(con, buf, TimerDisplay(console=con).create_layout(session))

        assert "Burpees" in output
        assert "READY" in output
        assert "Set 1/1" in output
        assert "Rep 0/2" in output

    def test_running_content(self, session) -> None:
        con, buf = _string_console()
        session.start()

        output = _render(
            con, buf, TimerDisplay(console=con).create_layout(session, "▶ Work")
        )

        assert "WORK" in output
        assert "0:02" in output
        assert "▶ Work" in output
        assert "'p' to pause" in output

    def test_paused_content(self, session) -> None:
        con, buf = _string_console()
        session.start()
        session.pause()

        output = _render(con, buf, TimerDisplay(console=con).create_layout(session))

        assert "PAUSED" in output
        assert "'r' to resume" in output

    def test_last_repetition_banner(self, session) -> None:
        con, buf = _string_console()
        session.start()
        session.tick()
        session.tick()
        session.tick()
        session.tick()  # prep is done, second and last rep

        output = _render(con, buf, TimerDisplay(console=con).create_layout(session))

        assert "Last repetition!" in output

    def test_notices_are_shown(self, session) -> None:
        con, buf = _string_console()
        session.notices.append("Workout history could not be saved: disk full")

        output = _render(con, buf, TimerDisplay(console=con).create_layout(session))

        assert "disk full" in output

    def test_timer_turns_red_near_phase_end(self, workout_factory, fake_time) -> None:
        session = WorkoutSession(
            workout_factory(work_duration=10, pre_start_time=5), time_source=fake_time
        )
        display = TimerDisplay(console=_string_console()[0])

        def timer_style():
            return display._create_body_content(session, None).renderables[0].style

        session.start()
        session.tick()
        assert timer_style() == "bold yellow"

        session.tick()  # 3 seconds left in the countdown
        assert timer_style() == "bold red"

        for _ in range(3):
            session.tick()
        assert session.phase == "workout"
        assert timer_style() == "bold green"


# ===========================================================================
# Driver loop
# ===========================================================================


class TestRunTimer:
    """Tests for TimerDisplay.run_timer."""

    def _display(self, mocker, fake_time, actions=()):
        con, _ = _string_console()
        reader = _keys(mocker, actions)
        display = TimerDisplay(
            console=con,
            refresh_per_second=4,
            key_reader_factory=lambda: reader,
            sleep=fake_time.advance,
        )
        return display, reader

    def test_runs_to_completion(self, mocker, fake_time, session, memory_history) -> None:
        display, reader = self._display(mocker, fake_time)

        result = display.run_timer(session, screen=False)

        assert result == "completed"
        assert session.is_completed
        assert memory_history.records[0].completed
        reader.stop.assert_called_once()

    def test_stop_key(self, mocker, fake_time, session, memory_history) -> None:
        display, reader = self._display(mocker, fake_time, [None, None, "stop"])

        result = display.run_timer(session, screen=False)

        assert result == "stopped"
        assert session.phase == "idle"
        assert memory_history.records[0].completed is False
        reader.stop.assert_called_once()

    def test_pause_key_holds_countdown(self, mocker, fake_time, session, memory_history) -> None:
        display, _ = self._display(mocker, fake_time, ["pause"] + [None] * 20 + ["stop"])
        seen = []

        def snapshot():
            seen.append(session.state.remaining_seconds)
            return None

        display.run_timer(session, cue_message=snapshot, screen=False)

        assert set(seen) == {2}
        assert memory_history.records[0].total_repetitions == 0

    def test_keyboard_interrupt(self, mocker, fake_time, session, memory_history) -> None:
        display, reader = self._display(mocker, fake_time)
        reader.get_action.side_effect = KeyboardInterrupt

        result = display.run_timer(session, screen=False)

        assert result == "interrupted"
        assert len(memory_history.records) == 1
        reader.stop.assert_called_once()

    def test_interrupt_after_completion(self, mocker, fake_time, session, memory_history) -> None:
        display, reader = self._display(mocker, fake_time)

        def sleep(seconds):
            if session.is_completed:
                raise KeyboardInterrupt
            fake_time.advance(seconds)

        display.sleep = sleep

        result = display.run_timer(session, screen=False)

        assert result == "completed"
        assert session.is_completed
        assert len(memory_history.records) == 1
        assert memory_history.records[0].completed
        reader.stop.assert_called_once()

    def test_cue_message_is_polled(self, mocker, fake_time, session) -> None:
        display, _ = self._display(mocker, fake_time)
        message = mocker.Mock(return_value="Get ready…")

        display.run_timer(session, cue_message=message, screen=False)

        assert message.call_count > 1


# ===========================================================================
# Messages
# ===========================================================================


class TestMessages:
    def test_completion_message(self, mocker, fake_time, session, memory_history) -> None:
        con, buf = _string_console()
        session.start()
        while not session.is_completed:
            session.tick()

        show_completion_message(session, memory_history.records[0], console=con)

        output = buf.getvalue()
        assert "Workout Complete!" in output
        assert "Burpees" in output
        assert "Total repetitions: 2" in output
        assert "Run saved to history." in output

    def test_stopped_message(self, session, memory_history) -> None:
        con, buf = _string_console()
        session.start()
        record = session.stop()

        show_stopped_message(record, "Burpees", console=con)

        output = buf.getvalue()
        assert "Workout Stopped" in output
        assert "Repetitions done: 0" in output
        assert "Partial run saved" in output

    def test_stopped_without_record(self) -> None:
        con, buf = _string_console()

        show_stopped_message(None, "Burpees", console=con)

        assert "Nothing was recorded." in buf.getvalue()

    def test_stopped_not_saved(self, session) -> None:
        con, buf = _string_console()
        session.start()
        record = session.stop()

        show_stopped_message(record, "Burpees", console=con, saved=False)

        assert "Run was not saved." in buf.getvalue()

"""Full-screen timer UI for workout runs."""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Literal

from rich.align import Align
from rich.console import Console, Group
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.text import Text

from intervalpro_cli.ui.formatters import format_duration

from .keyboard import KeyReader
from .phases import NEAR_END_SECONDS, RUNNING_PHASES
from .recorder import HistoryRecord
from .session import WorkoutSession

RunResult = Literal["completed", "stopped", "interrupted"]

PHASE_COLORS = {
    "idle": "white",
    "pre_start": "yellow",
    "workout": "green",
    "prep": "cyan",
    "cycle_rest": "blue",
    "completed": "bright_green",
}


class TimerDisplay:
    """Renders a running :class:`WorkoutSession` and feeds it key presses."""

    def __init__(
        self,
        console: Console | None = None,
        refresh_per_second: int = 4,
        key_reader_factory: Callable[[], KeyReader] = KeyReader,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.console = console or Console()
        self.refresh_per_second = refresh_per_second
        self.key_reader_factory = key_reader_factory
        self.sleep = sleep

    def create_layout(self, session: WorkoutSession, cue_message: str | None = None) -> Layout:
        """Create the timer layout with all components."""
        layout = Layout()
        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="body"),
            Layout(name="footer", size=3),
        )

        state = session.state
        if state.is_paused:
            title, color = "PAUSED", "yellow"
        elif session.is_completed:
            title, color = "COMPLETED", PHASE_COLORS["completed"]
        else:
            title, color = session.phase_label.upper(), PHASE_COLORS[state.phase]

        header_text = Text(
            f"{session.config.name}  ·  {title}", style=f"bold {color}", justify="center"
        )
        layout["header"].update(Align.center(header_text, vertical="middle"))
        layout["body"].update(
            Align.center(self._create_body_content(session, cue_message), vertical="middle")
        )
        layout["footer"].update(
            Align.center(self._create_footer_text(session), vertical="middle")
        )
        return layout

    def _create_body_content(self, session: WorkoutSession, cue_message: str | None) -> Group:
        state = session.state
        config = session.config
        components = []

        if state.is_paused:
            timer_color = "yellow"
        elif (
            state.phase in RUNNING_PHASES
            and 0 < state.remaining_seconds <= NEAR_END_SECONDS
        ):
            timer_color = "red"
        else:
            timer_color = PHASE_COLORS[state.phase]

        components.append(
            Text(
                format_duration(state.remaining_seconds),
                style=f"bold {timer_color}",
                justify="center",
            )
        )
        components.append(Text(""))

        counters = Text(justify="center")
        counters.append(f"Set {state.set_index}/{config.cycle_label}", style="bold")
        counters.append("  ·  ", style="dim")
        counters.append(f"Rep {state.repeat_index}/{config.repeat_label}", style="bold")
        components.append(counters)

        if session.is_final_repetition:
            components.append(Text("Last repetition!", style="bold magenta", justify="center"))
        components.append(Text(""))

        bar_width = 40
        progress_pct = int(session.phase_progress() * 100)
        filled = int(bar_width * progress_pct / 100)
        bar = "▓" * filled + "░" * (bar_width - filled)
        components.append(Text(f"{bar}  {progress_pct}%", style="dim", justify="center"))

        if cue_message:
            components.append(Text(""))
            components.append(Text(cue_message, style="italic", justify="center"))

        for notice in session.notices[-2:]:
            components.append(Text(notice, style="yellow", justify="center"))

        return Group(*components)

    def _create_footer_text(self, session: WorkoutSession) -> Text:
        if session.is_completed:
            hints = "Workout finished"
        elif session.state.is_paused:
            hints = "Press 'r' to resume  •  's' to stop"
        else:
            hints = "Press 'p' to pause  •  's' to stop"
        return Text(hints, style="dim", justify="center")

    def run_timer(
        self,
        session: WorkoutSession,
        cue_message: Callable[[], str | None] | None = None,
        screen: bool = True,
    ) -> RunResult:
        """
        Start *session* and drive it until it completes or is stopped.

        The loop polls the keyboard and the session clock a few times per
        second; every due tick is delivered by the session's clock.

        Returns:
            'completed', 'stopped' or 'interrupted'
        """
        if not session.state.is_active:
            session.start()

        interval = 1 / self.refresh_per_second
        message = cue_message or (lambda: None)
        keys = self.key_reader_factory()

        try:
            with Live(
                self.create_layout(session, message()),
                console=self.console,
                refresh_per_second=self.refresh_per_second,
                screen=screen,
            ) as live:
                while True:
                    action = keys.get_action()
                    if action == "pause":
                        session.pause()
                    elif action == "resume":
                        session.resume()
                    elif action == "toggle":
                        session.toggle()
                    elif action == "stop":
                        session.stop()
                        return "stopped"

                    session.poll()

                    live.update(self.create_layout(session, message()))
                    if session.is_completed:
                        self.sleep(2)
                        return "completed"
                    if not session.state.is_active:
                        return "stopped"

                    self.sleep(interval)

        except KeyboardInterrupt:
            if session.is_completed:
                return "completed"
            session.stop()
            return "interrupted"
        finally:
            keys.stop()


def show_completion_message(
    session: WorkoutSession,
    record: HistoryRecord | None = None,
    console: Console | None = None,
) -> None:
    """Show a summary panel after a workout finishes."""
    console = console or Console()
    elapsed = record.duration_seconds if record else session.elapsed_seconds()
    total = record.total_repetitions if record else session.total_repetitions
    saved = "Run saved to history." if record and not session.notices else "Run was not saved."

    panel = Panel(
        f"""[bold green]🎉 Workout Complete![/bold green]

Workout: {session.config.name}
Sets: {session.state.set_index}/{session.config.cycle_label}
Total repetitions: {total}
Time: {format_duration(elapsed)}

{saved}""",
        border_style="green",
        padding=(1, 2),
    )
    console.print(panel)


def show_stopped_message(
    record: HistoryRecord | None,
    workout_name: str,
    console: Console | None = None,
    saved: bool = True,
) -> None:
    """Show a message when a run is stopped early."""
    console = console or Console()
    footer = "Partial run saved to history." if saved else "Run was not saved."

    if record is None:
        body = f"[yellow]Workout Stopped[/yellow]\n\nWorkout: {workout_name}\nNothing was recorded."
    else:
        body = f"""[yellow]Workout Stopped[/yellow]

Workout: {workout_name}
Repetitions done: {record.total_repetitions}
Time: {format_duration(record.duration_seconds)}

{footer}"""

    console.print(Panel(body, border_style="yellow", padding=(1, 2)))

"""Cue dispatch for phase boundaries.

The timer tells a :class:`CueDispatcher` when something worth signalling
happens. Cues are advisory: whatever a dispatcher does (or fails to do)
never changes how the run progresses.
"""

from __future__ import annotations

import math
from typing import Protocol, runtime_checkable

from rich.console import Console

from intervalpro_cli.utils.logger import get_logger

from .config import WorkoutConfig
from .phases import PHASE_LABELS, Phase

logger = get_logger("cues")


@runtime_checkable
class CueDispatcher(Protocol):
    """Receives cue notifications from a running session.

    Kept as a Protocol so tests and alternative front-ends can pass any
    object with these methods.
    """

    def on_phase_enter(self, phase: Phase, config: WorkoutConfig) -> None:
        """A new countdown phase has started."""
        ...

    def on_get_ready(self) -> None:
        """Three seconds left before the first work phase."""
        ...

    def on_near_end(self) -> None:
        """The current phase has three seconds or less left."""
        ...

    def on_set_complete(self) -> None:
        """A set finished and another one follows."""
        ...

    def on_run_complete(self) -> None:
        """The last repetition of the last set finished."""
        ...


class NullCueDispatcher:
    """Dispatcher that ignores every cue."""

    def on_phase_enter(self, phase: Phase, config: WorkoutConfig) -> None:
        pass

    def on_get_ready(self) -> None:
        pass

    def on_near_end(self) -> None:
        pass

    def on_set_complete(self) -> None:
        pass

    def on_run_complete(self) -> None:
        pass


class SafeCueDispatcher:
    """Wraps a dispatcher so that its failures are logged, never raised."""

    def __init__(self, inner: CueDispatcher):
        self.inner = inner

    def _call(self, name: str, *args) -> None:
        try:
            getattr(self.inner, name)(*args)
        except Exception:
            logger.error("Cue %s failed", name, exc_info=True)

    def on_phase_enter(self, phase: Phase, config: WorkoutConfig) -> None:
        self._call("on_phase_enter", phase, config)

    def on_get_ready(self) -> None:
        self._call("on_get_ready")

    def on_near_end(self) -> None:
        self._call("on_near_end")

    def on_set_complete(self) -> None:
        self._call("on_set_complete")

    def on_run_complete(self) -> None:
        self._call("on_run_complete")


class TerminalCueDispatcher:
    """Signals cues with the terminal bell and a short status line.

    The bell is rung ``ceil(count * volume)`` times, so volume ``0`` is
    silent. When *announce* is False (full-screen display) nothing is
    printed and the latest message is kept in :attr:`last_message` for the
    display to show.
    """

    def __init__(
        self,
        console: Console | None = None,
        volume: float = 1.0,
        bell: bool = True,
        announce: bool = True,
    ):
        self.console = console or Console()
        self.volume = min(1.0, max(0.0, volume))
        self.bell = bell
        self.announce = announce
        self.last_message: str | None = None

    def _ring(self, count: int) -> None:
        if not self.bell or self.volume <= 0:
            return
        for _ in range(max(1, math.ceil(count * self.volume))):
            self.console.bell()

    def _say(self, message: str, style: str) -> None:
        self.last_message = message
        if self.announce:
            self.console.print(f"[{style}]{message}[/{style}]")

    def on_phase_enter(self, phase: Phase, config: WorkoutConfig) -> None:
        label = PHASE_LABELS.get(phase, phase)
        self._say(f"▶ {label}", "bold cyan")
        if phase == "workout":
            self._ring(1)

    def on_get_ready(self) -> None:
        self._say("Get ready…", "yellow")
        self._ring(1)

    def on_near_end(self) -> None:
        self._ring(1)

    def on_set_complete(self) -> None:
        self._say("Set complete!", "bold green")
        self._ring(2)

    def on_run_complete(self) -> None:
        self._say("Workout complete!", "bold green")
        self._ring(3)

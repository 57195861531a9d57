"""One-second pulse source for a workout run."""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Literal

ClockState = Literal["stopped", "running", "paused"]


class PhaseClock:
    """Emits one tick per second of un-paused time.

    Ticks are derived from a monotonic time source instead of counting
    sleeps, so a slow or irregular driver loop does not stretch the
    countdown. The clock is polled: the driver calls :meth:`poll` as often
    as it likes and receives every tick that has come due since the last
    call, in order.

    Fractional progress toward the next tick is kept across a pause, so a
    pause/resume cycle neither shortens nor lengthens the phase in progress.
    """

    def __init__(
        self,
        on_tick: Callable[[], None],
        interval: float = 1.0,
        time_source: Callable[[], float] = time.monotonic,
    ):
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._on_tick = on_tick
        self._interval = interval
        self._now = time_source
        self._state: ClockState = "stopped"
        self._anchor = 0.0
        self._banked = 0.0  # running seconds accumulated before the anchor
        self._delivered = 0
        self._generation = 0

    @property
    def state(self) -> ClockState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state == "running"

    @property
    def is_paused(self) -> bool:
        return self._state == "paused"

    @property
    def ticks_delivered(self) -> int:
        return self._delivered

    def elapsed(self) -> float:
        """Un-paused seconds since :meth:`start`."""
        if self._state == "running":
            return self._banked + (self._now() - self._anchor)
        return self._banked

    def start(self) -> None:
        """Start counting from zero. No-op if already started."""
        if self._state != "stopped":
            return
        self._anchor = self._now()
        self._banked = 0.0
        self._delivered = 0
        self._generation += 1
        self._state = "running"

    def pause(self) -> None:
        if self._state != "running":
            return
        self._banked += self._now() - self._anchor
        self._state = "paused"

    def resume(self) -> None:
        if self._state != "paused":
            return
        self._anchor = self._now()
        self._state = "running"

    def stop(self) -> None:
        """Cancel all pending ticks. Safe to call repeatedly."""
        self._state = "stopped"
        self._banked = 0.0
        self._delivered = 0
        self._generation += 1

    def poll(self) -> int:
        """Deliver every tick that has come due. Returns the number delivered.

        A tick callback may pause or stop the clock; no further ticks are
        delivered in that case.
        """
        if self._state != "running":
            return 0

        due = int(self.elapsed() // self._interval) - self._delivered
        generation = self._generation
        delivered = 0
        while due > 0 and self._state == "running" and self._generation == generation:
            self._delivered += 1
            delivered += 1
            due -= 1
            self._on_tick()
        return delivered

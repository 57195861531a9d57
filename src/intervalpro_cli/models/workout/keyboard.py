"""Non-blocking key input for the timer controls."""

from __future__ import annotations

import sys
from typing import Literal, Optional

TimerAction = Literal["pause", "resume", "toggle", "stop"]

KEY_ACTIONS: dict[str, TimerAction] = {
    "p": "pause",
    "r": "resume",
    " ": "toggle",
    "s": "stop",
    "q": "stop",
}


class KeyReader:
    """Reads single keypresses without blocking.

    Uses ``termios``/``select`` on POSIX terminals and ``msvcrt`` on Windows.
    When neither is usable (e.g. stdin is not a TTY) :meth:`get_key` always
    returns None. Use as a context manager to restore the terminal.
    """

    def __init__(self):
        self.fd: Optional[int] = None
        self.old_settings = None
        self._msvcrt = None
        self._setup()

    def _setup(self) -> None:
        try:
            import msvcrt

            self._msvcrt = msvcrt
            return
        except ImportError:
            pass

        try:
            import termios
            import tty

            self.fd = sys.stdin.fileno()
            self.old_settings = termios.tcgetattr(self.fd)
            tty.setcbreak(self.fd)
        except Exception:
            # Not a terminal
            self.fd = None
            self.old_settings = None

    def get_key(self) -> Optional[str]:
        """Return the pressed key (lower-cased) or None."""
        if self._msvcrt is not None:
            if not self._msvcrt.kbhit():
                return None
            key = self._msvcrt.getch()
            if isinstance(key, bytes):
                key = key.decode("utf-8", errors="ignore")
            return key.lower() or None

        if self.old_settings is None:
            return None

        import select

        try:
            ready, _, _ = select.select([sys.stdin], [], [], 0)
        except (OSError, ValueError):
            return None
        if not ready:
            return None
        return sys.stdin.read(1).lower() or None

    def get_action(self) -> Optional[TimerAction]:
        """Return the timer action for the pressed key, if any."""
        key = self.get_key()
        if key is None:
            return None
        return KEY_ACTIONS.get(key)

    def stop(self) -> None:
        """Restore terminal settings."""
        if self.old_settings is None or self.fd is None:
            return
        try:
            import termios

            termios.tcsetattr(self.fd, termios.TCSADRAIN, self.old_settings)
        except Exception:
            pass
        self.old_settings = None

    def __enter__(self) -> KeyReader:
        return self

    def __exit__(self, *exc) -> None:
        self.stop()

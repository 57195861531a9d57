"""Interval workout timer: phases, counters, clock, history."""

from .clock import PhaseClock
from .config import WorkoutConfig, coerce_seconds
from .cues import (
    CueDispatcher,
    NullCueDispatcher,
    SafeCueDispatcher,
    TerminalCueDispatcher,
)
from .history import HistoryStore
from .keyboard import KeyReader
from .phases import Phase, PhaseStateMachine, Transition
from .recorder import CompletionRecorder, HistoryRecord
from .session import TimerSession, WorkoutSession
from .storage import LocalPersistence, WorkoutStore
from .tracker import Counters, RepetitionTracker
from .ui import TimerDisplay, show_completion_message, show_stopped_message

__all__ = [
    "PhaseClock",
    "WorkoutConfig",
    "coerce_seconds",
    "CueDispatcher",
    "NullCueDispatcher",
    "SafeCueDispatcher",
    "TerminalCueDispatcher",
    "HistoryStore",
    "Phase",
    "PhaseStateMachine",
    "Transition",
    "CompletionRecorder",
    "HistoryRecord",
    "TimerSession",
    "WorkoutSession",
    "LocalPersistence",
    "WorkoutStore",
    "Counters",
    "RepetitionTracker",
    "KeyReader",
    "TimerDisplay",
    "show_completion_message",
    "show_stopped_message",
]

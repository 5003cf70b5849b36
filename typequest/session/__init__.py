"""
Session: single-exercise typing state machine.

- engine: SessionEngine (Idle -> Running <-> Paused -> Completed)
- clock: externally driven fixed-tick time accumulator
- events: typed event channel (KeyPress, Backspace, Tick, Pause, Resume, Stop)
- replay: deterministic replay of recorded keystroke logs
"""

from typequest.session.clock import TickClock
from typequest.session.engine import SessionEngine, SessionState
from typequest.session.events import Backspace, KeyPress, Pause, Resume, SessionEvent, Stop, Tick
from typequest.session.replay import ReplayLog, load_replay, replay

__all__ = [
    "SessionEngine",
    "SessionState",
    "TickClock",
    "SessionEvent",
    "KeyPress",
    "Backspace",
    "Tick",
    "Pause",
    "Resume",
    "Stop",
    "ReplayLog",
    "load_replay",
    "replay",
]

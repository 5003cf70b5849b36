"""
Typed session event channel.

A session is driven by exactly one ordered stream of these events, delivered
to the single engine that owns the session. Events must be dispatched in
arrival order: cursor position and key latency depend on it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class KeyPress:
    """A printable key. `timestamp` defaults to the session clock."""

    key: str
    timestamp: float | None = None


@dataclass(frozen=True)
class Backspace:
    pass


@dataclass(frozen=True)
class Tick:
    """One or more elapsed-time ticks from the external clock."""

    count: int = 1


@dataclass(frozen=True)
class Pause:
    pass


@dataclass(frozen=True)
class Resume:
    pass


@dataclass(frozen=True)
class Stop:
    pass


SessionEvent = Union[KeyPress, Backspace, Tick, Pause, Resume, Stop]

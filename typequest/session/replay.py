"""
Keystroke log replay.

Validates a recorded JSON session log and feeds it through a fresh
SessionEngine. Because time only advances on recorded ticks, a replay always
reproduces the original metrics.

Log format:
    {
        "text": "asdf jkl;",
        "time_limit": null,
        "events": [
            {"type": "tick", "count": 3},
            {"type": "key", "key": "a"},
            {"type": "backspace"}
        ]
    }
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from loguru import logger
from pydantic import BaseModel, Field, model_validator

from typequest.config import Settings
from typequest.session.engine import SessionEngine, SessionState
from typequest.session.events import Backspace, KeyPress, Pause, Resume, SessionEvent, Stop, Tick


class ReplayEvent(BaseModel):
    """One recorded event."""

    type: Literal["key", "backspace", "tick", "pause", "resume", "stop"]
    key: str | None = None
    count: int = Field(default=1, ge=0)
    timestamp: float | None = None

    @model_validator(mode="after")
    def _key_events_need_a_key(self) -> ReplayEvent:
        if self.type == "key" and not self.key:
            raise ValueError("key events require a non-empty 'key'")
        return self

    def to_event(self) -> SessionEvent:
        if self.type == "key":
            return KeyPress(key=self.key or "", timestamp=self.timestamp)
        if self.type == "backspace":
            return Backspace()
        if self.type == "tick":
            return Tick(count=self.count)
        if self.type == "pause":
            return Pause()
        if self.type == "resume":
            return Resume()
        return Stop()


class ReplayLog(BaseModel):
    """A complete recorded session."""

    text: str = Field(min_length=1)
    time_limit: int | None = Field(default=None, gt=0)
    events: list[ReplayEvent] = Field(default_factory=list)


def load_replay(path: Path | str) -> ReplayLog:
    """Read and validate a replay log from disk."""
    return ReplayLog.model_validate_json(Path(path).read_text(encoding="utf-8"))


def replay(log: ReplayLog, settings: Settings | None = None) -> SessionEngine:
    """
    Run a log through a new engine.

    Events recorded after the session completed are skipped.

    Returns:
        The engine in its final state
    """
    engine = SessionEngine(settings=settings)
    engine.start(log.text, time_limit=log.time_limit)

    for index, recorded in enumerate(log.events):
        if engine.state == SessionState.COMPLETED:
            skipped = len(log.events) - index
            logger.warning(f"Session completed with {skipped} trailing events; ignoring them")
            break
        engine.dispatch(recorded.to_event())

    return engine

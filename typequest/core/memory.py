"""
In-memory collaborator implementations.

Used by the CLI and the test suite in place of a real database or UI.
"""

from __future__ import annotations

from dataclasses import replace
from uuid import UUID

from typequest.analytics.key_stats import KeyStat
from typequest.core.models import ProgressionState, SessionSummary


class InMemoryPersistenceSink:
    """Keeps everything the engine flushes in plain lists/dicts."""

    def __init__(self):
        self.sessions: list[SessionSummary] = []
        self.key_stats: dict[UUID, list[KeyStat]] = {}
        self.progression: list[ProgressionState] = []

    def save_session(self, summary: SessionSummary) -> None:
        self.sessions.append(summary)

    def save_key_stats(self, session_id: UUID, stats: list[KeyStat]) -> None:
        self.key_stats[session_id] = list(stats)

    def save_progression(self, state: ProgressionState) -> None:
        # Snapshot; the ledger keeps mutating its own instance
        self.progression.append(replace(state))

    @property
    def latest_progression(self) -> ProgressionState | None:
        return self.progression[-1] if self.progression else None


class RecordingNotificationSink:
    """Records notifications as (name, payload) tuples in arrival order."""

    def __init__(self):
        self.events: list[tuple[str, tuple]] = []

    def lesson_completed(self, lesson_id: str) -> None:
        self.events.append(("lesson_completed", (lesson_id,)))

    def level_up(self, new_level: int) -> None:
        self.events.append(("level_up", (new_level,)))

    def streak_updated(self, current: int, longest: int) -> None:
        self.events.append(("streak_updated", (current, longest)))

    def names(self) -> list[str]:
        return [name for name, _ in self.events]


class NullNotificationSink:
    """Discards every notification."""

    def lesson_completed(self, lesson_id: str) -> None:
        pass

    def level_up(self, new_level: int) -> None:
        pass

    def streak_updated(self, current: int, longest: int) -> None:
        pass

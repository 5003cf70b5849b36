"""
Collaborator protocols.

The engine never reaches for process-wide singletons; content, persistence
and notification collaborators are passed into LessonRunner/SessionEngine
through their constructors.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol
from uuid import UUID

from typequest.core.models import Exercise, Lesson, ProgressionState, SessionSummary, UserContext

if TYPE_CHECKING:
    from typequest.analytics.key_stats import KeyStat


class ContentStore(Protocol):
    """Supplies lessons, exercise queues and practice corpora.

    Treated as pure queries: the engine neither caches nor invalidates them.
    """

    def get_lesson(self, lesson_id: str) -> Lesson:
        """Return the lesson or raise UnknownLessonError."""
        ...

    def generate_exercises(self, lesson: Lesson, user_context: UserContext) -> list[Exercise]:
        """Build the ordered exercise set for one lesson attempt."""
        ...

    def sentences(self, language_code: str) -> list[str]:
        """Practice sentences for a language."""
        ...


class PersistenceSink(Protocol):
    """Durable storage for session summaries, key stats and progression.

    Calls are fire-and-forget; implementations raise on failure.
    """

    def save_session(self, summary: SessionSummary) -> None:
        ...

    def save_key_stats(self, session_id: UUID, stats: list[KeyStat]) -> None:
        ...

    def save_progression(self, state: ProgressionState) -> None:
        ...


class NotificationSink(Protocol):
    """Receives discrete progression events for UI/telemetry."""

    def lesson_completed(self, lesson_id: str) -> None:
        ...

    def level_up(self, new_level: int) -> None:
        ...

    def streak_updated(self, current: int, longest: int) -> None:
        ...

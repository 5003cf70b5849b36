"""
Core Module - Shared domain models, errors and collaborator interfaces.

All engine packages (analytics, session, lesson, curriculum, progression)
import their shared types from typequest.core rather than redefining them.
"""

from typequest.core.errors import (
    EmptyContentError,
    InvalidTransitionError,
    PersistenceError,
    TypeQuestError,
    UnknownLessonError,
)
from typequest.core.interfaces import ContentStore, NotificationSink, PersistenceSink
from typequest.core.models import (
    Exercise,
    ExerciseResult,
    ExerciseType,
    KeystrokeEvent,
    Lesson,
    LessonDifficulty,
    LessonVerdict,
    Metric,
    MetricTarget,
    PassingRequirements,
    ProgressionState,
    SessionSummary,
    UserContext,
)

__all__ = [
    # Errors
    "TypeQuestError",
    "InvalidTransitionError",
    "EmptyContentError",
    "UnknownLessonError",
    "PersistenceError",
    # Interfaces
    "ContentStore",
    "PersistenceSink",
    "NotificationSink",
    # Models
    "Exercise",
    "ExerciseResult",
    "ExerciseType",
    "KeystrokeEvent",
    "Lesson",
    "LessonDifficulty",
    "LessonVerdict",
    "Metric",
    "MetricTarget",
    "PassingRequirements",
    "ProgressionState",
    "SessionSummary",
    "UserContext",
]

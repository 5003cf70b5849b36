"""
Core domain models for the typing engine.

Engine-produced records (keystrokes, exercises, results, verdicts) are plain
frozen dataclasses. Lessons come from the external content store and are
validated with Pydantic at that boundary.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ExerciseType(str, Enum):
    """Kind of drill an exercise represents."""

    ANCHOR = "anchor"
    COLUMN = "column"
    NGRAM = "ngram"
    WORD = "word"
    SENTENCE = "sentence"
    SPEED = "speed"
    ACCURACY = "accuracy"


class Metric(str, Enum):
    """Metric an exercise is targeting."""

    WPM = "wpm"
    ACCURACY = "accuracy"
    CONSISTENCY = "consistency"
    ERROR_RATE = "error_rate"


@dataclass(frozen=True)
class MetricTarget:
    """Metric and threshold an exercise aims for."""

    metric: Metric
    threshold: float


@dataclass(frozen=True)
class Exercise:
    """One typed exercise inside a lesson queue."""

    type: ExerciseType
    content: str
    target_metric: MetricTarget
    time_limit: int | None = None  # seconds
    repetitions: int = 1

    @property
    def session_text(self) -> str:
        """Text the learner actually types: content once per repetition."""
        if not self.content:
            return ""
        return " ".join([self.content] * max(1, self.repetitions))


@dataclass(frozen=True)
class KeystrokeEvent:
    """A single key press as seen by the session engine."""

    typed_key: str
    expected_key: str | None
    timestamp: float  # seconds on the session clock
    reaction_time: float  # seconds since the previous key
    is_correct: bool


@dataclass(frozen=True)
class ExerciseResult:
    """Outcome of one completed exercise."""

    wpm: float
    accuracy: float  # composite (raw + corrected) / 2
    error_count: int
    duration: float  # seconds
    raw_accuracy: float = 100.0
    corrected_accuracy: float = 100.0
    total_characters: int = 0
    uncorrected_errors: int = 0
    backspace_count: int = 0
    consistency: float = 0.0
    timed_out: bool = False


@dataclass(frozen=True)
class LessonVerdict:
    """Pass/fail decision for one lesson attempt."""

    passed: bool
    avg_wpm: float
    avg_accuracy: float
    earned_xp: int = 0
    exercise_count: int = 0
    attempt: int = 1


@dataclass
class ProgressionState:
    """Cross-session level/XP and streak state.

    Mutated only through ProgressionLedger.
    """

    level: int = 1
    total_xp: int = 0
    current_streak: int = 0
    longest_streak: int = 0
    last_practice_date: date | None = None


@dataclass(frozen=True)
class SessionSummary:
    """Summary of one exercise session handed to the persistence sink."""

    session_id: UUID
    lesson_id: str | None
    exercise_type: ExerciseType | None
    result: ExerciseResult
    attempt: int = 1
    exercise_index: int = 0


@dataclass
class UserContext:
    """Learner context the content store may use when generating exercises."""

    language: str = "en"
    weakest_keys: list[str] = field(default_factory=list)


# =============================================================================
# Lesson content (external input)
# =============================================================================


class LessonDifficulty(str, Enum):
    """Lesson difficulty; doubles as the XP multiplier."""

    BEGINNER = "beginner"
    ELEMENTARY = "elementary"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"

    @property
    def xp_multiplier(self) -> float:
        return {
            LessonDifficulty.BEGINNER: 1.0,
            LessonDifficulty.ELEMENTARY: 1.2,
            LessonDifficulty.INTERMEDIATE: 1.5,
            LessonDifficulty.ADVANCED: 2.0,
            LessonDifficulty.EXPERT: 2.5,
        }[self]


class PassingRequirements(BaseModel):
    """Thresholds a lesson attempt must meet to pass."""

    model_config = ConfigDict(frozen=True)

    min_accuracy: float = Field(default=90.0, ge=0, le=100)
    min_wpm: float = Field(default=0.0, ge=0)


class Lesson(BaseModel):
    """Lesson definition supplied by the content store."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    name: str = ""
    description: str = ""
    stage_id: int = 0
    module_id: str = ""
    order: int = 0
    difficulty: LessonDifficulty = LessonDifficulty.BEGINNER
    content_pattern: str = ""
    passing_requirements: PassingRequirements = Field(default_factory=PassingRequirements)
    required_keys: list[str] | None = None
    target_ngrams: list[str] = Field(default_factory=list)
    target_words: list[str] = Field(default_factory=list)
    is_gatekeeper: bool = False
    content_pool: list[str] | None = None

    @property
    def has_required_keys(self) -> bool:
        return bool(self.required_keys)

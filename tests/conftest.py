"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import random
import sys
from datetime import date
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from typequest.config import Settings  # noqa: E402
from typequest.core.memory import InMemoryPersistenceSink, RecordingNotificationSink  # noqa: E402
from typequest.core.models import (  # noqa: E402
    Exercise,
    ExerciseType,
    Lesson,
    LessonDifficulty,
    Metric,
    MetricTarget,
    PassingRequirements,
    UserContext,
)
from typequest.curriculum.exercise_generator import ExerciseGenerator  # noqa: E402
from typequest.progression.ledger import ProgressionLedger  # noqa: E402
from typequest.session.engine import SessionEngine  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (full lesson flows)")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        # Mark based on test file location
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def settings():
    """Default settings, isolated from any TYPEQUEST_* environment or .env file."""
    return Settings(_env_file=None, random_seed=1234)


@pytest.fixture
def engine(settings):
    """Fresh session engine with a 100ms tick."""
    return SessionEngine(settings=settings)


@pytest.fixture
def generator(settings):
    """Seeded exercise generator."""
    return ExerciseGenerator(rng=random.Random(42), settings=settings)


@pytest.fixture
def persistence():
    return InMemoryPersistenceSink()


@pytest.fixture
def notifications():
    return RecordingNotificationSink()


@pytest.fixture
def ledger(settings):
    return ProgressionLedger(settings=settings)


@pytest.fixture
def today():
    return date(2026, 3, 14)


def make_exercise(content: str, repetitions: int = 1, time_limit: int | None = None) -> Exercise:
    """Plain sentence exercise over fixed content."""
    return Exercise(
        type=ExerciseType.SENTENCE,
        content=content,
        target_metric=MetricTarget(Metric.ACCURACY, 90),
        time_limit=time_limit,
        repetitions=repetitions,
    )


def make_lesson(
    lesson_id: str = "test.1",
    min_wpm: float = 40,
    min_accuracy: float = 90,
    required_keys: list[str] | None = None,
    content: str = "asdf jkl;",
    difficulty: LessonDifficulty = LessonDifficulty.BEGINNER,
) -> Lesson:
    return Lesson(
        id=lesson_id,
        name="Test Lesson",
        stage_id=1,
        module_id="test",
        order=1,
        difficulty=difficulty,
        content_pattern=content,
        passing_requirements=PassingRequirements(min_accuracy=min_accuracy, min_wpm=min_wpm),
        required_keys=required_keys,
    )


class StaticContentStore:
    """Content store that always serves the same exercises."""

    def __init__(self, lessons: list[Lesson], exercises: list[Exercise]):
        self.lessons = {lesson.id: lesson for lesson in lessons}
        self.exercises = exercises
        self.contexts: list[UserContext] = []

    def get_lesson(self, lesson_id: str) -> Lesson:
        from typequest.core.errors import UnknownLessonError

        if lesson_id not in self.lessons:
            raise UnknownLessonError(lesson_id)
        return self.lessons[lesson_id]

    def generate_exercises(self, lesson: Lesson, user_context: UserContext) -> list[Exercise]:
        self.contexts.append(user_context)
        return list(self.exercises)

    def sentences(self, language_code: str) -> list[str]:
        return ["The quick brown fox jumps over the lazy dog."]


@pytest.fixture
def exercise_factory():
    """Build sentence exercises over fixed content."""
    return make_exercise


@pytest.fixture
def lesson_factory():
    """Build lessons with custom passing requirements."""
    return make_lesson


@pytest.fixture
def store_factory():
    """Build a StaticContentStore from lessons and exercises."""
    return StaticContentStore

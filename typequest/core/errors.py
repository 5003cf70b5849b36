"""
Engine error taxonomy.

Every failure the engine reports derives from TypeQuestError so callers can
catch engine problems without swallowing unrelated exceptions. Zero elapsed
time and zero key totals are not errors; the metrics functions return defined
values for them instead.
"""

from __future__ import annotations


class TypeQuestError(Exception):
    """Base class for all engine errors."""
    pass


class InvalidTransitionError(TypeQuestError):
    """Raised when an action is not valid in the current state.

    The state of the engine is left untouched.
    """

    def __init__(self, action: str, state: str):
        self.action = action
        self.state = state
        super().__init__(f"Cannot {action} while {state}")


class EmptyContentError(TypeQuestError):
    """Raised when a lesson or exercise has nothing to type."""
    pass


class UnknownLessonError(TypeQuestError):
    """Raised when the content store has no lesson with the requested id."""

    def __init__(self, lesson_id: str):
        self.lesson_id = lesson_id
        super().__init__(f"Unknown lesson: {lesson_id}")


class PersistenceError(TypeQuestError):
    """Raised when one or more persistence sink writes fail.

    In-memory state is not rolled back; the caller decides whether to retry.
    """

    def __init__(self, failures: list[tuple[str, Exception]]):
        self.failures = failures
        names = ", ".join(operation for operation, _ in failures)
        super().__init__(f"Persistence sink failed: {names}")

"""
Remediation Strategy.

Chooses remedial practice after a failed lesson attempt. Exactly one branch
is taken, checked in this order:

1. accuracy failure, lesson has required keys -> slower anchor drill on them
2. accuracy failure, no required keys         -> accuracy drill on the pattern
3. speed failure                              -> timed speed sprint
4. anything else                              -> a freshly generated exercise set

Short remedial queues are topped up with a freshly generated lesson set so a
remedial attempt is never trivially short.
"""
from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum

from loguru import logger

from typequest.config import Settings, get_settings
from typequest.core.models import Exercise, Lesson
from typequest.curriculum.exercise_generator import KEY_PATTERN_FALLBACK, ExerciseGenerator


class RemediationBranch(str, Enum):
    """Which remedial path was selected."""

    ACCURACY_ANCHOR = "accuracy_anchor"
    ACCURACY_REPEAT = "accuracy_repeat"
    SPEED_SPRINT = "speed_sprint"
    GENERAL_RETRY = "general_retry"


@dataclass
class RemediationPlan:
    """Selected branch and the exercise queue for the remedial attempt."""

    branch: RemediationBranch
    exercises: list[Exercise] = field(default_factory=list)
    padded: bool = False  # regenerated lesson exercises appended to reach the minimum

    @property
    def first(self) -> Exercise | None:
        return self.exercises[0] if self.exercises else None


class RemediationStrategy:
    """Builds a RemediationPlan from a failed lesson's averages."""

    def __init__(
        self,
        generator: ExerciseGenerator | None = None,
        settings: Settings | None = None,
    ):
        self.settings = settings or get_settings()
        self.generator = generator or ExerciseGenerator(settings=self.settings)

    def select_branch(
        self,
        lesson: Lesson,
        avg_wpm: float,
        avg_accuracy: float,
    ) -> RemediationBranch:
        requirements = lesson.passing_requirements
        if avg_accuracy < requirements.min_accuracy:
            if lesson.has_required_keys:
                return RemediationBranch.ACCURACY_ANCHOR
            return RemediationBranch.ACCURACY_REPEAT
        if avg_wpm < requirements.min_wpm:
            return RemediationBranch.SPEED_SPRINT
        return RemediationBranch.GENERAL_RETRY

    def plan(
        self,
        lesson: Lesson,
        avg_wpm: float,
        avg_accuracy: float,
        regenerate: Callable[[], Sequence[Exercise]],
    ) -> RemediationPlan:
        """
        Build the remedial queue for a failed attempt.

        Args:
            lesson: Lesson that was failed
            avg_wpm: Mean WPM over the failed attempt
            avg_accuracy: Mean composite accuracy over the failed attempt
            regenerate: Builds a new exercise set for the lesson from scratch

        Returns:
            RemediationPlan with at least `min_remedial_queue` exercises when
            the regenerated set allows it
        """
        branch = self.select_branch(lesson, avg_wpm, avg_accuracy)
        requirements = lesson.passing_requirements
        content = lesson.content_pattern
        if not content and branch in (RemediationBranch.ACCURACY_REPEAT, RemediationBranch.SPEED_SPRINT):
            logger.warning(f"Lesson {lesson.id} has no content pattern; drilling home row instead")
            content = KEY_PATTERN_FALLBACK

        exercises: list[Exercise]
        if branch == RemediationBranch.ACCURACY_ANCHOR:
            exercises = [
                self.generator.anchor_drill(
                    lesson.required_keys or [],
                    difficulty=lesson.difficulty.xp_multiplier
                    * self.settings.remediation_difficulty_factor,
                    duration=self.settings.anchor_drill_seconds,
                )
            ]
        elif branch == RemediationBranch.ACCURACY_REPEAT:
            exercises = [
                self.generator.accuracy_drill(
                    content,
                    target_accuracy=requirements.min_accuracy,
                    repetitions=self.settings.accuracy_drill_repetitions,
                )
            ]
        elif branch == RemediationBranch.SPEED_SPRINT:
            exercises = [
                self.generator.speed_sprint(
                    content,
                    target_wpm=requirements.min_wpm,
                    time_limit=self.settings.sprint_time_limit_seconds,
                    repetitions=self.settings.sprint_repetitions,
                )
            ]
        else:
            exercises = list(regenerate())

        padded = False
        if len(exercises) < self.settings.min_remedial_queue:
            exercises.extend(regenerate())
            padded = True

        logger.info(
            f"Remediation for lesson {lesson.id}: {branch.value} "
            f"({len(exercises)} exercises, wpm={avg_wpm:.1f}, accuracy={avg_accuracy:.1f})"
        )
        return RemediationPlan(branch=branch, exercises=exercises, padded=padded)

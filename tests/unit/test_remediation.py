"""
Unit tests for remediation branch selection and queue assembly.
"""

import pytest

from typequest.core.models import ExerciseType, LessonDifficulty
from typequest.lesson.remediation import RemediationBranch, RemediationStrategy


@pytest.fixture
def strategy(generator, settings):
    return RemediationStrategy(generator=generator, settings=settings)


@pytest.fixture
def original(exercise_factory):
    return [exercise_factory("one"), exercise_factory("two"), exercise_factory("three")]


class TestBranchSelection:
    """Exactly one branch, in priority order."""

    def test_accuracy_with_keys(self, strategy, lesson_factory):
        lesson = lesson_factory(required_keys=["f", "j"])
        assert strategy.select_branch(lesson, 50, 70) == RemediationBranch.ACCURACY_ANCHOR

    def test_accuracy_without_keys(self, strategy, lesson_factory):
        lesson = lesson_factory()
        assert strategy.select_branch(lesson, 50, 70) == RemediationBranch.ACCURACY_REPEAT

    def test_accuracy_checked_before_speed(self, strategy, lesson_factory):
        lesson = lesson_factory(required_keys=["f"])
        assert strategy.select_branch(lesson, 10, 70) == RemediationBranch.ACCURACY_ANCHOR

    def test_speed_only(self, strategy, lesson_factory):
        lesson = lesson_factory(min_wpm=40, min_accuracy=90)
        assert strategy.select_branch(lesson, 39, 92) == RemediationBranch.SPEED_SPRINT

    def test_general_retry(self, strategy, lesson_factory):
        lesson = lesson_factory(min_wpm=40, min_accuracy=90)
        assert strategy.select_branch(lesson, 45, 95) == RemediationBranch.GENERAL_RETRY

    def test_empty_key_list_counts_as_no_keys(self, strategy, lesson_factory):
        lesson = lesson_factory(required_keys=[])
        assert strategy.select_branch(lesson, 50, 70) == RemediationBranch.ACCURACY_REPEAT


class TestPlan:
    """Assembled remedial queues."""

    def test_anchor_drill_first_at_reduced_difficulty(self, strategy, lesson_factory, original):
        lesson = lesson_factory(required_keys=["f", "j"], difficulty=LessonDifficulty.INTERMEDIATE)
        plan = strategy.plan(lesson, avg_wpm=50, avg_accuracy=70, regenerate=lambda: original)

        first = plan.first
        assert plan.branch == RemediationBranch.ACCURACY_ANCHOR
        assert first.type == ExerciseType.ANCHOR
        assert set(first.content.replace(" ", "")) == {"f", "j"}
        # intermediate 1.5 x 0.8 = 1.2 difficulty -> 0.90 + 0.12
        assert first.target_metric.threshold == pytest.approx(1.02)
        assert first.time_limit == 60

    def test_short_queue_padded_with_regenerated_set(self, strategy, lesson_factory, original):
        lesson = lesson_factory(required_keys=["f"])
        plan = strategy.plan(lesson, 50, 70, lambda: original)
        assert plan.padded
        assert len(plan.exercises) == 4
        assert plan.exercises[1:] == original

    def test_accuracy_repeat(self, strategy, lesson_factory, original):
        lesson = lesson_factory(content="asdf jkl;", min_accuracy=90)
        plan = strategy.plan(lesson, 50, 70, lambda: original)

        first = plan.first
        assert first.type == ExerciseType.ACCURACY
        assert first.content == "asdf jkl;"
        assert first.repetitions == 2
        assert first.target_metric.threshold == 90

    def test_speed_sprint(self, strategy, lesson_factory, original):
        lesson = lesson_factory(min_wpm=40, min_accuracy=90)
        plan = strategy.plan(lesson, 39, 92, lambda: original)

        first = plan.first
        assert plan.branch == RemediationBranch.SPEED_SPRINT
        assert first.type == ExerciseType.SPEED
        assert first.time_limit == 30
        assert first.repetitions == 3
        assert first.target_metric.threshold == 40

    def test_general_retry_regenerates(self, strategy, lesson_factory, original):
        lesson = lesson_factory()
        plan = strategy.plan(lesson, 45, 95, lambda: original)
        assert plan.exercises == original
        assert not plan.padded

    def test_missing_pattern_falls_back_to_home_row(self, strategy, lesson_factory, original):
        lesson = lesson_factory(content="")
        plan = strategy.plan(lesson, 50, 70, lambda: original)
        assert plan.first.content == "asdf jkl;"

    def test_each_regeneration_is_fresh(self, strategy, lesson_factory, exercise_factory):
        calls = []

        def regenerate():
            calls.append(1)
            return [exercise_factory(f"set {len(calls)}")]

        lesson = lesson_factory()
        plan = strategy.plan(lesson, 45, 95, regenerate)

        # A one-exercise retry is below the minimum, so a second set is built
        assert [e.content for e in plan.exercises] == ["set 1", "set 2"]
        assert plan.padded
        assert len(calls) == 2

"""
Unit tests for drill generation.

Tests:
- Anchor, column, n-gram, word and sentence drills
- Remedial accuracy drills and speed sprints
- Adaptive n-gram selection and weakness-training lessons
- Determinism under a fixed seed
"""

import random

import pytest

from typequest.core.models import ExerciseType, Metric
from typequest.curriculum import corpus
from typequest.curriculum.corpus import KeyColumn
from typequest.curriculum.exercise_generator import ContextLevel, ExerciseGenerator


class TestAnchorDrill:
    """Repeated key triplets."""

    def test_content(self, generator):
        exercise = generator.anchor_drill(["f", "j"], difficulty=1.0, duration=60)
        assert exercise.type == ExerciseType.ANCHOR
        assert exercise.content == " ".join(["fff jjj"] * 10)
        assert exercise.time_limit == 60
        assert exercise.repetitions == 1

    def test_accuracy_target_scales_with_difficulty(self, generator):
        exercise = generator.anchor_drill(["f"], difficulty=0.8, duration=60)
        assert exercise.target_metric.metric == Metric.ACCURACY
        assert exercise.target_metric.threshold == pytest.approx(0.98)

    def test_fallback_without_keys(self, generator):
        exercise = generator.anchor_drill([], difficulty=1.0, duration=60)
        assert exercise.content == "asdf jkl; asdf jkl;"


class TestColumnDrill:
    """Finger column groups."""

    def test_groups_use_column_keys(self, generator):
        exercise = generator.column_drill(KeyColumn.LEFT_INDEX, difficulty=1.0)
        groups = exercise.content.split(" ")
        assert len(groups) == 8
        assert all(len(group) == 3 for group in groups)
        assert set("".join(groups)) <= set(KeyColumn.LEFT_INDEX.keys)
        assert exercise.repetitions == 2
        assert exercise.target_metric.threshold == pytest.approx(0.95)


class TestNgramDrill:
    """N-grams at each context level."""

    def test_isolated(self, generator):
        exercise = generator.ngram_drill(["th", "he"], ContextLevel.ISOLATED, 1.0)
        assert exercise.content == "th th th he he he"

    def test_embedded(self, generator):
        exercise = generator.ngram_drill(["th", "he"], ContextLevel.EMBEDDED, 1.0)
        assert exercise.content == "xthx xhex"

    def test_lexical_and_sentential(self, generator):
        for level in (ContextLevel.LEXICAL, ContextLevel.SENTENTIAL):
            assert generator.ngram_drill(["th", "he"], level, 1.0).content == "th he"

    def test_fallback(self, generator):
        assert generator.ngram_drill([], ContextLevel.ISOLATED, 1.0).content == "th he in er"

    def test_wpm_target(self, generator):
        exercise = generator.ngram_drill(["th"], ContextLevel.LEXICAL, 1.5)
        assert exercise.target_metric.metric == Metric.WPM
        assert exercise.target_metric.threshold == pytest.approx(40.0)
        assert exercise.repetitions == 3


class TestWordDrill:
    """Word drills from target words or allowed keys."""

    def test_target_words_win(self, generator):
        exercise = generator.word_drill(["alpha", "beta"], allowed_keys=["a"])
        assert exercise.content == "alpha beta"
        assert exercise.repetitions == 3
        assert exercise.target_metric.threshold == 20

    def test_words_from_allowed_keys(self, generator):
        exercise = generator.word_drill(allowed_keys=list("asdfjkl;gh"))
        words = exercise.content.split(" ")
        assert 0 < len(words) <= 10
        assert all(set(word) <= set("asdfjkl;gh") for word in words)

    def test_random_strings_when_no_word_fits(self, generator):
        words = generator.words_from_chars(["q", "z"], count=5)
        assert len(words) == 5
        assert all(len(word) == 4 and set(word) <= {"q", "z"} for word in words)

    def test_fallback_words(self, generator):
        assert generator.word_drill().content == "the and for"


class TestSentenceDrill:
    def test_picks_five(self, generator):
        sentences = corpus.sentences_for("en")
        exercise = generator.sentence_drill(sentences)
        picked = [s for s in sentences if s in exercise.content]
        assert len(picked) == 5
        assert exercise.target_metric.threshold == 30

    def test_unknown_language_falls_back_to_english(self):
        assert corpus.sentences_for("xx") == corpus.sentences_for("en")


class TestRemedialDrills:
    def test_accuracy_drill(self, generator):
        exercise = generator.accuracy_drill("asdf jkl;", target_accuracy=90, repetitions=2)
        assert exercise.type == ExerciseType.ACCURACY
        assert exercise.session_text == "asdf jkl; asdf jkl;"

    def test_speed_sprint(self, generator):
        exercise = generator.speed_sprint("asdf", target_wpm=40, time_limit=30, repetitions=3)
        assert exercise.type == ExerciseType.SPEED
        assert exercise.target_metric.metric == Metric.WPM
        assert exercise.target_metric.threshold == 40
        assert exercise.time_limit == 30


class TestAdaptive:
    """Weak-key targeted content."""

    def test_ngrams_contain_key(self, generator):
        ngrams = generator.adaptive_ngrams(["t"])
        assert len(ngrams) == 2
        assert set(ngrams) == {"th", "at"}

    def test_synthesized_pairs_when_no_match(self, generator):
        assert set(generator.adaptive_ngrams(["q"])) == {"qq", "aq", "qe"}

    def test_at_most_four_unique(self, generator):
        ngrams = generator.adaptive_ngrams(["e", "n", "h"])
        assert len(ngrams) == 4
        assert len(set(ngrams)) == 4

    def test_seeded_generation_is_deterministic(self, settings):
        first = ExerciseGenerator(rng=random.Random(7), settings=settings)
        second = ExerciseGenerator(rng=random.Random(7), settings=settings)
        assert first.adaptive_ngrams("enh") == second.adaptive_ngrams("enh")
        assert first.key_pattern(["a", "b"]) == second.key_pattern(["a", "b"])

    def test_key_pattern_fallback(self, generator):
        assert generator.key_pattern([]) == "asdf jkl;"

    def test_adaptive_lesson(self, generator):
        lesson = generator.adaptive_lesson(["F", "j"])
        assert lesson.id.startswith("adaptive_")
        assert lesson.name == "Focus: FJ"
        assert lesson.required_keys == ["f", "j"]
        assert lesson.passing_requirements.min_accuracy == 95
        assert lesson.passing_requirements.min_wpm == 15
        assert set(lesson.content_pattern.replace(" ", "")) <= {"f", "j"}

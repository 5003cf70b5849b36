"""
Exercise Generator.

Builds drill content for lessons and remediation:
- anchor drills (repeated key triplets)
- finger column drills
- n-gram drills at four context levels
- word and sentence drills
- accuracy drills and timed speed sprints
- adaptive "weakness training" lessons for a learner's weakest keys

All randomness flows through one injected random.Random, so a seeded
generator always produces the same content.
"""
from __future__ import annotations

import random
import uuid
from collections.abc import Iterable, Sequence
from enum import Enum

from loguru import logger

from typequest.config import Settings, get_settings
from typequest.core.models import (
    Exercise,
    ExerciseType,
    Lesson,
    LessonDifficulty,
    Metric,
    MetricTarget,
    PassingRequirements,
)
from typequest.curriculum import corpus
from typequest.curriculum.corpus import KeyColumn

ANCHOR_ROUNDS = 10
ANCHOR_FALLBACK = "asdf jkl; asdf jkl;"
COLUMN_GROUPS = 8
ADAPTIVE_NGRAM_COUNT = 4
KEY_PATTERN_ROUNDS = 10
KEY_PATTERN_FALLBACK = "asdf jkl;"


class ContextLevel(str, Enum):
    """How much surrounding text an n-gram drill embeds the n-gram in."""

    ISOLATED = "isolated"
    EMBEDDED = "embedded"
    LEXICAL = "lexical"
    SENTENTIAL = "sentential"


class ExerciseGenerator:
    """
    Stateless drill factory over a seeded random source.

    Difficulty arguments are lesson XP multipliers (1.0 for beginner up to
    2.5 for expert), optionally scaled down for warmups and remediation.
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        settings: Settings | None = None,
    ):
        self.settings = settings or get_settings()
        self.rng = rng or random.Random(self.settings.random_seed)

    # ------------------------------------------------------------------
    # Key drills
    # ------------------------------------------------------------------

    def anchor_drill(
        self,
        keys: Iterable[str],
        difficulty: float,
        duration: int,
    ) -> Exercise:
        """
        Ten rounds of `kkk` per key.

        Falls back to a home-row pattern when no keys are given so the
        exercise always has something to type.
        """
        keys = [k for k in keys if k]
        content = " ".join(f"{k}{k}{k}" for _ in range(ANCHOR_ROUNDS) for k in keys).strip()
        if not content:
            logger.warning("Anchor drill requested without keys; using home-row fallback")
            content = ANCHOR_FALLBACK

        return Exercise(
            type=ExerciseType.ANCHOR,
            content=content,
            target_metric=MetricTarget(Metric.ACCURACY, 0.90 + difficulty * 0.1),
            time_limit=duration,
            repetitions=1,
        )

    def column_drill(self, column: KeyColumn, difficulty: float) -> Exercise:
        """Eight random three-key groups from one finger column."""
        keys = column.keys
        groups = [
            "".join(self.rng.choice(keys) for _ in range(3))
            for _ in range(COLUMN_GROUPS)
        ]
        return Exercise(
            type=ExerciseType.COLUMN,
            content=" ".join(groups),
            target_metric=MetricTarget(Metric.ACCURACY, 0.9 + difficulty * 0.05),
            repetitions=2,
        )

    def ngram_drill(
        self,
        ngrams: Sequence[str],
        context: ContextLevel,
        difficulty: float,
    ) -> Exercise:
        """N-gram practice at the given context level."""
        if context == ContextLevel.ISOLATED:
            content = " ".join(f"{g} {g} {g}" for g in ngrams)
        elif context == ContextLevel.EMBEDDED:
            content = " ".join(f"x{g}x" for g in ngrams)
        else:
            content = " ".join(ngrams)

        if not content:
            content = corpus.FALLBACK_NGRAM_CONTENT

        return Exercise(
            type=ExerciseType.NGRAM,
            content=content,
            target_metric=MetricTarget(Metric.WPM, 10 + difficulty * 20),
            repetitions=3,
        )

    # ------------------------------------------------------------------
    # Word / sentence drills
    # ------------------------------------------------------------------

    def words_from_chars(self, allowed_chars: Iterable[str], count: int = 10) -> list[str]:
        """
        Up to `count` words typeable with the allowed characters.

        When the vocabulary has nothing typeable, random four-letter strings
        are built from the allowed characters instead.
        """
        allowed = sorted({c.lower() for c in allowed_chars if c and not c.isspace()})
        if not allowed:
            return []

        words = corpus.writable_words(allowed)
        if words:
            return words[:count]

        return ["".join(self.rng.choice(allowed) for _ in range(4)) for _ in range(count)]

    def word_drill(
        self,
        target_words: Sequence[str] = (),
        allowed_keys: Iterable[str] | None = None,
        count: int = 10,
    ) -> Exercise:
        words = list(target_words)
        if not words and allowed_keys is not None:
            words = self.words_from_chars(allowed_keys, count=count)
        if not words:
            words = list(corpus.FALLBACK_WORDS)

        return Exercise(
            type=ExerciseType.WORD,
            content=" ".join(words),
            target_metric=MetricTarget(Metric.WPM, 20),
            repetitions=3,
        )

    def sentence_drill(self, sentences: Sequence[str], count: int = 5) -> Exercise:
        """Pick `count` sentences from a practice corpus."""
        pool = list(sentences)
        if len(pool) > count:
            pool = self.rng.sample(pool, count)
        content = " ".join(pool) or corpus.sentences_for("en")[0]

        return Exercise(
            type=ExerciseType.SENTENCE,
            content=content,
            target_metric=MetricTarget(Metric.WPM, 30),
            repetitions=1,
        )

    # ------------------------------------------------------------------
    # Remedial drills
    # ------------------------------------------------------------------

    def accuracy_drill(self, content: str, target_accuracy: float, repetitions: int) -> Exercise:
        return Exercise(
            type=ExerciseType.ACCURACY,
            content=content,
            target_metric=MetricTarget(Metric.ACCURACY, target_accuracy),
            repetitions=repetitions,
        )

    def speed_sprint(
        self,
        content: str,
        target_wpm: float,
        time_limit: int,
        repetitions: int,
    ) -> Exercise:
        return Exercise(
            type=ExerciseType.SPEED,
            content=content,
            target_metric=MetricTarget(Metric.WPM, target_wpm),
            time_limit=time_limit,
            repetitions=repetitions,
        )

    # ------------------------------------------------------------------
    # Adaptive content
    # ------------------------------------------------------------------

    def adaptive_ngrams(self, keys: Iterable[str]) -> list[str]:
        """
        Pick n-grams that exercise the given keys.

        Common n-grams containing a key are preferred; a key that appears in
        none of them gets synthesized pairs (kk, ak, ke). The candidates are
        deduplicated, shuffled and cut to four.
        """
        candidates: list[str] = []
        for key in keys:
            key = key.lower()
            matches = [g for g in corpus.COMMON_NGRAMS if key in g]
            if not matches:
                matches = [f"{key}{key}", f"a{key}", f"{key}e"]
            candidates.extend(matches)

        unique = list(dict.fromkeys(candidates))
        self.rng.shuffle(unique)
        return unique[:ADAPTIVE_NGRAM_COUNT]

    def key_pattern(self, keys: Sequence[str]) -> str:
        """Procedural practice text mixing random pairs of the given keys."""
        keys = [k for k in keys if k]
        if not keys:
            return KEY_PATTERN_FALLBACK

        chunks = []
        for _ in range(KEY_PATTERN_ROUNDS):
            k = self.rng.choice(keys)
            k2 = self.rng.choice(keys)
            chunks.append(f"{k}{k2}{k} {k}{k2} {k}{k2}{k2}")
        return " ".join(chunks)

    def adaptive_lesson(self, weak_keys: Sequence[str]) -> Lesson:
        """
        Build a one-off "weakness training" lesson for the given keys.

        The lesson lives outside the stage structure (stage 0), so the content
        store serves its procedurally generated pattern as the main exercise.
        """
        keys = [k.lower() for k in weak_keys if k]
        lesson = Lesson(
            id=f"adaptive_{uuid.UUID(int=self.rng.getrandbits(128), version=4)}",
            name="Focus: " + "".join(keys).upper(),
            description="Personalized practice to improve your accuracy.",
            stage_id=0,
            module_id="adaptive",
            order=0,
            difficulty=LessonDifficulty.INTERMEDIATE,
            content_pattern=self.key_pattern(keys),
            passing_requirements=PassingRequirements(min_accuracy=95, min_wpm=15),
            required_keys=keys or ["f", "j"],
            target_ngrams=self.adaptive_ngrams(keys),
        )
        logger.debug(f"Generated adaptive lesson {lesson.id} for keys {keys}")
        return lesson

"""
Progression Ledger.

Cross-session learner record:
- XP and level (level = floor(total_xp / xp_per_level) + 1, never decreasing)
- daily practice streak
- cumulative per-key statistics and weakest-key detection
- running WPM/accuracy averages and the set of completed lessons
"""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace
from datetime import date

from loguru import logger

from typequest.analytics.key_stats import KeyStat, KeyStatsAggregator
from typequest.config import Settings, get_settings
from typequest.core.models import LessonDifficulty, ProgressionState

WEAK_KEY_ACCURACY = 0.9


def compute_lesson_xp(
    avg_wpm: float,
    avg_accuracy: float,
    difficulty: LessonDifficulty,
    base_xp: int = 150,
) -> int:
    """
    XP for a passed lesson.

    base + int(2 x accuracy) + int(5 x wpm), scaled by the lesson's
    difficulty multiplier and truncated.
    """
    raw = base_xp + int(avg_accuracy * 2) + int(avg_wpm * 5)
    return int(raw * difficulty.xp_multiplier)


def next_streak(current: int, last_practice_date: date | None, today: date) -> int:
    """Streak value after practicing on `today`."""
    if last_practice_date is None:
        return 1
    gap = (today - last_practice_date).days
    if gap <= 0:
        return current
    if gap == 1:
        return current + 1
    return 1


class ProgressionLedger:
    """
    Owns one learner's ProgressionState and cumulative key statistics.

    Every mutation of the progression state goes through this class.
    """

    def __init__(
        self,
        state: ProgressionState | None = None,
        settings: Settings | None = None,
        completed_lessons: Iterable[str] = (),
    ):
        self.settings = settings or get_settings()
        self._state = state or ProgressionState()
        self._key_stats = KeyStatsAggregator()
        self._completed: set[str] = set(completed_lessons)
        self._lessons_recorded = 0
        self.average_wpm = 0.0
        self.average_accuracy = 0.0

    @property
    def state(self) -> ProgressionState:
        return self._state

    @property
    def level(self) -> int:
        return self._state.level

    @property
    def total_xp(self) -> int:
        return self._state.total_xp

    @property
    def completed_lessons(self) -> frozenset[str]:
        return frozenset(self._completed)

    def snapshot(self) -> ProgressionState:
        """Independent copy of the current state."""
        return replace(self._state)

    # ------------------------------------------------------------------
    # XP / level
    # ------------------------------------------------------------------

    def level_for(self, total_xp: int) -> int:
        return total_xp // self.settings.xp_per_level + 1

    def add_xp(self, amount: int) -> bool:
        """
        Add XP and recompute the level.

        Returns:
            True if the level rose

        Raises:
            ValueError: for negative amounts
        """
        if amount < 0:
            raise ValueError(f"XP amount must be non-negative, got {amount}")

        old_level = self._state.level
        self._state.total_xp += amount
        self._state.level = max(old_level, self.level_for(self._state.total_xp))

        if self._state.level > old_level:
            logger.info(f"Level up: {old_level} -> {self._state.level} ({self._state.total_xp} XP)")
            return True
        return False

    def lesson_xp(self, avg_wpm: float, avg_accuracy: float, difficulty: LessonDifficulty) -> int:
        return compute_lesson_xp(avg_wpm, avg_accuracy, difficulty, self.settings.lesson_base_xp)

    # ------------------------------------------------------------------
    # Streak
    # ------------------------------------------------------------------

    def update_streak(self, last_practice_date: date | None, today: date) -> bool:
        """
        Apply the daily streak rule for practice on `today`.

        No previous practice starts a streak of 1, practice on the same day
        changes nothing, practice on the following day extends the streak and
        any longer gap restarts it at 1.

        Returns:
            True if the current streak changed
        """
        before = self._state.current_streak
        self._state.current_streak = next_streak(before, last_practice_date, today)
        self._state.longest_streak = max(self._state.longest_streak, self._state.current_streak)
        if last_practice_date is None or today > last_practice_date:
            self._state.last_practice_date = today
        return self._state.current_streak != before

    def record_practice(self, today: date) -> bool:
        """Update the streak against the stored last practice date."""
        return self.update_streak(self._state.last_practice_date, today)

    # ------------------------------------------------------------------
    # Lessons
    # ------------------------------------------------------------------

    def record_lesson(self, lesson_id: str, avg_wpm: float, avg_accuracy: float) -> None:
        """Mark a lesson completed and fold its averages into the running means."""
        self._lessons_recorded += 1
        count = self._lessons_recorded
        self.average_wpm += (avg_wpm - self.average_wpm) / count
        self.average_accuracy += (avg_accuracy - self.average_accuracy) / count
        self._completed.add(lesson_id)

    def is_completed(self, lesson_id: str) -> bool:
        return lesson_id in self._completed

    # ------------------------------------------------------------------
    # Key statistics
    # ------------------------------------------------------------------

    def record_key_stats(self, stats: Iterable[KeyStat]) -> None:
        self._key_stats.merge(stats)

    def key_stat(self, key: str) -> KeyStat | None:
        return self._key_stats.get(key)

    def key_stats(self) -> list[KeyStat]:
        return self._key_stats.stats()

    def weakest_keys(self, limit: int | None = None) -> list[str]:
        """
        Keys below 90 % accuracy with enough errors to be meaningful,
        worst first.
        """
        limit = self.settings.weak_key_limit if limit is None else limit
        weak = [
            stat
            for stat in self._key_stats.ranked()
            if stat.accuracy < WEAK_KEY_ACCURACY
            and stat.error_count >= self.settings.weak_key_min_errors
        ]
        return [stat.key for stat in weak[:limit]]

    def key_mastery(self, key: str) -> float:
        """Mastery in [0, 1]; an untyped key counts as fully mastered."""
        stat = self._key_stats.get(key)
        if stat is None:
            return 1.0
        return max(0.0, 1.0 - stat.struggle_score / 100.0)

"""
Per-key statistics for a typing session.

Counts presses, errors and reaction latency per expected character so the
weakest keys can be ranked for remediation.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from typequest.analytics.metrics_calculator import struggle_score


@dataclass
class KeyStat:
    """Press/error/latency counters for one key."""

    key: str
    press_count: int = 0
    error_count: int = 0
    latency_sum: float = 0.0

    @property
    def avg_latency(self) -> float:
        if self.press_count <= 0:
            return 0.0
        return self.latency_sum / self.press_count

    @property
    def accuracy(self) -> float:
        """Fraction of correct presses; 1.0 for an unpressed key."""
        if self.press_count <= 0:
            return 1.0
        return (self.press_count - self.error_count) / self.press_count

    @property
    def struggle_score(self) -> float:
        if self.press_count <= 0:
            return 0.0
        return struggle_score(self.accuracy, self.avg_latency)


def _rank_key(stat: KeyStat) -> tuple[float, int, str]:
    # Worst first; equal scores favor the less-practiced key
    return (-stat.struggle_score, stat.press_count, stat.key)


class KeyStatsAggregator:
    """
    Accumulates KeyStat counters keyed by the lower-cased target character.

    One aggregator belongs to one session; the LessonRunner flushes it to the
    persistence sink when the session ends and discards it.
    """

    def __init__(self):
        self._stats: dict[str, KeyStat] = {}

    def __len__(self) -> int:
        return len(self._stats)

    def __contains__(self, key: str) -> bool:
        return key.lower() in self._stats

    def record(self, target_key: str, is_correct: bool, latency: float) -> KeyStat:
        """
        Record one press of the key the learner was supposed to type.

        Args:
            target_key: Expected character (normalized to lower case)
            is_correct: Whether the typed key matched
            latency: Seconds since the previous key

        Returns:
            The updated KeyStat
        """
        key = target_key.lower()
        stat = self._stats.get(key)
        if stat is None:
            stat = KeyStat(key=key)
            self._stats[key] = stat

        stat.press_count += 1
        stat.latency_sum += max(0.0, latency)
        if not is_correct:
            stat.error_count += 1
        return stat

    def merge(self, stats: Iterable[KeyStat]) -> None:
        """Fold counters from another session into this aggregator."""
        for other in stats:
            key = other.key.lower()
            stat = self._stats.setdefault(key, KeyStat(key=key))
            stat.press_count += other.press_count
            stat.error_count += other.error_count
            stat.latency_sum += other.latency_sum

    def get(self, key: str) -> KeyStat | None:
        return self._stats.get(key.lower())

    def stats(self) -> list[KeyStat]:
        """Copies of all counters, in first-seen order."""
        return [
            KeyStat(s.key, s.press_count, s.error_count, s.latency_sum)
            for s in self._stats.values()
        ]

    def ranked(self) -> list[KeyStat]:
        """All keys ordered from most to least in need of remediation."""
        return sorted(self.stats(), key=_rank_key)

    def weakest(self, limit: int = 5) -> list[str]:
        return [stat.key for stat in self.ranked()[:limit]]

    def reset(self) -> None:
        self._stats.clear()

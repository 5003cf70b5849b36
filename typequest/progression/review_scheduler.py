"""
Lesson review scheduling (SuperMemo-2).

After each lesson the accuracy is mapped to an SM-2 response quality and the
lesson's review interval grows 1 -> 6 -> interval x ease while the learner
keeps answering well. A poor result sends the lesson back to a 1-day interval
with the ease unchanged.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta

from loguru import logger

DEFAULT_EASE = 2.5
MIN_EASE = 1.3
PASSING_QUALITY = 3


def quality_for_accuracy(accuracy: float) -> int:
    """Map composite accuracy (percent) to an SM-2 quality grade 1-5."""
    if accuracy < 80:
        return 1
    if accuracy < 90:
        return 2
    if accuracy < 95:
        return 3
    if accuracy < 98:
        return 4
    return 5


@dataclass
class ReviewItem:
    """Scheduling state for one lesson."""

    lesson_id: str
    next_review: date
    interval: float = 0.0  # days
    ease_factor: float = DEFAULT_EASE
    repetitions: int = 0


class ReviewScheduler:
    """In-memory SM-2 review queue keyed by lesson id."""

    def __init__(self):
        self._items: dict[str, ReviewItem] = {}

    def __len__(self) -> int:
        return len(self._items)

    def get(self, lesson_id: str) -> ReviewItem | None:
        return self._items.get(lesson_id)

    def schedule(self, lesson_id: str, accuracy: float, today: date) -> ReviewItem:
        """
        Update a lesson's schedule from the accuracy of its latest attempt.

        Args:
            lesson_id: Lesson being reviewed
            accuracy: Composite accuracy in percent
            today: Date of the attempt

        Returns:
            The updated ReviewItem
        """
        quality = quality_for_accuracy(accuracy)
        item = self._items.get(lesson_id) or ReviewItem(lesson_id=lesson_id, next_review=today)

        if quality >= PASSING_QUALITY:
            if item.interval == 0:
                item.interval = 1.0
            elif item.interval == 1:
                item.interval = 6.0
            else:
                item.interval = item.interval * item.ease_factor

            miss = 5 - quality
            item.ease_factor = max(MIN_EASE, item.ease_factor + (0.1 - miss * (0.08 + miss * 0.02)))
            item.repetitions += 1
        else:
            item.interval = 1.0
            item.repetitions = 0

        item.next_review = today + timedelta(days=round(item.interval))
        self._items[lesson_id] = item

        logger.debug(
            f"Review for {lesson_id}: q={quality}, interval={item.interval:.1f}d, "
            f"ease={item.ease_factor:.2f}, next={item.next_review.isoformat()}"
        )
        return item

    def queue(self) -> list[ReviewItem]:
        """All items ordered by next review date."""
        return sorted(self._items.values(), key=lambda item: (item.next_review, item.lesson_id))

    def due(self, today: date) -> list[ReviewItem]:
        """Items whose review date has arrived, earliest first."""
        return [item for item in self.queue() if item.next_review <= today]

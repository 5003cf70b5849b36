"""
Progression: XP, levels, streaks, cumulative key statistics and review scheduling.
"""

from typequest.progression.ledger import ProgressionLedger, compute_lesson_xp, next_streak
from typequest.progression.review_scheduler import ReviewItem, ReviewScheduler, quality_for_accuracy

__all__ = [
    "ProgressionLedger",
    "compute_lesson_xp",
    "next_streak",
    "ReviewItem",
    "ReviewScheduler",
    "quality_for_accuracy",
]

"""
Typing Metrics Calculator.

Pure, stateless conversions from raw counters and elapsed time into the
numbers a learner sees:

- WPM: net characters / standard word length per minute
- Raw accuracy: correct keys over all keys
- Corrected accuracy: errors fixed with backspace are forgiven
- Display accuracy: simple mean of raw and corrected accuracy

Zero elapsed time and zero totals are defined edge-case values, never errors.
Display accuracy must stay exactly (raw + corrected) / 2 so new sessions are
comparable with recorded history.
"""

from __future__ import annotations

import statistics
from collections.abc import Sequence

STANDARD_WORD_LENGTH = 5
PERFECT_ACCURACY = 100.0

# Struggle score normalization: 200ms is expert, 1.0s is the latency cap
LATENCY_FLOOR_SECONDS = 0.2
LATENCY_CAP_SECONDS = 1.0
ACCURACY_WEIGHT = 0.6
LATENCY_WEIGHT = 0.4


def wpm(
    characters: int,
    uncorrected_errors: int,
    elapsed_seconds: float,
    word_length: int = STANDARD_WORD_LENGTH,
) -> float:
    """
    Words per minute.

    WPM = ((characters - uncorrected_errors) / word_length) / minutes

    Args:
        characters: Total characters typed (errors included)
        uncorrected_errors: Mismatches not reverted with backspace
        elapsed_seconds: Active typing time
        word_length: Characters per word (5 by convention)

    Returns:
        WPM clamped at 0; 0 when no time has elapsed
    """
    if elapsed_seconds <= 0:
        return 0.0
    net_characters = characters - uncorrected_errors
    words = net_characters / word_length
    minutes = elapsed_seconds / 60.0
    return max(0.0, words / minutes)


def raw_accuracy(correct: int, total: int) -> float:
    """Percentage of correct keys; 100 when nothing was typed."""
    if total <= 0:
        return PERFECT_ACCURACY
    return correct / total * 100.0


def corrected_accuracy(correct: int, errors: int, backspaces: int) -> float:
    """
    Accuracy that forgives errors fixed with backspace.

    Backspaces can cancel errors but never drive the corrected error count
    below zero.
    """
    corrected_errors = max(0, errors - backspaces)
    total = correct + corrected_errors
    if total <= 0:
        return PERFECT_ACCURACY
    return correct / total * 100.0


def display_accuracy(raw: float, corrected: float) -> float:
    """Accuracy shown to learners and stored in history."""
    return (raw + corrected) / 2


def consistency(intervals: Sequence[float]) -> float:
    """
    Rhythm score from inter-keystroke intervals.

    Consistency = 1 - (stdev / mean), clamped to 0-1. A steady rhythm scores
    close to 1.

    Returns:
        0.0 when there are fewer than two intervals or the mean is zero
    """
    if len(intervals) < 2:
        return 0.0
    mean = statistics.fmean(intervals)
    if mean <= 0:
        return 0.0
    std_dev = statistics.pstdev(intervals)
    return max(0.0, min(1.0, 1.0 - (std_dev / mean)))


def struggle_score(accuracy: float, avg_latency: float) -> float:
    """
    Composite 0-100 struggle score for a key (higher = worse).

    Factors:
    - Accuracy (0.0-1.0): weight 60%
    - Latency (seconds): weight 40%, normalized between 0.2s and 1.0s

    Args:
        accuracy: Fraction of correct presses
        avg_latency: Mean reaction time in seconds

    Returns:
        Score between 0 and 100
    """
    accuracy_factor = (1.0 - accuracy) * 100.0  # 90% acc = 10 pts, 50% acc = 50 pts

    capped_latency = min(LATENCY_CAP_SECONDS, max(LATENCY_FLOOR_SECONDS, avg_latency))
    latency_ratio = (capped_latency - LATENCY_FLOOR_SECONDS) / (LATENCY_CAP_SECONDS - LATENCY_FLOOR_SECONDS)
    latency_factor = min(1.0, max(0.0, latency_ratio)) * 100.0

    score = (accuracy_factor * ACCURACY_WEIGHT) + (latency_factor * LATENCY_WEIGHT)
    return min(100.0, score)

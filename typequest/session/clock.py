"""
Externally driven tick clock.

Elapsed time only advances when the caller delivers ticks, so replays and
tests are reproducible from a tick count and never wait on wall-clock time.
Time is kept as an integer tick count to avoid float drift.
"""

from __future__ import annotations


class TickClock:
    """Fixed-resolution active-time accumulator with pause support."""

    def __init__(self, interval_ms: int = 100):
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive")
        self.interval_ms = interval_ms
        self._ticks = 0
        self._running = False

    @property
    def ticks(self) -> int:
        return self._ticks

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def elapsed_seconds(self) -> float:
        return self._ticks * self.interval_ms / 1000.0

    def start(self) -> None:
        """Reset to zero and start accumulating."""
        self._ticks = 0
        self._running = True

    def pause(self) -> None:
        self._running = False

    def resume(self) -> None:
        self._running = True

    def stop(self) -> None:
        self._running = False

    def advance(self, count: int = 1) -> bool:
        """
        Deliver `count` ticks.

        Returns:
            True if time advanced, False when the clock is paused or stopped
        """
        if count < 0:
            raise ValueError("tick count cannot be negative")
        if not self._running:
            return False
        self._ticks += count
        return True

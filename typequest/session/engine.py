"""
Typing Session Engine.

Owns the state machine for one typed exercise:

    Idle -> Running <-> Paused -> Completed
    Running/Paused -> stop() -> Idle

The engine compares each key to the character under the cursor. A mismatch
is counted but never advances the cursor; the learner has to produce the
right character to move on. Metrics are recomputed after every key event and
every tick. Elapsed time comes only from externally delivered ticks.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum

from loguru import logger

from typequest.analytics import metrics_calculator as calc
from typequest.analytics.key_stats import KeyStatsAggregator
from typequest.config import Settings, get_settings
from typequest.core.errors import EmptyContentError, InvalidTransitionError
from typequest.core.models import ExerciseResult, KeystrokeEvent
from typequest.session.clock import TickClock
from typequest.session.events import Backspace, KeyPress, Pause, Resume, SessionEvent, Stop, Tick


class SessionState(str, Enum):
    """Lifecycle state of a typing session."""

    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"


CompletionListener = Callable[[ExerciseResult], None]


class SessionEngine:
    """
    Keystroke-driven state machine for a single exercise.

    Not thread-safe; one engine instance serves one learner session and
    receives its events strictly in arrival order.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        on_complete: CompletionListener | None = None,
    ):
        self.settings = settings or get_settings()
        self.on_complete = on_complete
        self.clock = TickClock(self.settings.tick_interval_ms)
        self._state = SessionState.IDLE
        self._text = ""
        self._time_limit: int | None = None
        self._reset_counters()

    def _reset_counters(self) -> None:
        self._typed: list[str] = []
        self._cursor = 0
        self._total_characters = 0
        self._error_count = 0
        self._uncorrected_errors = 0
        self._backspace_count = 0
        self._last_key_time: float | None = None
        self._is_current_error = False
        self._keystrokes: list[KeystrokeEvent] = []
        self._key_stats = KeyStatsAggregator()
        self._result: ExerciseResult | None = None

        self.wpm = 0.0
        self.raw_accuracy = calc.PERFECT_ACCURACY
        self.corrected_accuracy = calc.PERFECT_ACCURACY
        self.accuracy = calc.PERFECT_ACCURACY

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def text(self) -> str:
        return self._text

    @property
    def typed_text(self) -> str:
        return "".join(self._typed)

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def expected_key(self) -> str | None:
        if self._cursor < len(self._text):
            return self._text[self._cursor]
        return None

    @property
    def elapsed_seconds(self) -> float:
        return self.clock.elapsed_seconds

    @property
    def total_characters(self) -> int:
        return self._total_characters

    @property
    def error_count(self) -> int:
        return self._error_count

    @property
    def uncorrected_errors(self) -> int:
        return self._uncorrected_errors

    @property
    def backspace_count(self) -> int:
        return self._backspace_count

    @property
    def is_current_error(self) -> bool:
        return self._is_current_error

    @property
    def keystrokes(self) -> tuple[KeystrokeEvent, ...]:
        return tuple(self._keystrokes)

    @property
    def key_stats(self) -> KeyStatsAggregator:
        return self._key_stats

    @property
    def result(self) -> ExerciseResult | None:
        return self._result

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def start(self, text: str, time_limit: int | None = None) -> None:
        """
        Begin a new session over `text`.

        Args:
            text: Content to type
            time_limit: Optional time box in seconds; the session completes
                when the clock reaches it

        Raises:
            InvalidTransitionError: if a session is running or paused
            EmptyContentError: if `text` is empty
        """
        if self._state not in (SessionState.IDLE, SessionState.COMPLETED):
            raise InvalidTransitionError("start", self._state.value)
        if not text:
            raise EmptyContentError("Cannot start a session with empty text")

        self._text = text
        self._time_limit = time_limit
        self._reset_counters()
        self.clock.start()
        self._state = SessionState.RUNNING
        logger.debug(f"Session started: {len(text)} chars, time_limit={time_limit}")

    def key_press(self, key: str, timestamp: float | None = None) -> KeystrokeEvent:
        """
        Process one printable key.

        Args:
            key: Character typed by the learner
            timestamp: Session-clock time of the press (defaults to elapsed time)

        Returns:
            The recorded KeystrokeEvent
        """
        if self._state != SessionState.RUNNING:
            raise InvalidTransitionError("key_press", self._state.value)
        if not key:
            raise ValueError("key must be a non-empty string")

        now = self.elapsed_seconds if timestamp is None else timestamp
        # First key of a session has no predecessor; read-in time is not latency
        if self._last_key_time is None:
            latency = 0.0
        else:
            latency = max(0.0, now - self._last_key_time)
        self._last_key_time = now

        expected = self._text[self._cursor]
        is_correct = key == expected
        self._is_current_error = not is_correct

        self._key_stats.record(expected, is_correct, latency)

        if is_correct:
            self._typed.append(expected)
            self._cursor += 1
            self._total_characters += 1
        else:
            self._error_count += 1
            self._uncorrected_errors += 1
            self._total_characters += 1

        event = KeystrokeEvent(
            typed_key=key,
            expected_key=expected,
            timestamp=now,
            reaction_time=latency,
            is_correct=is_correct,
        )
        self._keystrokes.append(event)

        self._update_metrics()

        if self._cursor >= len(self._text):
            self._complete()

        return event

    def backspace(self) -> bool:
        """
        Remove the last typed character.

        A backspace is assumed to correct the most recent error, so it also
        decrements the uncorrected error count when that is positive.

        Returns:
            False when the cursor is already at the start (nothing happens)
        """
        if self._state != SessionState.RUNNING:
            raise InvalidTransitionError("backspace", self._state.value)
        if self._cursor <= 0:
            return False

        self._backspace_count += 1
        self._cursor -= 1
        if self._typed:
            self._typed.pop()
        self._is_current_error = False

        if self._uncorrected_errors > 0:
            self._uncorrected_errors -= 1

        self._update_metrics()
        return True

    def tick(self, count: int = 1) -> bool:
        """
        Advance elapsed time by `count` ticks.

        Ticks arriving outside Running are ignored.

        Returns:
            True if time advanced
        """
        if self._state != SessionState.RUNNING:
            return False
        if not self.clock.advance(count):
            return False

        self.wpm = self._current_wpm()
        if self._time_limit is not None and self.elapsed_seconds >= self._time_limit:
            logger.debug(f"Session time limit of {self._time_limit}s reached")
            self._complete(timed_out=True)
        return True

    def pause(self) -> None:
        """Stop time accumulation. Pausing a paused session is a no-op."""
        if self._state == SessionState.PAUSED:
            return
        if self._state != SessionState.RUNNING:
            raise InvalidTransitionError("pause", self._state.value)
        self.clock.pause()
        self._state = SessionState.PAUSED

    def resume(self) -> None:
        """Restart time accumulation. Resuming a running session is a no-op."""
        if self._state == SessionState.RUNNING:
            return
        if self._state != SessionState.PAUSED:
            raise InvalidTransitionError("resume", self._state.value)
        self.clock.resume()
        self._state = SessionState.RUNNING

    def stop(self) -> None:
        """Abandon the session without producing a result."""
        if self._state not in (SessionState.RUNNING, SessionState.PAUSED):
            raise InvalidTransitionError("stop", self._state.value)
        self.clock.stop()
        self._state = SessionState.IDLE
        logger.debug("Session stopped before completion")

    def dispatch(self, event: SessionEvent):
        """Route one event from the session's event channel."""
        if isinstance(event, KeyPress):
            return self.key_press(event.key, event.timestamp)
        if isinstance(event, Backspace):
            return self.backspace()
        if isinstance(event, Tick):
            return self.tick(event.count)
        if isinstance(event, Pause):
            return self.pause()
        if isinstance(event, Resume):
            return self.resume()
        if isinstance(event, Stop):
            return self.stop()
        raise TypeError(f"Unsupported session event: {event!r}")

    # ------------------------------------------------------------------
    # Metrics
    # ------------------------------------------------------------------

    def _current_wpm(self) -> float:
        return calc.wpm(
            self._total_characters,
            self._uncorrected_errors,
            self.elapsed_seconds,
            word_length=self.settings.standard_word_length,
        )

    def _update_metrics(self) -> None:
        correct = len(self._typed)
        total_keys = correct + self._error_count

        self.raw_accuracy = calc.raw_accuracy(correct, total_keys)
        self.corrected_accuracy = calc.corrected_accuracy(
            correct, self._error_count, self._backspace_count
        )
        self.accuracy = calc.display_accuracy(self.raw_accuracy, self.corrected_accuracy)
        self.wpm = self._current_wpm()

    def _consistency(self) -> float:
        intervals = [event.reaction_time for event in self._keystrokes[1:]]
        return calc.consistency(intervals)

    def _complete(self, timed_out: bool = False) -> None:
        self.clock.stop()
        self._update_metrics()
        self._state = SessionState.COMPLETED
        self._result = ExerciseResult(
            wpm=self.wpm,
            accuracy=self.accuracy,
            error_count=self._error_count,
            duration=self.elapsed_seconds,
            raw_accuracy=self.raw_accuracy,
            corrected_accuracy=self.corrected_accuracy,
            total_characters=self._total_characters,
            uncorrected_errors=self._uncorrected_errors,
            backspace_count=self._backspace_count,
            consistency=self._consistency(),
            timed_out=timed_out,
        )
        logger.debug(
            f"Session completed: wpm={self.wpm:.1f}, accuracy={self.accuracy:.1f}, "
            f"errors={self._error_count}, timed_out={timed_out}"
        )
        if self.on_complete is not None:
            self.on_complete(self._result)

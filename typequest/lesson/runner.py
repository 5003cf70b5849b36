"""
Lesson Runner.

Drives one lesson attempt through a single SessionEngine:

    start(lesson) -> exercise 1 -> exercise 2 -> ... -> verdict
                                                        |- passed: XP, streak, notifications
                                                        |- failed: remediation plan
    start_remediation() -> remedial queue -> verdict ...

Each exercise is its own persistence session. When it completes, its summary
and key statistics are flushed to the persistence sink and the key
statistics are folded into the ledger. The next exercise starts right away.
"""
from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import replace
from datetime import date
from enum import Enum
from statistics import fmean
from uuid import uuid4

from loguru import logger

from typequest.config import Settings, get_settings
from typequest.core.errors import EmptyContentError, InvalidTransitionError, PersistenceError
from typequest.core.interfaces import ContentStore, NotificationSink, PersistenceSink
from typequest.core.memory import InMemoryPersistenceSink, NullNotificationSink
from typequest.core.models import (
    Exercise,
    ExerciseResult,
    KeystrokeEvent,
    Lesson,
    LessonVerdict,
    SessionSummary,
    UserContext,
)
from typequest.curriculum.exercise_generator import ExerciseGenerator
from typequest.lesson.remediation import RemediationPlan, RemediationStrategy
from typequest.progression.ledger import ProgressionLedger
from typequest.progression.review_scheduler import ReviewScheduler
from typequest.session.engine import SessionEngine, SessionState
from typequest.session.events import Backspace, KeyPress, Pause, Resume, SessionEvent, Stop, Tick


class LessonState(str, Enum):
    """Lifecycle state of a lesson attempt."""

    IDLE = "idle"
    IN_PROGRESS = "in_progress"
    FAILED = "failed"
    PASSED = "passed"


def evaluate_verdict(
    lesson: Lesson,
    wpms: Sequence[float],
    accuracies: Sequence[float],
) -> tuple[bool, float, float]:
    """
    Apply the pass rule to one attempt.

    Returns:
        (passed, avg_wpm, avg_accuracy) where the averages are arithmetic
        means over the attempt's exercises (0 when there are none)
    """
    avg_wpm = fmean(wpms) if wpms else 0.0
    avg_accuracy = fmean(accuracies) if accuracies else 0.0
    requirements = lesson.passing_requirements
    passed = avg_wpm >= requirements.min_wpm and avg_accuracy >= requirements.min_accuracy
    return passed, avg_wpm, avg_accuracy


class LessonRunner:
    """
    Sequences a lesson's exercises and turns their results into a verdict.

    Not thread-safe. One runner serves one learner; keystrokes, ticks and
    control events must be delivered in arrival order.
    """

    def __init__(
        self,
        content_store: ContentStore,
        persistence: PersistenceSink | None = None,
        notifications: NotificationSink | None = None,
        ledger: ProgressionLedger | None = None,
        generator: ExerciseGenerator | None = None,
        settings: Settings | None = None,
        user_context: UserContext | None = None,
        reviews: ReviewScheduler | None = None,
        today: Callable[[], date] = date.today,
    ):
        self.settings = settings or get_settings()
        self.content_store = content_store
        self.persistence = persistence or InMemoryPersistenceSink()
        self.notifications = notifications or NullNotificationSink()
        self.ledger = ledger or ProgressionLedger(settings=self.settings)
        self.generator = generator or ExerciseGenerator(settings=self.settings)
        self.remediation = RemediationStrategy(self.generator, self.settings)
        self.reviews = reviews or ReviewScheduler()
        self.user_context = user_context or UserContext(language=self.settings.default_language)
        self._today = today

        self.engine = SessionEngine(settings=self.settings)
        self._state = LessonState.IDLE
        self._lesson: Lesson | None = None
        self._queue: list[Exercise] = []
        self._index = 0
        self._attempt = 0
        self._wpms: list[float] = []
        self._accuracies: list[float] = []
        self._results: list[ExerciseResult] = []
        self._verdict: LessonVerdict | None = None
        self._plan: RemediationPlan | None = None
        self._failures: list[tuple[str, Exception]] = []

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def state(self) -> LessonState:
        return self._state

    @property
    def lesson(self) -> Lesson | None:
        return self._lesson

    @property
    def attempt(self) -> int:
        return self._attempt

    @property
    def exercises(self) -> tuple[Exercise, ...]:
        return tuple(self._queue)

    @property
    def exercise_index(self) -> int:
        return self._index

    @property
    def current_exercise(self) -> Exercise | None:
        if self._state != LessonState.IN_PROGRESS:
            return None
        return self._queue[self._index]

    @property
    def results(self) -> tuple[ExerciseResult, ...]:
        """Results of the current attempt, in exercise order."""
        return tuple(self._results)

    @property
    def verdict(self) -> LessonVerdict | None:
        return self._verdict

    @property
    def remediation_plan(self) -> RemediationPlan | None:
        return self._plan

    # ------------------------------------------------------------------
    # Lesson lifecycle
    # ------------------------------------------------------------------

    def start(self, lesson: Lesson | str) -> Exercise:
        """
        Build the exercise queue and start the first exercise.

        Args:
            lesson: Lesson or lesson id to look up in the content store

        Returns:
            The first exercise

        Raises:
            InvalidTransitionError: if an attempt is in progress
            EmptyContentError: if the queue or any exercise text is empty
            UnknownLessonError: if the id is not in the content store
        """
        if self._state == LessonState.IN_PROGRESS:
            raise InvalidTransitionError("start lesson", self._state.value)

        if isinstance(lesson, str):
            lesson = self.content_store.get_lesson(lesson)

        exercises = self._generate(lesson)
        self._check_queue(lesson, exercises)

        self._lesson = lesson
        self._attempt = 0
        logger.info(f"Starting lesson {lesson.id} ({lesson.name}) with {len(exercises)} exercises")
        return self._begin_attempt(exercises)

    def start_remediation(self) -> Exercise:
        """
        Start the remedial attempt planned after a failed verdict.

        Raises:
            InvalidTransitionError: unless the last attempt failed
        """
        if self._state != LessonState.FAILED or self._plan is None or self._lesson is None:
            raise InvalidTransitionError("start remediation", self._state.value)

        self._check_queue(self._lesson, self._plan.exercises)
        logger.info(f"Starting remediation ({self._plan.branch.value}) for lesson {self._lesson.id}")
        return self._begin_attempt(list(self._plan.exercises))

    def stop(self) -> None:
        """Abandon the current attempt. Nothing is scored or persisted."""
        if self._state != LessonState.IN_PROGRESS:
            raise InvalidTransitionError("stop lesson", self._state.value)
        if self.engine.state in (SessionState.RUNNING, SessionState.PAUSED):
            self.engine.stop()
        self._state = LessonState.IDLE
        self._queue = []
        logger.info(f"Lesson {self._lesson.id if self._lesson else '?'} abandoned")

    # ------------------------------------------------------------------
    # Event forwarding
    # ------------------------------------------------------------------

    def key_press(self, key: str, timestamp: float | None = None) -> KeystrokeEvent:
        self._require_in_progress("key_press")
        event = self.engine.key_press(key, timestamp)
        self._after_event()
        return event

    def backspace(self) -> bool:
        self._require_in_progress("backspace")
        return self.engine.backspace()

    def tick(self, count: int = 1) -> bool:
        if self._state != LessonState.IN_PROGRESS:
            return False
        advanced = self.engine.tick(count)
        self._after_event()
        return advanced

    def pause(self) -> None:
        self._require_in_progress("pause")
        self.engine.pause()

    def resume(self) -> None:
        self._require_in_progress("resume")
        self.engine.resume()

    def dispatch(self, event: SessionEvent):
        """Route one session event; Stop abandons the whole attempt."""
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

    def type_text(self, text: str, ticks_per_key: int = 0) -> None:
        """
        Type a string into the current exercise key by key.

        Ticks are delivered before each key. Typing stops early when the
        exercise completes, so leftover text never spills into the next one.
        """
        exercise = (self._attempt, self._index)
        for char in text:
            if ticks_per_key and self._is_current(exercise):
                self.tick(ticks_per_key)
            if not self._is_current(exercise):
                break
            self.key_press(char)

    def _is_current(self, exercise: tuple[int, int]) -> bool:
        return (
            self._state == LessonState.IN_PROGRESS
            and (self._attempt, self._index) == exercise
            and self.engine.state != SessionState.COMPLETED
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _require_in_progress(self, action: str) -> None:
        if self._state != LessonState.IN_PROGRESS:
            raise InvalidTransitionError(action, self._state.value)

    def _check_queue(self, lesson: Lesson, exercises: Sequence[Exercise]) -> None:
        if not exercises:
            raise EmptyContentError(f"Lesson {lesson.id} produced no exercises")
        for position, exercise in enumerate(exercises):
            if not exercise.session_text:
                raise EmptyContentError(
                    f"Lesson {lesson.id} exercise {position} ({exercise.type.value}) has no content"
                )

    def _begin_attempt(self, exercises: list[Exercise]) -> Exercise:
        self._queue = exercises
        self._index = 0
        self._attempt += 1
        self._wpms = []
        self._accuracies = []
        self._results = []
        self._verdict = None
        self._plan = None
        self._state = LessonState.IN_PROGRESS
        self._start_exercise()
        return self._queue[0]

    def _start_exercise(self) -> None:
        exercise = self._queue[self._index]
        self.engine.start(exercise.session_text, time_limit=exercise.time_limit)
        logger.debug(
            f"Exercise {self._index + 1}/{len(self._queue)}: {exercise.type.value}, "
            f"{len(exercise.session_text)} chars"
        )

    def _generate(self, lesson: Lesson) -> list[Exercise]:
        context = replace(self.user_context, weakest_keys=self.ledger.weakest_keys())
        return list(self.content_store.generate_exercises(lesson, context))

    def _after_event(self) -> None:
        lesson = self._lesson
        if self._state != LessonState.IN_PROGRESS or lesson is None:
            return
        if self.engine.state != SessionState.COMPLETED or self.engine.result is None:
            return

        self._failures = []
        self._record_exercise(lesson, self.engine.result)

        if self._index + 1 < len(self._queue):
            self._index += 1
            self._start_exercise()
        else:
            self._finish_attempt(lesson)

        if self._failures:
            failures, self._failures = self._failures, []
            raise PersistenceError(failures) from failures[0][1]

    def _record_exercise(self, lesson: Lesson, result: ExerciseResult) -> None:
        exercise = self._queue[self._index]
        self._results.append(result)
        self._wpms.append(result.wpm)
        self._accuracies.append(result.accuracy)

        summary = SessionSummary(
            session_id=uuid4(),
            lesson_id=lesson.id,
            exercise_type=exercise.type,
            result=result,
            attempt=self._attempt,
            exercise_index=self._index,
        )
        stats = self.engine.key_stats.stats()
        self.ledger.record_key_stats(stats)

        self._persist("save_session", self.persistence.save_session, summary)
        self._persist("save_key_stats", self.persistence.save_key_stats, summary.session_id, stats)

    def _finish_attempt(self, lesson: Lesson) -> None:
        passed, avg_wpm, avg_accuracy = evaluate_verdict(lesson, self._wpms, self._accuracies)
        today = self._today()
        self.reviews.schedule(lesson.id, avg_accuracy, today)

        if not passed:
            self._verdict = LessonVerdict(
                passed=False,
                avg_wpm=avg_wpm,
                avg_accuracy=avg_accuracy,
                exercise_count=len(self._results),
                attempt=self._attempt,
            )
            self._plan = self.remediation.plan(
                lesson, avg_wpm, avg_accuracy, lambda: self._generate(lesson)
            )
            self._state = LessonState.FAILED
            logger.info(
                f"Lesson {lesson.id} failed (attempt {self._attempt}): "
                f"wpm={avg_wpm:.1f}/{lesson.passing_requirements.min_wpm}, "
                f"accuracy={avg_accuracy:.1f}/{lesson.passing_requirements.min_accuracy}"
            )
            return

        earned_xp = self.ledger.lesson_xp(avg_wpm, avg_accuracy, lesson.difficulty)
        leveled_up = self.ledger.add_xp(earned_xp)
        streak_changed = self.ledger.record_practice(today)
        self.ledger.record_lesson(lesson.id, avg_wpm, avg_accuracy)

        self._verdict = LessonVerdict(
            passed=True,
            avg_wpm=avg_wpm,
            avg_accuracy=avg_accuracy,
            earned_xp=earned_xp,
            exercise_count=len(self._results),
            attempt=self._attempt,
        )
        self._state = LessonState.PASSED
        logger.info(
            f"Lesson {lesson.id} passed (attempt {self._attempt}): "
            f"wpm={avg_wpm:.1f}, accuracy={avg_accuracy:.1f}, +{earned_xp} XP"
        )

        state = self.ledger.state
        self.notifications.lesson_completed(lesson.id)
        if leveled_up:
            self.notifications.level_up(state.level)
        if streak_changed:
            self.notifications.streak_updated(state.current_streak, state.longest_streak)
        self._persist("save_progression", self.persistence.save_progression, self.ledger.snapshot())

    def _persist(self, operation: str, call: Callable[..., None], *args) -> None:
        try:
            call(*args)
        except Exception as e:
            logger.error(f"Persistence {operation} failed: {e}")
            self._failures.append((operation, e))

"""
Unit tests for the typing session state machine.

Tests:
- State transitions and invalid actions
- Cursor/error bookkeeping for matches, mismatches and backspace
- Tick-driven elapsed time, pause/resume and time limits
- Completion result and listener
"""

import pytest

from typequest.core.errors import EmptyContentError, InvalidTransitionError
from typequest.session.engine import SessionEngine, SessionState
from typequest.session.events import Backspace, KeyPress, Pause, Resume, Stop, Tick


def type_all(engine, text, ticks_per_key=0):
    for char in text:
        if ticks_per_key:
            engine.tick(ticks_per_key)
        engine.key_press(char)


class TestTransitions:
    """Lifecycle: Idle -> Running <-> Paused -> Completed."""

    def test_starts_idle(self, engine):
        assert engine.state == SessionState.IDLE
        assert engine.result is None

    def test_start_runs(self, engine):
        engine.start("asdf")
        assert engine.state == SessionState.RUNNING
        assert engine.expected_key == "a"
        assert engine.elapsed_seconds == 0.0

    def test_empty_text_rejected(self, engine):
        with pytest.raises(EmptyContentError):
            engine.start("")
        assert engine.state == SessionState.IDLE

    def test_start_while_running_rejected(self, engine):
        engine.start("asdf")
        engine.key_press("a")
        with pytest.raises(InvalidTransitionError) as exc:
            engine.start("jkl;")
        assert exc.value.state == "running"
        assert engine.text == "asdf"
        assert engine.cursor == 1

    def test_keys_rejected_when_idle(self, engine):
        with pytest.raises(InvalidTransitionError):
            engine.key_press("a")
        with pytest.raises(InvalidTransitionError):
            engine.backspace()

    def test_pause_and_resume(self, engine):
        engine.start("asdf")
        engine.pause()
        assert engine.state == SessionState.PAUSED
        engine.resume()
        assert engine.state == SessionState.RUNNING

    def test_pause_is_idempotent(self, engine):
        engine.start("asdf")
        engine.pause()
        engine.pause()
        assert engine.state == SessionState.PAUSED

    def test_resume_while_running_is_noop(self, engine):
        engine.start("asdf")
        engine.resume()
        assert engine.state == SessionState.RUNNING

    def test_pause_from_idle_rejected(self, engine):
        with pytest.raises(InvalidTransitionError):
            engine.pause()

    def test_keys_rejected_while_paused(self, engine):
        engine.start("asdf")
        engine.pause()
        with pytest.raises(InvalidTransitionError):
            engine.key_press("a")
        assert engine.cursor == 0

    def test_stop_abandons_to_idle(self, engine):
        engine.start("asdf")
        engine.key_press("a")
        engine.stop()
        assert engine.state == SessionState.IDLE
        assert engine.result is None

    def test_stop_from_idle_rejected(self, engine):
        with pytest.raises(InvalidTransitionError):
            engine.stop()

    def test_restart_after_completion(self, engine):
        engine.start("ab")
        type_all(engine, "ab")
        assert engine.state == SessionState.COMPLETED

        engine.start("cd")
        assert engine.state == SessionState.RUNNING
        assert engine.cursor == 0
        assert engine.error_count == 0
        assert engine.result is None


class TestKeystrokes:
    """Cursor and counters."""

    def test_match_advances(self, engine):
        engine.start("asdf")
        event = engine.key_press("a")
        assert event.is_correct
        assert engine.cursor == 1
        assert engine.typed_text == "a"
        assert engine.total_characters == 1

    def test_mismatch_does_not_advance(self, engine):
        engine.start("asdf")
        event = engine.key_press("x")
        assert not event.is_correct
        assert event.expected_key == "a"
        assert engine.cursor == 0
        assert engine.error_count == 1
        assert engine.uncorrected_errors == 1
        assert engine.total_characters == 1
        assert engine.is_current_error

    def test_key_stats_track_expected_key(self, engine):
        engine.start("Asdf")
        engine.key_press("x")
        engine.key_press("A")

        stat = engine.key_stats.get("a")
        assert stat.press_count == 2
        assert stat.error_count == 1
        assert engine.key_stats.get("x") is None

    def test_empty_key_rejected(self, engine):
        engine.start("asdf")
        with pytest.raises(ValueError):
            engine.key_press("")

    def test_backspace_at_start_is_noop(self, engine):
        engine.start("asdf")
        assert engine.backspace() is False
        assert engine.backspace_count == 0

    def test_backspace_reverts_and_forgives(self, engine):
        engine.start("asdf")
        engine.key_press("a")
        engine.key_press("x")
        assert engine.backspace() is True
        assert engine.cursor == 0
        assert engine.typed_text == ""
        assert engine.backspace_count == 1
        assert engine.uncorrected_errors == 0

    def test_uncorrected_errors_never_negative(self, engine):
        engine.start("asdf")
        engine.key_press("a")
        engine.key_press("s")
        engine.backspace()
        engine.backspace()
        assert engine.uncorrected_errors == 0

    def test_latency_from_timestamps(self, engine):
        engine.start("abc")
        engine.key_press("a", timestamp=0.5)
        event = engine.key_press("b", timestamp=0.8)
        assert event.reaction_time == pytest.approx(0.3)

    def test_first_key_has_no_latency(self, engine):
        """Time spent before the first key is read-in time, not reaction time."""
        engine.start("fj")
        engine.tick(30)
        event = engine.key_press("f")

        assert event.reaction_time == 0
        assert engine.key_stats.get("f").avg_latency == 0
        assert engine.key_stats.get("f").struggle_score == 0

        engine.tick(5)
        second = engine.key_press("j")
        assert second.reaction_time == pytest.approx(0.5)

    def test_latency_never_negative(self, engine):
        engine.start("abc")
        engine.key_press("a", timestamp=1.0)
        event = engine.key_press("b", timestamp=0.5)
        assert event.reaction_time == 0.0

    def test_accuracy_after_uncorrected_error(self, engine):
        engine.start("ab")
        type_all(engine, "axb")
        assert engine.raw_accuracy == pytest.approx(200 / 3)
        assert engine.corrected_accuracy == pytest.approx(200 / 3)
        assert engine.accuracy == pytest.approx(200 / 3)

    def test_accuracy_after_corrected_error(self, engine):
        engine.start("ab")
        engine.key_press("a")
        engine.key_press("x")
        engine.backspace()
        type_all(engine, "ab")

        assert engine.raw_accuracy == pytest.approx(200 / 3)
        assert engine.corrected_accuracy == pytest.approx(100.0)
        assert engine.accuracy == pytest.approx(250 / 3)


class TestClock:
    """Tick-driven time."""

    def test_ticks_advance_elapsed(self, engine):
        engine.start("asdf")
        assert engine.tick(5)
        assert engine.elapsed_seconds == pytest.approx(0.5)

    def test_ticks_ignored_when_idle(self, engine):
        assert engine.tick(5) is False
        assert engine.elapsed_seconds == 0.0

    def test_ticks_ignored_while_paused(self, engine):
        engine.start("asdf")
        engine.tick(3)
        engine.pause()
        assert engine.tick(10) is False
        engine.resume()
        engine.tick(2)
        assert engine.elapsed_seconds == pytest.approx(0.5)

    def test_wpm_updates_on_tick(self, engine):
        engine.start("asdfasdfasdf")
        type_all(engine, "asdfa")
        engine.tick(600)  # one minute
        assert engine.wpm == pytest.approx(1.0)

    def test_time_limit_completes_session(self, engine):
        engine.start("asdf asdf", time_limit=1)
        engine.key_press("a")
        engine.tick(9)
        assert engine.state == SessionState.RUNNING
        engine.tick(1)
        assert engine.state == SessionState.COMPLETED
        assert engine.result.timed_out
        assert engine.result.duration == pytest.approx(1.0)


class TestCompletion:
    """End of text produces an ExerciseResult."""

    def test_perfect_pass(self, engine):
        text = "hello world"
        engine.start(text)
        type_all(engine, text[:-1])
        engine.tick(30)
        engine.key_press(text[-1])

        result = engine.result
        assert engine.state == SessionState.COMPLETED
        assert result.accuracy == pytest.approx(100.0)
        assert result.error_count == 0
        assert result.duration == pytest.approx(3.0)
        # (11 chars / 5) / (3s / 60)
        assert result.wpm == pytest.approx((len(text) / 5) / (3.0 / 60))
        assert not result.timed_out

    def test_listener_called_once(self, settings):
        results = []
        engine = SessionEngine(settings=settings, on_complete=results.append)
        engine.start("ab")
        type_all(engine, "ab", ticks_per_key=2)
        assert len(results) == 1
        assert results[0] is engine.result

    def test_keys_rejected_after_completion(self, engine):
        engine.start("a")
        engine.key_press("a")
        with pytest.raises(InvalidTransitionError):
            engine.key_press("a")

    def test_consistency_for_steady_typing(self, engine):
        engine.start("asdf")
        type_all(engine, "asdf", ticks_per_key=2)
        assert engine.result.consistency == pytest.approx(1.0)

    def test_keystrokes_buffered(self, engine):
        engine.start("ab")
        type_all(engine, "axb")
        assert [k.typed_key for k in engine.keystrokes] == ["a", "x", "b"]


class TestDispatch:
    """Typed event channel."""

    def test_routes_events(self, engine):
        engine.start("ab")
        engine.dispatch(Tick(count=4))
        engine.dispatch(KeyPress("a"))
        engine.dispatch(KeyPress("x"))
        engine.dispatch(Backspace())
        engine.dispatch(Pause())
        assert engine.state == SessionState.PAUSED
        engine.dispatch(Resume())
        engine.dispatch(Stop())

        assert engine.state == SessionState.IDLE
        assert engine.elapsed_seconds == pytest.approx(0.4)
        assert engine.backspace_count == 1

    def test_unknown_event_rejected(self, engine):
        engine.start("ab")
        with pytest.raises(TypeError):
            engine.dispatch("a")

"""
Unit tests for keystroke log replay.
"""

import json

import pytest
from pydantic import ValidationError

from typequest.session.engine import SessionState
from typequest.session.replay import ReplayLog, load_replay, replay


@pytest.fixture
def log_data():
    return {
        "text": "asdf",
        "events": [
            {"type": "tick", "count": 3},
            {"type": "key", "key": "a"},
            {"type": "tick", "count": 3},
            {"type": "key", "key": "x"},
            {"type": "backspace"},
            {"type": "key", "key": "a"},
            {"type": "tick", "count": 3},
            {"type": "key", "key": "s"},
            {"type": "key", "key": "d"},
            {"type": "tick", "count": 3},
            {"type": "key", "key": "f"},
        ],
    }


class TestReplayLog:
    """Validation of recorded logs."""

    def test_valid_log(self, log_data):
        log = ReplayLog.model_validate(log_data)
        assert log.text == "asdf"
        assert len(log.events) == 11

    def test_key_event_requires_key(self):
        with pytest.raises(ValidationError):
            ReplayLog.model_validate({"text": "a", "events": [{"type": "key"}]})

    def test_unknown_event_type(self):
        with pytest.raises(ValidationError):
            ReplayLog.model_validate({"text": "a", "events": [{"type": "jump"}]})

    def test_empty_text_rejected(self):
        with pytest.raises(ValidationError):
            ReplayLog.model_validate({"text": "", "events": []})

    def test_load_from_disk(self, tmp_path, log_data):
        path = tmp_path / "session.json"
        path.write_text(json.dumps(log_data), encoding="utf-8")
        assert load_replay(path).text == "asdf"


class TestReplay:
    """Deterministic replays."""

    def test_replay_completes(self, log_data, settings):
        engine = replay(ReplayLog.model_validate(log_data), settings=settings)

        assert engine.state == SessionState.COMPLETED
        assert engine.elapsed_seconds == pytest.approx(1.2)
        assert engine.error_count == 1
        assert engine.backspace_count == 1
        assert engine.uncorrected_errors == 0

    def test_replay_is_deterministic(self, log_data, settings):
        log = ReplayLog.model_validate(log_data)
        first = replay(log, settings=settings).result
        second = replay(log, settings=settings).result
        assert first == second

    def test_trailing_events_ignored(self, log_data, settings):
        log_data["events"].append({"type": "key", "key": "z"})
        engine = replay(ReplayLog.model_validate(log_data), settings=settings)
        assert engine.state == SessionState.COMPLETED
        assert engine.error_count == 1

    def test_partial_log_leaves_session_running(self, settings):
        log = ReplayLog.model_validate(
            {"text": "asdf", "events": [{"type": "key", "key": "a"}]}
        )
        engine = replay(log, settings=settings)
        assert engine.state == SessionState.RUNNING
        assert engine.result is None

    def test_time_limit_from_log(self, settings):
        log = ReplayLog.model_validate(
            {"text": "asdf", "time_limit": 1, "events": [{"type": "tick", "count": 10}]}
        )
        engine = replay(log, settings=settings)
        assert engine.result.timed_out

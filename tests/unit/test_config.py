"""Tests for dashboard settings — env-driven configuration."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from provermon.config import DashboardSettings, TrackerConfig


class TestDashboardSettings:
    def test_defaults(self):
        config = DashboardSettings()
        assert config.environment == "development"
        assert config.log_level == "INFO"
        assert config.max_events == 1000
        assert config.event_file is None

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("PROVERMON_FETCH_TIMEOUT_SECONDS", "12.5")
        monkeypatch.setenv("PROVERMON_EVENT_FILE", "/tmp/events.jsonl")
        config = DashboardSettings()
        assert config.fetch_timeout_seconds == 12.5
        assert config.event_file == Path("/tmp/events.jsonl")

    def test_tracker_config_projection(self):
        config = DashboardSettings(backoff_window=7, points_per_submission=10)
        tracker = config.tracker_config()
        assert tracker.backoff_window == 7
        assert tracker.points_per_submission == 10
        assert tracker.fetch_terminal_window == 5


class TestTrackerConfig:
    def test_defaults_match_dashboard_conventions(self):
        config = TrackerConfig()
        assert config.current_task_window == 20
        assert config.backoff_window == 20
        assert config.fetch_terminal_window == 5
        assert config.fetch_request_window == 10
        assert config.prover_state_window == 10
        assert config.fetch_timeout_seconds == 5.0
        assert config.points_per_submission == 300

    def test_rejects_empty_window(self):
        with pytest.raises(ValidationError):
            TrackerConfig(backoff_window=0)

    def test_frozen(self):
        config = TrackerConfig()
        with pytest.raises(ValidationError):
            config.backoff_window = 3

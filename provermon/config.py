"""Runtime configuration — env-driven via pydantic-settings.

Reads from a .env file and PROVERMON_* environment variables.  Tracker
look-back windows and thresholds are grouped into a frozen ``TrackerConfig``
that the aggregator receives explicitly.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class TrackerConfig(BaseModel):
    """Look-back windows and thresholds used by the state trackers."""

    model_config = ConfigDict(frozen=True)

    current_task_window: int = Field(default=20, ge=1)
    backoff_window: int = Field(default=20, ge=1)
    fetch_terminal_window: int = Field(default=5, ge=1)
    fetch_request_window: int = Field(default=10, ge=1)
    prover_state_window: int = Field(default=10, ge=1)
    fetch_timeout_seconds: float = Field(default=5.0, ge=0)
    points_per_submission: int = Field(default=300, ge=0)


class DashboardSettings(BaseSettings):
    """Dashboard configuration with environment variable overrides.

    Examples
    --------
    Override via environment::

        export PROVERMON_LOG_LEVEL=DEBUG
        export PROVERMON_EVENT_FILE=/var/log/prover/events.jsonl
        export PROVERMON_FETCH_TIMEOUT_SECONDS=10

    Or via .env file::

        PROVERMON_MAX_EVENTS=5000
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="PROVERMON_",
        env_file_encoding="utf-8",
    )

    # Runtime environment
    environment: str = "development"
    log_level: str = "INFO"
    debug: bool = False

    # Event source
    event_file: Path | None = None
    max_events: int = 1000  # retention of the in-memory event log

    # Tracker windows (events)
    current_task_window: int = 20
    backoff_window: int = 20
    fetch_terminal_window: int = 5
    fetch_request_window: int = 10
    prover_state_window: int = 10

    # Thresholds
    fetch_timeout_seconds: float = 5.0
    points_per_submission: int = 300

    # Display
    refresh_hz: float = 2.0

    def tracker_config(self) -> TrackerConfig:
        """Project the tracker-related settings into a ``TrackerConfig``."""
        return TrackerConfig(
            current_task_window=self.current_task_window,
            backoff_window=self.backoff_window,
            fetch_terminal_window=self.fetch_terminal_window,
            fetch_request_window=self.fetch_request_window,
            prover_state_window=self.prover_state_window,
            fetch_timeout_seconds=self.fetch_timeout_seconds,
            points_per_submission=self.points_per_submission,
        )


# Module-level singleton — import as `from provermon.config import settings`
settings = DashboardSettings()

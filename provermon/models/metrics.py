"""Metric value types published on the dashboard snapshot."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class TaskStatus(str, Enum):
    """Outcome of the most recent task seen by the throughput reducer."""

    NONE = "None"
    PROVED = "Proved"
    PROOF_FAILED = "Proof Failed"
    SUCCESS = "Success"
    SUBMIT_FAILED = "Submit Failed"


class SystemMetrics(BaseModel):
    """One resource sample.  ``peak_ram_bytes`` never decreases."""

    model_config = ConfigDict(frozen=True)

    cpu_percent: float = 0.0
    ram_bytes: int = 0
    peak_ram_bytes: int = 0
    total_ram_bytes: int = 0

    @property
    def ram_percent(self) -> float:
        if self.total_ram_bytes <= 0:
            return 0.0
        return 100.0 * self.ram_bytes / self.total_ram_bytes


class ZkVMMetrics(BaseModel):
    """Throughput and runtime totals of the proving pipeline."""

    model_config = ConfigDict(frozen=True)

    tasks_executed: int = 0
    tasks_proved: int = 0
    accumulated_runtime: float = 0.0  # seconds
    last_status: TaskStatus = TaskStatus.NONE
    total_points: int = 0


class TaskFetchInfo(BaseModel):
    """Countdown state of the current fetch backoff period, if any."""

    model_config = ConfigDict(frozen=True)

    backoff_duration: int = 0  # declared seconds
    elapsed_since_backoff_start: float = 0.0
    can_fetch_now: bool = True

    @property
    def remaining(self) -> float:
        return max(0.0, self.backoff_duration - self.elapsed_since_backoff_start)


class FetchPhase(str, Enum):
    IDLE = "idle"
    ACTIVE = "active"
    TIMEOUT = "timeout"


class FetchingState(BaseModel):
    """Whether a task request is outstanding.

    ``started_at`` is a clock reading and is only set while ACTIVE.
    """

    model_config = ConfigDict(frozen=True)

    phase: FetchPhase = FetchPhase.IDLE
    started_at: float | None = None

    @classmethod
    def idle(cls) -> FetchingState:
        return cls()

    @classmethod
    def active(cls, started_at: float) -> FetchingState:
        return cls(phase=FetchPhase.ACTIVE, started_at=started_at)

    @classmethod
    def timeout(cls) -> FetchingState:
        return cls(phase=FetchPhase.TIMEOUT)

    @property
    def is_active(self) -> bool:
        return self.phase == FetchPhase.ACTIVE


class BackoffAnchor(BaseModel):
    """Clock anchor of the backoff period currently being timed."""

    model_config = ConfigDict(frozen=True)

    started_at: float
    declared_seconds: int = Field(ge=0)
    period_id: str | None = None

    def same_period(self, declared_seconds: int, period_id: str | None) -> bool:
        return (
            self.declared_seconds == declared_seconds
            and self.period_id == period_id
        )

"""DashboardSnapshot — the complete derived state read by the renderer.

A snapshot is frozen.  The aggregator builds a new one on every tick and
swaps it in with a single assignment, so a reader holding a reference never
observes a partially updated value.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from provermon.models.events import ProverState
from provermon.models.metrics import (
    BackoffAnchor,
    FetchingState,
    SystemMetrics,
    TaskFetchInfo,
    ZkVMMetrics,
)


class DashboardSnapshot(BaseModel):
    """Point-in-time view of the proving pipeline."""

    model_config = ConfigDict(frozen=True)

    tick: int = 0
    current_task: str | None = None
    system_metrics: SystemMetrics = Field(default_factory=SystemMetrics)
    zkvm_metrics: ZkVMMetrics = Field(default_factory=ZkVMMetrics)
    task_fetch_info: TaskFetchInfo = Field(default_factory=TaskFetchInfo)
    fetching_state: FetchingState = Field(default_factory=FetchingState)
    waiting_start_info: BackoffAnchor | None = None
    last_submission_timestamp: datetime | None = None
    prover_state: ProverState | None = None

"""provermon data models — all Pydantic v2, all frozen (immutable)."""

from provermon.models.events import (
    Event,
    EventType,
    FetchRateLimited,
    FetchRequested,
    FetchSucceeded,
    Occurrence,
    ProofFailed,
    ProofGenerated,
    ProofSubmitted,
    ProverState,
    ProvingStarted,
    StateChanged,
    SubmitFailed,
    Worker,
    WorkerKind,
)
from provermon.models.metrics import (
    BackoffAnchor,
    FetchingState,
    FetchPhase,
    SystemMetrics,
    TaskFetchInfo,
    TaskStatus,
    ZkVMMetrics,
)
from provermon.models.snapshot import DashboardSnapshot

__all__ = [
    # events
    "Event",
    "EventType",
    "ProverState",
    "Worker",
    "WorkerKind",
    # occurrences
    "Occurrence",
    "FetchRequested",
    "FetchRateLimited",
    "FetchSucceeded",
    "ProvingStarted",
    "ProofGenerated",
    "ProofSubmitted",
    "ProofFailed",
    "SubmitFailed",
    "StateChanged",
    # metrics
    "BackoffAnchor",
    "FetchingState",
    "FetchPhase",
    "SystemMetrics",
    "TaskFetchInfo",
    "TaskStatus",
    "ZkVMMetrics",
    # snapshot
    "DashboardSnapshot",
]

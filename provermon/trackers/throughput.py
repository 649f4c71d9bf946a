"""Throughput and proving-runtime reducer.

Folds worker events into running totals: fetched and submitted task
counts, accumulated proving time, and the status of the most recent task.
``fold_event`` is a pure ``(state, event) -> state`` function.  The
``ThroughputReducer`` wraps it with a sequence cursor so each event in the
log is folded exactly once, which keeps the totals monotone even after the
log's retention policy has dropped old events.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from pydantic import BaseModel, ConfigDict

from provermon.core.event_log import EventLog
from provermon.core.interpret import interpret, is_fetch_success
from provermon.models.events import (
    Event,
    ProofFailed,
    ProofGenerated,
    ProofSubmitted,
    ProvingStarted,
    SubmitFailed,
)
from provermon.models.metrics import TaskStatus, ZkVMMetrics

DEFAULT_POINTS_PER_SUBMISSION = 300


class ThroughputState(BaseModel):
    """Accumulated totals.  Every counter only ever grows."""

    model_config = ConfigDict(frozen=True)

    fetched: int = 0
    submitted: int = 0
    accumulated_runtime: float = 0.0  # seconds
    last_status: TaskStatus = TaskStatus.NONE
    proving_started_at: datetime | None = None
    last_submission_timestamp: datetime | None = None

    def to_metrics(
        self, points_per_submission: int = DEFAULT_POINTS_PER_SUBMISSION
    ) -> ZkVMMetrics:
        """Derive the published metrics.

        A submission implies a fetch, so the larger of the two counts is the
        better estimate of tasks attempted.
        """
        return ZkVMMetrics(
            tasks_executed=max(self.submitted, self.fetched),
            tasks_proved=self.submitted,
            accumulated_runtime=self.accumulated_runtime,
            last_status=self.last_status,
            total_points=self.submitted * points_per_submission,
        )


def fold_event(state: ThroughputState, event: Event) -> ThroughputState:
    """Return ``state`` updated with one event.  Unrecognized events are no-ops."""
    if is_fetch_success(event):
        state = state.model_copy(update={"fetched": state.fetched + 1})

    occurrence = interpret(event)

    if isinstance(occurrence, ProvingStarted):
        return state.model_copy(update={"proving_started_at": event.timestamp})

    if isinstance(occurrence, ProofGenerated):
        runtime = state.accumulated_runtime
        if state.proving_started_at is not None:
            elapsed = (event.timestamp - state.proving_started_at).total_seconds()
            runtime += max(0.0, elapsed)
        return state.model_copy(
            update={
                "accumulated_runtime": runtime,
                "proving_started_at": None,
                "last_status": TaskStatus.PROVED,
            }
        )

    if isinstance(occurrence, ProofFailed):
        return state.model_copy(update={"last_status": TaskStatus.PROOF_FAILED})

    if isinstance(occurrence, ProofSubmitted):
        return state.model_copy(
            update={
                "submitted": state.submitted + 1,
                "last_status": TaskStatus.SUCCESS,
                "last_submission_timestamp": event.timestamp,
            }
        )

    if isinstance(occurrence, SubmitFailed):
        return state.model_copy(update={"last_status": TaskStatus.SUBMIT_FAILED})

    return state


def fold_events(state: ThroughputState, events: Iterable[Event]) -> ThroughputState:
    for event in events:
        state = fold_event(state, event)
    return state


class ThroughputReducer:
    """Folds each event of an ``EventLog`` into a ``ThroughputState`` once.

    Parameters
    ----------
    state:
        Starting totals.  Defaults to all zeros.
    """

    def __init__(self, state: ThroughputState | None = None) -> None:
        self._state = state or ThroughputState()
        self._cursor = 0

    @property
    def state(self) -> ThroughputState:
        return self._state

    @property
    def cursor(self) -> int:
        """Sequence number of the next event to fold."""
        return self._cursor

    def advance(self, log: EventLog) -> ThroughputState:
        """Fold every event appended since the previous call."""
        self._state = fold_events(self._state, log.since(self._cursor))
        self._cursor = log.next_seq
        return self._state

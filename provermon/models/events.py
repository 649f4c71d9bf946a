"""Worker event models — the raw input of the dashboard aggregator.

Events are produced by the pipeline workers (task fetcher, provers, proof
submitter) and are never mutated after creation.  The ``message`` field is
free text; an event may additionally carry a structured ``payload`` that
names the logical occurrence directly, in which case the text is not parsed.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class WorkerKind(str, Enum):
    """Pipeline stage that emitted an event."""

    TASK_FETCHER = "task_fetcher"
    PROVER = "prover"
    PROOF_SUBMITTER = "proof_submitter"


class EventType(str, Enum):
    """Coarse outcome classification of an event."""

    SUCCESS = "success"
    ERROR = "error"
    STATE_CHANGE = "state_change"
    INFO = "info"
    WAITING = "waiting"
    REFRESH = "refresh"
    SHUTDOWN = "shutdown"


class ProverState(str, Enum):
    """Explicit prover state announced by state-change events."""

    WAITING = "waiting"
    FETCHING = "fetching"
    PROVING = "proving"
    SUBMITTING = "submitting"


class Worker(BaseModel):
    """Identifies the emitting worker.  Provers carry a numeric id."""

    model_config = ConfigDict(frozen=True)

    kind: WorkerKind
    prover_id: int | None = None

    @classmethod
    def task_fetcher(cls) -> Worker:
        return cls(kind=WorkerKind.TASK_FETCHER)

    @classmethod
    def prover(cls, prover_id: int = 0) -> Worker:
        return cls(kind=WorkerKind.PROVER, prover_id=prover_id)

    @classmethod
    def proof_submitter(cls) -> Worker:
        return cls(kind=WorkerKind.PROOF_SUBMITTER)

    @property
    def is_task_fetcher(self) -> bool:
        return self.kind == WorkerKind.TASK_FETCHER

    @property
    def is_prover(self) -> bool:
        return self.kind == WorkerKind.PROVER

    @property
    def is_proof_submitter(self) -> bool:
        return self.kind == WorkerKind.PROOF_SUBMITTER

    def __str__(self) -> str:
        if self.is_prover:
            return f"Prover({self.prover_id})"
        return {
            WorkerKind.TASK_FETCHER: "TaskFetcher",
            WorkerKind.PROOF_SUBMITTER: "ProofSubmitter",
        }[self.kind]


# ---------------------------------------------------------------------------
# Structured occurrences — one variant per logical thing that can happen
# ---------------------------------------------------------------------------


class OccurrenceBase(BaseModel):
    """Shared base for all structured occurrences.

    Subclasses are discriminated by their ``kind`` literal.
    """

    model_config = ConfigDict(frozen=True)


class FetchRequested(OccurrenceBase):
    kind: Literal["fetch_requested"] = "fetch_requested"


class FetchRateLimited(OccurrenceBase):
    """The fetcher must wait ``seconds`` before asking for another task.

    ``period_id`` optionally names the backoff period, so two periods that
    declare the same duration are still told apart.
    """

    kind: Literal["fetch_rate_limited"] = "fetch_rate_limited"
    seconds: int = Field(ge=0)
    period_id: str | None = None


class FetchSucceeded(OccurrenceBase):
    kind: Literal["fetch_succeeded"] = "fetch_succeeded"
    task_id: str | None = None


class ProvingStarted(OccurrenceBase):
    kind: Literal["proving_started"] = "proving_started"
    task_id: str | None = None


class ProofGenerated(OccurrenceBase):
    kind: Literal["proof_generated"] = "proof_generated"
    task_id: str | None = None


class ProofSubmitted(OccurrenceBase):
    kind: Literal["proof_submitted"] = "proof_submitted"
    task_id: str | None = None


class ProofFailed(OccurrenceBase):
    kind: Literal["proof_failed"] = "proof_failed"


class SubmitFailed(OccurrenceBase):
    kind: Literal["submit_failed"] = "submit_failed"


class StateChanged(OccurrenceBase):
    kind: Literal["state_changed"] = "state_changed"
    state: ProverState


Occurrence = Annotated[
    Union[
        FetchRequested,
        FetchRateLimited,
        FetchSucceeded,
        ProvingStarted,
        ProofGenerated,
        ProofSubmitted,
        ProofFailed,
        SubmitFailed,
        StateChanged,
    ],
    Field(discriminator="kind"),
]


class Event(BaseModel):
    """A single worker event as delivered by the event source."""

    model_config = ConfigDict(frozen=True)

    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    worker: Worker
    event_type: EventType
    message: str = ""
    prover_state: ProverState | None = None
    payload: Occurrence | None = None

    @field_validator("timestamp")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        """Naive timestamps are taken to be UTC so all events compare."""
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

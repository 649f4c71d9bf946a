"""Message interpretation — free-text worker messages to structured occurrences.

Workers that attach a structured ``payload`` to their events are taken
at their word.  For everything else the legacy message conventions are
recognized here, in one place.  ``interpret`` maps an event to the single
occurrence it reports; ``is_fetch_success`` and ``rate_limit_of`` answer the
two questions a single event can answer at the same time.

Parsing is best-effort: a message that matches no convention is not an
error, it simply carries no information (``interpret`` returns ``None``).
"""

from __future__ import annotations

import re

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
    ProvingStarted,
    StateChanged,
    SubmitFailed,
)

# Message markers emitted by the workers.
FETCH_REQUEST_MARKER = "Step 1 of 4"
READY_FOR_NEXT_TASK = "ready for next task"
RATE_LIMITED = "rate limited"
RETRYING = "retrying"
PROVING_STARTED = "Step 2 of 4: Proving task"
PROOF_GENERATED = "Step 3 of 4: Proof generated for task"
PROOF_SUBMITTED = "Step 4 of 4: Proof submitted successfully"

TASK_MARKER = "Task-"
_TASK_ID_RE = re.compile(re.escape(TASK_MARKER) + r"\S+")


def extract_task_id(message: str) -> str | None:
    """Return the first ``Task-<id>`` token in a message, marker included."""
    match = _TASK_ID_RE.search(message)
    return match.group(0) if match else None


def parse_backoff_seconds(message: str) -> int | None:
    """Return the integer between the first ``(`` and the first ``)``.

    ``None`` if either delimiter is missing, they are out of order, or the
    enclosed text is not a plain non-negative integer.
    """
    start = message.find("(")
    end = message.find(")")
    if start < 0 or end < 0 or start >= end:
        return None
    text = message[start + 1 : end]
    if not (text.isascii() and text.isdigit()):
        return None
    return int(text)


def is_fetch_request(event: Event) -> bool:
    """Whether the event is the fetcher's initial "requesting" progress marker."""
    if event.payload is not None:
        return isinstance(event.payload, FetchRequested)
    return FETCH_REQUEST_MARKER in event.message


def is_fetch_success(event: Event) -> bool:
    """Whether the event reports a fetched task.

    Judged on its own, apart from ``interpret``: a fetcher Success that also
    announces the next backoff period still counts as a fetch.
    """
    if event.payload is not None:
        return isinstance(event.payload, FetchSucceeded)
    msg = event.message
    return (
        event.worker.is_task_fetcher
        and event.event_type == EventType.SUCCESS
        and RATE_LIMITED not in msg
        and RETRYING not in msg
        and FETCH_REQUEST_MARKER not in msg
    )


def rate_limit_of(event: Event) -> FetchRateLimited | None:
    """Backoff announced by a fetcher event, whatever its event type."""
    if not event.worker.is_task_fetcher:
        return None
    if event.payload is not None:
        return event.payload if isinstance(event.payload, FetchRateLimited) else None
    if READY_FOR_NEXT_TASK not in event.message:
        return None
    seconds = parse_backoff_seconds(event.message)
    if seconds is None:
        return None
    return FetchRateLimited(seconds=seconds)


def event_task_id(event: Event) -> str | None:
    """Task identifier carried by the event, structured payload first."""
    task_id = getattr(event.payload, "task_id", None)
    if task_id:
        return task_id
    return extract_task_id(event.message)


def interpret(event: Event) -> Occurrence | None:
    """Map an event onto the occurrence it reports, if any."""
    if event.payload is not None:
        return event.payload

    worker = event.worker
    msg = event.message

    if event.event_type == EventType.STATE_CHANGE and event.prover_state is not None:
        return StateChanged(state=event.prover_state)

    if worker.is_task_fetcher:
        return _interpret_fetcher(event)

    if worker.is_prover:
        if event.event_type == EventType.SUCCESS:
            if PROVING_STARTED in msg:
                return ProvingStarted(task_id=extract_task_id(msg))
            if PROOF_GENERATED in msg:
                return ProofGenerated(task_id=extract_task_id(msg))
        elif event.event_type == EventType.ERROR:
            return ProofFailed()
        return None

    if worker.is_proof_submitter:
        if event.event_type == EventType.SUCCESS and PROOF_SUBMITTED in msg:
            return ProofSubmitted(task_id=extract_task_id(msg))
        if event.event_type == EventType.ERROR:
            return SubmitFailed()

    return None


def _interpret_fetcher(event: Event) -> Occurrence | None:
    msg = event.message
    if FETCH_REQUEST_MARKER in msg:
        return FetchRequested()
    limit = rate_limit_of(event)
    if limit is not None:
        return limit
    if is_fetch_success(event):
        return FetchSucceeded(task_id=extract_task_id(msg))
    return None

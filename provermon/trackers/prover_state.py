"""Prover-state tracking from explicit state-change events."""

from __future__ import annotations

from provermon.core.event_log import EventLog
from provermon.models.events import EventType, ProverState, StateChanged

DEFAULT_WINDOW = 10


def latest_prover_state(
    log: EventLog,
    previous: ProverState | None,
    window: int = DEFAULT_WINDOW,
) -> ProverState | None:
    """Return the newest explicit prover state in the window.

    Unlike the other trackers this one never falls back to a default: with
    no state change in view, ``previous`` stays authoritative.
    """
    for event in log.recent(window):
        if isinstance(event.payload, StateChanged):
            return event.payload.state
        if event.event_type == EventType.STATE_CHANGE and event.prover_state is not None:
            return event.prover_state
    return previous

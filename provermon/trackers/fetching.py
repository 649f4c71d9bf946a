"""Fetch activity state machine (IDLE / ACTIVE / TIMEOUT).

Rules, evaluated in priority order on every tick:

1. A fetcher Success or Error among the newest events that is not the
   "requesting" progress marker means a fetch just concluded -> IDLE.
2. Otherwise, when not already ACTIVE, a "requesting task" marker among the
   recent events starts a fetch -> ACTIVE(started_at=now).
3. Otherwise, an ACTIVE fetch older than the timeout -> TIMEOUT.

Re-detecting the requesting marker while ACTIVE never moves ``started_at``.
"""

from __future__ import annotations

import logging

from provermon.core.event_log import EventLog
from provermon.core.interpret import is_fetch_request
from provermon.models.events import Event, EventType
from provermon.models.metrics import FetchingState

logger = logging.getLogger(__name__)


def _is_terminal(event: Event) -> bool:
    return (
        event.worker.is_task_fetcher
        and event.event_type in (EventType.SUCCESS, EventType.ERROR)
        and not is_fetch_request(event)
    )


def _is_request(event: Event) -> bool:
    return event.worker.is_task_fetcher and is_fetch_request(event)


class FetchActivityMachine:
    """Computes the next ``FetchingState`` from the event log.

    Parameters
    ----------
    terminal_window:
        How many of the newest events are checked for a concluded fetch.
    request_window:
        How many of the newest events are checked for a new request.
    timeout_seconds:
        Age after which an ACTIVE fetch is reported as TIMEOUT.
    """

    def __init__(
        self,
        *,
        terminal_window: int = 5,
        request_window: int = 10,
        timeout_seconds: float = 5.0,
    ) -> None:
        self.terminal_window = terminal_window
        self.request_window = request_window
        self.timeout_seconds = timeout_seconds

    def step(self, log: EventLog, current: FetchingState, now: float) -> FetchingState:
        """Apply the transition rules once and return the resulting state."""
        nxt = self._next(log, current, now)
        if nxt.phase != current.phase:
            logger.debug("Fetching state %s -> %s", current.phase.value, nxt.phase.value)
        return nxt

    def _next(self, log: EventLog, current: FetchingState, now: float) -> FetchingState:
        if any(_is_terminal(e) for e in log.recent(self.terminal_window)):
            return FetchingState.idle()

        if not current.is_active:
            if any(_is_request(e) for e in log.recent(self.request_window)):
                return FetchingState.active(started_at=now)

        if current.is_active and current.started_at is not None:
            if now - current.started_at > self.timeout_seconds:
                return FetchingState.timeout()

        return current

"""Fetch-backoff tracking — countdown of the active rate-limit period.

The fetcher announces a backoff with "ready for next task (<seconds>)" and
may repeat that message for as long as the period lasts.  A period is
therefore identified by what it declares (duration, plus the period id when
a structured payload provides one), not by which event announced it.  The
anchor is re-set only when a *different* period shows up, so the countdown
is not restarted every tick.
"""

from __future__ import annotations

import logging
from typing import NamedTuple

from provermon.core.event_log import EventLog
from provermon.core.interpret import rate_limit_of
from provermon.models.events import FetchRateLimited
from provermon.models.metrics import BackoffAnchor, TaskFetchInfo

logger = logging.getLogger(__name__)

DEFAULT_WINDOW = 20


class BackoffUpdate(NamedTuple):
    info: TaskFetchInfo
    anchor: BackoffAnchor | None


def find_rate_limit(log: EventLog, window: int = DEFAULT_WINDOW) -> FetchRateLimited | None:
    """Newest fetcher rate-limit announcement within the window."""
    for event in log.recent(window):
        limit = rate_limit_of(event)
        if limit is not None:
            return limit
    return None


def track_backoff(
    log: EventLog,
    anchor: BackoffAnchor | None,
    now: float,
    window: int = DEFAULT_WINDOW,
) -> BackoffUpdate:
    """Compute the fetch info for this tick and the anchor to carry forward.

    With no announcement in view the optimistic default (no backoff, may
    fetch now) is published and the anchor is carried unchanged.
    """
    limit = find_rate_limit(log, window)
    if limit is None:
        return BackoffUpdate(TaskFetchInfo(), anchor)

    if anchor is None or not anchor.same_period(limit.seconds, limit.period_id):
        logger.debug(
            "New backoff period: %ds (period_id=%s)", limit.seconds, limit.period_id
        )
        anchor = BackoffAnchor(
            started_at=now,
            declared_seconds=limit.seconds,
            period_id=limit.period_id,
        )

    elapsed = max(0.0, now - anchor.started_at)
    remaining = max(0.0, anchor.declared_seconds - elapsed)
    info = TaskFetchInfo(
        backoff_duration=anchor.declared_seconds,
        elapsed_since_backoff_start=elapsed,
        can_fetch_now=remaining == 0,
    )
    return BackoffUpdate(info, anchor)

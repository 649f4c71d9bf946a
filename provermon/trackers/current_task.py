"""Current-task extraction from recent fetcher and prover events."""

from __future__ import annotations

from provermon.core.event_log import EventLog
from provermon.core.interpret import event_task_id

DEFAULT_WINDOW = 20


def extract_current_task(log: EventLog, window: int = DEFAULT_WINDOW) -> str | None:
    """Return the task most recently referenced by a fetcher or prover event.

    Only the newest ``window`` events are considered.  When none of them
    names a task, ``None`` is returned rather than a stale identifier, so a
    finished task disappears from the display.
    """
    for event in log.recent(window):
        if not (event.worker.is_prover or event.worker.is_task_fetcher):
            continue
        task_id = event_task_id(event)
        if task_id:
            return task_id
    return None

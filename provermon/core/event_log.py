"""Append-only event log — the aggregator's view of the event source.

Design:
- Append-only: ``append``/``extend`` are the only writes; nothing is
  removed or reordered by readers.
- Sequence-numbered: every event gets the next integer sequence number, so
  incremental readers can keep a cursor that survives retention eviction.
- Bounded: with ``max_events`` set, the oldest events fall off the front.

The log can be fed from a JSON Lines file (one ``Event`` object per line),
either loaded whole or followed as it grows.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterable, Iterator
from itertools import islice
from pathlib import Path

from pydantic import ValidationError

from provermon.models.events import Event

logger = logging.getLogger(__name__)


class EventFileError(RuntimeError):
    """Raised when an event file cannot be opened or read."""


class EventLog:
    """Ordered, growing sequence of worker events.

    Parameters
    ----------
    max_events:
        Retention limit.  ``None`` keeps every event.
    """

    def __init__(self, max_events: int | None = None) -> None:
        if max_events is not None and max_events < 1:
            raise ValueError(f"max_events must be positive, got {max_events}")
        self._events: deque[Event] = deque(maxlen=max_events)
        self._appended = 0

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def append(self, event: Event) -> int:
        """Append an event and return its sequence number."""
        self._events.append(event)
        seq = self._appended
        self._appended += 1
        return seq

    def extend(self, events: Iterable[Event]) -> int:
        """Append several events in order.  Returns how many were added."""
        count = 0
        for event in events:
            self.append(event)
            count += 1
        return count

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @property
    def first_seq(self) -> int:
        """Sequence number of the oldest retained event."""
        return self._appended - len(self._events)

    @property
    def next_seq(self) -> int:
        """Sequence number the next appended event will receive."""
        return self._appended

    @property
    def evicted(self) -> int:
        """How many events retention has dropped so far."""
        return self.first_seq

    def recent(self, n: int) -> list[Event]:
        """Return up to ``n`` most recent events, newest first."""
        return list(islice(reversed(self._events), max(n, 0)))

    def since(self, seq: int) -> list[Event]:
        """Return retained events with sequence number >= ``seq``, oldest first.

        Events evicted before the caller got to them are silently skipped.
        """
        offset = max(seq, self.first_seq) - self.first_seq
        return list(islice(self._events, offset, None))

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[Event]:
        return iter(list(self._events))

    # ------------------------------------------------------------------
    # JSON Lines loading
    # ------------------------------------------------------------------

    @classmethod
    def load_jsonl(cls, path: Path, max_events: int | None = None) -> EventLog:
        """Build a log from a JSON Lines event file."""
        log = cls(max_events=max_events)
        log.extend(read_events_jsonl(path))
        logger.debug("Loaded %d events from %s", log.next_seq, path)
        return log


def parse_event_line(line: str, *, source: str = "<input>", lineno: int = 0) -> Event | None:
    """Parse one JSON Lines record.  Blank or malformed lines yield ``None``."""
    text = line.strip()
    if not text:
        return None
    try:
        return Event.model_validate_json(text)
    except ValidationError as exc:
        logger.warning(
            "Skipping malformed event at %s:%d (%d validation errors)",
            source,
            lineno,
            exc.error_count(),
        )
        return None


def read_events_jsonl(path: Path) -> Iterator[Event]:
    """Yield every well-formed event in a JSON Lines file."""
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8", errors="replace") as fh:
            for lineno, line in enumerate(fh, start=1):
                event = parse_event_line(line, source=str(path), lineno=lineno)
                if event is not None:
                    yield event
    except OSError as exc:
        raise EventFileError(f"Cannot read event file {path}: {exc}") from exc


class JsonlTail:
    """Follows a growing JSON Lines file, returning newly completed records.

    A trailing line without a newline is held back until it is completed.
    If the file shrinks (rotated or truncated) reading restarts from the top.

    Parameters
    ----------
    path:
        The event file to follow.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)
        self._offset = 0
        self._partial = b""
        self._lineno = 0

    @property
    def path(self) -> Path:
        return self._path

    def poll(self) -> list[Event]:
        """Read whatever has been appended since the previous poll."""
        try:
            size = self._path.stat().st_size
            if size < self._offset:
                logger.info("Event file %s shrank; re-reading from start", self._path)
                self._offset = 0
                self._partial = b""
                self._lineno = 0
            if size == self._offset:
                return []
            with self._path.open("rb") as fh:
                fh.seek(self._offset)
                chunk = fh.read()
                self._offset = fh.tell()
        except OSError as exc:
            raise EventFileError(f"Cannot read event file {self._path}: {exc}") from exc

        data = self._partial + chunk
        lines = data.split(b"\n")
        self._partial = lines.pop()

        events: list[Event] = []
        for raw in lines:
            self._lineno += 1
            line = raw.decode("utf-8", errors="replace")
            event = parse_event_line(line, source=str(self._path), lineno=self._lineno)
            if event is not None:
                events.append(event)
        return events

"""Injectable clocks for elapsed-time logic.

Trackers never read the wall clock themselves.  The aggregator reads its
clock once per tick and hands the value down, so backoff countdowns and
fetch timeouts can be driven deterministically in tests and replays.
"""

from __future__ import annotations

import time
from typing import Protocol, runtime_checkable


@runtime_checkable
class Clock(Protocol):
    """Source of monotonic time in seconds."""

    def now(self) -> float: ...


class MonotonicClock:
    """Production clock backed by ``time.monotonic``."""

    def now(self) -> float:
        return time.monotonic()


class ManualClock:
    """Clock that only moves when told to.

    Parameters
    ----------
    start:
        Initial reading in seconds.
    """

    def __init__(self, start: float = 0.0) -> None:
        self._now = float(start)

    def now(self) -> float:
        return self._now

    def advance(self, seconds: float) -> float:
        """Move the clock forward and return the new reading."""
        if seconds < 0:
            raise ValueError(f"Cannot move a clock backwards ({seconds}s)")
        self._now += seconds
        return self._now

    def set(self, reading: float) -> None:
        """Jump to an absolute reading, which must not be in the past."""
        if reading < self._now:
            raise ValueError(
                f"Cannot move a clock backwards ({reading} < {self._now})"
            )
        self._now = float(reading)

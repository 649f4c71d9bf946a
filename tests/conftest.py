"""Shared test fixtures for provermon."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from provermon.config import TrackerConfig
from provermon.core.aggregator import DashboardAggregator
from provermon.core.clock import ManualClock
from provermon.core.event_log import EventLog
from provermon.models.events import Event, EventType, Worker
from provermon.models.metrics import SystemMetrics

BASE_TIME = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeSampler:
    """Resource sampler returning scripted samples and recording its inputs."""

    def __init__(self, samples: list[SystemMetrics] | None = None) -> None:
        self._samples = list(samples or [])
        self.calls: list[tuple[int, SystemMetrics | None]] = []

    def sample(
        self,
        previous_peak: int,
        previous_sample: SystemMetrics | None,
    ) -> SystemMetrics:
        self.calls.append((previous_peak, previous_sample))
        if self._samples:
            return self._samples.pop(0)
        return SystemMetrics(
            cpu_percent=1.0,
            ram_bytes=1024,
            peak_ram_bytes=max(previous_peak, 1024),
            total_ram_bytes=8192,
        )


@pytest.fixture
def clock() -> ManualClock:
    """Provide a manual clock starting at 1000s."""
    return ManualClock(start=1000.0)


@pytest.fixture
def sampler() -> FakeSampler:
    """Provide a scripted resource sampler."""
    return FakeSampler()


@pytest.fixture
def log() -> EventLog:
    """Provide an empty, unbounded event log."""
    return EventLog()


@pytest.fixture
def aggregator(log: EventLog, sampler: FakeSampler, clock: ManualClock) -> DashboardAggregator:
    """Provide an aggregator wired to the test log, sampler and clock."""
    return DashboardAggregator(log, sampler, clock=clock, config=TrackerConfig())


# ---------------------------------------------------------------------------
# Event factories — shared across test modules
# ---------------------------------------------------------------------------


@pytest.fixture
def make_event() -> Callable[..., Event]:
    """Factory fixture: build an Event with sensible defaults.

    ``at`` is an offset in seconds from a fixed base time.
    """

    def _factory(
        worker: Worker | None = None,
        event_type: EventType = EventType.INFO,
        message: str = "",
        at: float = 0.0,
        **overrides: Any,
    ) -> Event:
        defaults: dict[str, Any] = {
            "timestamp": BASE_TIME + timedelta(seconds=at),
            "worker": worker or Worker.task_fetcher(),
            "event_type": event_type,
            "message": message,
        }
        defaults.update(overrides)
        return Event(**defaults)

    return _factory


@pytest.fixture
def fetcher_event(make_event: Callable[..., Event]) -> Callable[..., Event]:
    """Factory fixture: a TaskFetcher event."""

    def _factory(message: str, event_type: EventType = EventType.INFO, **kw: Any) -> Event:
        return make_event(Worker.task_fetcher(), event_type, message, **kw)

    return _factory


@pytest.fixture
def prover_event(make_event: Callable[..., Event]) -> Callable[..., Event]:
    """Factory fixture: an event from Prover(0)."""

    def _factory(message: str, event_type: EventType = EventType.SUCCESS, **kw: Any) -> Event:
        return make_event(Worker.prover(0), event_type, message, **kw)

    return _factory


@pytest.fixture
def submitter_event(make_event: Callable[..., Event]) -> Callable[..., Event]:
    """Factory fixture: a ProofSubmitter event."""

    def _factory(message: str, event_type: EventType = EventType.SUCCESS, **kw: Any) -> Event:
        return make_event(Worker.proof_submitter(), event_type, message, **kw)

    return _factory


@pytest.fixture
def make_sampler() -> Callable[..., FakeSampler]:
    """Factory fixture: a FakeSampler with scripted samples."""

    def _factory(samples: list[SystemMetrics] | None = None) -> FakeSampler:
        return FakeSampler(samples)

    return _factory

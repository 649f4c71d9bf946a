"""Dashboard aggregator — the per-tick orchestrator.

The DashboardAggregator wires the event log, the clock, the resource
sampler and the state trackers together.  An external driver calls
``update()`` once per tick; each call runs, in this order:

    tick += 1 -> current task -> resource sample -> throughput
    -> fetch backoff -> fetching state -> prover state

Only the resource sample depends on the previous cycle (its peak); the
trackers are independent of one another.  The result is a new frozen
``DashboardSnapshot`` that replaces the previous one in a single
assignment at the end of the cycle.
"""

from __future__ import annotations

import logging

from provermon.config import TrackerConfig
from provermon.core.clock import Clock, MonotonicClock
from provermon.core.event_log import EventLog
from provermon.core.sampler import ResourceSampler
from provermon.models.metrics import SystemMetrics
from provermon.models.snapshot import DashboardSnapshot
from provermon.trackers.backoff import track_backoff
from provermon.trackers.current_task import extract_current_task
from provermon.trackers.fetching import FetchActivityMachine
from provermon.trackers.prover_state import latest_prover_state
from provermon.trackers.throughput import ThroughputReducer

logger = logging.getLogger(__name__)


class DashboardAggregator:
    """Owns and updates the dashboard snapshot.

    Parameters
    ----------
    log:
        The event log to read.  The aggregator never writes to it.
    sampler:
        Resource sampler called once per tick.
    clock:
        Time source for backoff and fetch-timeout logic.  Defaults to
        ``MonotonicClock``.
    config:
        Tracker windows and thresholds.  Defaults to ``TrackerConfig()``.
    """

    def __init__(
        self,
        log: EventLog,
        sampler: ResourceSampler,
        clock: Clock | None = None,
        config: TrackerConfig | None = None,
    ) -> None:
        self._log = log
        self._sampler = sampler
        self._clock = clock or MonotonicClock()
        self.config = config or TrackerConfig()

        self._throughput = ThroughputReducer()
        self._fetch_machine = FetchActivityMachine(
            terminal_window=self.config.fetch_terminal_window,
            request_window=self.config.fetch_request_window,
            timeout_seconds=self.config.fetch_timeout_seconds,
        )
        self._snapshot = DashboardSnapshot()
        self._sampled = False

    @property
    def log(self) -> EventLog:
        return self._log

    @property
    def snapshot(self) -> DashboardSnapshot:
        """The most recently completed snapshot."""
        return self._snapshot

    def update(self) -> DashboardSnapshot:
        """Run one update cycle and return the new snapshot."""
        prev = self._snapshot
        cfg = self.config
        now = self._clock.now()

        tick = prev.tick + 1

        current_task = extract_current_task(self._log, cfg.current_task_window)
        if current_task != prev.current_task:
            logger.debug("Current task: %s -> %s", prev.current_task, current_task)

        system_metrics = self._sample(prev.system_metrics)

        throughput = self._throughput.advance(self._log)
        zkvm_metrics = throughput.to_metrics(cfg.points_per_submission)

        backoff = track_backoff(
            self._log, prev.waiting_start_info, now, cfg.backoff_window
        )

        fetching_state = self._fetch_machine.step(self._log, prev.fetching_state, now)

        prover_state = latest_prover_state(
            self._log, prev.prover_state, cfg.prover_state_window
        )

        self._snapshot = DashboardSnapshot(
            tick=tick,
            current_task=current_task,
            system_metrics=system_metrics,
            zkvm_metrics=zkvm_metrics,
            task_fetch_info=backoff.info,
            fetching_state=fetching_state,
            waiting_start_info=backoff.anchor,
            last_submission_timestamp=throughput.last_submission_timestamp,
            prover_state=prover_state,
        )
        return self._snapshot

    def _sample(self, previous: SystemMetrics) -> SystemMetrics:
        previous_peak = previous.peak_ram_bytes
        sample = self._sampler.sample(
            previous_peak, previous if self._sampled else None
        )
        self._sampled = True
        if sample.peak_ram_bytes < previous_peak:
            sample = sample.model_copy(update={"peak_ram_bytes": previous_peak})
        return sample

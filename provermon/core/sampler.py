"""System resource sampling for the dashboard.

``ResourceSampler`` is the interface the aggregator depends on.
``PsutilSampler`` is the production implementation: it reports the CPU
utilization and resident memory of the monitored process (this one by
default) plus total system memory.
"""

from __future__ import annotations

import logging
import os
from typing import Protocol, runtime_checkable

import psutil

from provermon.models.metrics import SystemMetrics

logger = logging.getLogger(__name__)


@runtime_checkable
class ResourceSampler(Protocol):
    """Takes one resource sample.

    ``previous_peak`` and ``previous_sample`` let stateless samplers keep
    the peak monotone and compute deltas.  The returned peak is expected to
    be >= ``previous_peak``; the aggregator enforces it regardless.
    """

    def sample(
        self,
        previous_peak: int,
        previous_sample: SystemMetrics | None,
    ) -> SystemMetrics: ...


class PsutilSampler:
    """Samples a process with psutil.

    Parameters
    ----------
    pid:
        Process to observe.  Defaults to the current process.
    """

    def __init__(self, pid: int | None = None) -> None:
        self._process = psutil.Process(pid if pid is not None else os.getpid())
        # The first cpu_percent() call only primes psutil's counters.
        self._process.cpu_percent(interval=None)

    def sample(
        self,
        previous_peak: int,
        previous_sample: SystemMetrics | None,
    ) -> SystemMetrics:
        """Read CPU and memory figures.  Blocks only on OS calls.

        If psutil cannot read the process, the previous sample is returned
        unchanged (or an empty sample on the first call).
        """
        try:
            with self._process.oneshot():
                cpu = self._process.cpu_percent(interval=None)
                rss = self._process.memory_info().rss
            total = psutil.virtual_memory().total
        except (psutil.Error, OSError) as exc:
            logger.warning("Resource sampling failed for pid %s: %s", self._process.pid, exc)
            if previous_sample is not None:
                return previous_sample
            return SystemMetrics(peak_ram_bytes=previous_peak)

        return SystemMetrics(
            cpu_percent=cpu,
            ram_bytes=rss,
            peak_ram_bytes=max(previous_peak, rss),
            total_ram_bytes=total,
        )


class StaticSampler:
    """Sampler that always reports the same figures.

    Used when no live process is being observed, e.g. when replaying a
    recorded event file.
    """

    def __init__(self, metrics: SystemMetrics | None = None) -> None:
        self._metrics = metrics or SystemMetrics()

    def sample(
        self,
        previous_peak: int,
        previous_sample: SystemMetrics | None,
    ) -> SystemMetrics:
        return self._metrics.model_copy(
            update={"peak_ram_bytes": max(previous_peak, self._metrics.peak_ram_bytes)}
        )

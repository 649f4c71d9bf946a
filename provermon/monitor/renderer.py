"""Rich terminal renderer for the prover dashboard.

Turns a ``DashboardSnapshot`` into Rich renderables, with an optional
continuous ``Rich.Live`` mode that ticks the aggregator at a fixed rate.

Color scheme
------------
- green   : IDLE fetcher, successful last task
- yellow  : ACTIVE fetch, backoff countdown
- red     : TIMEOUT, failed last task
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import TYPE_CHECKING

from rich.console import Console, Group
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from provermon.models.metrics import FetchPhase, TaskStatus

if TYPE_CHECKING:
    from provermon.core.aggregator import DashboardAggregator
    from provermon.models.snapshot import DashboardSnapshot


# ---------------------------------------------------------------------------
# Value -> Rich markup mapping
# ---------------------------------------------------------------------------

_PHASE_ICONS: dict[FetchPhase, str] = {
    FetchPhase.IDLE: "[green]IDLE[/green]",
    FetchPhase.ACTIVE: "[bold yellow]FETCHING[/bold yellow]",
    FetchPhase.TIMEOUT: "[bold red]TIMEOUT[/bold red]",
}

_STATUS_STYLES: dict[TaskStatus, str] = {
    TaskStatus.NONE: "dim",
    TaskStatus.PROVED: "cyan",
    TaskStatus.PROOF_FAILED: "bold red",
    TaskStatus.SUCCESS: "bold green",
    TaskStatus.SUBMIT_FAILED: "bold red",
}


def format_bytes(n: int) -> str:
    """Human-readable binary size, e.g. ``1.5 GiB``."""
    value = float(n)
    for unit in ("B", "KiB", "MiB", "GiB"):
        if value < 1024 or unit == "GiB":
            return f"{value:.0f} {unit}" if unit == "B" else f"{value:.1f} {unit}"
        value /= 1024
    return f"{value:.1f} GiB"


def format_duration(seconds: float) -> str:
    """``h:mm:ss`` for long durations, ``Ns`` for short ones."""
    total = int(seconds)
    if total < 60:
        return f"{total}s"
    hours, rem = divmod(total, 3600)
    minutes, secs = divmod(rem, 60)
    return f"{hours}:{minutes:02d}:{secs:02d}"


class DashboardRenderer:
    """Renders ``DashboardSnapshot`` as Rich terminal output.

    Parameters
    ----------
    console:
        Rich Console instance.  A new one is created if not provided.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    # ------------------------------------------------------------------
    # Single snapshot render
    # ------------------------------------------------------------------

    def render_snapshot(self, snapshot: DashboardSnapshot) -> Panel:
        """Render a snapshot as a Rich Panel holding two tables."""
        body = Group(
            self._build_pipeline_table(snapshot),
            Text(""),
            self._build_system_table(snapshot),
        )
        return Panel(
            body,
            title="[bold]Prover Dashboard[/bold]",
            subtitle=f"tick {snapshot.tick}",
            border_style="blue",
            padding=(1, 2),
        )

    def _build_pipeline_table(self, snapshot: DashboardSnapshot) -> Table:
        table = Table(show_header=False, expand=True, pad_edge=True, box=None)
        table.add_column("Field", style="bold cyan", min_width=18)
        table.add_column("Value")

        zk = snapshot.zkvm_metrics
        status_style = _STATUS_STYLES.get(zk.last_status, "")

        table.add_row("Current task", snapshot.current_task or "[dim]-[/dim]")
        table.add_row(
            "Prover state",
            snapshot.prover_state.value if snapshot.prover_state else "[dim]unknown[/dim]",
        )
        table.add_row("Fetcher", self._fetch_display(snapshot))
        table.add_row("Tasks executed", str(zk.tasks_executed))
        table.add_row("Tasks proved", str(zk.tasks_proved))
        table.add_row("zkVM runtime", format_duration(zk.accumulated_runtime))
        table.add_row("Points", str(zk.total_points))
        table.add_row(
            "Last status",
            f"[{status_style}]{zk.last_status.value}[/{status_style}]"
            if status_style
            else zk.last_status.value,
        )
        if snapshot.last_submission_timestamp is not None:
            table.add_row(
                "Last submission",
                snapshot.last_submission_timestamp.strftime("%Y-%m-%d %H:%M:%S"),
            )
        return table

    def _fetch_display(self, snapshot: DashboardSnapshot) -> str:
        info = snapshot.task_fetch_info
        phase = _PHASE_ICONS.get(snapshot.fetching_state.phase, snapshot.fetching_state.phase.value)
        if not info.can_fetch_now:
            return (
                f"{phase}  [yellow]backoff {format_duration(info.remaining)} "
                f"of {info.backoff_duration}s[/yellow]"
            )
        return phase

    def _build_system_table(self, snapshot: DashboardSnapshot) -> Table:
        sm = snapshot.system_metrics
        table = Table(show_header=True, header_style="bold cyan", expand=True)
        table.add_column("CPU", justify="right")
        table.add_column("RAM", justify="right")
        table.add_column("Peak RAM", justify="right")
        table.add_column("Total RAM", justify="right")
        table.add_row(
            f"{sm.cpu_percent:.1f}%",
            f"{format_bytes(sm.ram_bytes)} ({sm.ram_percent:.1f}%)",
            format_bytes(sm.peak_ram_bytes),
            format_bytes(sm.total_ram_bytes),
        )
        return table

    # ------------------------------------------------------------------
    # Continuous live rendering
    # ------------------------------------------------------------------

    def render_live(
        self,
        aggregator: DashboardAggregator,
        *,
        refresh_hz: float = 2.0,
        before_tick: Callable[[], object] | None = None,
    ) -> None:
        """Tick the aggregator and repaint until Ctrl+C.

        Parameters
        ----------
        aggregator:
            The aggregator to drive.  ``update()`` is called once per frame.
        refresh_hz:
            Frames per second.  Default is 2.0.
        before_tick:
            Optional hook run before every tick, e.g. to pull new events
            into the log.
        """
        interval = 1.0 / max(refresh_hz, 0.1)

        with Live(
            console=self.console,
            refresh_per_second=refresh_hz,
            transient=False,
        ) as live:
            try:
                while True:
                    if before_tick is not None:
                        before_tick()
                    live.update(self.render_snapshot(aggregator.update()))
                    time.sleep(interval)
            except KeyboardInterrupt:
                live.update(self.render_snapshot(aggregator.snapshot))

    # ------------------------------------------------------------------
    # Standalone print
    # ------------------------------------------------------------------

    def print_snapshot(self, snapshot: DashboardSnapshot) -> None:
        """Print a single snapshot to the console."""
        self.console.print(self.render_snapshot(snapshot))

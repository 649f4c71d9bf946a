"""``provermon watch EVENT_FILE`` — live dashboard over a growing event file.

Follows the file like ``tail -f``, pulling newly appended events into the
log before every tick, and samples CPU/RAM of the prover process.
"""

from __future__ import annotations

import logging
from pathlib import Path

import psutil
import typer
from rich.console import Console

from provermon.config import settings
from provermon.core.aggregator import DashboardAggregator
from provermon.core.event_log import EventFileError, EventLog, JsonlTail
from provermon.core.sampler import PsutilSampler
from provermon.monitor.renderer import DashboardRenderer

logger = logging.getLogger(__name__)

console = Console()


def watch_cmd(
    event_file: Path = typer.Argument(
        None,
        help="JSON Lines event file to follow (defaults to PROVERMON_EVENT_FILE).",
    ),
    pid: int = typer.Option(
        None,
        "--pid",
        "-p",
        help="Process whose CPU/RAM to sample (defaults to this process).",
    ),
    refresh_hz: float = typer.Option(
        settings.refresh_hz,
        "--refresh",
        "-r",
        help="Refresh rate in Hz.",
    ),
) -> None:
    """Follow an event file and render the dashboard live (Ctrl+C to exit)."""
    path = event_file or settings.event_file
    if path is None:
        console.print("[bold red]No event file given.[/bold red]")
        console.print("[dim]Pass EVENT_FILE or set PROVERMON_EVENT_FILE.[/dim]")
        raise typer.Exit(code=1)
    if not path.exists():
        console.print(f"[bold red]Event file not found:[/bold red] {path}")
        raise typer.Exit(code=1)

    try:
        sampler = PsutilSampler(pid)
    except psutil.Error as exc:
        console.print(f"[bold red]Cannot observe process {pid}:[/bold red] {exc}")
        raise typer.Exit(code=1) from exc

    log = EventLog(max_events=settings.max_events)
    tail = JsonlTail(path)
    aggregator = DashboardAggregator(log, sampler, config=settings.tracker_config())

    logger.info("Watching %s at %.1f Hz", path, refresh_hz)
    console.print(f"[dim]Watching {path} at {refresh_hz} Hz. Press Ctrl+C to exit.[/dim]")
    try:
        DashboardRenderer(console=console).render_live(
            aggregator,
            refresh_hz=refresh_hz,
            before_tick=lambda: log.extend(tail.poll()),
        )
    except EventFileError as exc:
        console.print(f"[bold red]{exc}[/bold red]")
        raise typer.Exit(code=1) from exc

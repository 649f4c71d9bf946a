"""``provermon replay EVENT_FILE`` — deterministic re-run of a recorded session.

Events are fed to the aggregator one at a time.  A ``ManualClock`` is
advanced by the gaps between event timestamps, so backoff countdowns and
fetch timeouts come out exactly as they would have live.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from provermon.config import settings
from provermon.core.aggregator import DashboardAggregator
from provermon.core.clock import ManualClock
from provermon.core.event_log import EventFileError, EventLog, read_events_jsonl
from provermon.core.sampler import StaticSampler
from provermon.models.snapshot import DashboardSnapshot
from provermon.monitor.renderer import DashboardRenderer

console = Console()


def replay_events(path: Path, *, max_events: int | None = None) -> DashboardSnapshot:
    """Replay an event file, one tick per event, and return the last snapshot."""
    clock = ManualClock()
    log = EventLog(max_events=max_events)
    aggregator = DashboardAggregator(
        log, StaticSampler(), clock=clock, config=settings.tracker_config()
    )

    previous = None
    for event in read_events_jsonl(path):
        if previous is not None:
            gap = (event.timestamp - previous.timestamp).total_seconds()
            clock.advance(max(0.0, gap))
        previous = event
        log.append(event)
        aggregator.update()

    return aggregator.snapshot


def replay_cmd(
    event_file: Path = typer.Argument(
        ...,
        help="JSON Lines file with one worker event per line.",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        "-j",
        help="Print the final snapshot as JSON instead of a panel.",
    ),
    max_events: int = typer.Option(
        settings.max_events,
        "--max-events",
        "-m",
        help="Retention limit of the in-memory event log.",
    ),
) -> None:
    """Replay a recorded event file and show the final snapshot."""
    if not event_file.exists():
        console.print(f"[bold red]Event file not found:[/bold red] {event_file}")
        raise typer.Exit(code=1)

    try:
        snapshot = replay_events(event_file, max_events=max_events)
    except EventFileError as exc:
        console.print(f"[bold red]{exc}[/bold red]")
        raise typer.Exit(code=1) from exc

    if json_output:
        typer.echo(snapshot.model_dump_json(indent=2))
    else:
        DashboardRenderer(console=console).print_snapshot(snapshot)

"""``provermon snapshot EVENT_FILE`` — one-shot dashboard for an event file.

Loads every event in the file, runs a single update cycle and prints the
resulting snapshot, either as a Rich panel or as JSON.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from provermon.config import settings
from provermon.core.aggregator import DashboardAggregator
from provermon.core.event_log import EventFileError, EventLog
from provermon.core.sampler import StaticSampler
from provermon.monitor.renderer import DashboardRenderer

console = Console()


def snapshot_cmd(
    event_file: Path = typer.Argument(
        ...,
        help="JSON Lines file with one worker event per line.",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        "-j",
        help="Print the snapshot as JSON instead of a panel.",
    ),
    max_events: int = typer.Option(
        settings.max_events,
        "--max-events",
        "-m",
        help="Retention limit of the in-memory event log.",
    ),
) -> None:
    """Show the dashboard snapshot for a recorded event file."""
    if not event_file.exists():
        console.print(f"[bold red]Event file not found:[/bold red] {event_file}")
        raise typer.Exit(code=1)

    try:
        log = EventLog.load_jsonl(event_file, max_events=max_events)
    except EventFileError as exc:
        console.print(f"[bold red]{exc}[/bold red]")
        raise typer.Exit(code=1) from exc

    aggregator = DashboardAggregator(
        log, StaticSampler(), config=settings.tracker_config()
    )
    snapshot = aggregator.update()

    if json_output:
        typer.echo(snapshot.model_dump_json(indent=2))
    else:
        DashboardRenderer(console=console).print_snapshot(snapshot)

"""Main Typer application — imports and registers all CLI commands.

Entry point: ``provermon`` (configured via pyproject.toml [project.scripts]).

Commands: snapshot, replay, watch.
"""

from __future__ import annotations

import logging

import typer

from provermon.cli.commands.replay import replay_cmd
from provermon.cli.commands.snapshot_cmd import snapshot_cmd
from provermon.cli.commands.watch import watch_cmd
from provermon.config import settings

app = typer.Typer(
    name="provermon",
    help="provermon: live dashboard for a fetch -> prove -> submit pipeline.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

# Register subcommands
app.command(name="snapshot", help="Show the dashboard for a recorded event file.")(snapshot_cmd)
app.command(name="replay", help="Replay an event file with recorded timing.")(replay_cmd)
app.command(name="watch", help="Follow an event file and render the dashboard live.")(watch_cmd)


@app.callback()
def main_callback(
    log_level: str = typer.Option(
        settings.log_level,
        "--log-level",
        help="Logging level (DEBUG, INFO, WARNING, ...).",
    ),
) -> None:
    """Configure logging before any command runs."""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()

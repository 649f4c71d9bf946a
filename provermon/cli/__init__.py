"""provermon CLI — Typer-based command-line interface.

Provides the ``provermon`` command with subcommands for one-shot
snapshots, deterministic replays and live monitoring of worker event files.

All output uses Rich for formatted terminal display.
"""

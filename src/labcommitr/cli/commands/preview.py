"""preview command: browse commit history."""

from __future__ import annotations

import typer

from labcommitr.cli.errors import run
from labcommitr.history import PreviewOptions, run_preview
from labcommitr.history.pager import DEFAULT_LIMIT, MAX_COMMITS


def preview(
    limit: int = typer.Option(
        DEFAULT_LIMIT,
        "--limit",
        "-l",
        min=1,
        help=f"Maximum commits to fetch (max {MAX_COMMITS})",
    ),
    branch: str | None = typer.Option(
        None, "--branch", "-b", help="Branch to browse (default: current branch)"
    ),
) -> None:
    """Browse and inspect commit history."""
    run(run_preview(PreviewOptions(limit=limit, branch=branch)))

"""revert command: revert a commit with a project-style message."""

from __future__ import annotations

import typer
from rich import print as rprint

from labcommitr.cli.errors import run
from labcommitr.history import RevertOptions, run_revert
from labcommitr.history.pager import DEFAULT_LIMIT, MAX_COMMITS


def revert(
    limit: int = typer.Option(
        DEFAULT_LIMIT,
        "--limit",
        "-l",
        min=1,
        help=f"Maximum commits to fetch (max {MAX_COMMITS})",
    ),
    branch: str | None = typer.Option(
        None, "--branch", "-b", help="Branch to revert from (default: current branch)"
    ),
    no_edit: bool = typer.Option(
        False, "--no-edit", help="Use git's default revert message"
    ),
    continue_: bool = typer.Option(
        False, "--continue", help="Continue a revert after resolving conflicts"
    ),
    abort: bool = typer.Option(False, "--abort", help="Abort a revert in progress"),
) -> None:
    """Revert a commit using the project's commit conventions."""
    if continue_ and abort:
        rprint("[red]Error: --continue and --abort cannot be combined[/red]")
        raise typer.Exit(code=1)
    run(
        run_revert(
            RevertOptions(
                limit=limit,
                branch=branch,
                no_edit=no_edit,
                continue_=continue_,
                abort=abort,
            )
        )
    )

"""commit command: build a commit message interactively and commit."""

from __future__ import annotations

import typer

from labcommitr.cli.errors import run
from labcommitr.commit import CommitOptions, run_commit


def commit(
    type_: str | None = typer.Option(
        None, "--type", "-t", help="Commit type id or alias"
    ),
    scope: str | None = typer.Option(None, "--scope", "-s", help="Commit scope"),
    message: str | None = typer.Option(
        None, "--message", "-m", help="Commit subject"
    ),
    body: str | None = typer.Option(None, "--body", "-b", help="Commit body"),
    no_verify: bool = typer.Option(
        False, "--no-verify", help="Skip git commit hooks"
    ),
) -> None:
    """Create a commit that follows the project's conventions."""
    run(
        run_commit(
            CommitOptions(
                type=type_,
                scope=scope,
                message=message,
                body=body,
                no_verify=no_verify,
            )
        )
    )

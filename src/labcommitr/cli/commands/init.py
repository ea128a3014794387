"""init command: create .labcommitr.config.yaml."""

from __future__ import annotations

import typer

from labcommitr.cli.errors import run
from labcommitr.initializer import run_init


def init(
    preset: str | None = typer.Option(
        None,
        "--preset",
        help="Use a preset without asking (conventional, gitmoji, angular, minimal)",
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Overwrite an existing configuration"
    ),
) -> None:
    """Initialize labcommitr configuration in this project."""
    run(run_init(preset, force=force))

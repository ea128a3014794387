"""Typer CLI application definition for labcommitr."""

from __future__ import annotations

import typer

from labcommitr import __version__
from labcommitr.cli.commands.commit import commit
from labcommitr.cli.commands.config import config_app
from labcommitr.cli.commands.init import init
from labcommitr.cli.commands.preview import preview
from labcommitr.cli.commands.revert import revert
from labcommitr.logging import setup_logging
from labcommitr.settings import Settings

app = typer.Typer(
    name="labcommitr",
    help="Create standardized git commits from a project configuration.",
    no_args_is_help=True,
)


def _print_version(value: bool) -> None:
    if value:
        typer.echo(f"labcommitr {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=_print_version,
        is_eager=True,
        help="Show the version and exit",
    ),
) -> None:
    """Create standardized git commits from a project configuration."""
    setup_logging(Settings())


app.command("commit")(commit)
app.command("c", hidden=True)(commit)
app.command("init")(init)
app.command("preview")(preview)
app.command("revert")(revert)
app.add_typer(config_app, name="config")

"""config subcommand: inspect and check the project configuration."""

from __future__ import annotations

import json
from pathlib import Path

import typer
from rich import print as rprint
from rich.markup import escape

from labcommitr.cli.errors import run
from labcommitr.config import ConfigError, ConfigLoader, config_to_dict, load_config, load_raw_config
from labcommitr.config.errors import validation_failure
from labcommitr.config.validator import ConfigValidator

config_app = typer.Typer(
    name="config",
    help="Inspect the labcommitr configuration.",
    no_args_is_help=True,
)


@config_app.command("show")
def config_show(
    path: Path | None = typer.Option(
        None, "--path", "-p", help="Start the search from this directory"
    ),
) -> None:
    """Display the configuration in effect and where it came from."""
    result = run(load_config(path))

    rprint(f"[green]Configuration loaded from: {result.source}[/green]")
    if result.source == "defaults":
        rprint("[yellow]Using built-in defaults (no config file found)[/yellow]")
    if result.path is not None:
        rprint(f"Config file path: {escape(str(result.path))}")
    emoji = "enabled" if result.emoji_mode_active else "disabled (terminal fallback)"
    rprint(f"Emoji mode: {emoji}")
    rprint()
    rprint("Configuration:")
    typer.echo(json.dumps(config_to_dict(result.config), indent=2, ensure_ascii=False))


async def _validate(start: Path | None) -> Path:
    loader = ConfigLoader()
    root = loader.find_project_root(start)
    config_path = loader.find_config_file(root.path)
    if config_path is None:
        raise ConfigError(
            "No configuration file found",
            details=f"Searched in {root.path}",
            solutions=["Run 'lab init' to create one"],
        )
    raw = await load_raw_config(config_path)
    result = ConfigValidator().validate(raw)
    if not result.valid:
        raise validation_failure(result.errors, config_path)
    return config_path


@config_app.command("validate")
def config_validate(
    path: Path | None = typer.Option(
        None, "--path", "-p", help="Start the search from this directory"
    ),
) -> None:
    """Check the configuration file without using it."""
    config_path = run(_validate(path))
    rprint(f"[green]✔ {escape(str(config_path))} is valid[/green]")

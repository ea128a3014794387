"""Translate workflow outcomes into terminal output and exit codes."""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from typing import Any, TypeVar

import typer
from rich import print as rprint
from rich.markup import escape

from labcommitr.errors import Cancelled, LabcommitrError
from labcommitr.git import GitError
from labcommitr.logging import get_logger
from labcommitr.settings import Settings

logger = get_logger(__name__)

T = TypeVar("T")


def print_error(exc: LabcommitrError) -> None:
    """Summary, file, details and a numbered list of fixes."""
    rprint(f"[red]Error: {escape(exc.message)}[/red]")
    if exc.file_path is not None:
        rprint(f"[dim]File: {escape(str(exc.file_path))}[/dim]")
    if exc.details:
        rprint()
        rprint(escape(exc.details))
    if exc.solutions:
        rprint()
        rprint("[bold]Solutions:[/bold]")
        for number, solution in enumerate(exc.solutions, start=1):
            rprint(f"  {number}. {escape(solution)}")


def run(coro: Coroutine[Any, Any, T]) -> T:
    """Run a workflow; cancellation exits 0 and failures exit 1."""
    try:
        return asyncio.run(coro)
    except Cancelled as exc:
        rprint("[yellow]Cancelled.[/yellow]")
        raise typer.Exit(code=0) from exc
    except LabcommitrError as exc:
        print_error(exc)
        raise typer.Exit(code=1) from exc
    except GitError as exc:
        rprint(f"[red]Error: {escape(str(exc))}[/red]")
        raise typer.Exit(code=1) from exc
    except Exception as exc:
        if Settings().debug:
            raise
        logger.debug("Unexpected error", exc_info=True)
        rprint(f"[red]Error: {escape(str(exc) or type(exc).__name__)}[/red]")
        raise typer.Exit(code=1) from exc

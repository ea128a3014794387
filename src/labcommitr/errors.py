"""Exceptions shared by the workflows and the CLI."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path


class LabcommitrError(Exception):
    """An error with user-facing text.

    Carries a one-line *message*, optional *details* and a list of concrete
    *solutions* the CLI prints as a numbered list.
    """

    def __init__(
        self,
        message: str,
        details: str | None = None,
        solutions: Sequence[str] = (),
        file_path: Path | str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details
        self.solutions = list(solutions)
        self.file_path = Path(file_path) if file_path is not None else None

    def format_for_user(self) -> str:
        """Render the error as plain multi-line text."""
        lines = [f"Error: {self.message}"]
        if self.file_path is not None:
            lines.append(f"File: {self.file_path}")
        if self.details:
            lines.append("")
            lines.append(self.details)
        if self.solutions:
            lines.append("")
            lines.append("Solutions:")
            lines.extend(f"  {i}. {s}" for i, s in enumerate(self.solutions, start=1))
        return "\n".join(lines)


class WorkflowError(LabcommitrError):
    """A command could not proceed (no repository, nothing staged, git failed...)."""


class Cancelled(Exception):
    """The user dismissed a prompt; commands exit 0 after cleaning up."""

"""Configuration errors and validation diagnostics."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from labcommitr.errors import LabcommitrError


class ConfigError(LabcommitrError):
    """Raised when a configuration file cannot be found, read, parsed or validated."""


@dataclass(frozen=True)
class ValidationError:
    """One schema violation found in a raw configuration.

    ``field`` is the dotted path (``types[0].id``); ``field_display`` is the
    human-readable form shown to users.
    """

    field: str
    field_display: str
    message: str
    user_message: str
    value: Any = None
    expected_format: str | None = None
    examples: tuple[str, ...] = ()
    issue: str | None = None

    def format(self) -> str:
        """Render the error for a terminal listing."""
        lines = [f"{self.field_display}: {self.user_message}"]
        if self.issue:
            lines.append(f"  Issue: {self.issue}")
        if self.expected_format:
            lines.append(f"  Expected: {self.expected_format}")
        if self.examples:
            lines.append(f"  Examples: {', '.join(self.examples)}")
        return "\n".join(lines)


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating a raw configuration."""

    errors: tuple[ValidationError, ...] = ()

    @property
    def valid(self) -> bool:
        return not self.errors


def validation_failure(
    errors: Sequence[ValidationError], file_path: Path | str | None
) -> ConfigError:
    """Build a single :class:`ConfigError` aggregating every validation error."""
    count = len(errors)
    noun = "error" if count == 1 else "errors"
    details = "\n\n".join(
        f"{i}. {err.format()}" for i, err in enumerate(errors, start=1)
    )
    return ConfigError(
        f"Configuration has {count} validation {noun}",
        details=details,
        solutions=[
            "Fix the fields listed above in your configuration file",
            "Run 'lab config validate' to re-check after editing",
            "Run 'lab init --force' to regenerate a known-good configuration",
        ],
        file_path=file_path,
    )

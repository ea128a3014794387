"""Shared prompt types and the cancellation sentinel."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, Literal, TypeVar

T = TypeVar("T")

LabelColor = Literal["magenta", "cyan", "blue", "yellow", "green"]


class _Cancel(Enum):
    CANCEL = "cancel"

    def __repr__(self) -> str:
        return "CANCEL"


CANCEL = _Cancel.CANCEL
"""Returned by a prompt the user dismissed with Escape or Ctrl+C."""

Cancel = Literal[_Cancel.CANCEL]


def is_cancel(value: Any) -> bool:
    """True when *value* is the :data:`CANCEL` sentinel."""
    return value is CANCEL


@dataclass(frozen=True)
class SelectOption(Generic[T]):
    """One row of a select or multiselect prompt."""

    value: T
    label: str
    hint: str | None = None


@dataclass
class PromptState:
    """Mutable state of the prompt currently on screen."""

    cursor: int = 0
    buffer: str = ""
    caret: int = 0
    selected: set[int] = field(default_factory=set)
    error: str | None = None

"""Symbols, spacing and colours shared by every prompt.

Colours are produced with :class:`rich.style.Style` and collapse to plain
text when ``NO_COLOR`` is set.
"""

from __future__ import annotations

import os

from rich.color import ColorSystem
from rich.style import Style

from labcommitr.ui.types import LabelColor

POINTER = ">"
CHECK = "✔"
CROSS = "✘"
BULLET = "●"
CIRCLE = "○"
HORIZONTAL = "─"

LABEL_WIDTH = 7
LABEL_GAP = 2
OPTION_INDENT = 11
INDENT = " " * OPTION_INDENT

_LABEL_STYLES: dict[LabelColor, str] = {
    "magenta": "bold black on bright_magenta",
    "cyan": "bold black on bright_cyan",
    "blue": "bold black on bright_blue",
    "yellow": "bold black on bright_yellow",
    "green": "bold black on bright_green",
}

ACTIVE = "color(51)"
MESSAGE = "bright_white"
ERROR = "red"
SUCCESS = "green"
DIM = "dim"
ADDED = "green"
DELETED = "red"
MODIFIED = "yellow"
RENAMED = "blue"


def _color_system() -> ColorSystem | None:
    return None if os.environ.get("NO_COLOR") else ColorSystem.TRUECOLOR


def paint(text: str, style: str) -> str:
    """Return *text* wrapped in the ANSI codes for *style*."""
    return Style.parse(style).render(text, color_system=_color_system())


def inverse(text: str) -> str:
    """Reverse-video *text*; kept even under ``NO_COLOR`` so the caret stays visible."""
    return Style(reverse=True).render(text, color_system=ColorSystem.STANDARD)


def dim(text: str) -> str:
    return paint(text, DIM)


def label(text: str, color: LabelColor) -> str:
    """Render a fixed-width badge with *text* centred (extra space on the left)."""
    visible = text[:LABEL_WIDTH]
    padding = LABEL_WIDTH - len(visible)
    left = (padding + 1) // 2
    right = padding - left
    return paint(f" {' ' * left}{visible}{' ' * right} ", _LABEL_STYLES[color])


def header(text: str, color: LabelColor, message: str) -> str:
    """The first line of every prompt: badge followed by the question."""
    return f"{label(text, color)}{' ' * LABEL_GAP}{paint(message, MESSAGE)}"

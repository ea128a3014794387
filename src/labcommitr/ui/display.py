"""Non-interactive output that lines up with the prompt layout.

Every helper writes exactly one line per call (``block`` one per item) so
callers can count what they printed and pass it as ``prefix_line_count``.
"""

from __future__ import annotations

from collections.abc import Iterable

from labcommitr.ui import theme
from labcommitr.ui.renderer import Terminal, get_terminal
from labcommitr.ui.types import LabelColor

DIVIDER_WIDTH = 45


def _out(line: str, terminal: Terminal | None) -> None:
    (terminal or get_terminal()).write(line + "\n")


def section(label: str, color: LabelColor, message: str, *, terminal: Terminal | None = None) -> None:
    """Print a badge line like the header of a prompt."""
    _out(theme.header(label, color, message), terminal)


def status_success(message: str, *, terminal: Terminal | None = None) -> None:
    _out(f"{theme.INDENT}{theme.paint(theme.CHECK, theme.SUCCESS)} {message}", terminal)


def status_error(message: str, *, terminal: Terminal | None = None) -> None:
    _out(f"{theme.INDENT}{theme.paint(theme.CROSS, theme.ERROR)} {message}", terminal)


def status_info(message: str, *, terminal: Terminal | None = None) -> None:
    _out(f"{theme.INDENT}{message}", terminal)


indented = status_info


def block(lines: Iterable[str], *, terminal: Terminal | None = None) -> int:
    """Print *lines* indented; returns how many lines were written."""
    count = 0
    for line in lines:
        for part in line.split("\n"):
            _out(f"{theme.INDENT}{part}", terminal)
            count += 1
    return count


def divider(*, terminal: Terminal | None = None) -> None:
    _out(f"{theme.INDENT}{theme.dim(theme.HORIZONTAL * DIVIDER_WIDTH)}", terminal)


def blank(*, terminal: Terminal | None = None) -> None:
    _out("", terminal)

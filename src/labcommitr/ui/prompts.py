"""Interactive prompts: select, text, confirm and multiselect.

Each prompt owns a block of lines directly below the cursor. Every redraw
clears exactly the lines the previous frame wrote, and on completion the
block (plus any ``prefix_line_count`` lines the caller printed just above
it) collapses to a single summary line. When stdin or stdout is not a
terminal the prompts return their documented fallbacks without drawing.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any, TypeVar

from labcommitr.logging import get_logger
from labcommitr.shortcuts import ShortcutMapping
from labcommitr.shortcuts import match as match_shortcut
from labcommitr.ui import theme
from labcommitr.ui.keys import Key
from labcommitr.ui.renderer import Terminal, get_terminal
from labcommitr.ui.types import CANCEL, Cancel, LabelColor, PromptState, SelectOption

logger = get_logger(__name__)

T = TypeVar("T")

_PENDING: Any = object()

_CANCEL_KEYS = frozenset({"escape", "ctrl+c"})
_UP_KEYS = frozenset({"up", "k"})
_DOWN_KEYS = frozenset({"down", "j"})

MULTISELECT_INSTRUCTIONS = "Space to toggle, Enter to submit"
REQUIRED_SELECTION_ERROR = "Select at least one option"


class _Region:
    """Tracks how many lines the active prompt has on screen."""

    def __init__(self, terminal: Terminal) -> None:
        self.terminal = terminal
        self.rendered_lines = 0

    def draw(self, lines: Sequence[str]) -> None:
        self.terminal.clear_lines(self.rendered_lines)
        frame = "\n".join(lines)
        self.terminal.write(frame)
        self.rendered_lines = frame.count("\n") + 1

    def collapse(self, summary: str, prefix_line_count: int = 0) -> None:
        self.terminal.clear_lines(self.rendered_lines + prefix_line_count)
        self.terminal.write(summary + "\n")
        self.rendered_lines = 0


async def _interact(
    terminal: Terminal,
    render: Callable[[], None],
    handle: Callable[[Key], Any],
) -> Any:
    """Run the key loop in raw mode until *handle* returns something other than pending."""
    cleanup = terminal.enter_raw_mode()
    try:
        terminal.hide_cursor()
        render()
        while True:
            key = await terminal.read_key()
            outcome = handle(key)
            if outcome is not _PENDING:
                return outcome
    finally:
        cleanup()


async def wait_for_key(
    resolve: Callable[[Key], T | None],
    *,
    terminal: Terminal | None = None,
) -> T | None:
    """Read keys until *resolve* maps one to a value; ``None`` without a terminal."""
    terminal = terminal or get_terminal()
    if not terminal.is_tty():
        return None

    def handle(key: Key) -> Any:
        outcome = resolve(key)
        return _PENDING if outcome is None else outcome

    return await _interact(terminal, lambda: None, handle)


def _option_line(option: SelectOption[Any], active: bool, marker: str | None = None) -> str:
    pointer = theme.POINTER if active else " "
    text = theme.paint(option.label, theme.ACTIVE) if active else option.label
    hint = f" {theme.dim(f'({option.hint})')}" if option.hint else ""
    prefix = f"{pointer} {marker} " if marker is not None else f"{pointer} "
    return f"{theme.INDENT}{prefix}{text}{hint}"


def _summary(label: str, label_color: LabelColor, text: str) -> str:
    return f"{theme.label(label, label_color)}{' ' * theme.LABEL_GAP}{text}"


# ---------------------------------------------------------------------------
# select()
# ---------------------------------------------------------------------------


async def select(
    options: Sequence[SelectOption[T]],
    message: str,
    *,
    label: str = "",
    label_color: LabelColor = "magenta",
    initial_value: T | None = None,
    shortcuts: ShortcutMapping | None = None,
    prefix_line_count: int = 0,
    terminal: Terminal | None = None,
) -> T | Cancel:
    """Pick one option with the arrow keys (or k/j), Enter or a shortcut letter.

    Falls back to *initial_value*, then the first option, then
    :data:`CANCEL` when not attached to a terminal.
    """
    terminal = terminal or get_terminal()
    if not terminal.is_tty():
        if initial_value is not None:
            return initial_value
        if options:
            return options[0].value
        return CANCEL
    if not options:
        return CANCEL

    state = PromptState()
    if initial_value is not None:
        for index, option in enumerate(options):
            if option.value == initial_value:
                state.cursor = index
                break

    head = theme.header(label, label_color, message)
    region = _Region(terminal)

    def render() -> None:
        lines = [head]
        lines.extend(_option_line(opt, i == state.cursor) for i, opt in enumerate(options))
        region.draw(lines)

    def handle(key: Key) -> Any:
        if key.id in _CANCEL_KEYS:
            return CANCEL
        if key.id == "return":
            return options[state.cursor].value
        if shortcuts is not None and key.char and key.char.isascii() and key.char.isalpha():
            matched = match_shortcut(key.char, shortcuts)
            if matched is not None:
                for option in options:
                    if str(option.value) == matched:
                        return option.value
        if key.id in _UP_KEYS:
            state.cursor = (state.cursor - 1) % len(options)
            render()
        elif key.id in _DOWN_KEYS:
            state.cursor = (state.cursor + 1) % len(options)
            render()
        return _PENDING

    result = await _interact(terminal, render, handle)

    if result is CANCEL:
        region.collapse(head, prefix_line_count)
    else:
        chosen = next((o.label for o in options if o.value == result), str(result))
        region.collapse(
            _summary(label, label_color, theme.paint(chosen, theme.ACTIVE)),
            prefix_line_count,
        )
    logger.debug("select %r -> %r", message, result)
    return result


# ---------------------------------------------------------------------------
# text()
# ---------------------------------------------------------------------------


async def text(
    message: str,
    *,
    label: str = "",
    label_color: LabelColor = "magenta",
    placeholder: str | None = None,
    initial_value: str | None = None,
    validate: Callable[[str], str | None] | None = None,
    prefix_line_count: int = 0,
    terminal: Terminal | None = None,
) -> str | Cancel:
    """Single-line text input with an inline caret.

    *validate* runs on Enter; a non-empty return value is shown under the
    input and keeps the prompt open. Exceptions it raises propagate after
    the terminal has been restored. Without a terminal the initial value
    (or ``""``) is returned unvalidated.
    """
    terminal = terminal or get_terminal()
    if not terminal.is_tty():
        return initial_value or ""

    state = PromptState(buffer=initial_value or "")
    state.caret = len(state.buffer)
    head = theme.header(label, label_color, message)
    region = _Region(terminal)

    def render() -> None:
        buf = state.buffer
        if buf:
            before = buf[: state.caret]
            under = buf[state.caret] if state.caret < len(buf) else " "
            after = buf[state.caret + 1 :]
            line = f"{theme.INDENT}{before}{theme.inverse(under)}{after}"
        else:
            line = f"{theme.INDENT}{theme.inverse(' ')}{theme.dim(placeholder or '')}"
        lines = [head, line]
        if state.error:
            lines.append(f"{theme.INDENT}{theme.paint(state.error, theme.ERROR)}")
        region.draw(lines)

    def edit(buffer: str, caret: int) -> None:
        state.buffer = buffer
        state.caret = caret
        state.error = None

    def handle(key: Key) -> Any:
        buf, pos = state.buffer, state.caret
        match key.id:
            case "escape" | "ctrl+c":
                return CANCEL
            case "return":
                if validate is not None:
                    error = validate(buf)
                    if error:
                        state.error = error
                        render()
                        return _PENDING
                return buf
            case "backspace":
                if pos > 0:
                    edit(buf[: pos - 1] + buf[pos:], pos - 1)
            case "delete":
                if pos < len(buf):
                    edit(buf[:pos] + buf[pos + 1 :], pos)
            case "left":
                state.caret = max(0, pos - 1)
            case "right":
                state.caret = min(len(buf), pos + 1)
            case "home" | "ctrl+a":
                state.caret = 0
            case "end" | "ctrl+e":
                state.caret = len(buf)
            case _:
                char = key.char
                if key.ctrl or not char or len(char) != 1 or ord(char) < 32:
                    return _PENDING
                edit(buf[:pos] + char + buf[pos:], pos + 1)
        render()
        return _PENDING

    result = await _interact(terminal, render, handle)

    if result is CANCEL:
        region.collapse(head, prefix_line_count)
    else:
        shown = theme.paint(result, theme.ACTIVE) if result else theme.dim("(empty)")
        region.collapse(_summary(label, label_color, shown), prefix_line_count)
    return result


# ---------------------------------------------------------------------------
# confirm()
# ---------------------------------------------------------------------------


async def confirm(
    message: str,
    *,
    label: str = "",
    label_color: LabelColor = "magenta",
    initial_value: bool = True,
    prefix_line_count: int = 0,
    terminal: Terminal | None = None,
) -> bool | Cancel:
    """Yes/No select with the default answer listed (and highlighted) first."""
    yes = SelectOption(True, "Yes")
    no = SelectOption(False, "No")
    options = [yes, no] if initial_value else [no, yes]
    return await select(
        options,
        message,
        label=label,
        label_color=label_color,
        initial_value=initial_value,
        prefix_line_count=prefix_line_count,
        terminal=terminal,
    )


# ---------------------------------------------------------------------------
# multiselect()
# ---------------------------------------------------------------------------


async def multiselect(
    options: Sequence[SelectOption[T]],
    message: str,
    *,
    label: str = "",
    label_color: LabelColor = "magenta",
    required: bool = False,
    prefix_line_count: int = 0,
    terminal: Terminal | None = None,
) -> list[T] | Cancel:
    """Toggle any number of options with Space and submit with Enter.

    Values are returned in option order. Without a terminal the result is
    an empty list.
    """
    terminal = terminal or get_terminal()
    if not terminal.is_tty():
        return []

    state = PromptState()
    head = theme.header(label, label_color, message)
    region = _Region(terminal)

    def render() -> None:
        lines = [head]
        for i, opt in enumerate(options):
            marker = theme.BULLET if i in state.selected else theme.CIRCLE
            lines.append(_option_line(opt, i == state.cursor, marker))
        lines.append(f"{theme.INDENT}  {theme.dim(MULTISELECT_INSTRUCTIONS)}")
        if state.error:
            lines.append(f"{theme.INDENT}  {theme.paint(state.error, theme.ERROR)}")
        region.draw(lines)

    def handle(key: Key) -> Any:
        if key.id in _CANCEL_KEYS:
            return CANCEL
        if key.id == "return":
            if required and not state.selected:
                state.error = REQUIRED_SELECTION_ERROR
                render()
                return _PENDING
            return [options[i].value for i in sorted(state.selected)]
        if not options:
            return _PENDING
        if key.id in _UP_KEYS:
            state.cursor = (state.cursor - 1) % len(options)
        elif key.id in _DOWN_KEYS:
            state.cursor = (state.cursor + 1) % len(options)
        elif key.id == "space":
            state.selected ^= {state.cursor}
            state.error = None
        else:
            return _PENDING
        render()
        return _PENDING

    result = await _interact(terminal, render, handle)

    if result is CANCEL:
        region.collapse(head, prefix_line_count)
    else:
        labels = ", ".join(options[i].label for i in sorted(state.selected))
        region.collapse(
            _summary(label, label_color, theme.paint(labels or "(none)", theme.ACTIVE)),
            prefix_line_count,
        )
    return result

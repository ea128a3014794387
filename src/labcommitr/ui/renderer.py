"""Low-level terminal control: cursor movement, line clearing, raw input.

:class:`Terminal` is the only place that touches the tty. Prompts draw
through it and read keys from it, which lets tests substitute a scripted
in-memory terminal.
"""

from __future__ import annotations

import asyncio
import codecs
import os
import select
import shutil
import signal
import sys
import termios
import tty
from collections import deque
from collections.abc import Callable
from typing import IO

from rich.control import Control, ControlType

from labcommitr.logging import get_logger
from labcommitr.ui.keys import ESC, Key, decode_keys

logger = get_logger(__name__)

# How long to wait for the rest of an escape sequence after a bare ESC byte.
ESCAPE_TIMEOUT = 0.05
SIGINT_EXIT_CODE = 130

_SHOW_CURSOR = str(Control.show_cursor(True))
_HIDE_CURSOR = str(Control.show_cursor(False))
_ERASE_LINE = str(Control((ControlType.ERASE_IN_LINE, 2)))
_CLEAR_SCREEN = str(Control.clear()) + str(Control.home())


class Terminal:
    """Cursor/line primitives and raw-mode key input for a real tty."""

    def __init__(self, stdin: IO[str] | None = None, stdout: IO[str] | None = None) -> None:
        self._stdin = stdin
        self._stdout = stdout
        self._pending: deque[Key] = deque()
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

    @property
    def stdin(self) -> IO[str]:
        return self._stdin or sys.stdin

    @property
    def stdout(self) -> IO[str]:
        return self._stdout or sys.stdout

    # -----------------------------------------------------------------------
    # Output
    # -----------------------------------------------------------------------

    def is_tty(self) -> bool:
        """True only when both stdin and stdout are terminals."""
        try:
            return self.stdin.isatty() and self.stdout.isatty()
        except (AttributeError, ValueError):
            return False

    def width(self) -> int:
        return shutil.get_terminal_size((80, 24)).columns

    def write(self, text: str) -> None:
        self.stdout.write(text)
        self.stdout.flush()

    def hide_cursor(self) -> None:
        self.write(_HIDE_CURSOR)

    def show_cursor(self) -> None:
        self.write(_SHOW_CURSOR)

    def move_up(self, count: int = 1) -> None:
        if count > 0:
            self.write(str(Control.move(y=-count)))

    def clear_line(self) -> None:
        self.write(_ERASE_LINE + "\r")

    def clear_screen(self) -> None:
        self.write(_CLEAR_SCREEN)

    def clear_lines(self, count: int) -> None:
        """Erase *count* lines ending at the cursor line, leaving the cursor at column 0."""
        if count <= 0:
            return
        parts = []
        for i in range(count):
            parts.append(_ERASE_LINE)
            if i < count - 1:
                parts.append(str(Control.move(y=-1)))
        parts.append("\r")
        self.write("".join(parts))

    # -----------------------------------------------------------------------
    # Input
    # -----------------------------------------------------------------------

    def enter_raw_mode(self) -> Callable[[], None]:
        """Switch stdin to unbuffered, no-echo input and return the cleanup.

        Echo, canonical mode and signal generation are disabled (Ctrl+C
        arrives as a key); output processing stays on so ``\\n`` still
        returns the carriage. A SIGINT handler restores the terminal and
        exits with status 130. The returned callable is idempotent.
        """
        fd = self.stdin.fileno()
        saved = termios.tcgetattr(fd)
        mode = termios.tcgetattr(fd)
        mode[tty.IFLAG] &= ~(termios.ICRNL | termios.IXON)
        mode[tty.LFLAG] &= ~(termios.ECHO | termios.ICANON | termios.ISIG | termios.IEXTEN)
        mode[tty.CC][termios.VMIN] = 1
        mode[tty.CC][termios.VTIME] = 0
        termios.tcsetattr(fd, termios.TCSADRAIN, mode)

        restored = False

        def restore() -> None:
            nonlocal restored
            if restored:
                return
            restored = True
            self.show_cursor()
            termios.tcsetattr(fd, termios.TCSADRAIN, saved)

        def on_sigint(signum: int, frame: object) -> None:
            restore()
            sys.exit(SIGINT_EXIT_CODE)

        previous = signal.signal(signal.SIGINT, on_sigint)

        def cleanup() -> None:
            if restored:
                return
            signal.signal(signal.SIGINT, previous)
            restore()

        return cleanup

    def _read_chunk(self) -> str:
        """Block until at least one character is available and return what arrived."""
        fd = self.stdin.fileno()
        text = ""
        while True:
            data = os.read(fd, 1024)
            if not data:
                raise EOFError("stdin closed")
            text += self._decoder.decode(data)
            if text.endswith(ESC) and select.select([fd], [], [], ESCAPE_TIMEOUT)[0]:
                continue
            if text:
                return text

    async def read_key(self) -> Key:
        """Wait for the next key without blocking the event loop."""
        loop = asyncio.get_running_loop()
        while not self._pending:
            chunk = await loop.run_in_executor(None, self._read_chunk)
            self._pending.extend(decode_keys(chunk))
        return self._pending.popleft()


_default_terminal: Terminal | None = None


def get_terminal() -> Terminal:
    """Return the process-wide terminal bound to ``sys.stdin``/``sys.stdout``."""
    global _default_terminal  # noqa: PLW0603
    if _default_terminal is None:
        _default_terminal = Terminal()
    return _default_terminal

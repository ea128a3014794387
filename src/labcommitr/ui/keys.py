"""Decode raw terminal input into logical keys."""

from __future__ import annotations

from dataclasses import dataclass

ESC = "\x1b"

_SEQUENCES: dict[str, str] = {
    "\x1b[A": "up",
    "\x1b[B": "down",
    "\x1b[C": "right",
    "\x1b[D": "left",
    "\x1bOA": "up",
    "\x1bOB": "down",
    "\x1bOC": "right",
    "\x1bOD": "left",
    "\x1b[H": "home",
    "\x1b[F": "end",
    "\x1bOH": "home",
    "\x1bOF": "end",
    "\x1b[1~": "home",
    "\x1b[7~": "home",
    "\x1b[4~": "end",
    "\x1b[8~": "end",
    "\x1b[3~": "delete",
}
# Longest first so "\x1b[3~" is tried before any shorter prefix.
_SEQUENCE_ORDER = sorted(_SEQUENCES, key=len, reverse=True)


@dataclass(frozen=True)
class Key:
    """One logical keypress.

    ``name`` is ``up``, ``return``, ``backspace`` and so on for special keys,
    the lower-cased letter for letters, or the character itself. ``char``
    holds the text to insert for printable keys.
    """

    name: str
    char: str | None = None
    ctrl: bool = False

    @property
    def id(self) -> str:
        """Dispatch identifier: ``ctrl+c`` for control chords, otherwise ``name``."""
        return f"ctrl+{self.name}" if self.ctrl else self.name


def _csi_end(text: str, start: int) -> int:
    """Index just past an unrecognised CSI/SS3 sequence beginning at *start*."""
    i = start + 2
    while i < len(text):
        if "\x40" <= text[i] <= "\x7e":
            return i + 1
        i += 1
    return len(text)


def decode_keys(text: str) -> list[Key]:
    """Split a chunk of terminal input into keys.

    A chunk that is exactly ``ESC`` is the Escape key; escape sequences that
    are not recognised are dropped.
    """
    keys: list[Key] = []
    i = 0
    while i < len(text):
        ch = text[i]
        if ch == ESC:
            if i + 1 == len(text):
                keys.append(Key("escape"))
                i += 1
                continue
            for seq in _SEQUENCE_ORDER:
                if text.startswith(seq, i):
                    keys.append(Key(_SEQUENCES[seq]))
                    i += len(seq)
                    break
            else:
                nxt = text[i + 1]
                if nxt in "[O":
                    i = _csi_end(text, i)
                elif nxt == ESC:
                    keys.append(Key("escape"))
                    i += 1
                else:
                    # Alt+<char>
                    i += 2
            continue

        if ch in "\r\n":
            keys.append(Key("return"))
        elif ch in "\x7f\x08":
            keys.append(Key("backspace"))
        elif ch == "\t":
            keys.append(Key("tab"))
        elif ch == " ":
            keys.append(Key("space", char=" "))
        elif ord(ch) < 32:
            keys.append(Key(chr(ord(ch) + 96), ctrl=True))
        elif ch.isascii() and ch.isalpha():
            keys.append(Key(ch.lower(), char=ch))
        else:
            keys.append(Key(ch, char=ch))
        i += 1
    return keys

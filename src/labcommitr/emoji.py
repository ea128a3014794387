"""Terminal emoji support detection."""

from __future__ import annotations

import os
import sys
import unicodedata
from collections.abc import Mapping

_NON_EMOJI_TERMS = frozenset({"linux", "vt100", "vt220", "xterm-mono"})
# Zero-width joiner, variation selectors and the keycap combiner.
_EMOJI_JOINERS = frozenset({"\u200d", "\ufe0e", "\ufe0f", "\u20e3"})


def detect_emoji_support(
    env: Mapping[str, str] | None = None,
    *,
    platform: str | None = None,
    stdout_isatty: bool | None = None,
) -> bool:
    """Guess whether the current terminal renders emoji.

    ``FORCE_EMOJI_DETECTION`` overrides everything; ``NO_COLOR``, CI
    environments and dumb terminals disable emoji.
    """
    env = os.environ if env is None else env
    platform = sys.platform if platform is None else platform

    forced = env.get("FORCE_EMOJI_DETECTION")
    if forced is not None:
        return forced.lower() == "true" or forced == "1"
    if env.get("NO_COLOR"):
        return False
    if env.get("CI") in ("true", "1"):
        return False

    term = env.get("TERM")
    if term in ("dumb", "unknown"):
        return False

    if platform == "win32":
        return bool(env.get("WT_SESSION")) or env.get("CONEMUANSI") == "ON"

    if term:
        return term.lower() not in _NON_EMOJI_TERMS

    if stdout_isatty is None:
        stdout_isatty = sys.stdout.isatty()
    return stdout_isatty


def strip_emojis(text: str) -> str:
    """Remove emoji (symbol-other code points and their joiners) from *text*."""
    kept = [
        ch
        for ch in text
        if ch not in _EMOJI_JOINERS
        and unicodedata.category(ch) != "So"
        and not 0x1F3FB <= ord(ch) <= 0x1F3FF
    ]
    return "".join(kept).strip()


def format_for_display(text: str, emoji_supported: bool) -> str:
    return text if emoji_supported else strip_emojis(text)

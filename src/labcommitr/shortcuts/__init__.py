"""Keyboard shortcut assignment and lookup for select prompts."""

from __future__ import annotations

from labcommitr.shortcuts.mapping import (
    ShortcutMapping,
    auto_assign,
    format_label,
    key_for,
    match,
    resolve_shortcuts,
)

__all__ = [
    "ShortcutMapping",
    "auto_assign",
    "format_label",
    "key_for",
    "match",
    "resolve_shortcuts",
]

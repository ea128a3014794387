"""Terminal prompt framework."""

from __future__ import annotations

from labcommitr.ui.prompts import confirm, multiselect, select, text, wait_for_key
from labcommitr.ui.renderer import Terminal, get_terminal
from labcommitr.ui.types import CANCEL, Cancel, LabelColor, SelectOption, is_cancel

__all__ = [
    "CANCEL",
    "Cancel",
    "LabelColor",
    "SelectOption",
    "Terminal",
    "confirm",
    "get_terminal",
    "is_cancel",
    "multiselect",
    "select",
    "text",
    "wait_for_key",
]

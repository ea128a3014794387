"""Single-letter keyboard shortcuts for select prompts.

A :class:`ShortcutMapping` is built per prompt from the options shown and
any mappings the user configured. Keys are single lowercase ASCII letters
and both directions of the mapping are injective.
"""

from __future__ import annotations

import string
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from labcommitr.config.models import ShortcutsConfig

ALLOWED_CHARS = frozenset(string.ascii_lowercase)


@dataclass(frozen=True)
class ShortcutMapping:
    """Read-only bidirectional ``key <-> option value`` mapping."""

    key_to_value: Mapping[str, str]
    value_to_key: Mapping[str, str]

    def __len__(self) -> int:
        return len(self.key_to_value)


def _first_free_char(value: str, claimed: set[str]) -> str | None:
    for char in value.lower():
        if char in ALLOWED_CHARS and char not in claimed:
            return char
    return None


def auto_assign(
    option_values: Iterable[str],
    configured: Mapping[str, str] | None = None,
) -> ShortcutMapping:
    """Build a shortcut mapping for *option_values*.

    Configured entries win first: keys are lower-cased, and entries that
    target an unknown option, use a non-letter key or repeat a claimed key
    are dropped. Remaining options get the first unclaimed letter of their
    lower-cased value, or no shortcut at all. The result depends only on the
    option order and the configured pairs, never on mapping iteration order.
    """
    values = list(dict.fromkeys(option_values))
    configured = configured or {}

    by_value: dict[str, list[str]] = {}
    for key, value in configured.items():
        normalized = str(key).lower()
        if len(normalized) == 1 and normalized in ALLOWED_CHARS:
            by_value.setdefault(value, []).append(normalized)

    key_to_value: dict[str, str] = {}
    value_to_key: dict[str, str] = {}

    for value in values:
        for key in sorted(by_value.get(value, ())):
            if key not in key_to_value:
                key_to_value[key] = value
                value_to_key[value] = key
                break

    claimed = set(key_to_value)
    for value in values:
        if value in value_to_key:
            continue
        key = _first_free_char(value, claimed)
        if key is None:
            continue
        claimed.add(key)
        key_to_value[key] = value
        value_to_key[value] = key

    return ShortcutMapping(
        key_to_value=MappingProxyType(key_to_value),
        value_to_key=MappingProxyType(value_to_key),
    )


def match(input_char: str, mapping: ShortcutMapping | None) -> str | None:
    """Return the option bound to *input_char* (case-insensitive)."""
    if mapping is None or len(input_char) != 1:
        return None
    return mapping.key_to_value.get(input_char.lower())


def key_for(value: str, mapping: ShortcutMapping | None) -> str | None:
    """Return the key bound to option *value*, if any."""
    if mapping is None:
        return None
    return mapping.value_to_key.get(value)


def resolve_shortcuts(
    config: ShortcutsConfig | None,
    prompt_name: str,
    option_values: Iterable[str],
) -> ShortcutMapping | None:
    """Build the mapping for *prompt_name*, or ``None`` when shortcuts are off."""
    if config is None or not config.enabled:
        return None
    return auto_assign(option_values, config.prompts.get(prompt_name, {}))


def format_label(label: str, key: str | None, display_hints: bool) -> str:
    """Prefix *label* with ``[k]`` when a hint should be shown."""
    if not key or not display_hints:
        return label
    return f"[{key}] {label}"

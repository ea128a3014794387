"""Configuration data model.

A :class:`Configuration` is built once per command by merging the user's
YAML over the built-in defaults and is never mutated afterwards. Every
section is a frozen dataclass; list-valued fields are stored as tuples.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from pathlib import Path
from typing import Literal

# ---------------------------------------------------------------------------
# Configuration sections
# ---------------------------------------------------------------------------


class EditorPreference(StrEnum):
    """How the commit body is collected."""

    AUTO = "auto"
    INLINE = "inline"
    EDITOR = "editor"


@dataclass(frozen=True)
class CommitType:
    """One selectable commit type."""

    id: str
    description: str
    emoji: str | None = None


@dataclass(frozen=True)
class EmojiSettings:
    """The ``config`` section."""

    emoji_enabled: bool = True
    force_emoji_detection: bool | None = None


@dataclass(frozen=True)
class BodyConfig:
    """Body requirements under ``format.body``."""

    required: bool = False
    min_length: int = 0
    max_length: int | None = None
    editor_preference: EditorPreference = EditorPreference.AUTO


@dataclass(frozen=True)
class FormatConfig:
    """The ``format`` section."""

    template: str = "{emoji}{type}({scope}): {subject}"
    subject_max_length: int = 50
    body: BodyConfig = field(default_factory=BodyConfig)


@dataclass(frozen=True)
class ValidationRules:
    """The ``validation`` section."""

    require_scope_for: tuple[str, ...] = ()
    allowed_scopes: tuple[str, ...] = ()
    subject_min_length: int = 3
    prohibited_words: tuple[str, ...] = ()
    prohibited_words_body: tuple[str, ...] = ()


@dataclass(frozen=True)
class GitConfig:
    """Git integration switches under ``advanced.git``."""

    auto_stage: bool = False
    sign_commits: bool = False


@dataclass(frozen=True)
class ShortcutsConfig:
    """Keyboard shortcut settings under ``advanced.shortcuts``.

    ``prompts`` maps a prompt name (``type``, ``preview``, ``body``) to its
    configured ``key -> option value`` mapping.
    """

    enabled: bool = False
    display_hints: bool = True
    prompts: Mapping[str, Mapping[str, str]] = field(default_factory=dict)


@dataclass(frozen=True)
class AdvancedConfig:
    """The ``advanced`` section."""

    aliases: Mapping[str, str] = field(default_factory=dict)
    git: GitConfig = field(default_factory=GitConfig)
    shortcuts: ShortcutsConfig = field(default_factory=ShortcutsConfig)


@dataclass(frozen=True)
class Configuration:
    """The fully merged, validated configuration."""

    types: tuple[CommitType, ...]
    version: str = "1.0"
    config: EmojiSettings = field(default_factory=EmojiSettings)
    format: FormatConfig = field(default_factory=FormatConfig)
    validation: ValidationRules = field(default_factory=ValidationRules)
    advanced: AdvancedConfig = field(default_factory=AdvancedConfig)

    def find_type(self, type_id: str) -> CommitType | None:
        """Return the commit type with *type_id*, or ``None``."""
        for commit_type in self.types:
            if commit_type.id == type_id:
                return commit_type
        return None

    def resolve_type(self, value: str) -> CommitType | None:
        """Resolve a type id or one of its aliases."""
        target = self.advanced.aliases.get(value, value)
        return self.find_type(target)


# ---------------------------------------------------------------------------
# Loader results
# ---------------------------------------------------------------------------


class MarkerType(StrEnum):
    """What marked a directory as the project root."""

    GIT = "git"
    MANIFEST = "manifest"
    FILESYSTEM_ROOT = "filesystem-root"


@dataclass(frozen=True)
class ProjectRoot:
    """Result of walking up from a start directory."""

    path: Path
    marker_type: MarkerType
    is_monorepo: bool = False
    subprojects: tuple[Path, ...] = ()


ConfigSource = Literal["project", "defaults"]


@dataclass(frozen=True)
class ConfigLoadResult:
    """A loaded configuration plus where it came from."""

    config: Configuration
    source: ConfigSource
    path: Path | None
    loaded_at: datetime
    emoji_mode_active: bool


@dataclass
class CachedConfig:
    """Cache entry keyed by the absolute config file path."""

    data: ConfigLoadResult
    timestamp: float
    watched_paths: tuple[Path, ...]

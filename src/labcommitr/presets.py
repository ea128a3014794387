"""Built-in commit conventions offered by ``lab init``."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from labcommitr.config.models import CommitType
from labcommitr.shortcuts import auto_assign


class ScopeMode(StrEnum):
    OPTIONAL = "optional"
    SELECTIVE = "selective"
    ALWAYS = "always"
    NEVER = "never"


@dataclass(frozen=True)
class Preset:
    id: str
    name: str
    description: str
    types: tuple[CommitType, ...]
    emoji_enabled: bool = False
    scope_mode: ScopeMode = ScopeMode.OPTIONAL
    example: str = ""


CONVENTIONAL = Preset(
    id="conventional",
    name="Conventional Commits",
    description="Industry-standard format used by most open-source projects",
    example="fix(api): add security to treat container",
    types=(
        CommitType("feat", "A new feature for the user", "✨"),
        CommitType("fix", "A bug fix for the user", "🐛"),
        CommitType("docs", "Documentation changes", "📚"),
        CommitType("style", "Code style changes (formatting, semicolons, etc.)", "💄"),
        CommitType("refactor", "Code refactoring without changing functionality", "♻️"),
        CommitType("test", "Adding or updating tests", "🧪"),
        CommitType("chore", "Maintenance tasks, build changes, etc.", "🔧"),
    ),
)

GITMOJI = Preset(
    id="gitmoji",
    name="Gitmoji Style",
    description="Visual commits with emojis for better scannability",
    example="✨ feat(ui): add dark mode toggle",
    emoji_enabled=True,
    types=(
        CommitType("feat", "Introduce new features", "✨"),
        CommitType("fix", "Fix a bug", "🐛"),
        CommitType("docs", "Add or update documentation", "📚"),
        CommitType("style", "Improve structure or format of code", "🎨"),
        CommitType("refactor", "Refactor code", "♻️"),
        CommitType("perf", "Improve performance", "⚡"),
        CommitType("test", "Add or update tests", "✅"),
        CommitType("build", "Add or update build scripts", "👷"),
        CommitType("ci", "Add or update CI configuration", "💚"),
        CommitType("chore", "Miscellaneous chores", "🔧"),
    ),
)

ANGULAR = Preset(
    id="angular",
    name="Angular Convention",
    description="Strict format used by Angular and enterprise teams",
    example="perf(compiler): optimize template parsing",
    types=(
        CommitType("feat", "A new feature", "✨"),
        CommitType("fix", "A bug fix", "🐛"),
        CommitType("docs", "Documentation only changes", "📚"),
        CommitType("style", "Changes that do not affect code meaning", "💄"),
        CommitType("refactor", "Code change that neither fixes a bug nor adds a feature", "♻️"),
        CommitType("perf", "Code change that improves performance", "⚡"),
        CommitType("test", "Adding missing tests or correcting existing tests", "🧪"),
        CommitType("build", "Changes that affect the build system or dependencies", "🏗️"),
        CommitType("ci", "Changes to CI configuration files and scripts", "💚"),
        CommitType("chore", "Other changes that don't modify src or test files", "🔧"),
    ),
)

MINIMAL = Preset(
    id="minimal",
    name="Minimal Setup",
    description="Start with basics, customize everything yourself later",
    example="fix: add security to treat container",
    types=(
        CommitType("feat", "New feature", "✨"),
        CommitType("fix", "Bug fix", "🐛"),
        CommitType("docs", "Documentation", "📚"),
        CommitType("chore", "Maintenance", "🔧"),
    ),
)

PRESETS: dict[str, Preset] = {p.id: p for p in (CONVENTIONAL, GITMOJI, ANGULAR, MINIMAL)}


def get_preset(preset_id: str) -> Preset:
    """Look up a preset by id; raises ``KeyError`` listing the valid ids."""
    try:
        return PRESETS[preset_id]
    except KeyError:
        raise KeyError(
            f"Unknown preset '{preset_id}'. Choose one of: {', '.join(PRESETS)}"
        ) from None


def build_config(
    preset_id: str,
    *,
    emoji: bool | None = None,
    scope_mode: ScopeMode | None = None,
    scope_required_for: list[str] | None = None,
    auto_stage: bool = False,
    body_required: bool = False,
    sign_commits: bool = True,
) -> dict[str, Any]:
    """Produce the raw YAML mapping ``lab init`` writes for *preset_id*.

    Type shortcuts are pre-assigned from each type id so the generated file
    shows the user which keys are in play.
    """
    preset = get_preset(preset_id)
    mode = scope_mode or preset.scope_mode
    require_scope_for: list[str] = []
    if mode is ScopeMode.ALWAYS:
        require_scope_for = [t.id for t in preset.types]
    elif mode is ScopeMode.SELECTIVE and scope_required_for:
        require_scope_for = list(scope_required_for)

    type_shortcuts = auto_assign([t.id for t in preset.types])

    return {
        "version": "1.0",
        "config": {
            "emoji_enabled": preset.emoji_enabled if emoji is None else emoji,
            "force_emoji_detection": None,
        },
        "format": {
            "template": "{type}({scope}): {subject}",
            "subject_max_length": 50,
            "body": {
                "required": body_required,
                "min_length": 0,
                "max_length": None,
                "editor_preference": "auto",
            },
        },
        "types": [
            {"id": t.id, "description": t.description, "emoji": t.emoji} for t in preset.types
        ],
        "validation": {
            "require_scope_for": require_scope_for,
            "allowed_scopes": [],
            "subject_min_length": 3,
            "prohibited_words": [],
            "prohibited_words_body": [],
        },
        "advanced": {
            "aliases": {},
            "git": {"auto_stage": auto_stage, "sign_commits": sign_commits},
            "shortcuts": {
                "enabled": True,
                "display_hints": True,
                "prompts": {"type": {"mapping": dict(type_shortcuts.key_to_value)}},
            },
        },
    }

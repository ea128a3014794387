"""Built-in defaults and the merge of a raw config over them.

The merge walks an explicit field list per section. Keys the model does not
know are ignored (and logged) rather than copied through, so the result is
always a well-formed :class:`Configuration`. ``types`` is never merged: the
user's list replaces the built-in one verbatim.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from labcommitr.config.models import (
    AdvancedConfig,
    BodyConfig,
    CommitType,
    Configuration,
    EditorPreference,
    EmojiSettings,
    FormatConfig,
    GitConfig,
    ShortcutsConfig,
    ValidationRules,
)
from labcommitr.logging import get_logger

logger = get_logger(__name__)

DEFAULT_VERSION = "1.0"

DEFAULT_COMMIT_TYPES: tuple[CommitType, ...] = (
    CommitType("feat", "A new feature for the user", "✨"),
    CommitType("fix", "A bug fix for the user", "🐛"),
    CommitType("docs", "Documentation changes", "📚"),
    CommitType("style", "Code style changes (formatting, missing semicolons, etc.)", "💄"),
    CommitType("refactor", "Code refactoring without changing functionality", "♻️"),
    CommitType("test", "Adding or updating tests", "🧪"),
    CommitType("chore", "Maintenance tasks, build changes, etc.", "🔧"),
)

_TOP_LEVEL_KEYS = frozenset({"version", "config", "format", "types", "validation", "advanced"})
_CONFIG_KEYS = frozenset({"emoji_enabled", "force_emoji_detection"})
_FORMAT_KEYS = frozenset({"template", "subject_max_length", "body"})
_BODY_KEYS = frozenset({"required", "min_length", "max_length", "editor_preference"})
_VALIDATION_KEYS = frozenset(
    {
        "require_scope_for",
        "allowed_scopes",
        "subject_min_length",
        "prohibited_words",
        "prohibited_words_body",
    }
)
_ADVANCED_KEYS = frozenset({"aliases", "git", "shortcuts"})
_GIT_KEYS = frozenset({"auto_stage", "sign_commits"})
_SHORTCUT_KEYS = frozenset({"enabled", "display_hints", "prompts"})


def _section(raw: Mapping[str, Any], key: str, known: frozenset[str], where: str) -> Mapping[str, Any]:
    value = raw.get(key)
    if not isinstance(value, Mapping):
        return {}
    unknown = sorted(str(k) for k in set(value) - known)
    if unknown:
        logger.warning("Ignoring unknown keys in %s: %s", where, ", ".join(unknown))
    return value


def _pick(section: Mapping[str, Any], key: str, default: Any) -> Any:
    value = section.get(key)
    return default if value is None else value


def _build_types(raw_types: Any) -> tuple[CommitType, ...]:
    if not raw_types:
        return ()
    return tuple(
        CommitType(
            id=str(item["id"]),
            description=str(item.get("description", "")),
            emoji=item.get("emoji") or None,
        )
        for item in raw_types
    )


def _build_shortcuts(section: Mapping[str, Any]) -> ShortcutsConfig:
    defaults = ShortcutsConfig()
    prompts: dict[str, Mapping[str, str]] = {}
    raw_prompts = section.get("prompts")
    if isinstance(raw_prompts, Mapping):
        for prompt_name, prompt_cfg in raw_prompts.items():
            mapping = prompt_cfg.get("mapping") if isinstance(prompt_cfg, Mapping) else None
            if isinstance(mapping, Mapping):
                prompts[str(prompt_name)] = MappingProxyType(
                    {str(k): str(v) for k, v in mapping.items()}
                )
    return ShortcutsConfig(
        enabled=bool(_pick(section, "enabled", defaults.enabled)),
        display_hints=bool(_pick(section, "display_hints", defaults.display_hints)),
        prompts=MappingProxyType(prompts),
    )


def merge_with_defaults(raw: Mapping[str, Any]) -> Configuration:
    """Merge a validated raw configuration over the built-in defaults.

    Nested sections (``format.body``, ``advanced.git``, ``advanced.shortcuts``)
    merge field by field; a missing or ``null`` field keeps its default.
    """
    unknown = sorted(str(k) for k in set(raw) - _TOP_LEVEL_KEYS)
    if unknown:
        logger.warning("Ignoring unknown top-level keys: %s", ", ".join(unknown))

    cfg = _section(raw, "config", _CONFIG_KEYS, "config")
    fmt = _section(raw, "format", _FORMAT_KEYS, "format")
    body = _section(fmt, "body", _BODY_KEYS, "format.body")
    val = _section(raw, "validation", _VALIDATION_KEYS, "validation")
    adv = _section(raw, "advanced", _ADVANCED_KEYS, "advanced")
    git = _section(adv, "git", _GIT_KEYS, "advanced.git")
    shortcuts = _section(adv, "shortcuts", _SHORTCUT_KEYS, "advanced.shortcuts")

    body_defaults = BodyConfig()
    format_defaults = FormatConfig()
    rules_defaults = ValidationRules()

    return Configuration(
        version=str(_pick(raw, "version", DEFAULT_VERSION)),
        config=EmojiSettings(
            emoji_enabled=bool(_pick(cfg, "emoji_enabled", True)),
            force_emoji_detection=cfg.get("force_emoji_detection"),
        ),
        format=FormatConfig(
            template=str(_pick(fmt, "template", format_defaults.template)),
            subject_max_length=int(
                _pick(fmt, "subject_max_length", format_defaults.subject_max_length)
            ),
            body=BodyConfig(
                required=bool(_pick(body, "required", body_defaults.required)),
                min_length=int(_pick(body, "min_length", body_defaults.min_length)),
                max_length=body.get("max_length"),
                editor_preference=EditorPreference(
                    _pick(body, "editor_preference", body_defaults.editor_preference)
                ),
            ),
        ),
        types=_build_types(raw.get("types")),
        validation=ValidationRules(
            require_scope_for=tuple(_pick(val, "require_scope_for", ())),
            allowed_scopes=tuple(_pick(val, "allowed_scopes", ())),
            subject_min_length=int(
                _pick(val, "subject_min_length", rules_defaults.subject_min_length)
            ),
            prohibited_words=tuple(_pick(val, "prohibited_words", ())),
            prohibited_words_body=tuple(_pick(val, "prohibited_words_body", ())),
        ),
        advanced=AdvancedConfig(
            aliases=MappingProxyType({str(k): str(v) for k, v in _pick(adv, "aliases", {}).items()}),
            git=GitConfig(
                auto_stage=bool(_pick(git, "auto_stage", False)),
                sign_commits=bool(_pick(git, "sign_commits", False)),
            ),
            shortcuts=_build_shortcuts(shortcuts),
        ),
    )


def create_fallback_config() -> Configuration:
    """Defaults plus the built-in commit types, used when no file exists."""
    return merge_with_defaults({"types": [config_type_to_dict(t) for t in DEFAULT_COMMIT_TYPES]})


def config_type_to_dict(commit_type: CommitType) -> dict[str, str]:
    item = {"id": commit_type.id, "description": commit_type.description}
    if commit_type.emoji:
        item["emoji"] = commit_type.emoji
    return item


def config_to_dict(config: Configuration) -> dict[str, Any]:
    """Serialize a configuration back to the raw YAML shape."""
    body = config.format.body
    shortcuts = config.advanced.shortcuts
    return {
        "version": config.version,
        "config": {
            "emoji_enabled": config.config.emoji_enabled,
            "force_emoji_detection": config.config.force_emoji_detection,
        },
        "format": {
            "template": config.format.template,
            "subject_max_length": config.format.subject_max_length,
            "body": {
                "required": body.required,
                "min_length": body.min_length,
                "max_length": body.max_length,
                "editor_preference": str(body.editor_preference),
            },
        },
        "types": [config_type_to_dict(t) for t in config.types],
        "validation": {
            "require_scope_for": list(config.validation.require_scope_for),
            "allowed_scopes": list(config.validation.allowed_scopes),
            "subject_min_length": config.validation.subject_min_length,
            "prohibited_words": list(config.validation.prohibited_words),
            "prohibited_words_body": list(config.validation.prohibited_words_body),
        },
        "advanced": {
            "aliases": dict(config.advanced.aliases),
            "git": {
                "auto_stage": config.advanced.git.auto_stage,
                "sign_commits": config.advanced.git.sign_commits,
            },
            "shortcuts": {
                "enabled": shortcuts.enabled,
                "display_hints": shortcuts.display_hints,
                "prompts": {
                    name: {"mapping": dict(mapping)}
                    for name, mapping in shortcuts.prompts.items()
                },
            },
        },
    }

"""Project configuration: discovery, validation, defaults and caching."""

from __future__ import annotations

from labcommitr.config.defaults import (
    DEFAULT_COMMIT_TYPES,
    config_to_dict,
    create_fallback_config,
    merge_with_defaults,
)
from labcommitr.config.errors import ConfigError, ValidationError, ValidationResult
from labcommitr.config.loader import (
    CONFIG_FILENAMES,
    ConfigLoader,
    load_config,
    load_raw_config,
)
from labcommitr.config.models import (
    AdvancedConfig,
    BodyConfig,
    CommitType,
    ConfigLoadResult,
    Configuration,
    EditorPreference,
    EmojiSettings,
    FormatConfig,
    GitConfig,
    MarkerType,
    ProjectRoot,
    ShortcutsConfig,
    ValidationRules,
)
from labcommitr.config.validator import ConfigValidator

__all__ = [
    "CONFIG_FILENAMES",
    "DEFAULT_COMMIT_TYPES",
    "AdvancedConfig",
    "BodyConfig",
    "CommitType",
    "ConfigError",
    "ConfigLoadResult",
    "ConfigLoader",
    "ConfigValidator",
    "Configuration",
    "EditorPreference",
    "EmojiSettings",
    "FormatConfig",
    "GitConfig",
    "MarkerType",
    "ProjectRoot",
    "ShortcutsConfig",
    "ValidationError",
    "ValidationResult",
    "ValidationRules",
    "config_to_dict",
    "create_fallback_config",
    "load_config",
    "load_raw_config",
    "merge_with_defaults",
]

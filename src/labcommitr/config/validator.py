"""Schema validation for raw (parsed but unmerged) configurations.

:meth:`ConfigValidator.validate` never raises. Every independent defect is
reported as its own :class:`ValidationError`, so a user can fix a broken file
in one pass.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from labcommitr.config.errors import ValidationError, ValidationResult
from labcommitr.config.models import EditorPreference

TYPE_ID_PATTERN = re.compile(r"^[a-z]+$")
SHORTCUT_PROMPTS = ("type", "preview", "body")
_OPTIONAL_SECTIONS = ("config", "format", "validation", "advanced")

_TYPE_ID_EXAMPLES = ("feat", "fix", "docs")


def _describe(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int | float):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "list"
    if isinstance(value, Mapping):
        return "mapping"
    return type(value).__name__


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def categorize_invalid_chars(value: str) -> list[str]:
    """Describe each character of *value* outside ``a-z``.

    Returns entries like ``"uppercase 'F'"`` in first-seen order, without
    duplicates.
    """
    found: list[str] = []
    for char in value:
        if "a" <= char <= "z":
            continue
        if char.isupper():
            label = f"uppercase '{char}'"
        elif char == "-":
            label = "dash '-'"
        elif char == "_":
            label = "underscore '_'"
        elif char.isdigit():
            label = f"number '{char}'"
        elif char.isspace():
            label = "space"
        else:
            label = f"character '{char}'"
        if label not in found:
            found.append(label)
    return found


class ConfigValidator:
    """Validates a raw configuration mapping against the config schema."""

    def validate(self, raw: Any) -> ValidationResult:
        """Check *raw* and collect every violation."""
        if not isinstance(raw, Mapping):
            return ValidationResult(
                errors=(
                    ValidationError(
                        field="root",
                        field_display="Configuration file",
                        message="Configuration must be an object",
                        user_message="The configuration must be a YAML mapping of keys to values",
                        value=raw,
                        expected_format="A mapping with at least a 'types' key",
                        issue=f"Found {_describe(raw)}",
                    ),
                )
            )

        errors: list[ValidationError] = []
        errors.extend(self._validate_types(raw))
        errors.extend(self._validate_sections(raw))
        return ValidationResult(errors=tuple(errors))

    # -----------------------------------------------------------------------
    # types
    # -----------------------------------------------------------------------

    def _validate_types(self, raw: Mapping[str, Any]) -> list[ValidationError]:
        types = raw.get("types")
        if types is None:
            return [
                ValidationError(
                    field="types",
                    field_display="Commit types",
                    message='Required field "types" is missing',
                    user_message="No commit types are defined",
                    expected_format="A list of commit types with 'id' and 'description'",
                    examples=("- id: feat\n  description: A new feature",),
                    issue="Missing 'types' field",
                )
            ]
        if not isinstance(types, list):
            return [
                ValidationError(
                    field="types",
                    field_display="Commit types",
                    message='Field "types" must be an array',
                    user_message="Commit types must be a list",
                    value=types,
                    expected_format="A YAML list (each item starting with '-')",
                    issue=f"Found {_describe(types)}",
                )
            ]
        if not types:
            return [
                ValidationError(
                    field="types",
                    field_display="Commit types",
                    message='Field "types" must contain at least one commit type',
                    user_message="At least one commit type is required",
                    value=types,
                    expected_format="A non-empty list of commit types",
                    examples=("- id: feat\n  description: A new feature",),
                    issue="Empty types array",
                )
            ]

        errors: list[ValidationError] = []
        seen: dict[str, int] = {}
        for index, item in enumerate(types):
            errors.extend(self._validate_commit_type(item, index))
            if isinstance(item, Mapping) and isinstance(item.get("id"), str):
                type_id = item["id"]
                if type_id in seen:
                    errors.append(
                        ValidationError(
                            field=f"types[{index}].id",
                            field_display=f"Commit type #{index + 1} id",
                            message=f'Duplicate type id "{type_id}"',
                            user_message=f"The id '{type_id}' is already used by commit type #{seen[type_id] + 1}",
                            value=type_id,
                            expected_format="Each commit type id must be unique",
                            issue="Duplicate id",
                        )
                    )
                else:
                    seen[type_id] = index
        return errors

    def _validate_commit_type(self, item: Any, index: int) -> list[ValidationError]:
        prefix = f"types[{index}]"
        display = f"Commit type #{index + 1}"
        if not isinstance(item, Mapping):
            return [
                ValidationError(
                    field=prefix,
                    field_display=display,
                    message="Each commit type must be an object",
                    user_message="Each commit type must be a mapping with 'id' and 'description'",
                    value=item,
                    expected_format="id: <lowercase letters>, description: <text>",
                    issue=f"Found {_describe(item)}",
                )
            ]

        errors: list[ValidationError] = []
        type_id = item.get("id")
        id_display = f"{display} id"
        if type_id is None:
            errors.append(
                ValidationError(
                    field=f"{prefix}.id",
                    field_display=id_display,
                    message='Required field "id" is missing',
                    user_message="The commit type has no id",
                    expected_format="Lowercase letters only (a-z)",
                    examples=_TYPE_ID_EXAMPLES,
                    issue="Missing 'id' field",
                )
            )
        elif not isinstance(type_id, str):
            errors.append(
                ValidationError(
                    field=f"{prefix}.id",
                    field_display=id_display,
                    message='Field "id" must be a string',
                    user_message="The commit type id must be text",
                    value=type_id,
                    expected_format="Lowercase letters only (a-z)",
                    examples=_TYPE_ID_EXAMPLES,
                    issue=f"Found {_describe(type_id)}",
                )
            )
        elif not type_id.strip():
            errors.append(
                ValidationError(
                    field=f"{prefix}.id",
                    field_display=id_display,
                    message='Field "id" cannot be empty',
                    user_message="The commit type id is empty",
                    value=type_id,
                    expected_format="Lowercase letters only (a-z)",
                    examples=_TYPE_ID_EXAMPLES,
                    issue="Empty id",
                )
            )
        elif not TYPE_ID_PATTERN.match(type_id):
            invalid = categorize_invalid_chars(type_id)
            errors.append(
                ValidationError(
                    field=f"{prefix}.id",
                    field_display=id_display,
                    message='Field "id" must contain only lowercase letters (a-z)',
                    user_message=f"The id '{type_id}' contains characters that are not allowed",
                    value=type_id,
                    expected_format="Lowercase letters only (a-z)",
                    examples=_TYPE_ID_EXAMPLES,
                    issue=f"Contains invalid characters: {', '.join(invalid)}",
                )
            )

        description = item.get("description")
        desc_display = f"{display} description"
        if description is None:
            errors.append(
                ValidationError(
                    field=f"{prefix}.description",
                    field_display=desc_display,
                    message='Required field "description" is missing',
                    user_message="The commit type has no description",
                    expected_format="A short sentence describing the type",
                    examples=("A new feature for the user",),
                    issue="Missing 'description' field",
                )
            )
        elif not isinstance(description, str):
            errors.append(
                ValidationError(
                    field=f"{prefix}.description",
                    field_display=desc_display,
                    message='Field "description" must be a string',
                    user_message="The description must be text",
                    value=description,
                    expected_format="A short sentence describing the type",
                    issue=f"Found {_describe(description)}",
                )
            )
        elif not description.strip():
            errors.append(
                ValidationError(
                    field=f"{prefix}.description",
                    field_display=desc_display,
                    message='Field "description" cannot be empty',
                    user_message="The description is empty",
                    value=description,
                    expected_format="A short sentence describing the type",
                    issue="Empty description",
                )
            )

        if "emoji" in item and item["emoji"] is not None and not isinstance(item["emoji"], str):
            errors.append(
                ValidationError(
                    field=f"{prefix}.emoji",
                    field_display=f"{display} emoji",
                    message='Field "emoji" must be a string',
                    user_message="The emoji must be text",
                    value=item["emoji"],
                    expected_format="A single emoji character",
                    examples=("✨", "🐛"),
                    issue=f"Found {_describe(item['emoji'])}",
                )
            )
        return errors

    # -----------------------------------------------------------------------
    # optional sections
    # -----------------------------------------------------------------------

    def _validate_sections(self, raw: Mapping[str, Any]) -> list[ValidationError]:
        errors: list[ValidationError] = []
        version = raw.get("version")
        if version is not None and not isinstance(version, str):
            errors.append(
                ValidationError(
                    field="version",
                    field_display="Version",
                    message='Field "version" must be a string',
                    user_message="The version must be quoted text",
                    value=version,
                    expected_format='A quoted version string such as "1.0"',
                    examples=('"1.0"',),
                    issue=f"Found {_describe(version)}",
                )
            )

        for name in _OPTIONAL_SECTIONS:
            section = raw.get(name)
            if section is None:
                continue
            if not isinstance(section, Mapping):
                errors.append(
                    ValidationError(
                        field=name,
                        field_display=f"Section '{name}'",
                        message=f'Field "{name}" must be an object',
                        user_message=f"The '{name}' section must be a mapping",
                        value=section,
                        expected_format="Indented key: value pairs",
                        issue=f"Found {_describe(section)}",
                    )
                )
                continue
            check = getattr(self, f"_validate_{name}_section")
            errors.extend(check(section))
        return errors

    def _field_error(
        self, path: str, value: Any, expected: str, *, issue: str | None = None
    ) -> ValidationError:
        return ValidationError(
            field=path,
            field_display=path,
            message=f'Field "{path}" must be {expected}',
            user_message=f"'{path}' must be {expected}",
            value=value,
            expected_format=expected,
            issue=issue or f"Found {_describe(value)}",
        )

    def _check_bool(self, section: Mapping[str, Any], key: str, path: str) -> list[ValidationError]:
        value = section.get(key)
        if value is None or isinstance(value, bool):
            return []
        return [self._field_error(path, value, "true or false")]

    def _check_int(
        self, section: Mapping[str, Any], key: str, path: str, *, minimum: int
    ) -> list[ValidationError]:
        value = section.get(key)
        if value is None:
            return []
        if not _is_int(value):
            return [self._field_error(path, value, "a whole number")]
        if value < minimum:
            return [
                self._field_error(
                    path, value, f"a whole number of at least {minimum}", issue=f"Found {value}"
                )
            ]
        return []

    def _check_str_list(self, section: Mapping[str, Any], key: str, path: str) -> list[ValidationError]:
        value = section.get(key)
        if value is None:
            return []
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            return [self._field_error(path, value, "a list of strings")]
        return []

    def _validate_config_section(self, section: Mapping[str, Any]) -> list[ValidationError]:
        return self._check_bool(section, "emoji_enabled", "config.emoji_enabled") + self._check_bool(
            section, "force_emoji_detection", "config.force_emoji_detection"
        )

    def _validate_format_section(self, section: Mapping[str, Any]) -> list[ValidationError]:
        errors: list[ValidationError] = []
        template = section.get("template")
        if template is not None:
            if not isinstance(template, str):
                errors.append(self._field_error("format.template", template, "a string"))
            elif "{type}" not in template or "{subject}" not in template:
                errors.append(
                    self._field_error(
                        "format.template",
                        template,
                        "a template containing {type} and {subject}",
                        issue="Missing required placeholder",
                    )
                )
        errors.extend(
            self._check_int(section, "subject_max_length", "format.subject_max_length", minimum=1)
        )

        body = section.get("body")
        if body is None:
            return errors
        if not isinstance(body, Mapping):
            errors.append(self._field_error("format.body", body, "a mapping"))
            return errors
        errors.extend(self._check_bool(body, "required", "format.body.required"))
        errors.extend(self._check_int(body, "min_length", "format.body.min_length", minimum=0))
        errors.extend(self._check_int(body, "max_length", "format.body.max_length", minimum=1))
        preference = body.get("editor_preference")
        allowed = [p.value for p in EditorPreference]
        if preference is not None and preference not in allowed:
            errors.append(
                self._field_error(
                    "format.body.editor_preference",
                    preference,
                    f"one of: {', '.join(allowed)}",
                    issue=f"Found {preference!r}",
                )
            )
        return errors

    def _validate_validation_section(self, section: Mapping[str, Any]) -> list[ValidationError]:
        errors: list[ValidationError] = []
        for key in (
            "require_scope_for",
            "allowed_scopes",
            "prohibited_words",
            "prohibited_words_body",
        ):
            errors.extend(self._check_str_list(section, key, f"validation.{key}"))
        errors.extend(
            self._check_int(section, "subject_min_length", "validation.subject_min_length", minimum=0)
        )
        return errors

    def _validate_advanced_section(self, section: Mapping[str, Any]) -> list[ValidationError]:
        errors: list[ValidationError] = []
        aliases = section.get("aliases")
        if aliases is not None and (
            not isinstance(aliases, Mapping)
            or not all(isinstance(k, str) and isinstance(v, str) for k, v in aliases.items())
        ):
            errors.append(self._field_error("advanced.aliases", aliases, "a mapping of alias to type id"))

        git = section.get("git")
        if git is not None:
            if isinstance(git, Mapping):
                errors.extend(self._check_bool(git, "auto_stage", "advanced.git.auto_stage"))
                errors.extend(self._check_bool(git, "sign_commits", "advanced.git.sign_commits"))
            else:
                errors.append(self._field_error("advanced.git", git, "a mapping"))

        shortcuts = section.get("shortcuts")
        if shortcuts is not None:
            if isinstance(shortcuts, Mapping):
                errors.extend(self._validate_shortcuts(shortcuts))
            else:
                errors.append(self._field_error("advanced.shortcuts", shortcuts, "a mapping"))
        return errors

    def _validate_shortcuts(self, shortcuts: Mapping[str, Any]) -> list[ValidationError]:
        errors = self._check_bool(shortcuts, "enabled", "advanced.shortcuts.enabled")
        errors += self._check_bool(shortcuts, "display_hints", "advanced.shortcuts.display_hints")

        prompts = shortcuts.get("prompts")
        if prompts is None:
            return errors
        if not isinstance(prompts, Mapping):
            errors.append(self._field_error("advanced.shortcuts.prompts", prompts, "a mapping"))
            return errors

        for prompt_name in SHORTCUT_PROMPTS:
            prompt_cfg = prompts.get(prompt_name)
            if prompt_cfg is None:
                continue
            base = f"advanced.shortcuts.prompts.{prompt_name}"
            if not isinstance(prompt_cfg, Mapping):
                errors.append(self._field_error(base, prompt_cfg, "a mapping"))
                continue
            mapping = prompt_cfg.get("mapping")
            if mapping is None:
                continue
            if not isinstance(mapping, Mapping):
                errors.append(self._field_error(f"{base}.mapping", mapping, "a mapping of key to option"))
                continue
            errors.extend(self._validate_shortcut_mapping(mapping, f"{base}.mapping"))
        return errors

    def _validate_shortcut_mapping(self, mapping: Mapping[Any, Any], base: str) -> list[ValidationError]:
        errors: list[ValidationError] = []
        seen: set[str] = set()
        reported: set[str] = set()
        for key, value in mapping.items():
            path = f"{base}.{key}"
            key_text = str(key)
            if len(key_text) != 1 or not key_text.isascii() or not key_text.isalpha():
                errors.append(
                    ValidationError(
                        field=path,
                        field_display=path,
                        message="Shortcut key must be a single letter",
                        user_message=f"The shortcut key '{key_text}' is not a single letter",
                        value=key,
                        expected_format="A single lowercase letter (a-z)",
                        examples=("f", "x"),
                        issue="Invalid shortcut key",
                    )
                )
            else:
                lowered = key_text.lower()
                if lowered in seen:
                    if lowered not in reported:
                        reported.add(lowered)
                        errors.append(
                            ValidationError(
                                field=path,
                                field_display=path,
                                message=f"Duplicate shortcut key '{lowered}'",
                                user_message=f"The shortcut key '{lowered}' is assigned more than once",
                                value=key,
                                expected_format="Each key used once (keys are case-insensitive)",
                                issue="Duplicate shortcut key",
                            )
                        )
                else:
                    seen.add(lowered)
                if key_text != lowered:
                    errors.append(
                        ValidationError(
                            field=path,
                            field_display=path,
                            message="Shortcut key must be lowercase",
                            user_message=f"Use '{lowered}' instead of '{key_text}'",
                            value=key,
                            expected_format="A single lowercase letter (a-z)",
                            examples=(lowered,),
                            issue="Uppercase shortcut key",
                        )
                    )
            if not isinstance(value, str):
                errors.append(self._field_error(path, value, "an option value (string)"))
        return errors

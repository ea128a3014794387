"""The questions asked while building a commit.

Each ``prompt_*`` coroutine raises :class:`~labcommitr.errors.Cancelled`
when the user dismisses it, so the workflow can clean up in one place.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from enum import StrEnum
from typing import TypeVar

from labcommitr.commit.rules import RuleViolation, validate_body, validate_scope, validate_subject
from labcommitr.config.models import CommitType, Configuration, EditorPreference
from labcommitr.editor import EditorError, detect_editor, edit_in_editor
from labcommitr.errors import Cancelled, WorkflowError
from labcommitr.git.models import FileStatus, StagedFile, StagingResult
from labcommitr.shortcuts import ShortcutMapping, format_label, key_for, resolve_shortcuts
from labcommitr.ui import SelectOption, Terminal, display, get_terminal, is_cancel, select, text, theme

T = TypeVar("T")

CUSTOM_SCOPE = "__custom__"
SCOPE_REQUIRED = "Scope is required for this commit type"

_STATUS_NAMES = {
    FileStatus.MODIFIED: "Modified",
    FileStatus.ADDED: "Added",
    FileStatus.DELETED: "Deleted",
    FileStatus.RENAMED: "Renamed",
    FileStatus.COPIED: "Copied",
}
_STATUS_STYLES = {
    FileStatus.MODIFIED: theme.MODIFIED,
    FileStatus.ADDED: theme.ADDED,
    FileStatus.DELETED: theme.DELETED,
    FileStatus.RENAMED: theme.RENAMED,
    FileStatus.COPIED: theme.RENAMED,
}


class PreviewAction(StrEnum):
    COMMIT = "commit"
    EDIT_TYPE = "edit-type"
    EDIT_SCOPE = "edit-scope"
    EDIT_SUBJECT = "edit-subject"
    EDIT_BODY = "edit-body"
    CANCEL = "cancel"


_PREVIEW_LABELS = {
    PreviewAction.COMMIT: "Create commit",
    PreviewAction.EDIT_TYPE: "Edit type",
    PreviewAction.EDIT_SCOPE: "Edit scope",
    PreviewAction.EDIT_SUBJECT: "Edit subject",
    PreviewAction.EDIT_BODY: "Edit body",
    PreviewAction.CANCEL: "Cancel",
}


def _unwrap(value: T) -> T:
    if is_cancel(value):
        raise Cancelled()
    return value


def _with_shortcuts(
    config: Configuration, prompt_name: str, options: Sequence[SelectOption[str]]
) -> tuple[list[SelectOption[str]], ShortcutMapping | None]:
    """Attach shortcut hints to *options* for *prompt_name*."""
    shortcuts_cfg = config.advanced.shortcuts
    mapping = resolve_shortcuts(shortcuts_cfg, prompt_name, [o.value for o in options])
    if mapping is None:
        return list(options), None
    labelled = [
        SelectOption(
            o.value,
            format_label(o.label, key_for(o.value, mapping), shortcuts_cfg.display_hints),
            o.hint,
        )
        for o in options
    ]
    return labelled, mapping


def _violation_text(violations: Sequence[RuleViolation]) -> str | None:
    return str(violations[0]) if violations else None


def show_violations(violations: Sequence[RuleViolation], *, terminal: Terminal | None = None) -> None:
    display.status_error("Validation failed:", terminal=terminal)
    for violation in violations:
        display.indented(f"  • {violation}", terminal=terminal)


def rejected_answer(
    field: str, flag: str, violations: Sequence[RuleViolation], terminal: Terminal | None
) -> WorkflowError:
    """The error for an answer that still breaks a rule once the prompt returned.

    Without a terminal the prompts fall back to empty answers, so the
    message points at the command-line flag instead.
    """
    if (terminal or get_terminal()).is_tty():
        message = f"Commit {field} failed validation"
    else:
        message = f"lab commit needs an interactive terminal to ask for the {field}"
    return WorkflowError(
        message,
        details="\n".join(f"  • {v}" for v in violations),
        solutions=[f"Pass the {field} with {flag}", "Run lab commit from an interactive terminal"],
    )


# ---------------------------------------------------------------------------
# Type
# ---------------------------------------------------------------------------


def resolve_type_flag(config: Configuration, value: str) -> CommitType:
    """Resolve ``--type`` (an id or alias) or raise a :class:`WorkflowError`."""
    commit_type = config.resolve_type(value)
    if commit_type is None:
        raise WorkflowError(
            f"Invalid commit type '{value}'",
            details="Available types:\n"
            + "\n".join(f"  • {t.id} - {t.description}" for t in config.types),
            solutions=[
                "Use one of the available types listed above",
                "Add the type (or an alias) to your configuration file",
            ],
        )
    return commit_type


async def prompt_type(
    config: Configuration,
    *,
    current: str | None = None,
    show_emoji: bool = False,
    terminal: Terminal | None = None,
) -> CommitType:
    if current is None and not (terminal or get_terminal()).is_tty():
        raise rejected_answer("type", "--type", [RuleViolation("No commit type given")], terminal)

    aliases: dict[str, list[str]] = {}
    for alias, target in config.advanced.aliases.items():
        aliases.setdefault(target, []).append(alias)

    width = max(len(t.id) for t in config.types)
    options = []
    for commit_type in config.types:
        emoji = f"{commit_type.emoji} " if show_emoji and commit_type.emoji else ""
        hint = f"alias: {', '.join(aliases[commit_type.id])}" if commit_type.id in aliases else None
        options.append(
            SelectOption(
                commit_type.id,
                f"{emoji}{commit_type.id.ljust(width)}  {commit_type.description}",
                hint,
            )
        )
    options, mapping = _with_shortcuts(config, "type", options)

    chosen = _unwrap(
        await select(
            options,
            "Select commit type:",
            label="type",
            label_color="magenta",
            initial_value=current,
            shortcuts=mapping,
            terminal=terminal,
        )
    )
    commit_type = config.find_type(chosen)
    if commit_type is None:
        raise WorkflowError(f"Unknown commit type '{chosen}'")
    return commit_type


# ---------------------------------------------------------------------------
# Scope
# ---------------------------------------------------------------------------


def check_scope_flag(config: Configuration, type_id: str, scope: str) -> str | None:
    """Validate ``--scope``; an empty value means no scope."""
    violation = validate_scope(config, type_id, scope)
    if violation is not None:
        raise WorkflowError(violation.message, details=violation.context)
    return scope or None


async def prompt_scope(
    config: Configuration,
    type_id: str,
    *,
    current: str | None = None,
    terminal: Terminal | None = None,
) -> str | None:
    required = type_id in config.validation.require_scope_for
    suffix = f"(required for '{type_id}')" if required else "(optional)"

    def check(value: str) -> str | None:
        if required and not value.strip():
            return SCOPE_REQUIRED
        return None

    allowed = config.validation.allowed_scopes
    if required and not current and not (terminal or get_terminal()).is_tty():
        raise rejected_answer("scope", "--scope", [RuleViolation(SCOPE_REQUIRED)], terminal)
    if allowed:
        options = [SelectOption(s, s) for s in allowed]
        if not required:
            options.insert(0, SelectOption("", "(none)"))
        options.append(SelectOption(CUSTOM_SCOPE, "(custom) Type a custom scope"))
        chosen = _unwrap(
            await select(
                options,
                f"Select scope {suffix}:",
                label="scope",
                label_color="blue",
                initial_value=current,
                terminal=terminal,
            )
        )
        if chosen != CUSTOM_SCOPE:
            return chosen or None

    scope = _unwrap(
        await text(
            f"Enter scope {suffix}:",
            label="scope",
            label_color="blue",
            initial_value=current if current not in allowed else None,
            validate=check,
            terminal=terminal,
        )
    ).strip()
    error = check(scope)
    if error:
        raise rejected_answer("scope", "--scope", [RuleViolation(error)], terminal)
    return scope or None


# ---------------------------------------------------------------------------
# Subject
# ---------------------------------------------------------------------------


def check_subject_flag(config: Configuration, subject: str) -> str:
    violations = validate_subject(config, subject)
    if violations:
        raise WorkflowError(
            "Subject failed validation",
            details="\n".join(f"  • {v}" for v in violations),
        )
    return subject


async def prompt_subject(
    config: Configuration,
    *,
    current: str | None = None,
    terminal: Terminal | None = None,
) -> str:
    subject = _unwrap(
        await text(
            f"Enter commit subject (max {config.format.subject_max_length} chars):",
            label="subject",
            label_color="cyan",
            initial_value=current,
            validate=lambda value: _violation_text(validate_subject(config, value.strip())),
            terminal=terminal,
        )
    ).strip()
    violations = validate_subject(config, subject)
    if violations:
        raise rejected_answer("subject", "--message", violations, terminal)
    return subject


# ---------------------------------------------------------------------------
# Body
# ---------------------------------------------------------------------------


async def _body_method(
    config: Configuration, current: str | None, terminal: Terminal | None
) -> str:
    required = config.format.body.required
    options = [
        SelectOption("inline", "Type inline"),
        SelectOption("editor", "Open in editor"),
    ]
    if not required:
        options.append(SelectOption("skip", "Skip (no body)"))
    options, mapping = _with_shortcuts(config, "body", options)
    message = "Enter commit body (required):" if required else "Enter commit body (optional):"
    return _unwrap(
        await select(
            options,
            message,
            label="body",
            label_color="yellow",
            initial_value="editor" if current and "\n" in current else None,
            shortcuts=mapping,
            terminal=terminal,
        )
    )


async def _inline_body(
    config: Configuration, current: str | None, terminal: Terminal | None
) -> str | None:
    rules = config.format.body
    if rules.required:
        message = f"Enter commit body (required, min {rules.min_length} chars):"
    else:
        message = "Enter commit body (optional):"
    body = _unwrap(
        await text(
            message,
            label="body",
            label_color="yellow",
            placeholder=None if rules.required else "Press Enter to skip",
            initial_value=current,
            validate=lambda value: _violation_text(validate_body(config, value.strip())),
            terminal=terminal,
        )
    ).strip()
    violations = validate_body(config, body)
    if violations:
        raise rejected_answer("body", "--body", violations, terminal)
    return body or None


async def prompt_body(
    config: Configuration,
    *,
    current: str | None = None,
    terminal: Terminal | None = None,
) -> str | None:
    """Collect the body inline or in an editor per ``format.body.editor_preference``."""
    if not (terminal or get_terminal()).is_tty():
        return await _inline_body(config, current, terminal)

    preference = config.format.body.editor_preference
    editor = detect_editor() if preference is not EditorPreference.INLINE else None

    if editor is None:
        if preference is EditorPreference.EDITOR:
            display.status_info("Editor not available, using inline input", terminal=terminal)
        method = "inline"
    elif preference is EditorPreference.EDITOR:
        method = "editor"
    else:
        method = await _body_method(config, current, terminal)

    while True:
        if method == "skip":
            return None
        if method == "inline":
            return await _inline_body(config, current, terminal)

        display.status_info("Opening editor...", terminal=terminal)
        try:
            edited = await asyncio.to_thread(edit_in_editor, current or "", editor)
        except EditorError as exc:
            display.status_error(str(exc), terminal=terminal)
            method = "inline"
            continue

        violations = validate_body(config, edited or "")
        if not violations:
            return edited
        show_violations(violations, terminal=terminal)
        current = edited
        choice = _unwrap(
            await select(
                [
                    SelectOption("editor", "Edit again"),
                    SelectOption("inline", "Type inline instead"),
                    SelectOption("cancel", "Cancel commit"),
                ],
                "What would you like to do?",
                label="body",
                label_color="yellow",
                terminal=terminal,
            )
        )
        if choice == "cancel":
            raise Cancelled()
        method = choice


# ---------------------------------------------------------------------------
# Staged files and preview
# ---------------------------------------------------------------------------


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'' if count == 1 else 's'}"


def _format_stats(file: StagedFile) -> str:
    parts = []
    if file.additions:
        parts.append(theme.paint(f"+{file.additions}", theme.ADDED))
    if file.deletions:
        parts.append(theme.paint(f"-{file.deletions}", theme.DELETED))
    return f"  ({' '.join(parts)} lines)" if parts else ""


def staged_file_lines(files: Sequence[StagedFile]) -> list[str]:
    """Files grouped by status, one line each."""
    lines: list[str] = []
    for status, name in _STATUS_NAMES.items():
        group = [f for f in files if f.status is status]
        if not group:
            continue
        lines.append(f"  {name} ({len(group)}):")
        for file in group:
            code = theme.paint(status.value, _STATUS_STYLES[status])
            path = f"{file.old_path} -> {file.path}" if file.old_path else file.path
            lines.append(f"    {code}  {path}{_format_stats(file)}")
    return lines


async def display_staged_files(
    staging: StagingResult, *, terminal: Terminal | None = None
) -> None:
    """List what will be committed and wait for Enter (Escape cancels)."""
    display.section(
        "files",
        "green",
        f"Files to be committed ({_plural(staging.total, 'file')}):",
        terminal=terminal,
    )
    if staging.already_staged and staging.newly_staged:
        display.indented(
            theme.paint(f"Already staged ({_plural(len(staging.already_staged), 'file')}):", theme.ACTIVE),
            terminal=terminal,
        )
        display.block(staged_file_lines(staging.already_staged), terminal=terminal)
        display.indented(
            theme.paint(f"Auto-staged ({_plural(len(staging.newly_staged), 'file')}):", "bright_yellow"),
            terminal=terminal,
        )
        display.block(staged_file_lines(staging.newly_staged), terminal=terminal)
    else:
        display.block(
            staged_file_lines(staging.already_staged or staging.newly_staged), terminal=terminal
        )
    display.divider(terminal=terminal)
    _unwrap(
        await select(
            [SelectOption("continue", "Continue")],
            "Press Enter to continue, Esc to cancel",
            label="files",
            label_color="green",
            terminal=terminal,
        )
    )


async def prompt_preview_action(
    config: Configuration,
    subject_line: str,
    body: str | None,
    *,
    terminal: Terminal | None = None,
) -> PreviewAction:
    """Show the formatted message and ask what to do with it."""
    display.section("preview", "green", "Commit message preview:", terminal=terminal)
    printed = 1
    printed += display.block([theme.paint(subject_line, theme.ACTIVE)], terminal=terminal)
    if body:
        display.blank(terminal=terminal)
        printed += 1 + display.block(body.splitlines(), terminal=terminal)
    display.divider(terminal=terminal)
    printed += 1

    options, mapping = _with_shortcuts(
        config, "preview", [SelectOption(a.value, label) for a, label in _PREVIEW_LABELS.items()]
    )
    chosen = await select(
        options,
        "Ready to commit?",
        label="preview",
        label_color="green",
        shortcuts=mapping,
        prefix_line_count=printed,
        terminal=terminal,
    )
    if is_cancel(chosen):
        return PreviewAction.CANCEL
    return PreviewAction(chosen)

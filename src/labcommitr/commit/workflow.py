"""The interactive ``lab commit`` workflow."""

from __future__ import annotations

from collections.abc import Collection
from dataclasses import dataclass, replace
from pathlib import Path

from labcommitr.commit.formatter import format_commit_message
from labcommitr.commit.prompts import (
    PreviewAction,
    check_scope_flag,
    check_subject_flag,
    display_staged_files,
    prompt_body,
    prompt_preview_action,
    prompt_scope,
    prompt_subject,
    prompt_type,
    resolve_type_flag,
)
from labcommitr.commit.rules import validate_body, validate_scope
from labcommitr.config import ConfigLoader, Configuration, load_config
from labcommitr.emoji import format_for_display
from labcommitr.errors import Cancelled, WorkflowError
from labcommitr.git import GitClient, GitError, StagingResult
from labcommitr.logging import get_logger
from labcommitr.ui import Terminal, display

logger = get_logger(__name__)

ALL_FIELDS = frozenset({"type", "scope", "subject", "body"})


@dataclass
class CommitOptions:
    """Values given on the command line; ``None`` means ask."""

    type: str | None = None
    scope: str | None = None
    message: str | None = None
    body: str | None = None
    no_verify: bool = False
    cwd: Path | None = None


@dataclass(frozen=True)
class CommitDraft:
    """The message being assembled. ``type_id`` is empty until chosen."""

    type_id: str = ""
    scope: str | None = None
    subject: str = ""
    body: str | None = None

    def subject_line(self, config: Configuration) -> str:
        commit_type = config.find_type(self.type_id)
        emoji = commit_type.emoji if commit_type and config.config.emoji_enabled else None
        return format_commit_message(
            config.format.template, self.type_id, self.subject, scope=self.scope, emoji=emoji
        )


# ---------------------------------------------------------------------------
# Staging
# ---------------------------------------------------------------------------


async def stage_changes(git: GitClient, config: Configuration) -> StagingResult:
    """Stage tracked changes when ``auto_stage`` is on, then describe the index."""
    newly: list[str] = []
    if config.advanced.git.auto_stage:
        already = await git.staged_files()
        newly = await git.stage_all_tracked()
        if not already and not newly:
            if await git.has_untracked_files():
                raise WorkflowError(
                    "No tracked files to stage",
                    details="Only untracked files were found; auto-stage only picks up "
                    "changes to files git already tracks.",
                    solutions=["Stage new files explicitly with 'git add <file>'"],
                )
            raise WorkflowError(
                "No modified files to commit",
                solutions=["Make some changes first", "Check 'git status'"],
            )
    elif not await git.staged_files():
        modified = await git.unstaged_tracked_files()
        details = None
        if modified:
            details = "Modified but not staged:\n" + "\n".join(f"  • {path}" for path in modified)
        raise WorkflowError(
            "No files staged for commit",
            details=details,
            solutions=[
                "Stage files with 'git add <file>'",
                "Enable 'advanced.git.auto_stage' to stage tracked changes automatically",
            ],
        )

    details = await git.staged_file_details()
    fresh = set(newly)
    logger.debug("staged %d file(s), %d by this run", len(details), len(fresh))
    return StagingResult(
        already_staged=[f for f in details if f.path not in fresh],
        newly_staged=[f for f in details if f.path in fresh],
    )


async def restore_staging(git: GitClient, staging: StagingResult) -> None:
    """Unstage only the files this run staged."""
    paths = [f.path for f in staging.newly_staged]
    if not paths:
        return
    try:
        await git.unstage(paths)
    except GitError as exc:
        logger.warning("Could not unstage auto-staged files: %s", exc)


# ---------------------------------------------------------------------------
# Composing the message
# ---------------------------------------------------------------------------


async def _ask_scope(
    config: Configuration, draft: CommitDraft, terminal: Terminal | None
) -> CommitDraft:
    scope = await prompt_scope(config, draft.type_id, current=draft.scope, terminal=terminal)
    return replace(draft, scope=scope)


async def compose_message(
    config: Configuration,
    draft: CommitDraft,
    *,
    ask: Collection[str] = ALL_FIELDS,
    emoji_active: bool = False,
    terminal: Terminal | None = None,
) -> CommitDraft:
    """Prompt for the fields in *ask*, then loop on the preview until committed.

    Values already in *draft* are used as the prompts' initial values.
    Raises :class:`Cancelled` if the user backs out.
    """
    if "type" in ask or not draft.type_id:
        commit_type = await prompt_type(
            config, current=draft.type_id or None, show_emoji=emoji_active, terminal=terminal
        )
        draft = replace(draft, type_id=commit_type.id)
    if "scope" in ask or validate_scope(config, draft.type_id, draft.scope) is not None:
        draft = await _ask_scope(config, draft, terminal)
    if "subject" in ask or not draft.subject:
        draft = replace(
            draft, subject=await prompt_subject(config, current=draft.subject or None, terminal=terminal)
        )
    if "body" in ask:
        draft = replace(draft, body=await prompt_body(config, current=draft.body, terminal=terminal))

    while True:
        line = format_for_display(draft.subject_line(config), emoji_active)
        action = await prompt_preview_action(config, line, draft.body, terminal=terminal)
        match action:
            case PreviewAction.COMMIT:
                return draft
            case PreviewAction.CANCEL:
                raise Cancelled()
            case PreviewAction.EDIT_TYPE:
                commit_type = await prompt_type(
                    config, current=draft.type_id, show_emoji=emoji_active, terminal=terminal
                )
                draft = replace(draft, type_id=commit_type.id)
                if validate_scope(config, draft.type_id, draft.scope) is not None:
                    draft = await _ask_scope(config, draft, terminal)
            case PreviewAction.EDIT_SCOPE:
                draft = await _ask_scope(config, draft, terminal)
            case PreviewAction.EDIT_SUBJECT:
                draft = replace(
                    draft, subject=await prompt_subject(config, current=draft.subject, terminal=terminal)
                )
            case PreviewAction.EDIT_BODY:
                draft = replace(
                    draft, body=await prompt_body(config, current=draft.body, terminal=terminal)
                )


def draft_from_options(config: Configuration, options: CommitOptions) -> tuple[CommitDraft, set[str]]:
    """Validate the command-line values and list the fields still to ask for."""
    ask = set(ALL_FIELDS)
    draft = CommitDraft()
    if options.type is not None:
        draft = replace(draft, type_id=resolve_type_flag(config, options.type).id)
        ask.discard("type")
    if options.scope is not None:
        if draft.type_id:
            draft = replace(draft, scope=check_scope_flag(config, draft.type_id, options.scope))
        else:
            draft = replace(draft, scope=options.scope or None)
        ask.discard("scope")
    if options.message is not None:
        draft = replace(draft, subject=check_subject_flag(config, options.message.strip()))
        ask.discard("subject")
    if options.body is not None:
        body = options.body.strip()
        violations = validate_body(config, body)
        if violations:
            raise WorkflowError(
                "Body failed validation",
                details="\n".join(f"  • {v}" for v in violations),
            )
        draft = replace(draft, body=body or None)
        ask.discard("body")
    return draft, ask


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


async def run_commit(
    options: CommitOptions,
    *,
    git: GitClient | None = None,
    terminal: Terminal | None = None,
    loader: ConfigLoader | None = None,
) -> str:
    """Run the full commit workflow and return the new commit's short hash."""
    loaded = await loader.load(options.cwd) if loader else await load_config(options.cwd)
    if loaded.source == "defaults":
        raise WorkflowError(
            "No configuration found",
            details="labcommitr needs a project configuration before it can commit.",
            solutions=["Run 'lab init' to create .labcommitr.config.yaml"],
        )
    config = loaded.config

    git = git or GitClient(options.cwd)
    if not await git.is_repository():
        raise WorkflowError(
            "Not a git repository",
            solutions=["Run 'git init' first", "Run this command inside a git repository"],
        )

    draft, ask = draft_from_options(config, options)
    staging = await stage_changes(git, config)
    try:
        await display_staged_files(staging, terminal=terminal)
        draft = await compose_message(
            config, draft, ask=ask, emoji_active=loaded.emoji_mode_active, terminal=terminal
        )
        short_hash = await git.commit(
            draft.subject_line(config),
            draft.body,
            sign=config.advanced.git.sign_commits,
            skip_hooks=options.no_verify,
        )
    except (Cancelled, WorkflowError):
        await restore_staging(git, staging)
        if staging.newly_staged:
            display.status_info("Auto-staged files were unstaged", terminal=terminal)
        raise
    except GitError as exc:
        await restore_staging(git, staging)
        raise WorkflowError(
            "Commit failed",
            details=str(exc),
            solutions=[
                "Check the git output above",
                "Use --no-verify to skip hooks if a hook rejected the commit",
            ],
        ) from exc

    display.status_success(
        f"Commit created: {short_hash} {format_for_display(draft.subject_line(config), loaded.emoji_mode_active)}",
        terminal=terminal,
    )
    logger.info("created commit %s", short_hash)
    return short_hash

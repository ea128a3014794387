"""``lab revert``: pick a commit and revert it with a project-style message."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from labcommitr.commit.workflow import CommitDraft, compose_message
from labcommitr.config import ConfigLoadResult, load_config
from labcommitr.emoji import format_for_display
from labcommitr.errors import Cancelled, WorkflowError
from labcommitr.git import (
    CommitInfo,
    GitClient,
    GitError,
    MergeParent,
    generate_revert_subject,
    parse_commit_message,
)
from labcommitr.history import display as screens
from labcommitr.history.pager import CommitPager, page_index, resolve_branch
from labcommitr.logging import get_logger
from labcommitr.ui import SelectOption, Terminal, confirm, display, get_terminal, is_cancel, select, theme
from labcommitr.ui.keys import Key
from labcommitr.ui.prompts import wait_for_key

logger = get_logger(__name__)

REVERT_TYPE = "revert"


@dataclass
class RevertOptions:
    limit: int | None = None
    branch: str | None = None
    no_edit: bool = False
    continue_: bool = False
    abort: bool = False
    cwd: Path | None = None


def _conflict_error(exc: GitError) -> WorkflowError:
    return WorkflowError(
        "Conflicts detected during revert",
        details=exc.stderr.strip() or None,
        solutions=[
            "Resolve the conflicts, stage the files, then run 'lab revert --continue'",
            "Run 'lab revert --abort' to give up and restore the previous state",
        ],
    )


def _is_conflict(exc: GitError) -> bool:
    return "conflict" in exc.stderr.lower()


async def require_config(cwd: Path | None = None) -> ConfigLoadResult:
    loaded = await load_config(cwd)
    if loaded.source == "defaults":
        raise WorkflowError(
            "No configuration found",
            solutions=["Run 'lab init' to create .labcommitr.config.yaml"],
        )
    return loaded


async def prompt_merge_parent(
    parents: list[MergeParent], *, terminal: Terminal | None = None
) -> int:
    options = [
        SelectOption(
            p.number,
            f"Parent {p.number}{f': {p.branch}' if p.branch else ''} ({p.short_hash})"
            f"{' [mainline, default]' if p.number == 1 else ''}",
        )
        for p in parents
    ]
    chosen = await select(
        options,
        "Select parent to revert to:",
        label="parent",
        label_color="blue",
        initial_value=1,
        terminal=terminal,
    )
    if is_cancel(chosen):
        raise Cancelled()
    return chosen


def confirmation_lines(commit: CommitInfo, emoji_active: bool) -> list[str]:
    return [
        *screens.title("confirm", "green", "Revert Confirmation"),
        f"  Reverting commit: {commit.short_hash}",
        f"  Original: {format_for_display(commit.subject, emoji_active)}",
        "",
        f"  {theme.paint('This will create a new commit that undoes these changes.', 'bright_yellow')}",
        "",
    ]


async def _wants_custom_message(terminal: Terminal | None) -> bool:
    proceed = await confirm(
        "Proceed with revert?", label="confirm", label_color="green", terminal=terminal
    )
    if is_cancel(proceed) or not proceed:
        raise Cancelled()
    edit = await confirm(
        "Edit commit message before reverting?",
        label="edit",
        label_color="yellow",
        initial_value=False,
        terminal=terminal,
    )
    if is_cancel(edit):
        raise Cancelled()
    return edit


async def _compose_revert_message(
    loaded: ConfigLoadResult, commit: CommitInfo, terminal: Terminal | None
) -> CommitDraft:
    config = loaded.config
    parsed = parse_commit_message(commit.subject)
    original = parsed.subject if parsed.parse_success else commit.subject
    draft = CommitDraft(
        type_id=REVERT_TYPE if config.find_type(REVERT_TYPE) else "",
        scope=parsed.scope,
        subject=generate_revert_subject(original, config.format.subject_max_length),
        body=f"This reverts commit {commit.hash}.",
    )
    return await compose_message(
        config,
        draft,
        ask={"scope", "subject", "body"},
        emoji_active=loaded.emoji_mode_active,
        terminal=terminal,
    )


async def revert_commit(
    commit_hash: str,
    *,
    git: GitClient,
    loaded: ConfigLoadResult,
    no_edit: bool = False,
    parent_number: int | None = None,
    terminal: Terminal | None = None,
) -> str:
    """Revert *commit_hash* and return the new commit's short hash."""
    terminal = terminal or get_terminal()
    commit = await git.commit_details(commit_hash)

    if commit.is_merge and parent_number is None:
        parents = await git.merge_parents(commit_hash)
        parent_number = await prompt_merge_parent(parents, terminal=terminal) if len(parents) > 1 else 1

    if terminal.is_tty():
        terminal.clear_screen()
    screens.write_lines(confirmation_lines(commit, loaded.emoji_mode_active), terminal=terminal)

    draft = None
    if not no_edit and await _wants_custom_message(terminal):
        draft = await _compose_revert_message(loaded, commit, terminal)

    display.status_info("Reverting commit...", terminal=terminal)
    try:
        await git.revert(commit.hash, parent_number)
        if draft is None:
            short_hash = await git.head()
            shown = ""
        else:
            config = loaded.config
            line = draft.subject_line(config)
            short_hash = await git.amend_message(
                line, draft.body, sign=config.advanced.git.sign_commits
            )
            shown = f" {format_for_display(line, loaded.emoji_mode_active)}"
    except GitError as exc:
        if _is_conflict(exc):
            raise _conflict_error(exc) from exc
        raise WorkflowError("Revert failed", details=str(exc)) from exc

    display.status_success(f"Revert commit created: {short_hash}{shown}", terminal=terminal)
    logger.info("reverted %s as %s", commit.short_hash, short_hash)
    return short_hash


async def _finish_in_progress(git: GitClient, options: RevertOptions, terminal: Terminal | None) -> None:
    if not await git.revert_in_progress():
        raise WorkflowError(
            "No revert in progress",
            solutions=["Start a revert with 'lab revert'"],
        )
    try:
        if options.continue_:
            await git.continue_revert()
            display.status_success("Revert completed", terminal=terminal)
        else:
            await git.abort_revert()
            display.status_success("Revert aborted", terminal=terminal)
    except GitError as exc:
        if _is_conflict(exc):
            raise _conflict_error(exc) from exc
        raise WorkflowError("Could not finish the revert", details=str(exc)) from exc


async def select_commit(pager: CommitPager, *, emoji_active: bool, terminal: Terminal) -> CommitInfo:
    """Page through history until the user picks a commit with 0-9."""
    while True:
        page = pager.current
        terminal.clear_screen()
        screens.write_lines(
            [
                *screens.title("revert", "yellow", "Select Commit to Revert"),
                *screens.commit_list(
                    page,
                    start=pager.start,
                    total=len(pager.commits),
                    has_more=pager.has_more,
                    emoji_active=emoji_active,
                ),
                screens.list_hints(
                    has_previous=pager.has_previous,
                    has_next=pager.has_next,
                    action="to select commit",
                    with_help=False,
                ),
            ],
            terminal=terminal,
        )

        def resolve(key: Key) -> int | str | None:
            if key.id in ("escape", "ctrl+c", "q"):
                return "cancel"
            index = page_index(key.name, len(page))
            if index is not None:
                return index
            if key.id == "n" and pager.has_next:
                return "next"
            if key.id == "p" and pager.has_previous:
                return "previous"
            return None

        selection = await wait_for_key(resolve, terminal=terminal)
        if selection is None or selection == "cancel":
            raise Cancelled()
        if selection == "next":
            await pager.next()
        elif selection == "previous":
            pager.previous()
        else:
            return page[selection]


async def run_revert(
    options: RevertOptions,
    *,
    git: GitClient | None = None,
    terminal: Terminal | None = None,
) -> str | None:
    """Run ``lab revert``; returns the new commit's short hash, if one was made."""
    git = git or GitClient(options.cwd)
    terminal = terminal or get_terminal()

    if options.continue_ or options.abort:
        await _finish_in_progress(git, options, terminal)
        return None

    if not await git.is_repository():
        raise WorkflowError("Not a git repository", solutions=["Initialize git first: git init"])
    loaded = await require_config(options.cwd)

    if await git.has_uncommitted_changes():
        display.status_info(
            theme.paint("⚠ You have uncommitted changes. Revert may cause conflicts.", "bright_yellow"),
            terminal=terminal,
        )

    pager = CommitPager(git, await resolve_branch(git, options.branch), options.limit)
    await pager.load_more()
    if not pager.commits:
        display.status_info("No commits found in current branch.", terminal=terminal)
        return None
    if not terminal.is_tty():
        raise WorkflowError(
            "lab revert needs an interactive terminal",
            solutions=["Use 'git revert <hash>' in scripts"],
        )

    commit = await select_commit(pager, emoji_active=loaded.emoji_mode_active, terminal=terminal)
    return await revert_commit(
        commit.hash, git=git, loaded=loaded, no_edit=options.no_edit, terminal=terminal
    )

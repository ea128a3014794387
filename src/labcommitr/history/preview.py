"""``lab preview``: browse commit history without changing anything."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

from labcommitr.emoji import detect_emoji_support
from labcommitr.errors import WorkflowError
from labcommitr.git import CommitInfo, GitClient, GitError
from labcommitr.history import display as screens
from labcommitr.history.pager import CommitPager, page_index, resolve_branch
from labcommitr.history.revert import require_config, revert_commit
from labcommitr.logging import get_logger
from labcommitr.ui import Terminal, display, get_terminal
from labcommitr.ui.keys import Key
from labcommitr.ui.prompts import wait_for_key

logger = get_logger(__name__)


class ListAction(StrEnum):
    NEXT = "next"
    PREVIOUS = "previous"
    HELP = "help"
    EXIT = "exit"


class DetailAction(StrEnum):
    BACK = "back"
    BODY = "body"
    FILES = "files"
    DIFF = "diff"
    REVERT = "revert"
    HELP = "help"
    EXIT = "exit"


_DETAIL_KEYS = {
    "left": DetailAction.BACK,
    "escape": DetailAction.BACK,
    "b": DetailAction.BODY,
    "f": DetailAction.FILES,
    "d": DetailAction.DIFF,
    "r": DetailAction.REVERT,
    "?": DetailAction.HELP,
    "q": DetailAction.EXIT,
    "ctrl+c": DetailAction.EXIT,
}


@dataclass
class PreviewOptions:
    limit: int | None = None
    branch: str | None = None
    cwd: Path | None = None


def list_action(key: Key, pager: CommitPager) -> int | ListAction | None:
    """What a key means on the list screen."""
    if key.id in ("escape", "ctrl+c", "q"):
        return ListAction.EXIT
    index = page_index(key.name, len(pager.current))
    if index is not None:
        return index
    if key.id == "p" and pager.has_previous:
        return ListAction.PREVIOUS
    if key.id == "n" and pager.has_next:
        return ListAction.NEXT
    if key.id == "?":
        return ListAction.HELP
    return None


def detail_action(key: Key) -> DetailAction | None:
    return _DETAIL_KEYS.get(key.id)


async def _any_key(terminal: Terminal) -> None:
    await wait_for_key(lambda key: True, terminal=terminal)


class PreviewSession:
    """The list/detail screens of one ``lab preview`` run."""

    def __init__(self, git: GitClient, pager: CommitPager, terminal: Terminal, emoji_active: bool) -> None:
        self.git = git
        self.pager = pager
        self.terminal = terminal
        self.emoji_active = emoji_active
        self.detail: CommitInfo | None = None
        self.show_body = True
        self.show_files = True

    def _draw(self, lines: list[str]) -> None:
        self.terminal.clear_screen()
        screens.write_lines(lines, terminal=self.terminal)

    def draw_list(self) -> None:
        pager = self.pager
        self._draw(
            [
                *screens.title("preview", "cyan", "Commit History"),
                *screens.commit_list(
                    pager.current,
                    start=pager.start,
                    total=len(pager.commits),
                    has_more=pager.has_more,
                    emoji_active=self.emoji_active,
                ),
                screens.list_hints(has_previous=pager.has_previous, has_next=pager.has_next),
            ]
        )

    def draw_detail(self, detail: CommitInfo) -> None:
        self._draw(
            [
                *screens.commit_details(
                    detail,
                    show_body=self.show_body,
                    show_files=self.show_files,
                    emoji_active=self.emoji_active,
                ),
                screens.detail_hints(),
            ]
        )

    async def show_help(self) -> None:
        self._draw(screens.help_lines())
        await _any_key(self.terminal)

    async def show_diff(self, commit: CommitInfo) -> None:
        diff = await self.git.commit_diff(commit.hash)
        self._draw(["", f"Diff for commit {commit.short_hash}:", "", diff, "", "Press any key to go back..."])
        await _any_key(self.terminal)

    async def open(self, commit: CommitInfo) -> None:
        try:
            self.detail = await self.pager.details(commit)
        except GitError as exc:
            logger.error("Failed to load commit details: %s", exc)
            return
        self.show_body = True
        self.show_files = True

    async def step(self) -> CommitInfo | bool:
        """Handle one screen; ``False`` to exit, a commit to revert it, ``True`` to continue."""
        if self.detail is None:
            self.draw_list()
            action = await wait_for_key(lambda key: list_action(key, self.pager), terminal=self.terminal)
            match action:
                case int():
                    await self.open(self.pager.current[action])
                case ListAction.PREVIOUS:
                    self.pager.previous()
                case ListAction.NEXT:
                    await self.pager.next()
                case ListAction.HELP:
                    await self.show_help()
                case _:
                    return False
            return True

        detail = self.detail
        self.draw_detail(detail)
        action = await wait_for_key(detail_action, terminal=self.terminal)
        match action:
            case DetailAction.BACK:
                self.detail = None
            case DetailAction.BODY:
                self.show_body = not self.show_body
            case DetailAction.FILES:
                self.show_files = not self.show_files
            case DetailAction.DIFF:
                await self.show_diff(detail)
            case DetailAction.REVERT:
                return detail
            case DetailAction.HELP:
                await self.show_help()
            case _:
                return False
        return True


async def run_preview(
    options: PreviewOptions,
    *,
    git: GitClient | None = None,
    terminal: Terminal | None = None,
) -> None:
    git = git or GitClient(options.cwd)
    terminal = terminal or get_terminal()

    if not await git.is_repository():
        raise WorkflowError("Not a git repository", solutions=["Initialize git first: git init"])

    pager = CommitPager(git, await resolve_branch(git, options.branch), options.limit)
    await pager.load_more()
    if not pager.commits:
        display.status_info("No commits found in current branch.", terminal=terminal)
        return

    emoji_active = detect_emoji_support()
    if not terminal.is_tty():
        screens.write_lines(
            screens.commit_list(
                pager.current,
                start=0,
                total=len(pager.commits),
                has_more=pager.has_more,
                emoji_active=emoji_active,
            ),
            terminal=terminal,
        )
        return

    session = PreviewSession(git, pager, terminal, emoji_active)
    while True:
        outcome = await session.step()
        if outcome is False:
            break
        if isinstance(outcome, CommitInfo):
            terminal.write("\n  Switching to revert command...\n")
            loaded = await require_config(options.cwd)
            await revert_commit(outcome.hash, git=git, loaded=loaded, terminal=terminal)
            return
    terminal.write("\n  Exiting preview.\n")

"""Text layout for the commit list and commit detail screens."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from labcommitr.emoji import format_for_display
from labcommitr.git import CommitInfo
from labcommitr.ui import Terminal, get_terminal, theme
from labcommitr.ui.types import LabelColor

SUBJECT_WIDTH = 50
MAX_FILES_SHOWN = 20
KEY = "bright_yellow"
NUMBER = "bright_cyan"
FIELD = "bright_white"


def write_lines(lines: Iterable[str], *, terminal: Terminal | None = None) -> None:
    terminal = terminal or get_terminal()
    for line in lines:
        terminal.write(line + "\n")


def truncate(text: str, width: int = SUBJECT_WIDTH) -> str:
    return text if len(text) <= width else text[: width - 3] + "..."


def _field(name: str) -> str:
    return theme.paint(f"{name}:", FIELD)


def _keys(pairs: Sequence[tuple[str, str]]) -> str:
    hints = ", ".join(f"{theme.paint(key, KEY)} {action}" for key, action in pairs)
    return f"  Press {hints}"


def title(label: str, color: LabelColor, message: str) -> list[str]:
    return ["", theme.header(label, color, message), ""]


def commit_list(
    commits: Sequence[CommitInfo],
    *,
    start: int,
    total: int,
    has_more: bool,
    emoji_active: bool,
) -> list[str]:
    """Numbered rows ``[0]``..``[9]`` plus the range summary."""
    if not commits:
        return ["  No commits found."]
    lines = []
    for number, commit in enumerate(commits):
        subject = truncate(format_for_display(commit.subject, emoji_active))
        merge = " [Merge]" if commit.is_merge else ""
        lines.append(
            f"  {theme.paint(f'[{number}]', NUMBER)} "
            f"{theme.paint(commit.short_hash, FIELD)} {subject}{merge}"
        )
        lines.append(f"      {commit.author_name} • {commit.relative_date}")
    end = start + len(commits)
    lines.append("")
    lines.append(f"  Showing commits {start + 1}-{end} of {total}{'+' if has_more else ''}")
    lines.append("")
    return lines


def list_hints(
    *, has_previous: bool, has_next: bool, action: str = "to view details", with_help: bool = True
) -> str:
    pairs = [("0-9", action)]
    if has_previous:
        pairs.append(("p", "for previous batch"))
    if has_next:
        pairs.append(("n", "for next batch"))
    if with_help:
        pairs.append(("?", "for help"))
    pairs.append(("Esc", "to exit"))
    return _keys(pairs)


def detail_hints() -> str:
    return _keys(
        [
            ("b", "to toggle body"),
            ("f", "to toggle files"),
            ("d", "for diff"),
            ("r", "to revert"),
            ("←", "to go back"),
        ]
    )


def commit_details(
    commit: CommitInfo,
    *,
    show_body: bool = True,
    show_files: bool = True,
    emoji_active: bool = True,
) -> list[str]:
    lines = title("detail", "green", "Commit Details")
    lines += [
        f"  {_field('Hash')} {commit.hash}",
        f"  {_field('Subject')} {format_for_display(commit.subject, emoji_active)}",
        "",
        f"  {_field('Author')} {commit.author_name} <{commit.author_email}>",
        f"  {_field('Date')} {commit.date.isoformat()}",
        f"  {_field('Relative')} {commit.relative_date}",
        "",
    ]
    if commit.parents:
        lines.append(f"  {_field('Parents')}")
        lines += [f"    {parent[:7]}" for parent in commit.parents]
        lines.append("")
    if commit.is_merge:
        lines += [f"  {theme.paint('⚠ This is a merge commit', KEY)}", ""]

    stats = commit.file_stats
    if stats is not None:
        lines.append(f"  {_field('File Statistics')}")
        lines.append(f"    Files changed: {stats.files_changed}")
        if stats.additions is not None:
            lines.append(f"    Additions: {theme.paint(f'+{stats.additions}', theme.ADDED)}")
        if stats.deletions is not None:
            lines.append(f"    Deletions: {theme.paint(f'-{stats.deletions}', theme.DELETED)}")
        lines.append("")

    if show_body:
        if commit.body:
            lines.append(f"  {_field('Body')}")
            lines += [f"    {line}" for line in commit.body.splitlines()]
        else:
            lines.append("  Body: No body")
        lines.append("")

    if show_files and commit.files:
        lines.append(f"  {_field('Changed Files')}")
        lines += [f"    {path}" for path in commit.files[:MAX_FILES_SHOWN]]
        if len(commit.files) > MAX_FILES_SHOWN:
            lines.append(f"    ... and {len(commit.files) - MAX_FILES_SHOWN} more")
        lines.append("")
    return lines


def help_lines() -> list[str]:
    return [
        *title("help", "yellow", "Keyboard Shortcuts"),
        f"  {theme.paint('0-9', NUMBER)}     View commit details",
        f"  {theme.paint('p', KEY)}       Jump to previous batch",
        f"  {theme.paint('n', KEY)}       Jump to next batch",
        f"  {theme.paint('b', KEY)}       Toggle body",
        f"  {theme.paint('f', KEY)}       Toggle files",
        f"  {theme.paint('d', KEY)}       View diff",
        f"  {theme.paint('r', KEY)}       Revert this commit",
        f"  {theme.paint('←/Esc', KEY)}   Back to list",
        f"  {theme.paint('?', KEY)}       Show this help",
        f"  {theme.paint('q', KEY)}       Exit",
        "",
        "  Press any key to go back...",
    ]

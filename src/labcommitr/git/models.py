"""Data returned by the git collaborator."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum


class FileStatus(StrEnum):
    """Index status of a staged path."""

    ADDED = "A"
    MODIFIED = "M"
    DELETED = "D"
    RENAMED = "R"
    COPIED = "C"


@dataclass(frozen=True)
class StagedFile:
    path: str
    status: FileStatus
    additions: int | None = None
    deletions: int | None = None
    old_path: str | None = None


@dataclass(frozen=True)
class FileStats:
    files_changed: int
    additions: int | None = None
    deletions: int | None = None


@dataclass(frozen=True)
class CommitInfo:
    """One commit as shown by ``lab preview`` and ``lab revert``.

    ``body``, ``file_stats`` and ``files`` are filled in lazily by
    :meth:`GitClient.commit_details`.
    """

    hash: str
    subject: str
    author_name: str
    author_email: str
    date: datetime
    parents: tuple[str, ...] = ()
    body: str | None = None
    file_stats: FileStats | None = None
    files: tuple[str, ...] | None = None

    @property
    def short_hash(self) -> str:
        return self.hash[:7]

    @property
    def is_merge(self) -> bool:
        return len(self.parents) > 1

    @property
    def relative_date(self) -> str:
        return format_relative_time(self.date)


@dataclass(frozen=True)
class MergeParent:
    number: int
    hash: str
    branch: str | None = None

    @property
    def short_hash(self) -> str:
        return self.hash[:7]


@dataclass(frozen=True)
class ParsedCommit:
    """A commit subject split into its conventional parts."""

    subject: str
    parse_success: bool
    type: str | None = None
    scope: str | None = None
    body: str | None = None


@dataclass
class StagingResult:
    """What the commit workflow staged (or found staged) before prompting."""

    already_staged: list[StagedFile] = field(default_factory=list)
    newly_staged: list[StagedFile] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.already_staged) + len(self.newly_staged)


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'' if count == 1 else 's'} ago"


def format_relative_time(when: datetime, now: datetime | None = None) -> str:
    """Render *when* as ``"3 hours ago"`` relative to *now*."""
    now = now or datetime.now(UTC)
    if when.tzinfo is None:
        when = when.replace(tzinfo=UTC)
    seconds = max(0, int((now - when).total_seconds()))
    minutes = seconds // 60
    hours = minutes // 60
    days = hours // 24
    if seconds < 60:
        return _plural(seconds, "second")
    if minutes < 60:
        return _plural(minutes, "minute")
    if hours < 24:
        return _plural(hours, "hour")
    if days < 7:
        return _plural(days, "day")
    if days // 7 < 4:
        return _plural(days // 7, "week")
    if days // 30 < 12:
        return _plural(days // 30, "month")
    return _plural(days // 365, "year")

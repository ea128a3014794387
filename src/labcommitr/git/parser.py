"""Parsers for git plumbing output and conventional commit subjects."""

from __future__ import annotations

import re
from datetime import datetime

from labcommitr.git.models import CommitInfo, FileStats, FileStatus, ParsedCommit, StagedFile

FIELD_SEP = "\x1f"
RECORD_SEP = "\x1e"
# hash, subject, author name, author email, ISO date, parent hashes
LOG_FORMAT = "%H%x1f%s%x1f%an%x1f%ae%x1f%aI%x1f%P%x1e"

_SUBJECT_PATTERN = re.compile(r"^(?:[^\w\s(]+\s*)?(\w+)(?:\(([^)]+)\))?!?:\s*(.+)$")
_STAT_SUMMARY = re.compile(
    r"(\d+) files? changed(?:, (\d+) insertions?\(\+\))?(?:, (\d+) deletions?\(-\))?"
)
_BRACE_RENAME = re.compile(r"^(.*)\{(.*) => (.*)\}(.*)$")
# Room kept for the "Revert" prefix, quotes and ellipsis when truncating.
_REVERT_OVERHEAD = 15


def parse_log(output: str) -> list[CommitInfo]:
    """Parse ``git log`` output produced with :data:`LOG_FORMAT`."""
    commits: list[CommitInfo] = []
    for record in output.split(RECORD_SEP):
        record = record.strip("\n")
        if not record.strip():
            continue
        parts = record.split(FIELD_SEP)
        if len(parts) < 6:
            continue
        commit_hash, subject, name, email, date, parents = parts[:6]
        commits.append(
            CommitInfo(
                hash=commit_hash.strip(),
                subject=subject or "(no subject)",
                author_name=name or "Unknown",
                author_email=email,
                date=datetime.fromisoformat(date.strip()),
                parents=tuple(parents.split()),
            )
        )
    return commits


def body_from_message(message: str) -> str | None:
    """Everything after the subject line of a full commit message."""
    _, _, rest = message.strip().partition("\n")
    return rest.strip() or None


def parse_stat_summary(output: str) -> FileStats | None:
    """Read the ``N files changed, ...`` line at the end of ``git show --stat``."""
    lines = [line for line in output.splitlines() if line.strip()]
    if not lines:
        return None
    found = _STAT_SUMMARY.search(lines[-1])
    if found is None:
        return None
    files, additions, deletions = found.groups()
    return FileStats(
        files_changed=int(files),
        additions=int(additions) if additions else None,
        deletions=int(deletions) if deletions else None,
    )


def _numstat_path(raw: str) -> str:
    braced = _BRACE_RENAME.match(raw)
    if braced:
        prefix, _, new, suffix = braced.groups()
        return f"{prefix}{new}{suffix}".replace("//", "/")
    if " => " in raw:
        return raw.split(" => ", 1)[1]
    return raw


def parse_numstat(output: str) -> dict[str, tuple[int, int]]:
    """Map path -> (additions, deletions); binary files count as zero."""
    stats: dict[str, tuple[int, int]] = {}
    for line in output.splitlines():
        parts = line.split("\t")
        if len(parts) < 3:
            continue
        added, deleted, path = parts[0], parts[1], "\t".join(parts[2:])
        stats[_numstat_path(path)] = (
            int(added) if added.isdigit() else 0,
            int(deleted) if deleted.isdigit() else 0,
        )
    return stats


def parse_name_status(output: str, numstat: dict[str, tuple[int, int]] | None = None) -> list[StagedFile]:
    """Parse ``git diff --cached --name-status`` lines into :class:`StagedFile`."""
    numstat = numstat or {}
    files: list[StagedFile] = []
    for line in output.splitlines():
        parts = line.split("\t")
        if len(parts) < 2 or not parts[0]:
            continue
        code = parts[0][0]
        old_path = None
        if code in ("R", "C") and len(parts) >= 3:
            old_path, path = parts[1], parts[2]
        elif code in ("A", "M", "D"):
            path = parts[1]
        else:
            continue
        added, deleted = numstat.get(path, (None, None))
        files.append(
            StagedFile(
                path=path,
                status=FileStatus(code),
                additions=added,
                deletions=deleted,
                old_path=old_path,
            )
        )
    return files


def parse_commit_message(message: str) -> ParsedCommit:
    """Split ``[emoji ]type[(scope)]: subject`` into its parts.

    The first line is parsed; the rest becomes ``body``. A message that
    does not follow the convention comes back whole as the subject with
    ``parse_success=False``.
    """
    if not message or not message.strip():
        return ParsedCommit(subject=message or "", parse_success=False)
    first, _, rest = message.strip().partition("\n")
    body = rest.strip() or None
    found = _SUBJECT_PATTERN.match(first.strip())
    if found is None:
        return ParsedCommit(subject=first.strip(), parse_success=False, body=body)
    commit_type, scope, subject = found.groups()
    return ParsedCommit(
        subject=subject.strip(),
        parse_success=True,
        type=commit_type.lower(),
        scope=scope or None,
        body=body,
    )


def generate_revert_subject(original_subject: str, max_length: int) -> str:
    """Build ``Revert "<subject>"``, truncating to *max_length* when needed.

    Subjects that contain double quotes are wrapped in single quotes.
    """
    quote = "'" if '"' in original_subject else '"'
    subject = f"Revert {quote}{original_subject}{quote}"
    if len(subject) <= max_length:
        return subject
    available = max(0, max_length - _REVERT_OVERHEAD)
    return f"Revert {quote}{original_subject[:available]}...{quote}"

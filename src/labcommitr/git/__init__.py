"""Git collaborator: async subprocess wrapper and output parsers."""

from __future__ import annotations

from labcommitr.git.client import GitClient, GitError
from labcommitr.git.models import (
    CommitInfo,
    FileStats,
    FileStatus,
    MergeParent,
    ParsedCommit,
    StagedFile,
    StagingResult,
    format_relative_time,
)
from labcommitr.git.parser import generate_revert_subject, parse_commit_message

__all__ = [
    "CommitInfo",
    "FileStats",
    "FileStatus",
    "GitClient",
    "GitError",
    "MergeParent",
    "ParsedCommit",
    "StagedFile",
    "StagingResult",
    "format_relative_time",
    "generate_revert_subject",
    "parse_commit_message",
]

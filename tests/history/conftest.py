"""Shared fixtures for history (preview/revert) tests."""

from __future__ import annotations

from dataclasses import replace
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

import pytest

from labcommitr.git import CommitInfo, FileStats, GitClient

BASE_DATE = datetime(2024, 6, 1, 12, 0, tzinfo=UTC)


def make_commits(count: int) -> list[CommitInfo]:
    """Newest-first history of ``count`` commits, each the parent of the previous."""
    hashes = [f"{i:07x}".ljust(40, "f") for i in range(count, 0, -1)]
    return [
        CommitInfo(
            hash=commit_hash,
            subject=f"feat(core): change {count - index}",
            author_name="Ada",
            author_email="ada@example.com",
            date=BASE_DATE - timedelta(hours=index),
            parents=(hashes[index + 1],) if index + 1 < count else (),
        )
        for index, commit_hash in enumerate(hashes)
    ]


def with_details(commit: CommitInfo) -> CommitInfo:
    return replace(
        commit,
        body="Explains the change",
        file_stats=FileStats(1, 3, 1),
        files=("src/core.py",),
    )


def history_git(commits: list[CommitInfo]) -> AsyncMock:
    """A GitClient mock serving *commits* through fetch_commits/commit_details."""
    by_hash = {c.hash: c for c in commits}

    async def fetch(limit: int, branch: str | None = None, before: str | None = None) -> list[CommitInfo]:
        start = 0
        if before is not None:
            start = next(i for i, c in enumerate(commits) if c.hash == before) + 1
        return commits[start : start + limit]

    async def details(commit_hash: str) -> CommitInfo:
        return with_details(by_hash[commit_hash])

    git = AsyncMock(spec=GitClient)
    git.is_repository.return_value = True
    git.current_branch.return_value = "main"
    git.has_uncommitted_changes.return_value = False
    git.fetch_commits.side_effect = fetch
    git.commit_details.side_effect = details
    git.commit_diff.return_value = "diff --git a/src/core.py b/src/core.py"
    git.head.return_value = "fff0000"
    git.revert_in_progress.return_value = False
    return git


@pytest.fixture
def commits() -> list[CommitInfo]:
    return make_commits(12)


@pytest.fixture
def git(commits: list[CommitInfo]) -> AsyncMock:
    return history_git(commits)

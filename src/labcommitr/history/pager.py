"""Batched, page-at-a-time access to a branch's history."""

from __future__ import annotations

from labcommitr.git import CommitInfo, GitClient, GitError
from labcommitr.logging import get_logger

logger = get_logger(__name__)

PAGE_SIZE = 10
BATCH_SIZE = 50
MAX_COMMITS = 100
DEFAULT_LIMIT = 50


def clamp_limit(limit: int | None) -> int:
    """Clamp ``--limit`` to ``1..MAX_COMMITS``."""
    if limit is None:
        return DEFAULT_LIMIT
    return max(1, min(limit, MAX_COMMITS))


class CommitPager:
    """Fetches commits in batches of :data:`BATCH_SIZE` up to *limit*."""

    def __init__(self, git: GitClient, branch: str | None, limit: int | None = None) -> None:
        self.git = git
        self.branch = branch
        self.limit = clamp_limit(limit)
        self.commits: list[CommitInfo] = []
        self.page = 0
        self.has_more = True

    async def load_more(self) -> int:
        """Fetch the next batch; returns how many commits arrived."""
        if len(self.commits) >= self.limit:
            self.has_more = False
            return 0
        wanted = min(self.limit - len(self.commits), BATCH_SIZE)
        before = self.commits[-1].hash if self.commits else None
        batch = await self.git.fetch_commits(wanted, branch=self.branch, before=before)
        self.commits.extend(batch)
        self.has_more = len(batch) == BATCH_SIZE and len(self.commits) < self.limit
        logger.debug("fetched %d commits (%d total)", len(batch), len(self.commits))
        return len(batch)

    @property
    def start(self) -> int:
        return self.page * PAGE_SIZE

    @property
    def current(self) -> list[CommitInfo]:
        return self.commits[self.start : self.start + PAGE_SIZE]

    @property
    def has_previous(self) -> bool:
        return self.page > 0

    @property
    def has_next(self) -> bool:
        return (self.page + 1) * PAGE_SIZE < len(self.commits) or self.has_more

    def previous(self) -> None:
        if self.page > 0:
            self.page -= 1

    async def next(self) -> bool:
        """Advance a page, fetching another batch when needed."""
        next_start = (self.page + 1) * PAGE_SIZE
        if next_start >= len(self.commits) and self.has_more:
            await self.load_more()
        if next_start < len(self.commits):
            self.page += 1
            return True
        return False

    async def details(self, commit: CommitInfo) -> CommitInfo:
        """Full details for *commit*, cached in place."""
        if commit.file_stats is not None and commit.files is not None:
            return commit
        full = await self.git.commit_details(commit.hash)
        for index, existing in enumerate(self.commits):
            if existing.hash == commit.hash:
                self.commits[index] = full
                break
        return full


async def resolve_branch(git: GitClient, branch: str | None) -> str:
    """The branch to browse: *branch* or the current one."""
    if branch:
        return branch
    try:
        return await git.current_branch()
    except GitError as exc:
        raise GitError("Could not determine current branch", exc.stderr, exc.returncode) from exc


def page_index(name: str, page_length: int) -> int | None:
    """Map a ``0``-``9`` key to a row on the current page."""
    if len(name) == 1 and name in "0123456789" and int(name) < page_length:
        return int(name)
    return None

"""Async wrapper around the ``git`` executable."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from pathlib import Path

from labcommitr.git.models import CommitInfo, MergeParent, StagedFile
from labcommitr.git.parser import (
    LOG_FORMAT,
    body_from_message,
    parse_log,
    parse_name_status,
    parse_numstat,
    parse_stat_summary,
)
from labcommitr.logging import get_logger

logger = get_logger(__name__)

_RENAME_FLAGS = ("--find-copies-harder", "-C50")


class GitError(Exception):
    """A git command exited non-zero."""

    def __init__(self, message: str, stderr: str = "", returncode: int | None = None) -> None:
        super().__init__(message)
        self.stderr = stderr
        self.returncode = returncode

    def __str__(self) -> str:
        detail = self.stderr.strip()
        return f"{self.args[0]}: {detail}" if detail else self.args[0]


class GitClient:
    """Runs git subcommands in *cwd* (the current directory by default)."""

    def __init__(self, cwd: Path | str | None = None, executable: str = "git") -> None:
        self.cwd = Path(cwd) if cwd is not None else None
        self.executable = executable

    async def _run(self, *args: str, check: bool = True) -> str:
        logger.debug("git %s", " ".join(args))
        try:
            proc = await asyncio.create_subprocess_exec(
                self.executable,
                *args,
                cwd=self.cwd,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as exc:
            raise GitError("git executable not found", str(exc)) from exc
        stdout, stderr = await proc.communicate()
        out = stdout.decode("utf-8", errors="replace")
        err = stderr.decode("utf-8", errors="replace")
        if check and proc.returncode != 0:
            command = next((a for a in args if not a.startswith("-") and "=" not in a), args[0])
            raise GitError(f"git {command} failed", err, proc.returncode)
        return out

    async def _succeeds(self, *args: str) -> bool:
        try:
            await self._run(*args)
        except GitError:
            return False
        return True

    # -----------------------------------------------------------------------
    # Repository state
    # -----------------------------------------------------------------------

    async def is_repository(self) -> bool:
        return await self._succeeds("rev-parse", "--git-dir")

    async def current_branch(self) -> str:
        return (await self._run("rev-parse", "--abbrev-ref", "HEAD")).strip()

    async def head(self) -> str:
        """Short hash of HEAD."""
        return (await self._run("rev-parse", "--short=7", "HEAD")).strip()

    async def toplevel(self) -> Path:
        return Path((await self._run("rev-parse", "--show-toplevel")).strip())

    async def config_value(self, key: str) -> str | None:
        """Value of a git config *key*, or ``None`` when unset."""
        try:
            value = (await self._run("config", "--get", key)).strip()
        except GitError:
            return None
        return value or None

    async def staged_files(self) -> list[str]:
        output = await self._run("diff", "--cached", "--name-only")
        return [line for line in output.splitlines() if line.strip()]

    async def unstaged_tracked_files(self) -> list[str]:
        output = await self._run("diff", "--name-only")
        return [line for line in output.splitlines() if line.strip()]

    async def has_untracked_files(self) -> bool:
        output = await self._run("ls-files", "--others", "--exclude-standard")
        return bool(output.strip())

    async def has_uncommitted_changes(self) -> bool:
        output = await self._run("status", "--porcelain")
        return bool(output.strip())

    async def staged_file_details(self) -> list[StagedFile]:
        """Staged paths with status and line counts, renames and copies resolved."""
        status = await self._run("diff", "--cached", "--name-status", *_RENAME_FLAGS)
        if not status.strip():
            return []
        numstat = await self._run("diff", "--cached", "--numstat", *_RENAME_FLAGS)
        return parse_name_status(status, parse_numstat(numstat))

    # -----------------------------------------------------------------------
    # Staging and committing
    # -----------------------------------------------------------------------

    async def stage_all_tracked(self) -> list[str]:
        """``git add -u``; returns the paths that were not staged before."""
        before = set(await self.staged_files())
        await self._run("add", "-u")
        return [path for path in await self.staged_files() if path not in before]

    async def unstage(self, paths: Sequence[str]) -> None:
        if not paths:
            return
        await self._run("reset", "HEAD", "--", *paths)

    async def commit(
        self,
        subject: str,
        body: str | None = None,
        *,
        sign: bool = False,
        skip_hooks: bool = False,
    ) -> str:
        """Create a commit and return its short hash."""
        args = ["commit", "-m", subject]
        if body:
            args += ["-m", body]
        if sign:
            args.append("-S")
        if skip_hooks:
            args.append("--no-verify")
        await self._run(*args)
        return await self.head()

    async def amend_message(self, subject: str, body: str | None = None, *, sign: bool = False) -> str:
        """Replace the message of HEAD and return its new short hash."""
        args = ["commit", "--amend", "-m", subject]
        if body:
            args += ["-m", body]
        if sign:
            args.append("-S")
        await self._run(*args)
        return await self.head()

    # -----------------------------------------------------------------------
    # History
    # -----------------------------------------------------------------------

    async def fetch_commits(
        self,
        limit: int,
        branch: str | None = None,
        before: str | None = None,
    ) -> list[CommitInfo]:
        """Up to *limit* commits from *branch*, or older than *before* when paging."""
        args = ["log", "--max-count", str(limit), f"--format={LOG_FORMAT}"]
        if before:
            args.append(f"{before}^")
        elif branch:
            args.append(branch)
        try:
            output = await self._run(*args)
        except GitError as exc:
            # Empty repository or paging past the root commit.
            logger.debug("git log returned no history: %s", exc)
            return []
        return parse_log(output)

    async def commit_details(self, commit_hash: str) -> CommitInfo:
        """Full information for one commit, including body and changed files."""
        found = parse_log(await self._run("log", "-1", f"--format={LOG_FORMAT}", commit_hash))
        if not found:
            raise GitError(f"Commit {commit_hash} not found")
        info = found[0]
        message = await self._run("log", "-1", "--format=%B", commit_hash)
        stat = await self._run("show", "--stat", "--format=", commit_hash)
        names = await self._run("show", "--name-only", "--format=", commit_hash)
        return CommitInfo(
            hash=info.hash,
            subject=info.subject,
            author_name=info.author_name,
            author_email=info.author_email,
            date=info.date,
            parents=info.parents,
            body=body_from_message(message),
            file_stats=parse_stat_summary(stat),
            files=tuple(line for line in names.splitlines() if line.strip()),
        )

    async def merge_parents(self, commit_hash: str) -> list[MergeParent]:
        output = await self._run("log", "-1", "--format=%P", commit_hash)
        parents: list[MergeParent] = []
        for number, parent in enumerate(output.split(), start=1):
            branch = None
            try:
                branches = await self._run(
                    "branch", "--contains", parent, "--format=%(refname:short)"
                )
                branch = next((b.strip() for b in branches.splitlines() if b.strip()), None)
            except GitError as exc:
                logger.debug("No branch contains %s: %s", parent, exc)
            parents.append(MergeParent(number=number, hash=parent, branch=branch))
        return parents

    async def commit_diff(self, commit_hash: str) -> str:
        return await self._run("show", commit_hash)

    # -----------------------------------------------------------------------
    # Revert
    # -----------------------------------------------------------------------

    async def revert(self, commit_hash: str, parent_number: int | None = None) -> None:
        """``git revert --no-edit``; raises :class:`GitError` on conflicts."""
        args = ["revert", "--no-edit"]
        if parent_number is not None:
            args += ["-m", str(parent_number)]
        args.append(commit_hash)
        await self._run(*args)

    async def continue_revert(self) -> None:
        await self._run("-c", "core.editor=true", "revert", "--continue")

    async def abort_revert(self) -> None:
        await self._run("revert", "--abort")

    async def revert_in_progress(self) -> bool:
        return await self._succeeds("rev-parse", "--verify", "--quiet", "REVERT_HEAD")

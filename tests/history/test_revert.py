"""Tests for reverting commits."""

from __future__ import annotations

from dataclasses import replace
from datetime import UTC, datetime
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from labcommitr.config import (
    BodyConfig,
    CommitType,
    ConfigLoadResult,
    Configuration,
    EditorPreference,
    FormatConfig,
)
from labcommitr.errors import Cancelled, WorkflowError
from labcommitr.git import CommitInfo, GitError, MergeParent
from labcommitr.history import CommitPager, RevertOptions, revert_commit, run_revert
from labcommitr.history.revert import select_commit
from tests.history.conftest import with_details
from tests.ui.fakes import ScriptedTerminal


@pytest.fixture
def loaded() -> ConfigLoadResult:
    config = Configuration(
        types=(
            CommitType("feat", "A new feature"),
            CommitType("revert", "Revert a previous commit"),
        ),
        format=FormatConfig(body=BodyConfig(editor_preference=EditorPreference.INLINE)),
    )
    return ConfigLoadResult(
        config=config,
        source="project",
        path=None,
        loaded_at=datetime.now(UTC),
        emoji_mode_active=False,
    )


class TestRevertCommit:
    @pytest.mark.asyncio
    async def test_no_edit_uses_git_message(
        self, git: AsyncMock, commits: list[CommitInfo], loaded: ConfigLoadResult
    ) -> None:
        terminal = ScriptedTerminal()
        short_hash = await revert_commit(commits[0].hash, git=git, loaded=loaded, no_edit=True, terminal=terminal)
        assert short_hash == "fff0000"
        git.revert.assert_awaited_once_with(commits[0].hash, None)
        git.amend_message.assert_not_awaited()
        assert "Reverting commit: 000000c" in terminal.text

    @pytest.mark.asyncio
    async def test_proceed_without_editing(
        self, git: AsyncMock, commits: list[CommitInfo], loaded: ConfigLoadResult
    ) -> None:
        terminal = ScriptedTerminal(["return", "return"])
        await revert_commit(commits[0].hash, git=git, loaded=loaded, terminal=terminal)
        git.revert.assert_awaited_once()
        git.amend_message.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_declining_cancels_before_git(
        self, git: AsyncMock, commits: list[CommitInfo], loaded: ConfigLoadResult
    ) -> None:
        terminal = ScriptedTerminal(["down", "return"])
        with pytest.raises(Cancelled):
            await revert_commit(commits[0].hash, git=git, loaded=loaded, terminal=terminal)
        git.revert.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_custom_message_is_amended(
        self, git: AsyncMock, commits: list[CommitInfo], loaded: ConfigLoadResult
    ) -> None:
        git.amend_message.return_value = "abc9999"
        target = commits[0]
        # Proceed: Yes; Edit: move to Yes; accept scope, subject, body; commit from preview.
        terminal = ScriptedTerminal(["return", "down", "return", "return", "return", "return", "return"])

        short_hash = await revert_commit(target.hash, git=git, loaded=loaded, terminal=terminal)

        assert short_hash == "abc9999"
        git.amend_message.assert_awaited_once_with(
            'revert(core): Revert "change 12"',
            f"This reverts commit {target.hash}.",
            sign=False,
        )
        assert git.revert.await_count == 1

    @pytest.mark.asyncio
    async def test_custom_message_without_revert_type_asks_for_type(
        self, git: AsyncMock, commits: list[CommitInfo], loaded: ConfigLoadResult
    ) -> None:
        no_revert = replace(loaded, config=replace(loaded.config, types=(CommitType("feat", "A new feature"),)))
        terminal = ScriptedTerminal(["return", "down", "return", "return", "return", "return", "return", "return"])
        await revert_commit(commits[0].hash, git=git, loaded=no_revert, terminal=terminal)
        line = git.amend_message.await_args.args[0]
        assert line == 'feat(core): Revert "change 12"'

    @pytest.mark.asyncio
    async def test_merge_commit_prompts_for_parent(
        self, git: AsyncMock, commits: list[CommitInfo], loaded: ConfigLoadResult
    ) -> None:
        merge = replace(with_details(commits[0]), parents=("1" * 40, "2" * 40))
        git.commit_details.side_effect = None
        git.commit_details.return_value = merge
        git.merge_parents.return_value = [
            MergeParent(1, "1" * 40, "main"),
            MergeParent(2, "2" * 40, "feature"),
        ]
        terminal = ScriptedTerminal(["down", "return"])
        await revert_commit(merge.hash, git=git, loaded=loaded, no_edit=True, terminal=terminal)
        git.revert.assert_awaited_once_with(merge.hash, 2)
        assert "Parent 1: main (1111111) [mainline, default]" in terminal.text

    @pytest.mark.asyncio
    async def test_conflict_points_to_continue_and_abort(
        self, git: AsyncMock, commits: list[CommitInfo], loaded: ConfigLoadResult
    ) -> None:
        git.revert.side_effect = GitError("git revert failed", "CONFLICT (content): Merge conflict in a.txt", 1)
        with pytest.raises(WorkflowError, match="Conflicts detected") as exc_info:
            await revert_commit(commits[0].hash, git=git, loaded=loaded, no_edit=True, terminal=ScriptedTerminal())
        assert any("--continue" in s for s in exc_info.value.solutions)
        assert any("--abort" in s for s in exc_info.value.solutions)

    @pytest.mark.asyncio
    async def test_other_git_failure(
        self, git: AsyncMock, commits: list[CommitInfo], loaded: ConfigLoadResult
    ) -> None:
        git.revert.side_effect = GitError("git revert failed", "bad object", 128)
        with pytest.raises(WorkflowError, match="Revert failed"):
            await revert_commit(commits[0].hash, git=git, loaded=loaded, no_edit=True, terminal=ScriptedTerminal())


class TestSelectCommit:
    @pytest.mark.asyncio
    async def test_page_forward_and_pick(self, git: AsyncMock, commits: list[CommitInfo]) -> None:
        pager = CommitPager(git, "main")
        await pager.load_more()
        terminal = ScriptedTerminal(["p", "n", "1"])
        chosen = await select_commit(pager, emoji_active=False, terminal=terminal)
        assert chosen == commits[11]
        assert "Select Commit to Revert" in terminal.text

    @pytest.mark.asyncio
    async def test_escape_cancels(self, git: AsyncMock) -> None:
        pager = CommitPager(git, "main")
        await pager.load_more()
        with pytest.raises(Cancelled):
            await select_commit(pager, emoji_active=False, terminal=ScriptedTerminal(["escape"]))


class TestRunRevert:
    @pytest.mark.asyncio
    async def test_pick_and_revert(
        self, git: AsyncMock, commits: list[CommitInfo], config_file: Path
    ) -> None:
        git.has_uncommitted_changes.return_value = True
        terminal = ScriptedTerminal(["3"])
        options = RevertOptions(no_edit=True, cwd=config_file.parent)
        assert await run_revert(options, git=git, terminal=terminal) == "fff0000"
        git.revert.assert_awaited_once_with(commits[3].hash, None)
        assert "uncommitted changes" in terminal.text

    @pytest.mark.asyncio
    async def test_requires_configuration(self, git: AsyncMock, project: Path) -> None:
        with pytest.raises(WorkflowError, match="No configuration found"):
            await run_revert(RevertOptions(cwd=project), git=git, terminal=ScriptedTerminal())

    @pytest.mark.asyncio
    async def test_requires_terminal(self, git: AsyncMock, config_file: Path) -> None:
        with pytest.raises(WorkflowError, match="interactive terminal"):
            await run_revert(RevertOptions(cwd=config_file.parent), git=git, terminal=ScriptedTerminal(tty=False))

    @pytest.mark.asyncio
    async def test_continue_without_revert_in_progress(self, git: AsyncMock) -> None:
        with pytest.raises(WorkflowError, match="No revert in progress"):
            await run_revert(RevertOptions(continue_=True), git=git, terminal=ScriptedTerminal())

    @pytest.mark.asyncio
    async def test_continue(self, git: AsyncMock) -> None:
        git.revert_in_progress.return_value = True
        terminal = ScriptedTerminal()
        assert await run_revert(RevertOptions(continue_=True), git=git, terminal=terminal) is None
        git.continue_revert.assert_awaited_once()
        assert "Revert completed" in terminal.text

    @pytest.mark.asyncio
    async def test_abort(self, git: AsyncMock) -> None:
        git.revert_in_progress.return_value = True
        await run_revert(RevertOptions(abort=True), git=git, terminal=ScriptedTerminal())
        git.abort_revert.assert_awaited_once()
        git.continue_revert.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_continue_with_unresolved_conflicts(self, git: AsyncMock) -> None:
        git.revert_in_progress.return_value = True
        git.continue_revert.side_effect = GitError(
            "git revert failed", "error: Committing is not possible because you have unmerged files.\nconflict", 1
        )
        with pytest.raises(WorkflowError, match="Conflicts detected"):
            await run_revert(RevertOptions(continue_=True), git=git, terminal=ScriptedTerminal())

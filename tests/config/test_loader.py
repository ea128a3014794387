"""Tests for config discovery, loading and caching."""

from __future__ import annotations

import os
import time
from pathlib import Path

import pytest

from labcommitr.config import ConfigError, ConfigLoader, MarkerType
from labcommitr.config.loader import MTIME_TOLERANCE_SECONDS
from tests.conftest import MINIMAL_CONFIG


@pytest.fixture
def loader() -> ConfigLoader:
    return ConfigLoader()


class TestProjectRoot:
    def test_git_directory_marks_root(self, loader: ConfigLoader, project: Path) -> None:
        nested = project / "src" / "pkg"
        nested.mkdir(parents=True)
        root = loader.find_project_root(nested)
        assert root.path == project.resolve()
        assert root.marker_type is MarkerType.GIT

    def test_git_file_marks_worktree_root(self, loader: ConfigLoader, tmp_path: Path) -> None:
        worktree = tmp_path / "worktree"
        (worktree / "src").mkdir(parents=True)
        (worktree / ".git").write_text("gitdir: /elsewhere/.git/worktrees/wt\n", encoding="utf-8")
        (tmp_path / "pyproject.toml").write_text("[project]\n", encoding="utf-8")
        root = loader.find_project_root(worktree / "src")
        assert root.path == worktree.resolve()
        assert root.marker_type is MarkerType.GIT

    def test_manifest_marks_root(self, loader: ConfigLoader, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text("[project]\n", encoding="utf-8")
        root = loader.find_project_root(tmp_path)
        assert root.marker_type is MarkerType.MANIFEST

    def test_monorepo_detection(self, loader: ConfigLoader, project: Path) -> None:
        for name in ("web", "api"):
            (project / name).mkdir()
            (project / name / "package.json").write_text("{}", encoding="utf-8")
        (project / ".hidden").mkdir()
        (project / ".hidden" / "package.json").write_text("{}", encoding="utf-8")
        root = loader.find_project_root(project)
        assert root.is_monorepo
        assert [p.name for p in root.subprojects] == ["api", "web"]

    def test_single_subproject_is_not_a_monorepo(self, loader: ConfigLoader, project: Path) -> None:
        (project / "web").mkdir()
        (project / "web" / "package.json").write_text("{}", encoding="utf-8")
        assert not loader.find_project_root(project).is_monorepo


class TestLoad:
    @pytest.mark.asyncio
    async def test_defaults_when_no_file(self, loader: ConfigLoader, project: Path) -> None:
        result = await loader.load(project)
        assert result.source == "defaults"
        assert result.path is None
        assert "feat" in [t.id for t in result.config.types]

    @pytest.mark.asyncio
    async def test_loads_project_file(self, loader: ConfigLoader, config_file: Path) -> None:
        result = await loader.load(config_file.parent)
        assert result.source == "project"
        assert result.path == config_file.resolve()
        assert [t.id for t in result.config.types] == ["feat", "fix", "docs"]

    @pytest.mark.asyncio
    async def test_unknown_keys_of_mixed_types_are_ignored(self, loader: ConfigLoader, project: Path) -> None:
        (project / ".labcommitr.config.yaml").write_text(
            MINIMAL_CONFIG + "1: x\nextra: y\non: true\n", encoding="utf-8"
        )
        result = await loader.load(project)
        assert result.source == "project"
        assert [t.id for t in result.config.types] == ["feat", "fix", "docs"]

    @pytest.mark.asyncio
    async def test_yml_extension_is_accepted(self, loader: ConfigLoader, project: Path) -> None:
        (project / ".labcommitr.config.yml").write_text(MINIMAL_CONFIG, encoding="utf-8")
        result = await loader.load(project)
        assert result.path is not None
        assert result.path.suffix == ".yml"

    @pytest.mark.asyncio
    async def test_yaml_wins_over_yml(self, loader: ConfigLoader, config_file: Path) -> None:
        (config_file.parent / ".labcommitr.config.yml").write_text("types: []\n", encoding="utf-8")
        result = await loader.load(config_file.parent)
        assert result.path == config_file.resolve()

    @pytest.mark.asyncio
    async def test_force_emoji_detection_overrides_terminal(
        self, loader: ConfigLoader, project: Path
    ) -> None:
        (project / ".labcommitr.config.yaml").write_text(
            MINIMAL_CONFIG + "config:\n  force_emoji_detection: true\n", encoding="utf-8"
        )
        assert (await loader.load(project)).emoji_mode_active is True

    @pytest.mark.asyncio
    async def test_emoji_disabled_wins_over_force(self, loader: ConfigLoader, project: Path) -> None:
        (project / ".labcommitr.config.yaml").write_text(
            MINIMAL_CONFIG + "config:\n  emoji_enabled: false\n  force_emoji_detection: true\n",
            encoding="utf-8",
        )
        assert (await loader.load(project)).emoji_mode_active is False


class TestCache:
    @pytest.mark.asyncio
    async def test_second_load_is_served_from_cache(
        self, loader: ConfigLoader, config_file: Path
    ) -> None:
        first = await loader.load(config_file.parent)
        second = await loader.load(config_file.parent)
        assert second is first

    @pytest.mark.asyncio
    async def test_modified_file_is_reloaded(self, loader: ConfigLoader, config_file: Path) -> None:
        first = await loader.load(config_file.parent)
        config_file.write_text(MINIMAL_CONFIG.replace("A bug fix", "Repairs"), encoding="utf-8")
        later = time.time() + MTIME_TOLERANCE_SECONDS + 5
        os.utime(config_file, (later, later))

        second = await loader.load(config_file.parent)
        assert second is not first
        assert second.config.find_type("fix").description == "Repairs"  # type: ignore[union-attr]

    @pytest.mark.asyncio
    async def test_clear_cache_forces_reload(self, loader: ConfigLoader, config_file: Path) -> None:
        first = await loader.load(config_file.parent)
        loader.clear_cache()
        assert await loader.load(config_file.parent) is not first


class TestErrors:
    async def _load_text(self, loader: ConfigLoader, project: Path, content: str) -> None:
        (project / ".labcommitr.config.yaml").write_text(content, encoding="utf-8")
        await loader.load(project)

    @pytest.mark.asyncio
    async def test_empty_file(self, loader: ConfigLoader, project: Path) -> None:
        with pytest.raises(ConfigError, match="empty") as exc_info:
            await self._load_text(loader, project, "  \n")
        assert exc_info.value.file_path is not None
        assert exc_info.value.solutions

    @pytest.mark.asyncio
    async def test_yaml_syntax_error_reports_location(self, loader: ConfigLoader, project: Path) -> None:
        with pytest.raises(ConfigError) as exc_info:
            await self._load_text(loader, project, "types:\n  - id: feat: bad\n")
        assert exc_info.value.message.startswith("Invalid YAML syntax at line")

    @pytest.mark.asyncio
    async def test_top_level_must_be_mapping(self, loader: ConfigLoader, project: Path) -> None:
        with pytest.raises(ConfigError, match="YAML mapping"):
            await self._load_text(loader, project, "- feat\n- fix\n")

    @pytest.mark.asyncio
    async def test_types_must_be_a_list(self, loader: ConfigLoader, project: Path) -> None:
        with pytest.raises(ConfigError, match="'types' must be a list"):
            await self._load_text(loader, project, "types: feat\n")

    @pytest.mark.asyncio
    async def test_validation_errors_are_aggregated(self, loader: ConfigLoader, project: Path) -> None:
        content = "types:\n  - id: Feat\n    description: x\n  - id: fix\n"
        with pytest.raises(ConfigError) as exc_info:
            await self._load_text(loader, project, content)
        error = exc_info.value
        assert error.message == "Configuration has 2 validation errors"
        assert "1. " in (error.details or "")
        assert "2. " in (error.details or "")

    @pytest.mark.asyncio
    async def test_invalid_utf8(self, loader: ConfigLoader, project: Path) -> None:
        (project / ".labcommitr.config.yaml").write_bytes(b"types: \xff\xfe\n")
        with pytest.raises(ConfigError, match="UTF-8"):
            await loader.load(project)

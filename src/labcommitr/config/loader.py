"""Configuration discovery, loading and caching.

:class:`ConfigLoader` walks up from a start directory to the project root,
looks for ``.labcommitr.config.yaml`` (then ``.yml``), parses and validates
it, merges it over the defaults and caches the result keyed by the file's
absolute path. Anything that goes wrong reaches the caller as a
:class:`~labcommitr.config.errors.ConfigError`.
"""

from __future__ import annotations

import asyncio
import os
import time
from collections import OrderedDict
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import yaml

from labcommitr.config.defaults import create_fallback_config, merge_with_defaults
from labcommitr.config.errors import ConfigError, validation_failure
from labcommitr.config.models import (
    CachedConfig,
    ConfigLoadResult,
    Configuration,
    MarkerType,
    ProjectRoot,
)
from labcommitr.config.validator import ConfigValidator
from labcommitr.emoji import detect_emoji_support
from labcommitr.logging import get_logger

logger = get_logger(__name__)

CONFIG_FILENAMES = (".labcommitr.config.yaml", ".labcommitr.config.yml")
MANIFEST_FILENAMES = ("package.json", "pyproject.toml")

# Filesystem mtime granularity; edits within this window of a load are not seen.
MTIME_TOLERANCE_SECONDS = 1.0
_MAX_CACHE_ENTRIES = 50


def _has_manifest(directory: Path) -> bool:
    return any((directory / name).is_file() for name in MANIFEST_FILENAMES)


def detect_subprojects(root: Path) -> tuple[Path, ...]:
    """Immediate non-hidden subdirectories of *root* that hold a manifest."""
    try:
        children = sorted(root.iterdir())
    except OSError:
        return ()
    return tuple(
        child
        for child in children
        if child.is_dir() and not child.name.startswith(".") and _has_manifest(child)
    )


def emoji_mode_for(config: Configuration) -> bool:
    """Whether emoji should be shown for *config* in this terminal."""
    if not config.config.emoji_enabled:
        return False
    forced = config.config.force_emoji_detection
    if forced is not None:
        return forced
    return detect_emoji_support()


def parse_yaml(content: str, file_path: Path) -> Any:
    """Parse YAML text, turning syntax errors into :class:`ConfigError`."""
    try:
        return yaml.safe_load(content)
    except yaml.YAMLError as exc:
        mark = getattr(exc, "problem_mark", None)
        location = f" at line {mark.line + 1}, column {mark.column + 1}" if mark else ""
        problem = getattr(exc, "problem", None) or str(exc)
        raise ConfigError(
            f"Invalid YAML syntax{location}",
            details=str(problem),
            solutions=[
                "Check indentation: YAML uses spaces, never tabs",
                "Quote values containing ':' or '#'",
                "Validate the file with an online YAML checker",
            ],
            file_path=file_path,
        ) from exc


class ConfigLoader:
    """Loads project configuration with root discovery and an mtime-checked cache."""

    def __init__(self, validator: ConfigValidator | None = None) -> None:
        self._validator = validator or ConfigValidator()
        self._root_cache: dict[Path, ProjectRoot] = {}
        self._cache: OrderedDict[Path, CachedConfig] = OrderedDict()

    # -----------------------------------------------------------------------
    # Discovery
    # -----------------------------------------------------------------------

    def find_project_root(self, start_path: Path | str | None = None) -> ProjectRoot:
        """Walk up from *start_path* to the nearest ``.git`` entry or manifest.

        ``.git`` is a file in worktrees and submodules, so any entry counts.
        """
        start = Path(start_path or Path.cwd()).resolve()
        cached = self._root_cache.get(start)
        if cached is not None:
            return cached

        root = ProjectRoot(path=Path(start.anchor), marker_type=MarkerType.FILESYSTEM_ROOT)
        current = start
        while True:
            marker: MarkerType | None = None
            if (current / ".git").exists():
                marker = MarkerType.GIT
            elif _has_manifest(current):
                marker = MarkerType.MANIFEST
            if marker is not None:
                subprojects = detect_subprojects(current)
                root = ProjectRoot(
                    path=current,
                    marker_type=marker,
                    is_monorepo=len(subprojects) > 1,
                    subprojects=subprojects,
                )
                break
            if current.parent == current:
                break
            current = current.parent

        logger.debug("Project root for %s: %s (%s)", start, root.path, root.marker_type)
        self._root_cache[start] = root
        return root

    def find_config_file(self, root: Path) -> Path | None:
        """Return the first config file present in *root*."""
        for name in CONFIG_FILENAMES:
            candidate = root / name
            if candidate.is_file():
                return candidate
        return None

    # -----------------------------------------------------------------------
    # Loading
    # -----------------------------------------------------------------------

    async def load(self, start_path: Path | str | None = None) -> ConfigLoadResult:
        """Load the configuration that applies to *start_path*.

        Returns the built-in fallback (``source="defaults"``) when no config
        file exists.
        """
        try:
            root = self.find_project_root(start_path)
            config_path = self.find_config_file(root.path)
            if config_path is None:
                logger.info("No configuration file under %s; using defaults", root.path)
                config = create_fallback_config()
                return ConfigLoadResult(
                    config=config,
                    source="defaults",
                    path=None,
                    loaded_at=datetime.now(UTC),
                    emoji_mode_active=emoji_mode_for(config),
                )

            config_path = config_path.resolve()
            cached = self._cache.get(config_path)
            if cached is not None and self._is_fresh(cached, config_path):
                logger.debug("Configuration cache hit: %s", config_path)
                return cached.data

            result = await self._load_file(config_path)
            self._store(config_path, result)
            return result
        except ConfigError:
            raise
        except Exception as exc:  # noqa: BLE001
            raise ConfigError(
                "Unexpected error while loading configuration",
                details=f"{type(exc).__name__}: {exc}",
                solutions=[
                    "Re-run with LABCOMMITR_LOG_LEVEL=DEBUG for more detail",
                    "Regenerate the file with 'lab init --force'",
                ],
            ) from exc

    async def load_raw(self, config_path: Path) -> Any:
        """Read and parse *config_path* without validating or merging."""
        self._check_readable(config_path)
        try:
            content = await asyncio.to_thread(config_path.read_text, encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise ConfigError(
                "Configuration file is not valid UTF-8",
                details=str(exc),
                solutions=["Save the file with UTF-8 encoding"],
                file_path=config_path,
            ) from exc
        except OSError as exc:
            raise ConfigError(
                "Could not read configuration file",
                details=str(exc),
                solutions=["Check that the file exists and is readable"],
                file_path=config_path,
            ) from exc

        if not content.strip():
            raise ConfigError(
                "Configuration file is empty",
                solutions=[
                    "Add at least a 'types' list to the file",
                    "Run 'lab init --force' to generate a configuration",
                ],
                file_path=config_path,
            )
        return parse_yaml(content, config_path)

    async def _load_file(self, config_path: Path) -> ConfigLoadResult:
        logger.info("Loading configuration from %s", config_path)
        raw = await self.load_raw(config_path)

        if not isinstance(raw, dict):
            raise ConfigError(
                "Configuration must be a YAML mapping",
                details=f"The top level of the file is a {type(raw).__name__}",
                solutions=["Start the file with keys such as 'version:' and 'types:'"],
                file_path=config_path,
            )
        if "types" in raw and not isinstance(raw["types"], list):
            raise ConfigError(
                "'types' must be a list",
                details="Each commit type is a list item starting with '-'",
                solutions=["Write types as:\n     types:\n       - id: feat\n         description: A new feature"],
                file_path=config_path,
            )

        result = self._validator.validate(raw)
        if not result.valid:
            raise validation_failure(result.errors, config_path)

        config = merge_with_defaults(raw)
        return ConfigLoadResult(
            config=config,
            source="project",
            path=config_path,
            loaded_at=datetime.now(UTC),
            emoji_mode_active=emoji_mode_for(config),
        )

    def _check_readable(self, config_path: Path) -> None:
        if not config_path.exists():
            raise ConfigError(
                "Configuration file not found",
                solutions=["Run 'lab init' to create one"],
                file_path=config_path,
            )
        if not os.access(config_path, os.R_OK):
            raise ConfigError(
                "Configuration file is not readable",
                details="The current user lacks read permission",
                solutions=[f"Fix the permissions, e.g. chmod u+r {config_path.name}"],
                file_path=config_path,
            )

    # -----------------------------------------------------------------------
    # Cache
    # -----------------------------------------------------------------------

    def _is_fresh(self, cached: CachedConfig, config_path: Path) -> bool:
        try:
            mtime = config_path.stat().st_mtime
        except OSError:
            return False
        return mtime <= cached.timestamp + MTIME_TOLERANCE_SECONDS

    def _store(self, config_path: Path, result: ConfigLoadResult) -> None:
        self._cache[config_path] = CachedConfig(
            data=result, timestamp=time.time(), watched_paths=(config_path,)
        )
        self._cache.move_to_end(config_path)
        while len(self._cache) > _MAX_CACHE_ENTRIES:
            evicted, _ = self._cache.popitem(last=False)
            logger.debug("Evicted cached configuration %s", evicted)

    def clear_cache(self) -> None:
        """Drop every cached configuration and project root."""
        self._cache.clear()
        self._root_cache.clear()


_default_loader = ConfigLoader()


async def load_config(start_path: Path | str | None = None) -> ConfigLoadResult:
    """Load configuration for *start_path* using the process-wide loader."""
    return await _default_loader.load(start_path)


async def load_raw_config(config_path: Path | str) -> Any:
    """Parse a config file without validating it."""
    return await _default_loader.load_raw(Path(config_path))

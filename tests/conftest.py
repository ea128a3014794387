"""Shared pytest fixtures for the labcommitr test suite."""

from __future__ import annotations

from pathlib import Path

import pytest

from labcommitr.settings import Settings


@pytest.fixture
def test_settings() -> Settings:
    """Settings instance with test defaults, ignoring any .env file on disk."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        log_level="DEBUG",
        log_format="text",
    )


@pytest.fixture(autouse=True)
def _plain_output(monkeypatch: pytest.MonkeyPatch) -> None:
    """Disable colour codes and emoji detection overrides for predictable text."""
    monkeypatch.setenv("NO_COLOR", "1")
    monkeypatch.delenv("FORCE_EMOJI_DETECTION", raising=False)
    monkeypatch.delenv("EDITOR", raising=False)
    monkeypatch.delenv("VISUAL", raising=False)


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """An empty directory marked as a git project root."""
    (tmp_path / ".git").mkdir()
    return tmp_path


MINIMAL_CONFIG = """\
version: "1.0"
types:
  - id: feat
    description: A new feature
    emoji: "✨"
  - id: fix
    description: A bug fix
    emoji: "🐛"
  - id: docs
    description: Documentation
"""


@pytest.fixture
def config_file(project: Path) -> Path:
    path = project / ".labcommitr.config.yaml"
    path.write_text(MINIMAL_CONFIG, encoding="utf-8")
    return path

"""Tests for Settings environment loading."""

from __future__ import annotations

import pytest

from labcommitr.settings import Settings


def _settings(**overrides: object) -> Settings:
    """Create a Settings instance ignoring any .env file on disk."""
    return Settings(_env_file=None, **overrides)  # type: ignore[call-arg]


def test_settings_default_values() -> None:
    s = _settings()
    assert s.log_level == "WARNING"
    assert s.log_format == "text"
    assert s.debug is False


def test_settings_log_level_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LABCOMMITR_LOG_LEVEL", "DEBUG")
    assert _settings().log_level == "DEBUG"


def test_settings_log_format_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LABCOMMITR_LOG_FORMAT", "json")
    assert _settings().log_format == "json"


def test_settings_debug_parsed_as_bool(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LABCOMMITR_DEBUG", "1")
    assert _settings().debug is True


def test_unprefixed_variables_are_ignored(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    assert _settings().log_level == "WARNING"

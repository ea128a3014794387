"""Tests for logging configuration."""

from __future__ import annotations

import json
import logging

import pytest

from labcommitr.logging import get_logger, setup_logging
from labcommitr.settings import Settings


def _make_settings(**overrides: object) -> Settings:
    return Settings(_env_file=None, **overrides)  # type: ignore[call-arg]


@pytest.fixture(autouse=True)
def _reset_root_logger() -> None:  # type: ignore[return]
    """Restore root logger state between tests."""
    root = logging.getLogger()
    original_handlers = list(root.handlers)
    original_level = root.level
    yield
    root.handlers.clear()
    root.handlers.extend(original_handlers)
    root.setLevel(original_level)


def test_get_logger_returns_logger_instance() -> None:
    logger = get_logger("labcommitr.test")
    assert isinstance(logger, logging.Logger)
    assert logger.name == "labcommitr.test"


def test_json_formatter_produces_valid_json(capfd: pytest.CaptureFixture[str]) -> None:
    settings = _make_settings(log_level="DEBUG", log_format="json")
    setup_logging(settings)
    logger = get_logger("test.json")
    logger.info("hello json")
    captured = capfd.readouterr()
    data = json.loads(captured.err.strip())
    assert data["level"] == "INFO"
    assert data["message"] == "hello json"
    assert data["name"] == "test.json"
    assert "timestamp" in data


def test_text_format_produces_readable_output(capfd: pytest.CaptureFixture[str]) -> None:
    settings = _make_settings(log_level="DEBUG", log_format="text")
    setup_logging(settings)
    get_logger("test.text").warning("hello text")
    line = capfd.readouterr().err.strip()
    assert line == "WARNING test.text: hello text"


def test_logs_never_reach_stdout(capfd: pytest.CaptureFixture[str]) -> None:
    setup_logging(_make_settings(log_level="DEBUG"))
    get_logger("test.stream").error("to stderr")
    captured = capfd.readouterr()
    assert captured.out == ""
    assert "to stderr" in captured.err


def test_default_level_is_warning() -> None:
    setup_logging(_make_settings())
    assert logging.getLogger().level == logging.WARNING


def test_debug_level_configuration() -> None:
    setup_logging(_make_settings(log_level="debug", log_format="json"))
    assert logging.getLogger().level == logging.DEBUG


def test_unknown_level_falls_back_to_warning() -> None:
    setup_logging(_make_settings(log_level="chatty"))
    assert logging.getLogger().level == logging.WARNING


def test_repeated_setup_replaces_handler() -> None:
    setup_logging(_make_settings())
    setup_logging(_make_settings())
    assert len(logging.getLogger().handlers) == 1

"""Tests for commit subject formatting."""

from __future__ import annotations

import pytest

from labcommitr.commit import format_commit_message
from labcommitr.config import FormatConfig

DEFAULT_TEMPLATE = FormatConfig().template


@pytest.mark.parametrize(
    ("scope", "emoji", "expected"),
    [
        ("api", "✨", "✨ feat(api): add login"),
        ("api", None, "feat(api): add login"),
        (None, "✨", "✨ feat: add login"),
        (None, None, "feat: add login"),
        ("", None, "feat: add login"),
    ],
)
def test_default_template(scope: str | None, emoji: str | None, expected: str) -> None:
    assert format_commit_message(DEFAULT_TEMPLATE, "feat", "add login", scope=scope, emoji=emoji) == expected


def test_template_without_emoji_placeholder_gets_prefix() -> None:
    result = format_commit_message("{type}: {subject}", "fix", "stop crash", emoji="🐛")
    assert result == "🐛 fix: stop crash"


def test_template_without_emoji_placeholder_and_no_emoji() -> None:
    assert format_commit_message("{type}: {subject}", "fix", "stop crash") == "fix: stop crash"


def test_custom_template_keeps_literal_text() -> None:
    result = format_commit_message("[{type}] {scope} - {subject}", "docs", "update", scope="readme")
    assert result == "[docs] readme - update"


def test_placeholders_inside_subject_are_left_alone() -> None:
    result = format_commit_message(DEFAULT_TEMPLATE, "feat", "support {scope} tokens", scope="cli")
    assert result == "feat(cli): support {scope} tokens"

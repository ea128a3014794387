"""Tests for subject, body and scope rules."""

from __future__ import annotations

from dataclasses import replace

import pytest

from labcommitr.commit import validate_body, validate_scope, validate_subject
from labcommitr.commit.rules import RuleViolation, find_prohibited
from labcommitr.config import BodyConfig, CommitType, Configuration, FormatConfig, ValidationRules


@pytest.fixture
def config() -> Configuration:
    return Configuration(
        types=(CommitType("feat", "A new feature"), CommitType("fix", "A bug fix")),
        format=FormatConfig(subject_max_length=20, body=BodyConfig(min_length=5, max_length=40)),
        validation=ValidationRules(
            require_scope_for=("feat",),
            allowed_scopes=("api", "ui"),
            subject_min_length=3,
            prohibited_words=("WIP",),
            prohibited_words_body=("todo",),
        ),
    )


class TestSubject:
    def test_valid(self, config: Configuration) -> None:
        assert validate_subject(config, "add login") == []

    def test_length_bounds_are_inclusive(self, config: Configuration) -> None:
        assert validate_subject(config, "abc") == []
        assert validate_subject(config, "x" * 20) == []

    def test_too_short(self, config: Configuration) -> None:
        [violation] = validate_subject(config, "ab")
        assert violation.message == "Subject too short (2 characters)"
        assert violation.context == "minimum 3"

    def test_too_long(self, config: Configuration) -> None:
        [violation] = validate_subject(config, "x" * 21)
        assert str(violation) == "Subject too long (21 characters) (maximum 20)"

    def test_prohibited_words_case_insensitive(self, config: Configuration) -> None:
        [violation] = validate_subject(config, "wip login")
        assert "WIP" in violation.message

    def test_multiple_violations(self, config: Configuration) -> None:
        assert len(validate_subject(config, "wi")) == 1
        assert len(validate_subject(config, "WIP" + "x" * 30)) == 2


class TestBody:
    def test_empty_body_allowed_when_optional(self, config: Configuration) -> None:
        assert validate_body(config, "") == []

    def test_empty_body_rejected_when_required(self, config: Configuration) -> None:
        required = replace(config, format=replace(config.format, body=BodyConfig(required=True)))
        [violation] = validate_body(required, "")
        assert violation.message == "Body is required"

    def test_bounds(self, config: Configuration) -> None:
        assert validate_body(config, "tiny") == [RuleViolation("Body too short (4 characters)", "minimum 5")]
        assert validate_body(config, "x" * 41)[0].context == "maximum 40"
        assert validate_body(config, "fine body") == []

    def test_no_maximum(self, config: Configuration) -> None:
        unbounded = replace(config, format=replace(config.format, body=BodyConfig()))
        assert validate_body(unbounded, "x" * 5000) == []

    def test_prohibited_words(self, config: Configuration) -> None:
        [violation] = validate_body(config, "TODO: fill in")
        assert violation.message == "Body contains prohibited words: todo"


class TestScope:
    def test_required_for_type(self, config: Configuration) -> None:
        violation = validate_scope(config, "feat", None)
        assert violation is not None
        assert "required" in violation.message

    def test_optional_for_other_types(self, config: Configuration) -> None:
        assert validate_scope(config, "fix", "") is None

    def test_allowed_list(self, config: Configuration) -> None:
        assert validate_scope(config, "fix", "api") is None
        violation = validate_scope(config, "fix", "db")
        assert violation is not None
        assert violation.context == "allowed: api, ui"

    def test_any_scope_when_list_empty(self, config: Configuration) -> None:
        open_rules = replace(config, validation=replace(config.validation, allowed_scopes=()))
        assert validate_scope(open_rules, "fix", "anything") is None


def test_find_prohibited_skips_empty_words() -> None:
    assert find_prohibited("some text", ["", "text"]) == ["text"]

"""Commit message composition and the ``lab commit`` workflow."""

from __future__ import annotations

from labcommitr.commit.formatter import format_commit_message
from labcommitr.commit.rules import RuleViolation, validate_body, validate_scope, validate_subject
from labcommitr.commit.workflow import (
    CommitDraft,
    CommitOptions,
    compose_message,
    run_commit,
)

__all__ = [
    "CommitDraft",
    "CommitOptions",
    "RuleViolation",
    "compose_message",
    "format_commit_message",
    "run_commit",
    "validate_body",
    "validate_scope",
    "validate_subject",
]

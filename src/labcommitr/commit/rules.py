"""Subject and body rules from the ``validation`` and ``format.body`` sections."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from labcommitr.config.models import Configuration


@dataclass(frozen=True)
class RuleViolation:
    message: str
    context: str | None = None

    def __str__(self) -> str:
        return f"{self.message} ({self.context})" if self.context else self.message


def find_prohibited(text: str, words: Iterable[str]) -> list[str]:
    """Prohibited *words* occurring in *text*, compared case-insensitively."""
    lowered = text.lower()
    return [word for word in words if word and word.lower() in lowered]


def validate_subject(config: Configuration, subject: str) -> list[RuleViolation]:
    violations: list[RuleViolation] = []
    minimum = config.validation.subject_min_length
    maximum = config.format.subject_max_length
    if len(subject) < minimum:
        violations.append(
            RuleViolation(f"Subject too short ({len(subject)} characters)", f"minimum {minimum}")
        )
    if len(subject) > maximum:
        violations.append(
            RuleViolation(f"Subject too long ({len(subject)} characters)", f"maximum {maximum}")
        )
    found = find_prohibited(subject, config.validation.prohibited_words)
    if found:
        violations.append(
            RuleViolation(
                f"Subject contains prohibited words: {', '.join(found)}",
                "please rephrase",
            )
        )
    return violations


def validate_body(config: Configuration, body: str) -> list[RuleViolation]:
    """Check *body*; an empty body only fails when one is required."""
    rules = config.format.body
    if not body:
        if rules.required:
            return [RuleViolation("Body is required", "please describe the change")]
        return []

    violations: list[RuleViolation] = []
    if len(body) < rules.min_length:
        violations.append(
            RuleViolation(f"Body too short ({len(body)} characters)", f"minimum {rules.min_length}")
        )
    if rules.max_length is not None and len(body) > rules.max_length:
        violations.append(
            RuleViolation(f"Body too long ({len(body)} characters)", f"maximum {rules.max_length}")
        )
    found = find_prohibited(body, config.validation.prohibited_words_body)
    if found:
        violations.append(
            RuleViolation(f"Body contains prohibited words: {', '.join(found)}", "please rephrase")
        )
    return violations


def validate_scope(config: Configuration, type_id: str, scope: str | None) -> RuleViolation | None:
    """Check *scope* against ``require_scope_for`` and ``allowed_scopes``."""
    if not scope:
        if type_id in config.validation.require_scope_for:
            return RuleViolation(f"Scope is required for commit type '{type_id}'")
        return None
    allowed = config.validation.allowed_scopes
    if allowed and scope not in allowed:
        return RuleViolation(f"Invalid scope '{scope}'", f"allowed: {', '.join(allowed)}")
    return None

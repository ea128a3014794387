"""Render a commit subject line from the configured template."""

from __future__ import annotations


def format_commit_message(
    template: str,
    type_id: str,
    subject: str,
    *,
    scope: str | None = None,
    emoji: str | None = None,
) -> str:
    """Fill *template* with the chosen parts.

    ``({scope})`` disappears when no scope is given. A non-empty *emoji* is
    followed by a space; templates without an ``{emoji}`` placeholder get it
    as a prefix.
    """
    if not scope:
        template = template.replace("({scope})", "")
    if emoji and "{emoji}" not in template:
        template = "{emoji}" + template
    return (
        template.replace("{emoji}", f"{emoji} " if emoji else "")
        .replace("{type}", type_id)
        .replace("{scope}", scope or "")
        .replace("{subject}", subject)
    )

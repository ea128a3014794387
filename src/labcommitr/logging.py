"""Logging configuration for the labcommitr CLI.

Log output goes to stderr so it never interleaves with prompt frames drawn
on stdout.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from labcommitr.settings import Settings


class _JsonFormatter(logging.Formatter):
    """Formats log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def setup_logging(settings: Settings) -> None:
    """Configure the root logger from *settings*.

    Safe to call more than once; each call replaces the previous handler.
    """
    level = getattr(logging, settings.log_level.upper(), logging.WARNING)
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)

    if settings.log_format == "json":
        handler.setFormatter(_JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))

    root.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Return a named logger.

    :func:`setup_logging` is invoked once by the CLI entry point; library
    callers that skip it get the stdlib default (warnings to stderr).
    """
    return logging.getLogger(name)

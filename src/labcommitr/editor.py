"""Spawn the user's editor to write a commit body."""

from __future__ import annotations

import os
import shlex
import shutil
import subprocess
import tempfile
from collections.abc import Mapping
from pathlib import Path

from labcommitr.logging import get_logger

logger = get_logger(__name__)

FALLBACK_EDITORS = ("nvim", "vim", "vi")
BODY_FILENAME = "COMMIT_BODY"


class EditorError(Exception):
    """No editor could be found or the editor failed."""


def detect_editor(env: Mapping[str, str] | None = None) -> list[str] | None:
    """Return the editor command line, or ``None`` when nothing is available.

    ``$EDITOR`` wins over ``$VISUAL``; either may carry arguments
    (``code --wait``). Otherwise the first of nvim, vim, vi on ``PATH``.
    """
    env = os.environ if env is None else env
    configured = (env.get("EDITOR") or env.get("VISUAL") or "").strip()
    if configured:
        argv = shlex.split(configured)
        program = argv[0]
        if os.sep in program and Path(program).exists():
            return argv
        found = shutil.which(program)
        if found:
            return [found, *argv[1:]]
        logger.warning("Configured editor %r not found on PATH", program)

    for name in FALLBACK_EDITORS:
        found = shutil.which(name)
        if found:
            return [found]
    return None


def edit_in_editor(initial: str = "", editor: list[str] | None = None) -> str | None:
    """Open *initial* in an editor and return the saved text, stripped.

    Returns ``None`` when the saved file is empty.
    """
    argv = editor or detect_editor()
    if argv is None:
        raise EditorError(
            "No editor available (nvim, vim or vi). Set $EDITOR to your preferred editor."
        )

    with tempfile.TemporaryDirectory(prefix="labcommitr-") as tmp:
        path = Path(tmp) / BODY_FILENAME
        path.write_text(initial, encoding="utf-8")
        command = [*argv]
        if Path(argv[0]).name == "nvim":
            # Keep neovim in the foreground.
            command.append("-f")
        command.append(str(path))
        logger.debug("Launching editor: %s", command)
        try:
            completed = subprocess.run(command, check=False)
        except OSError as exc:
            raise EditorError(f"Could not start editor {argv[0]}: {exc}") from exc
        if completed.returncode != 0:
            raise EditorError(f"Editor exited with status {completed.returncode}")
        content = path.read_text(encoding="utf-8").strip()
    return content or None

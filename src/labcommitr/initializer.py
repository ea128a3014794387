"""``lab init``: write a project configuration from a preset."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

import yaml

from labcommitr.config.errors import validation_failure
from labcommitr.config.loader import CONFIG_FILENAMES
from labcommitr.config.validator import ConfigValidator
from labcommitr.errors import Cancelled, WorkflowError
from labcommitr.git import GitClient, GitError
from labcommitr.logging import get_logger
from labcommitr.presets import PRESETS, build_config, get_preset
from labcommitr.ui import SelectOption, Terminal, display, get_terminal, is_cancel, select, theme

logger = get_logger(__name__)

CONFIG_FILENAME = CONFIG_FILENAMES[0]
FILE_HEADER = (
    "# labcommitr configuration\n"
    "# Generated by 'lab init'. Edit freely; run 'lab config validate' after changes.\n\n"
)


def _answer(value: Any) -> Any:
    if is_cancel(value):
        raise Cancelled()
    return value


async def _yes_no(
    label: str, message: str, *, recommended: bool, terminal: Terminal | None
) -> bool:
    """A Yes/No select with the recommended answer listed first."""
    yes = SelectOption(True, "Yes (Recommended)" if recommended else "Yes")
    no = SelectOption(False, "No" if recommended else "No (Recommended)")
    return _answer(
        await select(
            [yes, no] if recommended else [no, yes],
            message,
            label=label,
            label_color="magenta",
            terminal=terminal,
        )
    )


async def prompt_preset(*, terminal: Terminal | None = None) -> str:
    options = [
        SelectOption(p.id, p.name, f"e.g., {p.example}" if p.example else None)
        for p in PRESETS.values()
    ]
    return _answer(
        await select(
            options,
            "Which commit style fits your project?",
            label="preset",
            label_color="magenta",
            terminal=terminal,
        )
    )


def render_config(config: dict[str, Any]) -> str:
    return FILE_HEADER + yaml.safe_dump(config, sort_keys=False, allow_unicode=True)


async def run_init(
    preset: str | None = None,
    *,
    force: bool = False,
    cwd: Path | None = None,
    git: GitClient | None = None,
    terminal: Terminal | None = None,
) -> Path:
    """Ask the setup questions and write the config file; returns its path."""
    git = git or GitClient(cwd)
    terminal = terminal or get_terminal()

    try:
        root = await git.toplevel()
    except GitError as exc:
        raise WorkflowError(
            "Not a git repository",
            solutions=["Initialize git first: git init"],
        ) from exc

    target = root / CONFIG_FILENAME
    existing = [root / name for name in CONFIG_FILENAMES if (root / name).exists()]
    if existing and not force:
        raise WorkflowError(
            "Configuration already exists",
            solutions=["Use 'lab init --force' to overwrite it"],
            file_path=existing[0],
        )

    if preset is not None:
        try:
            get_preset(preset)
        except KeyError as exc:
            raise WorkflowError(exc.args[0]) from exc
    preset_id = preset or await prompt_preset(terminal=terminal)
    emoji = await _yes_no(
        "emoji", "Enable emoji support in commits?", recommended=False, terminal=terminal
    )
    auto_stage = await _yes_no(
        "stage", "Stage files automatically?", recommended=False, terminal=terminal
    )
    body_required = await _yes_no(
        "body", "Require commit body?", recommended=True, terminal=terminal
    )
    signing_key = await git.config_value("user.signingkey")

    config = build_config(
        preset_id,
        emoji=emoji,
        auto_stage=auto_stage,
        body_required=body_required,
        sign_commits=signing_key is not None,
    )
    result = ConfigValidator().validate(config)
    if not result.valid:
        raise validation_failure(result.errors, target)

    await asyncio.to_thread(target.write_text, render_config(config), encoding="utf-8")
    for stale in existing:
        if stale != target:
            stale.unlink()
    logger.info("wrote %s (preset %s)", target, preset_id)

    display.blank(terminal=terminal)
    display.status_success(f"Wrote {target.name}", terminal=terminal)
    display.status_success("Configuration validated", terminal=terminal)
    if signing_key is None:
        display.status_info(
            theme.dim("Commit signing disabled (no user.signingkey in git config)"),
            terminal=terminal,
        )
    display.blank(terminal=terminal)
    display.section("next", "yellow", "Get started with these commands:", terminal=terminal)
    display.indented(f"{theme.paint('lab config show', 'bright_cyan')}      View your configuration", terminal=terminal)
    display.indented(f"{theme.paint('lab commit', 'bright_cyan')}           Create your first commit", terminal=terminal)
    return target

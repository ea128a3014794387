"""Tests for the select/text/confirm/multiselect prompts."""

from __future__ import annotations

import pytest

from labcommitr.shortcuts import auto_assign
from labcommitr.ui import CANCEL, SelectOption, confirm, multiselect, select, text, wait_for_key
from labcommitr.ui.prompts import REQUIRED_SELECTION_ERROR
from tests.ui.fakes import ScriptedTerminal

ABC = [SelectOption("A", "Alpha"), SelectOption("B", "Bravo"), SelectOption("C", "Charlie")]


def _assert_collapsed(terminal: ScriptedTerminal, frame_lines: int, prefix: int = 0) -> None:
    assert terminal.clears[-1] == frame_lines + prefix
    summary = terminal.output[-1]
    assert summary.endswith("\n")
    assert summary.count("\n") == 1


class TestSelect:
    @pytest.mark.asyncio
    async def test_down_down_up_selects_second(self) -> None:
        terminal = ScriptedTerminal(["down", "down", "up", "return"])
        result = await select(ABC, "Pick one", label="test", terminal=terminal)
        assert result == "B"

    @pytest.mark.asyncio
    async def test_navigation_wraps(self) -> None:
        terminal = ScriptedTerminal(["up", "return"])
        assert await select(ABC, "Pick", terminal=terminal) == "C"

    @pytest.mark.asyncio
    async def test_vim_keys_navigate(self) -> None:
        terminal = ScriptedTerminal(["j", "j", "k", "return"])
        assert await select(ABC, "Pick", terminal=terminal) == "B"

    @pytest.mark.asyncio
    async def test_initial_value_positions_cursor(self) -> None:
        terminal = ScriptedTerminal(["return"])
        assert await select(ABC, "Pick", initial_value="C", terminal=terminal) == "C"

    @pytest.mark.asyncio
    async def test_escape_cancels_and_restores_terminal(self) -> None:
        terminal = ScriptedTerminal(["down", "escape"])
        assert await select(ABC, "Pick", terminal=terminal) is CANCEL
        assert terminal.raw_depth == 0

    @pytest.mark.asyncio
    async def test_ctrl_c_cancels(self) -> None:
        terminal = ScriptedTerminal(["ctrl+c"])
        assert await select(ABC, "Pick", terminal=terminal) is CANCEL

    @pytest.mark.asyncio
    async def test_collapses_to_one_summary_line(self) -> None:
        terminal = ScriptedTerminal(["down", "return"])
        await select(ABC, "Pick", label="type", terminal=terminal)
        _assert_collapsed(terminal, frame_lines=1 + len(ABC))
        assert "Bravo" in terminal.output[-1]

    @pytest.mark.asyncio
    async def test_collapse_includes_prefix_lines(self) -> None:
        terminal = ScriptedTerminal(["return"])
        await select(ABC, "Pick", prefix_line_count=3, terminal=terminal)
        _assert_collapsed(terminal, frame_lines=4, prefix=3)

    @pytest.mark.asyncio
    async def test_every_redraw_clears_previous_frame(self) -> None:
        terminal = ScriptedTerminal(["down", "down", "return"])
        await select(ABC, "Pick", terminal=terminal)
        assert terminal.clears == [0, 4, 4, 4]

    @pytest.mark.asyncio
    async def test_shortcut_selects_immediately(self) -> None:
        options = [SelectOption("feat", "feat"), SelectOption("fix", "fix")]
        mapping = auto_assign(["feat", "fix"], {"f": "feat"})
        terminal = ScriptedTerminal(["x", "i"])
        assert await select(options, "Type", shortcuts=mapping, terminal=terminal) == "fix"

    @pytest.mark.asyncio
    async def test_unbound_key_does_nothing(self) -> None:
        options = [SelectOption("feat", "feat"), SelectOption("fix", "fix")]
        mapping = auto_assign(["feat", "fix"], {"f": "feat"})
        terminal = ScriptedTerminal(["x", "return"])
        assert await select(options, "Type", shortcuts=mapping, terminal=terminal) == "feat"

    @pytest.mark.asyncio
    async def test_shortcut_takes_precedence_over_navigation(self) -> None:
        options = [SelectOption("fix", "fix"), SelectOption("join", "join")]
        mapping = auto_assign(["fix", "join"])
        terminal = ScriptedTerminal(["j"])
        assert await select(options, "Type", shortcuts=mapping, terminal=terminal) == "join"

    @pytest.mark.asyncio
    async def test_non_tty_returns_initial_value(self) -> None:
        terminal = ScriptedTerminal(tty=False)
        assert await select(ABC, "Pick", initial_value="B", terminal=terminal) == "B"
        assert terminal.output == []

    @pytest.mark.asyncio
    async def test_non_tty_returns_first_option(self) -> None:
        assert await select(ABC, "Pick", terminal=ScriptedTerminal(tty=False)) == "A"

    @pytest.mark.asyncio
    async def test_no_options_cancels(self) -> None:
        assert await select([], "Pick", terminal=ScriptedTerminal()) is CANCEL


class TestText:
    @pytest.mark.asyncio
    async def test_typing_and_backspace(self) -> None:
        terminal = ScriptedTerminal(["hello", "backspace", "return"])
        assert await text("Subject", terminal=terminal) == "hell"

    @pytest.mark.asyncio
    async def test_caret_movement_inserts_in_place(self) -> None:
        terminal = ScriptedTerminal(["ac", "left", "b", "home", ">", "return"])
        assert await text("Value", terminal=terminal) == ">abc"

    @pytest.mark.asyncio
    async def test_initial_value_is_editable(self) -> None:
        terminal = ScriptedTerminal(["!", "return"])
        assert await text("Value", initial_value="hi", terminal=terminal) == "hi!"

    @pytest.mark.asyncio
    async def test_validation_error_keeps_prompt_open(self) -> None:
        terminal = ScriptedTerminal(["ab", "return", "c", "return"])

        def at_least_three(value: str) -> str | None:
            return "Too short" if len(value) < 3 else None

        result = await text("Subject", validate=at_least_three, terminal=terminal)
        assert result == "abc"
        assert "Too short" in terminal.text

    @pytest.mark.asyncio
    async def test_validator_exception_restores_terminal(self) -> None:
        terminal = ScriptedTerminal(["x", "return"])

        def boom(value: str) -> str | None:
            raise RuntimeError("validator failed")

        with pytest.raises(RuntimeError):
            await text("Subject", validate=boom, terminal=terminal)
        assert terminal.raw_depth == 0

    @pytest.mark.asyncio
    async def test_escape_cancels(self) -> None:
        terminal = ScriptedTerminal(["abc", "escape"])
        assert await text("Subject", terminal=terminal) is CANCEL

    @pytest.mark.asyncio
    async def test_collapses_after_error_frame(self) -> None:
        terminal = ScriptedTerminal(["return", "a", "return"])
        await text("Subject", validate=lambda v: None if v else "Required", terminal=terminal)
        # The final frame (head + input) replaced the error frame before submit.
        _assert_collapsed(terminal, frame_lines=2)

    @pytest.mark.asyncio
    async def test_non_tty_returns_initial_value(self) -> None:
        terminal = ScriptedTerminal(tty=False)
        assert await text("Subject", initial_value="draft", terminal=terminal) == "draft"
        assert await text("Subject", terminal=terminal) == ""


class TestConfirm:
    @pytest.mark.asyncio
    async def test_default_yes(self) -> None:
        assert await confirm("Proceed?", terminal=ScriptedTerminal(["return"])) is True

    @pytest.mark.asyncio
    async def test_default_no_listed_first(self) -> None:
        terminal = ScriptedTerminal(["return"])
        assert await confirm("Edit?", initial_value=False, terminal=terminal) is False

    @pytest.mark.asyncio
    async def test_move_to_other_answer(self) -> None:
        assert await confirm("Proceed?", terminal=ScriptedTerminal(["down", "return"])) is False


class TestMultiselect:
    @pytest.mark.asyncio
    async def test_values_returned_in_option_order(self) -> None:
        terminal = ScriptedTerminal(["down", "down", "space", "up", "up", "space", "return"])
        assert await multiselect(ABC, "Pick", terminal=terminal) == ["A", "C"]

    @pytest.mark.asyncio
    async def test_space_toggles_off(self) -> None:
        terminal = ScriptedTerminal(["space", "space", "return"])
        assert await multiselect(ABC, "Pick", terminal=terminal) == []

    @pytest.mark.asyncio
    async def test_required_needs_a_selection(self) -> None:
        terminal = ScriptedTerminal(["return", "space", "return"])
        assert await multiselect(ABC, "Pick", required=True, terminal=terminal) == ["A"]
        assert REQUIRED_SELECTION_ERROR in terminal.text

    @pytest.mark.asyncio
    async def test_non_tty_returns_empty(self) -> None:
        assert await multiselect(ABC, "Pick", terminal=ScriptedTerminal(tty=False)) == []


class TestWaitForKey:
    @pytest.mark.asyncio
    async def test_ignores_unmapped_keys(self) -> None:
        terminal = ScriptedTerminal(["x", "y", "q"])
        result = await wait_for_key(lambda key: "quit" if key.id == "q" else None, terminal=terminal)
        assert result == "quit"
        assert terminal.raw_depth == 0

    @pytest.mark.asyncio
    async def test_none_without_terminal(self) -> None:
        assert await wait_for_key(lambda key: 1, terminal=ScriptedTerminal(tty=False)) is None

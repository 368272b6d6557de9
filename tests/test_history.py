"""Tests for undo/redo history and keystroke coalescing."""

import pytest

from chordpro_engine import ContractError, UnknownCommandError
from chordpro_engine.editing import (
    CommandHistory,
    EditorContext,
    HistoryConfig,
    Indent,
    InsertPair,
    InsertText,
    Outdent,
    ToggleComment,
)


def type_text(history: CommandHistory, context: EditorContext, text: str) -> EditorContext:
    for char in text:
        context = history.execute(InsertText(char), context).context
    return context


class TestUndoRedo:
    """Test that undo and redo invert each other."""

    def test_undo_restores_pre_command_context(self, history: CommandHistory) -> None:
        """Test undo returns the exact text and selection before a command."""
        before = EditorContext("one\ntwo", 1, 6)
        after = history.execute(ToggleComment(), before).context
        assert after.text == "# one\n# two"
        assert history.undo(after).context == before

    def test_inverse_law(self, history: CommandHistory) -> None:
        """Test undoing every step reaches the start and redoing reaches the end."""
        start = EditorContext.at("[G]la", 5)
        states = [start]
        for command in (InsertPair("["), Indent(), ToggleComment(), InsertPair("{")):
            states.append(history.execute(command, states[-1]).context)

        current = states[-1]
        for expected in reversed(states[:-1]):
            current = history.undo(current).context
            assert current == expected
        assert not history.can_undo

        for expected in states[1:]:
            current = history.redo(current).context
            assert current == expected
        assert not history.can_redo

    def test_inverse_law_with_typing(self, history: CommandHistory, clock) -> None:
        """Test the inverse law across coalesced keystrokes and pauses."""
        context = type_text(history, EditorContext.at("", 0), "la")
        clock.advance(2)
        context = type_text(history, context, "ment")
        context = history.execute(InsertPair("["), context).context
        clock.advance(2)
        context = type_text(history, context, "G")
        assert context.text == "lament[G]"

        steps = ["", "la", "lament", "lament[]"]
        current = context
        for expected in reversed(steps):
            current = history.undo(current).context
            assert current.text == expected
        assert not history.can_undo

        for expected in [*steps[1:], "lament[G]"]:
            current = history.redo(current).context
            assert current.text == expected
        assert not history.can_redo
        assert current == context

    def test_nothing_to_undo(self, history: CommandHistory) -> None:
        """Test undo and redo fail cleanly on empty stacks."""
        context = EditorContext.at("", 0)
        undo = history.undo(context)
        redo = history.redo(context)
        assert (undo.success, undo.error) == (False, "Nothing to undo")
        assert (redo.success, redo.error) == (False, "Nothing to redo")
        assert undo.context is None

    def test_new_snapshot_clears_redo(self, history: CommandHistory) -> None:
        """Test recording a new step drops the redo stack."""
        context = history.execute(Indent(), EditorContext.at("a", 0)).context
        context = history.undo(context).context
        assert history.can_redo
        history.execute(Indent(), context)
        assert not history.can_redo

    def test_noop_records_nothing(self, history: CommandHistory) -> None:
        """Test commands that leave the text alone are not recorded."""
        result = history.execute(Outdent(), EditorContext.at("abc", 1))
        assert result.success
        assert result.text == "abc"
        assert not history.can_undo

    def test_max_depth(self, clock) -> None:
        """Test the oldest entries drop at the depth limit."""
        history = CommandHistory(HistoryConfig(max_depth=3), clock=clock)
        context = EditorContext.at("", 0)
        for _ in range(5):
            context = history.execute(Indent(), context).context
        assert history.info().undo_depth == 3
        for _ in range(3):
            context = history.undo(context).context
        assert context.text == "    "
        assert not history.can_undo

    def test_clear(self, history: CommandHistory) -> None:
        """Test clearing forgets every entry."""
        history.execute(Indent(), EditorContext.at("", 0))
        history.clear()
        info = history.info()
        assert (info.undo_depth, info.redo_depth, info.last_snapshot_at) == (0, 0, None)


class TestCoalescing:
    """Test keystroke coalescing."""

    def test_burst_is_one_step(self, history: CommandHistory) -> None:
        """Test fast typing undoes in one step."""
        context = type_text(history, EditorContext.at("", 0), "Amazing")
        assert context.text == "Amazing"
        assert history.info().undo_depth == 1
        assert history.undo(context).text == ""

    def test_pause_starts_new_step(self, history: CommandHistory, clock) -> None:
        """Test a pause past the debounce window records a new step."""
        context = type_text(history, EditorContext.at("", 0), "ab")
        clock.advance(1.5)
        context = type_text(history, context, "c")
        assert history.info().undo_depth == 2
        assert history.undo(context).text == "ab"

    def test_small_change_is_coalesced(self, clock) -> None:
        """Test a pause alone does not snapshot a tiny change."""
        history = CommandHistory(HistoryConfig(min_char_delta=5), clock=clock)
        context = type_text(history, EditorContext.at("", 0), "a")
        clock.advance(5)
        type_text(history, context, "b")
        assert history.info().undo_depth == 1

    def test_structural_always_recorded(self, history: CommandHistory) -> None:
        """Test structural commands snapshot inside the debounce window."""
        context = type_text(history, EditorContext.at("", 0), "la")
        context = history.execute(InsertPair("["), context).context
        assert history.info().undo_depth == 2
        assert history.undo(context).text == "la"

    def test_first_edit_after_undo_is_recorded(self, history: CommandHistory) -> None:
        """Test undo starts a fresh step for the next keystroke."""
        context = history.execute(Indent(), EditorContext.at("", 0)).context
        context = history.undo(context).context
        type_text(history, context, "x")
        assert history.info().undo_depth == 1
        assert not history.can_redo


class TestExecuteByName:
    """Test string command routing."""

    def test_named_commands(self, history: CommandHistory) -> None:
        """Test commands built from names and parameters."""
        result = history.execute("insert-text", EditorContext.at("", 0), text="[G]")
        assert result.text == "[G]"
        undone = history.execute("undo", result.context)
        assert undone.text == ""
        redone = history.execute("redo", undone.context)
        assert redone.text == "[G]"

    def test_unknown_name(self, history: CommandHistory) -> None:
        """Test unknown names raise."""
        with pytest.raises(UnknownCommandError):
            history.execute("explode", EditorContext.at("", 0))

    def test_invalid_config(self) -> None:
        """Test limits are validated."""
        with pytest.raises(ContractError):
            HistoryConfig(max_depth=0)
        with pytest.raises(ContractError):
            HistoryConfig(debounce_seconds=-1)

"""Buffer-editing commands.

Commands are immutable parameter records. ``apply`` maps one editor
context to the next and never mutates anything, which lets the history
manager snapshot the context before a command and restore it later.
Structural commands change layout in one step and are always recorded as
their own undo entry.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, ClassVar

from chordpro_engine.editing.context import EditorContext, check_offset
from chordpro_engine.errors import ContractError, UnknownCommandError

BRACKET_PAIRS: dict[str, str] = {"{": "}", "[": "]", "(": ")"}
INDENT = "  "
COMMENT_PREFIX = "# "
COMMENTED_RE = re.compile(r"^(\s*)#\s?")

# A single line edit in original offsets: (position, removed length, inserted text)
LineEdit = tuple[int, int, str]


class Command(ABC):
    """Base class for editor commands."""

    name: ClassVar[str]
    structural: ClassVar[bool] = False

    @abstractmethod
    def apply(self, context: EditorContext) -> EditorContext:
        """Return the context after the command."""


@dataclass(frozen=True)
class InsertText(Command):
    """Type or paste text, replacing the selection."""

    text: str

    name: ClassVar[str] = "insert-text"

    def apply(self, context: EditorContext) -> EditorContext:
        return context.replace(context.selection_start, context.selection_end, self.text)


@dataclass(frozen=True)
class DeleteRange(Command):
    """Delete an explicit range, the selection, or one character backwards.

    A backspace between an empty bracket pair such as ``[]`` removes both
    brackets.

    Parameters
    ----------
    start : int | None
        Start of an explicit range.
    end : int | None
        End of an explicit range; both bounds must be given together.
    """

    start: int | None = None
    end: int | None = None

    name: ClassVar[str] = "delete-range"

    def __post_init__(self) -> None:
        if (self.start is None) != (self.end is None):
            msg = "delete-range needs both start and end, or neither"
            raise ContractError(msg)

    def apply(self, context: EditorContext) -> EditorContext:
        if self.start is not None and self.end is not None:
            check_offset(context.text, self.start, "start")
            check_offset(context.text, self.end, "end")
            if self.start > self.end:
                msg = f"delete-range start {self.start} is after end {self.end}"
                raise ContractError(msg)
            return context.replace(self.start, self.end, "")

        if context.has_selection:
            return context.replace(context.selection_start, context.selection_end, "")

        cursor = context.cursor
        if cursor == 0:
            return context
        before = context.text[cursor - 1]
        after = context.text[cursor : cursor + 1]
        if after and BRACKET_PAIRS.get(before) == after:
            return context.replace(cursor - 1, cursor + 1, "")
        return context.replace(cursor - 1, cursor, "")


@dataclass(frozen=True)
class InsertPair(Command):
    """Insert a bracket pair around the selection or at the cursor.

    With a selection the selected text is wrapped and the cursor ends up
    before the closing bracket; otherwise the cursor lands between the pair.
    """

    open: str

    name: ClassVar[str] = "insert-pair"
    structural: ClassVar[bool] = True

    def __post_init__(self) -> None:
        if self.open not in BRACKET_PAIRS:
            msg = f"Not an opening bracket: {self.open!r}"
            raise ContractError(msg)

    def apply(self, context: EditorContext) -> EditorContext:
        close = BRACKET_PAIRS[self.open]
        selected = context.selected_text
        cursor = context.selection_start + 1 + len(selected)
        return context.replace(
            context.selection_start,
            context.selection_end,
            f"{self.open}{selected}{close}",
            cursor=cursor,
        )


def _map_offset(offset: int, edits: list[LineEdit]) -> int:
    """Move an offset through a list of line edits given in original offsets."""
    shift = 0
    for position, removed, inserted in edits:
        if offset < position or (removed and offset == position):
            break
        if offset >= position + removed:
            shift += len(inserted) - removed
        else:
            # Inside a removed span: clamp to its start
            shift += position - offset + len(inserted)
    return offset + shift


def _apply_edits(context: EditorContext, edits: list[LineEdit]) -> EditorContext:
    if not edits:
        return context
    parts: list[str] = []
    last = 0
    for position, removed, inserted in edits:
        parts.append(context.text[last:position])
        parts.append(inserted)
        last = position + removed
    parts.append(context.text[last:])
    text = "".join(parts)

    start = _map_offset(context.selection_start, edits)
    end = _map_offset(context.selection_end, edits)
    return EditorContext(text, start, end)


def _line_edits(
    context: EditorContext, edit: Callable[[str, int], LineEdit | None]
) -> list[LineEdit]:
    first, last = context.line_span()
    edits: list[LineEdit] = []
    offset = first
    for line in context.text[first:last].split("\n"):
        change = edit(line, offset)
        if change is not None:
            edits.append(change)
        offset += len(line) + 1
    return edits


@dataclass(frozen=True)
class ToggleComment(Command):
    """Comment or uncomment every line touched by the selection.

    Lines are uncommented when all of them already start with ``#``;
    otherwise every line gets a ``# `` prefix after its indentation.
    """

    name: ClassVar[str] = "toggle-comment"
    structural: ClassVar[bool] = True

    def apply(self, context: EditorContext) -> EditorContext:
        first, last = context.line_span()
        lines = context.text[first:last].split("\n")
        uncomment = all(COMMENTED_RE.match(line) for line in lines)

        def edit(line: str, offset: int) -> LineEdit | None:
            if uncomment:
                match = COMMENTED_RE.match(line)
                if match is None:
                    return None
                indent = len(match.group(1))
                return offset + indent, match.end() - indent, ""
            indent = len(line) - len(line.lstrip(" \t"))
            return offset + indent, 0, COMMENT_PREFIX

        return _apply_edits(context, _line_edits(context, edit))


@dataclass(frozen=True)
class Indent(Command):
    """Insert two spaces at the cursor, or before every selected line."""

    name: ClassVar[str] = "indent"
    structural: ClassVar[bool] = True

    def apply(self, context: EditorContext) -> EditorContext:
        if not context.has_selection:
            return context.replace(context.cursor, context.cursor, INDENT)
        return _apply_edits(
            context, _line_edits(context, lambda line, offset: (offset, 0, INDENT))
        )


@dataclass(frozen=True)
class Outdent(Command):
    """Remove up to two leading spaces, or one tab, from every touched line."""

    name: ClassVar[str] = "outdent"
    structural: ClassVar[bool] = True

    def apply(self, context: EditorContext) -> EditorContext:
        def edit(line: str, offset: int) -> LineEdit | None:
            if line.startswith("\t"):
                return offset, 1, ""
            spaces = len(line) - len(line.lstrip(" "))
            if spaces == 0:
                return None
            return offset, min(spaces, len(INDENT)), ""

        return _apply_edits(context, _line_edits(context, edit))


COMMANDS: dict[str, type[Command]] = {
    command.name: command
    for command in (InsertText, DeleteRange, InsertPair, ToggleComment, Indent, Outdent)
}


def create_command(name: str, **params: Any) -> Command:
    """Build a registered command by name.

    Parameters
    ----------
    name : str
        Command name (e.g., "insert-text", "toggle-comment").
    **params : Any
        Command parameters.

    Returns
    -------
    Command
        The command instance.

    Raises
    ------
    UnknownCommandError
        If the name is not registered.
    ContractError
        If the parameters do not fit the command.

    Examples
    --------
    >>> create_command("insert-text", text="[G]")
    InsertText(text='[G]')
    """
    if name not in COMMANDS:
        known = ", ".join(sorted(COMMANDS))
        msg = f"Unknown command: {name!r} (expected one of {known})"
        raise UnknownCommandError(msg)
    try:
        return COMMANDS[name](**params)
    except TypeError as exc:
        msg = f"Invalid parameters for {name!r}: {exc}"
        raise ContractError(msg) from exc

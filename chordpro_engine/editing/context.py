"""Editor buffer state passed by value into every editing call."""

from __future__ import annotations

from dataclasses import dataclass

from chordpro_engine.errors import ContractError


def check_offset(text: str, offset: int, name: str = "cursor") -> None:
    """Raise ContractError unless ``0 <= offset <= len(text)``.

    Examples
    --------
    >>> check_offset("abc", 3)
    >>> check_offset("abc", 4)
    Traceback (most recent call last):
    ...
    chordpro_engine.errors.ContractError: cursor offset 4 is outside 0..3
    """
    if isinstance(offset, bool) or not isinstance(offset, int):
        msg = f"{name} offset must be an int, got {offset!r}"
        raise ContractError(msg)
    if not 0 <= offset <= len(text):
        msg = f"{name} offset {offset} is outside 0..{len(text)}"
        raise ContractError(msg)


@dataclass(frozen=True)
class EditorContext:
    """Buffer text plus selection.

    Parameters
    ----------
    text : str
        The whole buffer.
    selection_start : int
        Start of the selection (inclusive).
    selection_end : int
        End of the selection (exclusive); the cursor sits here.

    Raises
    ------
    ContractError
        If the offsets do not satisfy ``0 <= start <= end <= len(text)``.

    Examples
    --------
    >>> ctx = EditorContext.at("hello", 5)
    >>> ctx.cursor, ctx.has_selection
    (5, False)
    """

    text: str
    selection_start: int
    selection_end: int

    def __post_init__(self) -> None:
        check_offset(self.text, self.selection_start, "selection_start")
        check_offset(self.text, self.selection_end, "selection_end")
        if self.selection_start > self.selection_end:
            msg = (
                f"selection_start {self.selection_start} is after "
                f"selection_end {self.selection_end}"
            )
            raise ContractError(msg)

    @classmethod
    def at(cls, text: str, cursor: int) -> EditorContext:
        """Context with a collapsed selection at ``cursor``."""
        return cls(text, cursor, cursor)

    @property
    def cursor(self) -> int:
        return self.selection_end

    @property
    def selection(self) -> tuple[int, int]:
        return self.selection_start, self.selection_end

    @property
    def has_selection(self) -> bool:
        return self.selection_start != self.selection_end

    @property
    def selected_text(self) -> str:
        return self.text[self.selection_start : self.selection_end]

    def replace(
        self,
        start: int,
        end: int,
        insert: str,
        cursor: int | None = None,
    ) -> EditorContext:
        """Return a new context with ``text[start:end]`` replaced.

        The selection collapses to ``cursor``, by default just after the
        inserted text.
        """
        text = self.text[:start] + insert + self.text[end:]
        position = start + len(insert) if cursor is None else cursor
        return EditorContext(text, position, position)

    def line_span(self) -> tuple[int, int]:
        """Offsets of the start of the first and the end of the last selected line."""
        first = self.text.rfind("\n", 0, self.selection_start) + 1
        last = self.text.find("\n", self.selection_end)
        return first, len(self.text) if last == -1 else last


@dataclass(frozen=True)
class CommandResult:
    """Outcome of executing, undoing or redoing a command.

    Parameters
    ----------
    success : bool
        Whether anything was applied.
    text : str | None
        New buffer text on success.
    selection : tuple[int, int] | None
        New selection on success.
    error : str | None
        Reason for failure.
    """

    success: bool
    text: str | None = None
    selection: tuple[int, int] | None = None
    error: str | None = None

    @classmethod
    def of(cls, context: EditorContext) -> CommandResult:
        return cls(success=True, text=context.text, selection=context.selection)

    @classmethod
    def failure(cls, error: str) -> CommandResult:
        return cls(success=False, error=error)

    @property
    def context(self) -> EditorContext | None:
        """The resulting context, or None on failure."""
        if not self.success or self.text is None or self.selection is None:
            return None
        return EditorContext(self.text, *self.selection)

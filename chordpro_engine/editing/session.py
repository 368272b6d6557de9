"""Per-document editing session.

A session owns the mutable state of one open document: its undo/redo
history, its formatter cache and its autocomplete list. Buffers are still
passed in on every call; the session never holds the authoritative text.
"""

from __future__ import annotations

import time
from collections.abc import Mapping
from typing import Any

from chordpro_engine.editing.autocomplete import AutocompleteContext, AutocompleteState
from chordpro_engine.editing.commands import Command
from chordpro_engine.editing.context import CommandResult, EditorContext
from chordpro_engine.editing.history import Clock, CommandHistory, HistoryConfig
from chordpro_engine.notation import (
    Section,
    SongModel,
    ValidationResult,
    parse,
    segment,
    validate,
)
from chordpro_engine.rendering import FormatterCache, FormatterOptions, OutputKind
from chordpro_engine.rendering.cache import DEFAULT_CAPACITY


class EditorSession:
    """Editing state for one open document.

    Parameters
    ----------
    history_config : HistoryConfig | None
        Undo/redo limits.
    cache_capacity : int
        Formatter cache size.
    clock : Callable[[], float]
        Time source for keystroke coalescing.

    Examples
    --------
    >>> session = EditorSession()
    >>> result = session.execute("insert-text", EditorContext.at("", 0), text="{title: Hi}")
    >>> session.parse(result.text).title
    'Hi'
    >>> session.undo(result.context).text
    ''
    """

    def __init__(
        self,
        history_config: HistoryConfig | None = None,
        cache_capacity: int = DEFAULT_CAPACITY,
        clock: Clock = time.monotonic,
    ) -> None:
        self.history = CommandHistory(history_config, clock=clock)
        self.formatters = FormatterCache(cache_capacity)
        self.autocomplete = AutocompleteState()
        self._parsed: tuple[str, SongModel] | None = None

    def execute(
        self, command: Command | str, context: EditorContext, **params: Any
    ) -> CommandResult:
        return self.history.execute(command, context, **params)

    def undo(self, context: EditorContext) -> CommandResult:
        return self.history.undo(context)

    def redo(self, context: EditorContext) -> CommandResult:
        return self.history.redo(context)

    def detect_autocomplete(
        self, text: str, cursor: int, key: str | None = None
    ) -> AutocompleteContext | None:
        """Open, refresh or close the suggestion list for the cursor.

        Chord suggestions follow ``key``, or the key of the last parsed
        buffer when no key is given.
        """
        if key is None and self._parsed is not None:
            key = self._parsed[1].key
        return self.autocomplete.open(text, cursor, key)

    def parse(self, text: str) -> SongModel:
        """Parse a buffer, reusing the last model when the text is unchanged."""
        if self._parsed is not None and self._parsed[0] == text:
            return self._parsed[1]
        model = parse(text)
        self._parsed = (text, model)
        return model

    def segment(self, text: str | SongModel) -> list[Section]:
        model = self.parse(text) if isinstance(text, str) else text
        return segment(model)

    def render(
        self,
        text: str | SongModel,
        kind: OutputKind | str = OutputKind.RESPONSIVE,
        options: FormatterOptions | Mapping[str, Any] | None = None,
    ) -> str:
        """Render a buffer or model through the session's formatter cache."""
        model = self.parse(text) if isinstance(text, str) else text
        return self.formatters.format(model, kind, options)

    def validate(self, text: str) -> ValidationResult:
        return validate(text)

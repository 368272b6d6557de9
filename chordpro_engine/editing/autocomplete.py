"""Cursor-context detection for autocomplete.

A context exists while the cursor sits inside an unclosed ``{`` directive
or ``[`` chord token on the current line. Detection is a pure function of
text and cursor; AutocompleteState adds the open/move/accept/dismiss
lifecycle of the suggestion list on top of it.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace

from chordpro_engine.editing.context import EditorContext, check_offset
from chordpro_engine.editing.suggestions import (
    DIRECTIVE_SUGGESTIONS,
    Suggestion,
    chord_suggestions,
    filter_suggestions,
)
from chordpro_engine.errors import ContractError

logger = logging.getLogger(__name__)

TRIGGERS: dict[str, str] = {"{": "}", "[": "]"}
CLOSERS = frozenset(TRIGGERS.values())

# Characters allowed between the trigger and the cursor
FILTER_RE = re.compile(r"[A-Za-z0-9_:\- \t]*")


@dataclass(frozen=True)
class AutocompleteContext:
    """An open directive or chord token under the cursor.

    Parameters
    ----------
    trigger_char : str
        "{" or "[".
    trigger_position : int
        Offset of the trigger character.
    filter_text : str
        Text between the trigger and the cursor.
    is_visible : bool
        Whether the suggestion list is shown.
    selected_index : int
        Highlighted suggestion.
    """

    trigger_char: str
    trigger_position: int
    filter_text: str
    is_visible: bool = True
    selected_index: int = 0


def detect(text: str, cursor: int) -> AutocompleteContext | None:
    """Find the unclosed token the cursor is typing in.

    Parameters
    ----------
    text : str
        Buffer text.
    cursor : int
        Cursor offset.

    Returns
    -------
    AutocompleteContext | None
        The context, or None when the cursor is not inside an open token.

    Raises
    ------
    ContractError
        If the cursor is outside the buffer.

    Examples
    --------
    >>> context = detect("{tit", 4)
    >>> context.trigger_char, context.trigger_position, context.filter_text
    ('{', 0, 'tit')
    >>> detect("{title}", 7) is None
    True
    """
    check_offset(text, cursor)

    trigger = -1
    for index in range(cursor - 1, -1, -1):
        char = text[index]
        if char in TRIGGERS:
            trigger = index
            break
        if char in CLOSERS or char == "\n":
            return None
    if trigger < 0:
        return None

    opener = text[trigger]
    closer = TRIGGERS[opener]
    filter_text = text[trigger + 1 : cursor]
    if not FILTER_RE.fullmatch(filter_text):
        return None

    line_end = text.find("\n", cursor)
    rest = text[cursor : len(text) if line_end == -1 else line_end]
    for char in rest:
        if char == opener:
            # A later token starts first; any closer after it is not ours
            break
        if char == closer:
            return None

    return AutocompleteContext(
        trigger_char=opener, trigger_position=trigger, filter_text=filter_text
    )


class AutocompleteState:
    """Suggestion list lifecycle for one editor.

    Examples
    --------
    >>> state = AutocompleteState()
    >>> state.open("{tit", 4).filter_text
    'tit'
    >>> state.selected.value
    'title'
    >>> state.accept("{tit", 4).text
    '{title: }'
    """

    def __init__(self) -> None:
        self.context: AutocompleteContext | None = None
        self.suggestions: tuple[Suggestion, ...] = ()

    @property
    def is_open(self) -> bool:
        return self.context is not None and self.context.is_visible

    @property
    def selected(self) -> Suggestion | None:
        if self.context is None or not self.context.is_visible or not self.suggestions:
            return None
        return self.suggestions[self.context.selected_index]

    def open(
        self, text: str, cursor: int, key: str | None = None
    ) -> AutocompleteContext | None:
        """Detect the context at the cursor and load matching suggestions.

        Closes the list when there is no context or nothing matches.
        """
        context = detect(text, cursor)
        if context is None:
            self.dismiss()
            return None

        if context.trigger_char == "{":
            items = filter_suggestions(DIRECTIVE_SUGGESTIONS, context.filter_text)
        else:
            items = filter_suggestions(chord_suggestions(key), context.filter_text)
        if not items:
            self.dismiss()
            return None

        self.context = context
        self.suggestions = tuple(items)
        logger.debug(
            "Autocomplete open at %d with %d suggestions", context.trigger_position, len(items)
        )
        return context

    def move(self, step: int) -> int:
        """Move the highlight by ``step`` entries, wrapping at both ends."""
        if self.context is None or not self.context.is_visible or not self.suggestions:
            return 0
        index = (self.context.selected_index + step) % len(self.suggestions)
        self.context = replace(self.context, selected_index=index)
        return index

    def accept(self, text: str, cursor: int) -> EditorContext:
        """Insert the highlighted suggestion and close the token.

        Raises
        ------
        ContractError
            If no suggestion is highlighted or the cursor left the token.
        """
        suggestion = self.selected
        context = detect(text, cursor)
        if suggestion is None or self.context is None or context is None:
            msg = "No autocomplete suggestion to accept"
            raise ContractError(msg)
        if context.trigger_position != self.context.trigger_position:
            msg = "Cursor is no longer inside the autocomplete token"
            raise ContractError(msg)

        closer = TRIGGERS[context.trigger_char]
        start = context.trigger_position + 1
        insert = f"{suggestion.value}: " if suggestion.takes_value else suggestion.value

        # Values are typed before the closer; anything else continues after it
        position = start + len(insert)
        if not suggestion.takes_value:
            position += len(closer)
        self.dismiss()
        return EditorContext.at(text[:start] + insert + closer + text[cursor:], position)

    def dismiss(self) -> None:
        """Close the suggestion list (Escape)."""
        self.context = None
        self.suggestions = ()

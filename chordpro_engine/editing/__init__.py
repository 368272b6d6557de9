"""Editor support: undoable commands, history and autocomplete.

Every call receives the current buffer as an EditorContext and returns a
new one; per-document state lives in an EditorSession.
"""

from chordpro_engine.editing.autocomplete import (
    AutocompleteContext,
    AutocompleteState,
    detect,
)
from chordpro_engine.editing.commands import (
    Command,
    DeleteRange,
    Indent,
    InsertPair,
    InsertText,
    Outdent,
    ToggleComment,
    create_command,
)
from chordpro_engine.editing.context import CommandResult, EditorContext
from chordpro_engine.editing.history import CommandHistory, HistoryConfig, HistoryInfo
from chordpro_engine.editing.session import EditorSession
from chordpro_engine.editing.suggestions import (
    Suggestion,
    chord_suggestions,
    filter_suggestions,
)

__all__ = [
    "AutocompleteContext",
    "AutocompleteState",
    "Command",
    "CommandHistory",
    "CommandResult",
    "DeleteRange",
    "EditorContext",
    "EditorSession",
    "HistoryConfig",
    "HistoryInfo",
    "Indent",
    "InsertPair",
    "InsertText",
    "Outdent",
    "Suggestion",
    "ToggleComment",
    "chord_suggestions",
    "create_command",
    "detect",
    "filter_suggestions",
]

"""ChordPro notation engine.

This library parses ChordPro songs into an immutable model, transposes
chords and keys, segments songs into sections, renders them to HTML, plain
text or ChordPro source through a per-session formatter cache, and backs an
editor with undoable commands and autocomplete.

Examples
--------
>>> from chordpro_engine import parse, segment, transpose

>>> song = parse("{title: Amazing Grace}\\n{key: G}\\n\\n[Verse]\\n[G]Amazing [D]grace")
>>> song.title, song.key
('Amazing Grace', 'G')
>>> [section.id for section in segment(song)]
['verse-1']

>>> # Chords are transposed as text or as parsed symbols
>>> transpose("D", 2)
'E'

>>> # Rendering goes through a cache owned by the caller
>>> from chordpro_engine import FormatterCache
>>> print(FormatterCache().format(song, "text", {"transpose": 2}).splitlines()[-2])
A       E
"""

import logging

from chordpro_engine.editing import (
    AutocompleteContext,
    CommandHistory,
    CommandResult,
    EditorContext,
    EditorSession,
    HistoryConfig,
    create_command,
    detect,
)
from chordpro_engine.errors import ChordProError, ContractError, UnknownCommandError
from chordpro_engine.models import ChordSymbol
from chordpro_engine.notation import (
    Section,
    SongModel,
    ValidationIssue,
    ValidationResult,
    generate_template,
    parse,
    sections_to_text,
    segment,
    validate,
)
from chordpro_engine.rendering import FormatterCache, FormatterOptions, OutputKind
from chordpro_engine.transposer import (
    CapoOption,
    detect_key,
    parse_chord,
    semitones_between,
    solve_capo,
    transpose,
    transpose_key,
    transpose_song,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "AutocompleteContext",
    "CapoOption",
    "ChordProError",
    "ChordSymbol",
    "CommandHistory",
    "CommandResult",
    "ContractError",
    "EditorContext",
    "EditorSession",
    "FormatterCache",
    "FormatterOptions",
    "HistoryConfig",
    "OutputKind",
    "Section",
    "SongModel",
    "UnknownCommandError",
    "ValidationIssue",
    "ValidationResult",
    "create_command",
    "detect",
    "detect_key",
    "generate_template",
    "parse",
    "parse_chord",
    "sections_to_text",
    "segment",
    "semitones_between",
    "solve_capo",
    "transpose",
    "transpose_key",
    "transpose_song",
    "validate",
]

"""Column-aware splitting of inline-chord lyric lines.

Each balanced ``[...]`` becomes a chord annotation whose column is its
offset in the chord-free lyric text, which is what the plain-text renderer
needs to place chords above syllables.
"""

from __future__ import annotations

import re

from chordpro_engine.notation.models import ChordAnnotation, ChordLyricPair
from chordpro_engine.transposer import parse_chord

# Balanced bracket with non-blank content and no nested brackets
INLINE_CHORD_RE = re.compile(r"\[(\s*[^\[\]\s][^\[\]]*)\]")


def split_line(line: str) -> tuple[ChordLyricPair, ...]:
    """Split a lyric line into chord/lyric pairs.

    Unbalanced or empty brackets are kept as literal lyric text.

    Parameters
    ----------
    line : str
        One source line without its newline.

    Returns
    -------
    tuple[ChordLyricPair, ...]
        Pairs in reading order. Text before the first chord forms a pair
        with ``chord=None``.

    Examples
    --------
    >>> pairs = split_line("[G]Amazing [D]grace")
    >>> [(p.chord.text, p.chord.column, p.lyric) for p in pairs]
    [('G', 0, 'Amazing '), ('D', 8, 'grace')]

    >>> [p.lyric for p in split_line("lonely [G")]
    ['lonely [G']
    """
    pairs: list[ChordLyricPair] = []
    column = 0
    cursor = 0
    pending: ChordAnnotation | None = None

    for match in INLINE_CHORD_RE.finditer(line):
        lyric = line[cursor : match.start()]
        if pending is not None or lyric:
            pairs.append(ChordLyricPair(chord=pending, lyric=lyric))
        column += len(lyric)

        text = match.group(1).strip()
        pending = ChordAnnotation(text=text, column=column, symbol=parse_chord(text))
        cursor = match.end()

    lyric = line[cursor:]
    if pending is not None or lyric or not pairs:
        pairs.append(ChordLyricPair(chord=pending, lyric=lyric))
    return tuple(pairs)

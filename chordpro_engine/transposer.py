"""Chord and key transposition.

Transposition is a rotation on the 12-position chromatic ring. Roots and
slash basses rotate independently by the same amount; suffixes pass
through untouched. String inputs are handled best-effort: anything outside
the chord grammar comes back unchanged and no input ever raises.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Literal, overload

from chordpro_engine.models import ChordSymbol
from chordpro_engine.theory import (
    NOTE_TO_PC,
    format_key,
    pc_to_note,
    prefers_flats,
    split_key,
)

if TYPE_CHECKING:
    from chordpro_engine.notation.models import SongModel

logger = logging.getLogger(__name__)

# Root (A-G) with optional accidental, one optional quality token, an
# optional degree, one optional altered tension and an optional slash bass.
CHORD_RE = re.compile(
    r"^(?P<root>[A-G][#b]?)"
    r"(?P<suffix>(?:maj|min|m|M|dim|aug|sus|add)?(?:\d+)?(?:[#b]\d+)?)"
    r"(?:/(?P<bass>[A-G][#b]?))?$"
)

Difficulty = Literal["easy", "medium", "hard"]

CAPO_SHAPES: tuple[str, ...] = ("G", "C", "D", "A", "E", "Em", "Am", "Dm")
EASY_SHAPES: frozenset[str] = frozenset({"G", "C", "D", "Em", "Am"})
MEDIUM_SHAPES: frozenset[str] = frozenset({"A", "E", "Dm"})
DIFFICULTY_ORDER: dict[str, int] = {"easy": 0, "medium": 1, "hard": 2}


@dataclass(frozen=True)
class CapoOption:
    """One way of sounding a target key with a capo.

    Parameters
    ----------
    capo : int
        Capo fret (0 means no capo).
    shape : str
        Open-position chord shape the player fingers.
    difficulty : Difficulty
        Fixed difficulty rating of the shape.
    """

    capo: int
    shape: str
    difficulty: Difficulty


def parse_chord(text: str) -> ChordSymbol | None:
    """Parse chord text into a ChordSymbol.

    Parameters
    ----------
    text : str
        Chord text as written inside brackets (e.g., "Am7", "G/B").

    Returns
    -------
    ChordSymbol | None
        The parsed symbol, or None when the text is outside the grammar.

    Examples
    --------
    >>> parse_chord("Bbm7/F")
    ChordSymbol(root=10, suffix='m7', bass=5)
    >>> parse_chord("Verse") is None
    True
    """
    match = CHORD_RE.match(text.strip()) if text else None
    if not match:
        return None
    bass = match.group("bass")
    return ChordSymbol(
        root=NOTE_TO_PC[match.group("root")],
        suffix=match.group("suffix"),
        bass=NOTE_TO_PC[bass] if bass else None,
    )


def transpose_chord(chord: ChordSymbol, semitones: int) -> ChordSymbol:
    """Rotate a chord's root and bass by a number of semitones.

    Examples
    --------
    >>> transpose_chord(ChordSymbol(root=0), -1)
    ChordSymbol(root=11, suffix='', bass=None)
    """
    shift = semitones % 12
    return ChordSymbol(
        root=chord.root + shift,
        suffix=chord.suffix,
        bass=None if chord.bass is None else chord.bass + shift,
    )


@overload
def transpose(chord: ChordSymbol, semitones: int, use_flats: bool = ...) -> ChordSymbol: ...


@overload
def transpose(chord: str, semitones: int, use_flats: bool = ...) -> str: ...


def transpose(chord, semitones, use_flats=False):
    """Transpose a chord symbol or chord text.

    Parameters
    ----------
    chord : ChordSymbol | str
        The chord to transpose.
    semitones : int
        Any integer; normalized modulo 12.
    use_flats : bool
        Spelling for string results (ignored for ChordSymbol input).

    Returns
    -------
    ChordSymbol | str
        Same type as the input. Text outside the chord grammar is returned
        unchanged.

    Examples
    --------
    >>> transpose("G", 2)
    'A'
    >>> transpose("Am7/G", -2, use_flats=True)
    'Gm7/F'
    >>> transpose("N.C.", 5)
    'N.C.'
    """
    if isinstance(chord, ChordSymbol):
        return transpose_chord(chord, semitones)
    symbol = parse_chord(chord)
    if symbol is None or semitones % 12 == 0:
        return chord
    return transpose_chord(symbol, semitones).spell(use_flats)


def transpose_key(key: str, semitones: int, use_flats: bool | None = None) -> str:
    """Transpose a key name, preserving the minor tag.

    Parameters
    ----------
    key : str
        Key such as "G" or "F#m".
    semitones : int
        Any integer; normalized modulo 12.
    use_flats : bool | None
        Force a spelling, or None to follow the destination key's convention.

    Returns
    -------
    str
        The transposed key, or the input unchanged if it is not a key.

    Examples
    --------
    >>> transpose_key("G", 3)
    'Bb'
    >>> transpose_key("Am", 2)
    'Bm'
    """
    parsed = split_key(key)
    if parsed is None:
        return key
    tonic, is_minor = parsed
    return format_key(tonic + semitones, is_minor, use_flats)


def semitones_between(from_key: str, to_key: str) -> int:
    """Compute the closest transposition from one key to another.

    Returns
    -------
    int
        Offset in the range [-6, 5].

    Raises
    ------
    ValueError
        If either key is not recognized.

    Examples
    --------
    >>> semitones_between("C", "D")
    2
    >>> semitones_between("C", "A")
    -3
    """
    source = split_key(from_key)
    target = split_key(to_key)
    if source is None or target is None:
        msg = f"Invalid key: {from_key if source is None else to_key}"
        raise ValueError(msg)
    delta = (target[0] - source[0]) % 12
    return delta - 12 if delta > 5 else delta


def shape_difficulty(shape: str) -> Difficulty:
    """Rate an open chord shape."""
    if shape in EASY_SHAPES:
        return "easy"
    if shape in MEDIUM_SHAPES:
        return "medium"
    return "hard"


def solve_capo(target_key: str) -> list[CapoOption]:
    """Find open-shape and capo combinations that sound a target key.

    Parameters
    ----------
    target_key : str
        The key the song should sound in (e.g., "Bb", "F#m").

    Returns
    -------
    list[CapoOption]
        Every matching combination, ordered by capo ascending and then by
        shape difficulty. Empty for an unrecognized key.

    Examples
    --------
    >>> [(o.capo, o.shape) for o in solve_capo("A")][:2]
    [(0, 'A'), (2, 'G')]
    """
    target = split_key(target_key)
    if target is None:
        return []

    options: list[CapoOption] = []
    for shape in CAPO_SHAPES:
        shape_key = split_key(shape)
        if shape_key is None:
            continue
        for capo in range(12):
            if ((shape_key[0] + capo) % 12, shape_key[1]) == target:
                options.append(
                    CapoOption(capo=capo, shape=shape, difficulty=shape_difficulty(shape))
                )

    return sorted(options, key=lambda o: (o.capo, DIFFICULTY_ORDER[o.difficulty]))


def detect_key(song: SongModel) -> str | None:
    """Guess a song's key.

    Uses the ``key`` metadata when it names a real key, otherwise the first
    recognized chord (root plus minor tag).
    """
    declared = song.metadata.get("key")
    if declared and split_key(declared) is not None:
        return declared.strip()

    for annotation in song.chords():
        if annotation.symbol is None:
            continue
        use_flats = annotation.text.strip()[1:2] == "b"
        root = pc_to_note(annotation.symbol.root, use_flats)
        return f"{root}m" if annotation.symbol.is_minor else root
    return None


def transpose_song(
    song: SongModel,
    semitones: int,
    use_flats: bool | None = None,
) -> SongModel:
    """Return a copy of a song with every chord and the key transposed.

    Parameters
    ----------
    song : SongModel
        The parsed song; it is not modified.
    semitones : int
        Any integer; a multiple of 12 returns the song unchanged.
    use_flats : bool | None
        True forces flats and False forces sharps, for the chords and the
        key alike. None follows the declared destination key, or sharps
        when the song declares no key.

    Returns
    -------
    SongModel
        The transposed song.
    """
    from chordpro_engine.notation.models import (
        ChordAnnotation,
        ChordLyricPair,
        DirectiveLine,
        LyricLine,
        SongModel,
        pairs_to_source,
    )

    if semitones % 12 == 0:
        return song

    # Only a declared key decides the spelling; without one chords use sharps
    target_key = transpose_key(song.key, semitones, use_flats) if song.key else None
    spell_flats = use_flats if use_flats is not None else prefers_flats(target_key)

    def shift(annotation: ChordAnnotation | None) -> ChordAnnotation | None:
        if annotation is None or annotation.symbol is None:
            return annotation
        moved = transpose_chord(annotation.symbol, semitones)
        return ChordAnnotation(
            text=moved.spell(spell_flats), column=annotation.column, symbol=moved
        )

    lines = []
    for line in song.lines:
        if isinstance(line, LyricLine):
            pairs = tuple(
                ChordLyricPair(chord=shift(pair.chord), lyric=pair.lyric)
                for pair in line.pairs
            )
            line = replace(line, pairs=pairs, raw=pairs_to_source(pairs))
        elif isinstance(line, DirectiveLine) and line.name == "key" and line.value:
            value = transpose_key(line.value, semitones, use_flats)
            line = replace(line, value=value, raw=f"{{{line.raw_name}: {value}}}")
        lines.append(line)

    metadata = dict(song.metadata)
    if metadata.get("key"):
        metadata["key"] = transpose_key(metadata["key"], semitones, use_flats)

    logger.debug("Transposed song by %d semitones (flats=%s)", semitones, spell_flats)
    return SongModel(
        metadata=metadata,
        lines=tuple(lines),
        source="\n".join(line.raw for line in lines),
    )

"""Pitch-class tables and small music-theory helpers.

This module holds the fixed 12-position chromatic tables used by the
transposer, the spelling policy for flat-preferring keys, and a thin
wrapper over pychord for looking up chord components.
"""

from __future__ import annotations

import re

# Note name to pitch class (0-11, where C=0)
NOTE_TO_PC: dict[str, int] = {
    "C": 0,
    "C#": 1,
    "Db": 1,
    "D": 2,
    "D#": 3,
    "Eb": 3,
    "E": 4,
    "Fb": 4,
    "E#": 5,
    "F": 5,
    "F#": 6,
    "Gb": 6,
    "G": 7,
    "G#": 8,
    "Ab": 8,
    "A": 9,
    "A#": 10,
    "Bb": 10,
    "B": 11,
    "Cb": 11,
    "B#": 0,
}

SHARP_NAMES: tuple[str, ...] = (
    "C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B",
)
FLAT_NAMES: tuple[str, ...] = (
    "C", "Db", "D", "Eb", "E", "F", "Gb", "G", "Ab", "A", "Bb", "B",
)

# Tonics conventionally written with flats (F, Bb, Eb, Ab, Db / Dm, Gm, Cm, Fm, Bbm)
FLAT_MAJOR_PCS: frozenset[int] = frozenset({5, 10, 3, 8, 1})
FLAT_MINOR_PCS: frozenset[int] = frozenset({2, 7, 0, 5, 10})

MAJOR_SCALE: tuple[int, ...] = (0, 2, 4, 5, 7, 9, 11)
MINOR_SCALE: tuple[int, ...] = (0, 2, 3, 5, 7, 8, 10)
MAJOR_TRIADS: tuple[str, ...] = ("", "m", "m", "", "", "m", "dim")
MINOR_TRIADS: tuple[str, ...] = ("m", "dim", "", "m", "m", "", "")

KEY_RE = re.compile(
    r"^\s*([A-G])([#b]?)\s*(m|min|minor|maj|major)?\s*$",
    re.IGNORECASE,
)

def note_to_pc(note: str) -> int:
    """Convert a note name to pitch class (0-11).

    Parameters
    ----------
    note : str
        Note name (e.g., "C", "F#", "Bb").

    Returns
    -------
    int
        Pitch class (0-11, where C=0).

    Raises
    ------
    ValueError
        If the note name is not recognized.

    Examples
    --------
    >>> note_to_pc("F#")
    6
    >>> note_to_pc("Bb")
    10
    """
    if note in NOTE_TO_PC:
        return NOTE_TO_PC[note]
    msg = f"Unknown note: {note}"
    raise ValueError(msg)


def pc_to_note(pc: int, use_flats: bool = False) -> str:
    """Spell a pitch class with the sharp or flat chromatic table.

    Examples
    --------
    >>> pc_to_note(10)
    'A#'
    >>> pc_to_note(10, use_flats=True)
    'Bb'
    >>> pc_to_note(-1)
    'B'
    """
    names = FLAT_NAMES if use_flats else SHARP_NAMES
    return names[pc % 12]


def split_key(key: str) -> tuple[int, bool] | None:
    """Split a key name into its tonic pitch class and minor flag.

    Accepts "G", "Gm", "F#min", "Bb major" and similar spellings.

    Returns
    -------
    tuple[int, bool] | None
        ``(tonic_pc, is_minor)``, or None when the key is not recognized.

    Examples
    --------
    >>> split_key("Am")
    (9, True)
    >>> split_key("Bb")
    (10, False)
    >>> split_key("H") is None
    True
    """
    match = KEY_RE.match(key or "")
    if not match:
        return None
    letter, accidental, mode = match.groups()
    pc = NOTE_TO_PC[letter.upper() + accidental.lower()]
    is_minor = mode is not None and mode.lower() in ("m", "min", "minor")
    # "M" on its own means major; only a lowercase "m" marks minor
    if mode == "M":
        is_minor = False
    return pc, is_minor


def format_key(pc: int, is_minor: bool, use_flats: bool | None = None) -> str:
    """Spell a key from its tonic pitch class.

    When ``use_flats`` is None the key's own convention decides.
    """
    if use_flats is None:
        use_flats = (pc % 12) in (FLAT_MINOR_PCS if is_minor else FLAT_MAJOR_PCS)
    name = pc_to_note(pc, use_flats)
    return f"{name}m" if is_minor else name


def prefers_flats(key: str | None) -> bool:
    """Check whether a key is conventionally written with flats.

    Keys spelled with a flat ("Gb", "Ebm") always count as flat-preferring.

    Examples
    --------
    >>> prefers_flats("F")
    True
    >>> prefers_flats("Dm")
    True
    >>> prefers_flats("E")
    False
    """
    if not key:
        return False
    parsed = split_key(key)
    if parsed is None:
        return False
    if key.strip()[1:2] == "b":
        return True
    pc, is_minor = parsed
    return pc in (FLAT_MINOR_PCS if is_minor else FLAT_MAJOR_PCS)


def diatonic_chords(key: str) -> tuple[str, ...]:
    """List the seven diatonic triads of a major or natural-minor key.

    Parameters
    ----------
    key : str
        Key name such as "G" or "Em".

    Returns
    -------
    tuple[str, ...]
        Chord names in scale-degree order, spelled by the key's convention,
        or an empty tuple for an unrecognized key.

    Examples
    --------
    >>> diatonic_chords("G")
    ('G', 'Am', 'Bm', 'C', 'D', 'Em', 'F#dim')
    >>> diatonic_chords("F")[3]
    'Bb'
    """
    parsed = split_key(key)
    if parsed is None:
        return ()
    tonic, is_minor = parsed
    use_flats = prefers_flats(key)
    scale = MINOR_SCALE if is_minor else MAJOR_SCALE
    triads = MINOR_TRIADS if is_minor else MAJOR_TRIADS
    return tuple(
        pc_to_note(tonic + step, use_flats) + quality
        for step, quality in zip(scale, triads)
    )


def chord_notes(chord_text: str) -> tuple[str, ...]:
    """Look up the component notes of a chord with pychord.

    Parameters
    ----------
    chord_text : str
        Chord name (e.g., "Am7", "G/B").

    Returns
    -------
    tuple[str, ...]
        Component note names, or an empty tuple when pychord does not
        recognize the chord.

    Examples
    --------
    >>> chord_notes("C")
    ('C', 'E', 'G')
    >>> chord_notes("Xyz")
    ()
    """
    from pychord import Chord as PyChord

    try:
        return tuple(PyChord(chord_text).components())
    except ValueError:
        return ()

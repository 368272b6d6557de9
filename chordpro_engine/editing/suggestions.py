"""Autocomplete suggestion lists and ranking."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from chordpro_engine.notation.directives import DIRECTIVES, DirectiveCategory
from chordpro_engine.theory import diatonic_chords

COMMON_CHORDS: tuple[str, ...] = (
    "C", "G", "Am", "F", "D", "Em", "A", "E", "Dm", "Bm",
    "B", "Cm", "Gm", "Bb", "Eb", "Ab", "Fm", "C#m", "F#m", "G#m",
)


@dataclass(frozen=True)
class Suggestion:
    """One autocomplete entry.

    Parameters
    ----------
    value : str
        Text inserted on accept.
    label : str
        Display text.
    description : str
        Help text shown next to the label.
    category : DirectiveCategory | None
        Display group for directives; None for chords.
    takes_value : bool
        Accepting inserts ``value: `` and leaves the cursor for the value.
    """

    value: str
    label: str
    description: str = ""
    category: DirectiveCategory | None = None
    takes_value: bool = False


DIRECTIVE_SUGGESTIONS: tuple[Suggestion, ...] = tuple(
    Suggestion(
        value=spec.name,
        label=spec.name,
        description=spec.description,
        category=spec.category,
        takes_value=spec.requires_value,
    )
    for spec in DIRECTIVES
)


def chord_suggestions(key: str | None = None) -> tuple[Suggestion, ...]:
    """Chords to offer inside ``[``: the key's diatonic triads, then common chords.

    Examples
    --------
    >>> [s.value for s in chord_suggestions("G")][:4]
    ['G', 'Am', 'Bm', 'C']
    """
    suggestions: list[Suggestion] = []
    seen: set[str] = set()
    for chord in diatonic_chords(key) if key else ():
        suggestions.append(Suggestion(chord, chord, f"Diatonic in {key}"))
        seen.add(chord)
    for chord in COMMON_CHORDS:
        if chord not in seen:
            suggestions.append(Suggestion(chord, chord, "Common chord"))
    return tuple(suggestions)


def filter_suggestions(items: Iterable[Suggestion], filter_text: str) -> list[Suggestion]:
    """Rank suggestions against partially typed text.

    Matching is a case-insensitive substring test on the value. Prefix
    matches come first, then other matches, each group alphabetical. An
    empty filter keeps every item in its original order.

    Examples
    --------
    >>> items = [Suggestion("subtitle", "subtitle"), Suggestion("title", "title")]
    >>> [s.value for s in filter_suggestions(items, "tit")]
    ['title', 'subtitle']
    """
    needle = filter_text.strip().lower()
    if not needle:
        return list(items)
    matches = [item for item in items if needle in item.value.lower()]
    return sorted(
        matches,
        key=lambda item: (not item.value.lower().startswith(needle), item.value.lower()),
    )

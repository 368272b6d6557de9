"""Data models for parsed ChordPro songs.

This module defines the line records produced by the parser, the immutable
song model, and the sections derived from it by the segmenter.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from chordpro_engine.models import ChordSymbol


SectionKind = Literal["verse", "chorus", "bridge", "intro", "outro", "custom"]


@dataclass(frozen=True)
class ChordAnnotation:
    """A chord written inline as ``[text]``.

    Parameters
    ----------
    text : str
        Chord text as written, stripped of surrounding whitespace.
    column : int
        Column in the lyric-only line where the chord applies (0-indexed).
    symbol : ChordSymbol | None
        Parsed chord, or None when the text is outside the chord grammar.
    """

    text: str
    column: int
    symbol: ChordSymbol | None = None


@dataclass(frozen=True)
class ChordLyricPair:
    """A lyric fragment with the chord sung on its first syllable.

    Parameters
    ----------
    chord : ChordAnnotation | None
        The chord, or None for lyric text before the first chord.
    lyric : str
        The lyric fragment up to the next chord (may be empty).
    """

    chord: ChordAnnotation | None
    lyric: str


@dataclass(frozen=True)
class BlankLine:
    """An empty or whitespace-only line."""

    number: int
    raw: str = ""


@dataclass(frozen=True)
class CommentLine:
    """A source comment starting with ``#``; never rendered.

    Parameters
    ----------
    number : int
        1-based source line number.
    raw : str
        The raw line text.
    """

    number: int
    raw: str


@dataclass(frozen=True)
class DirectiveLine:
    """A full-line ``{name}`` or ``{name: value}`` directive.

    Parameters
    ----------
    number : int
        1-based source line number.
    name : str
        Canonical lowercase directive name (aliases resolved).
    value : str | None
        Trimmed value, or None when the directive has no colon.
    raw_name : str
        The name exactly as written.
    raw : str
        The raw line text.
    """

    number: int
    name: str
    value: str | None
    raw_name: str
    raw: str


@dataclass(frozen=True)
class SectionHeaderLine:
    """A bracketed section header such as ``[Verse 1]`` on its own line.

    Parameters
    ----------
    number : int
        1-based source line number.
    kind : SectionKind
        Section kind derived from the header word.
    label : str
        The header text between the brackets.
    raw : str
        The raw line text.
    """

    number: int
    kind: SectionKind
    label: str
    raw: str


@dataclass(frozen=True)
class LyricLine:
    """A line of lyrics with inline chords.

    Parameters
    ----------
    number : int
        1-based source line number.
    pairs : tuple[ChordLyricPair, ...]
        Chord/lyric pairs in reading order.
    raw : str
        The line as ChordPro source.
    """

    number: int
    pairs: tuple[ChordLyricPair, ...]
    raw: str

    @property
    def lyric(self) -> str:
        """The line with all chords removed."""
        return "".join(pair.lyric for pair in self.pairs)

    @property
    def chords(self) -> tuple[ChordAnnotation, ...]:
        """Chord annotations in reading order."""
        return tuple(pair.chord for pair in self.pairs if pair.chord is not None)


NotationLine = BlankLine | CommentLine | DirectiveLine | SectionHeaderLine | LyricLine


def pairs_to_source(pairs: tuple[ChordLyricPair, ...]) -> str:
    """Write chord/lyric pairs back as inline ChordPro text.

    Examples
    --------
    >>> pairs_to_source((ChordLyricPair(ChordAnnotation("G", 0), "Hi"),))
    '[G]Hi'
    """
    return "".join(
        (f"[{pair.chord.text}]" if pair.chord is not None else "") + pair.lyric
        for pair in pairs
    )


@dataclass(frozen=True)
class SongModel:
    """An immutable parsed song.

    Parameters
    ----------
    metadata : Mapping[str, str]
        Metadata directives by canonical name (last occurrence wins).
    lines : tuple[NotationLine, ...]
        Every source line in order.
    source : str
        The normalized source text the model was parsed from.
    """

    metadata: Mapping[str, str] = field(default_factory=dict)
    lines: tuple[NotationLine, ...] = ()
    source: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.metadata, MappingProxyType):
            object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    @property
    def title(self) -> str | None:
        return self.metadata.get("title")

    @property
    def key(self) -> str | None:
        return self.metadata.get("key")

    def chords(self) -> tuple[ChordAnnotation, ...]:
        """All chord annotations in reading order."""
        return tuple(
            chord
            for line in self.lines
            if isinstance(line, LyricLine)
            for chord in line.chords
        )

    def lyrics(self) -> tuple[str, ...]:
        """The chord-free text of every lyric line."""
        return tuple(line.lyric for line in self.lines if isinstance(line, LyricLine))


@dataclass(frozen=True)
class Section:
    """A labeled contiguous span of a song.

    Parameters
    ----------
    id : str
        Stable identifier (e.g., "verse-1", "chorus-2", "full-song").
    kind : SectionKind
        The section kind.
    label : str
        Display label (e.g., "Verse 1").
    content : str
        Literal source text of the span, start and end markers included.
    marker : str | None
        The raw start-marker line, or None for synthetic sections.
    prelude : str | None
        Directive/comment text that preceded the first marker.
    start_line : int
        First source line of ``content`` (1-based).
    end_line : int
        Last source line of ``content`` (1-based, inclusive).
    lines : tuple[NotationLine, ...]
        Parsed records of the span.
    """

    id: str
    kind: SectionKind
    label: str
    content: str
    marker: str | None = None
    prelude: str | None = None
    start_line: int = 1
    end_line: int = 1
    lines: tuple[NotationLine, ...] = ()

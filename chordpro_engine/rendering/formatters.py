"""Song formatters.

Each formatter turns a SongModel into one output representation. Options
are fixed at construction so one instance can be cached and reused for
every render with the same settings. Transposition happens on a copy of the
model before any output is produced.
"""

from __future__ import annotations

import html
from abc import ABC, abstractmethod
from typing import ClassVar

from chordpro_engine.notation.models import (
    BlankLine,
    DirectiveLine,
    LyricLine,
    NotationLine,
    SectionHeaderLine,
    SongModel,
)
from chordpro_engine.notation.segmenter import START_PREFIX, segment
from chordpro_engine.rendering.options import FormatterOptions, OutputKind
from chordpro_engine.theory import chord_notes
from chordpro_engine.transposer import transpose_song

COMMENT_DIRECTIVES: frozenset[str] = frozenset(
    {"comment", "comment_italic", "comment_box", "highlight"}
)


class Formatter(ABC):
    """Base class for all formatters.

    Parameters
    ----------
    options : FormatterOptions | None
        Rendering options; defaults when omitted.
    """

    kind: ClassVar[OutputKind]

    def __init__(self, options: FormatterOptions | None = None) -> None:
        self.options = options or FormatterOptions()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.options!r})"

    def prepare(self, model: SongModel) -> SongModel:
        """Apply the transpose option, spelling by the destination key."""
        return transpose_song(
            model, self.options.transpose, use_flats=self.options.use_flats or None
        )

    def format(self, model: SongModel) -> str:
        """Render a song.

        Parameters
        ----------
        model : SongModel
            The parsed song; it is not modified.

        Returns
        -------
        str
            The rendered output.
        """
        return self.render(self.prepare(model))

    @abstractmethod
    def render(self, song: SongModel) -> str:
        """Render an already transposed song."""


class ChordProFormatter(Formatter):
    """Writes the song back as ChordPro source.

    Lines are emitted verbatim, so an untransposed model reproduces the
    text it was parsed from.

    Examples
    --------
    >>> from chordpro_engine.notation import parse
    >>> ChordProFormatter(FormatterOptions(transpose=2)).format(parse("{key: G}\\n[G]la"))
    '{key: A}\\n[A]la'
    """

    kind = OutputKind.CHORDPRO

    def render(self, song: SongModel) -> str:
        return "\n".join(line.raw for line in song.lines)


class TextFormatter(Formatter):
    """Plain text with chords on their own row above the lyrics.

    Each chord/lyric pair takes ``max(len(lyric), len(chord) + 1)`` columns,
    so a chord always starts over the syllable it belongs to and adjacent
    chords never touch.

    Examples
    --------
    >>> from chordpro_engine.notation import parse
    >>> print(TextFormatter().format(parse("[G]Amazing [D]grace")))
    G       D
    Amazing grace
    """

    kind = OutputKind.TEXT

    def render(self, song: SongModel) -> str:
        output: list[str] = []
        if song.title:
            output.append(song.title)
        if song.metadata.get("subtitle"):
            output.append(song.metadata["subtitle"])

        for line in song.lines:
            output.extend(self.render_line(line))
        return "\n".join(output).rstrip("\n")

    def render_line(self, line: NotationLine) -> list[str]:
        """Render one source line as zero or more output rows."""
        if isinstance(line, LyricLine):
            return self.render_lyric_line(line)
        if isinstance(line, SectionHeaderLine):
            return [line.label]
        if isinstance(line, DirectiveLine):
            if line.name in COMMENT_DIRECTIVES and line.value:
                return [line.value]
            if line.name.startswith(START_PREFIX) and line.value:
                return [line.value]
            return []
        if isinstance(line, BlankLine):
            return [""]
        # Source comments are never rendered
        return []

    @staticmethod
    def render_lyric_line(line: LyricLine) -> list[str]:
        if not line.chords:
            return [line.lyric.rstrip()]

        chord_row: list[str] = []
        lyric_row: list[str] = []
        for pair in line.pairs:
            chord = pair.chord.text if pair.chord is not None else ""
            width = max(len(pair.lyric), len(chord) + 1) if chord else len(pair.lyric)
            chord_row.append(chord.ljust(width))
            lyric_row.append(pair.lyric.ljust(width))

        rows = ["".join(chord_row).rstrip()]
        lyrics = "".join(lyric_row).rstrip()
        if lyrics:
            rows.append(lyrics)
        return rows


class HtmlFormatter(Formatter):
    """Shared HTML structure for the screen and print formatters."""

    def css(self, *names: str) -> str:
        """Prefixed class attribute value."""
        prefix = html.escape(self.options.css_prefix, quote=True)
        return " ".join(f"{prefix}{name}" for name in names)

    def render(self, song: SongModel) -> str:
        parts = [f'<div class="{self.css("chord-sheet")}">']
        if song.title:
            parts.append(f'<h1 class="{self.css("title")}">{html.escape(song.title)}</h1>')
        if song.metadata.get("subtitle"):
            subtitle = html.escape(song.metadata["subtitle"])
            parts.append(f'<h2 class="{self.css("subtitle")}">{subtitle}</h2>')

        sections = segment(song)
        if sections[0].prelude is not None:
            for line in song.lines:
                if line.number >= sections[0].start_line:
                    break
                rendered = self.render_line(line)
                if rendered:
                    parts.append(rendered)

        for section in sections:
            parts.append(f'<div class="{self.css("paragraph", section.kind)}">')
            for line in section.lines:
                rendered = self.render_line(line)
                if rendered:
                    parts.append(rendered)
            parts.append("</div>")

        if self.options.show_diagrams:
            parts.append(self.render_diagrams(song))
        parts.append("</div>")
        return "\n".join(parts)

    def render_line(self, line: NotationLine) -> str | None:
        if isinstance(line, LyricLine):
            return self.render_lyric_line(line)
        if isinstance(line, SectionHeaderLine):
            return self.render_label(line.label)
        if isinstance(line, DirectiveLine):
            if line.name in COMMENT_DIRECTIVES and line.value:
                return (
                    f'<div class="{self.css("comment")}">{html.escape(line.value)}</div>'
                )
            if line.name.startswith(START_PREFIX) and line.value:
                return self.render_label(line.value)
        return None

    def render_label(self, label: str) -> str:
        return f'<h3 class="{self.css("label")}">{html.escape(label)}</h3>'

    def render_diagrams(self, song: SongModel) -> str:
        """Chord legend listing each distinct chord with its notes."""
        seen: list[str] = []
        for chord in song.chords():
            if chord.symbol is not None and chord.text not in seen:
                seen.append(chord.text)

        parts = [f'<div class="{self.css("chord-diagrams")}">']
        for name in seen:
            notes = " ".join(chord_notes(name))
            parts.append(
                f'<div class="{self.css("chord-diagram")}">'
                f'<span class="{self.css("chord-name")}">{html.escape(name)}</span>'
                f'<span class="{self.css("chord-notes")}">{html.escape(notes)}</span>'
                "</div>"
            )
        parts.append("</div>")
        return "\n".join(parts)

    @abstractmethod
    def render_lyric_line(self, line: LyricLine) -> str:
        """Render one chord/lyric line."""


class HtmlDivFormatter(HtmlFormatter):
    """Responsive screen HTML built from nested divs."""

    kind = OutputKind.RESPONSIVE

    def render_lyric_line(self, line: LyricLine) -> str:
        columns = []
        for pair in line.pairs:
            chord = html.escape(pair.chord.text) if pair.chord is not None else ""
            columns.append(
                f'<div class="{self.css("column")}">'
                f'<div class="{self.css("chord")}">{chord}</div>'
                f'<div class="{self.css("lyrics")}">{html.escape(pair.lyric)}</div>'
                "</div>"
            )
        return f'<div class="{self.css("row")}">{"".join(columns)}</div>'


class HtmlTableFormatter(HtmlFormatter):
    """Printable HTML with each line laid out as a two-row table."""

    kind = OutputKind.PRINT

    def render_lyric_line(self, line: LyricLine) -> str:
        chord_cells = []
        lyric_cells = []
        for pair in line.pairs:
            chord = html.escape(pair.chord.text) if pair.chord is not None else ""
            chord_cells.append(f'<td class="{self.css("chord")}">{chord}</td>')
            lyric = html.escape(pair.lyric)
            lyric_cells.append(f'<td class="{self.css("lyrics")}">{lyric}</td>')
        rows = []
        if line.chords:
            rows.append(f"<tr>{''.join(chord_cells)}</tr>")
        rows.append(f"<tr>{''.join(lyric_cells)}</tr>")
        return f'<table class="{self.css("row")}">{"".join(rows)}</table>'


FORMATTERS: dict[OutputKind, type[Formatter]] = {
    OutputKind.RESPONSIVE: HtmlDivFormatter,
    OutputKind.PRINT: HtmlTableFormatter,
    OutputKind.TEXT: TextFormatter,
    OutputKind.CHORDPRO: ChordProFormatter,
}


"""Section segmentation and reassembly.

Sections run from one start marker to the next, so end markers and any
trailing blank lines stay with the section they close. Joining every
section's prelude and content with newlines gives back the source text.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable

from chordpro_engine.notation.directives import environment_kind
from chordpro_engine.notation.models import (
    BlankLine,
    CommentLine,
    DirectiveLine,
    NotationLine,
    Section,
    SectionHeaderLine,
    SectionKind,
    SongModel,
)

logger = logging.getLogger(__name__)

START_PREFIX = "start_of_"
FULL_SONG_ID = "full-song"

# Label for lyrics that appear before any section marker
DEFAULT_LABEL = "Song"


def start_marker(line: NotationLine) -> tuple[SectionKind, str] | None:
    """Return ``(kind, label)`` if the line opens a section.

    Parameters
    ----------
    line : NotationLine
        A parsed line.

    Returns
    -------
    tuple[SectionKind, str] | None
        Kind and display label, or None for any other line.
    """
    if isinstance(line, SectionHeaderLine):
        return line.kind, line.label
    if isinstance(line, DirectiveLine) and line.name.startswith(START_PREFIX):
        env = line.name[len(START_PREFIX) :]
        label = line.value or env.replace("_", " ").title()
        return environment_kind(env), label
    return None


def _join(lines: Iterable[NotationLine]) -> str:
    return "\n".join(line.raw for line in lines)


def _is_prelude(lines: Iterable[NotationLine]) -> bool:
    return all(isinstance(line, (BlankLine, CommentLine, DirectiveLine)) for line in lines)


def segment(model: SongModel) -> list[Section]:
    """Group a song's lines into sections.

    Parameters
    ----------
    model : SongModel
        The parsed song.

    Returns
    -------
    list[Section]
        Sections in source order. Without any marker the whole buffer is a
        single custom section with id ``"full-song"``.

    Examples
    --------
    >>> from chordpro_engine.notation.parser import parse
    >>> sections = segment(parse("{title: X}\\n[Verse]\\n[G]la\\n[Chorus]\\n[C]oh"))
    >>> [(s.id, s.label, s.prelude) for s in sections]
    [('verse-1', 'Verse', '{title: X}'), ('chorus-1', 'Chorus', None)]
    """
    lines = model.lines
    markers: dict[int, tuple[SectionKind, str]] = {}
    for index, line in enumerate(lines):
        marker = start_marker(line)
        if marker is not None:
            markers[index] = marker
    starts = list(markers)

    if not starts:
        return [
            Section(
                id=FULL_SONG_ID,
                kind="custom",
                label=model.title or DEFAULT_LABEL,
                content=_join(lines),
                start_line=lines[0].number if lines else 1,
                end_line=lines[-1].number if lines else 1,
                lines=lines,
            )
        ]

    counters: Counter[str] = Counter()
    sections: list[Section] = []

    preamble = lines[: starts[0]]
    prelude: str | None = None
    if preamble and _is_prelude(preamble):
        prelude = _join(preamble)
    elif preamble:
        counters["custom"] += 1
        sections.append(
            Section(
                id=f"custom-{counters['custom']}",
                kind="custom",
                label=DEFAULT_LABEL,
                content=_join(preamble),
                start_line=preamble[0].number,
                end_line=preamble[-1].number,
                lines=preamble,
            )
        )

    bounds = [*starts, len(lines)]
    for begin, end in zip(bounds, bounds[1:]):
        span = lines[begin:end]
        kind, label = markers[begin]
        counters[kind] += 1
        sections.append(
            Section(
                id=f"{kind}-{counters[kind]}",
                kind=kind,
                label=label,
                content=_join(span),
                marker=span[0].raw,
                prelude=prelude,
                start_line=span[0].number,
                end_line=span[-1].number,
                lines=span,
            )
        )
        prelude = None

    logger.debug("Segmented %d lines into %d sections", len(lines), len(sections))
    return sections


def sections_to_text(sections: Iterable[Section]) -> str:
    """Reassemble sections into ChordPro text.

    Sections that carry their original marker are emitted verbatim.
    Marker-less sections of a named kind are wrapped in synthetic
    ``{start_of_<kind>}`` / ``{end_of_<kind>}`` directives.

    Examples
    --------
    >>> sections_to_text([Section(id="v", kind="verse", label="", content="[G]la")])
    '{start_of_verse}\\n[G]la\\n{end_of_verse}'
    """
    parts: list[str] = []
    for section in sections:
        if section.prelude is not None:
            parts.append(section.prelude)
        if section.marker is None and section.kind != "custom":
            opener = f"start_of_{section.kind}"
            parts.append(f"{{{opener}: {section.label}}}" if section.label else f"{{{opener}}}")
            parts.append(section.content)
            parts.append(f"{{end_of_{section.kind}}}")
        else:
            parts.append(section.content)
    return "\n".join(parts)

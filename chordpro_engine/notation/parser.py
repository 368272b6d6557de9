"""ChordPro text parser.

This module provides the parse() function that turns raw notation text
into an immutable SongModel. Parsing never raises: anything that is not a
well-formed directive, comment or section header is read as a lyric line,
and malformed brackets inside it stay literal text.
"""

from __future__ import annotations

import logging
import re

from chordpro_engine.notation.directives import METADATA_KEYS, header_kind, resolve_name
from chordpro_engine.notation.models import (
    BlankLine,
    CommentLine,
    DirectiveLine,
    LyricLine,
    NotationLine,
    SectionHeaderLine,
    SongModel,
)
from chordpro_engine.notation.tokenizer import split_line
from chordpro_engine.transposer import parse_chord

logger = logging.getLogger(__name__)

# Full-line directive: {name} or {name: value}
DIRECTIVE_RE = re.compile(r"^\s*\{\s*([A-Za-z][\w-]*)\s*(?::([^{}]*))?\}\s*$")

# Line holding a single bracketed label: [Verse 1]
HEADER_RE = re.compile(r"^\s*\[([^\[\]]+)\]\s*$")


def preprocess(text: str) -> list[str]:
    """Normalize line endings and split into lines.

    Parameters
    ----------
    text : str
        The raw input text.

    Returns
    -------
    list[str]
        Lines without their newline characters.
    """
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    return text.split("\n")


def parse_directive(line: str, number: int) -> DirectiveLine | None:
    """Parse a full-line directive.

    Examples
    --------
    >>> d = parse_directive("{ T : Amazing Grace }", 1)
    >>> d.name, d.value, d.raw_name
    ('title', 'Amazing Grace', 'T')
    >>> parse_directive("{title Amazing}", 1) is None
    True
    """
    match = DIRECTIVE_RE.match(line)
    if not match:
        return None
    raw_name, value = match.groups()
    return DirectiveLine(
        number=number,
        name=resolve_name(raw_name),
        value=value.strip() if value is not None else None,
        raw_name=raw_name,
        raw=line,
    )


def parse_section_header(line: str, number: int) -> SectionHeaderLine | None:
    """Parse a bracketed section header.

    A lone chord such as ``[Am]`` is never a header.

    Examples
    --------
    >>> parse_section_header("[Verse 1]", 4).kind
    'verse'
    >>> parse_section_header("[Am]", 4) is None
    True
    """
    match = HEADER_RE.match(line)
    if not match:
        return None
    label = match.group(1).strip()
    if parse_chord(label) is not None:
        return None
    kind = header_kind(label)
    if kind is None:
        return None
    return SectionHeaderLine(number=number, kind=kind, label=label, raw=line)


def parse_line(line: str, number: int) -> NotationLine:
    """Classify and parse one source line."""
    stripped = line.strip()
    if not stripped:
        return BlankLine(number=number, raw=line)
    if stripped.startswith("#"):
        return CommentLine(number=number, raw=line)

    if stripped.startswith("{"):
        directive = parse_directive(line, number)
        if directive is not None:
            return directive
        logger.debug("Line %d: malformed directive kept as lyric text", number)

    if stripped.startswith("["):
        header = parse_section_header(line, number)
        if header is not None:
            return header

    return LyricLine(number=number, pairs=split_line(line), raw=line)


def parse(text: str) -> SongModel:
    """Parse ChordPro text into a song model.

    Parameters
    ----------
    text : str
        Raw notation text. Any string is accepted.

    Returns
    -------
    SongModel
        Metadata (last occurrence of each key wins) and every line record.

    Examples
    --------
    >>> song = parse("{title: Amazing Grace}\\n{key: G}\\n\\n[Verse]\\n[G]Amazing [D]grace")
    >>> dict(song.metadata)
    {'title': 'Amazing Grace', 'key': 'G'}
    >>> [c.text for c in song.chords()]
    ['G', 'D']
    """
    raw_lines = preprocess(text)
    metadata: dict[str, str] = {}
    lines: list[NotationLine] = []

    for index, raw in enumerate(raw_lines, start=1):
        line = parse_line(raw, index)
        if (
            isinstance(line, DirectiveLine)
            and line.name in METADATA_KEYS
            and line.value is not None
        ):
            metadata[line.name] = line.value
        lines.append(line)

    return SongModel(metadata=metadata, lines=tuple(lines), source="\n".join(raw_lines))

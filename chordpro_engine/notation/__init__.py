"""ChordPro notation parsing, segmentation and validation.

This package turns raw ChordPro text into an immutable SongModel, groups
its lines into addressable sections that reassemble into the original
text, and reports line-numbered problems without blocking a parse.
"""

from chordpro_engine.notation.directives import DIRECTIVES, DirectiveSpec
from chordpro_engine.notation.models import (
    BlankLine,
    ChordAnnotation,
    ChordLyricPair,
    CommentLine,
    DirectiveLine,
    LyricLine,
    NotationLine,
    Section,
    SectionHeaderLine,
    SongModel,
)
from chordpro_engine.notation.parser import parse
from chordpro_engine.notation.segmenter import sections_to_text, segment
from chordpro_engine.notation.templates import generate_template
from chordpro_engine.notation.validator import (
    ValidationIssue,
    ValidationResult,
    validate,
)

__all__ = [
    "DIRECTIVES",
    "BlankLine",
    "ChordAnnotation",
    "ChordLyricPair",
    "CommentLine",
    "DirectiveLine",
    "DirectiveSpec",
    "LyricLine",
    "NotationLine",
    "Section",
    "SectionHeaderLine",
    "SongModel",
    "ValidationIssue",
    "ValidationResult",
    "generate_template",
    "parse",
    "sections_to_text",
    "segment",
    "validate",
]

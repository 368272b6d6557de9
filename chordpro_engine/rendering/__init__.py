"""Song rendering with a per-session formatter cache.

This package provides formatters for screen HTML, printable HTML, plain
text and ChordPro source, plus the bounded LRU cache that reuses formatter
instances across renders.
"""

from chordpro_engine.rendering.cache import CacheStats, FormatterCache
from chordpro_engine.rendering.formatters import (
    ChordProFormatter,
    Formatter,
    HtmlDivFormatter,
    HtmlTableFormatter,
    TextFormatter,
)
from chordpro_engine.rendering.options import FormatterOptions, OutputKind

__all__ = [
    "CacheStats",
    "ChordProFormatter",
    "Formatter",
    "FormatterCache",
    "FormatterOptions",
    "HtmlDivFormatter",
    "HtmlTableFormatter",
    "OutputKind",
    "TextFormatter",
]

"""Directive catalog.

Every directive the engine knows, with its abbreviations and the category
used to group it in autocomplete. The parser resolves aliases through this
table and the validator uses it to spot unknown names.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal

from chordpro_engine.notation.models import SectionKind

DirectiveCategory = Literal["metadata", "section", "formatting", "control"]


@dataclass(frozen=True)
class DirectiveSpec:
    """Description of one directive.

    Parameters
    ----------
    name : str
        Canonical name.
    category : DirectiveCategory
        Display group.
    description : str
        One-line help text.
    aliases : tuple[str, ...]
        Abbreviated spellings.
    requires_value : bool
        Whether the directive is meaningless without ``: value``.
    """

    name: str
    category: DirectiveCategory
    description: str
    aliases: tuple[str, ...] = ()
    requires_value: bool = False


METADATA_KEYS: tuple[str, ...] = (
    "title",
    "subtitle",
    "artist",
    "composer",
    "lyricist",
    "copyright",
    "album",
    "year",
    "key",
    "time",
    "tempo",
    "duration",
    "capo",
)

_METADATA_HELP = {
    "title": ("Song title", ("t",)),
    "subtitle": ("Song subtitle", ("st",)),
    "artist": ("Performing artist", ()),
    "composer": ("Composer", ()),
    "lyricist": ("Lyricist", ()),
    "copyright": ("Copyright notice", ()),
    "album": ("Album", ()),
    "year": ("Year of release", ()),
    "key": ("Song key", ()),
    "time": ("Time signature", ()),
    "tempo": ("Tempo in BPM", ()),
    "duration": ("Song duration", ()),
    "capo": ("Capo position", ()),
}

# Environment directives: name -> (abbreviation suffix, section kind)
SECTION_ENVIRONMENTS: dict[str, tuple[str | None, SectionKind]] = {
    "chorus": ("c", "chorus"),
    "verse": ("v", "verse"),
    "bridge": ("b", "bridge"),
    "tab": ("t", "custom"),
    "grid": ("g", "custom"),
    "intro": (None, "intro"),
    "outro": (None, "outro"),
}


def _build_catalog() -> tuple[DirectiveSpec, ...]:
    specs = [
        DirectiveSpec(
            name=name,
            category="metadata",
            description=help_text,
            aliases=aliases,
            requires_value=True,
        )
        for name, (help_text, aliases) in _METADATA_HELP.items()
    ]

    for env, (abbrev, _kind) in SECTION_ENVIRONMENTS.items():
        specs.append(
            DirectiveSpec(
                name=f"start_of_{env}",
                category="section",
                description=f"Start {env} section",
                aliases=(f"so{abbrev}",) if abbrev else (),
            )
        )
        specs.append(
            DirectiveSpec(
                name=f"end_of_{env}",
                category="section",
                description=f"End {env} section",
                aliases=(f"eo{abbrev}",) if abbrev else (),
            )
        )
    specs.append(DirectiveSpec("chorus", "section", "Repeat the chorus"))

    specs.extend(
        [
            DirectiveSpec("comment", "formatting", "Comment", ("c",), True),
            DirectiveSpec("comment_italic", "formatting", "Italic comment", ("ci",), True),
            DirectiveSpec("comment_box", "formatting", "Boxed comment", ("cb",), True),
            DirectiveSpec("highlight", "formatting", "Highlighted comment", (), True),
            DirectiveSpec("textfont", "formatting", "Lyrics font", (), True),
            DirectiveSpec("textsize", "formatting", "Lyrics font size", (), True),
            DirectiveSpec("textcolour", "formatting", "Lyrics colour", (), True),
            DirectiveSpec("chordfont", "formatting", "Chord font", (), True),
            DirectiveSpec("chordsize", "formatting", "Chord font size", (), True),
            DirectiveSpec("chordcolour", "formatting", "Chord colour", (), True),
            DirectiveSpec("new_page", "control", "Start a new page", ("np",)),
            DirectiveSpec("new_song", "control", "Start a new song", ("ns",)),
            DirectiveSpec("column_break", "control", "Break to next column", ("colb",)),
            DirectiveSpec("columns", "control", "Number of columns", ("col",), True),
            DirectiveSpec("define", "control", "Define a chord fingering", (), True),
            DirectiveSpec("transpose", "control", "Transpose following chords", (), True),
        ]
    )
    return tuple(specs)


DIRECTIVES: tuple[DirectiveSpec, ...] = _build_catalog()
DIRECTIVES_BY_NAME: dict[str, DirectiveSpec] = {spec.name: spec for spec in DIRECTIVES}
ALIASES: dict[str, str] = {
    alias: spec.name for spec in DIRECTIVES for alias in spec.aliases
}

# Bracketed header words and the section kind each one opens
SECTION_WORDS: dict[str, SectionKind] = {
    "verse": "verse",
    "chorus": "chorus",
    "refrain": "chorus",
    "bridge": "bridge",
    "intro": "intro",
    "outro": "outro",
    "ending": "outro",
    "pre-chorus": "custom",
    "prechorus": "custom",
    "tag": "custom",
    "interlude": "custom",
    "instrumental": "custom",
    "solo": "custom",
}

HEADER_WORD_RE = re.compile(r"^([a-z]+(?:-[a-z]+)?)")


def resolve_name(name: str) -> str:
    """Map a directive name to its canonical lowercase form.

    Examples
    --------
    >>> resolve_name("SOC")
    'start_of_chorus'
    >>> resolve_name(" Title ")
    'title'
    """
    lowered = name.strip().lower()
    return ALIASES.get(lowered, lowered)


def is_known(name: str) -> bool:
    """Check whether a canonical name is in the catalog.

    Names prefixed with ``x_`` are custom extensions and always accepted.
    """
    return name in DIRECTIVES_BY_NAME or name.startswith("x_")


def environment_kind(env: str) -> SectionKind:
    """Section kind for a ``start_of_<env>`` environment."""
    if env in SECTION_ENVIRONMENTS:
        return SECTION_ENVIRONMENTS[env][1]
    return "custom"


def header_kind(label: str) -> SectionKind | None:
    """Section kind for a bracketed header label, None if not a header word.

    Examples
    --------
    >>> header_kind("Verse 2")
    'verse'
    >>> header_kind("Pre-Chorus")
    'custom'
    >>> header_kind("Amazing") is None
    True
    """
    match = HEADER_WORD_RE.match(label.strip().lower())
    if not match:
        return None
    return SECTION_WORDS.get(match.group(1))

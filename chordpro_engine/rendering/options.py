"""Output kinds and formatter options.

Options form a closed record with a fixed set of fields so that cache keys
are deterministic: two option sets that render the same output always
serialize to the same JSON.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import asdict, dataclass, fields
from enum import Enum
from typing import Any

from chordpro_engine.errors import ContractError


class OutputKind(str, Enum):
    """Target representation of a rendered song."""

    RESPONSIVE = "responsive"
    PRINT = "print"
    TEXT = "text"
    CHORDPRO = "chordpro"

    @classmethod
    def coerce(cls, value: OutputKind | str) -> OutputKind:
        """Convert a kind name to an OutputKind.

        Raises
        ------
        ContractError
            If the name is not a known output kind.

        Examples
        --------
        >>> OutputKind.coerce("print")
        <OutputKind.PRINT: 'print'>
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            known = ", ".join(kind.value for kind in cls)
            msg = f"Unknown output kind: {value!r} (expected one of {known})"
            raise ContractError(msg) from None


# Display contexts and the output kind each one renders with
CONTEXT_KINDS: dict[str, OutputKind] = {
    "preview": OutputKind.RESPONSIVE,
    "viewer": OutputKind.RESPONSIVE,
    "stage": OutputKind.RESPONSIVE,
    "print": OutputKind.PRINT,
    "export": OutputKind.TEXT,
}

# camelCase spellings accepted by from_mapping
OPTION_ALIASES: dict[str, str] = {
    "showDiagrams": "show_diagrams",
    "cssPrefix": "css_prefix",
    "useFlats": "use_flats",
}


@dataclass(frozen=True)
class FormatterOptions:
    """Rendering options shared by every formatter.

    Parameters
    ----------
    show_diagrams : bool
        Append a chord legend to HTML output.
    css_prefix : str
        Prefix for every CSS class in HTML output.
    transpose : int
        Semitone offset applied to every chord before rendering.
    use_flats : bool
        Force flat spelling of transposed chords.

    Raises
    ------
    ContractError
        If a field has the wrong type.
    """

    show_diagrams: bool = False
    css_prefix: str = ""
    transpose: int = 0
    use_flats: bool = False

    def __post_init__(self) -> None:
        for name in ("show_diagrams", "use_flats"):
            if not isinstance(getattr(self, name), bool):
                msg = f"Option {name} must be a bool, got {getattr(self, name)!r}"
                raise ContractError(msg)
        if not isinstance(self.css_prefix, str):
            msg = f"Option css_prefix must be a str, got {self.css_prefix!r}"
            raise ContractError(msg)
        if isinstance(self.transpose, bool) or not isinstance(self.transpose, int):
            msg = f"Option transpose must be an int, got {self.transpose!r}"
            raise ContractError(msg)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any] | None = None) -> FormatterOptions:
        """Build options from a snake_case or camelCase mapping.

        Parameters
        ----------
        mapping : Mapping[str, Any] | None
            Option values; missing keys take their defaults.

        Returns
        -------
        FormatterOptions
            The normalized options.

        Raises
        ------
        ContractError
            If the mapping holds an unknown key.

        Examples
        --------
        >>> FormatterOptions.from_mapping({"showDiagrams": True}).show_diagrams
        True
        """
        if not mapping:
            return cls()
        allowed = {field.name for field in fields(cls)}
        values: dict[str, Any] = {}
        for key, value in mapping.items():
            name = OPTION_ALIASES.get(key, key)
            if name not in allowed:
                msg = f"Unknown formatter option: {key!r}"
                raise ContractError(msg)
            values[name] = value
        return cls(**values)

    @classmethod
    def coerce(
        cls, options: FormatterOptions | Mapping[str, Any] | None
    ) -> FormatterOptions:
        """Accept an options record, a mapping or None."""
        if isinstance(options, cls):
            return options
        return cls.from_mapping(options)

    def to_json(self) -> str:
        """Stable JSON serialization with sorted keys.

        Examples
        --------
        >>> FormatterOptions().to_json()
        '{"css_prefix": "", "show_diagrams": false, "transpose": 0, "use_flats": false}'
        """
        return json.dumps(asdict(self), sort_keys=True)

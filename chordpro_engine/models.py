"""Chord symbol data model.

A chord symbol stores pitch classes rather than note names, so enharmonic
spelling is a rendering decision and never part of the chord's identity.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ChordSymbol:
    """A parsed chord symbol.

    Parameters
    ----------
    root : int
        Root pitch class (0-11, where C=0).
    suffix : str
        Quality/extension suffix exactly as written (e.g., "m7", "sus4").
    bass : int | None
        Bass pitch class for slash chords, None otherwise.

    Examples
    --------
    >>> chord = ChordSymbol(root=10, suffix="m7")
    >>> chord.spell()
    'A#m7'
    >>> chord.spell(use_flats=True)
    'Bbm7'
    >>> str(ChordSymbol(root=7, bass=11))
    'G/B'
    """

    root: int
    suffix: str = ""
    bass: int | None = None

    def __post_init__(self) -> None:
        # Normalize to the chromatic ring so equality is on pitch classes
        object.__setattr__(self, "root", self.root % 12)
        if self.bass is not None:
            object.__setattr__(self, "bass", self.bass % 12)

    @property
    def is_minor(self) -> bool:
        """True when the suffix marks a minor chord."""
        return self.suffix.startswith(("m", "min")) and not self.suffix.startswith(
            "maj"
        )

    def spell(self, use_flats: bool = False) -> str:
        """Render the chord with the sharp or flat chromatic table.

        Parameters
        ----------
        use_flats : bool
            Spell black-key roots and basses with flats.

        Returns
        -------
        str
            Chord name (e.g., "Bbm7/F").
        """
        from chordpro_engine.theory import pc_to_note

        result = f"{pc_to_note(self.root, use_flats)}{self.suffix}"
        if self.bass is not None:
            result = f"{result}/{pc_to_note(self.bass, use_flats)}"
        return result

    def __str__(self) -> str:
        """Return the sharp spelling as default string representation."""
        return self.spell()

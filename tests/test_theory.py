"""Tests for pitch-class tables and theory helpers."""

import pytest

from chordpro_engine import ChordSymbol
from chordpro_engine.theory import (
    chord_notes,
    diatonic_chords,
    format_key,
    note_to_pc,
    pc_to_note,
    prefers_flats,
    split_key,
)


class TestPitchClasses:
    """Test note name and pitch class conversion."""

    @pytest.mark.parametrize(
        ("note", "pc"),
        [("C", 0), ("C#", 1), ("Db", 1), ("E#", 5), ("Fb", 4), ("B", 11), ("Cb", 11)],
    )
    def test_note_to_pc(self, note: str, pc: int) -> None:
        """Test enharmonic spellings map to one pitch class."""
        assert note_to_pc(note) == pc

    def test_unknown_note_raises(self) -> None:
        """Test unknown notes raise ValueError."""
        with pytest.raises(ValueError, match="Unknown note"):
            note_to_pc("H")

    def test_pc_to_note_wraps(self) -> None:
        """Test pitch classes outside 0-11 wrap around."""
        assert pc_to_note(13) == "C#"
        assert pc_to_note(-2, use_flats=True) == "Bb"


class TestKeys:
    """Test key parsing and spelling policy."""

    @pytest.mark.parametrize(
        ("key", "expected"),
        [
            ("G", (7, False)),
            ("Am", (9, True)),
            ("F#m", (6, True)),
            ("Bb major", (10, False)),
            ("c minor", (0, True)),
            ("DM", (2, False)),
            ("ab", (8, False)),
        ],
    )
    def test_split_key(self, key: str, expected: tuple[int, bool]) -> None:
        """Test tonic and mode extraction."""
        assert split_key(key) == expected

    @pytest.mark.parametrize("key", ["", "H", "Gdorian", "[G]"])
    def test_split_key_rejects(self, key: str) -> None:
        """Test unrecognized keys."""
        assert split_key(key) is None

    @pytest.mark.parametrize(
        ("key", "expected"),
        [
            ("F", True),
            ("Bb", True),
            ("Dm", True),
            ("Gm", True),
            ("Gb", True),
            ("G", False),
            ("Em", False),
            (None, False),
        ],
    )
    def test_prefers_flats(self, key: str | None, expected: bool) -> None:
        """Test the flat-key convention."""
        assert prefers_flats(key) is expected

    def test_format_key(self) -> None:
        """Test key spelling from pitch class."""
        assert format_key(10, False) == "Bb"
        assert format_key(10, True) == "Bbm"
        assert format_key(6, True) == "F#m"
        assert format_key(3, False, use_flats=False) == "D#"


class TestDiatonicChords:
    """Test diatonic triads."""

    def test_major_key(self) -> None:
        """Test a sharp major key."""
        assert diatonic_chords("D") == ("D", "Em", "F#m", "G", "A", "Bm", "C#dim")

    def test_flat_major_key(self) -> None:
        """Test a flat major key."""
        assert diatonic_chords("F") == ("F", "Gm", "Am", "Bb", "C", "Dm", "Edim")

    def test_minor_key(self) -> None:
        """Test a natural-minor key."""
        assert diatonic_chords("Am") == ("Am", "Bdim", "C", "Dm", "Em", "F", "G")

    def test_unknown_key(self) -> None:
        """Test unrecognized keys give no chords."""
        assert diatonic_chords("xyz") == ()


class TestComponentsAndSpelling:
    """Test pychord-backed helpers and chord spelling."""

    def test_chord_notes(self) -> None:
        """Test component lookup through pychord."""
        assert chord_notes("C") == ("C", "E", "G")
        assert chord_notes("Am7") == ("A", "C", "E", "G")

    def test_chord_notes_unknown(self) -> None:
        """Test pychord rejections give an empty tuple."""
        assert chord_notes("Hm") == ()

    def test_spelling(self) -> None:
        """Test sharp and flat spelling of one symbol."""
        chord = ChordSymbol(root=1, suffix="m", bass=8)
        assert chord.spell() == "C#m/G#"
        assert chord.spell(use_flats=True) == "Dbm/Ab"
        assert str(chord) == "C#m/G#"

"""Tests for validation and starter templates."""

import pytest

from chordpro_engine import generate_template, parse, segment, validate
from chordpro_engine.notation.validator import check_line

HEADER = "{title: T}\n{key: C}\n"


def codes(issues) -> list[str]:
    return [issue.code for issue in issues]


class TestLineChecks:
    """Test per-line bracket and brace checks."""

    def test_unclosed_brace(self) -> None:
        """Test an open brace reports its column."""
        issues = check_line("x {title: X", 4)
        assert codes(issues) == ["unclosed-brace"]
        assert (issues[0].line, issues[0].column) == (4, 3)
        assert issues[0].severity == "error"

    def test_extra_bracket(self) -> None:
        """Test a stray closing bracket."""
        issues = check_line("la]", 1)
        assert codes(issues) == ["extra-bracket"]
        assert issues[0].column == 3

    def test_empty_chord(self) -> None:
        """Test empty brackets are an error."""
        assert codes(check_line("[]la [ ]lo", 1)) == ["empty-chord", "empty-chord"]

    @pytest.mark.parametrize("line", ["[G]la [D]lo", "{title: X}", "plain text", ""])
    def test_clean_lines(self, line: str) -> None:
        """Test balanced lines have no issues."""
        assert check_line(line, 1) == []


class TestValidate:
    """Test whole-document validation."""

    def test_example_is_clean(self, amazing_grace: str) -> None:
        """Test the reference example has no issues."""
        result = validate(amazing_grace)
        assert result.is_valid
        assert result.errors == ()
        assert result.warnings == ()

    def test_full_song_is_clean(self, full_song: str) -> None:
        """Test a song with balanced sections and known chords."""
        result = validate(full_song)
        assert result.is_valid
        assert result.warnings == ()

    def test_missing_colon(self) -> None:
        """Test a valued directive without a colon is an error."""
        result = validate(HEADER + "{subtitle Live}")
        assert not result.is_valid
        assert codes(result.errors) == ["missing-colon"]
        assert result.errors[0].line == 3

    def test_valueless_directive_needs_no_colon(self) -> None:
        """Test section markers are fine without a value."""
        assert validate(HEADER + "{soc}\n[C]la\n{eoc}").errors == ()

    def test_missing_metadata(self) -> None:
        """Test missing title and key are document-level warnings."""
        result = validate("[G]la")
        assert result.is_valid
        assert codes(result.warnings) == ["missing-title", "missing-key"]
        assert all(issue.line is None for issue in result.warnings)

    def test_unknown_directive(self) -> None:
        """Test unknown directives warn and custom ones do not."""
        result = validate(HEADER + "{flavour: mint}\n{x_flavour: mint}")
        assert codes(result.warnings) == ["unknown-directive"]
        assert result.warnings[0].line == 3

    def test_unknown_chord(self) -> None:
        """Test chords outside the grammar warn at their column."""
        result = validate(HEADER + "la [H]lo")
        assert result.is_valid
        assert codes(result.warnings) == ["unknown-chord"]
        assert (result.warnings[0].line, result.warnings[0].column) == (3, 4)

    def test_unclosed_section(self) -> None:
        """Test a start marker with no end."""
        result = validate(HEADER + "{start_of_chorus}\n[C]la")
        assert codes(result.warnings) == ["unclosed-section"]
        assert result.warnings[0].line == 3

    def test_unmatched_end(self) -> None:
        """Test an end marker with no start."""
        result = validate(HEADER + "[C]la\n{eoc}")
        assert codes(result.warnings) == ["unmatched-end"]
        assert result.warnings[0].line == 4

    def test_mismatched_pair(self) -> None:
        """Test an end marker closing a different environment."""
        result = validate(HEADER + "{sov}\n[C]la\n{eoc}")
        assert sorted(codes(result.warnings)) == ["unclosed-section", "unmatched-end"]

    def test_new_start_closes_previous(self) -> None:
        """Test a second start before an end warns about the first."""
        result = validate(HEADER + "{sov}\nla\n{soc}\nlo\n{eoc}")
        assert codes(result.warnings) == ["unclosed-section"]
        assert result.warnings[0].line == 3

    def test_issues_sorted_by_line(self) -> None:
        """Test the combined view puts document issues first."""
        result = validate("la]\n{soc}")
        lines = [issue.line for issue in result.issues]
        assert lines[:2] == [None, None]
        assert lines[2:] == sorted(lines[2:])

    def test_crlf_line_numbers(self) -> None:
        """Test line numbers count normalized lines."""
        result = validate("{title: T}\r\n{key: C}\r\n[]x")
        assert result.errors[0].line == 3

    @pytest.mark.parametrize("text", ["", "{", "}}}", "[[[", "{title: [G}", "\x00"])
    def test_never_raises(self, text: str) -> None:
        """Test garbled text gives a result."""
        assert validate(text).is_valid in (True, False)


class TestTemplates:
    """Test starter song generation."""

    def test_default_template(self) -> None:
        """Test defaults produce a clean song in C."""
        text = generate_template()
        song = parse(text)
        assert song.title == "Untitled Song"
        assert song.key == "C"
        assert [chord.text for chord in song.chords()][:4] == ["C", "F", "G", "Am"]
        result = validate(text)
        assert result.is_valid
        assert result.warnings == ()

    def test_metadata_order(self) -> None:
        """Test optional directives follow title and key."""
        lines = generate_template("Demo", "F", subtitle="Sub", tempo=90, time="3/4").splitlines()
        assert lines[:5] == [
            "{title: Demo}",
            "{subtitle: Sub}",
            "{key: F}",
            "{tempo: 90}",
            "{time: 3/4}",
        ]

    def test_flat_key_chords(self) -> None:
        """Test chords are spelled by the key's convention."""
        chords = [chord.text for chord in parse(generate_template(key="F")).chords()]
        assert chords[:4] == ["F", "Bb", "C", "Dm"]

    def test_minor_key(self) -> None:
        """Test a minor key uses its own diatonic triads."""
        chords = [chord.text for chord in parse(generate_template(key="Am")).chords()]
        assert chords[:4] == ["Am", "Dm", "Em", "F"]

    def test_unknown_key_falls_back(self) -> None:
        """Test unrecognized keys use C."""
        assert parse(generate_template(key="Q")).key == "C"

    def test_sections(self) -> None:
        """Test the template segments into verse, chorus and verse."""
        ids = [section.id for section in segment(parse(generate_template()))]
        assert ids == ["verse-1", "chorus-1", "verse-2"]

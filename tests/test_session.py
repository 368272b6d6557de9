"""Tests for the per-document editing session."""

from chordpro_engine import EditorContext, EditorSession


class TestEditorSession:
    """Test the session facade over history, parsing and rendering."""

    def test_edit_and_undo(self, session: EditorSession) -> None:
        """Test commands run through the session history."""
        result = session.execute("insert-text", EditorContext.at("", 0), text="{title: Hi}")
        assert result.text == "{title: Hi}"
        assert session.undo(result.context).text == ""
        assert session.redo(EditorContext.at("", 0)).text == "{title: Hi}"

    def test_parse_is_memoized(self, session: EditorSession, amazing_grace: str) -> None:
        """Test parsing unchanged text returns the same model."""
        first = session.parse(amazing_grace)
        assert session.parse(amazing_grace) is first
        assert session.parse(amazing_grace + "\n") is not first

    def test_render_reuses_formatters(self, session: EditorSession, amazing_grace: str) -> None:
        """Test repeated renders share one cached formatter."""
        first = session.render(amazing_grace, "text", {"transpose": 2})
        second = session.render(amazing_grace, "text", {"transpose": 2})
        assert first == second
        assert "A       E" in first
        stats = session.formatters.stats()
        assert (stats.size, stats.hits, stats.misses) == (1, 1, 1)

    def test_render_default_kind(self, session: EditorSession, amazing_grace: str) -> None:
        """Test the default output is screen HTML."""
        assert session.render(session.parse(amazing_grace)).startswith("<div")

    def test_segment_and_validate(self, session: EditorSession, full_song: str) -> None:
        """Test segmentation and validation of a buffer."""
        assert [s.id for s in session.segment(full_song)] == [
            "verse-1",
            "chorus-1",
            "bridge-1",
        ]
        assert session.validate(full_song).is_valid

    def test_autocomplete_uses_parsed_key(self, session: EditorSession) -> None:
        """Test chord suggestions follow the last parsed key."""
        text = "{key: F}\n["
        session.parse(text)
        assert session.detect_autocomplete(text, len(text)) is not None
        assert session.autocomplete.selected.value == "F"

    def test_autocomplete_explicit_key(self, session: EditorSession) -> None:
        """Test an explicit key wins and no key falls back to common chords."""
        session.detect_autocomplete("[", 1, key="D")
        assert session.autocomplete.selected.value == "D"
        session.detect_autocomplete("[", 1)
        assert session.autocomplete.selected.value == "C"

    def test_autocomplete_closes(self, session: EditorSession) -> None:
        """Test leaving the token closes the list."""
        session.detect_autocomplete("{tit", 4)
        assert session.autocomplete.is_open
        assert session.detect_autocomplete("{title}", 7) is None
        assert not session.autocomplete.is_open

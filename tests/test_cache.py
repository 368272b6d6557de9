"""Tests for the formatter LRU cache."""

import pytest

from chordpro_engine import ContractError, FormatterCache, FormatterOptions, parse
from chordpro_engine.rendering import (
    ChordProFormatter,
    HtmlDivFormatter,
    HtmlTableFormatter,
    TextFormatter,
)


class TestFormatterCache:
    """Test formatter reuse and eviction."""

    def test_same_options_same_instance(self) -> None:
        """Test equal kind and options return one formatter."""
        cache = FormatterCache()
        first = cache.get_formatter("responsive", {"css_prefix": "x-"})
        assert cache.get_formatter("responsive", {"css_prefix": "x-"}) is first
        assert cache.stats().hits == 1
        assert cache.stats().misses == 1

    def test_option_order_and_spelling(self) -> None:
        """Test key order and camelCase do not cause misses."""
        cache = FormatterCache()
        first = cache.get_formatter("print", {"transpose": 2, "showDiagrams": True})
        second = cache.get_formatter("print", {"show_diagrams": True, "transpose": 2})
        assert second is first
        assert len(cache) == 1

    def test_defaults_share_an_entry(self) -> None:
        """Test omitted, empty and default options are one entry."""
        cache = FormatterCache()
        first = cache.get_formatter("text")
        assert cache.get_formatter("text", {}) is first
        assert cache.get_formatter("text", FormatterOptions()) is first

    def test_transpose_is_part_of_the_key(self) -> None:
        """Test differing transpose offsets get separate formatters."""
        cache = FormatterCache()
        up = cache.get_formatter("text", {"transpose": 2})
        down = cache.get_formatter("text", {"transpose": -2})
        assert up is not down
        assert len(cache) == 2

    @pytest.mark.parametrize(
        ("kind", "formatter_class"),
        [
            ("responsive", HtmlDivFormatter),
            ("print", HtmlTableFormatter),
            ("text", TextFormatter),
            ("chordpro", ChordProFormatter),
        ],
    )
    def test_kinds(self, kind: str, formatter_class: type) -> None:
        """Test each output kind builds its formatter."""
        assert type(FormatterCache().get_formatter(kind)) is formatter_class

    def test_lru_eviction(self) -> None:
        """Test the least recently used entry is dropped at capacity."""
        cache = FormatterCache(capacity=3)
        first = cache.get_formatter("text", {"transpose": 0})
        cache.get_formatter("text", {"transpose": 1})
        cache.get_formatter("text", {"transpose": 2})
        # Touch the oldest so transpose=1 becomes least recent
        assert cache.get_formatter("text", {"transpose": 0}) is first
        cache.get_formatter("text", {"transpose": 3})

        stats = cache.stats()
        assert stats.size == 3
        assert stats.evictions == 1
        assert [key.split('"transpose": ')[1][0] for key in stats.keys] == ["2", "0", "3"]

    def test_default_capacity(self) -> None:
        """Test the cache never grows past ten entries."""
        cache = FormatterCache()
        for semitones in range(15):
            cache.get_formatter("text", {"transpose": semitones})
        assert len(cache) == 10
        assert cache.stats().evictions == 5

    def test_format(self, amazing_grace: str) -> None:
        """Test rendering through the cache."""
        cache = FormatterCache()
        output = cache.format(parse(amazing_grace), "text", {"transpose": 2})
        assert "A       E" in output

    @pytest.mark.parametrize(
        ("context", "formatter_class"),
        [
            ("preview", HtmlDivFormatter),
            ("viewer", HtmlDivFormatter),
            ("stage", HtmlDivFormatter),
            ("print", HtmlTableFormatter),
            ("export", TextFormatter),
        ],
    )
    def test_contexts(self, context: str, formatter_class: type) -> None:
        """Test display contexts choose the output kind."""
        formatter = FormatterCache().formatter_for_context(context)
        assert type(formatter) is formatter_class

    def test_contexts_share_entries(self) -> None:
        """Test screen contexts reuse one responsive formatter."""
        cache = FormatterCache()
        assert cache.formatter_for_context("preview") is cache.formatter_for_context("stage")

    @pytest.mark.parametrize(
        "call",
        [
            lambda cache: cache.get_formatter("pdf"),
            lambda cache: cache.get_formatter("text", {"fontSize": 12}),
            lambda cache: cache.formatter_for_context("karaoke"),
        ],
    )
    def test_contract_errors(self, call) -> None:
        """Test unknown kinds, options and contexts raise."""
        cache = FormatterCache()
        with pytest.raises(ContractError):
            call(cache)
        assert len(cache) == 0

    def test_invalid_capacity(self) -> None:
        """Test capacity must be positive."""
        with pytest.raises(ContractError):
            FormatterCache(capacity=0)

    def test_clear(self) -> None:
        """Test clearing empties entries and counters."""
        cache = FormatterCache()
        first = cache.get_formatter("text")
        cache.get_formatter("text")
        cache.clear()
        stats = cache.stats()
        assert (stats.size, stats.hits, stats.misses, stats.evictions) == (0, 0, 0, 0)
        assert cache.get_formatter("text") is not first

    def test_cache_key(self) -> None:
        """Test the key joins the kind and sorted option JSON."""
        key = FormatterCache.cache_key("print", {"useFlats": True})
        assert key == (
            'print-{"css_prefix": "", "show_diagrams": false, '
            '"transpose": 0, "use_flats": true}'
        )

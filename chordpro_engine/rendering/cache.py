"""Bounded LRU cache of formatter instances.

A cache belongs to one editing session. Formatters are keyed by output
kind plus the sorted JSON of their options, so option order never causes
a miss and any differing option (the transpose offset included) gets its
own entry.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from chordpro_engine.errors import ContractError
from chordpro_engine.notation.models import SongModel
from chordpro_engine.rendering.formatters import FORMATTERS, Formatter
from chordpro_engine.rendering.options import CONTEXT_KINDS, FormatterOptions, OutputKind

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 10

OptionsLike = FormatterOptions | Mapping[str, Any] | None


@dataclass(frozen=True)
class CacheStats:
    """Snapshot of cache usage.

    Parameters
    ----------
    size : int
        Number of cached formatters.
    capacity : int
        Maximum number of entries.
    hits : int
        Lookups served from the cache.
    misses : int
        Lookups that built a new formatter.
    evictions : int
        Entries dropped to make room.
    keys : tuple[str, ...]
        Cache keys from least to most recently used.
    """

    size: int
    capacity: int
    hits: int
    misses: int
    evictions: int
    keys: tuple[str, ...]


class FormatterCache:
    """LRU cache mapping (kind, options) to formatter instances.

    Parameters
    ----------
    capacity : int
        Maximum number of cached formatters (at least 1).

    Raises
    ------
    ContractError
        If capacity is below 1.

    Examples
    --------
    >>> cache = FormatterCache()
    >>> first = cache.get_formatter("responsive", {"showDiagrams": True})
    >>> cache.get_formatter("responsive", {"show_diagrams": True}) is first
    True
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 1:
            msg = f"Cache capacity must be at least 1, got {capacity}"
            raise ContractError(msg)
        self.capacity = capacity
        self._entries: OrderedDict[str, Formatter] = OrderedDict()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    def __len__(self) -> int:
        return len(self._entries)

    @staticmethod
    def cache_key(kind: OutputKind | str, options: OptionsLike = None) -> str:
        """Build the cache key for a kind and options.

        Examples
        --------
        >>> FormatterCache.cache_key("text", {"transpose": 2})
        'text-{"css_prefix": "", "show_diagrams": false, "transpose": 2, "use_flats": false}'
        """
        output_kind = OutputKind.coerce(kind)
        return f"{output_kind.value}-{FormatterOptions.coerce(options).to_json()}"

    def get_formatter(self, kind: OutputKind | str, options: OptionsLike = None) -> Formatter:
        """Return the cached formatter for a kind and options, building it if needed.

        Parameters
        ----------
        kind : OutputKind | str
            Output kind.
        options : FormatterOptions | Mapping[str, Any] | None
            Rendering options.

        Returns
        -------
        Formatter
            The same instance for every call with equal kind and options
            while the entry stays cached.

        Raises
        ------
        ContractError
            If the kind or an option key is unknown.
        """
        output_kind = OutputKind.coerce(kind)
        normalized = FormatterOptions.coerce(options)
        key = self.cache_key(output_kind, normalized)

        formatter = self._entries.get(key)
        if formatter is not None:
            self._entries.move_to_end(key)
            self._hits += 1
            logger.debug("Formatter cache hit: %s", key)
            return formatter

        self._misses += 1
        if len(self._entries) >= self.capacity:
            evicted, _ = self._entries.popitem(last=False)
            self._evictions += 1
            logger.debug("Formatter cache evicted: %s", evicted)

        formatter = FORMATTERS[output_kind](normalized)
        self._entries[key] = formatter
        logger.debug("Formatter cache miss: %s", key)
        return formatter

    def format(
        self, model: SongModel, kind: OutputKind | str, options: OptionsLike = None
    ) -> str:
        """Render a song with the cached formatter for a kind and options."""
        return self.get_formatter(kind, options).format(model)

    def formatter_for_context(self, context: str, options: OptionsLike = None) -> Formatter:
        """Return the formatter for a display context.

        Contexts are ``preview``, ``viewer`` and ``stage`` (screen HTML),
        ``print`` (table HTML) and ``export`` (plain text).

        Raises
        ------
        ContractError
            If the context is unknown.
        """
        if context not in CONTEXT_KINDS:
            msg = f"Unknown display context: {context!r}"
            raise ContractError(msg)
        return self.get_formatter(CONTEXT_KINDS[context], options)

    def clear(self) -> None:
        """Drop every cached formatter and reset the counters."""
        self._entries.clear()
        self._hits = self._misses = self._evictions = 0

    def stats(self) -> CacheStats:
        return CacheStats(
            size=len(self._entries),
            capacity=self.capacity,
            hits=self._hits,
            misses=self._misses,
            evictions=self._evictions,
            keys=tuple(self._entries),
        )

"""Undo/redo history for editor commands.

The history stores whole editor contexts rather than inverse operations:
undo swaps the caller's current context with the most recent snapshot.
Keystroke commands are coalesced so that a burst of typing becomes a
single undo step; structural commands are always recorded.
"""

from __future__ import annotations

import logging
import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from chordpro_engine.editing.commands import Command, create_command
from chordpro_engine.editing.context import CommandResult, EditorContext
from chordpro_engine.errors import ContractError

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


@dataclass(frozen=True)
class HistoryConfig:
    """History limits and coalescing thresholds.

    Parameters
    ----------
    max_depth : int
        Maximum entries per stack; the oldest entry drops when full.
    debounce_seconds : float
        Minimum time between keystroke snapshots.
    min_char_delta : int
        A keystroke snapshot needs the buffer length to have changed by
        more than this many characters since the last snapshot.
    """

    max_depth: int = 50
    debounce_seconds: float = 1.0
    min_char_delta: int = 1

    def __post_init__(self) -> None:
        if self.max_depth < 1:
            msg = f"max_depth must be at least 1, got {self.max_depth}"
            raise ContractError(msg)
        if self.debounce_seconds < 0 or self.min_char_delta < 0:
            msg = "debounce_seconds and min_char_delta must not be negative"
            raise ContractError(msg)


@dataclass(frozen=True)
class HistoryInfo:
    """Snapshot of the history stacks."""

    undo_depth: int
    redo_depth: int
    max_depth: int
    last_snapshot_at: float | None


class CommandHistory:
    """Bounded undo/redo stacks of editor contexts.

    Parameters
    ----------
    config : HistoryConfig | None
        Limits and thresholds; defaults when omitted.
    clock : Callable[[], float]
        Monotonic time source in seconds.

    Examples
    --------
    >>> from chordpro_engine.editing.commands import InsertText
    >>> history = CommandHistory()
    >>> start = EditorContext.at("", 0)
    >>> result = history.execute(InsertText("[G]"), start)
    >>> history.undo(result.context).text
    ''
    """

    def __init__(
        self, config: HistoryConfig | None = None, clock: Clock = time.monotonic
    ) -> None:
        self.config = config or HistoryConfig()
        self._clock = clock
        self._undo: deque[EditorContext] = deque(maxlen=self.config.max_depth)
        self._redo: deque[EditorContext] = deque(maxlen=self.config.max_depth)
        self._last_snapshot: EditorContext | None = None
        self._last_snapshot_at: float | None = None

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    def execute(
        self, command: Command | str, context: EditorContext, **params: Any
    ) -> CommandResult:
        """Apply a command and record the pre-command context when due.

        Parameters
        ----------
        command : Command | str
            A command, or a registered command name built with ``params``.
            The names "undo" and "redo" run the history operations.
        context : EditorContext
            The caller's current buffer and selection.
        **params : Any
            Parameters for a command given by name.

        Returns
        -------
        CommandResult
            The new text and selection.

        Raises
        ------
        UnknownCommandError
            If a command name is not registered.
        """
        if command == "undo":
            return self.undo(context)
        if command == "redo":
            return self.redo(context)
        if isinstance(command, str):
            command = create_command(command, **params)

        after = command.apply(context)
        if after.text != context.text and self._should_snapshot(command, after):
            self._snapshot(context)
        return CommandResult.of(after)

    def _should_snapshot(self, command: Command, after: EditorContext) -> bool:
        if command.structural or self._last_snapshot is None:
            return True
        elapsed = self._clock() - (self._last_snapshot_at or 0.0)
        if elapsed < self.config.debounce_seconds:
            return False
        previous = self._last_snapshot.text
        if after.text == previous:
            return False
        return abs(len(after.text) - len(previous)) > self.config.min_char_delta

    def _snapshot(self, context: EditorContext) -> None:
        self._undo.append(context)
        self._redo.clear()
        self._last_snapshot = context
        self._last_snapshot_at = self._clock()
        logger.debug("History snapshot taken (undo depth %d)", len(self._undo))

    def undo(self, context: EditorContext) -> CommandResult:
        """Restore the most recent snapshot.

        The given context moves onto the redo stack. Fails without side
        effects when there is nothing to undo.
        """
        if not self._undo:
            return CommandResult.failure("Nothing to undo")
        previous = self._undo.pop()
        self._redo.append(context)
        # Next edit starts a fresh undo step
        self._last_snapshot = None
        return CommandResult.of(previous)

    def redo(self, context: EditorContext) -> CommandResult:
        """Re-apply the most recently undone state."""
        if not self._redo:
            return CommandResult.failure("Nothing to redo")
        following = self._redo.pop()
        self._undo.append(context)
        self._last_snapshot = None
        return CommandResult.of(following)

    def clear(self) -> None:
        """Forget all history."""
        self._undo.clear()
        self._redo.clear()
        self._last_snapshot = None
        self._last_snapshot_at = None

    def info(self) -> HistoryInfo:
        return HistoryInfo(
            undo_depth=len(self._undo),
            redo_depth=len(self._redo),
            max_depth=self.config.max_depth,
            last_snapshot_at=self._last_snapshot_at,
        )

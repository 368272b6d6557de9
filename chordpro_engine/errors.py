"""Exception hierarchy for chordpro-engine.

Notation problems in user text are never raised; they are reported as
validation data. Only caller-contract violations surface as exceptions.
"""

from __future__ import annotations


class ChordProError(Exception):
    """Base exception for all chordpro-engine errors."""


class ContractError(ChordProError, ValueError):
    """A caller passed arguments that break an operation's contract.

    Examples are a cursor offset outside the buffer, an unknown formatter
    option or an unknown output kind. Subclasses ``ValueError`` so generic
    ``except ValueError`` handlers keep working.
    """


class UnknownCommandError(ContractError):
    """The requested editor command name is not registered."""

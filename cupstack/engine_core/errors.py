"""
Engine errors.

Illegal player input is never an exception: resolvers return a
rejected result instead. These are raised only when a caller breaks
the engine's contract.
"""

from __future__ import annotations


class CupStackError(Exception):
    """Base class for engine errors."""


class EngineContractError(CupStackError):
    """Raised when the engine is called with arguments it cannot accept."""


class BoardValidationError(CupStackError):
    """Raised when a board snapshot violates the rule invariants."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(f"Board validation failed with {len(errors)} error(s)")


class ReplayError(CupStackError):
    """Raised when a recorded turn cannot be replayed."""

    def __init__(self, turn_number: int, reason: str):
        self.turn_number = turn_number
        self.reason = reason
        super().__init__(f"Replay failed at turn {turn_number}: {reason}")

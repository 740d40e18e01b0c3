"""Custom exception classes for the Ponte engine.

All of them signal contract violations by the caller (malformed input or a
broken upstream invariant). They also subclass ValueError so callers that
only care about bad input can catch that.
"""

from __future__ import annotations


class PonteError(Exception):
    """Base exception for all Ponte engine errors."""


class MalformedStateError(PonteError, ValueError):
    """Raised when team sequences do not partition 1..k exactly."""


class StrengthCollisionError(PonteError, ValueError):
    """Raised when a response pits two teams of equal strength."""

    def __init__(self, strength: int) -> None:
        self.strength = strength
        super().__init__(
            f"Both teams have strength {strength}; strengths must be distinct."
        )


class InvalidMoveError(PonteError, ValueError):
    """Raised when a move index is outside the legal range."""

    def __init__(self, move: int, num_moves: int) -> None:
        self.move = move
        self.num_moves = num_moves
        super().__init__(f"Invalid move {move}. Legal moves are 1..{num_moves}.")


__all__ = [
    "InvalidMoveError",
    "MalformedStateError",
    "PonteError",
    "StrengthCollisionError",
]

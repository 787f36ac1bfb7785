"""
Custom exceptions.

Every layer raises a subclass of BingoError, so the outer layers can catch a single type
and turn it into a user-facing rejection.
"""

from src.core.shared_types import GameStatus


class BingoError(Exception):
    """Top-level exception of the application."""


class InvalidRequestError(BingoError):
    """Request data could not be interpreted."""


class RepositoryError(BingoError):
    """Record could not be found / stored."""


class GameStateError(BingoError):
    """Operation not allowed given the lifecycle state of the game."""


class InvalidTransitionError(GameStateError):
    """Requested status change is not part of the transition table."""

    def __init__(self, current: GameStatus, target: GameStatus) -> None:
        self.current = current
        self.target = target
        super().__init__(f"Invalid status transition from {current} to {target}")


class InsufficientSongsError(GameStateError):
    """Not enough songs to fill a grid."""

    def __init__(self, required: int, actual: int) -> None:
        self.required = required
        self.actual = actual
        super().__init__(
            f"Not enough songs to open entry: {required} required, {actual} present"
        )


class IllegalPhaseError(GameStateError):
    """Operation attempted while the game is in the wrong status."""

    def __init__(self, operation: str, expected: GameStatus, actual: GameStatus) -> None:
        self.operation = operation
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Cannot {operation} while game is {actual}. Only allowed in {expected} status."
        )


class GridAssignmentError(BingoError):
    """Song assignments for a participant's grid are inconsistent."""


class ParticipantError(BingoError):
    """Participant cannot join / could not be found."""

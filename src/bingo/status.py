"""
Lifecycle of a bingo game.

EDITING  -> songs are added / replaced by the admin
ENTRY    -> participants join and fill their grid
PLAYING  -> the DJ marks songs as played, winners are determined
FINISHED -> game is over (can be resumed)
"""

import logging
from dataclasses import dataclass
from typing import Optional

from src.core.exceptions import (
    IllegalPhaseError,
    InsufficientSongsError,
    InvalidRequestError,
    InvalidTransitionError,
)
from src.core.shared_types import BingoSize, GameStatus, required_song_count

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: dict[GameStatus, tuple[GameStatus, ...]] = {
    GameStatus.EDITING: (GameStatus.ENTRY,),
    GameStatus.ENTRY: (GameStatus.EDITING, GameStatus.PLAYING),
    GameStatus.PLAYING: (GameStatus.ENTRY, GameStatus.FINISHED),
    GameStatus.FINISHED: (GameStatus.PLAYING,),
}


@dataclass(frozen=True)
class TransitionOptions:
    """
    What to keep when moving backwards through the lifecycle.

    preserve_played_songs: PLAYING -> ENTRY. False resets all songs and all wins.
    preserve_participants: ENTRY -> EDITING. False removes all participants and their grids.
    """

    preserve_played_songs: Optional[bool] = None
    preserve_participants: Optional[bool] = None


# Transitions that can destroy data, and the option that decides what happens to it
DESTRUCTIVE_TRANSITIONS: dict[tuple[GameStatus, GameStatus], str] = {
    (GameStatus.PLAYING, GameStatus.ENTRY): "preserve_played_songs",
    (GameStatus.ENTRY, GameStatus.EDITING): "preserve_participants",
}


def is_valid_transition(current: GameStatus, target: GameStatus) -> bool:
    """Only the edges in ALLOWED_TRANSITIONS are valid. Staying in the same status is not a transition."""
    return target in ALLOWED_TRANSITIONS[current]


def validate_transition(
    current: GameStatus,
    target: GameStatus,
    size: BingoSize,
    song_count: int,
    options: TransitionOptions,
) -> None:
    """Raise if the status change cannot be applied. Nothing is modified."""
    if not is_valid_transition(current, target):
        raise InvalidTransitionError(current, target)

    if target == GameStatus.ENTRY:
        required = required_song_count(size)
        if song_count < required:
            raise InsufficientSongsError(required=required, actual=song_count)

    option_name = DESTRUCTIVE_TRANSITIONS.get((current, target))
    if option_name is not None and getattr(options, option_name) is None:
        raise InvalidRequestError(
            f"Changing status from {current} to {target} requires {option_name!r} to be set."
        )


def require_status(actual: GameStatus, expected: GameStatus, operation: str) -> None:
    if actual != expected:
        logger.warning(
            "Rejected %r: game is %s, expected %s", operation, actual, expected
        )
        raise IllegalPhaseError(operation, expected=expected, actual=actual)

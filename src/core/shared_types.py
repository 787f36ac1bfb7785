"""
Type definitions used across layers
"""

from enum import StrEnum


class GameStatus(StrEnum):
    EDITING = "EDITING"
    ENTRY = "ENTRY"
    PLAYING = "PLAYING"
    FINISHED = "FINISHED"


class BingoSize(StrEnum):
    THREE_BY_THREE = "THREE_BY_THREE"
    FOUR_BY_FOUR = "FOUR_BY_FOUR"
    FIVE_BY_FIVE = "FIVE_BY_FIVE"


# Side length of the square grid for every size. Keep exhaustive: grid_size() does not fall back.
GRID_SIZES: dict[BingoSize, int] = {
    BingoSize.THREE_BY_THREE: 3,
    BingoSize.FOUR_BY_FOUR: 4,
    BingoSize.FIVE_BY_FIVE: 5,
}


def grid_size(size: BingoSize) -> int:
    """Number of rows (= number of columns) of a grid of the given size."""
    return GRID_SIZES[BingoSize(size)]


def required_song_count(size: BingoSize) -> int:
    """Minimum number of songs a game needs before participants can fill their grid."""
    return grid_size(size) ** 2

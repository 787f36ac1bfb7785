"""
Win detection on a square bingo grid.

A grid of side `grid_size` is flattened row by row: the cell in row `i`, column `j` lives at
position `i * grid_size + j`. Every cell is a played flag, or None for a cell without a song.
Empty cells count as "not played", so partially built grids can be evaluated without errors.
"""

from typing import Mapping, Optional, Sequence
from uuid import UUID

Cell = Optional[bool]


def position_of(row: int, column: int, grid_size: int) -> int:
    return row * grid_size + column


def _is_played(cells: Sequence[Cell], position: int) -> bool:
    """Missing / empty cells are treated as not played."""
    if position >= len(cells):
        return False
    return bool(cells[position])


def _line_is_played(cells: Sequence[Cell], positions: Sequence[int]) -> bool:
    return all(_is_played(cells, position) for position in positions)


def has_bingo(cells: Sequence[Cell], grid_size: int) -> bool:
    """
    True if at least one full row, column or diagonal has been played.

    Works for any positive grid size (the game itself only uses 3, 4 and 5).
    With grid_size 1 the single cell is a row, a column and both diagonals at once.
    """
    if grid_size < 1:
        return False

    # Rows
    for i in range(grid_size):
        if _line_is_played(
            cells, [position_of(i, j, grid_size) for j in range(grid_size)]
        ):
            return True

    # Columns
    for j in range(grid_size):
        if _line_is_played(
            cells, [position_of(i, j, grid_size) for i in range(grid_size)]
        ):
            return True

    # Diagonals
    main_diagonal = [position_of(i, i, grid_size) for i in range(grid_size)]
    anti_diagonal = [
        position_of(i, grid_size - 1 - i, grid_size) for i in range(grid_size)
    ]
    return _line_is_played(cells, main_diagonal) or _line_is_played(
        cells, anti_diagonal
    )


def build_played_cells(
    assignments: Mapping[int, UUID],
    played_by_song: Mapping[UUID, bool],
    grid_size: int,
) -> list[Cell]:
    """
    Flatten a participant's position -> song mapping into played flags.

    Positions without a song, and songs that no longer exist, become None.
    Positions outside of the grid are ignored.
    """
    cells: list[Cell] = [None] * (grid_size * grid_size)
    for position, song_id in assignments.items():
        if not 0 <= position < len(cells):
            continue
        cells[position] = played_by_song.get(song_id)
    return cells


def is_complete_assignment(assignments: Mapping[int, UUID], grid_size: int) -> bool:
    """Every position of the grid has a song assigned."""
    return all(position in assignments for position in range(grid_size * grid_size))

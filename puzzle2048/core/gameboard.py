"""
Board manipulation for the 2048 game: the directional transform, tile spawning and game-over detection.
"""

import logging
from typing import Mapping, NamedTuple, Sequence

from numpy import all as np_all
from numpy import any as np_any
from numpy import argwhere, array, empty, int64, ndarray
from numpy.random import Generator

from puzzle2048.core.gamemove import Direction
from puzzle2048.core.tile import Tile

# ##>: Tile spawn probabilities (90% for 2, 10% for 4).
TILE_SPAWN_PROBS: dict[int, float] = {2: 0.9, 4: 0.1}

_logger = logging.getLogger(__name__)


class RowResult(NamedTuple):
    """Outcome of sliding a single row to the left."""

    score: int
    row: ndarray
    changed: bool
    merged: list[int]


class MoveResult(NamedTuple):
    """
    Outcome of a directional transform, before any tile is spawned.

    Attributes
    ----------
    board : ndarray
        The candidate board.
    score : int
        Sum of the values of all tiles created by merges.
    changed : bool
        Whether any cell value differs from the board the move started from.
    merged : list[int]
        Values of the tiles created by merges, one entry per merge.
    """

    board: ndarray
    score: int
    changed: bool
    merged: list[int]


def empty_board(size: int = 4) -> ndarray:
    """Build a ``size`` x ``size`` board with no tile."""
    return empty((size, size), dtype=object)


def values(board: ndarray) -> ndarray:
    """
    Project a board of tiles to its tile values.

    Parameters
    ----------
    board : ndarray
        Object array of ``Tile`` or ``None``.

    Returns
    -------
    ndarray
        Integer array of the same shape, 0 where the cell is empty.
    """
    return array([[0 if tile is None else tile.value for tile in row] for row in board], dtype=int64)


def board_from_values(grid: Sequence[Sequence[int]]) -> ndarray:
    """
    Build a board of fresh tiles from a grid of values.

    Parameters
    ----------
    grid : Sequence[Sequence[int]]
        Square grid of values, 0 for an empty cell.

    Returns
    -------
    ndarray
        Object array holding a new ``Tile`` for each non-zero value.
    """
    board = empty_board(len(grid))
    for r, row in enumerate(grid):
        for c, value in enumerate(row):
            if value:
                board[r, c] = Tile(int(value))
    return board


def empty_cells(board: ndarray) -> ndarray:
    """Positions (row, col) of the empty cells, in row-major order."""
    return argwhere(values(board) == 0)


def settle(board: ndarray) -> ndarray:
    """Return a copy of the board with every merge flag cleared."""
    result = empty_board(len(board))
    for r, row in enumerate(board):
        for c, tile in enumerate(row):
            if tile is not None:
                result[r, c] = tile.settled()
    return result


def merge_row(row: Sequence[Tile | None]) -> RowResult:
    """
    Slide a row to the left and merge equal neighbours.

    Parameters
    ----------
    row : Sequence[Tile | None]
        One row of the board, read from left to right.

    Returns
    -------
    RowResult
        The score gained, the new row, whether it changed and the merged values.

    Notes
    -----
    - Empty cells are dropped first, keeping the order of the remaining tiles.
    - Merging runs from the left; a tile takes part in at most one merge, so ``[2, 2, 4]`` gives
      ``[4, 4]`` and never ``[8]``.
    - The result is padded with empty cells on the right to the original length.
    - The row counts as changed when its value sequence differs, whatever the tile identities.
    """
    # ##: Compact.
    compacted = [tile for tile in row if tile is not None]

    # ##: Merge.
    tiles: list[Tile] = []
    merged: list[int] = []
    i = 0
    while i < len(compacted):
        if i + 1 < len(compacted) and compacted[i].value == compacted[i + 1].value:
            tile = Tile.merged_from(compacted[i].value * 2)
            merged.append(tile.value)
            tiles.append(tile)
            i += 2
        else:
            tiles.append(compacted[i])
            i += 1

    # ##: Pad.
    new_row = empty(len(row), dtype=object)
    for index, tile in enumerate(tiles):
        new_row[index] = tile

    before = [0 if tile is None else tile.value for tile in row]
    after = [0 if tile is None else tile.value for tile in new_row]
    return RowResult(score=sum(merged), row=new_row, changed=before != after, merged=merged)


def slide_and_merge(board: ndarray) -> MoveResult:
    """
    Slide every row of the board to the left.

    Parameters
    ----------
    board : ndarray
        The board to move. It is not modified.

    Returns
    -------
    MoveResult
        The candidate board with the total score and the merges of all rows.
    """
    result = empty_board(len(board))
    score, changed, merged = 0, False, []

    for i, row in enumerate(board):
        outcome = merge_row(row)
        result[i] = outcome.row
        score += outcome.score
        changed = changed or outcome.changed
        merged.extend(outcome.merged)

    return MoveResult(board=result, score=score, changed=changed, merged=merged)


def _mirrored(result: MoveResult) -> MoveResult:
    return result._replace(board=result.board[:, ::-1].copy())


def _transposed(result: MoveResult) -> MoveResult:
    return result._replace(board=result.board.T.copy())


def latent_state(board: ndarray, direction: Direction) -> MoveResult:
    """
    Apply a move without adding a new tile.

    Parameters
    ----------
    board : ndarray
        The current board. It is not modified.
    direction : Direction
        The move to apply.

    Returns
    -------
    MoveResult
        The candidate board, score gained, change flag and merges.

    Notes
    -----
    Left is the only primitive move:

    - right reverses each row, moves left, then reverses back;
    - up transposes, moves left, then transposes back;
    - down transposes, moves right, then transposes back.
    """
    if direction is Direction.LEFT:
        return slide_and_merge(board)
    if direction is Direction.RIGHT:
        return _mirrored(slide_and_merge(board[:, ::-1]))
    if direction is Direction.UP:
        return _transposed(slide_and_merge(board.T))
    return _transposed(latent_state(board.T, Direction.RIGHT))


def fill_cells(
    board: ndarray, number_tile: int, rng: Generator, probs: Mapping[int, float] = TILE_SPAWN_PROBS
) -> ndarray:
    """
    Fill empty cells with new tiles.

    Parameters
    ----------
    board : ndarray
        The board to fill. **Modified in-place.**
    number_tile : int
        Number of new tiles to add.
    rng : Generator
        Source of randomness; seed it for reproducible games.
    probs : Mapping[int, float], optional
        Probability of each spawned value (default 2 with 0.9, 4 with 0.1).

    Returns
    -------
    ndarray
        The same board reference with the new tiles added.

    Notes
    -----
    - Cells are drawn uniformly among the empty ones, without replacement.
    - Each value is drawn independently of the cell.
    - If there are fewer empty cells than requested, all of them are filled; a full board is left as is.
    """
    available_cells = empty_cells(board)
    number_tile = min(number_tile, len(available_cells))
    if number_tile == 0:
        return board

    # ##: Randomly choose cell positions and values.
    chosen_indices = rng.choice(len(available_cells), size=number_tile, replace=False)
    new_values = rng.choice(list(probs), size=number_tile, p=list(probs.values()))

    for (r, c), value in zip(available_cells[chosen_indices], new_values):
        board[r, c] = Tile(int(value))
        _logger.debug('Spawned %d at (%d, %d)', value, r, c)
    return board


def is_done(state: ndarray) -> bool:
    """
    Check if the game has ended.

    Parameters
    ----------
    state : ndarray
        Tile values of the board (0 for an empty cell).

    Returns
    -------
    bool
        True if no move is possible, False otherwise.

    Notes
    -----
    The game is over when there is no empty cell AND no two horizontally or vertically adjacent cells
    hold the same value.
    """
    return bool(
        np_all(state != 0) and not np_any(state[:-1] == state[1:]) and not np_any(state[:, :-1] == state[:, 1:])
    )

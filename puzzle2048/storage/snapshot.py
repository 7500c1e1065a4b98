"""
Serialized form of a game: the grid of tile values and the score.
"""

import json
from dataclasses import dataclass

from numpy import ndarray

from puzzle2048.core import values


class SnapshotError(ValueError):
    """Raised when persisted data cannot be decoded into a snapshot."""


def _is_cell_value(value) -> bool:
    if not isinstance(value, int) or isinstance(value, bool):
        return False
    return value == 0 or (value >= 2 and value & (value - 1) == 0)


@dataclass
class Snapshot:
    """
    Minimal persisted state of a game.

    Attributes
    ----------
    grid : list[list[int]]
        Tile values row by row, 0 for an empty cell.
    score : int
        Score of the game.

    Notes
    -----
    The JSON form is ``{"grid": [[int x 4] x 4], "score": int}``. Tile identities and merge flags are
    not part of it.
    """

    grid: list[list[int]]
    score: int

    @classmethod
    def from_board(cls, board: ndarray, score: int) -> 'Snapshot':
        """Capture a board of tiles and its score."""
        return cls(grid=values(board).tolist(), score=int(score))

    def to_json(self) -> str:
        """Encode the snapshot as JSON text."""
        return json.dumps({'grid': self.grid, 'score': self.score})

    @classmethod
    def from_json(cls, text: str | bytes, size: int | None = None) -> 'Snapshot':
        """
        Decode and validate a snapshot.

        Parameters
        ----------
        text : str | bytes
            JSON text produced by ``to_json``.
        size : int, optional
            Expected side of the grid. Any square grid is accepted when omitted.

        Returns
        -------
        Snapshot
            The decoded snapshot.

        Raises
        ------
        SnapshotError
            If the text is not JSON (nesting too deep included), a field is missing, or the content fails
            ``validate``.
        """
        try:
            data = json.loads(text)
        except (TypeError, ValueError, RecursionError) as error:
            raise SnapshotError(f'Snapshot is not valid JSON: {error}') from error

        if not isinstance(data, dict) or 'grid' not in data or 'score' not in data:
            raise SnapshotError('Snapshot must be an object with "grid" and "score"')

        snapshot = cls(grid=data['grid'], score=data['score'])
        snapshot.validate(size)
        snapshot.grid = [list(row) for row in snapshot.grid]
        return snapshot

    def validate(self, size: int | None = None) -> None:
        """
        Check that the snapshot describes a playable game.

        Parameters
        ----------
        size : int, optional
            Expected side of the grid. Any square grid is accepted when omitted.

        Raises
        ------
        SnapshotError
            If the grid is not square (or not ``size`` x ``size``), a cell is neither 0 nor a power of two
            of at least 2, or the score is not a non-negative integer.
        """
        grid, score = self.grid, self.score
        if not isinstance(score, int) or isinstance(score, bool) or score < 0:
            raise SnapshotError(f'Invalid score: {score!r}')
        if not isinstance(grid, list) or not grid:
            raise SnapshotError('Grid must be a non-empty list of rows')

        side = len(grid) if size is None else size
        if len(grid) != side:
            raise SnapshotError(f'Grid must have {side} rows, got {len(grid)}')
        for row in grid:
            if not isinstance(row, list) or len(row) != side:
                raise SnapshotError(f'Each grid row must have {side} cells')
            for value in row:
                if not _is_cell_value(value):
                    raise SnapshotError(f'Invalid cell value: {value!r}')

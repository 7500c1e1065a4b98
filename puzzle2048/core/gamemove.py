"""
Move directions for the 2048 board.
"""

from enum import Enum


class Direction(Enum):
    """The four moves a player can make."""

    LEFT = 0
    UP = 1
    RIGHT = 2
    DOWN = 3

    @classmethod
    def from_key(cls, key: str) -> 'Direction':
        """
        Map a keyboard key name to a direction.

        Parameters
        ----------
        key : str
            Key name as reported by the window toolkit ("left", "up", "right", "down").

        Returns
        -------
        Direction
            The matching direction.

        Raises
        ------
        KeyError
            If the key is not an arrow key.
        """
        return cls[key.upper()]

# -*- coding: utf-8 -*-
"""
Game configuration.
"""
from dataclasses import dataclass, field
from math import isclose

from puzzle2048.core import TILE_SPAWN_PROBS


@dataclass
class GameConfig:
    """
    Rules of a game.

    Attributes
    ----------
    size : int
        Side of the square board.
    win_tile : int
        Tile value announcing the win.
    start_tiles : int
        Number of tiles placed on a new board.
    spawn_probs : dict[int, float]
        Probability of each value for a spawned tile.
    """

    size: int = 4
    win_tile: int = 2048
    start_tiles: int = 2
    spawn_probs: dict[int, float] = field(default_factory=lambda: dict(TILE_SPAWN_PROBS))

    def __post_init__(self):
        if self.size < 2:
            raise ValueError(f'Board size must be at least 2, got {self.size}')
        if not 0 < self.start_tiles <= self.size**2:
            raise ValueError(f'Cannot place {self.start_tiles} tiles on a {self.size}x{self.size} board')
        if not isclose(sum(self.spawn_probs.values()), 1.0):
            raise ValueError(f'Spawn probabilities must sum to 1, got {self.spawn_probs}')

# -*- coding: utf-8 -*-
"""
Core rules of the 2048 game.

It provides the tile model, the move directions, the directional transform (slide and merge), tile
spawning and game-over detection.
"""

from .gameboard import (
    TILE_SPAWN_PROBS,
    MoveResult,
    RowResult,
    board_from_values,
    empty_board,
    empty_cells,
    fill_cells,
    is_done,
    latent_state,
    merge_row,
    settle,
    slide_and_merge,
    values,
)
from .gamemove import Direction
from .tile import Tile

__all__ = [
    "TILE_SPAWN_PROBS",
    "Direction",
    "MoveResult",
    "RowResult",
    "Tile",
    "board_from_values",
    "empty_board",
    "empty_cells",
    "fill_cells",
    "is_done",
    "latent_state",
    "merge_row",
    "settle",
    "slide_and_merge",
    "values",
]

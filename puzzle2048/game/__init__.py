# -*- coding: utf-8 -*-
"""
The 2048 game: the engine owning the board, the score and the game lifecycle.
"""

from .config import GameConfig
from .engine import GameEngine, UndoRecord

__all__ = ["GameConfig", "GameEngine", "UndoRecord"]

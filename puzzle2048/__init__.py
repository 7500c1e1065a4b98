# -*- coding: utf-8 -*-
"""
Single-player 2048 puzzle with undo, high score and saved games.
"""

from .core import Direction, Tile
from .game import GameConfig, GameEngine
from .storage import JsonFileStore, MemoryStore, Snapshot

__all__ = ["Direction", "GameConfig", "GameEngine", "JsonFileStore", "MemoryStore", "Snapshot", "Tile"]

__version__ = "0.1.0"

# -*- coding: utf-8 -*-
"""
Persistence of games: the snapshot codec and the stores implementing the load/save contract.
"""

from .snapshot import Snapshot, SnapshotError
from .stores import GAME_STATE_KEY, HIGH_SCORE_KEY, WIN_FLAG_KEY, BlobStore, JsonFileStore, MemoryStore, PersistenceAdapter

__all__ = [
    "GAME_STATE_KEY",
    "HIGH_SCORE_KEY",
    "WIN_FLAG_KEY",
    "BlobStore",
    "JsonFileStore",
    "MemoryStore",
    "PersistenceAdapter",
    "Snapshot",
    "SnapshotError",
]

"""
Persistence adapters: where a game, the high score and the win flag are kept between sessions.
"""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Protocol

from .snapshot import Snapshot, SnapshotError

# ##>: Storage keys, shared by every store.
GAME_STATE_KEY = 'savedGameState_2048'
HIGH_SCORE_KEY = 'highScore_2048'
WIN_FLAG_KEY = 'hasShownWinPopup_2048'

_logger = logging.getLogger(__name__)


class PersistenceAdapter(Protocol):
    """
    Load/save contract used by the game engine.

    Every call is synchronous and may fail with ``OSError`` or ``ValueError``; the engine treats
    failures as best-effort and keeps playing.
    """

    def load(self) -> Snapshot | None:
        """Return the saved game, or None if there is none or it is corrupt."""

    def save(self, snapshot: Snapshot) -> None:
        """Persist a game."""

    def load_high_score(self) -> int:
        """Return the best score recorded, 0 if none."""

    def save_high_score(self, score: int) -> None:
        """Persist the best score."""

    def load_has_won_flag(self) -> bool:
        """Return whether the win message was already shown for the current game."""

    def save_has_won_flag(self, flag: bool) -> None:
        """Persist the win flag."""


class BlobStore(ABC):
    """
    Persistence adapter on top of a text key-value store.

    Subclasses only provide ``_read`` and ``_write``; encoding and the handling of missing or corrupt
    entries live here. The board size of a loaded game is checked by the engine, not by the store.
    """

    @abstractmethod
    def _read(self, key: str) -> str | None:
        """Return the text stored under ``key``, None if absent."""

    @abstractmethod
    def _write(self, key: str, text: str) -> None:
        """Store ``text`` under ``key``."""

    def load(self) -> Snapshot | None:
        text = self._read(GAME_STATE_KEY)
        if text is None:
            return None
        try:
            return Snapshot.from_json(text)
        except SnapshotError as error:
            _logger.warning('Ignoring corrupt saved game: %s', error)
            return None

    def save(self, snapshot: Snapshot) -> None:
        self._write(GAME_STATE_KEY, snapshot.to_json())

    def load_high_score(self) -> int:
        score = self._read_json(HIGH_SCORE_KEY)
        if isinstance(score, int) and not isinstance(score, bool) and score >= 0:
            return score
        return 0

    def save_high_score(self, score: int) -> None:
        self._write(HIGH_SCORE_KEY, json.dumps(int(score)))

    def load_has_won_flag(self) -> bool:
        return self._read_json(WIN_FLAG_KEY) is True

    def save_has_won_flag(self, flag: bool) -> None:
        self._write(WIN_FLAG_KEY, json.dumps(bool(flag)))

    def _read_json(self, key: str):
        text = self._read(key)
        if text is None:
            return None
        try:
            return json.loads(text)
        except (ValueError, RecursionError):
            _logger.warning('Ignoring corrupt entry %r', key)
            return None


class MemoryStore(BlobStore):
    """Store kept in a dictionary, for tests and sessions that must not touch the disk."""

    def __init__(self):
        self.blobs: dict[str, str] = {}

    def _read(self, key: str) -> str | None:
        return self.blobs.get(key)

    def _write(self, key: str, text: str) -> None:
        self.blobs[key] = text


class JsonFileStore(BlobStore):
    """
    Store keeping one JSON file per key in a directory.

    Parameters
    ----------
    directory : Path | str
        Folder holding the files. Created on the first save.
    """

    def __init__(self, directory: Path | str):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f'{key}.json'

    def _read(self, key: str) -> str | None:
        try:
            return self._path(key).read_text(encoding='utf-8')
        except FileNotFoundError:
            return None

    def _write(self, key: str, text: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)

        # ##: Write then rename so a crash never leaves a half-written file.
        path = self._path(key)
        temporary = path.with_suffix('.tmp')
        temporary.write_text(text, encoding='utf-8')
        temporary.replace(path)

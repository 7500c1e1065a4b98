"""2048 game engine: board, score, undo, win and game-over tracking, persistence through an adapter."""

import logging
import time
from typing import Any, Callable, NamedTuple

from numpy import ndarray
from numpy.random import Generator, default_rng

from puzzle2048.core import (
    Direction,
    board_from_values,
    empty_board,
    fill_cells,
    is_done,
    latent_state,
    settle,
    values,
)
from puzzle2048.game.config import GameConfig
from puzzle2048.storage import MemoryStore, PersistenceAdapter, Snapshot, SnapshotError

_logger = logging.getLogger(__name__)


class UndoRecord(NamedTuple):
    """Board and score captured just before the latest move."""

    board: ndarray
    score: int


class GameEngine:
    """
    2048 game.

    This class owns the board and the score, applies moves, keeps one level of undo, and reports win and
    game-over status. It never touches storage itself: it asks the persistence adapter for the saved game
    when created and hands it a snapshot after every change.

    Parameters
    ----------
    store : PersistenceAdapter, optional
        Where games, the high score and the win flag are kept (default is an in-memory store).
    config : GameConfig, optional
        Rules of the game (default is a classic 4x4 game).
    seed : int, optional
        Seed of the random generator, ignored when ``rng`` is given.
    rng : Generator, optional
        Source of randomness for tile spawning.
    clock : Callable[[], float], optional
        Seconds counter used to time the win (default is ``time.monotonic``).
    """

    ACTIONS = {direction.name.lower(): direction for direction in Direction}

    def __init__(
        self,
        store: PersistenceAdapter | None = None,
        config: GameConfig | None = None,
        seed: int | None = None,
        rng: Generator | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config or GameConfig()
        self._store = store if store is not None else MemoryStore()
        self._rng = rng if rng is not None else default_rng(seed)
        self._clock = clock

        # ##: Current game state.
        self._board = empty_board(self.config.size)
        self._score = 0
        self._is_over = False
        self._has_won = False
        self._win_message: str | None = None
        self._started_at: float | None = None
        self._undo: UndoRecord | None = None

        # ##: Data kept between sessions.
        self._high_score = self._call_store(self._store.load_high_score, default=0)
        self._win_shown = self._call_store(self._store.load_has_won_flag, default=False)

        snapshot = self._call_store(self._store.load)
        if snapshot is None or not self._restore(snapshot):
            self.new_game()

    # ##: Read surface.

    @property
    def board(self) -> ndarray:
        """Copy of the board: an object array of ``Tile`` or ``None``."""
        return self._board.copy()

    @property
    def grid(self) -> ndarray:
        """Tile values of the board, 0 for an empty cell."""
        return values(self._board)

    @property
    def score(self) -> int:
        return self._score

    @property
    def high_score(self) -> int:
        return self._high_score

    @property
    def is_over(self) -> bool:
        return self._is_over

    @property
    def has_won(self) -> bool:
        return self._has_won

    @property
    def win_message(self) -> str | None:
        return self._win_message

    @property
    def started_at(self) -> float | None:
        """Clock reading of the first move of the session, None before it."""
        return self._started_at

    @property
    def can_undo(self) -> bool:
        return self._undo is not None

    def snapshot(self) -> Snapshot:
        """Persisted form of the current game."""
        return Snapshot.from_board(self._board, self._score)

    # ##: Commands.

    def new_game(self) -> None:
        """
        Start a new game.

        The board is emptied, the score, flags, undo record and session start are cleared, two tiles are
        spawned and the game is saved.
        """
        self._board = empty_board(self.config.size)
        self._score = 0
        self._is_over = False
        self._has_won = False
        self._win_message = None
        self._started_at = None
        self._undo = None

        self._win_shown = False
        self._call_store(self._store.save_has_won_flag, False)

        fill_cells(self._board, self.config.start_tiles, self._rng, self.config.spawn_probs)
        self._save()
        _logger.info('New game started')

    def move(self, direction: Direction) -> bool:
        """
        Apply a move.

        Parameters
        ----------
        direction : Direction
            The direction to slide the tiles.

        Returns
        -------
        bool
            True if the board changed, False if the move was a no-op.

        Notes
        -----
        - A finished game ignores moves: no state change, no save.
        - Merge flags are cleared first; the undo record is then taken, even when the move turns out to be a
          no-op.
        - A move that changes nothing spawns no tile, saves nothing and leaves the game-over flag as is.
        - After a real move exactly one tile is spawned, the game is saved and game over is re-evaluated.
        """
        if self._is_over:
            return False

        self._board = settle(self._board)
        self._undo = UndoRecord(board=self._board.copy(), score=self._score)
        if self._started_at is None:
            self._started_at = self._clock()

        result = latent_state(self._board, direction)
        if not result.changed:
            _logger.debug('Move %s changed nothing', direction.name)
            return False

        self._board = result.board
        self._score += result.score
        self._check_win(result.merged)

        fill_cells(self._board, 1, self._rng, self.config.spawn_probs)
        self._save()
        self._is_over = is_done(values(self._board))

        _logger.debug('Move %s: +%d (score %d)', direction.name, result.score, self._score)
        if self._is_over:
            _logger.info('Game over with score %d', self._score)
        return True

    def undo(self) -> bool:
        """
        Restore the board and score from before the latest move.

        Returns
        -------
        bool
            True if a record was restored, False if there was nothing to undo.

        Notes
        -----
        Only one level is kept: the record is consumed, so a second undo in a row does nothing.
        """
        if self._undo is None:
            return False

        self._board, self._score = self._undo.board, self._undo.score
        self._undo = None
        self._is_over = False
        self._has_won = False
        self._win_message = None
        self._save()
        return True

    # ##: Internals.

    def _restore(self, snapshot: Snapshot) -> bool:
        if not isinstance(snapshot, Snapshot):
            _logger.warning('Ignoring saved game of type %s', type(snapshot).__name__)
            return False
        try:
            snapshot.validate(self.config.size)
        except SnapshotError as error:
            _logger.warning('Ignoring saved game: %s', error)
            return False

        self._board = board_from_values(snapshot.grid)
        self._score = snapshot.score
        self._is_over = is_done(values(self._board))
        self._record_high_score()
        _logger.info('Restored game with score %d', self._score)
        return True

    def _check_win(self, merged: list[int]) -> None:
        if self._win_shown or self.config.win_tile not in merged:
            return

        elapsed = int(self._clock() - self._started_at)
        minutes, seconds = divmod(elapsed, 60)
        self._has_won = True
        self._win_message = f'You reached {self.config.win_tile} in {minutes:02d}:{seconds:02d}!'
        self._win_shown = True
        self._call_store(self._store.save_has_won_flag, True)
        _logger.info(self._win_message)

    def _save(self) -> None:
        self._call_store(self._store.save, self.snapshot())
        self._record_high_score()

    def _record_high_score(self) -> None:
        if self._score > self._high_score:
            self._high_score = self._score
            self._call_store(self._store.save_high_score, self._score)

    @staticmethod
    def _call_store(action: Callable[..., Any], *args: Any, default: Any = None) -> Any:
        # ##>: Persistence is best-effort: a failing store never interrupts the game.
        try:
            return action(*args)
        except (OSError, ValueError, TypeError, RecursionError) as error:
            _logger.warning('Persistence call %s failed: %s', getattr(action, '__name__', action), error)
            return default

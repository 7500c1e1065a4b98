# -*- coding: utf-8 -*-
"""
Play 2048 with the keyboard.

Arrow keys move the tiles, ``u`` undoes the last move, ``n`` or ``backspace`` starts a new game and
``escape`` closes the window.
"""
import logging
from argparse import ArgumentParser, Namespace
from pathlib import Path
from typing import Sequence

from puzzle2048.core import Direction
from puzzle2048.game import GameEngine
from puzzle2048.storage import JsonFileStore, MemoryStore
from puzzle2048.utils import WindowBoard

DEFAULT_SAVE_DIR = Path.home() / ".puzzle2048"

_logger = logging.getLogger(__name__)


def status_line(engine: GameEngine) -> str:
    """
    Text shown above the board.

    Parameters
    ----------
    engine: GameEngine
        The game to describe

    Returns
    -------
    str
        Score, best score and, when relevant, the win or game-over message.
    """
    line = f"SCORE {engine.score}    BEST {engine.high_score}"
    if engine.is_over:
        return f"{line}\nGame over! Press n for a new game"
    if engine.has_won:
        return f"{line}\n{engine.win_message}"
    return line


def redraw(engine: GameEngine, window: WindowBoard):
    """
    Redraw the game board.

    Parameters
    ----------
    engine: GameEngine
        The game to draw

    window: WindowBoard
        Class to draw the game board
    """
    window.show_image(engine.grid, status_line(engine))


def key_handler(engine: GameEngine, window: WindowBoard, key: str):
    """
    Handle the keyboard.

    Parameters
    ----------
    engine: GameEngine
        The game

    window: WindowBoard
        Class to draw the game board

    key: str
        Name of the pressed key, as Matplotlib reports it
    """
    _logger.debug("pressed %s", key)

    if key == "escape":
        window.close()
        return None

    if key in ("n", "backspace"):
        engine.new_game()
    elif key == "u":
        engine.undo()
    elif key in GameEngine.ACTIONS:
        engine.move(Direction.from_key(key))
    else:
        return None

    redraw(engine, window)
    return None


def parse_args(argv: Sequence[str] | None = None) -> Namespace:
    """Parse the command line."""
    parser = ArgumentParser(description="Play 2048 with the arrow keys.")
    parser.add_argument("--save-dir", type=Path, default=DEFAULT_SAVE_DIR, help="where games are saved")
    parser.add_argument("--no-save", action="store_true", help="keep the game in memory only")
    parser.add_argument("--seed", type=int, default=None, help="seed of the tile spawner")
    parser.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None):
    """Open the window and play until it is closed."""
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    store = MemoryStore() if args.no_save else JsonFileStore(args.save_dir)
    engine = GameEngine(store=store, seed=args.seed)

    window_board = WindowBoard(title="2048 Game", size=engine.config.size)
    window_board.on_key(lambda key: key_handler(engine, window_board, key))

    redraw(engine, window_board)

    window_board.run()


if __name__ == "__main__":
    main()

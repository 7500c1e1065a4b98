# -*- coding: utf-8 -*-
"""
Graphical window for the 2048 game.

This module draws the board with Matplotlib, shows the score line above it and forwards keyboard events
to a handler.
"""
from typing import Any, Callable, Optional

from matplotlib import pyplot as plt
from matplotlib.backend_bases import Event
from numpy import ndarray


class WindowBoard:
    """
    A class for rendering the 2048 board using Matplotlib.

    Methods
    -------
    show_image(board: np.ndarray, status: str)
        Update the display with the current tile values and status line.
    on_key(handler: Callable[[str], Any])
        Forward the name of every pressed key to a handler.
    run()
        Block until the window is closed.
    close()
        Close the game window.
    """

    # ##: Colors mapping for different tile values.
    COLORS = {
        0: "#CDC1B4",
        2: "#EEE4DA",
        4: "#EDE0C8",
        8: "#F2B179",
        16: "#F59563",
        32: "#F67C5F",
        64: "#F65E3B",
        128: "#EDCF72",
        256: "#EDCC61",
        512: "#EDC850",
        1024: "#EDC53F",
        2048: "#EDC22E",
    }

    # ##: Tiles above 2048 share one color.
    BIG_TILE_COLOR = "#3C3A32"

    def __init__(self, title: str, size: int):
        """
        Initialize the game board window.

        Parameters
        ----------
        title : str
            The title of the window.
        size : int
            The side of the board (4 for a 4x4 board).
        """
        self.fig, self.axe = plt.subplots()
        self.fig.canvas.manager.set_window_title(title)
        self._setup_axes(size)
        self.closed = False
        self.fig.canvas.mpl_connect("close_event", self._close_handler)

    def _setup_axes(self, size: int):
        """
        Create one subplot per cell, plus the status line on top.

        Parameters
        ----------
        size : int
            The side of the board.
        """
        self.fig.subplots_adjust(left=0, bottom=0, right=1, top=0.9, wspace=0.05, hspace=0.05)
        self.fig.set_facecolor("#FAF8EF")
        self.axe.set_facecolor("#BBADA0")
        self.axe.set_axis_off()

        self.status = self.fig.suptitle("", fontsize="large", fontweight="bold")
        self.texts = []
        self.axes = [self.fig.add_subplot(size, size, r * size + c + 1) for r in range(size) for c in range(size)]
        for ax in self.axes:
            text = ax.text(0.5, 0.5, "", ha="center", va="center", fontsize="x-large", fontweight="demibold")
            self.texts.append(text)
            ax.set_xticks([])
            ax.set_yticks([])

    def _close_handler(self, event: Optional[Event] = None):
        """Set the closed flag when the window is closed."""
        self.closed = True

    def show_image(self, board: ndarray, status: str = ""):
        """
        Show or update the game board.

        Parameters
        ----------
        board : ndarray
            Tile values of the board, 0 for an empty cell.
        status : str, optional
            Text displayed above the board (score, best score, messages).
        """
        for ax, text, value in zip(self.axes, self.texts, board.flat):
            value = int(value)
            text.set_text(str(value) if value != 0 else "")
            text.set_color("#776E65" if value in (2, 4) else "#F9F6F2")
            ax.set_facecolor(self.COLORS.get(value, self.BIG_TILE_COLOR))
        self.status.set_text(status)

        self.fig.canvas.draw_idle()
        self.fig.canvas.flush_events()
        plt.pause(0.001)

    def on_key(self, handler: Callable[[str], Any]) -> int:
        """
        Forward key presses to a handler.

        Parameters
        ----------
        handler : Callable[[str], Any]
            Called with the Matplotlib key name (``"left"``, ``"u"``, ``"escape"``, ...) of each key pressed
            in the window.

        Returns
        -------
        int
            The Matplotlib connection id.
        """
        return self.fig.canvas.mpl_connect("key_press_event", lambda event: handler(event.key))

    def run(self):
        """Draw the window and block in the Matplotlib event loop until it is closed."""
        plt.show(block=True)

    def close(self):
        if not self.closed:
            plt.close(self.fig)
        self.closed = True

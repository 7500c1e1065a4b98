"""
Tile model for the 2048 board.
"""

from dataclasses import dataclass, field, replace
from uuid import UUID, uuid4


@dataclass(frozen=True)
class Tile:
    """
    A numbered piece occupying one board cell.

    Attributes
    ----------
    value : int
        Power of two carried by the tile (2, 4, 8, ...).
    just_merged : bool
        True only for tiles created by a merge during the latest move.
    id : UUID
        Identity kept across moves while the tile survives unmerged.

    Notes
    -----
    Game logic only ever compares ``value``. The identity exists so a front end can follow a tile
    from one frame to the next.
    """

    value: int
    just_merged: bool = False
    id: UUID = field(default_factory=uuid4, compare=False)

    @classmethod
    def merged_from(cls, value: int) -> 'Tile':
        """Build the fresh tile produced by a merge."""
        return cls(value=value, just_merged=True)

    def settled(self) -> 'Tile':
        """Return the same tile (same id) with its merge flag cleared."""
        if not self.just_merged:
            return self
        return replace(self, just_merged=False)

"""Tile types for gold collector maps."""

from enum import Enum
from typing import List, Optional, Tuple


class Tile(Enum):
    PLAYER = "P"
    GOLD = "G"
    TRAP = "T"
    WALL = "#"
    FLOOR = "."

    @classmethod
    def from_char(cls, char: str) -> Optional['Tile']:
        try:
            return cls(char)
        except ValueError:
            return None

    @property
    def char(self) -> str:
        return self.value

    @property
    def is_traversable(self) -> bool:
        return self in (Tile.FLOOR, Tile.GOLD)


Grid = List[List[Tile]]
Position = Tuple[int, int]


def tile_at(grid: Grid, position: Position) -> Optional[Tile]:
    """Return the tile at (column, row), or None when outside a (possibly ragged) grid."""
    x, y = position
    if y < 0 or x < 0 or y >= len(grid) or x >= len(grid[y]):
        return None
    return grid[y][x]

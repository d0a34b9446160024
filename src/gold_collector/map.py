"""Map loading for the gold collector."""

from pathlib import Path
from typing import IO, Iterable, Iterator, List, Optional, Tuple, Union

from .errors import InsufficientRowsError, MalformedHeaderError, UnknownTileError
from .tiles import Grid, Position, Tile

UNKNOWN_TILE_POLICIES = ("drop", "floor", "error")


def parse_header(line: Optional[str]) -> Tuple[int, int]:
    if line is None:
        raise MalformedHeaderError("", "missing header line")

    parts = line.split()
    if len(parts) < 2:
        raise MalformedHeaderError(line, "expected '<width> <height>'")

    values = []
    for name, token in zip(("width", "height"), parts[:2]):
        try:
            value = int(token)
        except ValueError:
            raise MalformedHeaderError(line, f"{name} {token!r} is not an integer")
        if value < 0:
            raise MalformedHeaderError(line, f"{name} must be non-negative, got {value}")
        values.append(value)

    return values[0], values[1]


def parse_row(line: str, row_index: int = 0, unknown_tiles: str = "drop") -> List[Tile]:
    if unknown_tiles not in UNKNOWN_TILE_POLICIES:
        raise ValueError(f"unknown_tiles must be one of {UNKNOWN_TILE_POLICIES}, got {unknown_tiles!r}")

    row = []
    for column, char in enumerate(line.rstrip("\r\n")):
        tile = Tile.from_char(char)
        if tile is None:
            if unknown_tiles == "error":
                raise UnknownTileError(row_index, column, char)
            if unknown_tiles == "floor":
                tile = Tile.FLOOR
            else:
                continue
        row.append(tile)
    return row


def load_map(lines: Iterable[str], unknown_tiles: str = "drop") -> Grid:
    """Parse a '<width> <height>' header followed by `height` rows of tiles.

    Declared width is informational only: with the default "drop" policy,
    rows containing unknown characters come out shorter than the header says.
    Lines after the last declared row are ignored.
    """
    it: Iterator[str] = iter(lines)
    _, height = parse_header(next(it, None))

    grid: Grid = []
    for row_index in range(height):
        line = next(it, None)
        if line is None:
            raise InsufficientRowsError(height, row_index)
        grid.append(parse_row(line, row_index, unknown_tiles))

    return grid


def read_map(source: Union[str, Path, IO[str]], unknown_tiles: str = "drop") -> Grid:
    if isinstance(source, (str, Path)):
        with open(source, 'r') as f:
            return load_map(f, unknown_tiles)
    return load_map(source, unknown_tiles)


def find_player(grid: Grid) -> Optional[Position]:
    """Row-major scan; the first Player tile wins when several are present."""
    for y, row in enumerate(grid):
        for x, tile in enumerate(row):
            if tile == Tile.PLAYER:
                return x, y
    return None


def format_map(grid: Grid) -> str:
    lines = ["", "Parsed Map:"]
    for row in grid:
        lines.append("".join(f"'{tile.char}' " for tile in row))
    return "\n".join(lines)

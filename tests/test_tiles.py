"""Tests for tile parsing helpers."""

from gold_collector.tiles import Tile, tile_at


def test_from_char_round_trips_known_tiles():
    for char in "PGT#.":
        tile = Tile.from_char(char)
        assert tile is not None
        assert tile.char == char


def test_from_char_rejects_unknown_characters():
    assert Tile.from_char("x") is None
    assert Tile.from_char(" ") is None
    assert Tile.from_char("") is None


def test_only_floor_and_gold_are_traversable():
    assert Tile.FLOOR.is_traversable
    assert Tile.GOLD.is_traversable
    assert not Tile.WALL.is_traversable
    assert not Tile.TRAP.is_traversable
    assert not Tile.PLAYER.is_traversable


def test_tile_at_respects_ragged_rows():
    grid = [[Tile.PLAYER, Tile.FLOOR, Tile.GOLD], [Tile.FLOOR]]

    assert tile_at(grid, (2, 0)) == Tile.GOLD
    assert tile_at(grid, (0, 1)) == Tile.FLOOR
    assert tile_at(grid, (1, 1)) is None
    assert tile_at(grid, (-1, 0)) is None
    assert tile_at(grid, (0, 2)) is None

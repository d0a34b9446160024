"""
Gold Collector - flood-fill gold counting over ASCII tile maps.

This module reads a tile map, finds the player, counts the gold reachable
through floor tiles with a breadth-first search, and streams every step of
the search to a graph visualization sink.
"""

from .tiles import Tile
from .map import load_map, read_map, find_player, format_map
from .collector import Direction, GoldTraversal, TraversalResult, collect_gold
from .errors import (
    GoldCollectorError,
    MapParseError,
    MalformedHeaderError,
    InsufficientRowsError,
    UnknownTileError,
    SinkUnavailableError,
    ConfigError,
)

__all__ = [
    'Tile', 'load_map', 'read_map', 'find_player', 'format_map',
    'Direction', 'GoldTraversal', 'TraversalResult', 'collect_gold',
    'GoldCollectorError', 'MapParseError', 'MalformedHeaderError', 'InsufficientRowsError',
    'UnknownTileError', 'SinkUnavailableError', 'ConfigError',
]
__version__ = '1.0.0'

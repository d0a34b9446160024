"""Breadth-first gold collection over a tile grid."""

from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Deque, Iterable, Iterator, List, Set, Tuple, Union

from .tiles import Grid, Position, Tile, tile_at


class Direction(Enum):
    DOWN = (0, 1)
    RIGHT = (1, 0)
    UP = (0, -1)
    LEFT = (-1, 0)

    def step(self, position: Position) -> Position:
        dx, dy = self.value
        return position[0] + dx, position[1] + dy


# Neighbor expansion order; fixes the edge discovery order.
COMPASS_ORDER = (Direction.DOWN, Direction.RIGHT, Direction.UP, Direction.LEFT)


@dataclass(frozen=True)
class VisitEvent:
    position: Position
    tile: Tile
    gold_so_far: int


@dataclass(frozen=True)
class EdgeEvent:
    source: Position
    target: Position


TraversalEvent = Union[VisitEvent, EdgeEvent]


@dataclass
class TraversalResult:
    gold: int = 0
    visited: List[Position] = field(default_factory=list)
    edges: List[Tuple[Position, Position]] = field(default_factory=list)


class GoldTraversal:
    """Restartable flood fill from `start` through Floor and Gold tiles.

    Iterating yields a VisitEvent for the start cell and then, for every
    newly enqueued neighbor, the EdgeEvent that discovered it followed by
    its VisitEvent. Each iteration runs with a fresh queue and visited set.
    """

    def __init__(self, grid: Grid, start: Position):
        if tile_at(grid, start) is None:
            raise ValueError(f"start position {start} is outside the map")
        self.grid = grid
        self.start = start

    def __iter__(self) -> Iterator[TraversalEvent]:
        return self._events()

    def _events(self) -> Iterator[TraversalEvent]:
        queue: Deque[Position] = deque([self.start])
        visited: Set[Position] = {self.start}

        start_tile = tile_at(self.grid, self.start)
        gold = 1 if start_tile == Tile.GOLD else 0
        yield VisitEvent(self.start, start_tile, gold)

        while queue:
            current = queue.popleft()
            for direction in COMPASS_ORDER:
                neighbor = direction.step(current)
                if neighbor in visited:
                    continue
                tile = tile_at(self.grid, neighbor)
                if tile is None or not tile.is_traversable:
                    continue

                visited.add(neighbor)
                queue.append(neighbor)
                if tile == Tile.GOLD:
                    gold += 1
                yield EdgeEvent(current, neighbor)
                yield VisitEvent(neighbor, tile, gold)

    def run(self) -> TraversalResult:
        return collect_events(self)


def collect_events(events: Iterable[TraversalEvent]) -> TraversalResult:
    result = TraversalResult()
    for event in events:
        if isinstance(event, VisitEvent):
            result.visited.append(event.position)
            result.gold = event.gold_so_far
        else:
            result.edges.append((event.source, event.target))
    return result


def collect_gold(grid: Grid, start: Position) -> int:
    return GoldTraversal(grid, start).run().gold

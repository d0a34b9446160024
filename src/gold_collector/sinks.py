"""Graph visualization sinks and the driver that feeds them traversal events."""

import sys
import time
from typing import IO, Callable, Dict, List, Optional, Sequence, Tuple

from .collector import EdgeEvent, GoldTraversal, TraversalResult
from .errors import SinkUnavailableError
from .tiles import Grid, Position

Color = Tuple[int, int, int]

DEFAULT_COLOR: Color = (255, 255, 255)
VISITED_COLOR: Color = (255, 0, 0)
NODE_SPACING = 100.0

UPDATE_MODES = ("single", "batched")
SINK_FAILURE_POLICIES = ("fatal", "warn")


def node_id(position: Position) -> str:
    x, y = position
    return f"{y}_{x}"


def node_layout(grid: Grid) -> Tuple[List[str], List[Tuple[float, float]], List[str]]:
    ids = []
    positions = []
    labels = []
    for y, row in enumerate(grid):
        for x, tile in enumerate(row):
            ids.append(node_id((x, y)))
            positions.append((x * NODE_SPACING, y * NODE_SPACING))
            labels.append(tile.char)
    return ids, positions, labels


def fixed_delay(seconds: float) -> Optional[Callable[[], None]]:
    if seconds is None or seconds <= 0:
        return None
    return lambda: time.sleep(seconds)


class GraphSink:
    """Receiver of node declarations and incremental color/edge updates."""

    def connect(self) -> None:
        pass

    def declare_nodes(
        self,
        ids: Sequence[str],
        positions: Sequence[Tuple[float, float]],
        labels: Sequence[str],
        colors: Sequence[Color]
    ) -> None:
        raise NotImplementedError

    def update_nodes(
        self,
        ids: Sequence[str],
        colors: Sequence[Color],
        edges: Optional[Sequence[Tuple[str, str]]] = None
    ) -> None:
        raise NotImplementedError

    def close(self) -> None:
        pass


class NullSink(GraphSink):
    def declare_nodes(self, ids, positions, labels, colors) -> None:
        pass

    def update_nodes(self, ids, colors, edges=None) -> None:
        pass


class ConsoleSink(GraphSink):
    def __init__(self, stream: Optional[IO[str]] = None):
        self.stream = stream
        self.num_updates = 0

    def _write(self, line: str):
        print(line, file=self.stream if self.stream is not None else sys.stdout)

    def declare_nodes(self, ids, positions, labels, colors) -> None:
        self._write(f"[board] declared {len(ids)} nodes")

    def update_nodes(self, ids, colors, edges=None) -> None:
        self.num_updates += 1
        painted = [node for node, color in zip(ids, colors) if color != DEFAULT_COLOR]
        line = f"[board] update {self.num_updates}: {len(painted)} visited"
        if len(ids) == 1:
            line += f" ({ids[0]})"
        if edges is not None:
            line += f", {len(edges)} edges"
            if edges:
                source, target = edges[-1]
                line += f" (last {source} -> {target})"
        self._write(line)


class GuardedSink(GraphSink):
    """Wraps a sink so that SinkUnavailableError is either raised or reported once.

    With sink_failure="warn" the first failure prints a warning to stderr and
    every later update is skipped, so the traversal still runs to completion.
    close() always reaches the wrapped sink so it can release its resources.
    """

    def __init__(self, sink: GraphSink, sink_failure: str = "fatal"):
        if sink_failure not in SINK_FAILURE_POLICIES:
            raise ValueError(f"sink_failure must be one of {SINK_FAILURE_POLICIES}, got {sink_failure!r}")
        self.sink = sink
        self.sink_failure = sink_failure
        self.failed = False

    def _call(self, method: str, *args):
        if self.failed:
            return
        try:
            getattr(self.sink, method)(*args)
        except SinkUnavailableError as e:
            if self.sink_failure == "fatal":
                raise
            self.failed = True
            print(f"Warning: visualization sink failed, continuing without it: {e}", file=sys.stderr)

    def connect(self) -> None:
        self._call("connect")

    def declare_nodes(self, ids, positions, labels, colors) -> None:
        self._call("declare_nodes", ids, positions, labels, colors)

    def update_nodes(self, ids, colors, edges=None) -> None:
        self._call("update_nodes", ids, colors, edges)

    def close(self) -> None:
        if not self.failed:
            self._call("close")
            return
        try:
            self.sink.close()
        except SinkUnavailableError:
            pass


def declare_grid(sink: GraphSink, grid: Grid) -> None:
    ids, positions, labels = node_layout(grid)
    sink.declare_nodes(ids, positions, labels, [DEFAULT_COLOR] * len(ids))


def stream_traversal(
    sink: GraphSink,
    traversal: GoldTraversal,
    update_mode: str = "batched",
    pace: Optional[Callable[[], None]] = None
) -> TraversalResult:
    """Drive traversal events into `sink`, one update per visited node.

    "single" sends just the visited node; "batched" sends every node with its
    current color together with all edges discovered so far.
    """
    if update_mode not in UPDATE_MODES:
        raise ValueError(f"update_mode must be one of {UPDATE_MODES}, got {update_mode!r}")

    ids, _, _ = node_layout(traversal.grid)
    colors: Dict[str, Color] = {node: DEFAULT_COLOR for node in ids}
    edge_ids: List[Tuple[str, str]] = []
    result = TraversalResult()

    for event in traversal:
        if isinstance(event, EdgeEvent):
            result.edges.append((event.source, event.target))
            edge_ids.append((node_id(event.source), node_id(event.target)))
            continue

        result.visited.append(event.position)
        result.gold = event.gold_so_far
        visited_id = node_id(event.position)
        colors[visited_id] = VISITED_COLOR

        if pace is not None:
            pace()
        if update_mode == "single":
            sink.update_nodes([visited_id], [VISITED_COLOR])
        else:
            sink.update_nodes(list(colors), list(colors.values()), list(edge_ids))

    return result

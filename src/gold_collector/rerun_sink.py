"""Streams the board to a Rerun viewer as graph nodes and edges."""

from pathlib import Path
from typing import Dict, List, Optional, Tuple

import rerun as rr

from .errors import SinkUnavailableError
from .sinks import Color, GraphSink

ENTITY_PATH = "board"


class RerunSink(GraphSink):
    """Logs the board under the "board" entity of a Rerun recording.

    By default the recording connects to a running viewer over gRPC (`url`
    of None means the viewer's default address). With `save_path` the
    recording is written to an .rrd file instead, which needs no viewer.
    """

    def __init__(self, url: Optional[str] = None, save_path: Optional[str] = None, application_id: str = "board"):
        self.url = url
        self.save_path = Path(save_path) if save_path else None
        self.application_id = application_id
        self.recording: Optional[rr.RecordingStream] = None
        self.ids: List[str] = []
        self.positions: Dict[str, Tuple[float, float]] = {}
        self.labels: Dict[str, str] = {}
        self.colors: Dict[str, Color] = {}

    def connect(self) -> None:
        try:
            recording = rr.RecordingStream(self.application_id)
            if self.save_path is not None:
                self.save_path.parent.mkdir(parents=True, exist_ok=True)
                recording.save(str(self.save_path))
            elif self.url is not None:
                recording.connect_grpc(self.url)
            else:
                recording.connect_grpc()
        except (RuntimeError, ConnectionError, OSError, ValueError) as e:
            raise SinkUnavailableError(f"could not reach rerun viewer: {e}") from e
        self.recording = recording

    def _log(self, entity, static: bool = False):
        if self.recording is None:
            self.connect()
        try:
            self.recording.log(ENTITY_PATH, entity, static=static)
        except (RuntimeError, ConnectionError, OSError) as e:
            raise SinkUnavailableError(f"could not log to rerun viewer: {e}") from e

    def _nodes(self) -> rr.GraphNodes:
        return rr.GraphNodes(
            self.ids,
            positions=[self.positions[node] for node in self.ids],
            labels=[self.labels[node] for node in self.ids],
            colors=[self.colors[node] for node in self.ids],
        )

    def declare_nodes(self, ids, positions, labels, colors) -> None:
        self.ids = list(ids)
        self.positions = dict(zip(ids, positions))
        self.labels = dict(zip(ids, labels))
        self.colors = dict(zip(ids, colors))
        self._log(self._nodes(), static=True)

    def update_nodes(self, ids, colors, edges=None) -> None:
        for node, color in zip(ids, colors):
            self.colors[node] = color
        self._log(self._nodes())
        if edges:
            self._log(rr.GraphEdges(list(edges), graph_type="directed"))

    def close(self) -> None:
        if self.recording is None:
            return
        try:
            self.recording.flush()
            self.recording.disconnect()
        except (RuntimeError, ConnectionError, OSError) as e:
            raise SinkUnavailableError(f"could not flush rerun recording: {e}") from e
        finally:
            self.recording = None

"""Matplotlib rendering of gold collector maps and traversals."""

import os
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import matplotlib.pyplot as plt
import matplotlib.patches as mpatches

from .collector import TraversalResult
from .errors import SinkUnavailableError
from .sinks import DEFAULT_COLOR, NODE_SPACING, VISITED_COLOR, Color, GraphSink, node_id, node_layout
from .tiles import Grid

ICON_COLORS = {
    'P': ('darkblue', 'white'),
    'G': ('gold', 'black'),
}
WALL_FACECOLOR = 'dimgray'
TRAP_FACECOLOR = 'lightsalmon'


def _to_rgb(color: Color) -> Tuple[float, float, float]:
    return color[0] / 255.0, color[1] / 255.0, color[2] / 255.0


def _draw_board(
    ax,
    positions: Dict[str, Tuple[float, float]],
    labels: Dict[str, str],
    colors: Dict[str, Color],
    edges: Sequence[Tuple[str, str]],
    title: str = 'Gold Collector'
) -> None:
    ax.clear()
    ax.set_aspect('equal')
    ax.axis('off')

    box_size = NODE_SPACING * 0.7
    icon_radius = NODE_SPACING * 0.18

    for source, target in edges:
        if source not in positions or target not in positions:
            continue
        x1, y1 = positions[source]
        x2, y2 = positions[target]
        ax.plot([x1, x2], [-y1, -y2], 'k-', linewidth=1.5, alpha=0.6, zorder=1)

    for name, (x, y) in positions.items():
        label = labels[name]
        color = colors.get(name, DEFAULT_COLOR)
        facecolor = _to_rgb(color)
        if color == DEFAULT_COLOR:
            if label == '#':
                facecolor = WALL_FACECOLOR
            elif label == 'T':
                facecolor = TRAP_FACECOLOR

        box = mpatches.FancyBboxPatch(
            (x - box_size / 2, -y - box_size / 2),
            box_size, box_size,
            boxstyle="round,pad=3",
            facecolor=facecolor,
            edgecolor='black',
            linewidth=1.5,
            zorder=2
        )
        ax.add_patch(box)

        if label in ICON_COLORS:
            circle_color, text_color = ICON_COLORS[label]
            ax.add_patch(mpatches.Circle((x, -y), icon_radius, color=circle_color, zorder=3))
            ax.text(x, -y, label, ha='center', va='center', fontsize=10, color=text_color, fontweight='bold', zorder=4)
        elif label != '.':
            ax.text(x, -y, label, ha='center', va='center', fontsize=10, fontweight='bold', zorder=4)

    if positions:
        all_x = [x for x, y in positions.values()]
        all_y = [-y for x, y in positions.values()]
        ax.set_xlim(min(all_x) - NODE_SPACING, max(all_x) + NODE_SPACING)
        ax.set_ylim(min(all_y) - NODE_SPACING, max(all_y) + NODE_SPACING)

    ax.set_title(title, fontsize=16, fontweight='bold', pad=5)


def visualize_map(
    grid: Grid,
    result: Optional[TraversalResult] = None,
    output_path: Optional[str] = None,
    figsize: Tuple[int, int] = (10, 8)
) -> str:
    if output_path is None:
        output_path = "out/map.png"

    output_dir = os.path.dirname(output_path)
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)

    if not grid:
        raise ValueError("Map has no rows to draw.")

    ids, positions, labels = node_layout(grid)
    colors = {name: DEFAULT_COLOR for name in ids}
    edges: List[Tuple[str, str]] = []
    title = 'Gold Collector'
    if result is not None:
        for position in result.visited:
            colors[node_id(position)] = VISITED_COLOR
        edges = [(node_id(source), node_id(target)) for source, target in result.edges]
        title = f'Gold Collector ({result.gold} gold, {len(result.visited)} visited)'

    fig, ax = plt.subplots(figsize=figsize)
    _draw_board(ax, dict(zip(ids, positions)), dict(zip(ids, labels)), colors, edges, title)
    plt.tight_layout()
    fig.savefig(output_path, dpi=150, bbox_inches='tight')
    plt.close(fig)
    return output_path


class MatplotlibSink(GraphSink):
    """Animated board in a matplotlib figure.

    Without an output directory the figure is shown live and refreshed with
    plt.pause after every update; with one, each update is also written as a
    numbered PNG frame and the last state as final.png.
    """

    def __init__(
        self,
        output_dir: Optional[str] = None,
        figsize: Tuple[int, int] = (10, 8),
        refresh: float = 0.001,
        verbose: bool = True
    ):
        self.output_dir = Path(output_dir) if output_dir else None
        self.figsize = figsize
        self.refresh = refresh
        self.verbose = verbose
        self.fig = None
        self.ax = None
        self.positions: Dict[str, Tuple[float, float]] = {}
        self.labels: Dict[str, str] = {}
        self.colors: Dict[str, Color] = {}
        self.edges: List[Tuple[str, str]] = []
        self.num_frames = 0

    def connect(self) -> None:
        try:
            if self.output_dir is not None:
                self.output_dir.mkdir(parents=True, exist_ok=True)
            else:
                plt.ion()
            self.fig, self.ax = plt.subplots(figsize=self.figsize)
        except (OSError, RuntimeError, ImportError, ValueError) as e:
            raise SinkUnavailableError(f"could not open matplotlib board: {e}") from e

    def declare_nodes(self, ids, positions, labels, colors) -> None:
        if self.fig is None:
            self.connect()
        self.positions = dict(zip(ids, positions))
        self.labels = dict(zip(ids, labels))
        self.colors = dict(zip(ids, colors))
        self.edges = []
        self._render(save=False)

    def update_nodes(self, ids, colors, edges=None) -> None:
        for name, color in zip(ids, colors):
            self.colors[name] = color
        if edges is not None:
            self.edges = list(edges)
        self._render(save=True)

    def _render(self, save: bool):
        _draw_board(self.ax, self.positions, self.labels, self.colors, self.edges)
        try:
            if self.output_dir is not None:
                if save:
                    self.num_frames += 1
                    self.fig.savefig(self.output_dir / f"frame_{self.num_frames:04d}.png", dpi=100)
            else:
                plt.pause(self.refresh)
        except (OSError, RuntimeError) as e:
            raise SinkUnavailableError(f"could not draw matplotlib board: {e}") from e

    def close(self) -> None:
        if self.fig is None:
            return
        try:
            if self.output_dir is not None:
                self.fig.savefig(self.output_dir / "final.png", dpi=150, bbox_inches='tight')
                if self.verbose:
                    print(f"Traversal frames saved to {self.output_dir}", file=sys.stderr)
        except OSError as e:
            raise SinkUnavailableError(f"could not save final board: {e}") from e
        finally:
            plt.close(self.fig)
            self.fig = None
            self.ax = None

"""Render a map and its gold traversal to PNG files."""

import sys
import argparse
from pathlib import Path
from typing import List, Optional, Tuple

import matplotlib.pyplot as plt

from gold_collector import GoldCollectorError, GoldTraversal, TraversalResult, find_player, read_map
from gold_collector.map import UNKNOWN_TILE_POLICIES
from gold_collector.visualize import visualize_map


def render_traversal(map_path: str, output_dir: str = 'out', unknown_tiles: str = 'drop') -> Tuple[Path, Optional[Path], Optional[TraversalResult]]:
    grid = read_map(map_path, unknown_tiles)
    out = Path(output_dir)

    base_map_path = Path(visualize_map(grid, output_path=str(out / "map_base.png")))

    start = find_player(grid)
    if start is None:
        return base_map_path, None, None

    result = GoldTraversal(grid, start).run()
    full_map_path = Path(visualize_map(grid, result, output_path=str(out / "map_with_traversal.png")))
    return base_map_path, full_map_path, result


def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(
        description='Render a map and the gold traversal from its player'
    )
    parser.add_argument(
        'map_file',
        type=str,
        help='Path to map file'
    )
    parser.add_argument(
        '--output-dir',
        type=str,
        default='out',
        help='Directory for the rendered images (default: out)'
    )
    parser.add_argument(
        '--unknown-tiles',
        choices=UNKNOWN_TILE_POLICIES,
        default='drop',
        help='What to do with unrecognized map characters'
    )

    args = parser.parse_args(argv)

    try:
        base_map_path, full_map_path, result = render_traversal(args.map_file, args.output_dir, args.unknown_tiles)
        print(f"Base map saved to {base_map_path}")
        if full_map_path is None:
            print("No player found on the map.")
        else:
            print(f"Traversal visualization saved to {full_map_path}")
            print(f"Maximum gold collected: {result.gold}")

    except (GoldCollectorError, OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        plt.close('all')


if __name__ == '__main__':
    main()

"""Count the gold a player can reach on an ASCII map and stream the search to a sink."""

import os
import sys
import argparse
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, IO, List, Optional

import yaml
from dotenv import load_dotenv

from gold_collector import ConfigError, GoldCollectorError, GoldTraversal, find_player, format_map, read_map
from gold_collector.map import UNKNOWN_TILE_POLICIES
from gold_collector.sinks import (
    SINK_FAILURE_POLICIES,
    UPDATE_MODES,
    ConsoleSink,
    GraphSink,
    GuardedSink,
    NullSink,
    declare_grid,
    fixed_delay,
    stream_traversal,
)

SINKS = ('none', 'console', 'matplotlib', 'rerun')
DEFAULT_CONFIG_PATH = 'config.yaml'


@dataclass
class RunConfig:
    input: Optional[str] = None
    sink: str = 'none'
    update_mode: str = 'batched'
    delay: float = 0.0
    unknown_tiles: str = 'drop'
    sink_failure: str = 'fatal'
    output_dir: Optional[str] = None
    rerun_url: Optional[str] = None
    quiet: bool = False


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.lower() in ('true', '1', 'yes', 'on')
    return bool(value)


def _check_choice(key: str, value: Any, choices: tuple) -> str:
    if value not in choices:
        raise ConfigError(f"{key} must be one of {', '.join(choices)}, got {value!r}")
    return value


def build_config(raw: Dict[str, Any], overrides: Optional[Dict[str, Any]] = None) -> RunConfig:
    merged = dict(raw)
    for key, value in (overrides or {}).items():
        if value is not None:
            merged[key] = value

    known = {f.name for f in fields(RunConfig)}
    unknown = sorted(set(merged) - known)
    if unknown:
        raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")

    config = RunConfig(**merged)

    config.sink = _check_choice('sink', config.sink, SINKS)
    config.update_mode = _check_choice('update_mode', config.update_mode, UPDATE_MODES)
    config.unknown_tiles = _check_choice('unknown_tiles', config.unknown_tiles, UNKNOWN_TILE_POLICIES)
    config.sink_failure = _check_choice('sink_failure', config.sink_failure, SINK_FAILURE_POLICIES)
    config.quiet = _as_bool(config.quiet)

    try:
        config.delay = float(config.delay if config.delay is not None else 0.0)
    except (TypeError, ValueError):
        raise ConfigError(f"delay must be a number of seconds, got {config.delay!r}")
    if config.delay < 0:
        raise ConfigError(f"delay must be non-negative, got {config.delay}")

    return config


def make_sink(config: RunConfig) -> GraphSink:
    if config.sink == 'console':
        return ConsoleSink()
    if config.sink == 'matplotlib':
        from gold_collector.visualize import MatplotlibSink
        return MatplotlibSink(output_dir=config.output_dir, verbose=not config.quiet)
    if config.sink == 'rerun':
        from gold_collector.rerun_sink import RerunSink
        save_path = str(Path(config.output_dir) / 'board.rrd') if config.output_dir else None
        return RerunSink(url=config.rerun_url, save_path=save_path)
    return NullSink()


def run(config: RunConfig, stdin: Optional[IO[str]] = None) -> Optional[int]:
    """Returns the gold count, or None when the map has no player."""
    verbose = not config.quiet
    source = config.input if config.input else (stdin if stdin is not None else sys.stdin)
    grid = read_map(source, config.unknown_tiles)

    print(format_map(grid))

    sink = GuardedSink(make_sink(config), config.sink_failure)
    try:
        sink.connect()
        declare_grid(sink, grid)

        start = find_player(grid)
        if start is None:
            print("No player found on the map.")
            return None

        if verbose and config.sink != 'none':
            print(f"Streaming traversal from {start} to {config.sink} sink ({config.update_mode} updates)", file=sys.stderr)

        result = stream_traversal(sink, GoldTraversal(grid, start), config.update_mode, fixed_delay(config.delay))

        if verbose:
            print(f"Visited {len(result.visited)} tiles along {len(result.edges)} edges", file=sys.stderr)
        print(f"Maximum gold collected: {result.gold}")
        return result.gold
    finally:
        sink.close()


def load_env_file(env_path: str = '.env') -> None:
    env_file = Path(env_path)
    if env_file.exists():
        load_dotenv(env_path, override=True)


def load_config(config_path: Optional[str]) -> Dict[str, Any]:
    if config_path is None:
        if not Path(DEFAULT_CONFIG_PATH).exists():
            return {}
        config_path = DEFAULT_CONFIG_PATH

    try:
        with open(config_path, 'r') as f:
            config = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigError(f"Config file {config_path} not found")
    except yaml.YAMLError as e:
        raise ConfigError(f"Error parsing YAML config {config_path}: {e}")

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping")
    return config


def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(description='Count the gold reachable by the player on an ASCII map')
    parser.add_argument('--config', type=str, default=None,
                        help=f'Path to YAML config file (default: $GOLD_COLLECTOR_CONFIG or {DEFAULT_CONFIG_PATH})')
    parser.add_argument('--input', type=str, default=None,
                        help='Read the map from this file instead of standard input')
    parser.add_argument('--sink', choices=SINKS, default=None,
                        help='Visualization sink for traversal updates')
    parser.add_argument('--delay', type=float, default=None,
                        help='Seconds to wait before each visited-node update')
    parser.add_argument('--update-mode', choices=UPDATE_MODES, default=None,
                        help='Send only the visited node (single) or the whole board with edges (batched)')
    parser.add_argument('--unknown-tiles', choices=UNKNOWN_TILE_POLICIES, default=None,
                        help='What to do with unrecognized map characters')
    parser.add_argument('--output-dir', type=str, default=None,
                        help='Directory for matplotlib frames or the rerun recording file')
    parser.add_argument('--rerun-url', type=str, default=None,
                        help='gRPC address of a running rerun viewer')
    parser.add_argument('--quiet', action='store_true', default=None,
                        help='Suppress informational output')

    args = parser.parse_args(argv)

    load_env_file('.env')
    config_path = args.config or os.getenv('GOLD_COLLECTOR_CONFIG')

    try:
        config = build_config(load_config(config_path), {
            'input': args.input,
            'sink': args.sink,
            'delay': args.delay,
            'update_mode': args.update_mode,
            'unknown_tiles': args.unknown_tiles,
            'output_dir': args.output_dir,
            'rerun_url': args.rerun_url,
            'quiet': args.quiet,
        })
        run(config)

    except KeyboardInterrupt:
        print("Interrupted.", file=sys.stderr)
        sys.exit(130)
    except (GoldCollectorError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()

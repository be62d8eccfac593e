#!/usr/bin/env python3
"""
Maze Pursuit Simulation

Headless episode runner for the grid pursuit game. The player is driven by
a breadth-first autopilot; pursuers follow their FSM and pathfinding
configuration. Time is simulated: each tick advances the clock by the
configured tick interval, so runs are reproducible.

Usage:
    python -m maze_pursuit.main [--config configs/default.yaml] [options]

Examples:
    python -m maze_pursuit.main --level 2 --ticks 500
    python -m maze_pursuit.main --config configs/default.yaml --preset hard --out-dir results/
    python -m maze_pursuit.main --no-csv --quiet --seed 42
    python -m maze_pursuit.main --level 1 --compare 9 11 1 1
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import yaml

from .autopilot import autopilot_direction
from .config import DIFFICULTY_PRESETS, apply_difficulty_preset, default_config, load_config
from .export.csv_writer import FrameCSVWriter, MetricsCSVWriter
from .export.reporter import Reporter, format_comparison
from .model.engine import SimulationEngine, create_world, tick_interval
from .model.pathfinding import compare_algorithms


class SteppedClock:
    """Simulated wall clock advanced explicitly by the runner."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description='Maze Pursuit Simulation',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python -m maze_pursuit.main --level 2 --ticks 500
    python -m maze_pursuit.main --config configs/default.yaml --preset hard --out-dir results/
    python -m maze_pursuit.main --no-csv --quiet --seed 42
    python -m maze_pursuit.main --level 1 --compare 9 11 1 1
        """
    )

    parser.add_argument('--config', type=Path, default=None,
                        help='Path to YAML configuration file (default: built-in defaults)')

    # Optional overrides
    parser.add_argument('--level', type=int, default=None,
                        help='Built-in level number')
    parser.add_argument('--preset', choices=DIFFICULTY_PRESETS, default=None,
                        help='Difficulty preset')
    parser.add_argument('--ticks', type=int, default=None,
                        help='Override max simulation ticks')
    parser.add_argument('--out-dir', type=Path, default=None,
                        help='Output directory for exports (default: ./output)')

    # Export toggles
    parser.add_argument('--csv', dest='csv', action='store_true', default=None,
                        help='Enable CSV export (default)')
    parser.add_argument('--no-csv', dest='csv', action='store_false',
                        help='Disable CSV export')

    parser.add_argument('--quiet', action='store_true', default=False,
                        help='Suppress stdout output')
    parser.add_argument('--verbose', action='store_true', default=False,
                        help='Enable debug logging')

    parser.add_argument('--seed', type=int, default=None,
                        help='Random seed for reproducibility')

    parser.add_argument('--compare', type=int, nargs=4, default=None,
                        metavar=('SX', 'SY', 'GX', 'GY'),
                        help='Compare A*, Dijkstra and BFS between two tiles and exit')

    return parser.parse_args(argv)


def run_comparison(config, coords: List[int]) -> int:
    """Print the side-by-side algorithm comparison for one tile pair."""
    grid = create_world(config).grid
    sx, sy, gx, gy = coords
    result = compare_algorithms(grid, (sx, sy), (gx, gy))
    print(format_comparison(result))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s %(name)s %(levelname)s %(message)s',
    )

    # Load configuration
    try:
        config = load_config(args.config) if args.config else default_config()
    except FileNotFoundError:
        print(f"Error: Configuration file not found: {args.config}", file=sys.stderr)
        return 1
    except (ValueError, yaml.YAMLError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return 1

    # Apply CLI overrides
    if args.preset is not None:
        config = apply_difficulty_preset(config, args.preset)
    if args.level is not None:
        config.level = args.level
        config.layout = None
    if args.ticks is not None:
        config.max_ticks = args.ticks
    if args.csv is not None:
        config.csv_enabled = args.csv
    config.quiet = args.quiet
    if args.seed is not None:
        config.seed = args.seed
    if args.out_dir is not None:
        config.out_dir = args.out_dir

    try:
        if args.compare is not None:
            return run_comparison(config, args.compare)
        clock = SteppedClock()
        engine = SimulationEngine(config, clock=clock)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    grid = engine.world.grid
    if not config.quiet:
        print("Initializing simulation...")
        print(f"  Grid: {grid.width}x{grid.height}")
        print(f"  Pellets: {grid.total_pellets}")
        print(f"  Pursuers: {', '.join(p.name for p in engine.world.pursuers)}")
        print(f"  Max ticks: {config.max_ticks}")

    # Initialize exporters
    frame_writer = None
    metrics_writer = None
    if config.csv_enabled:
        frame_writer = FrameCSVWriter(config.out_dir / 'frames.csv')
        frame_writer.open()
        metrics_writer = MetricsCSVWriter(config.out_dir / 'pathfinding_metrics.csv')
        metrics_writer.open()

    reporter = Reporter(str(args.config) if args.config else None, config.seed)
    interval = tick_interval(config)

    # Main simulation loop
    if not config.quiet:
        print("\nRunning simulation...")

    engine.start()
    try:
        while not engine.is_finished():
            engine.set_direction(autopilot_direction(engine.world))
            frame = engine.step()
            clock.advance(interval)
            if frame is None:
                break

            tick_metrics = [p.last_metrics for p in engine.world.pursuers
                            if p.last_metrics is not None]

            if frame_writer:
                frame_writer.append(frame)
            if metrics_writer:
                metrics_writer.extend(tick_metrics)

            reporter.update(frame)

            # Progress indicator
            if not config.quiet and frame.tick % 100 == 0:
                print(f"  Tick {frame.tick}: score {frame.score}, "
                      f"{frame.pellets_remaining} pellets left, {frame.lives} lives")

    except KeyboardInterrupt:
        if not config.quiet:
            print("\nSimulation interrupted by user.")

    # Cleanup
    if frame_writer:
        frame_writer.close()
    if metrics_writer:
        metrics_writer.close()
        if not config.quiet:
            print(f"\nCSV saved: {config.out_dir}")

    # Print summary report
    if not config.quiet:
        report = reporter.generate_summary(
            engine.world,
            engine.world.metrics_log,
            config.out_dir,
            config.csv_enabled,
        )
        print(report)

    return 0


if __name__ == '__main__':
    sys.exit(main())

"""
Command-line interface for PyObstacles.

Usage:
    pyobstacles summary prediction.yml
    pyobstacles query prediction.yml 2156_0 --time 3.5
    pyobstacles validate config.yml
    pyobstacles info
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from pyobstacles import __version__


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="pyobstacles",
        description="PyObstacles - Obstacle model for one planning cycle",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  pyobstacles summary prediction.yml          List obstacles built from a message
  pyobstacles query prediction.yml 2161 -t 2  Where is obstacle 2161 at t=2s
  pyobstacles validate config.yml             Validate a configuration file
        """,
    )

    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (use -vv for debug)",
    )

    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress all output except errors",
    )

    parser.add_argument(
        "--config", "-f",
        type=Path,
        help="Path to configuration file",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    summary_parser = subparsers.add_parser(
        "summary",
        help="Summarize the obstacles of a prediction message",
        description="Decode a prediction file and list the resulting obstacles",
    )
    summary_parser.add_argument("prediction_file", type=Path, help="Prediction message file")

    query_parser = subparsers.add_parser(
        "query",
        help="Query an obstacle's predicted pose",
        description="Interpolate an obstacle's pose and footprint at a relative time",
    )
    query_parser.add_argument("prediction_file", type=Path, help="Prediction message file")
    query_parser.add_argument("obstacle_id", help="Obstacle label, e.g. 2156_0")
    query_parser.add_argument(
        "--time", "-t",
        type=float,
        default=0.0,
        help="Relative time in seconds (default: 0.0)",
    )

    validate_parser = subparsers.add_parser(
        "validate",
        help="Validate a configuration file",
        description="Validate a YAML configuration file",
    )
    validate_parser.add_argument("config_file", type=Path, help="Path to configuration file")

    subparsers.add_parser(
        "info",
        help="Show system information",
        description="Display system and dependency information",
    )

    return parser


def setup_logging(verbose: int, quiet: bool) -> None:
    """Setup logging based on verbosity level."""
    import logging
    from pyobstacles.logging import setup_logging as _setup_logging

    if quiet:
        level = logging.ERROR
    elif verbose >= 2:
        level = logging.DEBUG
    elif verbose >= 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    _setup_logging(level=level, force=True)


def _build_registry(args: argparse.Namespace):
    from pyobstacles.config import ConfigManager
    from pyobstacles.logging import profile_scope
    from pyobstacles.message import load_prediction_message
    from pyobstacles.obstacle import create_obstacles
    from pyobstacles.registry import IndexedObstacles

    config = ConfigManager(args.config).load()
    message = load_prediction_message(args.prediction_file, strict=config.message.strict)
    with profile_scope("build registry"):
        return IndexedObstacles.from_obstacles(
            create_obstacles(message),
            duplicate_policy=config.registry.duplicate_policy,
        )


def cmd_summary(args: argparse.Namespace) -> int:
    """Execute the summary command."""
    from pyobstacles.exceptions import PyObstaclesError

    try:
        registry = _build_registry(args)
    except PyObstaclesError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"{len(registry)} obstacles")
    for obstacle in registry.items():
        perception_type = obstacle.perception.type
        type_name = perception_type.name if perception_type is not None else "UNSET"
        kind = "static" if obstacle.is_static else "dynamic"
        print(f"  {obstacle.id.label:<12} {type_name:<18} {kind:<8} "
              f"points={len(obstacle.trajectory)}")
    return 0


def cmd_query(args: argparse.Namespace) -> int:
    """Execute the query command."""
    from pyobstacles.exceptions import PyObstaclesError

    try:
        registry = _build_registry(args)
        obstacle = registry.find(args.obstacle_id)
        if obstacle is None:
            print(f"Unknown obstacle: {args.obstacle_id}", file=sys.stderr)
            return 1
        point = obstacle.point_at_time(args.time)
    except PyObstaclesError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    box = obstacle.bounding_box_at(point)
    print(f"Obstacle {obstacle.id} at t={point.relative_time:.3f}s")
    print(f"  x={point.x:.3f} y={point.y:.3f} heading={point.heading:.4f} v={point.v:.3f}")
    print("  corners:")
    for cx, cy in box.get_all_corners():
        print(f"    ({cx:.3f}, {cy:.3f})")
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    """Execute the validate command."""
    from pyobstacles.config import ConfigManager
    from pyobstacles.exceptions import ConfigurationError

    try:
        manager = ConfigManager(args.config_file)
        config = manager.load(validate=True)
        print(f"Configuration file '{args.config_file}' is valid.")
        print(f"  Duplicate policy: {config.registry.duplicate_policy}")
        print(f"  Strict messages: {config.message.strict}")
        return 0

    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error reading configuration: {e}", file=sys.stderr)
        return 1


def cmd_info(args: argparse.Namespace) -> int:
    """Execute the info command."""
    import platform

    print("PyObstacles System Information")
    print("=" * 40)
    print(f"PyObstacles version: {__version__}")
    print(f"Python version: {platform.python_version()}")
    print(f"Platform: {platform.platform()}")
    print()

    print("Dependencies:")
    for dep in ("numpy", "yaml"):
        try:
            mod = __import__(dep)
            version = getattr(mod, "__version__", "unknown")
            print(f"  {dep}: {version}")
        except ImportError:
            print(f"  {dep}: NOT INSTALLED")

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:]).

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose, args.quiet)

    if args.command == "summary":
        return cmd_summary(args)
    elif args.command == "query":
        return cmd_query(args)
    elif args.command == "validate":
        return cmd_validate(args)
    elif args.command == "info":
        return cmd_info(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python
"""
Simple CLI for routing diagram layouts
Usage: python route.py run layout.yaml [--reroute | --optimize]
"""

import sys
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from wire_router import DiagramSession, RouterConfig
from wire_router.cli import (
    setup_argument_parser,
    determine_run_mode,
    discover_config,
    load_layout,
    print_collision_table,
    print_mode_info,
    print_reroute_results,
    print_separator,
    print_stats,
    print_wire_table,
    run_init_command,
)
from wire_router.exceptions import WireRouterError


def setup_logging(log_file: Optional[Path] = None, log_level: str = 'INFO') -> None:
    """
    Configure logging to output to console and, optionally, a file

    Args:
        log_file: Optional path to log file
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    formatter = logging.Formatter(
        '%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # File handler
    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    # Console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(getattr(logging, log_level.upper()))
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    logging.getLogger('wire_router').setLevel(logging.DEBUG)


def load_config(explicit_path: Optional[str]) -> RouterConfig:
    """Load the discovered config file, or defaults when there is none"""
    config_file = discover_config(explicit_path)
    if config_file is None:
        print("📋 No config file found, using defaults")
        return RouterConfig()

    print(f"📋 Loading config from: {config_file}")
    return RouterConfig.from_yaml(config_file)


def run_layout(args) -> int:
    """Route a layout file and print the results"""
    start_time = datetime.now()

    try:
        config = load_config(args.config)
        layout = load_layout(args.layout_file)
    except (FileNotFoundError, WireRouterError) as e:
        print(f"❌ {e}")
        return 1

    setup_logging(config.log_file, log_level=args.log_level or config.log_level)
    logger = logging.getLogger(__name__)

    run_mode = determine_run_mode(args)
    print_mode_info(run_mode)

    session = DiagramSession(config, canvas=layout.canvas)
    session.set_components(layout.components)
    session.set_connections(layout.connections)

    session.route_all_connections()
    session.detect_collisions()

    if run_mode == 'reroute':
        print_separator()
        print_reroute_results(session.auto_reroute_collisions())
    elif run_mode == 'optimize':
        session.optimize_layout()
        session.detect_collisions()

    print_separator()
    print_wire_table(session.wires)
    print_separator()
    print_collision_table(session.collisions)
    print_separator()
    print_stats(session.get_stats())

    duration = (datetime.now() - start_time).total_seconds()
    logger.info(f"Routing completed in {duration:.2f} seconds")
    return 0


def main():
    """Main entry point for wire-router CLI"""
    parser = setup_argument_parser()
    args = parser.parse_args()

    if args.command == 'init':
        sys.exit(run_init_command(force=args.force, path=args.path))

    sys.exit(run_layout(args))


if __name__ == '__main__':
    main()

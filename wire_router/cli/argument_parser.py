"""
Command-line argument parser configuration with subcommands
"""

import argparse


def setup_argument_parser() -> argparse.ArgumentParser:
    """
    Configure and return the argument parser with subcommands (init, run)

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog='wire-router',
        description='Orthogonal wire routing and collision checks for diagram layouts',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Initialize configuration
  wire-router init                              # Create ./router_config.yaml
  wire-router init --force                      # Overwrite existing config
  wire-router init --path ./my_router.yaml      # Create in custom location

  # Route a layout
  wire-router run layout.yaml                   # Route all connections, report collisions
  wire-router run layout.yaml --reroute         # Also re-route colliding wires
  wire-router run layout.yaml --optimize        # Re-route everything shortest first
  wire-router run layout.yaml --log-level DEBUG # Show strategy decisions
        """
    )

    # Create subcommands
    subparsers = parser.add_subparsers(
        dest='command',
        required=True,
        help='Command to execute'
    )

    # ========================================================================
    # INIT SUBCOMMAND
    # ========================================================================
    init_parser = subparsers.add_parser(
        'init',
        help='Create a new configuration file',
        description='Initialize wire-router by creating a configuration file'
    )

    init_parser.add_argument(
        '--force', '-f',
        action='store_true',
        help='Overwrite existing configuration file'
    )

    init_parser.add_argument(
        '--path', '-p',
        type=str,
        help='Custom path for config file (default: ./router_config.yaml)'
    )

    # ========================================================================
    # RUN SUBCOMMAND
    # ========================================================================
    run_parser = subparsers.add_parser(
        'run',
        help='Route a diagram layout',
        description='Route every connection of a layout file and report collisions'
    )

    run_parser.add_argument(
        'layout_file',
        help='Path to YAML layout file (canvas, components, connections)'
    )

    run_parser.add_argument(
        '--config',
        type=str,
        help='Path to router configuration (optional, will auto-discover)'
    )

    run_parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        default=None,
        help='Set logging level (default: from config, else INFO)'
    )

    # Post-processing modes
    mode_group = run_parser.add_mutually_exclusive_group()
    mode_group.add_argument(
        '--reroute', '-r',
        action='store_true',
        help='Re-route wires involved in high-severity collisions'
    )
    mode_group.add_argument(
        '--optimize', '-o',
        action='store_true',
        help='Re-route all wires shortest first'
    )

    return parser


def determine_run_mode(args: argparse.Namespace) -> str:
    """
    Determine post-processing mode from parsed arguments

    Returns:
        'reroute', 'optimize' or 'route'
    """
    if args.reroute:
        return 'reroute'
    elif args.optimize:
        return 'optimize'
    else:
        return 'route'

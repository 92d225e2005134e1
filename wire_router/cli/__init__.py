"""
CLI utilities for route.py
"""

from .argument_parser import setup_argument_parser, determine_run_mode
from .output import (
    print_mode_info,
    print_separator,
    print_wire_table,
    print_collision_table,
    print_reroute_results,
    print_stats,
)
from .config_files import config_search_paths, discover_config, run_init_command
from .layout import Layout, load_layout

__all__ = [
    'setup_argument_parser',
    'determine_run_mode',
    'print_mode_info',
    'print_separator',
    'print_wire_table',
    'print_collision_table',
    'print_reroute_results',
    'print_stats',
    'run_init_command',
    'discover_config',
    'config_search_paths',
    'Layout',
    'load_layout',
]

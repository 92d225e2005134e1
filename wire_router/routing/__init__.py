"""
Grid-based orthogonal routing for diagram wires.

This package provides the obstacle grid, the interchangeable path search
strategies and the engine that scores them and keeps routed wires.
"""

from .grid import Grid, GridCell, CellState
from .registry import WireRegistry
from .astar import astar_route, dijkstra_route
from .shortcuts import minimal_bends_route
from .strategies import Strategy, STRATEGY_PRESETS, get_routing_strategies
from .path_optimizer import compress_path, calculate_quality
from .engine import WireRoutingEngine

__all__ = [
    'Grid',
    'GridCell',
    'CellState',
    'WireRegistry',
    'astar_route',
    'dijkstra_route',
    'minimal_bends_route',
    'Strategy',
    'STRATEGY_PRESETS',
    'get_routing_strategies',
    'compress_path',
    'calculate_quality',
    'WireRoutingEngine',
]

"""
Routing strategy table.

Strategies form a closed set. Each one shares the same signature:
(start, end, grid, options, exempt) -> cell path or None. Presets list
them in priority order; the planner scores every result and keeps the
best one.
"""

from enum import Enum
from typing import Callable, Dict, List, Optional, Set

from .astar import astar_route, dijkstra_route
from .grid import Grid, GridCell
from .shortcuts import minimal_bends_route
from ..core.config import RoutingOptions


class Strategy(str, Enum):
    """Available path search strategies"""
    ASTAR = 'astar'
    DIJKSTRA = 'dijkstra'
    MINIMAL_BENDS = 'minimal_bends'
    GRID_ALIGNED = 'grid_aligned'


StrategyFunction = Callable[
    [GridCell, GridCell, Grid, RoutingOptions, Optional[Set[GridCell]]],
    Optional[List[GridCell]]
]


def grid_aligned_route(
    start: GridCell,
    end: GridCell,
    grid: Grid,
    options: RoutingOptions,
    exempt: Optional[Set[GridCell]] = None
) -> Optional[List[GridCell]]:
    """Re-snap both endpoints onto grid intersections, then delegate to A*."""
    aligned_start = grid.to_grid(grid.from_grid(start))
    aligned_end = grid.to_grid(grid.from_grid(end))
    exempt = (exempt or set()) | {aligned_start, aligned_end}
    return astar_route(aligned_start, aligned_end, grid, options, exempt)


STRATEGY_FUNCTIONS: Dict[Strategy, StrategyFunction] = {
    Strategy.ASTAR: astar_route,
    Strategy.DIJKSTRA: dijkstra_route,
    Strategy.MINIMAL_BENDS: minimal_bends_route,
    Strategy.GRID_ALIGNED: grid_aligned_route,
}

# Preset name -> strategies tried in priority order
STRATEGY_PRESETS: Dict[str, List[Strategy]] = {
    'shortest': [Strategy.ASTAR, Strategy.DIJKSTRA],
    'minimal_bends': [Strategy.MINIMAL_BENDS, Strategy.ASTAR],
    'balanced': [Strategy.ASTAR, Strategy.MINIMAL_BENDS, Strategy.DIJKSTRA],
    'grid_aligned': [Strategy.GRID_ALIGNED, Strategy.ASTAR],
}


def get_routing_strategies(preset: str) -> List[Strategy]:
    """Strategies for a preset; unknown presets use plain A*."""
    return STRATEGY_PRESETS.get(preset, [Strategy.ASTAR])


def evaluate_strategy(
    strategy: Strategy,
    start: GridCell,
    end: GridCell,
    grid: Grid,
    options: RoutingOptions,
    exempt: Optional[Set[GridCell]] = None
) -> Optional[List[GridCell]]:
    """Run a single strategy and return its cell path."""
    return STRATEGY_FUNCTIONS[strategy](start, end, grid, options, exempt)

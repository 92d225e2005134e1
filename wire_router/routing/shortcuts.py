"""
Few-bend shortcut routes.

Heuristic routing that tries L-shaped and Z-shaped paths before falling
back to expensive graph search.
"""

from typing import List, Optional, Set

from .grid import Grid, GridCell
from ..core.config import RoutingOptions


def l_shaped_routes(start: GridCell, end: GridCell) -> List[List[GridCell]]:
    """
    One-bend candidates through the two possible corner cells.

    Returns:
        [horizontal-then-vertical, vertical-then-horizontal]
    """
    return [
        [start, GridCell(end.x, start.y), end],
        [start, GridCell(start.x, end.y), end],
    ]


def z_shaped_routes(start: GridCell, end: GridCell) -> List[List[GridCell]]:
    """
    Two-bend candidates through the midpoint of the request.

    Returns:
        [horizontal-vertical-horizontal, vertical-horizontal-vertical]
    """
    mid_x = (start.x + end.x) // 2
    mid_y = (start.y + end.y) // 2

    return [
        [start, GridCell(mid_x, start.y), GridCell(mid_x, end.y), end],
        [start, GridCell(start.x, mid_y), GridCell(end.x, mid_y), end],
    ]


def is_route_valid(route: List[GridCell], grid: Grid, exempt: Set[GridCell]) -> bool:
    """Check every cell along every straight leg of a candidate route."""
    for i in range(len(route) - 1):
        if not grid.is_leg_clear(route[i], route[i + 1], exempt):
            return False
    return True


def minimal_bends_route(
    start: GridCell,
    end: GridCell,
    grid: Grid,
    options: RoutingOptions,
    exempt: Optional[Set[GridCell]] = None
) -> Optional[List[GridCell]]:
    """
    Route with as few bends as possible without searching.

    Args:
        start: Starting grid cell
        end: Goal grid cell
        grid: Grid system with obstacles
        options: Routing options (unused, kept for a uniform strategy signature)
        exempt: Cells that may be crossed even if blocked

    Returns:
        First valid L-route, else first valid Z-route, else None
    """
    exempt = exempt or {start, end}

    for route in l_shaped_routes(start, end):
        if is_route_valid(route, grid, exempt):
            return route

    for route in z_shaped_routes(start, end):
        if is_route_valid(route, grid, exempt):
            return route

    return None

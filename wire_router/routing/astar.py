"""
Graph search for orthogonal wire routing.

Implements A* and a bounded Dijkstra over the obstacle grid with a cost
function that considers:
- Path length (one unit per grid step)
- Direction changes (prefer straight lines)
- Wire occupancy (avoid cells already used by other wires)
"""

import heapq
import itertools
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

from .grid import Grid, GridCell
from ..core.config import RoutingOptions

logger = logging.getLogger(__name__)

# Search state: a cell plus the axis we arrived on ('h', 'v' or None at the start)
State = Tuple[GridCell, Optional[str]]


@dataclass(order=True)
class Node:
    """Node in A* search."""
    f_cost: float = field(compare=True)  # f = g + h
    order: int = field(compare=True)  # Insertion counter, keeps ties deterministic
    g_cost: float = field(compare=False)
    cell: GridCell = field(compare=False)
    direction: Optional[str] = field(default=None, compare=False)
    parent: Optional['Node'] = field(default=None, compare=False)


def manhattan_distance(cell1: GridCell, cell2: GridCell) -> int:
    """Calculate Manhattan distance between two cells."""
    return abs(cell1.x - cell2.x) + abs(cell1.y - cell2.y)


def move_direction(current: GridCell, neighbor: GridCell) -> str:
    """Axis of a single grid step."""
    return 'v' if neighbor.x == current.x else 'h'


def step_cost(
    grid: Grid,
    current_direction: Optional[str],
    current: GridCell,
    neighbor: GridCell,
    options: RoutingOptions,
    exempt: Set[GridCell]
) -> float:
    """
    Cost of moving one cell.

    Args:
        grid: Grid system
        current_direction: Axis the search arrived on (None at the start)
        current: Cell being expanded
        neighbor: Cell being entered
        options: Routing weights
        exempt: Cells that ignore occupancy

    Returns:
        Step cost including bend and wire penalties
    """
    cost = options.length_weight

    # Direction change penalty
    if current_direction is not None and move_direction(current, neighbor) != current_direction:
        cost += options.bend_penalty

    # Soft obstacle penalty
    if neighbor not in exempt and grid.has_wire(neighbor):
        cost += options.wire_crossing_penalty

    return cost


def reconstruct_path(node: Node) -> List[GridCell]:
    """Reconstruct path from goal node by following parent pointers."""
    path = []
    current = node

    while current is not None:
        path.append(current.cell)
        current = current.parent

    path.reverse()
    return path


def astar_route(
    start: GridCell,
    end: GridCell,
    grid: Grid,
    options: RoutingOptions,
    exempt: Optional[Set[GridCell]] = None
) -> Optional[List[GridCell]]:
    """
    Find a low-cost orthogonal path from start to end using A*.

    Args:
        start: Starting grid cell
        end: Goal grid cell
        grid: Grid system with obstacles
        options: Routing weights and iteration limit
        exempt: Cells that may be crossed even if blocked (terminal escape)

    Returns:
        List of grid cells forming path, or None if no path exists within
        options.max_iterations expansions
    """
    exempt = exempt or {start, end}

    if not grid.is_traversable(start, exempt) or not grid.is_traversable(end, exempt):
        return None

    if start == end:
        return [start]

    # Check if straight line is possible
    if (start.x == end.x or start.y == end.y) and grid.is_leg_clear(start, end, exempt):
        return [start, end]

    counter = itertools.count()
    open_set: List[Node] = []
    closed_set: Set[State] = set()
    best_g_cost: Dict[State, float] = {(start, None): 0.0}

    heapq.heappush(open_set, Node(
        f_cost=manhattan_distance(start, end) * options.length_weight,
        order=next(counter),
        g_cost=0.0,
        cell=start
    ))

    iterations = 0

    while open_set:
        iterations += 1
        if iterations > options.max_iterations:
            logger.debug(f"A* gave up after {options.max_iterations} iterations")
            return None

        current = heapq.heappop(open_set)
        state = (current.cell, current.direction)

        if current.cell == end:
            return reconstruct_path(current)

        if state in closed_set:
            continue

        closed_set.add(state)

        for neighbor_cell in grid.get_neighbors(current.cell):
            if not grid.is_traversable(neighbor_cell, exempt):
                continue

            direction = move_direction(current.cell, neighbor_cell)
            neighbor_state = (neighbor_cell, direction)
            if neighbor_state in closed_set:
                continue

            g_cost = current.g_cost + step_cost(
                grid, current.direction, current.cell, neighbor_cell, options, exempt
            )

            # Skip if we've found a better path to this state
            if neighbor_state in best_g_cost and g_cost >= best_g_cost[neighbor_state]:
                continue

            best_g_cost[neighbor_state] = g_cost

            heapq.heappush(open_set, Node(
                f_cost=g_cost + manhattan_distance(neighbor_cell, end) * options.length_weight,
                order=next(counter),
                g_cost=g_cost,
                cell=neighbor_cell,
                direction=direction,
                parent=current
            ))

    return None


def dijkstra_route(
    start: GridCell,
    end: GridCell,
    grid: Grid,
    options: RoutingOptions,
    exempt: Optional[Set[GridCell]] = None
) -> Optional[List[GridCell]]:
    """
    Uniform-cost search without heuristic.

    Minimizes length first (wire penalties included) and bend count second.
    The search is confined to the endpoints' bounding box grown by
    options.dijkstra_search_margin cells.

    Returns:
        List of grid cells forming path, or None if no path exists in the region
    """
    exempt = exempt or {start, end}

    if not grid.is_traversable(start, exempt) or not grid.is_traversable(end, exempt):
        return None

    if start == end:
        return [start]

    margin = options.dijkstra_search_margin
    if margin is None:
        min_x, min_y, max_x, max_y = 0, 0, grid.cols - 1, grid.rows - 1
    else:
        min_x = max(0, min(start.x, end.x) - margin)
        min_y = max(0, min(start.y, end.y) - margin)
        max_x = min(grid.cols - 1, max(start.x, end.x) + margin)
        max_y = min(grid.rows - 1, max(start.y, end.y) + margin)

    counter = itertools.count()
    # (distance, bends, order, state)
    queue: List[Tuple[float, int, int, State]] = [(0.0, 0, next(counter), (start, None))]
    best: Dict[State, Tuple[float, int]] = {(start, None): (0.0, 0)}
    previous: Dict[State, State] = {}
    visited: Set[State] = set()

    iterations = 0

    while queue:
        iterations += 1
        if iterations > options.max_iterations:
            logger.debug(f"Dijkstra gave up after {options.max_iterations} iterations")
            return None

        distance, bends, _, state = heapq.heappop(queue)
        if state in visited:
            continue
        visited.add(state)

        cell, direction = state
        if cell == end:
            path = [cell]
            while state in previous:
                state = previous[state]
                path.append(state[0])
            path.reverse()
            return path

        for neighbor in grid.get_neighbors(cell):
            if not (min_x <= neighbor.x <= max_x and min_y <= neighbor.y <= max_y):
                continue
            if not grid.is_traversable(neighbor, exempt):
                continue

            new_direction = move_direction(cell, neighbor)
            neighbor_state = (neighbor, new_direction)
            if neighbor_state in visited:
                continue

            new_distance = distance + options.length_weight
            if neighbor not in exempt and grid.has_wire(neighbor):
                new_distance += options.wire_crossing_penalty
            new_bends = bends + (1 if direction is not None and new_direction != direction else 0)

            if neighbor_state in best and (new_distance, new_bends) >= best[neighbor_state]:
                continue

            best[neighbor_state] = (new_distance, new_bends)
            previous[neighbor_state] = state
            heapq.heappush(queue, (new_distance, new_bends, next(counter), neighbor_state))

    return None

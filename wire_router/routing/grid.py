"""
Obstacle grid for orthogonal wire routing.

Discretizes the canvas into fixed-size cells and tracks which cells are
free, blocked by a component, or occupied by an already-routed wire.
Cells are addressed by integer indices so that lookups never depend on
floating-point equality of canvas coordinates.
"""

import logging
import math
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, Iterable, List, Optional, Set, Tuple

from ..core.geometry import Point, Rectangle

logger = logging.getLogger(__name__)


class CellState(IntEnum):
    """Occupancy of a grid cell."""
    FREE = 0
    OBSTACLE = 1
    WIRE = 2


@dataclass(frozen=True)
class GridCell:
    """Integer cell index: x is the column, y the row."""
    x: int
    y: int


class Grid:
    """
    Cell-state grid spanning the canvas.

    Grid points sit at absolute multiples of ``resolution``; the origin is the
    last multiple at or before the canvas corner, and a cell is identified with
    the grid point at its center.
    """

    def __init__(self, canvas: Rectangle, resolution: int = 20):
        """
        Initialize an empty grid.

        Args:
            canvas: Canvas bounds in canvas coordinates
            resolution: Grid cell size in canvas units
        """
        self.canvas = canvas
        self.resolution = resolution
        self.origin_x = math.floor(canvas.x / resolution) * resolution
        self.origin_y = math.floor(canvas.y / resolution) * resolution

        # Grid points on both canvas edges are included
        self.cols = max(1, int(math.ceil((canvas.right - self.origin_x) / resolution)) + 1)
        self.rows = max(1, int(math.ceil((canvas.bottom - self.origin_y) / resolution)) + 1)

        self.cells: List[List[CellState]] = [
            [CellState.FREE] * self.cols for _ in range(self.rows)
        ]

        # component id -> (top-left cell, bottom-right cell)
        self.obstacle_regions: Dict[str, Tuple[GridCell, GridCell]] = {}

    # ------------------------------------------------------------------
    # Coordinate conversion
    # ------------------------------------------------------------------

    def to_grid(self, point: Point) -> GridCell:
        """Convert canvas coordinates to the nearest cell, clamped to the grid."""
        gx = int(round((point.x - self.origin_x) / self.resolution))
        gy = int(round((point.y - self.origin_y) / self.resolution))
        gx = min(max(gx, 0), self.cols - 1)
        gy = min(max(gy, 0), self.rows - 1)
        return GridCell(gx, gy)

    def from_grid(self, cell: GridCell) -> Point:
        """Convert a cell to the canvas coordinates of its grid point."""
        return Point(
            self.origin_x + cell.x * self.resolution,
            self.origin_y + cell.y * self.resolution
        )

    def snap(self, point: Point) -> Point:
        """Snap a point to the nearest grid point inside the canvas."""
        return self.from_grid(self.to_grid(point))

    # ------------------------------------------------------------------
    # Cell queries
    # ------------------------------------------------------------------

    def is_valid(self, cell: GridCell) -> bool:
        """Check if a cell is within grid bounds."""
        return 0 <= cell.x < self.cols and 0 <= cell.y < self.rows

    def state(self, cell: GridCell) -> CellState:
        return self.cells[cell.y][cell.x]

    def is_blocked(self, cell: GridCell) -> bool:
        """Check if a cell is a hard obstacle."""
        return self.state(cell) == CellState.OBSTACLE

    def has_wire(self, cell: GridCell) -> bool:
        """Check if a cell is occupied by a routed wire (soft obstacle)."""
        return self.state(cell) == CellState.WIRE

    def is_traversable(self, cell: GridCell, exempt: Optional[Set[GridCell]] = None) -> bool:
        """Check if a cell can be entered: valid and not blocked (unless exempt)."""
        if not self.is_valid(cell):
            return False
        if exempt and cell in exempt:
            return True
        return not self.is_blocked(cell)

    def get_neighbors(self, cell: GridCell) -> List[GridCell]:
        """
        Get orthogonal neighbors (no diagonals) that lie on the grid.

        Blocking is left to the caller so that exempt cells can be honored.
        """
        neighbors = []

        for dx, dy in [(0, -1), (1, 0), (0, 1), (-1, 0)]:  # Up, Right, Down, Left
            neighbor = GridCell(cell.x + dx, cell.y + dy)
            if self.is_valid(neighbor):
                neighbors.append(neighbor)

        return neighbors

    def terminal_cells(self, cell: GridCell) -> Set[GridCell]:
        """
        Cells of every obstacle region that contains the given cell.

        A wire that starts or ends inside a component is allowed to cross
        that component's own cells.
        """
        exempt = {cell}
        for top_left, bottom_right in self.obstacle_regions.values():
            if top_left.x <= cell.x <= bottom_right.x and top_left.y <= cell.y <= bottom_right.y:
                for gx in range(top_left.x, bottom_right.x + 1):
                    for gy in range(top_left.y, bottom_right.y + 1):
                        exempt.add(GridCell(gx, gy))
        return exempt

    # ------------------------------------------------------------------
    # Marking
    # ------------------------------------------------------------------

    def mark_obstacle(self, obstacle_id: str, box: Rectangle, margin: float = 10) -> bool:
        """
        Mark a rectangular region as blocked.

        Every grid point inside the box expanded by margin (border
        included) becomes an obstacle. Zero-area boxes are skipped.

        Args:
            obstacle_id: Identifier of the component
            box: Component bounds
            margin: Additional clearance around the box

        Returns:
            True if any cell was marked
        """
        if box.is_degenerate():
            logger.debug(f"Skipping degenerate obstacle {obstacle_id}")
            return False

        expanded = box.expanded(margin)
        g = self.resolution

        gx1 = max(0, int(math.ceil((expanded.x - self.origin_x) / g)))
        gy1 = max(0, int(math.ceil((expanded.y - self.origin_y) / g)))
        gx2 = min(self.cols - 1, int(math.floor((expanded.right - self.origin_x) / g)))
        gy2 = min(self.rows - 1, int(math.floor((expanded.bottom - self.origin_y) / g)))

        if gx1 > gx2 or gy1 > gy2:
            return False

        for gy in range(gy1, gy2 + 1):
            row = self.cells[gy]
            for gx in range(gx1, gx2 + 1):
                row[gx] = CellState.OBSTACLE

        self.obstacle_regions[obstacle_id] = (GridCell(gx1, gy1), GridCell(gx2, gy2))
        return True

    def mark_path(self, points: Iterable[Point]) -> int:
        """
        Mark the cells under a polyline as wire-occupied.

        Obstacle cells keep their state.

        Returns:
            Number of cells newly marked
        """
        marked = 0
        points = list(points)

        for i in range(len(points) - 1):
            start = self.to_grid(points[i])
            end = self.to_grid(points[i + 1])
            for cell in self.get_line_cells(start, end):
                if self.cells[cell.y][cell.x] == CellState.FREE:
                    self.cells[cell.y][cell.x] = CellState.WIRE
                    marked += 1

        return marked

    def clear_wires(self) -> None:
        """Reset every wire-occupied cell to free."""
        for row in self.cells:
            for gx, state in enumerate(row):
                if state == CellState.WIRE:
                    row[gx] = CellState.FREE

    # ------------------------------------------------------------------
    # Lines
    # ------------------------------------------------------------------

    def get_line_cells(self, start: GridCell, end: GridCell) -> List[GridCell]:
        """
        Get all cells along a straight line (Bresenham's algorithm).

        Orthogonal lines yield every cell between the two ends.
        """
        cells = []

        x0, y0 = start.x, start.y
        x1, y1 = end.x, end.y

        dx = abs(x1 - x0)
        dy = abs(y1 - y0)

        sx = 1 if x0 < x1 else -1
        sy = 1 if y0 < y1 else -1

        err = dx - dy

        x, y = x0, y0

        while True:
            cells.append(GridCell(x, y))

            if x == x1 and y == y1:
                break

            e2 = 2 * err

            if e2 > -dy:
                err -= dy
                x += sx

            if e2 < dx:
                err += dx
                y += sy

        return cells

    def is_leg_clear(self, start: GridCell, end: GridCell, exempt: Optional[Set[GridCell]] = None) -> bool:
        """
        Check a straight leg for the shortcut router.

        No cell may be blocked, and the leg may not run along an existing
        wire (two consecutive wire cells); single-cell crossings are allowed.
        """
        previous_wire = False
        for cell in self.get_line_cells(start, end):
            if not self.is_traversable(cell, exempt):
                return False
            on_wire = self.has_wire(cell) and not (exempt and cell in exempt)
            if on_wire and previous_wire:
                return False
            previous_wire = on_wire
        return True

    def count_cells(self, state: CellState) -> int:
        """Number of cells in a given state."""
        return sum(row.count(state) for row in self.cells)

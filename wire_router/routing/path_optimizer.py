"""
Path post-processing and scoring.

Turns raw search output into clean routed wires:
- Compress collinear runs of cells
- Convert cells to canvas coordinates
- Drop duplicate and collinear waypoints
- Score the result
"""

from typing import List

from .grid import Grid, GridCell
from ..core.config import QualityOptions
from ..core.geometry import Point, count_bends, manhattan_distance, segments_from_path, WireSegment
from ..core.models import RoutedWire


def compress_path(cells: List[GridCell]) -> List[GridCell]:
    """
    Compress path by merging collinear segments.

    Removes unnecessary waypoints where path continues in same direction.

    Args:
        cells: Raw path from pathfinding

    Returns:
        Compressed path with minimal waypoints
    """
    if len(cells) <= 2:
        return cells

    compressed = [cells[0]]

    for i in range(1, len(cells) - 1):
        prev_cell = cells[i - 1]
        curr_cell = cells[i]
        next_cell = cells[i + 1]

        dx1 = curr_cell.x - prev_cell.x
        dy1 = curr_cell.y - prev_cell.y

        dx2 = next_cell.x - curr_cell.x
        dy2 = next_cell.y - curr_cell.y

        # Keep waypoint if direction changes
        if dx1 != dx2 or dy1 != dy2:
            compressed.append(curr_cell)

    compressed.append(cells[-1])

    return compressed


def cells_to_canvas(cells: List[GridCell], grid: Grid) -> List[Point]:
    """Convert grid cells to canvas coordinates."""
    return [grid.from_grid(cell) for cell in cells]


def remove_duplicate_points(points: List[Point], tolerance: float = 0.1) -> List[Point]:
    """
    Remove consecutive duplicate points.

    Args:
        points: Polyline vertices
        tolerance: Manhattan distance below which two points are the same

    Returns:
        Deduplicated point list
    """
    if not points:
        return []

    cleaned = [points[0]]

    for point in points[1:]:
        if manhattan_distance(cleaned[-1], point) > tolerance:
            cleaned.append(point)

    return cleaned


def merge_collinear_points(points: List[Point]) -> List[Point]:
    """Drop interior vertices that continue straight in the same direction."""
    if len(points) <= 2:
        return points

    merged = [points[0]]

    for i in range(1, len(points) - 1):
        prev, curr, nxt = merged[-1], points[i], points[i + 1]
        same_x = prev.x == curr.x == nxt.x
        same_y = prev.y == curr.y == nxt.y
        forward = (curr.x - prev.x) * (nxt.x - curr.x) + (curr.y - prev.y) * (nxt.y - curr.y) > 0
        if (same_x or same_y) and forward:
            continue
        merged.append(curr)

    merged.append(points[-1])
    return merged


def calculate_quality(direct_distance: float, total_length: float, bend_count: int, bend_factor: float = 0.1) -> float:
    """
    Score a route between 0 and 1.

    quality = min(1, (direct / total) * max(0, 1 - bends * bend_factor))

    A zero-length route scores 1.0.
    """
    if total_length <= 0:
        return 1.0

    length_efficiency = direct_distance / total_length
    bend_score = max(0.0, 1.0 - bend_count * bend_factor)

    return max(0.0, min(1.0, length_efficiency * bend_score))


def build_routed_wire(
    points: List[Point],
    wire_id: str,
    connection_type: str,
    strategy: str,
    quality_options: QualityOptions
) -> RoutedWire:
    """
    Create a RoutedWire from polyline vertices.

    Args:
        points: Vertices in canvas coordinates (at least one)
        wire_id: Wire identifier
        connection_type: Electrical kind of the connection
        strategy: Name of the strategy that produced the path
        quality_options: Scoring constants

    Returns:
        RoutedWire whose totals are derived from the segments
    """
    path = merge_collinear_points(remove_duplicate_points(points))
    segments = segments_from_path(path)

    total_length = sum(segment.length for segment in segments)
    bend_count = count_bends(segments)
    quality = calculate_quality(
        manhattan_distance(path[0], path[-1]),
        total_length,
        bend_count,
        quality_options.bend_factor
    )

    return RoutedWire(
        id=wire_id,
        segments=segments,
        total_length=total_length,
        bend_count=bend_count,
        start=path[0],
        end=path[-1],
        path=path,
        quality=quality,
        connection_type=connection_type,
        strategy=strategy
    )


def build_direct_route(
    start: Point,
    end: Point,
    wire_id: str,
    connection_type: str,
    quality_options: QualityOptions
) -> RoutedWire:
    """
    Fallback route: a single segment between the requested points.

    Always renderable, flagged with the minimal fallback quality.
    """
    segments = [WireSegment(start, end)] if start != end else []

    return RoutedWire(
        id=wire_id,
        segments=segments,
        total_length=sum(segment.length for segment in segments),
        bend_count=0,
        start=start,
        end=end,
        path=[start, end] if segments else [start],
        quality=quality_options.fallback_quality,
        connection_type=connection_type,
        strategy='fallback'
    )

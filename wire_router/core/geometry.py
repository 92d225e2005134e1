"""
Geometry primitives for orthogonal wire routing.

Points, rectangles and wire segments are immutable values. The helpers
below implement the intersection tests shared by the collision detector
and the junction manager.
"""

import math
from dataclasses import dataclass
from typing import List, Optional

# Denominator below which two lines are treated as parallel
PARALLEL_EPSILON = 1e-10

HORIZONTAL = 'horizontal'
VERTICAL = 'vertical'


@dataclass(frozen=True)
class Point:
    """Canvas coordinate."""
    x: float
    y: float

    def offset(self, dx: float, dy: float) -> 'Point':
        return Point(self.x + dx, self.y + dy)


@dataclass(frozen=True)
class Rectangle:
    """Axis-aligned bounding box (x, y is the top-left corner)."""
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> Point:
        return Point(self.x + self.width / 2, self.y + self.height / 2)

    def is_degenerate(self) -> bool:
        """True for zero (or negative) area boxes."""
        return self.width <= 0 or self.height <= 0

    def contains(self, point: Point) -> bool:
        """Check if a point lies inside or on the border."""
        return self.x <= point.x <= self.right and self.y <= point.y <= self.bottom

    def expanded(self, buffer: float) -> 'Rectangle':
        """Return a copy grown by buffer on every side."""
        return Rectangle(
            x=self.x - buffer,
            y=self.y - buffer,
            width=self.width + buffer * 2,
            height=self.height + buffer * 2
        )

    def corners(self) -> List[Point]:
        """Corners in drawing order: top-left, top-right, bottom-right, bottom-left."""
        return [
            Point(self.x, self.y),
            Point(self.right, self.y),
            Point(self.right, self.bottom),
            Point(self.x, self.bottom),
        ]

    def moved_to(self, position: Point) -> 'Rectangle':
        return Rectangle(position.x, position.y, self.width, self.height)


@dataclass(frozen=True)
class WireSegment:
    """
    Straight piece of a routed wire.

    Direction and length are derived from the endpoints and can't be set
    independently.
    """
    start: Point
    end: Point

    @property
    def direction(self) -> str:
        return direction_between(self.start, self.end)

    @property
    def length(self) -> float:
        return manhattan_distance(self.start, self.end)

    def is_horizontal(self, tolerance: float = 0.1) -> bool:
        return abs(self.start.y - self.end.y) < tolerance

    def is_vertical(self, tolerance: float = 0.1) -> bool:
        return abs(self.start.x - self.end.x) < tolerance

    def has_endpoint(self, point: Point, tolerance: float) -> bool:
        return points_close(self.start, point, tolerance) or points_close(self.end, point, tolerance)

    def far_endpoint(self, point: Point, tolerance: float) -> Point:
        """Endpoint opposite to the one near point."""
        return self.end if points_close(self.start, point, tolerance) else self.start


def direction_between(start: Point, end: Point) -> str:
    """Dominant axis of travel between two points."""
    return HORIZONTAL if abs(end.x - start.x) > abs(end.y - start.y) else VERTICAL


def manhattan_distance(a: Point, b: Point) -> float:
    """|dx| + |dy| between two points."""
    return abs(a.x - b.x) + abs(a.y - b.y)


def point_distance(a: Point, b: Point) -> float:
    """Euclidean distance between two points."""
    return math.hypot(b.x - a.x, b.y - a.y)


def points_close(a: Point, b: Point, tolerance: float) -> bool:
    """Per-axis closeness test."""
    return abs(a.x - b.x) < tolerance and abs(a.y - b.y) < tolerance


def segments_from_path(path: List[Point]) -> List[WireSegment]:
    """Build consecutive segments from a polyline."""
    return [WireSegment(path[i], path[i + 1]) for i in range(len(path) - 1)]


def count_bends(segments: List[WireSegment]) -> int:
    """Number of direction changes between consecutive segments."""
    bends = 0
    for i in range(1, len(segments)):
        if segments[i].direction != segments[i - 1].direction:
            bends += 1
    return bends


def line_intersection(p1: Point, p2: Point, p3: Point, p4: Point) -> Optional[Point]:
    """
    Intersection of segment p1-p2 with segment p3-p4.

    Uses the parametric form P = p1 + t * (p2 - p1). Both parameters must
    fall in [0, 1] for the point to lie on both segments.

    Returns:
        Intersection point, or None for parallel or disjoint segments
    """
    denom = (p1.x - p2.x) * (p3.y - p4.y) - (p1.y - p2.y) * (p3.x - p4.x)

    if abs(denom) < PARALLEL_EPSILON:
        return None

    t = ((p1.x - p3.x) * (p3.y - p4.y) - (p1.y - p3.y) * (p3.x - p4.x)) / denom
    u = -((p1.x - p2.x) * (p1.y - p3.y) - (p1.y - p2.y) * (p1.x - p3.x)) / denom

    if 0 <= t <= 1 and 0 <= u <= 1:
        return Point(p1.x + t * (p2.x - p1.x), p1.y + t * (p2.y - p1.y))

    return None


def orthogonal_intersection(horizontal: WireSegment, vertical: WireSegment) -> Optional[Point]:
    """
    Fast crossing test for a horizontal and a vertical segment.

    The vertical segment's x must lie in the horizontal x-range and the
    horizontal segment's y in the vertical y-range (borders included).
    """
    h_y = horizontal.start.y
    h_min_x = min(horizontal.start.x, horizontal.end.x)
    h_max_x = max(horizontal.start.x, horizontal.end.x)

    v_x = vertical.start.x
    v_min_y = min(vertical.start.y, vertical.end.y)
    v_max_y = max(vertical.start.y, vertical.end.y)

    if h_min_x <= v_x <= h_max_x and v_min_y <= h_y <= v_max_y:
        return Point(v_x, h_y)

    return None


def segment_rectangle_intersections(start: Point, end: Point, rect: Rectangle) -> List[Point]:
    """
    Points where a segment crosses the border of a rectangle.

    A segment lying entirely inside the rectangle never crosses a border,
    so its start point is reported instead.
    """
    intersections = []
    corners = rect.corners()

    for i in range(len(corners)):
        corner1 = corners[i]
        corner2 = corners[(i + 1) % len(corners)]
        hit = line_intersection(start, end, corner1, corner2)
        if hit is not None and hit not in intersections:
            intersections.append(hit)

    if not intersections and rect.contains(start) and rect.contains(end):
        intersections.append(start)

    return intersections


def segments_overlap(segment1: WireSegment, segment2: WireSegment, tolerance: float) -> bool:
    """
    Check if two parallel segments run on top of each other.

    Segments must share a direction, sit within tolerance laterally and
    have overlapping extents along their axis (touching ends don't count).
    """
    if segment1.direction != segment2.direction:
        return False

    if segment1.direction == HORIZONTAL:
        if abs(segment1.start.y - segment2.start.y) >= tolerance:
            return False
        a_min, a_max = sorted((segment1.start.x, segment1.end.x))
        b_min, b_max = sorted((segment2.start.x, segment2.end.x))
    else:
        if abs(segment1.start.x - segment2.start.x) >= tolerance:
            return False
        a_min, a_max = sorted((segment1.start.y, segment1.end.y))
        b_min, b_max = sorted((segment2.start.y, segment2.end.y))

    return a_min < b_max and b_min < a_max


def overlap_midpoint(segment1: WireSegment, segment2: WireSegment) -> Point:
    """Midpoint of the shared extent of two overlapping segments."""
    if segment1.direction == HORIZONTAL:
        lo = max(min(segment1.start.x, segment1.end.x), min(segment2.start.x, segment2.end.x))
        hi = min(max(segment1.start.x, segment1.end.x), max(segment2.start.x, segment2.end.x))
        return Point((lo + hi) / 2, segment1.start.y)

    lo = max(min(segment1.start.y, segment1.end.y), min(segment2.start.y, segment2.end.y))
    hi = min(max(segment1.start.y, segment1.end.y), max(segment2.start.y, segment2.end.y))
    return Point(segment1.start.x, (lo + hi) / 2)


def collinear_area(pivot: Point, a: Point, b: Point) -> float:
    """Twice the area of the triangle pivot-a-b (zero when collinear)."""
    return abs((a.x - pivot.x) * (b.y - pivot.y) - (b.x - pivot.x) * (a.y - pivot.y))

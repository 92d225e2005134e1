"""
Wire-to-component clearance tests shared by detection and re-routing.
"""

from typing import Iterable, List

from ..core.geometry import Point, point_distance, segment_rectangle_intersections
from ..core.models import ComponentBounds, RoutedWire


def is_wire_endpoint(wire: RoutedWire, component: ComponentBounds, tolerance: float = 20) -> bool:
    """
    Check if a component is the wire's source or destination.

    A wire end within tolerance of the component's center, or of one of
    its connection points, attaches the wire to it.
    """
    anchors = [component.bounds.center] + list(component.connection_points)
    return any(
        point_distance(end, anchor) < tolerance
        for end in (wire.start, wire.end)
        for anchor in anchors
    )


def component_collision_points(
    wire: RoutedWire,
    components: Iterable[ComponentBounds],
    component_buffer: float = 10,
    endpoint_tolerance: float = 20
) -> List[Point]:
    """
    Points where a wire enters the buffered bounds of a foreign component.

    Args:
        wire: Routed wire to test
        components: Placed components
        component_buffer: Clearance added around every component
        endpoint_tolerance: Distance used to recognize the wire's own components

    Returns:
        Collision points in segment order (empty if the wire is clear)
    """
    foreign = [
        component for component in components
        if not component.bounds.is_degenerate()
        and not is_wire_endpoint(wire, component, endpoint_tolerance)
    ]

    points = []
    for segment in wire.segments:
        for component in foreign:
            points.extend(segment_rectangle_intersections(
                segment.start,
                segment.end,
                component.bounds.expanded(component_buffer)
            ))

    return points

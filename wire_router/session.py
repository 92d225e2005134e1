"""
Diagram session: routing, collision handling and junctions for one diagram.

The session keeps the editor's components and connections, turns them
into routing requests and mirrors every wire change into the junction
manager. Each session owns its own engine.
"""

import logging
import math
from typing import Dict, Iterable, List, Optional

from .collision.detector import WireCollisionDetector
from .core.config import RouterConfig
from .core.geometry import Point, Rectangle, manhattan_distance
from .core.models import (
    CollisionResult,
    ComponentBounds,
    Connection,
    RerouteResult,
    RoutedWire,
    WireState,
)
from .junctions.manager import JunctionManager
from .routing.engine import WireRoutingEngine

logger = logging.getLogger(__name__)


# Stroke styles keyed by connection type
WIRE_STYLES = {
    'ac': {'stroke': '#2563eb', 'stroke_width': 2, 'stroke_dasharray': None},
    'dc': {'stroke': '#dc2626', 'stroke_width': 3, 'stroke_dasharray': '8,4'},
    'ground': {'stroke': '#059669', 'stroke_width': 2, 'stroke_dasharray': '12,6'},
    'data': {'stroke': '#374151', 'stroke_width': 2, 'stroke_dasharray': None},
}
COLLISION_COLOR = '#ef4444'
LOW_QUALITY_COLOR = '#f59e0b'
LOW_QUALITY_THRESHOLD = 0.5


class DiagramSession:
    """
    Routing state of one diagram.

    Usage:
        session = DiagramSession(canvas=Rectangle(0, 0, 1000, 800))
        session.set_components(components)
        session.set_connections(connections)
        session.route_all_connections()
        session.handle_component_move('inverter', old, new)
    """

    def __init__(self, config: Optional[RouterConfig] = None, canvas: Optional[Rectangle] = None):
        self.config = config or RouterConfig()
        self.engine = WireRoutingEngine(self.config)
        self.detector = WireCollisionDetector(self.engine)
        self.junctions = JunctionManager(self.config.junctions.tolerance)

        self.components: Dict[str, ComponentBounds] = {}
        self.connections: Dict[str, Connection] = {}
        self.canvas = canvas
        self.collisions: List[CollisionResult] = []

    # ------------------------------------------------------------------
    # Diagram input
    # ------------------------------------------------------------------

    def set_components(self, components: Iterable[ComponentBounds]) -> None:
        """Replace the component snapshot and rebuild the grid."""
        self.components = {component.id: component for component in components}
        self._sync_obstacles()

    def set_connections(self, connections: Iterable[Connection]) -> None:
        self.connections = {connection.id: connection for connection in connections}

    def set_canvas(self, canvas: Rectangle) -> None:
        self.canvas = canvas
        self._sync_obstacles()

    def canvas_bounds(self) -> Rectangle:
        """Explicit canvas, else a grid-aligned box around all components."""
        if self.canvas is not None:
            return self.canvas

        margin = self.config.routing.auto_canvas_margin
        boxes = [component.bounds for component in self.components.values()]
        if not boxes:
            return Rectangle(0, 0, 2 * margin, 2 * margin)

        g = self.config.routing.grid_size
        origin_x = math.floor((min(b.x for b in boxes) - margin) / g) * g
        origin_y = math.floor((min(b.y for b in boxes) - margin) / g) * g

        return Rectangle(
            x=origin_x,
            y=origin_y,
            width=max(b.right for b in boxes) + margin - origin_x,
            height=max(b.bottom for b in boxes) + margin - origin_y
        )

    def _sync_obstacles(self) -> None:
        self.engine.set_obstacles(list(self.components.values()), self.canvas_bounds())

    # ------------------------------------------------------------------
    # Routing
    # ------------------------------------------------------------------

    def route_connection(self, connection: Connection) -> Optional[RoutedWire]:
        """
        Route one connection between its components' anchors.

        Returns:
            The new route, or None if a component is unknown
        """
        source = self.components.get(connection.from_component_id)
        target = self.components.get(connection.to_component_id)
        if source is None or target is None:
            logger.warning(f"Connection {connection.id} references an unknown component, skipping")
            return None

        self.connections[connection.id] = connection
        wire = self.engine.route_wire(source.anchor, target.anchor, connection.id, connection.connection_type)
        self.junctions.update_wire(wire.id, wire.segments)
        return wire

    def route_all_connections(self) -> List[RoutedWire]:
        """Route every connection, shortest first."""
        self._sync_obstacles()

        def request_length(connection: Connection) -> float:
            source = self.components.get(connection.from_component_id)
            target = self.components.get(connection.to_component_id)
            if source is None or target is None:
                return math.inf
            return manhattan_distance(source.anchor, target.anchor)

        ordered = sorted(self.connections.values(), key=lambda c: (request_length(c), c.id))

        wires = []
        for connection in ordered:
            wire = self.route_connection(connection)
            if wire is not None:
                wires.append(wire)

        logger.info(f"Routed {len(wires)}/{len(ordered)} connections")
        return wires

    def handle_component_move(self, component_id: str, old_position: Point, new_position: Point) -> List[str]:
        """
        Move a component and re-route the connections attached to it.

        Args:
            component_id: Component that moved
            old_position: Previous top-left corner
            new_position: New top-left corner

        Returns:
            Ids of the re-routed connections (other wires are untouched)
        """
        component = self.components.get(component_id)
        if component is None:
            logger.warning(f"Ignoring move of unknown component {component_id}")
            return []

        dx = new_position.x - old_position.x
        dy = new_position.y - old_position.y
        self.components[component_id] = component.model_copy(update={
            'bounds': component.bounds.moved_to(Point(component.bounds.x + dx, component.bounds.y + dy)),
            'connection_points': [point.offset(dx, dy) for point in component.connection_points],
        })
        self._sync_obstacles()

        affected = [
            connection for connection in self.connections.values()
            if component_id in (connection.from_component_id, connection.to_component_id)
        ]

        rerouted = []
        for connection in affected:
            if self.route_connection(connection) is not None:
                rerouted.append(connection.id)

        logger.debug(f"Component {component_id} moved, re-routed {len(rerouted)} connections")
        return rerouted

    def remove_connection(self, connection_id: str) -> bool:
        """Delete a connection and its wire (the wire becomes REMOVED)."""
        connection = self.connections.pop(connection_id, None)
        if connection_id in self.engine.registry:
            self.engine.remove_wire(connection_id)
        self.junctions.remove_wire(connection_id)
        return connection is not None

    # ------------------------------------------------------------------
    # Collisions
    # ------------------------------------------------------------------

    def detect_collisions(self) -> List[CollisionResult]:
        self.collisions = self.detector.detect_all_collisions()
        return self.collisions

    def auto_reroute_collisions(self) -> List[RerouteResult]:
        """
        Re-route wires in high-severity collisions and commit the successes.

        Failed wires stay COLLIDING and are flagged unresolvable.
        """
        results = self.detector.reroute_colliding_wires()

        for result in results:
            if self.engine.apply_reroute(result):
                self.junctions.update_wire(result.wire_id, result.new_route.segments)

        self.detect_collisions()
        return results

    def optimize_layout(self) -> List[RoutedWire]:
        """Re-route all wires shortest first and rebuild the junctions."""
        wires = self.detector.optimize_wire_layout()

        self.junctions.dispose()
        for wire in wires:
            self.junctions.add_wire(wire.id, wire.segments)

        return wires

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_wire(self, connection_id: str) -> Optional[RoutedWire]:
        return self.engine.registry.find(connection_id)

    @property
    def wires(self) -> List[RoutedWire]:
        return self.engine.get_all_wires()

    def wire_style(self, connection_id: str) -> Optional[Dict]:
        """
        Stroke style for rendering a wire.

        Colour and width follow the connection type; colliding wires are red
        and one unit wider, low quality routes are amber.
        """
        wire = self.get_wire(connection_id)
        if wire is None:
            return None

        style = dict(WIRE_STYLES[wire.connection_type])

        if self.engine.wire_state(connection_id) == WireState.COLLIDING:
            style['stroke'] = COLLISION_COLOR
            style['stroke_width'] += 1

        if wire.quality < LOW_QUALITY_THRESHOLD:
            style['stroke'] = LOW_QUALITY_COLOR

        return style

    def get_stats(self) -> Dict[str, float]:
        """Routing statistics plus the counts of the last collision detection."""
        stats = dict(self.engine.get_routing_stats())
        stats['collision_count'] = len(self.collisions)
        stats['critical_collisions'] = sum(1 for c in self.collisions if c.severity == 'high')
        return stats

"""
Collision detection for routed wires.

Detection is an explicit analysis pass over a set of wires and
components. It reports wire-component hits and wire-wire intersections
classified by severity, and never changes any route.
"""

import logging
import math
from typing import Dict, List, Optional, Sequence

from .clearance import component_collision_points
from .rerouter import WireRerouter
from ..core.config import CollisionOptions, RouterConfig
from ..core.geometry import (
    Point,
    Rectangle,
    line_intersection,
    overlap_midpoint,
    point_distance,
    segments_overlap,
)
from ..core.models import (
    CollisionResult,
    ComponentBounds,
    RerouteResult,
    RoutedWire,
    WireIntersection,
)
from ..routing.engine import WireRoutingEngine

logger = logging.getLogger(__name__)

# Weights used to average collision severities in the statistics
SEVERITY_WEIGHTS = {'high': 1.0, 'medium': 0.5, 'low': 0.2}


class WireCollisionDetector:
    """
    Detects and resolves wire collisions.

    When bound to an engine, detection also moves the engine's wires
    between the ROUTED and COLLIDING states, and layout optimization
    routes on that engine.
    """

    def __init__(self, engine: Optional[WireRoutingEngine] = None, config: Optional[RouterConfig] = None):
        """
        Initialize detector.

        Args:
            engine: Optional routing engine to keep in sync
            config: Router configuration (the engine's if omitted)
        """
        self.engine = engine
        self.config = config or (engine.config if engine is not None else RouterConfig())
        self.options: CollisionOptions = self.config.collision

    def set_collision_parameters(self, wire_buffer: float, component_buffer: float) -> None:
        """Change the wire overlap tolerance and component clearance."""
        self.options = self.options.model_copy(update={
            'wire_buffer': wire_buffer,
            'component_buffer': component_buffer,
        })

    # ------------------------------------------------------------------
    # Detection
    # ------------------------------------------------------------------

    def detect_all_collisions(
        self,
        wires: Optional[Sequence[RoutedWire]] = None,
        components: Optional[Sequence[ComponentBounds]] = None
    ) -> List[CollisionResult]:
        """
        Detect every collision in a wire layout.

        Args:
            wires: Wires to check (the bound engine's wires if None)
            components: Components to check against (the bound engine's if None)

        Returns:
            Wire-component collisions first (one per wire), then one result
            per wire-wire intersection
        """
        wires = self._resolve_wires(wires)
        components = self._resolve_components(components)
        collisions: List[CollisionResult] = []

        for wire in wires:
            points = component_collision_points(
                wire,
                components,
                self.options.component_buffer,
                self.options.endpoint_tolerance
            )
            if points:
                collisions.append(CollisionResult(
                    has_collision=True,
                    collision_points=points,
                    affected_wires=[wire.id],
                    severity='high',
                    description=f"Wire {wire.id} intersects with components"
                ))

        for intersection in self.detect_wire_intersections(wires):
            collisions.append(CollisionResult(
                has_collision=True,
                collision_points=[intersection.point],
                affected_wires=[intersection.wire_id1, intersection.wire_id2],
                severity=self._severity_bucket(intersection.severity),
                description=(
                    f"Wires {intersection.wire_id1} and {intersection.wire_id2} "
                    f"intersect at {intersection.type}"
                )
            ))

        if collisions:
            logger.debug(f"Detected {len(collisions)} collisions across {len(wires)} wires")

        self._update_states(wires, collisions)
        return collisions

    def detect_wire_intersections(self, wires: Sequence[RoutedWire]) -> List[WireIntersection]:
        """
        Find where pairs of wires meet.

        Wires sharing an endpoint form a single low-severity junction.
        Otherwise each pair of segments is checked for overlap (parallel
        runs within the wire buffer) and then for a transversal crossing.
        A point is reported once per wire pair.
        """
        intersections: List[WireIntersection] = []

        for i in range(len(wires)):
            for j in range(i + 1, len(wires)):
                wire1 = wires[i]
                wire2 = wires[j]

                shared = self._shared_endpoint(wire1, wire2)
                if shared is not None:
                    intersections.append(WireIntersection(
                        wire_id1=wire1.id,
                        wire_id2=wire2.id,
                        point=shared,
                        type='junction',
                        severity=self.options.junction_severity
                    ))
                    continue

                seen: List[Point] = []
                for segment1 in wire1.segments:
                    for segment2 in wire2.segments:
                        if segments_overlap(segment1, segment2, self.options.wire_buffer):
                            point = overlap_midpoint(segment1, segment2)
                            kind, severity = 'overlap', self.options.overlap_severity
                        else:
                            point = line_intersection(segment1.start, segment1.end, segment2.start, segment2.end)
                            if point is None:
                                continue
                            kind, severity = 'crossing', self.options.crossing_severity

                        if point in seen:
                            continue
                        seen.append(point)

                        intersections.append(WireIntersection(
                            wire_id1=wire1.id,
                            wire_id2=wire2.id,
                            point=point,
                            type=kind,
                            severity=severity
                        ))

        return intersections

    def _shared_endpoint(self, wire1: RoutedWire, wire2: RoutedWire) -> Optional[Point]:
        """First endpoint of wire1 that wire2 also ends at (within tolerance)."""
        tolerance = self.options.junction_tolerance
        for own in (wire1.start, wire1.end):
            for other in (wire2.start, wire2.end):
                if point_distance(own, other) < tolerance:
                    return own
        return None

    def _severity_bucket(self, severity: float) -> str:
        if severity > self.options.high_threshold:
            return 'high'
        if severity > self.options.medium_threshold:
            return 'medium'
        return 'low'

    def _update_states(self, wires: Sequence[RoutedWire], collisions: List[CollisionResult]) -> None:
        """Flag the engine's wires involved in high-severity collisions."""
        if self.engine is None:
            return

        colliding = {
            wire_id
            for collision in collisions if collision.severity == 'high'
            for wire_id in collision.affected_wires
        }

        for wire in wires:
            if wire.id in self.engine.registry:
                self.engine.set_collision_state(wire.id, wire.id in colliding)

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def reroute_colliding_wires(
        self,
        wires: Optional[Sequence[RoutedWire]] = None,
        components: Optional[Sequence[ComponentBounds]] = None,
        canvas_bounds: Optional[Rectangle] = None
    ) -> List[RerouteResult]:
        """
        Re-route every wire involved in a high-severity collision.

        Inputs are never modified; callers commit the new routes they
        accept (see WireRoutingEngine.apply_reroute).

        Returns:
            One result per affected wire, in order of first appearance
        """
        wires = list(self._resolve_wires(wires))
        components = self._resolve_components(components)
        canvas_bounds = self._resolve_canvas(canvas_bounds, wires, components)

        affected: List[str] = []
        for collision in self.detect_all_collisions(wires, components):
            if collision.severity != 'high':
                continue
            for wire_id in collision.affected_wires:
                if wire_id not in affected:
                    affected.append(wire_id)

        if not affected:
            return []

        logger.info(f"Re-routing {len(affected)} colliding wires")
        rerouter = WireRerouter(self.config)
        return rerouter.reroute_wires(affected, wires, components, canvas_bounds)

    def optimize_wire_layout(
        self,
        wires: Optional[Sequence[RoutedWire]] = None,
        components: Optional[Sequence[ComponentBounds]] = None,
        canvas_bounds: Optional[Rectangle] = None
    ) -> List[RoutedWire]:
        """
        Re-route all wires from scratch, shortest first.

        Short connections claim direct paths before longer ones compete
        for the same cells.

        Returns:
            Replacement routes in routing order
        """
        wires = list(self._resolve_wires(wires))
        components = self._resolve_components(components)
        canvas_bounds = self._resolve_canvas(canvas_bounds, wires, components)

        engine = self.engine or WireRoutingEngine(self.config)
        engine.set_obstacles(components, canvas_bounds)
        engine.clear_existing_wires()

        optimized = []
        for wire in sorted(wires, key=lambda w: (w.total_length, w.id)):
            optimized.append(engine.route_wire(wire.start, wire.end, wire.id, wire.connection_type))

        before = sum(wire.total_length for wire in wires)
        after = sum(wire.total_length for wire in optimized)
        logger.info(f"Optimized {len(optimized)} wires: total length {before:.0f} -> {after:.0f}")

        return optimized

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------

    def get_collision_stats(
        self,
        wires: Optional[Sequence[RoutedWire]] = None,
        components: Optional[Sequence[ComponentBounds]] = None
    ) -> Dict[str, float]:
        """
        Summarize the collisions of a layout.

        Returns:
            Dictionary with total_collisions, wire_wire_collisions,
            wire_component_collisions, average_severity and critical_collisions
        """
        collisions = self.detect_all_collisions(wires, components)
        total = len(collisions)
        weighted = sum(SEVERITY_WEIGHTS[collision.severity] for collision in collisions)

        return {
            'total_collisions': total,
            'wire_wire_collisions': sum(1 for c in collisions if len(c.affected_wires) > 1),
            'wire_component_collisions': sum(1 for c in collisions if len(c.affected_wires) == 1),
            'average_severity': weighted / total if total else 0.0,
            'critical_collisions': sum(1 for c in collisions if c.severity == 'high'),
        }

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _resolve_wires(self, wires: Optional[Sequence[RoutedWire]]) -> Sequence[RoutedWire]:
        if wires is not None:
            return wires
        return self.engine.get_all_wires() if self.engine is not None else []

    def _resolve_components(self, components: Optional[Sequence[ComponentBounds]]) -> List[ComponentBounds]:
        if components is not None:
            return list(components)
        return list(self.engine.components) if self.engine is not None else []

    def _resolve_canvas(
        self,
        canvas_bounds: Optional[Rectangle],
        wires: Sequence[RoutedWire],
        components: Sequence[ComponentBounds]
    ) -> Rectangle:
        """Explicit canvas, else the engine's, else a box around everything."""
        if canvas_bounds is not None:
            return canvas_bounds
        if self.engine is not None and self.engine.canvas is not None:
            return self.engine.canvas

        margin = self.config.routing.auto_canvas_margin
        xs, ys = [], []
        for wire in wires:
            xs.extend(point.x for point in wire.path)
            ys.extend(point.y for point in wire.path)
        for component in components:
            xs.extend((component.bounds.x, component.bounds.right))
            ys.extend((component.bounds.y, component.bounds.bottom))
        if not xs:
            return Rectangle(0, 0, 2 * margin, 2 * margin)

        # Origin on a grid multiple so existing routes stay on grid points
        g = self.config.routing.grid_size
        origin_x = math.floor((min(xs) - margin) / g) * g
        origin_y = math.floor((min(ys) - margin) / g) * g

        return Rectangle(
            x=origin_x,
            y=origin_y,
            width=max(xs) + margin - origin_x,
            height=max(ys) + margin - origin_y
        )

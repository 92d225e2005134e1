"""
Re-routing of colliding wires.

Each wire is planned again on a scratch engine that holds the current
components and every other wire as soft obstacles. Several strategy
presets are tried and the best collision-free route is reported. The
live engine is never touched.
"""

import logging
from typing import List, Optional, Sequence, Tuple

from .clearance import component_collision_points
from ..core.config import RouterConfig
from ..core.geometry import Rectangle
from ..core.models import ComponentBounds, RerouteResult, RoutedWire
from ..routing.engine import WireRoutingEngine

logger = logging.getLogger(__name__)

# Presets tried for every colliding wire, in order
REROUTE_PRESETS: Tuple[str, ...] = ('minimal_bends', 'shortest', 'balanced')

# Improvement reported for a failed re-route; quality gains are never below -1
FAILED_IMPROVEMENT = -1.0


class WireRerouter:
    """Plans replacement routes for colliding wires."""

    def __init__(self, config: Optional[RouterConfig] = None, presets: Sequence[str] = REROUTE_PRESETS):
        self.config = config or RouterConfig()
        self.presets = tuple(presets)

    def reroute_wires(
        self,
        wire_ids: Sequence[str],
        wires: Sequence[RoutedWire],
        components: Sequence[ComponentBounds],
        canvas_bounds: Rectangle
    ) -> List[RerouteResult]:
        """
        Re-route several wires one after another.

        Later wires see the new routes of earlier successful ones.

        Args:
            wire_ids: Wires to re-route (each at most once)
            wires: Complete current layout
            components: Placed components
            canvas_bounds: Canvas area

        Returns:
            One result per known wire id
        """
        layout = {wire.id: wire for wire in wires}
        results = []
        done = set()

        for wire_id in wire_ids:
            if wire_id in done or wire_id not in layout:
                continue
            done.add(wire_id)

            others = [wire for other_id, wire in layout.items() if other_id != wire_id]
            result = self.reroute_wire(layout[wire_id], others, components, canvas_bounds)
            results.append(result)

            if result.success:
                layout[wire_id] = result.new_route

        succeeded = sum(1 for result in results if result.success)
        logger.info(f"Re-routed {succeeded}/{len(results)} wires")
        return results

    def reroute_wire(
        self,
        wire: RoutedWire,
        other_wires: Sequence[RoutedWire],
        components: Sequence[ComponentBounds],
        canvas_bounds: Rectangle
    ) -> RerouteResult:
        """
        Find a better route for a single wire.

        A candidate is acceptable when it is a real search result (not the
        direct fallback) and clears every component the wire isn't
        attached to. Failures are reported, never raised.
        """
        collision_options = self.config.collision
        best: Optional[RoutedWire] = None
        best_preset = None

        try:
            for preset in self.presets:
                engine = WireRoutingEngine(self.config)
                engine.set_obstacles(components, canvas_bounds)
                engine.preload_wires(other_wires)

                candidate = engine.route_wire(wire.start, wire.end, wire.id, wire.connection_type, preset)
                if candidate.is_fallback:
                    logger.debug(f"Wire {wire.id}: {preset} produced only the direct segment")
                    continue

                hits = component_collision_points(
                    candidate,
                    components,
                    collision_options.component_buffer,
                    collision_options.endpoint_tolerance
                )
                if hits:
                    logger.debug(f"Wire {wire.id}: {preset} route still hits {len(hits)} component edges")
                    continue

                if best is None or candidate.quality > best.quality:
                    best = candidate
                    best_preset = preset

        except Exception as e:
            logger.error(f"Re-routing wire {wire.id} failed: {e}")
            return RerouteResult(
                wire_id=wire.id,
                success=False,
                new_route=None,
                old_route=wire,
                improvement=FAILED_IMPROVEMENT,
                reason=f"Re-routing failed: {e}"
            )

        if best is None:
            logger.warning(f"No collision-free route found for wire {wire.id}")
            return RerouteResult(
                wire_id=wire.id,
                success=False,
                new_route=None,
                old_route=wire,
                improvement=FAILED_IMPROVEMENT,
                reason="No collision-free alternative route found"
            )

        return RerouteResult(
            wire_id=wire.id,
            success=True,
            new_route=best,
            old_route=wire,
            improvement=best.quality - wire.quality,
            reason=f"Successfully re-routed using {best_preset} strategy"
        )

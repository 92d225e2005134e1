"""
Wire routing engine.

One engine owns the obstacle grid and the wire registry of a single
diagram. All operations run serially against that state; independent
diagrams use independent engines.
"""

import logging
import math
from typing import Dict, Iterable, List, Optional

from .grid import Grid, CellState
from .path_optimizer import build_direct_route, build_routed_wire, cells_to_canvas, compress_path
from .registry import WireRegistry
from .strategies import evaluate_strategy, get_routing_strategies
from ..core.config import RouterConfig
from ..core.geometry import Point, Rectangle
from ..core.models import ComponentBounds, RerouteResult, RoutedWire, WireState

logger = logging.getLogger(__name__)


class WireRoutingEngine:
    """
    Grid-based orthogonal router for one diagram.

    Usage:
        engine = WireRoutingEngine()
        engine.set_obstacles(components, Rectangle(0, 0, 800, 600))
        wire = engine.route_wire(Point(0, 0), Point(100, 100), 'w1')
    """

    def __init__(self, config: Optional[RouterConfig] = None):
        """
        Initialize an engine without a grid.

        Args:
            config: Router configuration (defaults if None)
        """
        self.config = config or RouterConfig()
        self.options = self.config.routing
        self.quality_options = self.config.quality

        self.grid: Optional[Grid] = None
        self.registry = WireRegistry()
        self.components: List[ComponentBounds] = []
        self.canvas: Optional[Rectangle] = None

        # True while the grid was derived from wire endpoints instead of set_obstacles
        self._auto_canvas = False

    # ------------------------------------------------------------------
    # Obstacles
    # ------------------------------------------------------------------

    def set_obstacles(self, components: Iterable[ComponentBounds], canvas_bounds: Rectangle) -> None:
        """
        Rebuild the grid from a component snapshot.

        Every component's bounds, expanded by the obstacle buffer, is
        blocked. Registered wires are marked again as soft obstacles.

        Args:
            components: Placed components
            canvas_bounds: Area covered by the grid
        """
        self.components = list(components)
        self.canvas = canvas_bounds
        self._auto_canvas = False
        self._build_grid(canvas_bounds)

    def _build_grid(self, canvas_bounds: Rectangle) -> None:
        self.grid = Grid(canvas_bounds, self.options.grid_size)

        marked = 0
        for component in self.components:
            if self.grid.mark_obstacle(component.id, component.bounds, self.options.obstacle_buffer):
                marked += 1

        wire_cells = self.registry.mark_into(self.grid)
        logger.debug(
            f"Grid rebuilt: {self.grid.cols}x{self.grid.rows} cells, "
            f"{marked} obstacles, {wire_cells} wire cells"
        )

    def _ensure_grid(self, start: Point, end: Point) -> None:
        """Create (or grow) an implicit canvas around the endpoints when none was set."""
        if self.grid is not None:
            if not self._auto_canvas:
                return
            if self.canvas.contains(start) and self.canvas.contains(end):
                return

        margin = self.options.auto_canvas_margin
        xs = [start.x, end.x]
        ys = [start.y, end.y]
        if self.canvas is not None:
            # Keep the area covered so far (without its margin)
            xs += [self.canvas.x + margin, self.canvas.right - margin]
            ys += [self.canvas.y + margin, self.canvas.bottom - margin]

        # Origin on a grid multiple so snapping matches absolute coordinates
        g = self.options.grid_size
        origin_x = math.floor((min(xs) - margin) / g) * g
        origin_y = math.floor((min(ys) - margin) / g) * g

        self.canvas = Rectangle(
            x=origin_x,
            y=origin_y,
            width=max(xs) + margin - origin_x,
            height=max(ys) + margin - origin_y
        )
        self._auto_canvas = True
        self._build_grid(self.canvas)

    # ------------------------------------------------------------------
    # Routing
    # ------------------------------------------------------------------

    def route_wire(
        self,
        start: Point,
        end: Point,
        wire_id: str,
        connection_type: str = 'ac',
        strategy_preset: Optional[str] = None
    ) -> RoutedWire:
        """
        Route a wire and register it.

        Every strategy of the preset is evaluated and the highest quality
        route wins (ties keep the earlier strategy). When no strategy finds
        a path, a direct segment between the unsnapped points is used.

        Args:
            start: Start point in canvas coordinates
            end: End point in canvas coordinates
            wire_id: Wire identifier; an existing wire with this id is replaced
            connection_type: Electrical kind of the connection
            strategy_preset: Preset name (defaults to the configured one)

        Returns:
            The registered route
        """
        self._ensure_grid(start, end)
        grid = self.grid

        if wire_id in self.registry:
            self._release(wire_id)

        start_cell = grid.to_grid(start)
        end_cell = grid.to_grid(end)
        exempt = grid.terminal_cells(start_cell) | grid.terminal_cells(end_cell)

        preset = strategy_preset or self.options.routing_strategy
        best: Optional[RoutedWire] = None

        for strategy in get_routing_strategies(preset):
            cells = evaluate_strategy(strategy, start_cell, end_cell, grid, self.options, exempt)
            if cells is None:
                logger.debug(f"Wire {wire_id}: {strategy.value} found no path")
                continue

            candidate = build_routed_wire(
                cells_to_canvas(compress_path(cells), grid),
                wire_id,
                connection_type,
                strategy.value,
                self.quality_options
            )
            logger.debug(
                f"Wire {wire_id}: {strategy.value} length={candidate.total_length} "
                f"bends={candidate.bend_count} quality={candidate.quality:.3f}"
            )

            if best is None or candidate.quality > best.quality:
                best = candidate

        if best is None:
            logger.warning(f"No route found for wire {wire_id}, using direct segment")
            best = build_direct_route(start, end, wire_id, connection_type, self.quality_options)

        self._commit(best)
        return best

    def _commit(self, wire: RoutedWire) -> None:
        self.registry.register(wire)
        self.grid.mark_path(wire.path)

    def _release(self, wire_id: str) -> None:
        """Clear one wire's cells while keeping everything else marked."""
        if self.grid is not None:
            self.grid.clear_wires()
            self.registry.mark_into(self.grid, exclude=wire_id)

    def preload_wires(self, wires: Iterable[RoutedWire]) -> None:
        """Register existing routes unchanged (they become soft obstacles)."""
        for wire in wires:
            self._ensure_grid(wire.start, wire.end)
            self._commit(wire)

    def spawn(self) -> 'WireRoutingEngine':
        """New engine with the same configuration and obstacles, but no wires."""
        engine = WireRoutingEngine(self.config)
        if self.canvas is not None and not self._auto_canvas:
            engine.set_obstacles(self.components, self.canvas)
        return engine

    # ------------------------------------------------------------------
    # Registry access
    # ------------------------------------------------------------------

    def get_wire(self, wire_id: str) -> RoutedWire:
        return self.registry.get(wire_id)

    def get_all_wires(self) -> List[RoutedWire]:
        return self.registry.all_wires()

    def wire_state(self, wire_id: str) -> WireState:
        return self.registry.state(wire_id)

    def remove_wire(self, wire_id: str) -> RoutedWire:
        """
        Delete a wire and free its cells.

        Raises:
            WireNotFoundError: If the wire is not registered
        """
        wire = self.registry.remove(wire_id)
        if self.grid is not None:
            self.grid.clear_wires()
            self.registry.mark_into(self.grid)
        logger.debug(f"Removed wire {wire_id}")
        return wire

    def clear_existing_wires(self) -> None:
        """Forget all wires and clear their grid cells."""
        self.registry.clear()
        if self.grid is not None:
            self.grid.clear_wires()

    def set_collision_state(self, wire_id: str, colliding: bool) -> None:
        """Move a wire between ROUTED and COLLIDING after detection."""
        current = self.registry.state(wire_id)
        if colliding:
            if current in (WireState.ROUTED, WireState.REROUTED, WireState.COLLIDING):
                self.registry.transition(wire_id, WireState.COLLIDING)
        elif current == WireState.COLLIDING:
            self.registry.transition(wire_id, WireState.ROUTED)
            self.registry.unresolvable.discard(wire_id)

    def apply_reroute(self, result: RerouteResult) -> bool:
        """
        Commit a re-route result into the registry.

        Successful results replace the old route (COLLIDING -> REROUTED ->
        ROUTED). Failed results flag the wire as unresolvable.

        Returns:
            True if a new route was committed
        """
        if result.wire_id not in self.registry:
            logger.debug(f"Ignoring re-route of unknown wire {result.wire_id}")
            return False

        if not result.success or result.new_route is None:
            self.registry.mark_unresolvable(result.wire_id)
            return False

        if self.registry.state(result.wire_id) == WireState.COLLIDING:
            self.registry.transition(result.wire_id, WireState.REROUTED)

        self._release(result.wire_id)
        self._commit(result.new_route)
        return True

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------

    def get_routing_stats(self) -> Dict[str, float]:
        """
        Summary of the registered wires.

        Returns:
            Dictionary with total_wires, total_length, average_bends and
            average_quality (averages are 0 without wires)
        """
        wires = self.registry.all_wires()
        total = len(wires)

        return {
            'total_wires': total,
            'total_length': sum(wire.total_length for wire in wires),
            'average_bends': sum(wire.bend_count for wire in wires) / total if total else 0.0,
            'average_quality': sum(wire.quality for wire in wires) / total if total else 0.0,
        }

    def occupied_cells(self) -> int:
        """Number of grid cells currently marked by wires."""
        return self.grid.count_cells(CellState.WIRE) if self.grid is not None else 0

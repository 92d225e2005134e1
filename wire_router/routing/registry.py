"""
Wire registry for the routing engine.

Stores computed routes keyed by id, tracks each wire's lifecycle state
and projects the routes back into the grid as soft obstacles.
"""

import logging
from typing import Dict, List, Optional, Set

from .grid import Grid
from ..core.models import RoutedWire, WireState
from ..exceptions import InvalidStateTransitionError, WireNotFoundError

logger = logging.getLogger(__name__)


# state -> states it may move to
ALLOWED_TRANSITIONS: Dict[WireState, Set[WireState]] = {
    WireState.UNROUTED: {WireState.ROUTED, WireState.REMOVED},
    WireState.ROUTED: {WireState.ROUTED, WireState.COLLIDING, WireState.REMOVED},
    WireState.COLLIDING: {WireState.COLLIDING, WireState.ROUTED, WireState.REROUTED, WireState.REMOVED},
    WireState.REROUTED: {WireState.ROUTED, WireState.COLLIDING, WireState.REMOVED},
    WireState.REMOVED: set(),
}


class WireRegistry:
    """
    Routed wires of one engine.

    Wires are kept in registration order, which is also the order in
    which they are marked into the grid.
    """

    def __init__(self):
        """Initialize empty registry."""
        self.wires: Dict[str, RoutedWire] = {}
        self.states: Dict[str, WireState] = {}
        self.unresolvable: Set[str] = set()

    def __contains__(self, wire_id: str) -> bool:
        return wire_id in self.wires

    def __len__(self) -> int:
        return len(self.wires)

    def register(self, wire: RoutedWire) -> None:
        """
        Store a route, replacing any previous route with the same id.

        A previously removed id starts a new lifecycle.
        """
        current = self.states.get(wire.id, WireState.UNROUTED)
        if current == WireState.REMOVED:
            logger.debug(f"Wire {wire.id} re-created after removal")
            current = WireState.UNROUTED
            self.states[wire.id] = current

        self.wires[wire.id] = wire
        self.transition(wire.id, WireState.ROUTED)
        self.unresolvable.discard(wire.id)

    def get(self, wire_id: str) -> RoutedWire:
        """Return a registered wire or raise WireNotFoundError."""
        try:
            return self.wires[wire_id]
        except KeyError:
            raise WireNotFoundError(f"Unknown wire: '{wire_id}'") from None

    def find(self, wire_id: str) -> Optional[RoutedWire]:
        return self.wires.get(wire_id)

    def remove(self, wire_id: str) -> RoutedWire:
        """Delete a wire; its state becomes REMOVED."""
        wire = self.get(wire_id)
        self.transition(wire_id, WireState.REMOVED)
        del self.wires[wire_id]
        self.unresolvable.discard(wire_id)
        return wire

    def clear(self) -> None:
        """Forget every wire and its lifecycle."""
        self.wires.clear()
        self.states.clear()
        self.unresolvable.clear()

    def all_wires(self) -> List[RoutedWire]:
        return list(self.wires.values())

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def state(self, wire_id: str) -> WireState:
        """Current state (UNROUTED for ids never registered)."""
        return self.states.get(wire_id, WireState.UNROUTED)

    def transition(self, wire_id: str, new_state: WireState) -> None:
        """
        Move a wire to a new state.

        Raises:
            InvalidStateTransitionError: If the lifecycle doesn't allow the move
        """
        current = self.state(wire_id)
        if new_state not in ALLOWED_TRANSITIONS[current]:
            raise InvalidStateTransitionError(
                f"Wire '{wire_id}' cannot move from {current.value} to {new_state.value}"
            )
        self.states[wire_id] = new_state

    def mark_unresolvable(self, wire_id: str) -> None:
        """Flag a colliding wire whose re-route failed."""
        if self.state(wire_id) != WireState.COLLIDING:
            self.transition(wire_id, WireState.COLLIDING)
        self.unresolvable.add(wire_id)
        logger.warning(f"Wire {wire_id} could not be re-routed and stays colliding")

    def is_unresolvable(self, wire_id: str) -> bool:
        return wire_id in self.unresolvable

    # ------------------------------------------------------------------
    # Grid projection
    # ------------------------------------------------------------------

    def mark_into(self, grid: Grid, exclude: Optional[str] = None) -> int:
        """
        Mark every registered wire into the grid.

        Args:
            grid: Grid to mark
            exclude: Optional wire id to leave out

        Returns:
            Number of cells marked
        """
        marked = 0
        for wire_id, wire in self.wires.items():
            if wire_id != exclude:
                marked += grid.mark_path(wire.path)
        return marked

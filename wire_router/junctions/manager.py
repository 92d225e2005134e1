"""
Junction tracking for wire rendering.

Keeps its own index of wire segments, independent of the routing grid,
and maintains a junction record wherever two wires meet.
"""

import itertools
import logging
from typing import Callable, Dict, List, Optional, Sequence, Set

from ..core.geometry import (
    Point,
    WireSegment,
    collinear_area,
    line_intersection,
    orthogonal_intersection,
    point_distance,
    points_close,
)
from ..core.models import Junction, JunctionStyle, RoutedWire, SegmentIntersection
from ..exceptions import JunctionNotFoundError

logger = logging.getLogger(__name__)

JunctionCallback = Callable[[Junction], None]
DeleteCallback = Callable[[str], None]


def junction_type_for(wire_count: int) -> str:
    """Default junction type from the number of connected wires."""
    if wire_count == 2:
        return 'corner'
    if wire_count == 3:
        return 'T'
    if wire_count == 4:
        return 'cross'
    return 'terminal'


class JunctionManager:
    """
    Tracks where wires meet.

    Junctions returned by the public methods are copies; change them
    through move_junction, lock_junction and set_junction_style.
    """

    def __init__(self, tolerance: float = 2):
        """
        Initialize manager.

        Args:
            tolerance: Distance within which two points are the same junction
        """
        self.tolerance = tolerance
        self.wire_segments: Dict[str, List[WireSegment]] = {}
        self.junctions: Dict[str, Junction] = {}

        # Junctions whose type was set explicitly
        self._explicit_types: Set[str] = set()
        self._ids = itertools.count(1)

        self._on_create: Optional[JunctionCallback] = None
        self._on_update: Optional[JunctionCallback] = None
        self._on_delete: Optional[DeleteCallback] = None

    # ------------------------------------------------------------------
    # Callbacks
    # ------------------------------------------------------------------

    def set_create_callback(self, callback: Optional[JunctionCallback]) -> None:
        self._on_create = callback

    def set_update_callback(self, callback: Optional[JunctionCallback]) -> None:
        self._on_update = callback

    def set_delete_callback(self, callback: Optional[DeleteCallback]) -> None:
        self._on_delete = callback

    def _notify_create(self, junction: Junction) -> None:
        if self._on_create:
            self._on_create(junction.model_copy(deep=True))

    def _notify_update(self, junction: Junction) -> None:
        if self._on_update:
            self._on_update(junction.model_copy(deep=True))

    # ------------------------------------------------------------------
    # Wires
    # ------------------------------------------------------------------

    def add_wire(self, wire_id: str, segments: Sequence[WireSegment]) -> None:
        """
        Index a wire and create junctions where it meets other wires.

        Only intersections between this wire and the others are checked.
        """
        self.wire_segments[wire_id] = list(segments)

        for other_id in list(self.wire_segments):
            if other_id == wire_id:
                continue
            for intersection in self._wire_pair_intersections(other_id, wire_id):
                self._record_intersection(intersection)

    def add_routed_wire(self, wire: RoutedWire) -> None:
        self.add_wire(wire.id, wire.segments)

    def remove_wire(self, wire_id: str) -> None:
        """
        Drop a wire from the index and from every junction.

        Junctions left with fewer than two wires are removed.
        """
        self.wire_segments.pop(wire_id, None)

        for junction_id in list(self.junctions):
            junction = self.junctions[junction_id]
            if wire_id not in junction.connected_wires:
                continue

            junction.connected_wires = [w for w in junction.connected_wires if w != wire_id]
            if len(junction.connected_wires) < 2:
                self.remove_junction(junction_id)
            else:
                self._refresh_type(junction)
                self._notify_update(junction)

    def update_wire(self, wire_id: str, segments: Sequence[WireSegment]) -> None:
        """Replace a wire's segments and recompute its junctions."""
        self.remove_wire(wire_id)
        self.add_wire(wire_id, segments)

    # ------------------------------------------------------------------
    # Intersections
    # ------------------------------------------------------------------

    def find_intersections(self) -> List[SegmentIntersection]:
        """
        Intersections between every pair of indexed wires.

        Each point is reported once per wire pair, flagged when no junction
        exists within tolerance.
        """
        intersections = []
        wire_ids = list(self.wire_segments)

        for i in range(len(wire_ids)):
            for j in range(i + 1, len(wire_ids)):
                intersections.extend(self._wire_pair_intersections(wire_ids[i], wire_ids[j]))

        return intersections

    def _wire_pair_intersections(self, wire1_id: str, wire2_id: str) -> List[SegmentIntersection]:
        found: List[SegmentIntersection] = []
        points: List[Point] = []

        for seg1 in self.wire_segments.get(wire1_id, []):
            for seg2 in self.wire_segments.get(wire2_id, []):
                point = self._segment_intersection(seg1, seg2)
                if point is None or any(points_close(point, p, self.tolerance) for p in points):
                    continue
                points.append(point)

                existing = self._junction_at(point)
                found.append(SegmentIntersection(
                    point=point,
                    wire1_id=wire1_id,
                    wire2_id=wire2_id,
                    needs_junction=existing is None,
                    junction_id=existing.id if existing else None
                ))

        return found

    def _segment_intersection(self, seg1: WireSegment, seg2: WireSegment) -> Optional[Point]:
        """Fast test for horizontal/vertical pairs, general line intersection otherwise."""
        if seg1.is_horizontal(self.tolerance) and seg2.is_vertical(self.tolerance):
            return orthogonal_intersection(seg1, seg2)
        if seg1.is_vertical(self.tolerance) and seg2.is_horizontal(self.tolerance):
            return orthogonal_intersection(seg2, seg1)
        return line_intersection(seg1.start, seg1.end, seg2.start, seg2.end)

    def _junction_at(self, point: Point) -> Optional[Junction]:
        for junction in self.junctions.values():
            if point_distance(junction.position, point) <= self.tolerance:
                return junction
        return None

    def _record_intersection(self, intersection: SegmentIntersection) -> None:
        """Create a junction, or merge the wires into the one already there."""
        existing = self._junction_at(intersection.point)
        if existing is None:
            self.create_junction(intersection.point, [intersection.wire1_id, intersection.wire2_id])
            return

        added = False
        for wire_id in (intersection.wire1_id, intersection.wire2_id):
            if wire_id not in existing.connected_wires:
                existing.connected_wires.append(wire_id)
                added = True

        if added:
            self._refresh_type(existing)
            self._notify_update(existing)

    def _refresh_type(self, junction: Junction) -> None:
        if junction.id not in self._explicit_types:
            junction.junction_type = junction_type_for(len(junction.connected_wires))

    # ------------------------------------------------------------------
    # Junctions
    # ------------------------------------------------------------------

    def create_junction(
        self,
        position: Point,
        connected_wires: Sequence[str],
        junction_type: Optional[str] = None
    ) -> str:
        """
        Create a junction.

        Args:
            position: Junction location
            connected_wires: Ids of the wires meeting there
            junction_type: Explicit type; derived from the wire count if None

        Returns:
            New junction id
        """
        junction_id = f"junction_{next(self._ids)}"
        junction = Junction(
            id=junction_id,
            position=position,
            connected_wires=list(connected_wires),
            junction_type=junction_type or junction_type_for(len(connected_wires)),
            style=JunctionStyle(),
        )

        if junction_type:
            self._explicit_types.add(junction_id)

        self.junctions[junction_id] = junction
        logger.debug(f"Created {junction.junction_type} junction {junction_id} at ({position.x}, {position.y})")
        self._notify_create(junction)
        return junction_id

    def remove_junction(self, junction_id: str) -> bool:
        """Delete a junction; returns False if it didn't exist."""
        if junction_id not in self.junctions:
            return False

        del self.junctions[junction_id]
        self._explicit_types.discard(junction_id)
        if self._on_delete:
            self._on_delete(junction_id)
        return True

    def _require(self, junction_id: str) -> Junction:
        try:
            return self.junctions[junction_id]
        except KeyError:
            raise JunctionNotFoundError(f"Unknown junction: '{junction_id}'") from None

    def move_junction(self, junction_id: str, position: Point) -> bool:
        """
        Move an unlocked junction.

        Returns:
            False if the junction is locked (it is left unchanged)

        Raises:
            JunctionNotFoundError: If the junction doesn't exist
        """
        junction = self._require(junction_id)
        if junction.locked:
            return False

        junction.position = position
        self._notify_update(junction)
        return True

    def lock_junction(self, junction_id: str, locked: bool = True) -> None:
        """Lock (or unlock) a junction against moves and pruning."""
        junction = self._require(junction_id)
        junction.locked = locked
        self._notify_update(junction)

    def set_junction_style(self, junction_id: str, **style) -> None:
        """
        Update marker appearance.

        Keyword arguments are JunctionStyle fields (size, color, shape,
        show_label, label_text).
        """
        junction = self._require(junction_id)
        junction.style = JunctionStyle(**{**junction.style.model_dump(), **style})
        self._notify_update(junction)

    def get_junction(self, junction_id: str) -> Optional[Junction]:
        junction = self.junctions.get(junction_id)
        return junction.model_copy(deep=True) if junction else None

    def get_all_junctions(self) -> List[Junction]:
        return [junction.model_copy(deep=True) for junction in self.junctions.values()]

    def get_junctions_for_wire(self, wire_id: str) -> List[Junction]:
        return [
            junction.model_copy(deep=True)
            for junction in self.junctions.values()
            if wire_id in junction.connected_wires
        ]

    # ------------------------------------------------------------------
    # Optimization
    # ------------------------------------------------------------------

    def optimize_junctions(self) -> List[str]:
        """
        Remove redundant pass-through junctions.

        An unlocked junction joining two wires is redundant when exactly two
        segments end at it and they continue in a straight line.

        Returns:
            Ids of removed junctions
        """
        redundant = [
            junction_id
            for junction_id, junction in self.junctions.items()
            if len(junction.connected_wires) == 2 and not junction.locked and self._is_redundant(junction)
        ]

        for junction_id in redundant:
            self.remove_junction(junction_id)

        if redundant:
            logger.debug(f"Removed {len(redundant)} redundant junctions")
        return redundant

    def _is_redundant(self, junction: Junction) -> bool:
        position = junction.position
        connecting = [
            segment
            for wire_id in junction.connected_wires
            for segment in self.wire_segments.get(wire_id, [])
            if segment.has_endpoint(position, self.tolerance)
        ]

        if len(connecting) != 2:
            return False

        far1 = connecting[0].far_endpoint(position, self.tolerance)
        far2 = connecting[1].far_endpoint(position, self.tolerance)
        return collinear_area(position, far1, far2) < self.tolerance

    def dispose(self) -> None:
        """Forget all wires and junctions."""
        self.junctions.clear()
        self.wire_segments.clear()
        self._explicit_types.clear()

"""
Records exchanged between the routing core and the diagram editor
"""

from enum import Enum
from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field

from .geometry import Point, Rectangle, WireSegment


ConnectionType = Literal['ac', 'dc', 'ground', 'data']
Severity = Literal['low', 'medium', 'high']
IntersectionType = Literal['crossing', 'overlap', 'junction']
JunctionType = Literal['T', 'cross', 'corner', 'terminal']


class WireState(str, Enum):
    """Lifecycle of a routed wire"""
    UNROUTED = 'unrouted'
    ROUTED = 'routed'
    COLLIDING = 'colliding'
    REROUTED = 'rerouted'
    REMOVED = 'removed'


class ComponentBounds(BaseModel):
    """Placed component geometry supplied by the editor (read-only here)

    Attributes:
        id: Component identifier
        bounds: Bounding box on the canvas
        connection_points: Terminal locations, first one is used for routing
        type: Obstacle kind
    """
    model_config = ConfigDict(frozen=True)

    id: str
    bounds: Rectangle
    connection_points: List[Point] = Field(default_factory=list)
    type: Literal['component', 'wire', 'text', 'exclusion'] = 'component'

    @property
    def anchor(self) -> Point:
        """Point wires attach to: first connection point, else the center."""
        if self.connection_points:
            return self.connection_points[0]
        return self.bounds.center


class Connection(BaseModel):
    """Editor-side connection between two components"""
    model_config = ConfigDict(frozen=True)

    id: str
    from_component_id: str
    to_component_id: str
    connection_type: ConnectionType = 'ac'


class RoutedWire(BaseModel):
    """Computed orthogonal route

    Attributes:
        id: Wire identifier (the connection id)
        segments: Straight pieces in path order
        total_length: Sum of segment lengths
        bend_count: Direction changes between consecutive segments
        start: First path point
        end: Last path point
        path: Polyline vertices
        quality: 0-1 efficiency score
        connection_type: Electrical kind, used for styling
        strategy: Strategy that produced the route ('fallback' for the direct segment)
    """
    model_config = ConfigDict(frozen=True)

    id: str
    segments: List[WireSegment]
    total_length: float
    bend_count: int
    start: Point
    end: Point
    path: List[Point]
    quality: float = Field(ge=0.0, le=1.0)
    connection_type: ConnectionType = 'ac'
    strategy: str = 'astar'

    @property
    def is_fallback(self) -> bool:
        return self.strategy == 'fallback'


class CollisionResult(BaseModel):
    """One detected collision"""
    model_config = ConfigDict(frozen=True)

    has_collision: bool
    collision_points: List[Point] = Field(default_factory=list)
    affected_wires: List[str] = Field(default_factory=list)
    severity: Severity
    description: str


class WireIntersection(BaseModel):
    """Meeting point of two wires"""
    model_config = ConfigDict(frozen=True)

    wire_id1: str
    wire_id2: str
    point: Point
    type: IntersectionType
    severity: float = Field(ge=0.0, le=1.0)


class RerouteResult(BaseModel):
    """Outcome of re-routing one wire"""
    model_config = ConfigDict(frozen=True)

    wire_id: str
    success: bool
    new_route: Optional[RoutedWire] = None
    old_route: RoutedWire
    improvement: float
    reason: str


class JunctionStyle(BaseModel):
    """Marker appearance for a junction"""
    size: float = 6
    color: str = '#2563eb'
    shape: Literal['circle', 'square', 'diamond'] = 'circle'
    show_label: bool = False
    label_text: Optional[str] = None


class Junction(BaseModel):
    """Point where two or more wires meet"""
    id: str
    position: Point
    connected_wires: List[str]
    junction_type: JunctionType
    style: JunctionStyle = Field(default_factory=JunctionStyle)
    locked: bool = False


class SegmentIntersection(BaseModel):
    """Intersection found by the junction manager"""
    model_config = ConfigDict(frozen=True)

    point: Point
    wire1_id: str
    wire2_id: str
    needs_junction: bool
    junction_id: Optional[str] = None

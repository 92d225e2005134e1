"""
Wire Router - orthogonal wire routing and collision avoidance
Grid-based path planning for CAD-style diagram editors
"""

from importlib.metadata import version, PackageNotFoundError

from .core.config import RouterConfig
from .core.geometry import Point, Rectangle, WireSegment
from .core.models import (
    CollisionResult,
    ComponentBounds,
    Connection,
    Junction,
    JunctionStyle,
    RerouteResult,
    RoutedWire,
    WireIntersection,
    WireState,
)
from .collision.detector import WireCollisionDetector
from .junctions.manager import JunctionManager
from .routing.engine import WireRoutingEngine
from .session import DiagramSession

try:
    __version__ = version("wire-router")
except PackageNotFoundError:
    # Package not installed (development mode)
    __version__ = "0.0.0.dev"

__all__ = [
    "RouterConfig",
    "Point",
    "Rectangle",
    "WireSegment",
    "CollisionResult",
    "ComponentBounds",
    "Connection",
    "Junction",
    "JunctionStyle",
    "RerouteResult",
    "RoutedWire",
    "WireIntersection",
    "WireState",
    "WireCollisionDetector",
    "JunctionManager",
    "WireRoutingEngine",
    "DiagramSession",
]

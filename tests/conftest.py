"""
Shared pytest fixtures and utilities for testing
"""

import pytest

from wire_router.core.config import QualityOptions, RouterConfig
from wire_router.core.geometry import Point, Rectangle, count_bends, manhattan_distance
from wire_router.core.models import ComponentBounds, Connection
from wire_router.routing.engine import WireRoutingEngine
from wire_router.routing.path_optimizer import build_routed_wire


@pytest.fixture
def config():
    """Default router configuration"""
    return RouterConfig()


@pytest.fixture
def canvas():
    """Canvas used by most routing tests"""
    return Rectangle(0, 0, 400, 300)


@pytest.fixture
def engine(config, canvas):
    """Engine with an empty canvas"""
    engine = WireRoutingEngine(config)
    engine.set_obstacles([], canvas)
    return engine


@pytest.fixture
def blocking_component():
    """Component sitting on the straight line from (0, 100) to (200, 100)"""
    return make_component('blocker', 80, 80, 40, 40)


@pytest.fixture
def blocked_engine(config, canvas, blocking_component):
    """Engine whose canvas holds the blocking component"""
    engine = WireRoutingEngine(config)
    engine.set_obstacles([blocking_component], canvas)
    return engine


@pytest.fixture
def diagram_components():
    """Four components laid out in a square with space between them"""
    return [
        make_component('panel', 40, 40, 40, 40),
        make_component('inverter', 280, 40, 40, 40),
        make_component('meter', 40, 200, 40, 40),
        make_component('breaker', 280, 200, 40, 40),
    ]


@pytest.fixture
def diagram_connections():
    """Connections around the square, each component touched twice"""
    return [
        Connection(id='top', from_component_id='panel', to_component_id='inverter', connection_type='dc'),
        Connection(id='right', from_component_id='inverter', to_component_id='breaker'),
        Connection(id='bottom', from_component_id='breaker', to_component_id='meter'),
        Connection(id='left', from_component_id='meter', to_component_id='panel', connection_type='ground'),
    ]


# Helper functions for tests

def make_component(component_id, x, y, width, height, connection_points=None):
    """Build a ComponentBounds from plain numbers"""
    return ComponentBounds(
        id=component_id,
        bounds=Rectangle(x, y, width, height),
        connection_points=[Point(px, py) for px, py in (connection_points or [])]
    )


def make_wire(wire_id, *coords, connection_type='ac'):
    """
    Build a RoutedWire through the given (x, y) vertices

    Example:
        make_wire('w1', (0, 0), (100, 0), (100, 50))
    """
    points = [Point(x, y) for x, y in coords]
    return build_routed_wire(points, wire_id, connection_type, 'astar', QualityOptions())


def assert_orthogonal(wire):
    """Assert that every segment is horizontal or vertical"""
    for segment in wire.segments:
        assert segment.start.x == segment.end.x or segment.start.y == segment.end.y, \
            f"Diagonal segment in {wire.id}: {segment}"


def assert_route_invariants(wire):
    """Assert the structural invariants every RoutedWire must hold"""
    assert wire.path[0] == wire.start, f"Path starts at {wire.path[0]}, expected {wire.start}"
    assert wire.path[-1] == wire.end, f"Path ends at {wire.path[-1]}, expected {wire.end}"

    total = sum(segment.length for segment in wire.segments)
    assert wire.total_length == pytest.approx(total)
    assert wire.total_length >= manhattan_distance(wire.start, wire.end) - 1e-9

    assert wire.bend_count == count_bends(wire.segments)
    assert 0.0 <= wire.quality <= 1.0


def assert_avoids(wire, rectangle):
    """Assert that no path vertex or segment enters the rectangle's interior"""
    for segment in wire.segments:
        xs = sorted((segment.start.x, segment.end.x))
        ys = sorted((segment.start.y, segment.end.y))
        overlaps_x = xs[0] < rectangle.right and xs[1] > rectangle.x
        overlaps_y = ys[0] < rectangle.bottom and ys[1] > rectangle.y
        assert not (overlaps_x and overlaps_y), f"Segment {segment} of {wire.id} crosses {rectangle}"

"""
Tests for the wire registry and the wire lifecycle
"""

import pytest

from wire_router.core.geometry import Rectangle
from wire_router.core.models import WireState
from wire_router.exceptions import InvalidStateTransitionError, WireNotFoundError
from wire_router.routing.grid import CellState, Grid
from wire_router.routing.registry import WireRegistry
from tests.conftest import make_wire


class TestRegistration:
    """Test suite for storing and removing wires"""

    def test_register_sets_routed(self):
        """Test that a new wire starts in ROUTED"""
        registry = WireRegistry()
        registry.register(make_wire('w1', (0, 0), (100, 0)))

        assert 'w1' in registry
        assert registry.state('w1') == WireState.ROUTED
        assert registry.get('w1').total_length == 100

    def test_unknown_wire_is_unrouted(self):
        """Test the state of ids never seen"""
        registry = WireRegistry()
        assert registry.state('nope') == WireState.UNROUTED
        assert registry.find('nope') is None

        with pytest.raises(WireNotFoundError):
            registry.get('nope')

    def test_register_replaces_route(self):
        """Test that re-registering an id replaces the route"""
        registry = WireRegistry()
        registry.register(make_wire('w1', (0, 0), (100, 0)))
        registry.register(make_wire('w1', (0, 0), (0, 100)))

        assert len(registry) == 1
        assert registry.get('w1').end.y == 100

    def test_remove(self):
        """Test that removal is terminal for the wire"""
        registry = WireRegistry()
        registry.register(make_wire('w1', (0, 0), (100, 0)))

        removed = registry.remove('w1')

        assert removed.id == 'w1'
        assert 'w1' not in registry
        assert registry.state('w1') == WireState.REMOVED

        with pytest.raises(InvalidStateTransitionError):
            registry.transition('w1', WireState.ROUTED)

    def test_removed_id_can_be_registered_again(self):
        """Test that a new connection may reuse a deleted id"""
        registry = WireRegistry()
        registry.register(make_wire('w1', (0, 0), (100, 0)))
        registry.remove('w1')
        registry.register(make_wire('w1', (0, 0), (0, 100)))

        assert registry.state('w1') == WireState.ROUTED

    def test_remove_unknown_raises(self):
        """Test removal of an unknown id"""
        with pytest.raises(WireNotFoundError):
            WireRegistry().remove('ghost')

    def test_all_wires_keeps_registration_order(self):
        """Test ordering of all_wires"""
        registry = WireRegistry()
        for wire_id in ('c', 'a', 'b'):
            registry.register(make_wire(wire_id, (0, 0), (20, 0)))

        assert [wire.id for wire in registry.all_wires()] == ['c', 'a', 'b']


class TestLifecycle:
    """Test suite for state transitions"""

    def test_collision_cycle(self):
        """Test ROUTED -> COLLIDING -> REROUTED -> ROUTED"""
        registry = WireRegistry()
        registry.register(make_wire('w1', (0, 0), (100, 0)))

        registry.transition('w1', WireState.COLLIDING)
        registry.transition('w1', WireState.REROUTED)
        registry.register(make_wire('w1', (0, 0), (0, 100)))

        assert registry.state('w1') == WireState.ROUTED

    def test_unrouted_cannot_collide(self):
        """Test that a wire must be routed before it can collide"""
        with pytest.raises(InvalidStateTransitionError):
            WireRegistry().transition('w1', WireState.COLLIDING)

    def test_rerouted_requires_colliding(self):
        """Test that REROUTED is only reachable from COLLIDING"""
        registry = WireRegistry()
        registry.register(make_wire('w1', (0, 0), (100, 0)))

        with pytest.raises(InvalidStateTransitionError):
            registry.transition('w1', WireState.REROUTED)

    def test_unresolvable_flag(self):
        """Test that failed re-routes stay COLLIDING with a flag"""
        registry = WireRegistry()
        registry.register(make_wire('w1', (0, 0), (100, 0)))

        registry.mark_unresolvable('w1')

        assert registry.state('w1') == WireState.COLLIDING
        assert registry.is_unresolvable('w1')

        # A new route clears the flag
        registry.register(make_wire('w1', (0, 0), (0, 100)))
        assert not registry.is_unresolvable('w1')


class TestGridProjection:
    """Test suite for marking registered wires into a grid"""

    def test_mark_into_with_exclusion(self):
        """Test that an excluded wire leaves no cells"""
        registry = WireRegistry()
        registry.register(make_wire('w1', (0, 0), (100, 0)))
        registry.register(make_wire('w2', (0, 100), (100, 100)))

        grid = Grid(Rectangle(0, 0, 200, 200), resolution=20)
        marked = registry.mark_into(grid, exclude='w2')

        assert marked == 6
        assert grid.count_cells(CellState.WIRE) == 6

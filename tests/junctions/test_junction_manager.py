"""
Tests for junction tracking
"""

import pytest

from wire_router.core.geometry import Point, WireSegment
from wire_router.exceptions import JunctionNotFoundError
from wire_router.junctions.manager import JunctionManager, junction_type_for
from tests.conftest import make_wire


def segments(*coords):
    points = [Point(x, y) for x, y in coords]
    return [WireSegment(points[i], points[i + 1]) for i in range(len(points) - 1)]


@pytest.fixture
def crossing_manager():
    """Manager holding two wires that cross at (100, 100)"""
    manager = JunctionManager()
    manager.add_wire('h', segments((0, 100), (200, 100)))
    manager.add_wire('v', segments((100, 0), (100, 200)))
    return manager


class TestJunctionTypes:
    """Test suite for junction type derivation"""

    @pytest.mark.parametrize('count,expected', [
        (1, 'terminal'),
        (2, 'corner'),
        (3, 'T'),
        (4, 'cross'),
        (5, 'terminal'),
    ])
    def test_type_from_wire_count(self, count, expected):
        assert junction_type_for(count) == expected

    def test_type_follows_merged_wires(self, crossing_manager):
        """Test corner -> T -> cross as wires join the same point"""
        [junction] = crossing_manager.get_all_junctions()
        assert junction.junction_type == 'corner'

        crossing_manager.add_wire('tail', segments((100, 100), (100, 300)))
        assert crossing_manager.get_junction(junction.id).junction_type == 'T'

        crossing_manager.add_wire('stub', segments((50, 100), (150, 100)))
        updated = crossing_manager.get_junction(junction.id)
        assert updated.junction_type == 'cross'
        assert sorted(updated.connected_wires) == ['h', 'stub', 'tail', 'v']

    def test_explicit_type_is_kept(self):
        """Test that explicitly typed junctions are not re-derived"""
        manager = JunctionManager()
        junction_id = manager.create_junction(Point(100, 100), ['h', 'v'], junction_type='terminal')

        manager.add_wire('h', segments((0, 100), (200, 100)))
        manager.add_wire('v', segments((100, 0), (100, 200)))
        manager.add_wire('tail', segments((100, 100), (100, 300)))

        junction = manager.get_junction(junction_id)
        assert junction.junction_type == 'terminal'
        assert len(manager.get_all_junctions()) == 1


class TestWireIndex:
    """Test suite for adding, updating and removing wires"""

    def test_crossing_creates_junction(self, crossing_manager):
        junctions = crossing_manager.get_all_junctions()

        assert len(junctions) == 1
        assert junctions[0].id == 'junction_1'
        assert junctions[0].position == Point(100, 100)
        assert junctions[0].connected_wires == ['h', 'v']

    def test_routed_wires_are_accepted(self):
        """Test indexing RoutedWire records"""
        manager = JunctionManager()
        manager.add_routed_wire(make_wire('a', (0, 0), (100, 0), (100, 100)))
        manager.add_routed_wire(make_wire('b', (50, 50), (150, 50)))

        [junction] = manager.get_all_junctions()
        assert junction.position == Point(100, 50)

    def test_remove_wire_prunes_junctions(self, crossing_manager):
        """Test that junctions need at least two wires"""
        crossing_manager.add_wire('tail', segments((100, 100), (100, 300)))

        crossing_manager.remove_wire('tail')
        [junction] = crossing_manager.get_all_junctions()
        assert junction.junction_type == 'corner'

        crossing_manager.remove_wire('v')
        assert crossing_manager.get_all_junctions() == []

    def test_update_wire_moves_junction(self, crossing_manager):
        """Test that new segments produce new junctions"""
        crossing_manager.update_wire('v', segments((160, 0), (160, 200)))

        [junction] = crossing_manager.get_all_junctions()
        assert junction.position == Point(160, 100)
        assert crossing_manager.get_junctions_for_wire('v')[0].id == junction.id

    def test_dispose(self, crossing_manager):
        crossing_manager.dispose()

        assert crossing_manager.get_all_junctions() == []
        assert crossing_manager.find_intersections() == []


class TestIntersections:
    """Test suite for find_intersections"""

    def test_existing_junction_is_referenced(self, crossing_manager):
        [intersection] = crossing_manager.find_intersections()

        assert intersection.point == Point(100, 100)
        assert not intersection.needs_junction
        assert intersection.junction_id == 'junction_1'

    def test_missing_junction_is_flagged(self, crossing_manager):
        """Test needs_junction after the junction was deleted"""
        assert crossing_manager.remove_junction('junction_1')

        [intersection] = crossing_manager.find_intersections()

        assert intersection.needs_junction
        assert intersection.junction_id is None

    def test_point_reported_once_per_pair(self):
        """Test that a crossing at a bend is found once"""
        manager = JunctionManager()
        manager.add_wire('bent', segments((100, 0), (100, 100), (200, 100)))
        manager.add_wire('diagonal', segments((50, 50), (150, 150)))

        intersections = manager.find_intersections()

        assert len(intersections) == 1
        assert len(manager.get_all_junctions()) == 1

    def test_parallel_wires_do_not_meet(self):
        manager = JunctionManager()
        manager.add_wire('a', segments((0, 100), (200, 100)))
        manager.add_wire('b', segments((0, 140), (200, 140)))

        assert manager.find_intersections() == []


class TestJunctionEditing:
    """Test suite for move, lock and style operations"""

    def test_move_junction(self, crossing_manager):
        assert crossing_manager.move_junction('junction_1', Point(120, 100))
        assert crossing_manager.get_junction('junction_1').position == Point(120, 100)

    def test_locked_junction_does_not_move(self, crossing_manager):
        crossing_manager.lock_junction('junction_1')

        assert not crossing_manager.move_junction('junction_1', Point(120, 100))
        assert crossing_manager.get_junction('junction_1').position == Point(100, 100)

        crossing_manager.lock_junction('junction_1', locked=False)
        assert crossing_manager.move_junction('junction_1', Point(120, 100))

    def test_unknown_junction(self, crossing_manager):
        with pytest.raises(JunctionNotFoundError):
            crossing_manager.move_junction('junction_99', Point(0, 0))

        assert crossing_manager.get_junction('junction_99') is None
        assert not crossing_manager.remove_junction('junction_99')

    def test_style(self, crossing_manager):
        """Test that unspecified style fields keep their values"""
        crossing_manager.set_junction_style('junction_1', color='#000000', size=10)

        style = crossing_manager.get_junction('junction_1').style
        assert style.color == '#000000'
        assert style.size == 10
        assert style.shape == 'circle'

    def test_returned_junctions_are_copies(self, crossing_manager):
        """Test that callers can't change stored junctions"""
        junction = crossing_manager.get_junction('junction_1')
        junction.connected_wires.append('intruder')
        junction.position = Point(0, 0)

        stored = crossing_manager.get_junction('junction_1')
        assert stored.connected_wires == ['h', 'v']
        assert stored.position == Point(100, 100)


class TestCallbacks:
    """Test suite for change notifications"""

    def test_create_update_delete(self):
        created, updated, deleted = [], [], []
        manager = JunctionManager()
        manager.set_create_callback(lambda junction: created.append(junction.id))
        manager.set_update_callback(lambda junction: updated.append(junction.junction_type))
        manager.set_delete_callback(deleted.append)

        manager.add_wire('h', segments((0, 100), (200, 100)))
        manager.add_wire('v', segments((100, 0), (100, 200)))
        manager.add_wire('tail', segments((100, 100), (100, 300)))
        manager.remove_wire('h')
        manager.remove_wire('v')

        assert created == ['junction_1']
        assert updated == ['T', 'corner']
        assert deleted == ['junction_1']


class TestOptimization:
    """Test suite for redundant junction removal"""

    def test_straight_pass_through_is_removed(self):
        manager = JunctionManager()
        manager.add_wire('a', segments((0, 100), (100, 100)))
        manager.add_wire('b', segments((100, 100), (200, 100)))
        junction_id = manager.create_junction(Point(100, 100), ['a', 'b'])

        assert manager.optimize_junctions() == [junction_id]
        assert manager.get_all_junctions() == []

    def test_corner_is_kept(self):
        manager = JunctionManager()
        manager.add_wire('a', segments((0, 100), (100, 100)))
        manager.add_wire('c', segments((100, 100), (100, 200)))

        assert len(manager.get_all_junctions()) == 1
        assert manager.optimize_junctions() == []

    def test_locked_junction_is_kept(self):
        manager = JunctionManager()
        manager.add_wire('a', segments((0, 100), (100, 100)))
        manager.add_wire('b', segments((100, 100), (200, 100)))
        junction_id = manager.create_junction(Point(100, 100), ['a', 'b'])
        manager.lock_junction(junction_id)

        assert manager.optimize_junctions() == []

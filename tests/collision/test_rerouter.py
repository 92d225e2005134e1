"""
Tests for re-routing colliding wires
"""

from wire_router.collision.detector import WireCollisionDetector
from wire_router.collision.rerouter import FAILED_IMPROVEMENT, REROUTE_PRESETS, WireRerouter
from wire_router.core.geometry import Rectangle
from wire_router.core.models import WireState
from wire_router.routing.engine import WireRoutingEngine
from tests.conftest import assert_avoids, make_component, make_wire


class TestRerouteWire:
    """Test suite for single-wire re-routing"""

    def test_successful_reroute(self, canvas, blocking_component):
        """Test that the first preset with the best quality is reported"""
        rerouter = WireRerouter()
        wire = make_wire('w', (0, 100), (200, 100))

        result = rerouter.reroute_wire(wire, [], [blocking_component], canvas)

        assert result.success
        assert result.wire_id == 'w'
        assert result.reason == f"Successfully re-routed using {REROUTE_PRESETS[0]} strategy"
        assert_avoids(result.new_route, blocking_component.bounds)

    def test_custom_presets(self, canvas, blocking_component):
        """Test that only the configured presets are tried"""
        rerouter = WireRerouter(presets=('shortest',))
        wire = make_wire('w', (0, 100), (200, 100))

        result = rerouter.reroute_wire(wire, [], [blocking_component], canvas)

        assert result.reason == "Successfully re-routed using shortest strategy"

    def test_wall_cannot_be_passed(self, canvas):
        """Test failure when every preset ends in the direct fallback"""
        wall = make_component('wall', 100, 0, 200, 300)
        wire = make_wire('w', (0, 100), (380, 100))

        result = WireRerouter().reroute_wire(wire, [], [wall], canvas)

        assert not result.success
        assert result.new_route is None
        assert result.old_route == wire
        assert result.improvement == FAILED_IMPROVEMENT
        assert result.reason == "No collision-free alternative route found"

    def test_errors_are_reported(self, canvas, blocking_component, monkeypatch):
        """Test that planner errors become failed results"""
        def broken_route(*args, **kwargs):
            raise RuntimeError("grid exploded")

        monkeypatch.setattr(WireRoutingEngine, 'route_wire', broken_route)
        wire = make_wire('w', (0, 100), (200, 100))

        result = WireRerouter().reroute_wire(wire, [], [blocking_component], canvas)

        assert not result.success
        assert result.improvement == FAILED_IMPROVEMENT
        assert result.reason == "Re-routing failed: grid exploded"

    def test_other_wires_are_respected(self, canvas, blocking_component):
        """Test that existing wires act as soft obstacles during re-routing"""
        rerouter = WireRerouter()
        first = rerouter.reroute_wire(
            make_wire('a', (0, 100), (200, 100)), [], [blocking_component], canvas
        ).new_route

        second = rerouter.reroute_wire(
            make_wire('b', (0, 100), (200, 100)), [first], [blocking_component], canvas
        ).new_route

        assert second.path != first.path
        assert_avoids(second, blocking_component.bounds)


class TestRerouteWires:
    """Test suite for batch re-routing"""

    def test_each_wire_once(self, canvas, blocking_component):
        """Test that repeated and unknown ids are skipped"""
        wire = make_wire('w', (0, 100), (200, 100))

        results = WireRerouter().reroute_wires(['w', 'w', 'ghost'], [wire], [blocking_component], canvas)

        assert [result.wire_id for result in results] == ['w']

    def test_later_wires_see_earlier_routes(self, canvas, blocking_component):
        """Test that two wires through the same component split up"""
        wires = [
            make_wire('a', (0, 100), (200, 100)),
            make_wire('b', (0, 100), (200, 100)),
        ]

        results = WireRerouter().reroute_wires(['a', 'b'], wires, [blocking_component], canvas)

        assert all(result.success for result in results)
        assert results[0].new_route.path != results[1].new_route.path


class TestApplyReroute:
    """Test suite for committing re-route results into an engine"""

    def test_successful_result_is_committed(self, blocked_engine):
        """Test COLLIDING -> REROUTED -> ROUTED"""
        blocked_engine.preload_wires([make_wire('w', (0, 100), (200, 100))])
        detector = WireCollisionDetector(blocked_engine)

        results = detector.reroute_colliding_wires()
        assert blocked_engine.wire_state('w') == WireState.COLLIDING

        assert blocked_engine.apply_reroute(results[0])

        assert blocked_engine.wire_state('w') == WireState.ROUTED
        assert blocked_engine.get_wire('w') == results[0].new_route
        assert detector.detect_all_collisions() == []

    def test_failed_result_marks_unresolvable(self):
        """Test that a failed re-route keeps the wire colliding"""
        canvas = Rectangle(0, 0, 400, 300)
        wall = make_component('wall', 100, 0, 200, 300)
        engine = WireRoutingEngine()
        engine.set_obstacles([wall], canvas)
        engine.preload_wires([make_wire('w', (0, 100), (380, 100))])
        detector = WireCollisionDetector(engine)

        results = detector.reroute_colliding_wires()

        assert not engine.apply_reroute(results[0])
        assert engine.wire_state('w') == WireState.COLLIDING
        assert engine.registry.is_unresolvable('w')
        assert engine.get_wire('w').path == results[0].old_route.path

    def test_unknown_wire_is_ignored(self, engine, canvas, blocking_component):
        """Test results for wires the engine doesn't know"""
        result = WireRerouter().reroute_wire(
            make_wire('stranger', (0, 100), (200, 100)), [], [blocking_component], canvas
        )

        assert not engine.apply_reroute(result)
        assert engine.get_all_wires() == []

"""
Tests for geometry primitives
"""

import pytest

from wire_router.core.geometry import (
    HORIZONTAL,
    VERTICAL,
    Point,
    Rectangle,
    WireSegment,
    count_bends,
    line_intersection,
    orthogonal_intersection,
    segment_rectangle_intersections,
    segments_from_path,
    segments_overlap,
)


def seg(x1, y1, x2, y2):
    return WireSegment(Point(x1, y1), Point(x2, y2))


class TestRectangle:
    """Test suite for Rectangle helpers"""

    def test_edges_and_center(self):
        box = Rectangle(10, 20, 40, 60)
        assert box.right == 50
        assert box.bottom == 80
        assert box.center == Point(30, 50)

    def test_contains_includes_border(self):
        box = Rectangle(0, 0, 10, 10)
        assert box.contains(Point(10, 10))
        assert not box.contains(Point(10.5, 5))

    def test_expanded(self):
        assert Rectangle(10, 10, 20, 20).expanded(5) == Rectangle(5, 5, 30, 30)

    @pytest.mark.parametrize('width,height,degenerate', [
        (0, 10, True),
        (10, 0, True),
        (-1, 10, True),
        (1, 1, False),
    ])
    def test_degenerate(self, width, height, degenerate):
        assert Rectangle(0, 0, width, height).is_degenerate() == degenerate


class TestSegments:
    """Test suite for WireSegment and path helpers"""

    def test_direction_and_length(self):
        assert seg(0, 0, 100, 0).direction == HORIZONTAL
        assert seg(0, 0, 0, 50).direction == VERTICAL
        assert seg(0, 0, 30, 40).length == 70

    def test_count_bends(self):
        path = [Point(0, 0), Point(100, 0), Point(100, 100), Point(200, 100)]
        assert count_bends(segments_from_path(path)) == 2
        assert count_bends(segments_from_path([Point(0, 0)])) == 0

    def test_far_endpoint(self):
        segment = seg(0, 0, 100, 0)
        assert segment.has_endpoint(Point(1, 0), tolerance=2)
        assert segment.far_endpoint(Point(1, 0), tolerance=2) == Point(100, 0)


class TestIntersections:
    """Test suite for intersection tests"""

    def test_crossing_lines(self):
        assert line_intersection(Point(0, 0), Point(10, 10), Point(0, 10), Point(10, 0)) == Point(5, 5)

    def test_parallel_lines(self):
        assert line_intersection(Point(0, 0), Point(10, 0), Point(0, 5), Point(10, 5)) is None

    def test_disjoint_segments(self):
        """Test that lines meeting outside both segments don't intersect"""
        assert line_intersection(Point(0, 0), Point(10, 0), Point(20, -5), Point(20, 5)) is None

    def test_touching_segments(self):
        """Test that endpoints count as intersections"""
        assert line_intersection(Point(0, 0), Point(10, 0), Point(10, 0), Point(10, 10)) == Point(10, 0)

    def test_orthogonal_intersection(self):
        assert orthogonal_intersection(seg(0, 50, 100, 50), seg(30, 0, 30, 100)) == Point(30, 50)
        assert orthogonal_intersection(seg(0, 50, 100, 50), seg(130, 0, 130, 100)) is None

    def test_segment_through_rectangle(self):
        hits = segment_rectangle_intersections(Point(0, 50), Point(100, 50), Rectangle(40, 40, 20, 20))
        assert sorted(point.x for point in hits) == pytest.approx([40, 60])

    def test_segment_inside_rectangle(self):
        """Test that a fully enclosed segment reports its start"""
        hits = segment_rectangle_intersections(Point(45, 50), Point(55, 50), Rectangle(40, 40, 20, 20))
        assert hits == [Point(45, 50)]

    def test_segment_beside_rectangle(self):
        assert segment_rectangle_intersections(Point(0, 0), Point(100, 0), Rectangle(40, 40, 20, 20)) == []


class TestOverlap:
    """Test suite for segments_overlap"""

    def test_collinear_overlap(self):
        assert segments_overlap(seg(0, 0, 100, 0), seg(50, 0, 150, 0), tolerance=5)

    def test_lateral_offset_within_tolerance(self):
        assert segments_overlap(seg(0, 0, 0, 100), seg(3, 50, 3, 150), tolerance=5)

    def test_lateral_offset_beyond_tolerance(self):
        assert not segments_overlap(seg(0, 0, 100, 0), seg(0, 5, 100, 5), tolerance=5)

    def test_touching_ends(self):
        assert not segments_overlap(seg(0, 0, 100, 0), seg(100, 0, 200, 0), tolerance=5)

    def test_perpendicular(self):
        assert not segments_overlap(seg(0, 0, 100, 0), seg(50, -50, 50, 50), tolerance=5)

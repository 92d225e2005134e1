"""
Tests for DataFrame export of routing results
"""

import polars as pl
import pytest

from wire_router.core.geometry import Point
from wire_router.core.models import CollisionResult
from wire_router.exceptions import ExporterError
from wire_router.exporters import export_collisions_to_dataframe, export_wires_to_dataframe
from tests.conftest import make_wire


class TestWireExport:
    """Test suite for export_wires_to_dataframe"""

    def test_one_row_per_wire(self):
        wires = [
            make_wire('w1', (0, 0), (100, 0)),
            make_wire('w2', (0, 0), (100, 0), (100, 100), connection_type='dc'),
        ]

        df = export_wires_to_dataframe(wires)

        assert df.height == 2
        assert df['wire_id'].to_list() == ['w1', 'w2']
        assert df['connection_type'].to_list() == ['ac', 'dc']
        assert df['bend_count'].to_list() == [0, 1]
        assert df['segment_count'].to_list() == [1, 2]
        assert df['total_length'].to_list() == [100.0, 200.0]
        assert df['path'][1] == '(0,0) -> (100,0) -> (100,100)'
        assert not df['is_fallback'].any()

    def test_empty_input_keeps_schema(self):
        df = export_wires_to_dataframe([])

        assert df.height == 0
        assert df.schema['quality'] == pl.Float64
        assert df.schema['is_fallback'] == pl.Boolean

    def test_invalid_record(self):
        with pytest.raises(ExporterError):
            export_wires_to_dataframe([object()])


class TestCollisionExport:
    """Test suite for export_collisions_to_dataframe"""

    def test_rows(self):
        collisions = [
            CollisionResult(
                has_collision=True,
                collision_points=[Point(70, 100), Point(130, 100)],
                affected_wires=['w1'],
                severity='high',
                description="Wire w1 intersects with components"
            ),
            CollisionResult(
                has_collision=True,
                collision_points=[Point(100, 100)],
                affected_wires=['w1', 'w2'],
                severity='medium',
                description="Wires w1 and w2 intersect at crossing"
            ),
        ]

        df = export_collisions_to_dataframe(collisions)

        assert df['kind'].to_list() == ['component', 'wire']
        assert df['affected_wires'].to_list() == ['w1', 'w1,w2']
        assert df['point_count'].to_list() == [2, 1]
        assert df['first_x'].to_list() == [70.0, 100.0]
        assert df['collision_index'].to_list() == [0, 1]

    def test_empty(self):
        df = export_collisions_to_dataframe([])

        assert df.height == 0
        assert 'severity' in df.columns

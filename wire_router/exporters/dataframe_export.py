"""
Export routing results to Polars DataFrames
"""

import logging
from typing import Any, Dict, List, Sequence

import polars as pl

from ..core.models import CollisionResult, RoutedWire
from ..exceptions import ExporterError

logger = logging.getLogger(__name__)


WIRE_SCHEMA = {
    'wire_id': pl.Utf8,
    'connection_type': pl.Utf8,
    'strategy': pl.Utf8,
    'start_x': pl.Float64,
    'start_y': pl.Float64,
    'end_x': pl.Float64,
    'end_y': pl.Float64,
    'segment_count': pl.Int64,
    'bend_count': pl.Int64,
    'total_length': pl.Float64,
    'quality': pl.Float64,
    'is_fallback': pl.Boolean,
    'path': pl.Utf8,
}

COLLISION_SCHEMA = {
    'collision_index': pl.Int64,
    'severity': pl.Utf8,
    'kind': pl.Utf8,
    'affected_wires': pl.Utf8,
    'point_count': pl.Int64,
    'first_x': pl.Float64,
    'first_y': pl.Float64,
    'description': pl.Utf8,
}


def _format_path(wire: RoutedWire) -> str:
    return ' -> '.join(f"({point.x:g},{point.y:g})" for point in wire.path)


def export_wires_to_dataframe(wires: Sequence[RoutedWire]) -> pl.DataFrame:
    """
    Export routed wires to a Polars DataFrame for analysis

    Args:
        wires: Routed wires

    Returns:
        Polars DataFrame with one row per wire. Schema includes:
        - wire_id, connection_type, strategy
        - start_x, start_y, end_x, end_y: Endpoints
        - segment_count, bend_count, total_length, quality
        - is_fallback: Whether the direct fallback segment was used
        - path: Vertices as text

    Raises:
        ExporterError: If a wire record can't be converted
    """
    rows: List[Dict[str, Any]] = []

    try:
        for wire in wires:
            rows.append({
                'wire_id': wire.id,
                'connection_type': wire.connection_type,
                'strategy': wire.strategy,
                'start_x': float(wire.start.x),
                'start_y': float(wire.start.y),
                'end_x': float(wire.end.x),
                'end_y': float(wire.end.y),
                'segment_count': len(wire.segments),
                'bend_count': wire.bend_count,
                'total_length': float(wire.total_length),
                'quality': float(wire.quality),
                'is_fallback': wire.is_fallback,
                'path': _format_path(wire),
            })
    except (AttributeError, TypeError) as e:
        logger.error(f"Error processing wires: {e}")
        raise ExporterError(f"Failed to process wires: {e}") from e

    if not rows:
        logger.info("No wires, returning empty DataFrame")

    try:
        df = pl.DataFrame(rows, schema=WIRE_SCHEMA)
    except Exception as e:
        logger.error(f"Failed to create Polars DataFrame: {e}")
        raise ExporterError(f"Failed to create DataFrame: {e}") from e

    logger.debug(f"Created DataFrame with {len(df)} wire rows")
    return df


def export_collisions_to_dataframe(collisions: Sequence[CollisionResult]) -> pl.DataFrame:
    """
    Export collision results to a Polars DataFrame

    Wire-component collisions have kind 'component', wire-wire ones 'wire'.
    Affected wire ids are joined with commas.

    Raises:
        ExporterError: If a collision record can't be converted
    """
    rows: List[Dict[str, Any]] = []

    try:
        for index, collision in enumerate(collisions):
            first = collision.collision_points[0] if collision.collision_points else None
            rows.append({
                'collision_index': index,
                'severity': collision.severity,
                'kind': 'wire' if len(collision.affected_wires) > 1 else 'component',
                'affected_wires': ','.join(collision.affected_wires),
                'point_count': len(collision.collision_points),
                'first_x': float(first.x) if first else None,
                'first_y': float(first.y) if first else None,
                'description': collision.description,
            })
    except (AttributeError, TypeError) as e:
        logger.error(f"Error processing collisions: {e}")
        raise ExporterError(f"Failed to process collisions: {e}") from e

    try:
        df = pl.DataFrame(rows, schema=COLLISION_SCHEMA)
    except Exception as e:
        logger.error(f"Failed to create Polars DataFrame: {e}")
        raise ExporterError(f"Failed to create DataFrame: {e}") from e

    logger.debug(f"Created DataFrame with {len(df)} collision rows")
    return df

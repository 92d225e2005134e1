"""
Output formatting and printing utilities for CLI
"""

from typing import Dict, Sequence

import polars as pl

from ..core.models import CollisionResult, RerouteResult, RoutedWire
from ..exporters import export_collisions_to_dataframe, export_wires_to_dataframe


def print_mode_info(run_mode: str) -> None:
    """
    Print information about the selected run mode

    Args:
        run_mode: 'route', 'reroute' or 'optimize'
    """
    mode_messages = {
        'route': "🔌 Route mode: Routing all connections and reporting collisions",
        'reroute': "🔁 Re-route mode: Routing, then re-routing colliding wires",
        'optimize': "📐 Optimize mode: Routing, then re-routing everything shortest first",
    }
    print(mode_messages.get(run_mode, "Unknown run mode"))


def print_separator(width: int = 70, char: str = '=') -> None:
    print(char * width)


def print_wire_table(wires: Sequence[RoutedWire]) -> None:
    """Print one line per wire"""
    df = export_wires_to_dataframe(wires).select(
        'wire_id', 'connection_type', 'strategy', 'total_length', 'bend_count', 'quality'
    )
    with pl.Config(tbl_rows=-1, tbl_hide_dataframe_shape=True):
        print(df)


def print_collision_table(collisions: Sequence[CollisionResult]) -> None:
    """Print collisions, or a short all-clear message"""
    if not collisions:
        print("✅ No collisions detected")
        return

    df = export_collisions_to_dataframe(collisions).select(
        'severity', 'kind', 'affected_wires', 'point_count', 'description'
    )
    with pl.Config(tbl_rows=-1, tbl_hide_dataframe_shape=True, fmt_str_lengths=80):
        print(df)


def print_reroute_results(results: Sequence[RerouteResult]) -> None:
    for result in results:
        icon = "✅" if result.success else "❌"
        if result.success:
            print(f"{icon} {result.wire_id}: {result.reason} (quality {result.improvement:+.3f})")
        else:
            print(f"{icon} {result.wire_id}: {result.reason}")


def print_stats(stats: Dict[str, float]) -> None:
    """Print routing statistics"""
    print(f"Wires: {stats['total_wires']}")
    print(f"Total length: {stats['total_length']:.0f}")
    print(f"Average bends: {stats['average_bends']:.2f}")
    print(f"Average quality: {stats['average_quality']:.3f}")
    print(f"Collisions: {stats['collision_count']} ({stats['critical_collisions']} critical)")

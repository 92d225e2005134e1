"""
Tabular export of routing results

Polars DataFrames with one row per wire or per collision, for analysis
in notebooks and for the CLI tables.
"""

from .dataframe_export import export_wires_to_dataframe, export_collisions_to_dataframe

__all__ = [
    "export_wires_to_dataframe",
    "export_collisions_to_dataframe",
]

"""
Input/Output module for coordinate clusters and composition results.

Provides functions for:
- Loading coordinate clusters from CSV/TSV files
- Exporting composition tables to TSV (one file per atlas) or JSON
"""

from .coordinates import COORDINATE_COLUMNS, load_coordinates
from .export import export_composition_to_json, export_table_to_tsv, save_composition

__all__ = [
    "COORDINATE_COLUMNS",
    "load_coordinates",
    "save_composition",
    "export_table_to_tsv",
    "export_composition_to_json",
]

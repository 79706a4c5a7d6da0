"""
Analysis module for mnilabel.

Provides coordinate-to-region resolution and cluster composition.

Examples
--------
>>> from mnilabel.analysis import compute_composition
>>> result = compute_composition(cluster, ["aal", "ba"])
>>> result["aal.cluster.composition"].as_tuples()
"""

from mnilabel.analysis.composition import (
    ClusterCompositionAggregator,
    build_frequency_table,
    composition_percentage,
    compute_composition,
)
from mnilabel.analysis.resolver import CoordinateResolver, round_half_away_from_zero

__all__ = [
    "CoordinateResolver",
    "ClusterCompositionAggregator",
    "build_frequency_table",
    "composition_percentage",
    "compute_composition",
    "round_half_away_from_zero",
]

"""
Core data structures and utilities for mnilabel.
"""

from .cluster import as_cluster
from .data_types import (
    COUNT_COLUMN,
    NULL_LABEL,
    NULL_LABEL_TEXT,
    PERCENTAGE_COLUMN,
    CompositionResult,
    FrequencyRow,
    FrequencyTable,
    RegionLabel,
)
from .exceptions import (
    AtlasNotFoundError,
    MnilabelError,
    UnknownAtlasError,
    ValidationError,
)
from .keys import build_composition_key, parse_composition_key

__all__ = [
    # Exceptions
    "MnilabelError",
    "ValidationError",
    "AtlasNotFoundError",
    "UnknownAtlasError",
    # Labels and tables
    "RegionLabel",
    "NULL_LABEL",
    "NULL_LABEL_TEXT",
    "FrequencyRow",
    "FrequencyTable",
    "CompositionResult",
    "COUNT_COLUMN",
    "PERCENTAGE_COLUMN",
    # Clusters
    "as_cluster",
    # Keys
    "build_composition_key",
    "parse_composition_key",
]

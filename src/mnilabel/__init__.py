"""
mnilabel - atlas region composition of MNI coordinate clusters.

Resolves MNI coordinates to labelled atlas regions and reports, per atlas,
how often each region occurs within a cluster of coordinates.
"""

try:
    from ._version import __version__
except ImportError:
    # Fallback for development installations without setuptools-scm
    __version__ = "0.0.0+unknown"

from . import data
from .analysis import ClusterCompositionAggregator, CoordinateResolver, compute_composition
from .atlas import AtlasRegistry, load_atlas_registry
from .core.data_types import CompositionResult, FrequencyTable, RegionLabel
from .core.exceptions import UnknownAtlasError

__all__ = [
    "__version__",
    "data",
    "AtlasRegistry",
    "load_atlas_registry",
    "CoordinateResolver",
    "ClusterCompositionAggregator",
    "compute_composition",
    "CompositionResult",
    "FrequencyTable",
    "RegionLabel",
    "UnknownAtlasError",
]

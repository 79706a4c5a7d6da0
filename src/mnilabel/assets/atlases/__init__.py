"""Atlas asset management for mnilabel.

This module provides atlas registry, loading, and management functions.
"""

from mnilabel.assets.atlases.loader import ATLAS_DIR_ENV, Atlas, load_atlas
from mnilabel.assets.atlases.registry import (
    ATLAS_REGISTRY,
    DEFAULT_ATLASES,
    AtlasMetadata,
    list_atlases,
    register_atlas,
    register_atlas_from_files,
    unregister_atlas,
)

__all__ = [
    # Data classes
    "Atlas",
    "AtlasMetadata",
    # Registry
    "ATLAS_REGISTRY",
    "DEFAULT_ATLASES",
    "ATLAS_DIR_ENV",
    # Functions
    "list_atlases",
    "load_atlas",
    "register_atlas",
    "register_atlas_from_files",
    "unregister_atlas",
]

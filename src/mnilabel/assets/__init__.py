"""Asset management for mnilabel.

Atlas assets follow a registry pattern with register/list/load functions.
"""

from mnilabel.assets.atlases import (
    ATLAS_REGISTRY,
    DEFAULT_ATLASES,
    Atlas,
    AtlasMetadata,
    list_atlases,
    load_atlas,
    register_atlas,
    register_atlas_from_files,
    unregister_atlas,
)
from mnilabel.assets.base import (
    AssetMetadata,
    AssetRegistry,
    SpatialAssetMetadata,
)

__all__ = [
    # Base classes
    "AssetMetadata",
    "SpatialAssetMetadata",
    "AssetRegistry",
    # Atlases
    "Atlas",
    "AtlasMetadata",
    "ATLAS_REGISTRY",
    "DEFAULT_ATLASES",
    "list_atlases",
    "load_atlas",
    "register_atlas",
    "register_atlas_from_files",
    "unregister_atlas",
]

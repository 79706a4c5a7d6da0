"""Runtime atlas registry used for coordinate lookups.

This module provides the immutable in-memory registry consumed by the
coordinate resolver and the cluster composition aggregator.
"""

from mnilabel.atlas.registry import AtlasRegistry, AtlasVolume, load_atlas_registry

__all__ = [
    "AtlasRegistry",
    "AtlasVolume",
    "load_atlas_registry",
]

"""Base classes for asset metadata and registries.

This module provides the foundational classes and patterns used for
atlas asset management.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from mnilabel.core.exceptions import ValidationError

#: Coordinate spaces atlas assets may be declared in
SUPPORTED_SPACES = (
    "MNI152NLin6Asym",
    "MNI152NLin2009cAsym",
    "MNI152Lin",
    "MNI305",
)

#: Voxel resolutions (mm) atlas assets may be declared at
SUPPORTED_RESOLUTIONS = (0.5, 1.0, 1.5, 2.0, 3.0)


@dataclass(frozen=True)
class AssetMetadata(ABC):
    """Base class for all asset metadata.

    Attributes
    ----------
    name : str
        Unique identifier for the asset
    description : str
        Human-readable description
    """

    name: str
    description: str

    @abstractmethod
    def validate(self) -> None:
        """Validate metadata consistency.

        Raises
        ------
        ValidationError
            If metadata is invalid
        """
        pass

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for storage."""
        return self.__dict__.copy()


@dataclass(frozen=True)
class SpatialAssetMetadata(AssetMetadata):
    """Base class for assets with spatial properties.

    Adds coordinate space and resolution tracking.

    Attributes
    ----------
    space : str
        Coordinate space identifier (e.g., "MNI152NLin6Asym")
    resolution : float
        Voxel resolution in mm (e.g., 1.0, 2.0)
    """

    space: str
    resolution: float

    def validate(self) -> None:
        """Validate name, space and resolution.

        Raises
        ------
        ValidationError
            If name, space or resolution is invalid
        """
        if not self.name:
            raise ValidationError("Asset name cannot be empty")

        if self.space not in SUPPORTED_SPACES:
            raise ValidationError(
                f"Unsupported space: {self.space}. " f"Supported: {list(SUPPORTED_SPACES)}"
            )

        if float(self.resolution) not in SUPPORTED_RESOLUTIONS:
            raise ValidationError(
                f"Unsupported resolution: {self.resolution}. "
                f"Supported: {list(SUPPORTED_RESOLUTIONS)}"
            )


T = TypeVar("T", bound=AssetMetadata)


class AssetRegistry(Generic[T]):
    """Generic registry for asset metadata.

    Provides consistent registration, listing, and retrieval.

    Parameters
    ----------
    asset_type_name : str
        Human-readable name of asset type (for error messages)

    Examples
    --------
    >>> registry = AssetRegistry[AtlasMetadata]("atlas")
    >>> registry.register(atlas_metadata)
    >>> atlases = registry.list(space="MNI152NLin6Asym")
    >>> atlas = registry.get("aal")
    """

    def __init__(self, asset_type_name: str = "asset"):
        self._registry: dict[str, T] = {}
        self._asset_type_name = asset_type_name

    def register(self, metadata: T) -> None:
        """Register an asset.

        Parameters
        ----------
        metadata : T
            Asset metadata to register

        Raises
        ------
        ValueError
            If asset already registered
        ValidationError
            If metadata is invalid
        """
        if metadata.name in self._registry:
            raise ValueError(
                f"{self._asset_type_name.capitalize()} already registered: {metadata.name}"
            )

        metadata.validate()

        self._registry[metadata.name] = metadata

    def unregister(self, name: str) -> None:
        """Unregister an asset.

        Raises
        ------
        KeyError
            If asset not found
        """
        if name not in self._registry:
            raise KeyError(f"{self._asset_type_name.capitalize()} not found: {name}")
        del self._registry[name]

    def list(self, **filters) -> list[T]:
        """List assets matching filters, sorted by name.

        Parameters
        ----------
        **filters
            Attribute filters (e.g., space="MNI152NLin6Asym"). ``None`` values
            are ignored.

        Returns
        -------
        list[T]
            Matching assets
        """
        assets = list(self._registry.values())

        for key, value in filters.items():
            if value is not None:
                assets = [a for a in assets if getattr(a, key, None) == value]

        return sorted(assets, key=lambda a: a.name)

    def get(self, name: str) -> T:
        """Get asset metadata by name.

        Raises
        ------
        KeyError
            If asset not found
        """
        if name not in self._registry:
            raise KeyError(
                f"{self._asset_type_name.capitalize()} not found: {name}. "
                f"Available: {list(self._registry.keys())}"
            )
        return self._registry[name]

    def __getitem__(self, name: str) -> T:
        return self.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._registry

    def __iter__(self) -> Iterator[str]:
        return iter(self._registry)

    def __len__(self) -> int:
        return len(self._registry)

    def keys(self) -> list[str]:
        """Get all registered asset names."""
        return list(self._registry.keys())


__all__ = [
    "AssetMetadata",
    "SpatialAssetMetadata",
    "AssetRegistry",
    "SUPPORTED_SPACES",
    "SUPPORTED_RESOLUTIONS",
]

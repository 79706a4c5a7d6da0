"""Immutable in-memory registry of loaded atlas volumes.

The registry is the read-only reference data every resolution call consults:
per atlas a 3D integer label volume, the world->voxel affine and the
id->region-name lookup. It is constructed once (from loaded atlas assets or
from arrays) and passed explicitly to the resolver and aggregator, so there
is no hidden global state and tests can inject small synthetic atlases.

Examples
--------
>>> import numpy as np
>>> from mnilabel.atlas import AtlasRegistry, AtlasVolume
>>>
>>> data = np.zeros((4, 4, 4), dtype=np.int16)
>>> data[1, 1, 1] = 3
>>> volume = AtlasVolume("toy", data, np.eye(4), {3: "Region_C"})
>>> registry = AtlasRegistry([volume])
>>> registry.region_name("toy", registry.label_at("toy", (1, 1, 1)))
'Region_C'
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING

import numpy as np

from mnilabel.core.exceptions import UnknownAtlasError, ValidationError

if TYPE_CHECKING:
    import nibabel as nib

    from mnilabel.assets.atlases import Atlas

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class AtlasVolume:
    """A labelled atlas volume ready for coordinate lookups.

    Arrays are copied and made read-only on construction.

    Attributes
    ----------
    name : str
        Atlas name (e.g., "aal")
    data : np.ndarray
        3D integer label volume indexed by voxel (i, j, k)
    affine : np.ndarray
        4x4 voxel->world (MNI mm) affine
    labels : Mapping[int, str]
        Region id -> region name
    background_label : int, default=0
        Label id of voxels without a region assignment
    """

    name: str
    data: np.ndarray
    affine: np.ndarray
    labels: Mapping[int, str]
    background_label: int = 0
    world_to_voxel: np.ndarray = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if not self.name:
            raise ValidationError("Atlas name cannot be empty")

        data = np.array(self.data, copy=True)
        if data.ndim != 3:
            raise ValidationError(f"Atlas '{self.name}' must be a 3D volume, got shape {data.shape}")
        if not np.issubdtype(data.dtype, np.integer):
            if not np.all(np.isfinite(data)) or not np.array_equal(data, np.round(data)):
                raise ValidationError(f"Atlas '{self.name}' contains non-integer label values")
            data = data.astype(np.int64)
        data.setflags(write=False)

        affine = np.array(self.affine, dtype=np.float64, copy=True)
        if affine.shape != (4, 4):
            raise ValidationError(f"Affine must be 4x4, got shape {affine.shape}")
        try:
            inverse = np.linalg.inv(affine)
        except np.linalg.LinAlgError as e:
            raise ValidationError(f"Affine of atlas '{self.name}' is not invertible") from e
        affine.setflags(write=False)
        inverse.setflags(write=False)

        labels = MappingProxyType({int(k): str(v) for k, v in self.labels.items()})

        object.__setattr__(self, "data", data)
        object.__setattr__(self, "affine", affine)
        object.__setattr__(self, "world_to_voxel", inverse)
        object.__setattr__(self, "labels", labels)
        object.__setattr__(self, "background_label", int(self.background_label))

    @classmethod
    def from_image(
        cls,
        name: str,
        image: nib.Nifti1Image,
        labels: Mapping[int, str],
        background_label: int = 0,
    ) -> AtlasVolume:
        """Build a volume from a NIfTI label image."""
        return cls(
            name=name,
            data=np.asanyarray(image.dataobj),
            affine=image.affine,
            labels=labels,
            background_label=background_label,
        )

    @property
    def shape(self) -> tuple[int, int, int]:
        return tuple(int(n) for n in self.data.shape)  # type: ignore[return-value]

    def contains(self, voxel_index: Sequence[int]) -> bool:
        """True if the voxel index lies inside the volume on every axis."""
        return all(0 <= int(i) < n for i, n in zip(voxel_index, self.data.shape))


class AtlasRegistry:
    """Read-only collection of atlas volumes keyed by name.

    Parameters
    ----------
    volumes : iterable of AtlasVolume
        Atlas volumes. Names must be unique.
    default_atlases : sequence of str, optional
        Atlases used when a caller does not name any. Defaults to every
        registered atlas in registration order.

    Raises
    ------
    ValidationError
        If names are duplicated, the registry is empty or a default atlas is
        not registered.
    """

    def __init__(
        self,
        volumes: Iterable[AtlasVolume],
        default_atlases: Sequence[str] | None = None,
    ):
        table: dict[str, AtlasVolume] = {}
        for volume in volumes:
            if volume.name in table:
                raise ValidationError(f"Atlas registered twice: {volume.name}")
            table[volume.name] = volume

        if not table:
            raise ValidationError("Atlas registry must contain at least one atlas")

        if default_atlases is None:
            defaults = tuple(table)
        else:
            defaults = tuple(default_atlases)
            missing = [name for name in defaults if name not in table]
            if missing:
                raise ValidationError(f"Default atlases not registered: {missing}")

        self._volumes = MappingProxyType(table)
        self._default_atlases = defaults

    @classmethod
    def from_atlases(
        cls,
        atlases: Iterable[Atlas],
        default_atlases: Sequence[str] | None = None,
    ) -> AtlasRegistry:
        """Build a registry from loaded atlas assets."""
        volumes = [
            AtlasVolume.from_image(
                atlas.metadata.name,
                atlas.image,
                atlas.labels,
                background_label=atlas.metadata.background_label,
            )
            for atlas in atlases
        ]
        return cls(volumes, default_atlases=default_atlases)

    @classmethod
    def from_volumes(
        cls,
        volumes: Mapping[str, tuple[np.ndarray, np.ndarray, Mapping[int, str]]],
        default_atlases: Sequence[str] | None = None,
        background_label: int = 0,
    ) -> AtlasRegistry:
        """Build a registry from ``name -> (data, affine, labels)`` arrays.

        Examples
        --------
        >>> registry = AtlasRegistry.from_volumes(
        ...     {"toy": (np.ones((2, 2, 2), dtype=int), np.eye(4), {1: "Region_A"})}
        ... )
        """
        return cls(
            [
                AtlasVolume(name, data, affine, labels, background_label=background_label)
                for name, (data, affine, labels) in volumes.items()
            ],
            default_atlases=default_atlases,
        )

    @property
    def default_atlases(self) -> tuple[str, ...]:
        return self._default_atlases

    def supported_atlases(self) -> frozenset[str]:
        """Names of all registered atlases."""
        return frozenset(self._volumes)

    def get(self, atlas_name: str) -> AtlasVolume:
        """Get an atlas volume by name.

        Raises
        ------
        UnknownAtlasError
            If the atlas is not registered
        """
        try:
            return self._volumes[atlas_name]
        except KeyError:
            raise UnknownAtlasError([atlas_name], available=self._volumes.keys()) from None

    def resolve_affine(self, atlas_name: str) -> np.ndarray:
        """World (MNI mm) -> voxel affine of an atlas."""
        return self.get(atlas_name).world_to_voxel

    def shape(self, atlas_name: str) -> tuple[int, int, int]:
        return self.get(atlas_name).shape

    def label_at(self, atlas_name: str, voxel_index: Sequence[int]) -> int | None:
        """Label id stored at a voxel, or ``None`` if the index is out of bounds."""
        volume = self.get(atlas_name)
        if not volume.contains(voxel_index):
            return None
        i, j, k = (int(v) for v in voxel_index)
        return int(volume.data[i, j, k])

    def region_name(self, atlas_name: str, label_id: int) -> str | None:
        """Region name of a label id, or ``None`` for background and unmapped ids."""
        volume = self.get(atlas_name)
        if label_id == volume.background_label:
            return None
        return volume.labels.get(int(label_id))

    def __contains__(self, atlas_name: object) -> bool:
        return atlas_name in self._volumes

    def __iter__(self) -> Iterator[str]:
        return iter(self._volumes)

    def __len__(self) -> int:
        return len(self._volumes)

    def __repr__(self) -> str:
        return f"AtlasRegistry(atlases={list(self._volumes)}, defaults={list(self._default_atlases)})"


def load_atlas_registry(
    names: Sequence[str] | None = None,
    atlas_dir: str | Path | None = None,
) -> AtlasRegistry:
    """Load atlases from the asset registry into an AtlasRegistry.

    Every name is checked before any file is read.

    Parameters
    ----------
    names : sequence of str, optional
        Atlases to load. Defaults to ``DEFAULT_ATLASES`` (``("aal", "ba")``).
    atlas_dir : str or Path, optional
        Directory holding atlas files with relative filenames

    Returns
    -------
    AtlasRegistry
        Registry whose default atlases are ``names``

    Raises
    ------
    UnknownAtlasError
        If any name is not in the asset registry (all unknown names listed)
    AtlasNotFoundError
        If atlas files are missing
    """
    from mnilabel.assets.atlases import ATLAS_REGISTRY, DEFAULT_ATLASES, load_atlas

    names = list(dict.fromkeys(names if names is not None else DEFAULT_ATLASES))
    unknown = [name for name in names if name not in ATLAS_REGISTRY]
    if unknown:
        raise UnknownAtlasError(unknown, available=ATLAS_REGISTRY.keys())

    atlases = [load_atlas(name, atlas_dir=atlas_dir) for name in names]
    logger.info(f"Loaded {len(atlases)} atlas(es): {', '.join(names)}")
    return AtlasRegistry.from_atlases(atlases, default_atlases=names)

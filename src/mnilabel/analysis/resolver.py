"""Coordinate-to-region resolution against labelled atlas volumes.

A world (MNI mm) coordinate is mapped onto the atlas grid with the atlas's
world->voxel affine, rounded to the nearest voxel (ties half away from zero)
and looked up in the label volume. Coordinates outside the volume, on
background voxels or on label ids without a name resolve to the NULL label;
resolution never raises for them.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import numpy as np
from nibabel.affines import apply_affine

from mnilabel.atlas.registry import AtlasRegistry
from mnilabel.core.cluster import as_cluster
from mnilabel.core.data_types import NULL_LABEL, RegionLabel
from mnilabel.core.exceptions import ValidationError

logger = logging.getLogger(__name__)


def round_half_away_from_zero(values: np.ndarray) -> np.ndarray:
    """Round to the nearest integer, ties away from zero.

    Examples
    --------
    >>> round_half_away_from_zero(np.array([0.5, 1.5, 2.5, -0.5, -2.5]))
    array([ 1.,  2.,  3., -1., -3.])
    """
    values = np.asarray(values, dtype=np.float64)
    return np.sign(values) * np.floor(np.abs(values) + 0.5)


class CoordinateResolver:
    """Resolve MNI coordinates to region labels of registered atlases.

    Parameters
    ----------
    registry : AtlasRegistry
        Atlas volumes to resolve against.

    Examples
    --------
    >>> resolver = CoordinateResolver(registry)
    >>> str(resolver.resolve((-18.0, 34.0, 42.0), "aal"))
    'Frontal_Sup_L'
    """

    def __init__(self, registry: AtlasRegistry):
        self.registry = registry

    def to_voxel(self, coordinate: Sequence[float], atlas_name: str) -> tuple[int, int, int]:
        """Nearest voxel index of a world coordinate on an atlas grid.

        The index is returned even when it lies outside the volume.

        Raises
        ------
        ValidationError
            If ``coordinate`` is not a single finite ``(x, y, z)`` triple
        """
        point = as_cluster(coordinate)
        if len(point) != 1:
            raise ValidationError(f"Expected a single (x, y, z) coordinate, got {len(point)}")

        world_to_voxel = self.registry.resolve_affine(atlas_name)
        ijk = apply_affine(world_to_voxel, point[0])
        i, j, k = (int(v) for v in round_half_away_from_zero(ijk))
        return (i, j, k)

    def resolve(self, coordinate: Sequence[float], atlas_name: str) -> RegionLabel:
        """Resolve one ``(x, y, z)`` coordinate to a region label.

        Parameters
        ----------
        coordinate : sequence of float
            MNI coordinate in mm
        atlas_name : str
            Registered atlas name

        Returns
        -------
        RegionLabel
            Region of the coordinate's voxel, or ``NULL_LABEL``
        """
        voxel = self.to_voxel(coordinate, atlas_name)

        shape = self.registry.shape(atlas_name)
        if any(i < 0 or i >= n for i, n in zip(voxel, shape)):
            return NULL_LABEL

        label_id = self.registry.label_at(atlas_name, voxel)
        if label_id is None:
            return NULL_LABEL

        name = self.registry.region_name(atlas_name, label_id)
        if name is None:
            return NULL_LABEL
        return RegionLabel(name)

    def resolve_many(self, coordinates: np.ndarray, atlas_name: str) -> list[RegionLabel]:
        """Resolve every coordinate of a cluster in one pass.

        Gives the same labels as calling :meth:`resolve` per coordinate.

        Parameters
        ----------
        coordinates : array-like of shape (N, 3)
            MNI coordinates in mm
        atlas_name : str
            Registered atlas name

        Returns
        -------
        list[RegionLabel]
            One label per coordinate, in input order
        """
        cluster = as_cluster(coordinates)
        volume = self.registry.get(atlas_name)

        ijk = round_half_away_from_zero(apply_affine(volume.world_to_voxel, cluster))
        shape = np.asarray(volume.shape, dtype=np.float64)
        in_bounds = np.all((ijk >= 0) & (ijk < shape), axis=1)

        label_ids = np.full(len(cluster), volume.background_label, dtype=np.int64)
        inside = ijk[in_bounds].astype(np.int64)
        label_ids[in_bounds] = volume.data[inside[:, 0], inside[:, 1], inside[:, 2]]

        by_id: dict[int, RegionLabel] = {}
        for label_id in np.unique(label_ids[in_bounds]):
            name = self.registry.region_name(atlas_name, int(label_id))
            by_id[int(label_id)] = NULL_LABEL if name is None else RegionLabel(name)

        labels = [
            by_id[int(label_id)] if inside_volume else NULL_LABEL
            for label_id, inside_volume in zip(label_ids, in_bounds)
        ]

        logger.debug(
            f"Resolved {len(labels)} coordinates against '{atlas_name}' "
            f"({int((~in_bounds).sum())} outside the volume)"
        )
        return labels

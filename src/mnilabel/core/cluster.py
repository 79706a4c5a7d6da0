"""Validation and normalization of coordinate clusters.

A cluster is handled internally as a float array of shape ``(N, 3)`` holding
one MNI ``(x, y, z)`` coordinate per row.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Literal

import numpy as np

from mnilabel.core.exceptions import ValidationError

ClusterLayout = Literal["rows", "columns"]


def as_cluster(
    coordinates: np.ndarray | Sequence[Sequence[float]],
    layout: ClusterLayout = "rows",
) -> np.ndarray:
    """
    Convert coordinates to a validated ``(N, 3)`` float array.

    Parameters
    ----------
    coordinates : array-like
        Cluster coordinates. With ``layout="rows"`` an ``(N, 3)`` array (or a
        single ``(3,)`` coordinate); with ``layout="columns"`` a ``(3, N)``
        matrix whose rows hold x, y and z.
    layout : {"rows", "columns"}, default="rows"
        Orientation of ``coordinates``.

    Returns
    -------
    np.ndarray
        Array of shape ``(N, 3)`` with dtype float64.

    Raises
    ------
    ValidationError
        If the array is empty, has the wrong shape or contains NaN/inf.

    Examples
    --------
    >>> as_cluster([[10, 12, -3], [11, 12, -3]]).shape
    (2, 3)
    >>> as_cluster([[10, 11], [12, 12], [-3, -3]], layout="columns").shape
    (2, 3)
    """
    if layout not in ("rows", "columns"):
        raise ValidationError(f"Invalid layout '{layout}'. Expected 'rows' or 'columns'.")

    try:
        array = np.asarray(coordinates, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Coordinates must be numeric: {e}") from e

    if layout == "columns":
        if array.ndim != 2 or array.shape[0] != 3:
            raise ValidationError(
                f"Coordinate matrix must have shape (3, N) with layout='columns', got {array.shape}"
            )
        array = array.T
    elif array.ndim == 1 and array.shape == (3,):
        array = array.reshape(1, 3)

    if array.ndim != 2 or array.shape[1] != 3:
        raise ValidationError(f"Coordinates must have shape (N, 3), got {array.shape}")

    if array.shape[0] == 0:
        raise ValidationError("Cluster must contain at least one coordinate")

    if not np.all(np.isfinite(array)):
        raise ValidationError("Coordinates contain NaN or infinite values")

    return np.ascontiguousarray(array)

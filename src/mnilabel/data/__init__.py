"""
Bundled reference data and example inputs.

Examples
--------
>>> from mnilabel.data import get_bundled_atlas_dir, make_example_cluster
>>>
>>> atlas_dir = get_bundled_atlas_dir()
>>>
>>> # Ten random coordinates in the cube [10, 15] x [10, 15] x [-5, 0]
>>> cluster = make_example_cluster()
>>> cluster.shape
(10, 3)
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import numpy as np

__all__ = [
    "get_bundled_atlas_dir",
    "make_example_cluster",
]


def get_bundled_atlas_dir() -> Path:
    """
    Get the directory containing bundled atlas files.

    Returns
    -------
    Path
        Absolute path to the bundled atlases directory
    """
    return Path(__file__).parent / "atlases"


def make_example_cluster(
    n: int = 10,
    low: Sequence[float] = (10.0, 10.0, -5.0),
    high: Sequence[float] = (15.0, 15.0, 0.0),
    seed: int | None = 1,
) -> np.ndarray:
    """
    Draw a cluster of coordinates uniformly from an axis-aligned cube.

    Parameters
    ----------
    n : int, default=10
        Number of coordinates
    low : sequence of float, default=(10, 10, -5)
        Minimum corner (x, y, z) in MNI mm
    high : sequence of float, default=(15, 15, 0)
        Maximum corner (x, y, z) in MNI mm
    seed : int, optional
        Seed of the random generator. ``None`` draws a fresh cluster.

    Returns
    -------
    np.ndarray
        Array of shape ``(n, 3)``
    """
    if n < 1:
        raise ValueError(f"n must be >= 1, got {n}")

    low_arr = np.asarray(low, dtype=np.float64)
    high_arr = np.asarray(high, dtype=np.float64)
    if low_arr.shape != (3,) or high_arr.shape != (3,):
        raise ValueError("low and high must be (x, y, z) triples")
    if np.any(high_arr < low_arr):
        raise ValueError("high must be >= low on every axis")

    rng = np.random.default_rng(seed)
    return rng.uniform(low_arr, high_arr, size=(n, 3))

"""
Loading coordinate clusters from delimited text files.

Accepted layouts:

- a header row naming ``x``, ``y`` and ``z`` columns (case-insensitive,
  other columns are ignored)
- exactly three headerless numeric columns
- with ``layout="columns"``, three headerless rows holding x, y and z

The delimiter follows the file suffix: ``.csv`` is comma separated, ``.tsv``
tab separated, anything else whitespace separated. Lines starting with ``#``
are skipped.
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
import pandas as pd

from mnilabel.core.cluster import ClusterLayout, as_cluster
from mnilabel.core.exceptions import ValidationError

logger = logging.getLogger(__name__)

COORDINATE_COLUMNS = ("x", "y", "z")

_SEPARATORS = {
    ".csv": ",",
    ".tsv": "\t",
}


def _separator(path: Path) -> str:
    return _SEPARATORS.get(path.suffix.lower(), r"\s+")


def load_coordinates(path: str | Path, layout: ClusterLayout = "rows") -> np.ndarray:
    """
    Load a cluster of MNI coordinates from a CSV/TSV file.

    Parameters
    ----------
    path : str or Path
        Coordinate file
    layout : {"rows", "columns"}, default="rows"
        One coordinate per row, or one coordinate per column (headerless)

    Returns
    -------
    np.ndarray
        Array of shape ``(N, 3)`` in file order

    Raises
    ------
    FileNotFoundError
        If the file does not exist
    ValidationError
        If the file has no coordinates, lacks x/y/z columns or contains
        non-numeric values

    Examples
    --------
    >>> cluster = load_coordinates("peaks.tsv")
    >>> cluster.shape
    (12, 3)
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Coordinate file not found: {path}")

    try:
        df = pd.read_csv(path, sep=_separator(path), header=None, comment="#", dtype=str)
    except pd.errors.EmptyDataError:
        raise ValidationError(f"Coordinate file is empty: {path}") from None

    df = df.apply(lambda column: column.str.strip()).replace("", np.nan)

    # A header row has at least one non-blank cell that is not a number
    first_row = df.iloc[0]
    is_header = (first_row.notna() & pd.to_numeric(first_row, errors="coerce").isna()).any()

    if layout == "columns":
        if df.shape[0] != 3:
            raise ValidationError(
                f"Column-layout coordinate file {path.name} must have 3 rows, found {df.shape[0]}"
            )
    elif is_header:
        df.columns = [str(name).strip().lower() for name in df.iloc[0]]
        df = df.iloc[1:]
        missing = [col for col in COORDINATE_COLUMNS if col not in df.columns]
        if missing:
            raise ValidationError(
                f"Coordinate file {path.name} is missing column(s) {missing}. "
                f"Found: {list(df.columns)}"
            )
        df = df[list(COORDINATE_COLUMNS)]
    elif df.shape[1] != 3:
        raise ValidationError(
            f"Headerless coordinate file {path.name} must have 3 columns, found {df.shape[1]}"
        )

    blank_rows = np.flatnonzero(df.isna().any(axis=1).to_numpy()) + 1
    if blank_rows.size:
        raise ValidationError(
            f"Blank coordinate value in {path.name} (data row(s) {blank_rows.tolist()})"
        )

    try:
        values = df.apply(pd.to_numeric).to_numpy(dtype=np.float64)
    except ValueError as e:
        raise ValidationError(f"Non-numeric coordinate in {path.name}: {e}") from e

    cluster = as_cluster(values, layout=layout)
    logger.debug(f"Loaded {len(cluster)} coordinates from {path}")
    return cluster

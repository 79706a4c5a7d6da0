"""
Export utilities for cluster composition results.

Each atlas table is written to its own file named after its result key,
e.g. ``aal.cluster.composition.tsv``.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from mnilabel.core.data_types import CompositionResult, FrequencyTable
from mnilabel.core.keys import build_composition_key

logger = logging.getLogger(__name__)


def export_table_to_tsv(table: FrequencyTable, output_path: str | Path) -> Path:
    """
    Write one frequency table as TSV.

    Columns are ``Region``, ``Number of coordinates`` and ``Percentage (%)``;
    rows keep the table order.

    Parameters
    ----------
    table : FrequencyTable
        Table to write
    output_path : str or Path
        Output file path. Parent directories are created.

    Returns
    -------
    Path
        Path to the written file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    table.to_dataframe().to_csv(output_path, sep="\t")
    return output_path


def save_composition(result: CompositionResult, output_dir: str | Path) -> list[Path]:
    """
    Write every table of a composition result to ``output_dir``.

    Parameters
    ----------
    result : CompositionResult
        Result of a composition run
    output_dir : str or Path
        Output directory, created if needed

    Returns
    -------
    list[Path]
        Written files, in atlas request order

    Examples
    --------
    >>> paths = save_composition(result, "derivatives/")
    >>> [p.name for p in paths]
    ['aal.cluster.composition.tsv', 'ba.cluster.composition.tsv']
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    paths = []
    for key, table in result.items():
        path = export_table_to_tsv(table, output_dir / f"{key}.tsv")
        logger.debug(f"Wrote {path}")
        paths.append(path)
    return paths


def export_composition_to_json(result: CompositionResult, output_path: str | Path) -> Path:
    """
    Write a composition result as a single JSON document.

    The document maps each result key to its atlas name, cluster size and
    rows (``region``, ``count``, ``percentage``).

    Parameters
    ----------
    result : CompositionResult
        Result of a composition run
    output_path : str or Path
        Output JSON file path

    Returns
    -------
    Path
        Path to the written file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    payload = {
        build_composition_key(table.atlas_name): {
            "atlas": table.atlas_name,
            "n_coordinates": table.n_coordinates,
            "rows": [
                {"region": label, "count": count, "percentage": percentage}
                for label, count, percentage in table.as_tuples()
            ],
        }
        for table in result.values()
    }

    with open(output_path, "w") as f:
        json.dump(payload, f, indent=2)

    return output_path

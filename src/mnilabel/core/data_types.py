"""Typed containers for resolved region labels and composition tables.

Region labels are an explicit variant (a region name or the NULL sentinel) so
that tallying, sorting and lookups never depend on implicit string or numeric
coercion. Frequency tables keep their rows as ordered records.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, NamedTuple

if TYPE_CHECKING:
    import pandas as pd


#: Text rendered for coordinates that do not resolve to any region.
NULL_LABEL_TEXT = "NULL"

#: Column names of an exported frequency table.
COUNT_COLUMN = "Number of coordinates"
PERCENTAGE_COLUMN = "Percentage (%)"
REGION_INDEX = "Region"


@dataclass(frozen=True)
class RegionLabel:
    """Region a coordinate resolves to, or the NULL sentinel.

    Attributes
    ----------
    name : str or None
        Region name. ``None`` marks a coordinate outside the volume or on a
        voxel without a region assignment.

    Examples
    --------
    >>> str(RegionLabel("Frontal_Sup_L"))
    'Frontal_Sup_L'
    >>> str(NULL_LABEL)
    'NULL'
    """

    name: str | None = None

    def __post_init__(self) -> None:
        if self.name is not None and (not isinstance(self.name, str) or not self.name):
            raise ValueError(f"Region name must be a non-empty string or None, got {self.name!r}")

    @property
    def is_null(self) -> bool:
        """True for the NULL sentinel."""
        return self.name is None

    def sort_key(self) -> tuple[bool, str]:
        """Tie-break key: named regions first, then lexicographic by name."""
        return (self.is_null, self.name or "")

    def __str__(self) -> str:
        return NULL_LABEL_TEXT if self.name is None else self.name


NULL_LABEL = RegionLabel()


class FrequencyRow(NamedTuple):
    """One row of a frequency table."""

    label: RegionLabel
    count: int
    percentage: float

    @property
    def region_label(self) -> str:
        """Rendered region label (``"NULL"`` for the sentinel)."""
        return str(self.label)

    def as_tuple(self) -> tuple[str, int, float]:
        return (self.region_label, self.count, self.percentage)


@dataclass(frozen=True)
class FrequencyTable:
    """Sorted per-atlas frequency of region labels within a cluster.

    Attributes
    ----------
    atlas_name : str
        Atlas the cluster was resolved against.
    n_coordinates : int
        Number of coordinates in the cluster (denominator of percentages).
    rows : tuple[FrequencyRow, ...]
        Rows in descending count order.
    """

    atlas_name: str
    n_coordinates: int
    rows: tuple[FrequencyRow, ...]

    def __iter__(self) -> Iterator[FrequencyRow]:
        return iter(self.rows)

    def __len__(self) -> int:
        return len(self.rows)

    def __getitem__(self, region: str | RegionLabel) -> FrequencyRow:
        """Look up a row by region label or rendered region name."""
        for row in self.rows:
            if isinstance(region, RegionLabel):
                if row.label == region:
                    return row
            elif row.region_label == region:
                return row
        raise KeyError(f"Region '{region}' not found in {self.atlas_name} composition")

    @property
    def labels(self) -> list[str]:
        return [row.region_label for row in self.rows]

    @property
    def counts(self) -> list[int]:
        return [row.count for row in self.rows]

    @property
    def percentages(self) -> list[float]:
        return [row.percentage for row in self.rows]

    def as_tuples(self) -> list[tuple[str, int, float]]:
        """Rows as ``(region_label, count, percentage)`` tuples."""
        return [row.as_tuple() for row in self.rows]

    def to_dataframe(self) -> pd.DataFrame:
        """Convert to a DataFrame indexed by region label.

        Returns
        -------
        pd.DataFrame
            Columns ``"Number of coordinates"`` and ``"Percentage (%)"``,
            rows in table order.
        """
        import pandas as pd

        df = pd.DataFrame(
            {
                COUNT_COLUMN: pd.Series(self.counts, dtype="int64"),
                PERCENTAGE_COLUMN: pd.Series(self.percentages, dtype="float64"),
            }
        )
        df.index = pd.Index(self.labels, name=REGION_INDEX)
        return df

    def summary(self) -> str:
        """Get a one-line summary of this table."""
        top = self.rows[0].region_label if self.rows else "none"
        return (
            f"{self.atlas_name}: {self.n_coordinates} coordinates in "
            f"{len(self.rows)} labels (most frequent: {top})"
        )


class CompositionResult(Mapping[str, FrequencyTable]):
    """Frequency tables keyed by ``{atlas}.cluster.composition``.

    Keys keep the order in which atlases were requested.

    Parameters
    ----------
    tables : Mapping[str, FrequencyTable]
        Tables keyed by composition key.
    """

    def __init__(self, tables: Mapping[str, FrequencyTable]):
        self._tables: dict[str, FrequencyTable] = dict(tables)

    def __getitem__(self, key: str) -> FrequencyTable:
        if key not in self._tables:
            raise KeyError(f"Result key '{key}' not found. Available keys: {list(self._tables)}")
        return self._tables[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._tables)

    def __len__(self) -> int:
        return len(self._tables)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, CompositionResult):
            return self._tables == other._tables and list(self) == list(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    @property
    def atlases(self) -> list[str]:
        """Atlas names in request order."""
        return [table.atlas_name for table in self._tables.values()]

    def as_dict(self) -> dict[str, list[tuple[str, int, float]]]:
        """Plain representation: key -> list of ``(label, count, percentage)``."""
        return {key: table.as_tuples() for key, table in self._tables.items()}

    def summary(self) -> str:
        return "\n".join(table.summary() for table in self._tables.values())

    def __repr__(self) -> str:
        return f"CompositionResult(keys={list(self._tables)})"

"""Cluster composition: frequency of atlas regions within a coordinate cluster.

For every requested atlas, each coordinate of the cluster is resolved to a
region label, labels are tallied (NULL included), sorted by count and
converted to percentages of the cluster size.

Ordering
--------
Rows are sorted by count, descending. Among equal counts, named regions come
before NULL and named regions are ordered lexicographically, so the order
never depends on input order.

Percentages
-----------
``round(count / N, 3) * 100``: the fraction is rounded to three decimals
before scaling, which yields percentages to one tenth of a percent.

Examples
--------
>>> from mnilabel.analysis import compute_composition
>>> result = compute_composition(cluster, ["aal"], registry=registry)
>>> result["aal.cluster.composition"].as_tuples()
[('Frontal_Sup_L', 10, 100.0)]
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable, Sequence

import numpy as np
from joblib import Parallel, delayed

from mnilabel.analysis.resolver import CoordinateResolver
from mnilabel.atlas.registry import AtlasRegistry
from mnilabel.core.cluster import ClusterLayout, as_cluster
from mnilabel.core.data_types import CompositionResult, FrequencyRow, FrequencyTable, RegionLabel
from mnilabel.core.exceptions import UnknownAtlasError, ValidationError
from mnilabel.core.keys import build_composition_key

logger = logging.getLogger(__name__)


def composition_percentage(count: int, n_coordinates: int) -> float:
    """Percentage of a cluster: ``round(count / n_coordinates, 3) * 100``.

    Examples
    --------
    >>> composition_percentage(1, 4)
    25.0
    >>> composition_percentage(1, 3)  # doctest: +ELLIPSIS
    33.3...
    """
    return round(count / n_coordinates, 3) * 100


def build_frequency_table(
    atlas_name: str,
    labels: Sequence[RegionLabel],
) -> FrequencyTable:
    """Tally resolved labels into a sorted frequency table.

    Parameters
    ----------
    atlas_name : str
        Atlas the labels were resolved against
    labels : sequence of RegionLabel
        One label per cluster coordinate

    Returns
    -------
    FrequencyTable
        Rows sorted by count descending, ties per the module ordering rule
    """
    n_coordinates = len(labels)
    if n_coordinates == 0:
        raise ValidationError("Cannot build a frequency table from an empty cluster")

    counts = Counter(labels)
    ordered = sorted(counts.items(), key=lambda item: (-item[1], item[0].sort_key()))
    rows = tuple(
        FrequencyRow(label, count, composition_percentage(count, n_coordinates))
        for label, count in ordered
    )
    return FrequencyTable(atlas_name=atlas_name, n_coordinates=n_coordinates, rows=rows)


class ClusterCompositionAggregator:
    """Compute the region composition of coordinate clusters.

    Parameters
    ----------
    registry : AtlasRegistry
        Atlases available for resolution
    n_jobs : int, default=1
        Number of atlases resolved concurrently (joblib threads). ``-1``
        uses all CPUs. Results do not depend on this value.

    Examples
    --------
    >>> aggregator = ClusterCompositionAggregator(registry)
    >>> result = aggregator.compute(cluster, template=["aal", "ba"])
    >>> list(result)
    ['aal.cluster.composition', 'ba.cluster.composition']
    """

    def __init__(self, registry: AtlasRegistry, n_jobs: int = 1):
        if n_jobs == 0 or n_jobs < -1:
            raise ValueError(f"n_jobs must be -1 (all CPUs) or >= 1, got {n_jobs}")
        self.registry = registry
        self.resolver = CoordinateResolver(registry)
        self.n_jobs = n_jobs

    def validate_template(self, template: str | Iterable[str] | None) -> list[str]:
        """Check requested atlas names against the registry.

        Parameters
        ----------
        template : str or iterable of str, optional
            Requested atlas names. ``None`` selects the registry's defaults.

        Returns
        -------
        list[str]
            Requested names in order, duplicates removed

        Raises
        ------
        ValidationError
            If no atlas is requested
        UnknownAtlasError
            If any name is not registered; lists every unknown name
        """
        if template is None:
            names = list(self.registry.default_atlases)
        elif isinstance(template, str):
            names = [template]
        else:
            names = list(template)

        names = list(dict.fromkeys(names))
        if not names:
            raise ValidationError("At least one atlas must be requested")

        supported = self.registry.supported_atlases()
        unknown = [name for name in names if name not in supported]
        if unknown:
            raise UnknownAtlasError(unknown, available=supported)

        return names

    def compose_atlas(self, cluster: np.ndarray, atlas_name: str) -> FrequencyTable:
        """Frequency table of one atlas for an already validated cluster."""
        labels = self.resolver.resolve_many(cluster, atlas_name)
        table = build_frequency_table(atlas_name, labels)
        logger.debug(f"{atlas_name}: {len(table)} distinct labels over {len(labels)} coordinates")
        return table

    def compute(
        self,
        coordinate_matrix: np.ndarray | Sequence[Sequence[float]],
        template: str | Iterable[str] | None = None,
        layout: ClusterLayout = "rows",
    ) -> CompositionResult:
        """Compute the composition of a cluster for every requested atlas.

        Atlas names are validated before any coordinate is resolved.

        Parameters
        ----------
        coordinate_matrix : array-like
            Cluster of N coordinates, ``(N, 3)`` or ``(3, N)`` per ``layout``
        template : str or iterable of str, optional
            Atlas names. Defaults to the registry's default atlases.
        layout : {"rows", "columns"}, default="rows"
            Orientation of ``coordinate_matrix``

        Returns
        -------
        CompositionResult
            ``{atlas}.cluster.composition`` -> FrequencyTable, in request order

        Raises
        ------
        UnknownAtlasError
            If any requested atlas is not registered
        ValidationError
            If the cluster or template is invalid
        """
        names = self.validate_template(template)
        cluster = as_cluster(coordinate_matrix, layout=layout)

        logger.info(f"Computing composition of {len(cluster)} coordinates for: {', '.join(names)}")

        if self.n_jobs == 1 or len(names) == 1:
            tables = [self.compose_atlas(cluster, name) for name in names]
        else:
            tables = Parallel(n_jobs=self.n_jobs, prefer="threads")(
                delayed(self.compose_atlas)(cluster, name) for name in names
            )

        return CompositionResult(
            {build_composition_key(name): table for name, table in zip(names, tables)}
        )


def compute_composition(
    cluster: np.ndarray | Sequence[Sequence[float]],
    atlas_names: str | Iterable[str] | None = None,
    registry: AtlasRegistry | None = None,
    n_jobs: int = 1,
    layout: ClusterLayout = "rows",
) -> CompositionResult:
    """Compute the region composition of a coordinate cluster.

    Parameters
    ----------
    cluster : array-like
        N MNI coordinates, ``(N, 3)`` (or ``(3, N)`` with ``layout="columns"``)
    atlas_names : str or iterable of str, optional
        Atlases to report. Defaults to the registry's default atlases
        (``("aal", "ba")`` when the registry is loaded here).
    registry : AtlasRegistry, optional
        Atlases to resolve against. If omitted, ``atlas_names`` are loaded
        from the atlas assets with :func:`~mnilabel.atlas.load_atlas_registry`.
        No atlas volumes ship with the package, so this needs their files in
        ``$MNILABEL_ATLAS_DIR`` (or the bundled atlas directory); otherwise
        :class:`~mnilabel.core.exceptions.AtlasNotFoundError` is raised.
    n_jobs : int, default=1
        Number of atlases resolved concurrently
    layout : {"rows", "columns"}, default="rows"
        Orientation of ``cluster``

    Returns
    -------
    CompositionResult
        ``{atlas}.cluster.composition`` -> FrequencyTable

    Raises
    ------
    UnknownAtlasError
        If any requested atlas is unknown; nothing is computed
    AtlasNotFoundError
        If ``registry`` is omitted and the atlas files cannot be found
    """
    if isinstance(atlas_names, str):
        atlas_names = [atlas_names]
    elif atlas_names is not None:
        atlas_names = list(atlas_names)

    if registry is None:
        from mnilabel.atlas.registry import load_atlas_registry

        registry = load_atlas_registry(atlas_names)

    aggregator = ClusterCompositionAggregator(registry, n_jobs=n_jobs)
    return aggregator.compute(cluster, template=atlas_names, layout=layout)

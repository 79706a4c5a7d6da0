"""Unit tests for cluster composition."""

import numpy as np
import pytest

from mnilabel.analysis import (
    ClusterCompositionAggregator,
    build_frequency_table,
    composition_percentage,
    compute_composition,
)
from mnilabel.core.data_types import NULL_LABEL, RegionLabel
from mnilabel.core.exceptions import UnknownAtlasError, ValidationError


class TestCompositionPercentage:
    @pytest.mark.parametrize(
        "count,n,expected",
        [(1, 1, 100.0), (1, 4, 25.0), (2, 4, 50.0), (1, 8, 12.5), (0, 5, 0.0)],
    )
    def test_exact_values(self, count, n, expected):
        assert composition_percentage(count, n) == expected

    def test_fraction_rounded_before_scaling(self):
        assert composition_percentage(1, 3) == round(1 / 3, 3) * 100
        assert composition_percentage(3, 10) == pytest.approx(30.0)
        assert composition_percentage(2, 3) == pytest.approx(66.7)
        assert composition_percentage(1, 7) == pytest.approx(14.3)


class TestBuildFrequencyTable:
    def test_sorted_by_count(self):
        labels = [RegionLabel("b"), RegionLabel("a"), RegionLabel("b"), NULL_LABEL, RegionLabel("b")]
        table = build_frequency_table("aal", labels)
        assert table.labels == ["b", "a", "NULL"]
        assert table.counts == [3, 1, 1]
        assert table.n_coordinates == 5

    def test_ties_named_first_then_lexicographic(self):
        labels = [NULL_LABEL, RegionLabel("Zeta"), RegionLabel("Alpha"), RegionLabel("Mid")]
        table = build_frequency_table("aal", labels)
        assert table.labels == ["Alpha", "Mid", "Zeta", "NULL"]

    def test_only_null(self):
        table = build_frequency_table("aal", [NULL_LABEL, NULL_LABEL])
        assert table.as_tuples() == [("NULL", 2, 100.0)]

    def test_empty_rejected(self):
        with pytest.raises(ValidationError):
            build_frequency_table("aal", [])


class TestValidateTemplate:
    def test_none_selects_defaults(self, atlas_registry):
        aggregator = ClusterCompositionAggregator(atlas_registry)
        assert aggregator.validate_template(None) == ["aal", "ba"]

    def test_string_is_single_atlas(self, atlas_registry):
        aggregator = ClusterCompositionAggregator(atlas_registry)
        assert aggregator.validate_template("ba") == ["ba"]

    def test_duplicates_removed_keeping_order(self, atlas_registry):
        aggregator = ClusterCompositionAggregator(atlas_registry)
        assert aggregator.validate_template(["ba", "aal", "ba"]) == ["ba", "aal"]

    def test_empty_rejected(self, atlas_registry):
        aggregator = ClusterCompositionAggregator(atlas_registry)
        with pytest.raises(ValidationError, match="At least one atlas"):
            aggregator.validate_template([])

    def test_all_unknown_names_reported(self, atlas_registry):
        aggregator = ClusterCompositionAggregator(atlas_registry)
        with pytest.raises(UnknownAtlasError) as exc_info:
            aggregator.validate_template(["xyz", "aal", "abc"])
        assert exc_info.value.requested_unknown_names == ["xyz", "abc"]


class TestClusterCompositionAggregator:
    def test_invalid_n_jobs(self, atlas_registry):
        with pytest.raises(ValueError, match="n_jobs"):
            ClusterCompositionAggregator(atlas_registry, n_jobs=0)

    def test_keys_in_request_order(self, atlas_registry, frontal_cluster):
        result = ClusterCompositionAggregator(atlas_registry).compute(
            frontal_cluster, template=["ba", "aal"]
        )
        assert list(result) == ["ba.cluster.composition", "aal.cluster.composition"]
        assert result["ba.cluster.composition"].as_tuples() == [("BA6", 10, 100.0)]

    def test_default_template(self, atlas_registry, frontal_cluster):
        result = ClusterCompositionAggregator(atlas_registry).compute(frontal_cluster)
        assert list(result) == ["aal.cluster.composition", "ba.cluster.composition"]

    def test_columns_layout(self, toy_registry):
        aggregator = ClusterCompositionAggregator(toy_registry)
        rows = aggregator.compute([[0, 0, 0], [1, 1, 1]], template="toy")
        columns = aggregator.compute([[0, 1], [0, 1], [0, 1]], template="toy", layout="columns")
        assert rows == columns

    def test_single_coordinate(self, toy_registry):
        result = ClusterCompositionAggregator(toy_registry).compute((2.0, 2.0, 2.0), template="toy")
        assert result["toy.cluster.composition"].as_tuples() == [("Region_C", 1, 100.0)]

    def test_empty_cluster_rejected(self, toy_registry):
        with pytest.raises(ValidationError):
            ClusterCompositionAggregator(toy_registry).compute(np.empty((0, 3)), template="toy")

    def test_unknown_atlas_checked_before_cluster(self, toy_registry):
        with pytest.raises(UnknownAtlasError):
            ClusterCompositionAggregator(toy_registry).compute(np.empty((0, 3)), template="xyz")

    def test_parallel_matches_serial(self, atlas_registry, voxel_world):
        rng = np.random.default_rng(7)
        cluster = rng.uniform(
            np.array(voxel_world(-1, -1, -1)), np.array(voxel_world(10, 10, 10)), size=(300, 3)
        )
        serial = ClusterCompositionAggregator(atlas_registry, n_jobs=1).compute(cluster)
        parallel = ClusterCompositionAggregator(atlas_registry, n_jobs=2).compute(cluster)
        assert serial == parallel

    def test_counts_include_null(self, atlas_registry, voxel_world):
        cluster = [voxel_world(5, 5, 5), voxel_world(1, 1, 1), voxel_world(2, 2, 2), (90.0, 0, 0)]
        table = ClusterCompositionAggregator(atlas_registry).compute(cluster, template="aal")[
            "aal.cluster.composition"
        ]
        assert table.as_tuples() == [
            ("NULL", 2, 50.0),
            ("Frontal_Sup_L", 1, 25.0),
            ("Precentral_L", 1, 25.0),
        ]

    def test_logs_atlases(self, atlas_registry, frontal_cluster, caplog):
        with caplog.at_level("INFO", logger="mnilabel.analysis.composition"):
            ClusterCompositionAggregator(atlas_registry).compute(frontal_cluster, template="aal")
        assert "10 coordinates" in caplog.text


class TestComputeComposition:
    def test_with_registry(self, toy_registry):
        result = compute_composition([[0, 0, 0]], ["toy"], registry=toy_registry)
        assert result.as_dict() == {"toy.cluster.composition": [("Region_A", 1, 100.0)]}

    def test_n_jobs_forwarded(self, atlas_registry, frontal_cluster):
        assert compute_composition(frontal_cluster, registry=atlas_registry, n_jobs=-1) == (
            compute_composition(frontal_cluster, registry=atlas_registry)
        )

    def test_loads_registry_from_assets(self, atlas_dir, frontal_cluster, monkeypatch):
        from mnilabel.assets.atlases import ATLAS_DIR_ENV

        monkeypatch.setenv(ATLAS_DIR_ENV, str(atlas_dir))
        result = compute_composition(frontal_cluster, "aal")
        assert result.as_dict() == {"aal.cluster.composition": [("Frontal_Sup_L", 10, 100.0)]}

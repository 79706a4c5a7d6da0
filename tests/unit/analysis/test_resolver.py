"""Unit tests for coordinate-to-region resolution."""

import numpy as np
import pytest

from mnilabel.analysis import CoordinateResolver, round_half_away_from_zero
from mnilabel.core.data_types import NULL_LABEL, RegionLabel
from mnilabel.atlas import AtlasRegistry
from mnilabel.core.exceptions import UnknownAtlasError, ValidationError


class TestRoundHalfAwayFromZero:
    def test_ties(self):
        np.testing.assert_array_equal(
            round_half_away_from_zero(np.array([0.5, 1.5, 2.5, -0.5, -1.5, -2.5])),
            [1, 2, 3, -1, -2, -3],
        )

    def test_non_ties(self):
        np.testing.assert_array_equal(
            round_half_away_from_zero(np.array([0.49, 0.51, -0.49, -0.51, 3.0])),
            [0, 1, 0, -1, 3],
        )


class TestToVoxel:
    def test_voxel_centre(self, atlas_registry, voxel_world):
        resolver = CoordinateResolver(atlas_registry)
        assert resolver.to_voxel(voxel_world(5, 5, 5), "aal") == (5, 5, 5)

    def test_half_voxel_rounds_away_from_zero(self, atlas_registry):
        resolver = CoordinateResolver(atlas_registry)
        # x = -23 is voxel 2.5, x = -19 is voxel 4.5
        assert resolver.to_voxel((-23.0, 34.0, 42.0), "aal") == (3, 5, 5)
        assert resolver.to_voxel((-19.0, 34.0, 42.0), "aal") == (5, 5, 5)

    def test_negative_half_voxel(self, atlas_registry):
        resolver = CoordinateResolver(atlas_registry)
        # x = -29 is voxel -0.5
        assert resolver.to_voxel((-29.0, 34.0, 42.0), "aal") == (-1, 5, 5)

    def test_outside_volume_still_returned(self, atlas_registry):
        resolver = CoordinateResolver(atlas_registry)
        assert resolver.to_voxel((100.0, 100.0, 100.0), "aal") == (64, 38, 34)


class TestResolve:
    def test_named_region(self, atlas_registry):
        resolver = CoordinateResolver(atlas_registry)
        assert resolver.resolve((-18.0, 34.0, 42.0), "aal") == RegionLabel("Frontal_Sup_L")
        assert resolver.resolve((-18.0, 34.0, 42.0), "ba") == RegionLabel("BA6")

    def test_background_is_null(self, atlas_registry, voxel_world):
        resolver = CoordinateResolver(atlas_registry)
        assert resolver.resolve(voxel_world(2, 2, 2), "aal") is NULL_LABEL

    def test_unmapped_id_is_null(self, atlas_registry, voxel_world):
        resolver = CoordinateResolver(atlas_registry)
        assert resolver.resolve(voxel_world(9, 9, 9), "aal") is NULL_LABEL

    @pytest.mark.parametrize(
        "coordinate",
        [(100.0, 100.0, 100.0), (-100.0, 34.0, 42.0), (-29.0, 34.0, 42.0), (-9.0, 34.0, 42.0)],
    )
    def test_out_of_bounds_is_null(self, atlas_registry, coordinate):
        resolver = CoordinateResolver(atlas_registry)
        assert resolver.resolve(coordinate, "aal") is NULL_LABEL

    def test_rounding_tie_changes_region(self, atlas_registry, voxel_world):
        resolver = CoordinateResolver(atlas_registry)
        # voxel (1.5, 1.5, 1.5) rounds to (2, 2, 2), background, not Precentral_L at (1, 1, 1)
        x, y, z = voxel_world(1, 1, 1)
        assert resolver.resolve((x + 1.0, y + 1.0, z + 1.0), "aal") is NULL_LABEL
        assert resolver.resolve((x + 0.9, y + 0.9, z + 0.9), "aal") == RegionLabel("Precentral_L")

    def test_unknown_atlas(self, atlas_registry):
        resolver = CoordinateResolver(atlas_registry)
        with pytest.raises(UnknownAtlasError):
            resolver.resolve((0.0, 0.0, 0.0), "xyz")

    @pytest.mark.parametrize("coordinate", [(np.nan, 0.0, 0.0), (0.0, np.inf, 0.0)])
    def test_non_finite_coordinate(self, toy_registry, coordinate):
        resolver = CoordinateResolver(toy_registry)
        with pytest.raises(ValidationError, match="NaN or infinite"):
            resolver.resolve(coordinate, "toy")
        with pytest.raises(ValidationError, match="NaN or infinite"):
            resolver.resolve_many(np.array([coordinate]), "toy")

    def test_rejects_more_than_one_coordinate(self, toy_registry):
        resolver = CoordinateResolver(toy_registry)
        with pytest.raises(ValidationError, match="single"):
            resolver.resolve([[0.0, 0.0, 0.0], [1.0, 1.0, 1.0]], "toy")

    def test_non_zero_background_label(self):
        """Id 0 is a real region when the background is 255."""
        data = np.full((3, 3, 3), 255, dtype=np.int32)
        data[0, 0, 0] = 0
        data[1, 1, 1] = 7
        registry = AtlasRegistry.from_volumes(
            {"mask": (data, np.eye(4), {0: "Zero", 7: "Seven", 255: "Outside"})},
            background_label=255,
        )
        resolver = CoordinateResolver(registry)
        cluster = np.array([[0.0, 0.0, 0.0], [2.0, 2.0, 2.0], [1.0, 1.0, 1.0]])

        assert resolver.resolve(cluster[0], "mask") == RegionLabel("Zero")
        assert resolver.resolve(cluster[1], "mask") is NULL_LABEL
        assert resolver.resolve_many(cluster, "mask") == [
            RegionLabel("Zero"),
            NULL_LABEL,
            RegionLabel("Seven"),
        ]


class TestResolveMany:
    def test_matches_resolve(self, atlas_registry, voxel_world):
        resolver = CoordinateResolver(atlas_registry)
        rng = np.random.default_rng(42)
        low = np.array(voxel_world(-2, -2, -2))
        high = np.array(voxel_world(11, 11, 11))
        cluster = rng.uniform(low, high, size=(200, 3))
        cluster[:4] = [voxel_world(1, 1, 1), voxel_world(9, 9, 9), (-19.0, 34.0, 42.0), (-29.0, 0, 0)]

        for atlas_name in ("aal", "ba"):
            expected = [resolver.resolve(c, atlas_name) for c in cluster]
            assert resolver.resolve_many(cluster, atlas_name) == expected

    def test_preserves_order(self, toy_registry):
        resolver = CoordinateResolver(toy_registry)
        labels = resolver.resolve_many(
            np.array([[1.0, 1.0, 1.0], [50.0, 0.0, 0.0], [0.0, 0.0, 0.0], [3.0, 3.0, 3.0]]),
            "toy",
        )
        assert [str(label) for label in labels] == ["Region_B", "NULL", "Region_A", "NULL"]

    def test_all_outside(self, toy_registry):
        resolver = CoordinateResolver(toy_registry)
        labels = resolver.resolve_many(np.array([[-5.0, 0.0, 0.0], [0.0, 9.0, 0.0]]), "toy")
        assert labels == [NULL_LABEL, NULL_LABEL]

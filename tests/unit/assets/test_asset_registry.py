"""Unit tests for asset metadata and the atlas asset registry."""

from dataclasses import FrozenInstanceError

import pytest

from mnilabel.assets.atlases import (
    ATLAS_REGISTRY,
    DEFAULT_ATLASES,
    AtlasMetadata,
    list_atlases,
    register_atlas,
    register_atlas_from_files,
    unregister_atlas,
)
from mnilabel.assets.base import AssetRegistry
from mnilabel.core.exceptions import AtlasNotFoundError, ValidationError


def _metadata(name="test_atlas", **overrides):
    fields = dict(
        name=name,
        description="Test atlas",
        space="MNI152NLin6Asym",
        resolution=2,
        atlas_filename="test.nii.gz",
        labels_filename="test_labels.txt",
    )
    fields.update(overrides)
    return AtlasMetadata(**fields)


class TestAtlasMetadata:
    def test_defaults(self):
        metadata = _metadata()
        assert metadata.background_label == 0
        assert metadata.citation is None
        assert metadata.n_regions is None

    def test_frozen(self):
        with pytest.raises(FrozenInstanceError):
            _metadata().name = "other"

    def test_unsupported_space(self):
        with pytest.raises(ValidationError, match="Unsupported space"):
            _metadata(space="Talairach").validate()

    def test_unsupported_resolution(self):
        with pytest.raises(ValidationError, match="Unsupported resolution"):
            _metadata(resolution=4).validate()

    def test_to_dict(self):
        data = _metadata().to_dict()
        assert data["name"] == "test_atlas"
        assert data["atlas_filename"] == "test.nii.gz"


class TestAssetRegistry:
    def test_register_and_get(self):
        registry = AssetRegistry[AtlasMetadata]("atlas")
        registry.register(_metadata())
        assert "test_atlas" in registry
        assert registry["test_atlas"].description == "Test atlas"
        assert len(registry) == 1
        assert registry.keys() == ["test_atlas"]

    def test_duplicate_rejected(self):
        registry = AssetRegistry[AtlasMetadata]("atlas")
        registry.register(_metadata())
        with pytest.raises(ValueError, match="Atlas already registered"):
            registry.register(_metadata())

    def test_invalid_metadata_not_registered(self):
        registry = AssetRegistry[AtlasMetadata]("atlas")
        with pytest.raises(ValidationError):
            registry.register(_metadata(space="Talairach"))
        assert "test_atlas" not in registry

    def test_get_missing_lists_available(self):
        registry = AssetRegistry[AtlasMetadata]("atlas")
        registry.register(_metadata("aal"))
        with pytest.raises(KeyError, match="aal"):
            registry.get("xyz")

    def test_list_filters_and_sorts(self):
        registry = AssetRegistry[AtlasMetadata]("atlas")
        registry.register(_metadata("zeta", resolution=1))
        registry.register(_metadata("alpha", resolution=2))
        registry.register(_metadata("beta", resolution=2))
        assert [m.name for m in registry.list()] == ["alpha", "beta", "zeta"]
        assert [m.name for m in registry.list(resolution=2)] == ["alpha", "beta"]
        assert [m.name for m in registry.list(resolution=None)] == ["alpha", "beta", "zeta"]

    def test_unregister(self):
        registry = AssetRegistry[AtlasMetadata]("atlas")
        registry.register(_metadata())
        registry.unregister("test_atlas")
        assert "test_atlas" not in registry
        with pytest.raises(KeyError):
            registry.unregister("test_atlas")


class TestBuiltinAtlases:
    def test_default_atlases_registered(self):
        assert DEFAULT_ATLASES == ("aal", "ba")
        for name in DEFAULT_ATLASES:
            assert name in ATLAS_REGISTRY

    def test_list_atlases(self):
        names = [m.name for m in list_atlases()]
        assert "aal" in names
        assert "ba" in names
        assert list_atlases(space="MNI305") == []

    def test_aal_metadata(self):
        aal = ATLAS_REGISTRY["aal"]
        assert aal.space == "MNI152NLin6Asym"
        assert aal.resolution == 2
        assert aal.atlas_filename.endswith(".nii.gz")


class TestRegisterAtlas:
    def test_register_and_unregister(self):
        register_atlas(_metadata("custom_unit_atlas"))
        try:
            assert "custom_unit_atlas" in ATLAS_REGISTRY
        finally:
            unregister_atlas("custom_unit_atlas")
        assert "custom_unit_atlas" not in ATLAS_REGISTRY

    def test_register_from_missing_files(self, tmp_path):
        with pytest.raises(AtlasNotFoundError, match="Atlas file not found"):
            register_atlas_from_files(
                "missing_atlas",
                tmp_path / "missing.nii.gz",
                tmp_path / "missing_labels.txt",
            )
        assert "missing_atlas" not in ATLAS_REGISTRY

    def test_register_from_files_uses_absolute_paths(self, tmp_path):
        atlas_path = tmp_path / "custom.nii.gz"
        labels_path = tmp_path / "custom_labels.txt"
        atlas_path.write_bytes(b"")
        labels_path.write_text("1 Region_A\n")

        metadata = register_atlas_from_files("custom_files_atlas", atlas_path, labels_path)
        try:
            assert metadata.atlas_filename == str(atlas_path.resolve())
            assert metadata.description == "Atlas from custom.nii.gz"
            assert ATLAS_REGISTRY["custom_files_atlas"] is metadata
        finally:
            unregister_atlas("custom_files_atlas")

"""
Shared test fixtures for mnilabel tests.

Provides small synthetic atlases used across contract, integration, and unit
tests. The 2mm atlases map voxel (i, j, k) to world ``2 * (i, j, k) + ORIGIN``
so that voxel (5, 5, 5) sits at MNI (-18, 34, 42).
"""

import logging

import nibabel as nib
import numpy as np
import pytest

from mnilabel.atlas import AtlasRegistry
from mnilabel.utils.logging import CONSOLE_LOGGER_NAME

ORIGIN = np.array([-28.0, 24.0, 32.0])
SHAPE = (10, 10, 10)

AAL_LABELS = {3: "Frontal_Sup_L", 5: "Precentral_L"}
BA_LABELS = {6: "BA6", 8: "BA8"}
UNMAPPED_ID = 9


def world(i, j, k):
    """World coordinate of the centre of voxel (i, j, k) on the 2mm grid."""
    return tuple(float(v) for v in 2.0 * np.array([i, j, k]) + ORIGIN)


def _affine_2mm():
    affine = np.diag([2.0, 2.0, 2.0, 1.0])
    affine[:3, 3] = ORIGIN
    return affine


def _aal_data():
    data = np.zeros(SHAPE, dtype=np.int16)
    data[4:7, 4:7, 4:7] = 3
    data[0:2, 0:2, 0:2] = 5
    data[9, 9, 9] = UNMAPPED_ID
    return data


def _ba_data():
    data = np.zeros(SHAPE, dtype=np.int16)
    data[4:7, 4:7, 4:7] = 6
    data[0:2, 0:2, 0:2] = 8
    return data


@pytest.fixture(autouse=True)
def reset_console_logger():
    """Undo handler changes the CLI makes to the console logger."""
    yield
    console_logger = logging.getLogger(CONSOLE_LOGGER_NAME)
    for handler in list(console_logger.handlers):
        console_logger.removeHandler(handler)
    console_logger.setLevel(logging.NOTSET)
    console_logger.propagate = True


@pytest.fixture
def affine_2mm():
    """2mm voxel->MNI affine of the synthetic atlases."""
    return _affine_2mm()


@pytest.fixture
def atlas_registry():
    """Registry with synthetic 'aal' and 'ba' atlases on a 2mm grid."""
    return AtlasRegistry.from_volumes(
        {
            "aal": (_aal_data(), _affine_2mm(), AAL_LABELS),
            "ba": (_ba_data(), _affine_2mm(), BA_LABELS),
        },
        default_atlases=("aal", "ba"),
    )


@pytest.fixture
def toy_registry():
    """4x4x4 identity-affine atlas 'toy' with Region_A at (0,0,0) and Region_B at (1,1,1)."""
    data = np.zeros((4, 4, 4), dtype=np.int32)
    data[0, 0, 0] = 1
    data[1, 1, 1] = 2
    data[2, 2, 2] = 3
    return AtlasRegistry.from_volumes(
        {"toy": (data, np.eye(4), {1: "Region_A", 2: "Region_B", 3: "Region_C"})}
    )


@pytest.fixture
def frontal_cluster():
    """Ten coordinates inside Frontal_Sup_L of the synthetic 'aal' atlas."""
    rng = np.random.default_rng(0)
    low = np.array(world(4, 4, 4))
    high = np.array(world(6, 6, 6))
    return rng.uniform(low, high, size=(10, 3))


@pytest.fixture
def atlas_dir(tmp_path):
    """
    Directory holding NIfTI and label files of the synthetic atlases under
    the filenames of the built-in 'aal' and 'ba' atlases.
    """
    from mnilabel.assets.atlases import ATLAS_REGISTRY

    directory = tmp_path / "atlases"
    directory.mkdir()

    for name, data, labels in (
        ("aal", _aal_data(), AAL_LABELS),
        ("ba", _ba_data(), BA_LABELS),
    ):
        metadata = ATLAS_REGISTRY[name]
        nib.save(nib.Nifti1Image(data, _affine_2mm()), directory / metadata.atlas_filename)
        with open(directory / metadata.labels_filename, "w") as f:
            f.write(f"# {name} test labels\n")
            for region_id, region_name in labels.items():
                f.write(f"{region_id} {region_name}\n")

    return directory


@pytest.fixture
def voxel_world():
    """Function mapping a voxel index of the 2mm atlases to its MNI coordinate."""
    return world

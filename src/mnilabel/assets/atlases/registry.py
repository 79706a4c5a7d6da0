"""Atlas registry with metadata for all supported atlases.

This module provides a centralized registry of bundled atlases with their
metadata (space, resolution, description, etc.). The registry enables:

- Discovery of available atlases
- Filtering atlases by space/resolution
- Access to atlas metadata without loading image data
- Registration of user-provided atlas files

Examples
--------
>>> from mnilabel.assets.atlases import list_atlases, ATLAS_REGISTRY
>>>
>>> # List all available atlases
>>> print([a.name for a in list_atlases()])
['aal', 'ba']
>>>
>>> # Get specific atlas metadata
>>> aal = ATLAS_REGISTRY["aal"]
>>> print(aal.space, aal.resolution)
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from mnilabel.assets.base import AssetRegistry, SpatialAssetMetadata
from mnilabel.core.exceptions import AtlasNotFoundError

#: Atlases used when a caller does not name any
DEFAULT_ATLASES = ("aal", "ba")


@dataclass(frozen=True)
class AtlasMetadata(SpatialAssetMetadata):
    """Metadata for a labelled anatomical atlas.

    Attributes
    ----------
    name : str
        Unique identifier for the atlas (e.g., "aal")
    description : str
        Human-readable description
    space : str
        Coordinate space (e.g., "MNI152NLin6Asym")
    resolution : float
        Resolution in mm
    atlas_filename : str
        NIfTI label volume, relative to the atlas directory or absolute
    labels_filename : str
        Labels text file, relative to the atlas directory or absolute
    citation : str, optional
        Citation information for the atlas
    n_regions : int, optional
        Number of labelled regions
    background_label : int
        Label id of voxels without a region assignment
    """

    atlas_filename: str = ""
    labels_filename: str = ""
    citation: str | None = None
    n_regions: int | None = None
    background_label: int = 0


ATLAS_REGISTRY = AssetRegistry[AtlasMetadata]("atlas")

ATLAS_REGISTRY.register(
    AtlasMetadata(
        name="aal",
        description="Automated Anatomical Labeling atlas (116 regions)",
        space="MNI152NLin6Asym",
        resolution=2,
        atlas_filename="tpl-MNI152NLin6Asym_res-02_atlas-AAL_dseg.nii.gz",
        labels_filename="tpl-MNI152NLin6Asym_res-02_atlas-AAL_dseg_labels.txt",
        citation="Tzourio-Mazoyer et al. (2002), NeuroImage, 15(1), 273-289",
        n_regions=116,
    )
)

ATLAS_REGISTRY.register(
    AtlasMetadata(
        name="ba",
        description="Brodmann areas",
        space="MNI152NLin6Asym",
        resolution=2,
        atlas_filename="tpl-MNI152NLin6Asym_res-02_atlas-Brodmann_dseg.nii.gz",
        labels_filename="tpl-MNI152NLin6Asym_res-02_atlas-Brodmann_dseg_labels.txt",
        citation="Rorden & Brett (2000), Behavioural Neurology, 12(4), 191-200",
    )
)


def list_atlases(
    space: str | None = None,
    resolution: float | None = None,
) -> list[AtlasMetadata]:
    """List available atlases with optional filtering.

    Parameters
    ----------
    space : str, optional
        Filter by coordinate space (e.g., "MNI152NLin6Asym")
    resolution : float, optional
        Filter by resolution in mm

    Returns
    -------
    list[AtlasMetadata]
        Matching atlas metadata, sorted by name
    """
    return ATLAS_REGISTRY.list(space=space, resolution=resolution)


def register_atlas(metadata: AtlasMetadata) -> None:
    """Register a custom atlas with the registry.

    Parameters
    ----------
    metadata : AtlasMetadata
        Complete metadata for the custom atlas. Filenames should be absolute
        paths unless the files live in the atlas directory.

    Raises
    ------
    ValueError
        If an atlas with the same name already exists in the registry
    """
    ATLAS_REGISTRY.register(metadata)


def register_atlas_from_files(
    name: str,
    atlas_path: str | Path,
    labels_path: str | Path,
    space: str = "MNI152NLin6Asym",
    resolution: float = 2,
    description: str = "",
    citation: str | None = None,
    background_label: int = 0,
) -> AtlasMetadata:
    """Register a custom atlas from file paths.

    Parameters
    ----------
    name : str
        Unique identifier for the atlas
    atlas_path : str or Path
        Path to the NIfTI label volume
    labels_path : str or Path
        Path to the labels text file
    space : str, default="MNI152NLin6Asym"
        Coordinate space
    resolution : float, default=2
        Resolution in mm
    description : str, optional
        Human-readable description
    citation : str, optional
        Citation information
    background_label : int, default=0
        Label id of unlabelled voxels

    Returns
    -------
    AtlasMetadata
        The registered metadata

    Raises
    ------
    AtlasNotFoundError
        If either file does not exist

    Examples
    --------
    >>> register_atlas_from_files(
    ...     name="my_atlas",
    ...     atlas_path="/data/atlases/my_atlas.nii.gz",
    ...     labels_path="/data/atlases/my_atlas_labels.txt",
    ... )
    """
    atlas_path = Path(atlas_path).resolve()
    labels_path = Path(labels_path).resolve()

    if not atlas_path.exists():
        raise AtlasNotFoundError(f"Atlas file not found: {atlas_path}")
    if not labels_path.exists():
        raise AtlasNotFoundError(f"Labels file not found: {labels_path}")

    metadata = AtlasMetadata(
        name=name,
        description=description or f"Atlas from {atlas_path.name}",
        space=space,
        resolution=resolution,
        atlas_filename=str(atlas_path),
        labels_filename=str(labels_path),
        citation=citation,
        background_label=background_label,
    )
    register_atlas(metadata)
    return metadata


def unregister_atlas(name: str) -> None:
    """Remove an atlas from the registry.

    Raises
    ------
    KeyError
        If atlas is not in the registry
    """
    ATLAS_REGISTRY.unregister(name)

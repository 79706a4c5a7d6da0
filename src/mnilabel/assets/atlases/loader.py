"""Atlas loading functions for bundled and user-registered atlases.

Relative atlas filenames are looked up, in order, in the ``atlas_dir``
argument, the directory named by the ``MNILABEL_ATLAS_DIR`` environment
variable and the package's bundled atlas directory. Absolute filenames
(user-registered atlases) are used as-is.

Examples
--------
>>> from mnilabel.assets.atlases import load_atlas
>>>
>>> atlas = load_atlas("aal", atlas_dir="/data/atlases")
>>> print(atlas.image.shape)
>>> print(list(atlas.labels.items())[:2])
[(1, 'Precentral_L'), (2, 'Precentral_R')]
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

import nibabel as nib

from mnilabel.assets.atlases.registry import ATLAS_REGISTRY, AtlasMetadata
from mnilabel.core.exceptions import AtlasNotFoundError, UnknownAtlasError, ValidationError
from mnilabel.data import get_bundled_atlas_dir

logger = logging.getLogger(__name__)

ATLAS_DIR_ENV = "MNILABEL_ATLAS_DIR"


@dataclass
class Atlas:
    """Loaded atlas with image data, labels, and metadata.

    Attributes
    ----------
    image : nib.Nifti1Image
        The 3D label volume
    labels : dict[int, str]
        Mapping from region ID to region name
    metadata : AtlasMetadata
        Atlas metadata from registry
    """

    image: nib.Nifti1Image
    labels: dict[int, str]
    metadata: AtlasMetadata

    @property
    def name(self) -> str:
        return self.metadata.name


def _search_dirs(atlas_dir: str | Path | None) -> list[Path]:
    dirs = []
    if atlas_dir is not None:
        dirs.append(Path(atlas_dir))
    env_dir = os.environ.get(ATLAS_DIR_ENV)
    if env_dir:
        dirs.append(Path(env_dir))
    dirs.append(get_bundled_atlas_dir())
    return dirs


def _resolve_file(filename: str, atlas_dir: str | Path | None, kind: str) -> Path:
    """Find an atlas file in the search directories.

    Raises
    ------
    AtlasNotFoundError
        If the file exists in none of them
    """
    path = Path(filename)
    if path.is_absolute():
        if not path.exists():
            raise AtlasNotFoundError(f"{kind} file not found: {path}")
        return path

    searched = _search_dirs(atlas_dir)
    for directory in searched:
        candidate = directory / filename
        if candidate.exists():
            return candidate

    raise AtlasNotFoundError(
        f"{kind} file not found: {filename}\n"
        f"Searched: {', '.join(str(d) for d in searched)}. "
        f"Pass atlas_dir or set {ATLAS_DIR_ENV}."
    )


def load_atlas(atlas_name: str, atlas_dir: str | Path | None = None) -> Atlas:
    """Load an atlas by name from the registry.

    Parameters
    ----------
    atlas_name : str
        Name of the atlas in ATLAS_REGISTRY
    atlas_dir : str or Path, optional
        Directory holding atlas files with relative filenames

    Returns
    -------
    Atlas
        Loaded atlas with image, labels, and metadata

    Raises
    ------
    UnknownAtlasError
        If atlas_name is not in the registry
    AtlasNotFoundError
        If atlas files are not found
    ValidationError
        If the image is not a 3D volume
    """
    if atlas_name not in ATLAS_REGISTRY:
        raise UnknownAtlasError([atlas_name], available=ATLAS_REGISTRY.keys())

    metadata = ATLAS_REGISTRY[atlas_name]

    atlas_path = _resolve_file(metadata.atlas_filename, atlas_dir, "Atlas")
    labels_path = _resolve_file(metadata.labels_filename, atlas_dir, "Labels")

    image = nib.load(atlas_path)
    if len(image.shape) != 3:
        raise ValidationError(
            f"Atlas '{atlas_name}' must be a 3D volume, got shape {image.shape}"
        )

    labels = _load_labels_file(labels_path)
    logger.debug(f"Loaded atlas '{atlas_name}' from {atlas_path} ({len(labels)} labels)")

    return Atlas(image=image, labels=labels, metadata=metadata)


def _load_labels_file(labels_path: Path) -> dict[int, str]:
    """Load atlas labels from text file.

    Two formats are supported:
    1. "region_id region_name" format (e.g., "1 Precentral_L")
    2. One region name per line (region_id is the line's position among
       non-comment lines, counting from 1)

    Lines starting with # are treated as comments. Both formats may be mixed
    as long as no region id is assigned twice.

    Parameters
    ----------
    labels_path : Path
        Path to labels text file

    Returns
    -------
    dict[int, str]
        Mapping from region ID to region name

    Raises
    ------
    ValidationError
        If a region id is assigned more than once
    """
    labels: dict[int, str] = {}
    position = 0

    with open(labels_path) as f:
        for line in f:
            line = line.strip()

            if not line or line.startswith("#"):
                continue
            position += 1

            region_id, name = position, line
            parts = line.split(maxsplit=1)
            if len(parts) == 2:
                try:
                    region_id, name = int(parts[0]), parts[1].strip()
                except ValueError:
                    # Not "ID name" format, keep the line-position id
                    pass

            if region_id in labels:
                raise ValidationError(
                    f"Region id {region_id} is assigned twice in {labels_path.name}: "
                    f"'{labels[region_id]}' and '{name}'"
                )
            labels[region_id] = name

    return labels

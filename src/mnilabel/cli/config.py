"""
mnilabel CLI configuration module.

This module provides the CLIConfig dataclass for holding parsed
CLI arguments and validating them.

Classes:
    CLIConfig: Configuration from CLI arguments.

Functions:
    load_yaml_config: Load configuration from YAML file.
    generate_config_template: Generate a template YAML configuration.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

if TYPE_CHECKING:
    from argparse import Namespace

logger = logging.getLogger(__name__)

VALID_LAYOUTS = ("rows", "columns")


def load_yaml_config(config_path: Path) -> dict[str, Any]:
    """
    Load configuration from a YAML file.

    Parameters
    ----------
    config_path : Path
        Path to the YAML configuration file.

    Returns
    -------
    dict
        Parsed configuration dictionary.

    Raises
    ------
    FileNotFoundError
        If config file doesn't exist.
    ValueError
        If YAML parsing fails or the document is not a mapping.
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        try:
            config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in config file: {e}") from e

    if not isinstance(config, dict):
        raise ValueError(f"Config file must contain a mapping, got {type(config).__name__}")

    return config


def generate_config_template() -> str:
    """
    Generate a template YAML configuration file.

    Returns
    -------
    str
        YAML template content.
    """
    return (Path(__file__).parent / "default_config.yaml").read_text()


@dataclass
class CLIConfig:
    """
    Configuration from CLI arguments.

    Attributes
    ----------
    coordinates : Path
        Coordinate file.
    output_dir : Path, optional
        Directory for per-atlas TSV files. Results are only printed if None.
    atlases : list of str, optional
        Atlas names in output order. None selects the default atlases.
    atlas_dir : Path, optional
        Directory containing atlas files.
    layout : str
        "rows" or "columns".
    n_procs : int
        Number of atlases processed in parallel.
    verbose_count : int
        Logging verbosity level (0-2).
    """

    coordinates: Path
    output_dir: Path | None = None
    atlases: list[str] | None = None
    atlas_dir: Path | None = None
    layout: str = "rows"
    n_procs: int = 1
    verbose_count: int = 0

    @property
    def log_level(self) -> int:
        """
        Convert verbose_count to log level.

        Returns
        -------
        int
            Logging level (25=WARNING+, 20=INFO, 10=DEBUG).
        """
        return max(25 - 5 * self.verbose_count, 10)

    @classmethod
    def from_args(cls, args: Namespace, yaml_config: dict[str, Any] | None = None) -> CLIConfig:
        """
        Create CLIConfig from parsed arguments and optional YAML config.

        YAML config values are used as defaults; CLI arguments override them.

        Parameters
        ----------
        args : Namespace
            Parsed arguments from argparse.
        yaml_config : dict, optional
            Configuration loaded from YAML file.

        Returns
        -------
        CLIConfig
            Configuration instance.

        Raises
        ------
        ValueError
            If no coordinate file is given on the command line or in YAML.
        """
        yaml_config = yaml_config or {}

        def get_val(cli_name: str, yaml_key: str, default=None):
            cli_val = getattr(args, cli_name, None)
            if cli_val is not None:
                return cli_val
            value = yaml_config.get(yaml_key)
            return default if value is None else value

        def as_path(value) -> Path | None:
            return None if value is None else Path(value)

        coordinates = as_path(get_val("coordinates", "coordinates"))
        if coordinates is None:
            raise ValueError(
                "A coordinate file is required (positional argument or 'coordinates' in config)"
            )

        atlases = get_val("atlases", "atlases")
        if isinstance(atlases, str):
            atlases = [atlases]
        elif atlases is not None:
            atlases = [str(name) for name in atlases]

        return cls(
            coordinates=coordinates,
            output_dir=as_path(get_val("output_dir", "output_dir")),
            atlases=atlases,
            atlas_dir=as_path(get_val("atlas_dir", "atlas_dir")),
            layout=get_val("layout", "layout", "rows"),
            n_procs=int(get_val("nprocs", "n_jobs", 1)),
            verbose_count=getattr(args, "verbose_count", 0) or int(yaml_config.get("verbosity", 0)),
        )

    def validate(self) -> None:
        """
        Validate configuration.

        Raises
        ------
        ValueError
            If configuration is invalid.
        """
        if not self.coordinates.exists():
            raise ValueError(f"Coordinate file does not exist: {self.coordinates}")

        if self.output_dir is not None and self.output_dir.exists() and not self.output_dir.is_dir():
            raise ValueError(f"Output path exists and is not a directory: {self.output_dir}")

        if self.atlases is not None and not self.atlases:
            raise ValueError("At least one atlas must be requested")

        if self.atlas_dir and not self.atlas_dir.exists():
            raise ValueError(f"Atlas directory not found: {self.atlas_dir}")

        if self.layout not in VALID_LAYOUTS:
            raise ValueError(f"Invalid layout '{self.layout}'. Must be one of {VALID_LAYOUTS}")

        if self.n_procs < -1 or self.n_procs == 0:
            raise ValueError(f"--nprocs must be -1 (all CPUs) or >= 1, got {self.n_procs}")

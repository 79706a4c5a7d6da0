"""
mnilabel CLI argument parser module.

Functions:
    build_parser: Build and return the argument parser.
"""

from __future__ import annotations

from argparse import ArgumentDefaultsHelpFormatter, ArgumentParser
from pathlib import Path


def build_parser(prog: str | None = None) -> ArgumentParser:
    """
    Build the CLI argument parser.

    Parameters
    ----------
    prog : str, optional
        Program name for help text. Defaults to 'mnilabel'.

    Returns
    -------
    ArgumentParser
        Configured argument parser.
    """
    from mnilabel import __version__

    parser = ArgumentParser(
        prog=prog or "mnilabel",
        description=f"mnilabel: atlas region composition of MNI coordinate clusters v{__version__}",
        epilog=(
            "The aal and ba atlas volumes are not shipped with the package. Point "
            "--atlas-dir or $MNILABEL_ATLAS_DIR at a directory holding their image and "
            "label files (see --list-atlases); without them the run exits with code 4."
        ),
        formatter_class=ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "coordinates",
        type=Path,
        nargs="?",
        help=(
            "CSV/TSV file with one MNI coordinate per row "
            "(x, y, z columns or three headerless columns)"
        ),
    )

    # Configuration file
    g_config = parser.add_argument_group("Configuration")
    g_config.add_argument(
        "-c",
        "--config",
        type=Path,
        metavar="YAML",
        help=(
            "Path to YAML configuration file. Use 'mnilabel --generate-config' "
            "to create a template. Command-line options override config file."
        ),
    )
    g_config.add_argument(
        "--generate-config",
        action="store_true",
        help="Print a template configuration file to stdout and exit",
    )

    # Atlas options
    g_atlas = parser.add_argument_group("Atlas options")
    g_atlas.add_argument(
        "--atlas",
        "--atlases",
        dest="atlases",
        nargs="+",
        type=str,
        metavar="ATLAS",
        help="Atlas names to report (default: aal ba). Use '--list-atlases' to see them all.",
    )
    g_atlas.add_argument(
        "--atlas-dir",
        type=Path,
        metavar="PATH",
        help=(
            "Directory containing atlas files (default: $MNILABEL_ATLAS_DIR, then the "
            "package's atlas directory, which ships empty)"
        ),
    )
    g_atlas.add_argument(
        "--list-atlases",
        action="store_true",
        help="Print the registered atlases and exit",
    )

    # Input/output options
    g_io = parser.add_argument_group("Input/output options")
    g_io.add_argument(
        "--layout",
        choices=["rows", "columns"],
        default=None,
        help="Coordinate layout: one coordinate per row (default) or per column",
    )
    g_io.add_argument(
        "-o",
        "--output-dir",
        type=Path,
        metavar="PATH",
        help="Write one <atlas>.cluster.composition.tsv per atlas to this directory",
    )

    # Performance options
    g_perf = parser.add_argument_group("Performance options")
    g_perf.add_argument(
        "--nprocs",
        type=int,
        default=None,
        metavar="N",
        help="Number of atlases processed in parallel (-1 for all CPUs)",
    )

    # Other options
    g_other = parser.add_argument_group("Other options")
    g_other.add_argument(
        "--version",
        action="version",
        version=f"mnilabel {__version__}",
    )
    g_other.add_argument(
        "-v",
        "--verbose",
        dest="verbose_count",
        action="count",
        default=0,
        help="Increase verbosity (-v=INFO, -vv=DEBUG)",
    )

    return parser

"""
mnilabel CLI main module.

This module provides the main entry point for the mnilabel CLI, orchestrating
the workflow from argument parsing through composition to output writing.

Functions:
    main: Main CLI entry point that parses arguments and runs the workflow.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mnilabel.cli.config import CLIConfig
    from mnilabel.core.data_types import CompositionResult
    from mnilabel.utils.logging import ConsoleLogger

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_GENERAL_ERROR = 1
EXIT_INVALID_ARGS = 2
EXIT_UNKNOWN_ATLAS = 3
EXIT_ATLAS_NOT_FOUND = 4


def main(argv: list[str] | None = None) -> int:
    """
    Main CLI entry point.

    Parses command-line arguments, loads the coordinate cluster and atlases,
    computes the cluster composition and prints (and optionally writes) one
    table per atlas.

    Parameters
    ----------
    argv : list of str, optional
        Command-line arguments. If None, uses sys.argv[1:].

    Returns
    -------
    int
        Exit code (0 for success, non-zero for errors).
    """
    from mnilabel.cli.config import CLIConfig, generate_config_template, load_yaml_config
    from mnilabel.cli.parser import build_parser

    parser = build_parser()

    # Handle --generate-config before full parsing
    if argv is None:
        argv = sys.argv[1:]
    if "--generate-config" in argv:
        print(generate_config_template())
        return EXIT_SUCCESS

    args = parser.parse_args(argv)

    if args.list_atlases:
        _setup_logging(logging.WARNING)
        _print_atlases()
        return EXIT_SUCCESS

    yaml_config = None
    if args.config:
        try:
            yaml_config = load_yaml_config(args.config)
            logger.info(f"Loaded configuration from: {args.config}")
        except (FileNotFoundError, ValueError) as e:
            logger.error(f"Config file error: {e}")
            return EXIT_INVALID_ARGS

    try:
        config = CLIConfig.from_args(args, yaml_config)
        config.validate()
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        return EXIT_INVALID_ARGS

    _setup_logging(config.log_level)

    logger.info(f"Coordinates: {config.coordinates}")
    if config.output_dir:
        logger.info(f"Output directory: {config.output_dir}")

    try:
        return _run_workflow(config)
    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        if config.verbose_count >= 2:
            import traceback

            traceback.print_exc()
        return EXIT_GENERAL_ERROR


def _run_workflow(config: CLIConfig) -> int:
    """
    Run the composition workflow.

    Parameters
    ----------
    config : CLIConfig
        Validated configuration.

    Returns
    -------
    int
        Exit code.
    """
    from mnilabel.analysis import ClusterCompositionAggregator
    from mnilabel.atlas import load_atlas_registry
    from mnilabel.core.exceptions import AtlasNotFoundError, UnknownAtlasError, ValidationError
    from mnilabel.io import load_coordinates, save_composition
    from mnilabel.utils.logging import ConsoleLogger

    console = ConsoleLogger(log_level=1 + min(config.verbose_count, 1))

    # Step 1: Load coordinates
    console.progress(
        f"Loading coordinates from {config.coordinates.name}", current=1, total=3, verbose=True
    )
    try:
        cluster = load_coordinates(config.coordinates, layout=config.layout)
    except (FileNotFoundError, ValidationError) as e:
        console.error(f"Failed to load coordinates: {e}")
        return EXIT_INVALID_ARGS

    # Step 2: Load atlases (all names are checked before any file is read)
    console.progress("Loading atlases", current=2, total=3, verbose=True)
    try:
        registry = load_atlas_registry(config.atlases, atlas_dir=config.atlas_dir)
    except UnknownAtlasError as e:
        console.error(str(e))
        return EXIT_UNKNOWN_ATLAS
    except AtlasNotFoundError as e:
        console.error(str(e))
        return EXIT_ATLAS_NOT_FOUND

    # Step 3: Compose
    console.progress(f"Resolving {len(cluster)} coordinates", current=3, total=3, verbose=True)
    aggregator = ClusterCompositionAggregator(registry, n_jobs=config.n_procs)
    try:
        result = aggregator.compute(cluster)
    except ValidationError as e:
        console.error(f"Invalid coordinate cluster: {e}")
        return EXIT_INVALID_ARGS

    _report(console, result)

    # Step 4: Write tables
    if config.output_dir is not None:
        paths = save_composition(result, config.output_dir)
        console.success(f"Wrote {len(paths)} table(s) to {config.output_dir}")
        for path in paths:
            console.info(path.name, indent_level=1, verbose=True)

    return EXIT_SUCCESS


def _report(console: ConsoleLogger, result: CompositionResult) -> None:
    """Print one table per atlas."""
    from mnilabel.core.data_types import COUNT_COLUMN, PERCENTAGE_COLUMN, REGION_INDEX

    n_coordinates = next(iter(result.values())).n_coordinates
    console.section(f"CLUSTER COMPOSITION ({n_coordinates} coordinates)")
    for key, table in result.items():
        console.table(
            key,
            header=(REGION_INDEX, COUNT_COLUMN, PERCENTAGE_COLUMN),
            rows=[
                (label, count, f"{percentage:.1f}")
                for label, count, percentage in table.as_tuples()
            ],
        )


def _print_atlases() -> None:
    """Print registered atlases."""
    from mnilabel.assets.atlases import list_atlases
    from mnilabel.utils.logging import ConsoleLogger

    console = ConsoleLogger(log_level=1)
    console.table(
        "Registered atlases",
        header=("Name", "Space", "Resolution (mm)", "Description"),
        rows=[
            (meta.name, meta.space, meta.resolution, meta.description)
            for meta in list_atlases()
        ],
    )


def _setup_logging(level: int) -> None:
    """Configure logging based on verbosity level.

    Records of the module loggers follow ``level``; user-facing messages of
    the ``mnilabel.console`` logger are always printed to stdout, unformatted.
    """
    from mnilabel.utils.logging import CONSOLE_LOGGER_NAME

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(message)s"))

    console_logger = logging.getLogger(CONSOLE_LOGGER_NAME)
    for old_handler in list(console_logger.handlers):
        console_logger.removeHandler(old_handler)
    console_logger.addHandler(handler)
    console_logger.setLevel(logging.INFO)
    console_logger.propagate = False


if __name__ == "__main__":
    sys.exit(main())

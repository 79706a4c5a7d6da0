"""
mnilabel CLI module.

Usage:
    mnilabel <coordinates> [--atlas NAME ...] [-o OUTPUT_DIR] [options]

Example:
    mnilabel peaks.tsv --atlas aal ba -o derivatives/
"""

from mnilabel.cli.main import main
from mnilabel.cli.parser import build_parser

__all__ = ["main", "build_parser"]

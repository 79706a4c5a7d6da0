"""
mnilabel CLI entry point.

This module enables running mnilabel as a module:
    python -m mnilabel <coordinates> [options]
"""

from mnilabel.cli.main import main

if __name__ == "__main__":
    raise SystemExit(main())

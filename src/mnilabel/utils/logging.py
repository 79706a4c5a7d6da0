"""
Consistent user-facing message formatting for mnilabel.

Provides a unified system for displaying progress, success, warnings, and errors
with consistent symbols and indentation. Messages are emitted through the
``mnilabel.console`` logger so they can be captured or redirected like any other log
record.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from enum import Enum

CONSOLE_LOGGER_NAME = "mnilabel.console"

_logger = logging.getLogger(CONSOLE_LOGGER_NAME)


class MessageType(Enum):
    """Types of messages that can be displayed."""

    INFO = "·"  # General information
    SUCCESS = "✓"  # Operation completed successfully
    WARNING = "⚡"  # Warning message
    ERROR = "✗"  # Error message
    PROGRESS = "→"  # Progress update
    SECTION = "="  # Section header
    SUBSECTION = "-"  # Subsection header


class ConsoleLogger:
    """
    Console logger for user-facing messages.

    Parameters
    ----------
    log_level : int, default=1
        Verbosity level:
        - 0: Silent (no output)
        - 1: Standard (progress, results, summaries)
        - 2: Verbose (per-atlas details)
    width : int, default=70
        Width for section headers
    indent : str, default="  "
        Indentation string for nested messages

    Examples
    --------
    >>> logger = ConsoleLogger(log_level=1)
    >>> logger.section("CLUSTER COMPOSITION")
    >>> logger.info("Loading atlases...")
    >>> logger.success("Composition complete", details={"atlases": 2})
    """

    def __init__(self, log_level: int = 1, width: int = 70, indent: str = "  "):
        self.log_level = log_level
        self.width = width
        self.indent = indent

    @property
    def verbose(self) -> bool:
        return self.log_level > 0

    def _emit(self, message: str, min_level: int = 1, level: int = logging.INFO) -> None:
        """
        Emit message if log level is sufficient.

        Parameters
        ----------
        message : str
            Message to emit
        min_level : int, default=1
            Minimum console log level required to display this message
        level : int, default=logging.INFO
            Logging level of the emitted record
        """
        if self.log_level >= min_level:
            _logger.log(level, message)

    def section(self, title: str) -> None:
        """Emit a major section header."""
        separator = MessageType.SECTION.value * self.width
        self._emit(separator)
        self._emit(title)
        self._emit(separator)

    def subsection(self, title: str) -> None:
        """Emit a minor subsection header."""
        separator = MessageType.SUBSECTION.value * self.width
        self._emit(separator)
        self._emit(title)
        self._emit(separator)

    def info(self, message: str, indent_level: int = 0, verbose: bool = False) -> None:
        """
        Emit an informational message.

        Parameters
        ----------
        message : str
            Information message
        indent_level : int, default=0
            Indentation level (0, 1, 2, ...)
        verbose : bool, default=False
            If True, only show at log_level=2.
        """
        min_level = 2 if verbose else 1
        indent = self.indent * indent_level
        self._emit(f"{indent}{MessageType.INFO.value}  {message}", min_level=min_level)

    def success(
        self,
        message: str,
        details: dict | None = None,
        indent_level: int = 0,
    ) -> None:
        """
        Emit a success message with optional details.

        Examples
        --------
        >>> logger.success("Composition complete", details={"coordinates": 10})
        ✓ Composition complete
          - coordinates: 10
        """
        indent = self.indent * indent_level
        self._emit(f"{indent}{MessageType.SUCCESS.value} {message}")

        if details:
            detail_indent = self.indent * (indent_level + 1)
            for key, value in details.items():
                if isinstance(value, float):
                    formatted_value = f"{value:.2f}"
                elif isinstance(value, int) and value >= 1000:
                    formatted_value = f"{value:,}"
                else:
                    formatted_value = str(value)

                self._emit(f"{detail_indent}- {key}: {formatted_value}")

    def warning(self, message: str, indent_level: int = 0) -> None:
        """Emit a warning message."""
        indent = self.indent * indent_level
        self._emit(f"{indent}{MessageType.WARNING.value}  {message}", level=logging.WARNING)

    def error(self, message: str, indent_level: int = 0) -> None:
        """Emit an error message.

        Errors are shown at every log level except silent.
        """
        indent = self.indent * indent_level
        self._emit(f"{indent}{MessageType.ERROR.value} {message}", level=logging.ERROR)

    def progress(
        self,
        message: str,
        current: int | None = None,
        total: int | None = None,
        indent_level: int = 0,
        verbose: bool = False,
    ) -> None:
        """
        Emit a progress update.

        Examples
        --------
        >>> logger.progress("Resolving atlas", current=1, total=2)
        →  Resolving atlas [1/2]
        """
        min_level = 2 if verbose else 1
        indent = self.indent * indent_level
        progress_str = f"{indent}{MessageType.PROGRESS.value}  {message}"

        if current is not None and total is not None:
            progress_str += f" [{current}/{total}]"

        self._emit(progress_str, min_level=min_level)

    def table(
        self,
        title: str,
        header: Sequence[str],
        rows: Sequence[Sequence[object]],
        indent_level: int = 0,
    ) -> None:
        """
        Emit a left-aligned text table.

        The first column is left-aligned, the remaining columns right-aligned.

        Parameters
        ----------
        title : str
            Table title
        header : sequence of str
            Column names
        rows : sequence of sequences
            Table rows, one value per column
        indent_level : int, default=0
            Indentation level
        """
        indent = self.indent * indent_level
        cells = [[str(value) for value in header]] + [[str(value) for value in row] for row in rows]
        widths = [max(len(row[col]) for row in cells) for col in range(len(header))]

        self._emit(f"{indent}{title}:")
        for row in cells:
            first = row[0].ljust(widths[0])
            rest = [cell.rjust(width) for cell, width in zip(row[1:], widths[1:])]
            self._emit(f"{indent}{self.indent}" + "  ".join([first, *rest]))

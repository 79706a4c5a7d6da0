"""
Base exception hierarchy for mnilabel.

All custom exceptions inherit from MnilabelError to enable precise error handling
while maintaining compatibility with standard Python exceptions.
"""

from __future__ import annotations

from collections.abc import Iterable


class MnilabelError(Exception):
    """Base exception for all mnilabel errors."""

    pass


class ValidationError(MnilabelError, ValueError):
    """Raised when input validation fails."""

    pass


class AtlasNotFoundError(MnilabelError, FileNotFoundError):
    """Raised when atlas image or labels files cannot be found."""

    pass


class UnknownAtlasError(ValidationError):
    """Raised when one or more requested atlas names are not registered.

    Every unrecognized name of a single request is reported together, in the
    order it was requested.

    Attributes
    ----------
    requested_unknown_names : list[str]
        Requested names that are not registered.
    available : list[str]
        Names that are registered, sorted.
    """

    def __init__(self, requested_unknown_names: Iterable[str], available: Iterable[str] = ()):
        from mnilabel.utils.suggestions import format_suggestions, suggest_similar

        self.requested_unknown_names = list(requested_unknown_names)
        self.available = sorted(available)

        quoted = ", ".join(f"'{name}'" for name in self.requested_unknown_names)
        noun = "Atlas" if len(self.requested_unknown_names) == 1 else "Atlases"
        verb = "does" if len(self.requested_unknown_names) == 1 else "do"
        message = f"{noun} {quoted} {verb} not exist."
        if self.available:
            message += f" Available atlases: {', '.join(self.available)}."

        hints = []
        for name in self.requested_unknown_names:
            hint = format_suggestions(suggest_similar(name, self.available, max_suggestions=2))
            if hint:
                hints.append(f"'{name}': {hint}")
        if hints:
            message += " " + " ".join(hints)

        super().__init__(message)

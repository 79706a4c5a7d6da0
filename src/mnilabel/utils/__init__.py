"""Utility functions for user-facing messages and error suggestions.

Key Components
--------------
Logging Utilities:
    - ConsoleLogger: Consistent console logger for user-facing messages

Suggestion Utilities:
    - suggest_similar: Find similar strings for error message suggestions
    - format_suggestions: Format suggestions for error messages
"""

from mnilabel.utils.logging import CONSOLE_LOGGER_NAME, ConsoleLogger, MessageType
from mnilabel.utils.suggestions import format_suggestions, suggest_similar

__all__ = [
    "CONSOLE_LOGGER_NAME",
    "ConsoleLogger",
    "MessageType",
    "suggest_similar",
    "format_suggestions",
]

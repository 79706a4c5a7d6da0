"""
"Did you mean?" hints for mistyped atlas names.

Examples
--------
>>> from mnilabel.utils.suggestions import format_suggestions, suggest_similar
>>> format_suggestions(suggest_similar("harvard_oxfrd", ["aal", "ba", "harvard_oxford"]))
"Did you mean 'harvard_oxford'?"
"""

from __future__ import annotations

from collections.abc import Iterable
from difflib import SequenceMatcher

# Below this SequenceMatcher ratio a name is not offered as a hint
SIMILARITY_CUTOFF = 0.4


def _similarity(name: str, candidate: str) -> float:
    return SequenceMatcher(None, name.lower(), candidate.lower()).ratio()


def suggest_similar(name: str, candidates: Iterable[str], max_suggestions: int = 3) -> list[str]:
    """
    Registered atlas names closest to a requested name.

    Matching ignores case. Candidates are ranked by similarity, then
    alphabetically.

    Parameters
    ----------
    name : str
        Requested (unknown) atlas name.
    candidates : iterable of str
        Registered atlas names.
    max_suggestions : int, default=3
        Maximum number of names returned.

    Returns
    -------
    list[str]
        Best matches first; empty if nothing is similar enough.

    Examples
    --------
    >>> suggest_similar("AAL", ["aal", "harvard_oxford"])
    ['aal']
    >>> suggest_similar("xyz", ["aal", "ba"])
    []
    """
    scores = {candidate: _similarity(name, candidate) for candidate in candidates}
    ranked = sorted(
        (candidate for candidate, score in scores.items() if score >= SIMILARITY_CUTOFF),
        key=lambda candidate: (-scores[candidate], candidate),
    )
    return ranked[:max_suggestions]


def format_suggestions(suggestions: list[str]) -> str:
    """
    Hint sentence for an error message, or ``""`` without suggestions.

    Examples
    --------
    >>> format_suggestions(["aal"])
    "Did you mean 'aal'?"
    >>> format_suggestions(["aal", "ba"])
    "Did you mean one of: 'aal', 'ba'?"
    """
    if not suggestions:
        return ""

    quoted = ", ".join(f"'{name}'" for name in suggestions)
    if len(suggestions) == 1:
        return f"Did you mean {quoted}?"
    return f"Did you mean one of: {quoted}?"

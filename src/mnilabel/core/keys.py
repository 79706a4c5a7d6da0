"""
Result key helpers for cluster composition tables.

Composition results are keyed by atlas name using a dotted format:

    {atlas}.cluster.composition

Examples
--------
>>> from mnilabel.core.keys import build_composition_key, parse_composition_key
>>> key = build_composition_key("aal")
>>> key
'aal.cluster.composition'
>>> parse_composition_key(key)
'aal'
"""

from __future__ import annotations

COMPOSITION_SUFFIX = "cluster.composition"


def build_composition_key(atlas_name: str) -> str:
    """
    Build the result key of an atlas composition table.

    Parameters
    ----------
    atlas_name : str
        Atlas name (e.g., "aal", "ba").

    Returns
    -------
    str
        Key in the format ``{atlas}.cluster.composition``.

    Examples
    --------
    >>> build_composition_key("ba")
    'ba.cluster.composition'
    """
    if not atlas_name:
        raise ValueError("Atlas name cannot be empty")
    return f"{atlas_name}.{COMPOSITION_SUFFIX}"


def parse_composition_key(key: str) -> str:
    """
    Extract the atlas name from a composition result key.

    Parameters
    ----------
    key : str
        Key built by :func:`build_composition_key`.

    Returns
    -------
    str
        Atlas name.

    Raises
    ------
    ValueError
        If key does not end with ``.cluster.composition`` or has no atlas part.

    Examples
    --------
    >>> parse_composition_key("aal.cluster.composition")
    'aal'
    >>> parse_composition_key("my.atlas.cluster.composition")
    'my.atlas'
    """
    suffix = f".{COMPOSITION_SUFFIX}"
    if not key or not key.endswith(suffix) or len(key) == len(suffix):
        raise ValueError(
            f"Invalid composition key format: '{key}'. "
            "Expected format: {atlas}.cluster.composition"
        )
    return key[: -len(suffix)]

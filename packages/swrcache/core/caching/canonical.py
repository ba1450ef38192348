"""Canonical JSON serialization and content comparison.

Canonical form is the single definition of "same content" used by the
record codec and by duplicate-delivery suppression.
"""

from __future__ import annotations

import json
import logging
from typing import Any

logger = logging.getLogger(__name__)


def canonical_json(value: Any) -> bytes:
    """
    Serialize a JSON tree to its canonical byte form.

    Uses sorted keys and compact separators so that two trees with the
    same structure always produce identical bytes regardless of mapping
    insertion order. NaN and infinity are rejected since they have no
    JSON representation.

    Args:
        value: JSON tree (None, bool, int, float, str, list, dict)

    Returns:
        UTF-8 encoded canonical JSON

    Raises:
        TypeError: If value contains non-JSON types
        ValueError: If value contains NaN/infinity or circular references

    Example:
        >>> canonical_json({"b": 1, "a": [True, None]})
        b'{"a":[true,null],"b":1}'
    """
    text = json.dumps(
        value,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    )
    return text.encode("utf-8")


def contents_equal(a: Any, b: Any) -> bool:
    """
    Decide whether two content trees are semantically identical.

    Both None is equal; exactly one None is unequal. Otherwise the
    canonical serializations are compared byte-for-byte. A tree that
    cannot be serialized is never equal to anything.

    Args:
        a: First content tree
        b: Second content tree

    Returns:
        True if both trees have the same canonical form
    """
    if a is None and b is None:
        return True
    if a is None or b is None:
        return False

    try:
        return canonical_json(a) == canonical_json(b)
    except (TypeError, ValueError, RecursionError) as e:
        logger.debug(f"Content comparison failed, treating as different: {e}")
        return False

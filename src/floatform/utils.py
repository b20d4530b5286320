"""Text measurement and small dict helpers."""

from __future__ import annotations

from functools import lru_cache
from typing import Any, TypeVar

import grapheme
import wcwidth as _wcwidth

K = TypeVar("K")

_EMOJI_PRESENTATION = "\ufe0f"


def _cluster_cells(cluster: str) -> int:
    """Editor cells taken by one grapheme cluster.

    The base character decides the width; an emoji presentation selector
    forces two cells. Control characters take none.
    """
    if _EMOJI_PRESENTATION in cluster:
        return 2
    return max(_wcwidth.wcwidth(cluster[0]), 0)


@lru_cache(maxsize=256)
def _cells(text: str) -> int:
    return sum(_cluster_cells(c) for c in grapheme.graphemes(text))


def cell_width(text: str) -> int:
    """Number of editor cells *text* occupies when drawn on one row."""
    if text.isascii() and text.isprintable():
        return len(text)
    return _cells(text)


def setdefault(table: dict[K, Any], key: K, value: Any) -> Any:
    """Set ``table[key]`` to *value* unless it already holds a truthy value."""
    if not table.get(key):
        table[key] = value
    return table[key]

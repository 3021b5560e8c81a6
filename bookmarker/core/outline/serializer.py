"""
Outline descriptor serialization.

Flattens a bookmark forest into the line-oriented descriptor consumed by
the embedding step. One line per node, `<page>|<dashes>|<title>`, where the
dash count is the node's depth. Siblings are ordered by page (stable) and
written in pre-order, so the embedder can rebuild the hierarchy from the
dash counts of consecutive lines alone.

The serializer never mutates its input and never raises on a forest of
BookmarkNodes: unusable pages fall back to defaults instead.
"""
import dataclasses
import math
from typing import Any, Iterator, List, Optional, Sequence

from bookmarker.config.outline_limits import EMIT_DEFAULT_PAGE, SORT_DEFAULT_PAGE
from bookmarker.core.models.bookmark import BookmarkNode
from bookmarker.core.tree.validation import parse_page


def _numeric_page(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def page_sort_key(node: BookmarkNode) -> float:
    """Numeric page for ordering; missing or unparseable pages sort as 0."""
    number = _numeric_page(node.page)
    return number if number else SORT_DEFAULT_PAGE


def emitted_page(page: Any) -> int:
    """Page number written to the descriptor.

    The leading integer of the value is used; a missing, unparseable or
    non-positive value becomes 1.
    """
    parsed = parse_page(page)
    if not parsed or parsed < 1:
        return EMIT_DEFAULT_PAGE
    return parsed


def sort_by_page(forest: Sequence[BookmarkNode]) -> List[BookmarkNode]:
    """Copy of the forest with siblings ordered by page at every level.

    sorted() is stable, so equal pages keep their insertion order.
    """
    return [
        dataclasses.replace(node, children=sort_by_page(node.children))
        for node in sorted(forest, key=page_sort_key)
    ]


def descriptor_lines(forest: Sequence[BookmarkNode], depth: int = 0) -> Iterator[str]:
    """Yield descriptor lines for an already-sorted forest in pre-order."""
    for node in forest:
        title = "" if node.title is None else str(node.title)
        title = title.replace("\n", " ")
        yield f"{emitted_page(node.page)}|{'-' * depth}|{title}"
        if node.children:
            yield from descriptor_lines(node.children, depth + 1)


def serialize_outline(forest: Sequence[BookmarkNode]) -> str:
    """Serialize a forest into the outline descriptor.

    Args:
        forest: Root bookmark nodes (ids are ignored)

    Returns:
        Newline-joined descriptor, or "" for an empty forest (meaning
        "apply no outline")
    """
    if not forest:
        return ""
    return "\n".join(descriptor_lines(sort_by_page(forest)))

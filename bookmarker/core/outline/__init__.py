"""Outline serialization and import reconciliation."""

from bookmarker.core.outline.importer import map_outline, resolve_destination_page
from bookmarker.core.outline.serializer import (
    descriptor_lines,
    serialize_outline,
    sort_by_page,
)

__all__ = [
    "serialize_outline",
    "sort_by_page",
    "descriptor_lines",
    "map_outline",
    "resolve_destination_page",
]

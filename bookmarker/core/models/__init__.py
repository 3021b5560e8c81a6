"""Domain models and entities.

Bookmark tree nodes and imported-outline structures.
"""

from bookmarker.core.models.bookmark import (
    Absent,
    BookmarkNode,
    Destination,
    ExplicitRef,
    NamedRef,
    OutlineItem,
    count_nodes,
    forest_from_payload,
    max_depth,
    new_node_id,
    parse_destination,
    strip_ids,
)

__all__ = [
    "BookmarkNode",
    "OutlineItem",
    "Destination",
    "NamedRef",
    "ExplicitRef",
    "Absent",
    "new_node_id",
    "parse_destination",
    "forest_from_payload",
    "strip_ids",
    "count_nodes",
    "max_depth",
]

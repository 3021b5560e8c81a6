"""
Bookmark domain models.

BookmarkNode is one entry of the editable outline tree. OutlineItem and the
destination variants describe a document's pre-existing outline as read from
the PDF engine, before it is reconciled into BookmarkNodes.
"""

import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Union


def new_node_id() -> str:
    """Generate a fresh bookmark id."""
    return uuid.uuid4().hex


@dataclass
class BookmarkNode:
    """Single outline entry with owned, ordered children."""

    title: str
    page: Any  # int once committed; raw client value when built from a payload
    children: List["BookmarkNode"] = field(default_factory=list)
    id: str = field(default_factory=new_node_id)

    def to_dict(self, include_id: bool = True) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization.

        Args:
            include_id: Emit the internal id. Payloads handed to the
                embedding step are built with include_id=False.

        Returns:
            Nested dict with title, page and children
        """
        data: Dict[str, Any] = {"title": self.title, "page": self.page}
        if include_id:
            data["id"] = self.id
        data["children"] = [child.to_dict(include_id) for child in self.children]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BookmarkNode":
        """Build a node (and its subtree) from a client payload.

        Titles are coerced to text and missing ones become empty strings;
        the page value is kept as given so the serializer can apply its own
        defaults. Ids are always fresh.
        """
        children = data.get("children") or []
        title = data.get("title")
        return cls(
            title="" if title is None else str(title),
            page=data.get("page"),
            children=[cls.from_dict(child) for child in children if isinstance(child, dict)],
        )


def forest_from_payload(payload: Optional[Sequence[Any]]) -> List[BookmarkNode]:
    """Build a forest from a list of bookmark dicts; non-lists yield []."""
    if not isinstance(payload, (list, tuple)):
        return []
    return [BookmarkNode.from_dict(item) for item in payload if isinstance(item, dict)]


def strip_ids(forest: Sequence[BookmarkNode]) -> List[Dict[str, Any]]:
    """Drop internal ids, keeping only title, page and non-empty children."""
    stripped = []
    for node in forest:
        entry: Dict[str, Any] = {"title": node.title, "page": node.page}
        if node.children:
            entry["children"] = strip_ids(node.children)
        stripped.append(entry)
    return stripped


def count_nodes(forest: Sequence[BookmarkNode]) -> int:
    """Total number of nodes reachable from the forest."""
    return sum(1 + count_nodes(node.children) for node in forest)


def max_depth(forest: Sequence[BookmarkNode]) -> int:
    """Number of levels in the forest (0 when empty)."""
    if not forest:
        return 0
    return 1 + max(max_depth(node.children) for node in forest)


# Destination variants for imported outline items


@dataclass(frozen=True)
class NamedRef:
    """Named destination, resolved through the document's name tree."""
    name: str


@dataclass(frozen=True)
class ExplicitRef:
    """Explicit destination; anchor is the page reference it points at."""
    anchor: Any


@dataclass(frozen=True)
class Absent:
    """Item without a destination."""
    pass


Destination = Union[NamedRef, ExplicitRef, Absent]


def parse_destination(raw: Any) -> Destination:
    """Classify a raw destination value.

    A string is a named reference; a non-empty list or tuple is an explicit
    destination whose first element is the page anchor; anything else is
    treated as absent.
    """
    if isinstance(raw, str):
        return NamedRef(raw)
    if isinstance(raw, (list, tuple)) and raw and raw[0] is not None:
        return ExplicitRef(raw[0])
    return Absent()


@dataclass
class OutlineItem:
    """Entry of a document's existing outline, as reported by the PDF engine."""

    title: Optional[str]
    dest: Destination = field(default_factory=Absent)
    items: List["OutlineItem"] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OutlineItem":
        """Build from a {title, dest, items} mapping."""
        return cls(
            title=data.get("title"),
            dest=parse_destination(data.get("dest")),
            items=[cls.from_dict(item) for item in data.get("items") or []],
        )

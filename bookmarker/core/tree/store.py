"""
In-memory bookmark tree store.

Owns the forest of one editing session. Every structural operation runs
under a single lock against a deep copy of the forest, and the copy is
published only when the operation completes, so a failed lookup leaves
the published forest untouched and readers never see a half-applied edit.
"""
import copy
import logging
import threading
from typing import Callable, List, Optional, Sequence, Tuple, TypeVar

from bookmarker.core.exceptions import NotFoundError
from bookmarker.core.models.bookmark import BookmarkNode, count_nodes

logger = logging.getLogger(__name__)

T = TypeVar("T")

Location = Tuple[List[BookmarkNode], int]


def locate(nodes: List[BookmarkNode], node_id: str) -> Optional[Location]:
    """Find a node by id with a depth-first, pre-order search.

    Args:
        nodes: Sibling list to search (roots or any children list)
        node_id: Id to look for

    Returns:
        (containing list, index) of the first match, or None
    """
    for index, node in enumerate(nodes):
        if node.id == node_id:
            return nodes, index
        if node.children:
            found = locate(node.children, node_id)
            if found is not None:
                return found
    return None


class BookmarkTreeStore:
    """Canonical forest of bookmark nodes for one document session."""

    def __init__(self, forest: Optional[Sequence[BookmarkNode]] = None):
        self._lock = threading.Lock()
        self._forest: List[BookmarkNode] = copy.deepcopy(list(forest or []))

    def _apply(self, operation: Callable[[List[BookmarkNode]], T]) -> T:
        """Run operation on a working copy and publish it on success."""
        with self._lock:
            working = copy.deepcopy(self._forest)
            result = operation(working)
            self._forest = working
            return result

    def _locate_or_raise(self, forest: List[BookmarkNode], node_id: str) -> Location:
        found = locate(forest, node_id)
        if found is None:
            raise NotFoundError(node_id)
        return found

    def snapshot(self) -> List[BookmarkNode]:
        """Deep copy of the current forest, independent of later edits."""
        with self._lock:
            return copy.deepcopy(self._forest)

    def find(self, node_id: str) -> Optional[BookmarkNode]:
        """Copy of the node with the given id, or None."""
        with self._lock:
            found = locate(self._forest, node_id)
            if found is None:
                return None
            siblings, index = found
            return copy.deepcopy(siblings[index])

    def is_empty(self) -> bool:
        with self._lock:
            return not self._forest

    def __len__(self) -> int:
        """Total node count across all levels."""
        with self._lock:
            return count_nodes(self._forest)

    def insert_root(self, title: str, page: int) -> BookmarkNode:
        """Append a new root node.

        Returns:
            Copy of the created node (carries its new id)
        """
        node = BookmarkNode(title=title, page=page)

        def operation(forest: List[BookmarkNode]) -> BookmarkNode:
            forest.append(node)
            return copy.deepcopy(node)

        created = self._apply(operation)
        logger.debug(f"Inserted root bookmark {created.id} -> page {page}")
        return created

    def insert_child(self, parent_id: str, title: str, page: int) -> BookmarkNode:
        """Append a new child under the node with id parent_id.

        Raises:
            NotFoundError: parent_id is not in the forest
        """
        node = BookmarkNode(title=title, page=page)

        def operation(forest: List[BookmarkNode]) -> BookmarkNode:
            siblings, index = self._locate_or_raise(forest, parent_id)
            siblings[index].children.append(node)
            return copy.deepcopy(node)

        created = self._apply(operation)
        logger.debug(f"Inserted bookmark {created.id} under {parent_id} -> page {page}")
        return created

    def edit(self, node_id: str, title: str, page: int) -> BookmarkNode:
        """Replace title and page of a node in place; id and children are kept.

        Raises:
            NotFoundError: node_id is not in the forest
        """
        def operation(forest: List[BookmarkNode]) -> BookmarkNode:
            siblings, index = self._locate_or_raise(forest, node_id)
            target = siblings[index]
            target.title = title
            target.page = page
            return copy.deepcopy(target)

        updated = self._apply(operation)
        logger.debug(f"Edited bookmark {node_id} -> page {page}")
        return updated

    def remove(self, node_id: str) -> BookmarkNode:
        """Detach a node and its whole subtree.

        Returns:
            The removed node, children included

        Raises:
            NotFoundError: node_id is not in the forest
        """
        def operation(forest: List[BookmarkNode]) -> BookmarkNode:
            siblings, index = self._locate_or_raise(forest, node_id)
            return siblings.pop(index)

        removed = self._apply(operation)
        logger.debug(f"Removed bookmark {node_id} ({count_nodes([removed])} nodes)")
        return removed

    def seed(self, forest: Sequence[BookmarkNode]) -> int:
        """Install forest as the initial tree, only if the store is empty.

        Returns:
            Number of root nodes installed (0 when skipped)
        """
        seeded = list(forest)
        with self._lock:
            if self._forest or not seeded:
                return 0
            self._forest = copy.deepcopy(seeded)
        logger.info(f"Seeded bookmark tree with {len(seeded)} root entries")
        return len(seeded)

    def clear(self) -> None:
        with self._lock:
            self._forest = []

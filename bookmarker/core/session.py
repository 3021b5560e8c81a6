"""
Bookmark editing session.

Ties one loaded document to its bookmark tree store. Adds and edits are
validated here, at the commit boundary: rejected commits come back as a
CommitResult with a reason and leave the forest untouched. Downloads work on
a snapshot of the forest, so edits made while an embedding is in flight do
not leak into it.
"""
import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from bookmarker.config.outline_limits import (
    DOWNLOAD_FALLBACK_NAME,
    DOWNLOAD_NAME_SUFFIX,
    FIRST_PAGE,
)
from bookmarker.core.exceptions import (
    CoreError,
    EmbeddingTimeoutError,
    NotFoundError,
    ValidationError,
)
from bookmarker.core.models.bookmark import (
    BookmarkNode,
    forest_from_payload,
    strip_ids,
)
from bookmarker.core.outline.importer import map_outline
from bookmarker.core.outline.serializer import serialize_outline
from bookmarker.core.ports.pdf import PDFPort
from bookmarker.core.tree.store import BookmarkTreeStore
from bookmarker.core.tree.validation import parse_page, validate_entry

logger = logging.getLogger(__name__)


class CommitFailure(Enum):
    """Why a commit was rejected."""
    VALIDATION = "validation"
    NOT_FOUND = "not_found"


@dataclass
class CommitResult:
    """Outcome of a tree mutation requested by the user."""

    ok: bool
    node: Optional[BookmarkNode] = None
    reason: Optional[str] = None
    failure: Optional[CommitFailure] = None

    @classmethod
    def rejected(cls, error: CoreError) -> "CommitResult":
        failure = CommitFailure.NOT_FOUND if isinstance(error, NotFoundError) else CommitFailure.VALIDATION
        return cls(ok=False, reason=str(error), failure=failure)


def make_bookmarked_name(name: Optional[str]) -> str:
    """Download filename derived from the uploaded file's name.

    "report.pdf" becomes "report bookmarked.pdf"; a name without a usable
    extension gets " bookmarked.pdf" appended.
    """
    if not name:
        return DOWNLOAD_FALLBACK_NAME
    last_dot = name.rfind(".")
    if 0 < last_dot < len(name) - 1:
        return f"{name[:last_dot]}{DOWNLOAD_NAME_SUFFIX}{name[last_dot:]}"
    return f"{name}{DOWNLOAD_NAME_SUFFIX}.pdf"


def clamp_page(page: Any, num_pages: Optional[int]) -> int:
    """Clamp a requested page into [1, num_pages]; junk input goes to page 1."""
    parsed = parse_page(page) or FIRST_PAGE
    return max(FIRST_PAGE, min(num_pages or FIRST_PAGE, parsed))


async def apply_outline(
    pdf: PDFPort,
    path: str,
    bookmarks: Optional[Sequence[Dict[str, Any]]],
    timeout: Optional[float] = None,
) -> bytes:
    """Serialize id-free bookmarks and embed them into the document.

    Args:
        pdf: PDF port performing the embedding
        path: Path to PDF file
        bookmarks: Forest as nested {title, page, children} dicts
        timeout: Seconds to wait for the embedding step (None waits forever)

    Returns:
        Document bytes; unchanged when the forest is empty

    Raises:
        EmbeddingTimeoutError: Embedding did not finish within timeout
        PDFError: Embedding failed
    """
    descriptor = serialize_outline(forest_from_payload(bookmarks))
    logger.info(f"Embedding outline into {path} ({len(descriptor.splitlines())} entries)")

    loop = asyncio.get_event_loop()
    try:
        return await asyncio.wait_for(
            loop.run_in_executor(None, pdf.embed_outline, path, descriptor),
            timeout=timeout,
        )
    except asyncio.TimeoutError as e:
        raise EmbeddingTimeoutError(
            f"Outline embedding for {path} timed out after {timeout}s"
        ) from e


class EditingSession:
    """Bookmark editing state for one uploaded document."""

    def __init__(
        self,
        pdf: PDFPort,
        document_id: str,
        path: str,
        original_name: Optional[str] = None,
    ):
        """Initialize an empty session; call load_document() before editing.

        Args:
            pdf: PDF port for page counts, outline import and embedding
            document_id: Upload id of the document
            path: Path to the stored PDF
            original_name: Filename the user uploaded
        """
        self.pdf = pdf
        self.document_id = document_id
        self.path = path
        self.original_name = original_name
        self.num_pages: Optional[int] = None
        self.current_page = FIRST_PAGE
        self.store = BookmarkTreeStore()

    def load_document(self) -> int:
        """Load the session's document and start a fresh forest.

        Any previous forest is discarded. The document's own outline, if any,
        is imported into the new empty forest.

        Returns:
            Number of imported root bookmarks

        Raises:
            PDFError: The page count could not be read
        """
        self.store = BookmarkTreeStore()
        self.num_pages = self.pdf.get_page_count(self.path) or FIRST_PAGE
        self.current_page = FIRST_PAGE
        return self.import_existing_outline()

    def import_existing_outline(self) -> int:
        """Seed the forest from the document's outline if the forest is empty.

        Returns:
            Number of imported root bookmarks (0 if skipped or nothing resolved)
        """
        if not self.store.is_empty():
            return 0

        try:
            outline = self.pdf.get_existing_outline(self.path)
            if not outline:
                return 0
            imported = map_outline(self.pdf, self.path, outline, self.num_pages or FIRST_PAGE)
        except CoreError as e:
            logger.error(f"Outline import failed for {self.path}: {e}")
            return 0

        count = self.store.seed(imported)
        if count:
            suffix = "s" if count > 1 else ""
            logger.info(f"Imported {count} existing bookmark{suffix} from {self.path}")
        return count

    def bookmarks(self, include_ids: bool = True) -> List[Dict[str, Any]]:
        """Current forest as nested dicts."""
        return [node.to_dict(include_ids) for node in self.store.snapshot()]

    def add_root(self, title: Any, page: Any) -> CommitResult:
        try:
            clean_title, clean_page = validate_entry(title, page, self.num_pages)
            return CommitResult(ok=True, node=self.store.insert_root(clean_title, clean_page))
        except ValidationError as e:
            return CommitResult.rejected(e)

    def add_child(self, parent_id: str, title: Any, page: Any) -> CommitResult:
        try:
            clean_title, clean_page = validate_entry(title, page, self.num_pages)
            node = self.store.insert_child(parent_id, clean_title, clean_page)
            return CommitResult(ok=True, node=node)
        except (ValidationError, NotFoundError) as e:
            return CommitResult.rejected(e)

    def update(self, node_id: str, title: Any, page: Any) -> CommitResult:
        """Commit an edit of title and page for an existing bookmark."""
        try:
            clean_title, clean_page = validate_entry(title, page, self.num_pages)
            return CommitResult(ok=True, node=self.store.edit(node_id, clean_title, clean_page))
        except (ValidationError, NotFoundError) as e:
            return CommitResult.rejected(e)

    def remove(self, node_id: str) -> CommitResult:
        """Remove a bookmark together with its subtree."""
        try:
            return CommitResult(ok=True, node=self.store.remove(node_id))
        except NotFoundError as e:
            return CommitResult.rejected(e)

    def go_to_page(self, page: Any) -> int:
        self.current_page = clamp_page(page, self.num_pages)
        return self.current_page

    def download_name(self) -> str:
        return make_bookmarked_name(self.original_name)

    async def download(self, timeout: Optional[float] = None) -> bytes:
        """Embed the current forest into the document.

        The forest is snapshotted and stripped of ids before the (slow)
        embedding step starts; the live store is not touched afterwards.
        """
        payload = strip_ids(self.store.snapshot())
        return await apply_outline(self.pdf, self.path, payload, timeout=timeout)

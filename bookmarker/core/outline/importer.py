"""
Reconcile a document's existing outline into bookmark nodes.

Each item's destination is resolved to a page through the PDF port. Resolution
is best-effort per item: any failure leaves that item on page 1 and the import
carries on with its siblings and descendants. Nesting mirrors the source
exactly; ordering by page happens only at serialization time.
"""
import logging
from typing import List, Optional, Sequence

from bookmarker.config.outline_limits import FIRST_PAGE, UNTITLED_TITLE
from bookmarker.core.exceptions import CoreError, ImportResolutionError
from bookmarker.core.models.bookmark import (
    Absent,
    BookmarkNode,
    Destination,
    ExplicitRef,
    NamedRef,
    OutlineItem,
)
from bookmarker.core.ports.pdf import PDFPort

logger = logging.getLogger(__name__)


def _resolve(pdf: PDFPort, path: str, dest: Destination) -> int:
    if isinstance(dest, Absent):
        raise ImportResolutionError("Outline item has no destination")

    if isinstance(dest, NamedRef):
        explicit = pdf.resolve_named_destination(path, dest.name)
        if explicit is None:
            raise ImportResolutionError(f"Unknown named destination {dest.name!r}")
    elif isinstance(dest, ExplicitRef):
        explicit = dest
    else:
        raise ImportResolutionError(f"Unsupported destination {dest!r}")

    page = pdf.resolve_page_index(path, explicit.anchor)
    if page is None:
        raise ImportResolutionError(f"Destination anchor {explicit.anchor!r} matches no page")
    return page


def resolve_destination_page(pdf: PDFPort, path: str, dest: Destination) -> Optional[int]:
    """Resolve a destination to a 1-indexed page.

    Args:
        pdf: PDF port used for name and page-index lookups
        path: Path to PDF file
        dest: Destination variant of an outline item

    Returns:
        Page number, or None when it cannot be resolved
    """
    try:
        return _resolve(pdf, path, dest)
    except ImportResolutionError as e:
        logger.debug(f"Outline destination unresolved: {e}")
        return None
    except CoreError as e:
        logger.warning(f"Outline destination lookup failed: {e}")
        return None


def map_outline(
    pdf: PDFPort, path: str, items: Sequence[OutlineItem], num_pages: int
) -> List[BookmarkNode]:
    """Build bookmark nodes mirroring an existing outline.

    Args:
        pdf: PDF port used for destination resolution
        path: Path to PDF file
        items: Top-level outline items
        num_pages: Document page count for the bound check

    Returns:
        New forest; unresolved or out-of-range pages become 1 and blank
        titles become the untitled placeholder
    """
    nodes = []
    for item in items:
        page = resolve_destination_page(pdf, path, item.dest)
        if page is None or not FIRST_PAGE <= page <= num_pages:
            page = FIRST_PAGE
        title = (item.title or "").strip() or UNTITLED_TITLE
        nodes.append(BookmarkNode(
            title=title,
            page=page,
            children=map_outline(pdf, path, item.items, num_pages) if item.items else [],
        ))
    return nodes

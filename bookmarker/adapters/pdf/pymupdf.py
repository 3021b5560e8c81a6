"""PyMuPDF adapter.

Implements PDFPort interface using fitz (PyMuPDF).
Outline embedding goes through the descriptor parser in this package.
"""
import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import fitz

from bookmarker.adapters.pdf.descriptor import parse_descriptor
from bookmarker.core.exceptions import PDFError
from bookmarker.core.models.bookmark import (
    Absent,
    Destination,
    ExplicitRef,
    NamedRef,
    OutlineItem,
)
from bookmarker.core.ports.pdf import PDFPort

logger = logging.getLogger(__name__)


def classify_toc_destination(page: int, dest: Optional[Dict[str, Any]]) -> Destination:
    """Map a get_toc(simple=False) entry's target onto a destination variant.

    Explicit anchors are 0-indexed page numbers.

    Args:
        page: 1-indexed page reported by PyMuPDF (-1 when unknown)
        dest: Destination dict of the entry, if any

    Returns:
        NamedRef, ExplicitRef or Absent
    """
    dest = dest or {}
    name = dest.get("nameddest") or dest.get("name")
    if dest.get("kind") == fitz.LINK_NAMED and name:
        return NamedRef(str(name))

    target = dest.get("page", -1)
    if isinstance(target, int) and target >= 0:
        return ExplicitRef(target)
    if name:
        return NamedRef(str(name))
    if isinstance(page, int) and page >= 1:
        return ExplicitRef(page - 1)
    return Absent()


@dataclass
class _DocumentFacts:
    """Page count and name tree of a document whose outline was just read."""
    page_count: int
    names: Optional[Dict[str, Any]] = None


class PyMuPDFAdapter(PDFPort):
    """PyMuPDF implementation of PDFPort.

    Directly uses fitz library for PDF operations. Reading an outline records
    the document's page count (and, on first use, its name tree) so that the
    per-item destination lookups of an import do not reopen the file.
    """

    # Output compaction for embedded documents
    SAVE_GARBAGE_LEVEL = 3
    # Documents whose outline facts are kept for destination lookups
    MAX_CACHED_DOCUMENTS = 32

    def __init__(self):
        self._facts: "OrderedDict[str, _DocumentFacts]" = OrderedDict()
        self._facts_lock = threading.Lock()

    def _remember(self, path: str, facts: _DocumentFacts) -> None:
        with self._facts_lock:
            self._facts[path] = facts
            self._facts.move_to_end(path)
            while len(self._facts) > self.MAX_CACHED_DOCUMENTS:
                self._facts.popitem(last=False)

    def _recall(self, path: str) -> Optional[_DocumentFacts]:
        with self._facts_lock:
            return self._facts.get(path)

    def get_page_count(self, path: str) -> int:
        """Get total page count.

        Args:
            path: Path to PDF file

        Returns:
            Number of pages in the PDF
        """
        try:
            with fitz.open(path) as doc:
                return len(doc)
        except Exception as e:
            raise PDFError(f"Failed to get page count from {path}: {e}") from e

    def get_existing_outline(self, path: str) -> Optional[List[OutlineItem]]:
        """Read the document outline as nested items.

        Args:
            path: Path to PDF file

        Returns:
            Root outline items, or None when the document has no outline
        """
        try:
            with fitz.open(path) as doc:
                toc = doc.get_toc(simple=False)
                page_count = len(doc)
        except Exception as e:
            raise PDFError(f"Failed to read outline from {path}: {e}") from e

        self._remember(path, _DocumentFacts(page_count=page_count))

        roots: List[OutlineItem] = []
        # (level, item) of the current ancestry chain
        stack: List[Tuple[int, OutlineItem]] = []
        for entry in toc:
            level, title, page = entry[0], entry[1], entry[2]
            dest = entry[3] if len(entry) > 3 and isinstance(entry[3], dict) else None
            item = OutlineItem(title=title, dest=classify_toc_destination(page, dest))

            while stack and stack[-1][0] >= level:
                stack.pop()
            if stack:
                stack[-1][1].items.append(item)
            else:
                roots.append(item)
            stack.append((level, item))

        return roots or None

    def _named_destinations(self, path: str) -> Dict[str, Any]:
        facts = self._recall(path)
        if facts is not None and facts.names is not None:
            return facts.names

        try:
            with fitz.open(path) as doc:
                names = doc.resolve_names() or {}
        except Exception as e:
            raise PDFError(f"Failed to read named destinations from {path}: {e}") from e

        if facts is not None:
            facts.names = names
        return names

    def resolve_named_destination(self, path: str, name: str) -> Optional[ExplicitRef]:
        """Look up a named destination in the document's name tree.

        Args:
            path: Path to PDF file
            name: Destination name

        Returns:
            ExplicitRef with a 0-indexed page anchor, or None
        """
        target = self._named_destinations(path).get(name)
        if not target:
            return None
        page = target.get("page", -1)
        if isinstance(page, int) and page >= 0:
            return ExplicitRef(page)
        return None

    def resolve_page_index(self, path: str, anchor: Any) -> Optional[int]:
        """Resolve a 0-indexed page anchor to a page number.

        Args:
            path: Path to PDF file
            anchor: 0-indexed page number

        Returns:
            1-indexed page number, or None if the anchor is not a page of the document
        """
        if isinstance(anchor, bool) or not isinstance(anchor, int):
            return None
        facts = self._recall(path)
        page_count = facts.page_count if facts is not None else self.get_page_count(path)
        if 0 <= anchor < page_count:
            return anchor + 1
        return None

    def embed_outline(self, path: str, descriptor: str) -> bytes:
        """Replace the document outline with the descriptor's entries.

        Args:
            path: Path to PDF file
            descriptor: Outline descriptor; empty means "leave as is"

        Returns:
            PDF bytes
        """
        if not descriptor:
            try:
                with open(path, "rb") as f:
                    return f.read()
            except OSError as e:
                raise PDFError(f"Failed to read {path}: {e}") from e

        toc = parse_descriptor(descriptor)
        try:
            with fitz.open(path) as doc:
                doc.set_toc(toc)
                data = doc.tobytes(garbage=self.SAVE_GARBAGE_LEVEL, deflate=True)
        except Exception as e:
            raise PDFError(f"Failed to embed outline into {path}: {e}") from e

        logger.info(f"Embedded {len(toc)} outline entries into {path}")
        return data

    def render_page_image(self, path: str, page: int, dpi: int = 150) -> bytes:
        """Render page as PNG image.

        Args:
            path: Path to PDF file
            page: Page number (1-indexed)
            dpi: Resolution for rendering

        Returns:
            PNG image bytes
        """
        try:
            with fitz.open(path) as doc:
                mat = fitz.Matrix(dpi / 72, dpi / 72)
                pix = doc[page - 1].get_pixmap(matrix=mat)
                return pix.tobytes("png")
        except Exception as e:
            raise PDFError(f"Failed to render page {page} from {path}: {e}") from e

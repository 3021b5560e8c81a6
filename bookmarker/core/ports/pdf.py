"""PDF port interface.

Defines the contract for PDF operations. Core code depends only on this
abstraction, not on specific implementations like PyMuPDF.
"""
from abc import ABC, abstractmethod
from typing import Any, List, Optional

from bookmarker.core.models.bookmark import ExplicitRef, OutlineItem


class PDFPort(ABC):
    """Abstract interface for PDF operations.

    Implementations: PyMuPDFAdapter
    """

    @abstractmethod
    def get_page_count(self, path: str) -> int:
        """Get total page count.

        Args:
            path: Path to PDF file

        Returns:
            Number of pages
        """
        pass

    @abstractmethod
    def get_existing_outline(self, path: str) -> Optional[List[OutlineItem]]:
        """Read the document's native outline.

        Args:
            path: Path to PDF file

        Returns:
            Nested outline items, or None if the document has no outline
        """
        pass

    @abstractmethod
    def resolve_named_destination(self, path: str, name: str) -> Optional[ExplicitRef]:
        """Look up a named destination.

        Args:
            path: Path to PDF file
            name: Destination name

        Returns:
            The explicit destination it names, or None if unknown
        """
        pass

    @abstractmethod
    def resolve_page_index(self, path: str, anchor: Any) -> Optional[int]:
        """Resolve a page anchor to a page number.

        Args:
            path: Path to PDF file
            anchor: Page reference taken from an explicit destination

        Returns:
            1-indexed page number, or None if the anchor matches no page
        """
        pass

    @abstractmethod
    def embed_outline(self, path: str, descriptor: str) -> bytes:
        """Write an outline into a copy of the document.

        Args:
            path: Path to PDF file
            descriptor: Outline descriptor lines (`page|dashes|title`)

        Returns:
            PDF bytes with the outline embedded, or the original bytes
            unchanged when descriptor is empty
        """
        pass

    @abstractmethod
    def render_page_image(self, path: str, page: int, dpi: int = 150) -> bytes:
        """Render page as PNG image.

        Args:
            path: Path to PDF file
            page: Page number (1-indexed)
            dpi: Resolution for rendering

        Returns:
            PNG image bytes
        """
        pass

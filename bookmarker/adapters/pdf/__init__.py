"""PDF adapters."""
from bookmarker.adapters.pdf.pymupdf import PyMuPDFAdapter

__all__ = ["PyMuPDFAdapter"]

"""Abstract interfaces for external dependencies."""
from bookmarker.core.ports.ocr import OCRPort
from bookmarker.core.ports.pdf import PDFPort

__all__ = [
    "PDFPort",
    "OCRPort",
]

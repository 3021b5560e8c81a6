"""OCR adapters."""
from bookmarker.adapters.ocr.tesseract import TesseractAdapter

__all__ = ["TesseractAdapter"]

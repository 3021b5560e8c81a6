"""Tesseract OCR adapter.

Implements OCRPort using pytesseract with Pillow for image decoding.
"""
import io
import logging

import pytesseract
from PIL import Image, UnidentifiedImageError

from bookmarker.core.exceptions import OCRError
from bookmarker.core.ports.ocr import OCRPort

logger = logging.getLogger(__name__)


class TesseractAdapter(OCRPort):
    """pytesseract implementation of OCRPort."""

    def __init__(self, lang: str = "eng", config: str = ""):
        """Initialize adapter.

        Args:
            lang: Tesseract language code(s), e.g. "eng" or "eng+deu"
            config: Extra tesseract command-line options
        """
        self.lang = lang
        self.config = config

    def extract_text(self, image: bytes) -> str:
        """Recognize text in an image.

        Args:
            image: Encoded image bytes

        Returns:
            Recognized text with surrounding whitespace removed
        """
        try:
            with Image.open(io.BytesIO(image)) as img:
                text = pytesseract.image_to_string(img, lang=self.lang, config=self.config)
        except UnidentifiedImageError as e:
            raise OCRError("Unsupported or corrupt image") from e
        except Exception as e:
            raise OCRError(f"Text recognition failed: {e}") from e

        logger.debug(f"OCR extracted {len(text)} characters")
        return text.strip()

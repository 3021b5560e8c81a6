"""Tests for the Tesseract OCR adapter."""
import io

import pytest
from PIL import Image
from unittest.mock import patch

from bookmarker.adapters.ocr.tesseract import TesseractAdapter
from bookmarker.core.exceptions import OCRError
from bookmarker.core.ports.ocr import OCRPort


def png_bytes():
    buffer = io.BytesIO()
    Image.new("RGB", (20, 10), "white").save(buffer, format="PNG")
    return buffer.getvalue()


class TestTesseractAdapter:
    def test_implements_ocr_port(self):
        assert isinstance(TesseractAdapter(), OCRPort)

    def test_extract_text_strips_output(self):
        with patch("pytesseract.image_to_string", return_value="  Hello\nworld \n") as mock_ocr:
            text = TesseractAdapter(lang="deu").extract_text(png_bytes())

        assert text == "Hello\nworld"
        assert mock_ocr.call_args.kwargs["lang"] == "deu"

    def test_invalid_image_raises_ocr_error(self):
        with pytest.raises(OCRError):
            TesseractAdapter().extract_text(b"not an image")

    def test_engine_failure_raises_ocr_error(self):
        with patch("pytesseract.image_to_string", side_effect=RuntimeError("tesseract missing")):
            with pytest.raises(OCRError) as exc_info:
                TesseractAdapter().extract_text(png_bytes())
        assert "tesseract missing" in str(exc_info.value)

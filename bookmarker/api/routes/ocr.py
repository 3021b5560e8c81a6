"""Image text extraction route"""
import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, File, HTTPException, Request, UploadFile
from slowapi import Limiter

from bookmarker.api.schemas import OCRResponse
from bookmarker.core.exceptions import OCRError
from bookmarker.core.ports.ocr import OCRPort
from bookmarker.core.text import format_extracted_text

logger = logging.getLogger(__name__)


def create_ocr_router(ocr_adapter: OCRPort, limiter: Limiter) -> APIRouter:
    """Create OCR router.

    Args:
        ocr_adapter: Text recognition adapter
        limiter: Shared rate limiter

    Returns:
        APIRouter with the OCR endpoint
    """
    router = APIRouter(tags=["OCR"])

    @router.post("/api/ocr", response_model=OCRResponse)
    @limiter.limit("20/minute")
    async def extract_image_text(request: Request, image: Optional[UploadFile] = File(None)):
        """Return the text recognized in an uploaded image"""
        if image is None:
            raise HTTPException(status_code=400, detail="no file")
        if not (image.content_type or "").lower().startswith("image/"):
            raise HTTPException(status_code=400, detail="Please select an image file")

        content = await image.read()
        loop = asyncio.get_event_loop()
        try:
            text = await loop.run_in_executor(None, ocr_adapter.extract_text, content)
        except OCRError as e:
            logger.warning(f"OCR failed for {image.filename}: {e}")
            raise HTTPException(status_code=422, detail=str(e))

        return OCRResponse(text=text, formatted=format_extracted_text(text))

    return router

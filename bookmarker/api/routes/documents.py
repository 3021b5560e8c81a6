"""Document upload, bookmark editing and outline download routes"""
import asyncio
import logging
from typing import Any, Awaitable, Dict, Optional
from urllib.parse import quote

from fastapi import (APIRouter, BackgroundTasks, File, HTTPException, Query,
                     Request, UploadFile)
from fastapi.responses import Response
from slowapi import Limiter

from bookmarker.adapters.storage.upload_store import UploadStore
from bookmarker.api.schemas import (
    BookmarkOut,
    BookmarkRequest,
    BookmarkTreeResponse,
    ProcessRequest,
    UploadResponse,
)
from bookmarker.api.storage.session_store import SessionStore
from bookmarker.config.outline_limits import DOWNLOAD_FALLBACK_NAME
from bookmarker.config.settings import Settings
from bookmarker.core.exceptions import EmbeddingTimeoutError, PDFError
from bookmarker.core.models.bookmark import count_nodes
from bookmarker.core.ports.pdf import PDFPort
from bookmarker.core.session import (
    CommitFailure,
    CommitResult,
    EditingSession,
    apply_outline,
)

logger = logging.getLogger(__name__)


def content_disposition(filename: str) -> str:
    """Attachment header with an ASCII fallback and the UTF-8 name."""
    fallback = filename.encode("ascii", "ignore").decode().replace('"', "").strip()
    header = f'attachment; filename="{fallback or DOWNLOAD_FALLBACK_NAME}"'
    if fallback != filename:
        header += f"; filename*=UTF-8''{quote(filename)}"
    return header


def pdf_response(data: bytes, filename: str) -> Response:
    return Response(
        content=data,
        media_type="application/pdf",
        headers={"Content-Disposition": content_disposition(filename)},
    )


def commit_or_raise(result: CommitResult) -> Dict[str, Any]:
    """Node dict of a successful commit; 400/404 for rejected ones."""
    if not result.ok:
        status = 404 if result.failure is CommitFailure.NOT_FOUND else 400
        raise HTTPException(status_code=status, detail=result.reason)
    return result.node.to_dict()


def create_documents_router(
    sessions: SessionStore,
    uploads: UploadStore,
    pdf_adapter: PDFPort,
    settings: Settings,
    limiter: Limiter,
) -> APIRouter:
    """Create document router with dependency injection.

    Args:
        sessions: Registry of editing sessions
        uploads: Upload storage
        pdf_adapter: PDF processing adapter
        settings: Service settings (timeouts, retention)
        limiter: Shared rate limiter

    Returns:
        APIRouter configured with upload, bookmark and download endpoints
    """
    router = APIRouter(tags=["Documents"])

    def get_session(document_id: str) -> EditingSession:
        session = sessions.get(document_id)
        if session is None:
            raise HTTPException(status_code=404, detail="Document not found")
        return session

    def discard_document(document_id: str) -> None:
        sessions.pop(document_id)
        uploads.discard(document_id)

    async def embed_or_raise(embedding: Awaitable[bytes]) -> bytes:
        try:
            return await embedding
        except EmbeddingTimeoutError as e:
            logger.error(str(e))
            raise HTTPException(status_code=504, detail=str(e))
        except PDFError as e:
            logger.error(f"Processing error: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    @router.post("/api/upload", response_model=UploadResponse)
    @limiter.limit("30/minute")
    async def upload_pdf(request: Request, pdf: Optional[UploadFile] = File(None)):
        """Store a PDF and open an editing session for it"""
        if pdf is None:
            raise HTTPException(status_code=400, detail="no file")

        filename = pdf.filename or "document.pdf"
        content_type = (pdf.content_type or "").lower()
        if "pdf" not in content_type and not filename.lower().endswith(".pdf"):
            raise HTTPException(status_code=400, detail="Only PDF files are accepted")

        content = await pdf.read()
        if not content:
            raise HTTPException(status_code=400, detail="no file")
        if len(content) > settings.max_upload_bytes:
            raise HTTPException(
                status_code=413,
                detail=f"File exceeds {settings.max_upload_mb} MB limit",
            )

        document_id = await uploads.save(content)
        session = EditingSession(
            pdf_adapter, document_id, str(uploads.path_for(document_id)), filename
        )
        loop = asyncio.get_event_loop()
        try:
            imported = await loop.run_in_executor(None, session.load_document)
        except PDFError as e:
            uploads.discard(document_id)
            raise HTTPException(status_code=400, detail=f"Invalid PDF: {e}")

        sessions[document_id] = session
        return UploadResponse(
            id=document_id,
            original_name=filename,
            num_pages=session.num_pages,
            imported=imported,
        )

    @router.post("/api/process")
    @limiter.limit("30/minute")
    async def process_pdf(request: Request, body: ProcessRequest, background_tasks: BackgroundTasks):
        """Embed a client-supplied bookmark forest and return the PDF"""
        if not body.id:
            raise HTTPException(status_code=400, detail="missing id")
        if not uploads.exists(body.id):
            raise HTTPException(status_code=404, detail="file not found")

        bookmarks = body.bookmarks if isinstance(body.bookmarks, list) else []
        data = await embed_or_raise(apply_outline(
            pdf_adapter,
            str(uploads.path_for(body.id)),
            bookmarks,
            timeout=settings.embed_timeout_seconds,
        ))

        if not settings.keep_after_process:
            background_tasks.add_task(discard_document, body.id)
        return pdf_response(data, DOWNLOAD_FALLBACK_NAME)

    @router.get("/api/documents/{document_id}/bookmarks", response_model=BookmarkTreeResponse)
    async def list_bookmarks(document_id: str):
        session = get_session(document_id)
        return BookmarkTreeResponse(
            document_id=document_id,
            num_pages=session.num_pages,
            bookmarks=session.bookmarks(),
        )

    @router.post(
        "/api/documents/{document_id}/bookmarks",
        response_model=BookmarkOut,
        status_code=201,
    )
    async def add_bookmark(document_id: str, body: BookmarkRequest):
        """Add a root bookmark, or a child when parentId is given"""
        session = get_session(document_id)
        if body.parent_id:
            result = session.add_child(body.parent_id, body.title, body.page)
        else:
            result = session.add_root(body.title, body.page)
        return commit_or_raise(result)

    @router.put("/api/documents/{document_id}/bookmarks/{node_id}", response_model=BookmarkOut)
    async def edit_bookmark(document_id: str, node_id: str, body: BookmarkRequest):
        session = get_session(document_id)
        return commit_or_raise(session.update(node_id, body.title, body.page))

    @router.delete("/api/documents/{document_id}/bookmarks/{node_id}")
    async def remove_bookmark(document_id: str, node_id: str):
        session = get_session(document_id)
        result = session.remove(node_id)
        commit_or_raise(result)
        return {"removed": count_nodes([result.node])}

    @router.get("/api/documents/{document_id}/download")
    async def download_pdf(document_id: str):
        """Embed the session's bookmark tree and return the PDF"""
        session = get_session(document_id)
        if not uploads.exists(document_id):
            raise HTTPException(status_code=404, detail="file not found")

        data = await embed_or_raise(session.download(timeout=settings.embed_timeout_seconds))
        return pdf_response(data, session.download_name())

    @router.get("/api/documents/{document_id}/pages/{page}")
    async def page_image(document_id: str, page: str, dpi: int = Query(100, ge=36, le=300)):
        """Render a page preview; out-of-range pages are clamped"""
        session = get_session(document_id)
        target = session.go_to_page(page)
        loop = asyncio.get_event_loop()
        try:
            image = await loop.run_in_executor(
                None, pdf_adapter.render_page_image, session.path, target, dpi
            )
        except PDFError as e:
            raise HTTPException(status_code=500, detail=str(e))
        return Response(content=image, media_type="image/png", headers={"X-Page": str(target)})

    return router

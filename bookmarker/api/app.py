#!/usr/bin/env python3
"""
Bookmark editor REST API

Upload a PDF, edit its bookmark tree, download it with the outline embedded.
"""
import asyncio
import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional

import uvicorn
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import Counter, Gauge, Histogram
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from bookmarker import __version__
from bookmarker.adapters.ocr import TesseractAdapter
from bookmarker.adapters.pdf import PyMuPDFAdapter
from bookmarker.adapters.storage import UploadStore
from bookmarker.api.routes.documents import create_documents_router
from bookmarker.api.routes.health import create_health_router
from bookmarker.api.routes.ocr import create_ocr_router
from bookmarker.api.storage import SessionStore
from bookmarker.config.settings import Settings
from bookmarker.core.ports.ocr import OCRPort
from bookmarker.core.ports.pdf import PDFPort

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)

# Prometheus metrics
REQUEST_COUNT = Counter(
    "bookmarker_requests_total", "Total API requests", [
        "method", "endpoint", "status"])
REQUEST_DURATION = Histogram(
    "bookmarker_request_duration_seconds",
    "Request duration")
OPEN_SESSIONS = Gauge("bookmarker_open_sessions", "Number of open editing sessions")


class BookmarkerAPI:
    """Bookmark editor API with injected adapters"""

    def __init__(
        self,
        pdf_adapter: Optional[PDFPort] = None,
        ocr_adapter: Optional[OCRPort] = None,
        settings: Optional[Settings] = None,
    ):
        """Initialize API with dependency injection.

        Args:
            pdf_adapter: PDF processing adapter (default: PyMuPDFAdapter)
            ocr_adapter: OCR adapter (default: TesseractAdapter)
            settings: Service settings (default: read from environment)
        """
        self.settings = settings or Settings.from_env()
        self.pdf_adapter = pdf_adapter or PyMuPDFAdapter()
        self.ocr_adapter = ocr_adapter or TesseractAdapter()
        self.uploads = UploadStore(self.settings.upload_dir)
        self.sessions = SessionStore()
        self.limiter = Limiter(key_func=get_remote_address)

        self.start_time = time.time()
        self.background_tasks = set()

        self.app = FastAPI(
            title="Bookmarker API",
            description="Build PDF outlines and embed them into documents",
            version=__version__,
            docs_url="/docs",
            redoc_url="/redoc",
            lifespan=self._lifespan,
        )

        self._setup_middleware()
        self._setup_routes()
        self._setup_error_handlers()

    @asynccontextmanager
    async def _lifespan(self, app: FastAPI):
        await self.start()
        try:
            yield
        finally:
            await self.stop()

    def _setup_middleware(self):
        """Setup API middleware"""
        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=self.settings.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

        # Rate limiting
        self.app.state.limiter = self.limiter
        self.app.add_exception_handler(
            RateLimitExceeded, _rate_limit_exceeded_handler)
        self.app.add_middleware(SlowAPIMiddleware)

        # Request logging middleware
        @self.app.middleware("http")
        async def log_requests(request, call_next):
            start_time = time.time()
            response = await call_next(request)
            process_time = time.time() - start_time

            REQUEST_COUNT.labels(
                method=request.method,
                endpoint=request.url.path,
                status=response.status_code,
            ).inc()
            REQUEST_DURATION.observe(process_time)
            OPEN_SESSIONS.set(len(self.sessions))

            logger.info(
                f"{request.method} {request.url.path} - {response.status_code} - {process_time:.3f}s"
            )
            return response

    def _setup_routes(self):
        """Setup API routes"""
        @self.app.get("/")
        async def root():
            return {
                "service": "Bookmarker API",
                "version": __version__,
                "status": "operational",
                "docs": "/docs",
            }

        self.app.include_router(create_health_router(
            start_time=self.start_time,
            sessions_getter=lambda: len(self.sessions),
        ))
        self.app.include_router(create_documents_router(
            sessions=self.sessions,
            uploads=self.uploads,
            pdf_adapter=self.pdf_adapter,
            settings=self.settings,
            limiter=self.limiter,
        ))
        self.app.include_router(create_ocr_router(self.ocr_adapter, self.limiter))

    def _setup_error_handlers(self):
        """Setup error handlers"""
        @self.app.exception_handler(HTTPException)
        async def http_exception_handler(request, exc):
            return JSONResponse(
                status_code=exc.status_code,
                content={
                    "error": f"HTTP_{exc.status_code}",
                    "message": exc.detail,
                    "timestamp": datetime.now().isoformat(),
                },
            )

        @self.app.exception_handler(Exception)
        async def global_exception_handler(request, exc):
            logger.error(f"Unhandled exception: {exc}", exc_info=True)
            return JSONResponse(
                status_code=500,
                content={
                    "error": "INTERNAL_SERVER_ERROR",
                    "message": "An internal server error occurred",
                    "details": {"exception": str(exc)},
                    "timestamp": datetime.now().isoformat(),
                },
            )

    def sweep_expired(self) -> int:
        """Delete expired uploads and the sessions that used them.

        Returns:
            Number of files removed
        """
        removed = self.uploads.sweep(self.settings.upload_ttl_seconds)
        self.sessions.prune(self.uploads.exists)
        OPEN_SESSIONS.set(len(self.sessions))
        return len(removed)

    async def start(self):
        """Start background maintenance"""
        logger.info("Starting Bookmarker API...")
        self.sweep_expired()
        self.background_tasks.add(asyncio.create_task(self._sweep_loop()))
        logger.info("Bookmarker API started successfully")

    async def stop(self):
        """Stop background maintenance"""
        logger.info("Stopping Bookmarker API...")
        for task in self.background_tasks:
            task.cancel()
        await asyncio.gather(*self.background_tasks, return_exceptions=True)
        self.background_tasks.clear()
        logger.info("Bookmarker API stopped")

    async def _sweep_loop(self):
        """Background task removing expired uploads"""
        while True:
            await asyncio.sleep(self.settings.sweep_interval_seconds)
            try:
                self.sweep_expired()
            except Exception as e:
                logger.error(f"Error in sweep task: {str(e)}")


# FastAPI app factory
def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create FastAPI application"""
    api = BookmarkerAPI(settings=settings)
    return api.app


def main():
    import argparse

    settings = Settings.from_env()
    parser = argparse.ArgumentParser(description="Bookmarker API")
    parser.add_argument("--host", default="0.0.0.0", help="Host to bind to")
    parser.add_argument("--port", type=int, default=settings.port, help="Port to bind to")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload")

    args = parser.parse_args()
    if args.reload:
        uvicorn.run("bookmarker.api.app:create_app", factory=True,
                    host=args.host, port=args.port, reload=True)
    else:
        uvicorn.run(create_app(settings), host=args.host, port=args.port)


# CLI entry point
if __name__ == "__main__":
    main()

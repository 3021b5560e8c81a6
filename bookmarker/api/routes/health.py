"""Health check and monitoring routes"""
import time
from datetime import datetime

from fastapi import APIRouter
from fastapi.responses import Response
from prometheus_client import generate_latest

from bookmarker import __version__
from bookmarker.api.schemas import HealthResponse


def create_health_router(start_time: float, sessions_getter=None) -> APIRouter:
    """Create health check router.

    Args:
        start_time: Server start time for uptime calculation
        sessions_getter: Callable that returns open session count

    Returns:
        FastAPI router with health endpoints
    """
    router = APIRouter(tags=["Health"])

    @router.get("/health", response_model=HealthResponse)
    async def health_check():
        """Health check endpoint"""
        return HealthResponse(
            status="healthy",
            timestamp=datetime.now(),
            version=__version__,
            uptime=time.time() - start_time,
            system_info={
                "sessions": sessions_getter() if sessions_getter else 0,
            },
        )

    @router.get("/metrics")
    async def get_metrics():
        """Prometheus metrics endpoint"""
        return Response(generate_latest(), media_type="text/plain")

    return router

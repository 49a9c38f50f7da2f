"""
DevHub Backend — Health Check Route
=====================================

What:  Health check endpoint for monitoring and container probes.
How:   Pings the document store and the blob store held on app.state.

    Status levels:
    - healthy:   both stores answered
    - unhealthy: at least one store failed its ping
"""

import logging
import time

from fastapi import APIRouter, Request

from devhub import __version__
from devhub.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    description="Returns the health of the service and of both stores it depends on.",
)
async def health_check(request: Request) -> HealthResponse:
    db_status = "connected"
    storage_status = "available"
    overall = "healthy"

    try:
        await request.app.state.document_store.ping()
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: document store unreachable: %s", str(e))

    try:
        await request.app.state.blob_store.ping()
    except Exception as e:
        storage_status = "unavailable"
        overall = "unhealthy"
        logger.warning("Health check: blob store unreachable: %s", str(e))

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        storage=storage_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )

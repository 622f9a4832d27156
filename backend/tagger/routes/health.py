"""
Image Tagger Backend — Health Check Route
===========================================

What:  GET /health for load balancers and container health checks.
How:   Pings the storage backend and reports version, backend name, whether
       state is in-memory only, and uptime.
When:  Polled periodically; excluded from the access log.

Status levels:
    healthy   → storage reachable (HTTP 200)
    unhealthy → storage unreachable (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Depends, Response

from tagger import __version__
from tagger.schemas import HealthResponse
from tagger.storage import Storage, get_storage

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get("/health", response_model=HealthResponse, summary="Service health check")
async def health_check(
    response: Response,
    storage: Storage = Depends(get_storage),
) -> HealthResponse:
    reachable = await storage.ping()
    if not reachable:
        logger.warning("Health check: %s storage unreachable", storage.name)
        response.status_code = 503

    return HealthResponse(
        status="healthy" if reachable else "unhealthy",
        version=__version__,
        storage_backend=storage.name,
        storage="connected" if reachable else "disconnected",
        in_memory=storage.in_memory,
        uptime_seconds=round(time.time() - _start_time, 2),
    )

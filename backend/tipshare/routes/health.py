"""
TipShare Backend: Health Check Route
======================================

What:  Health check endpoint for monitoring and container probes.
How:   Loads the datastore once and reports whether that succeeded.
Who:   Called by Docker health checks and monitoring systems.

Status levels:
    - healthy:   the document can be read (HTTP 200)
    - unhealthy: the document cannot be read or parsed (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Depends, Response

from tipshare import __version__
from tipshare.database import DocumentStore
from tipshare.dependencies import get_store
from tipshare.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Track when the service started for uptime reporting
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    responses={503: {"description": "Datastore unreadable", "model": HealthResponse}},
)
async def health_check(
    response: Response,
    store: DocumentStore = Depends(get_store),
) -> HealthResponse:
    """
    Check that the persisted store can be loaded.

    A load is a full read of the JSON document, the same work every request
    does, so it exercises file permissions and document validity together.
    """
    store_ok = await store.health_check()
    if not store_ok:
        response.status_code = 503

    return HealthResponse(
        status="healthy" if store_ok else "unhealthy",
        version=__version__,
        store="readable" if store_ok else "unreadable",
        uptime_seconds=round(time.time() - _start_time, 2),
    )

"""
Catalog Backend - Health Check Route
======================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Pings the database and reports status plus uptime.
Who:   Docker health checks, load balancers, monitoring.

Status levels:
    healthy:   database reachable
    unhealthy: database unreachable (still HTTP 200 so the body is readable)
"""

import logging
import time

from fastapi import APIRouter, Request

from catalog import __version__
from catalog.schemas.product import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(request: Request) -> HealthResponse:
    """Runs SELECT 1 against the database and reports the result."""
    database = getattr(request.app.state, "database", None)
    connected = database is not None and await database.ping()
    if not connected:
        logger.warning("Health check: database unreachable")

    return HealthResponse(
        status="healthy" if connected else "unhealthy",
        version=__version__,
        database="connected" if connected else "disconnected",
        uptime_seconds=round(time.time() - _start_time, 2),
    )

"""
BizTime Backend — Health Check Route
======================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Runs SELECT 1 against the database engine and reports uptime.
Who:   Called by Docker health checks, load balancers, and monitoring systems.

Status levels:
    - healthy:   Database reachable (HTTP 200)
    - unhealthy: Database unreachable (HTTP 200 with status flag; the body
                 carries the verdict so probes can read the detail)
"""

import logging
import time

from fastapi import APIRouter
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine

from biztime import __version__
from biztime.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

# Initialized once when the module loads
_start_time = time.time()


def register_health_routes(router: APIRouter, engine: AsyncEngine) -> None:
    """Attach GET /health to `router`, probing `engine`."""

    @router.get(
        "/health",
        response_model=HealthResponse,
        tags=["Health"],
        summary="Service health check",
        description=(
            "Returns the health status of the backend service and its database. "
            "Used by Docker health checks and load balancers."
        ),
    )
    async def health_check() -> HealthResponse:
        db_status = "connected"
        overall = "healthy"

        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception as e:
            db_status = "disconnected"
            overall = "unhealthy"
            logger.warning("Health check: database unreachable: %s", str(e))

        return HealthResponse(
            status=overall,
            version=__version__,
            database=db_status,
            uptime_seconds=round(time.time() - _start_time, 2),
        )

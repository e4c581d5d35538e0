"""
NeuroNotes Backend: Health Check Route
========================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Runs SELECT 1 against the database and asks the AI gateway service
       whether it is configured (no upstream call, no quota used).

Status levels:
    - healthy:   database reachable and AI gateway configured (HTTP 200)
    - degraded:  AI gateway not configured; notes still work (HTTP 200)
    - unhealthy: database unreachable (HTTP 200 body, flagged for monitoring)
"""

import logging
import time

from fastapi import APIRouter
from sqlalchemy import text

from neuronotes import __version__
from neuronotes.database import engine
from neuronotes.schemas.note import HealthResponse
from neuronotes.services.ai_gateway import ai_gateway_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check() -> HealthResponse:
    db_status = "connected"
    ai_status = "configured"
    overall = "healthy"

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))

    if not await ai_gateway_service.health_check():
        ai_status = "not_configured"
        overall = "degraded" if overall != "unhealthy" else overall

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        ai_gateway=ai_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )

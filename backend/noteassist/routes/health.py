"""
NoteAssist Backend — Health Check Route
=========================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Checks the database and the AI provider and returns an aggregate status.

Status levels:
    - healthy:   Database and AI provider operational
    - degraded:  AI provider unavailable or unconfigured (note CRUD still works)
    - unhealthy: Database unreachable
"""

import logging
import time

from fastapi import APIRouter, Request
from sqlalchemy import text

from noteassist import __version__
from noteassist.schemas.note import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(request: Request) -> HealthResponse:
    """
    Check the health of the service and its dependencies.

    Check details:
        Database: Executes SELECT 1
        AI provider: Calls the provider's health_check() (list_models for Gemini)
    """
    db_status = "connected"
    provider_status = "available"
    overall = "healthy"

    # ── Check Database ────────────────────────────────────────────────────
    try:
        from noteassist.database import engine
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))

    # ── Check AI Provider ─────────────────────────────────────────────────
    provider = getattr(request.app.state, "llm_provider", None)
    if provider is None or not getattr(provider, "is_configured", True):
        provider_status = "not_configured"
        overall = "degraded" if overall != "unhealthy" else overall
    elif not await provider.health_check():
        provider_status = "unavailable"
        overall = "degraded" if overall != "unhealthy" else overall

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        ai_provider=provider_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )

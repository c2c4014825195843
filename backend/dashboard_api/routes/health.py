"""
Dashboard API — Health Check Route
===================================

What:  GET /health for container probes and load balancers.
How:   Runs SELECT 1 through the engine. The service is "healthy" only when
       the database answers; there are no other hard dependencies.
"""

import logging
import time

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text

from dashboard_api import __version__
from dashboard_api.database import engine
from dashboard_api.resources import resource_keys
from dashboard_api.schemas.resource import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check():
    """200 with status "healthy", or 503 with "unhealthy" when the database is down."""
    db_status = "connected"
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        logger.warning("Health check: database unreachable: %s", str(e))

    body = HealthResponse(
        status="healthy" if db_status == "connected" else "unhealthy",
        version=__version__,
        database=db_status,
        resources=list(resource_keys),
        uptime_seconds=round(time.time() - _start_time, 2),
    )
    if db_status != "connected":
        return JSONResponse(status_code=503, content=body.model_dump())
    return body

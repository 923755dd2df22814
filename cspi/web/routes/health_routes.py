"""Health and status routes."""

import time

from fastapi import APIRouter, Request
from loguru import logger

from cspi.web.models import APIResponse
from cspi.web.utils import get_engine, get_request_id

router = APIRouter()


@router.get("/health", response_model=APIResponse)
async def health_check(request: Request) -> APIResponse:
    """
    Basic liveness check.

    Reports uptime and the age of the last published snapshot; a snapshot that
    has never been collected is not an error.
    """
    engine = get_engine(request)
    snapshot = engine.get_current()
    uptime = time.time() - getattr(request.app.state, "start_time", time.time())

    logger.debug(f"Health check: uptime={uptime:.1f}s last_update={snapshot.timestamp}")
    return APIResponse(
        success=True,
        data={
            "status": "ok",
            "uptime_seconds": round(uptime, 3),
            "collecting": engine.is_collecting,
            "last_update": snapshot.timestamp.isoformat() if snapshot.timestamp else None,
            "cspi_level": snapshot.cspi_level.value if snapshot.cspi_level else None,
            "version": request.app.version,
        },
        message="healthy",
        request_id=get_request_id(request),
    )

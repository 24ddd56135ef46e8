"""
Health check endpoint.

GET /health: checks MongoDB and Redis connectivity.
Rules:
- MongoDB failure → "unhealthy" (503): customers, reservations and the
  fallback session store all live there.
- Redis failure → "degraded" (200): sessions stored in Redis are unreachable.
- Redis not configured → healthy; sessions are kept in MongoDB.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from dependencies import get_db, get_redis
from schemas.dto.responses.common import HealthResponse
from shared.logging import get_logger

router = APIRouter(tags=["health"])
log = get_logger(__name__)


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse}},
)
async def health_check(db=Depends(get_db), redis=Depends(get_redis)) -> JSONResponse:
    checks: dict[str, str] = {}
    overall = "healthy"

    try:
        await db.client.admin.command("ping")
        checks["mongodb"] = "ok"
    except Exception as e:
        log.error("health_check_failed", service="mongodb", error=str(e))
        checks["mongodb"] = "error"
        overall = "unhealthy"

    if redis is None:
        checks["redis"] = "not_configured"
    else:
        try:
            await redis.ping()
            checks["redis"] = "ok"
        except Exception as e:
            log.warning("health_check_failed", service="redis", error=str(e))
            checks["redis"] = "error"
            if overall == "healthy":
                overall = "degraded"

    status_code = 503 if overall == "unhealthy" else 200
    return JSONResponse(
        status_code=status_code,
        content={"status": overall, "checks": checks},
    )

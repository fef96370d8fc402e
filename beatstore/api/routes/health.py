"""Health check endpoints for monitoring and deployment verification."""

import logging
import time

from fastapi import APIRouter

from beatstore.core.config import get_settings
from beatstore.core.supabase import check_database_connection
from beatstore.schemas.common import CheckResult, HealthResponse, HealthStatus, WarmupResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Liveness check",
    description="Reports service status and database connectivity.",
)
async def health_check() -> HealthResponse:
    """Return health status including a database round-trip.

    Always answers 200 so the process is not restarted while the database
    is waking up; a failed check shows as DEGRADED.

    Returns:
        HealthResponse: Current health status with database check.
    """
    settings = get_settings()

    start_time = time.perf_counter()
    db_result = await check_database_connection()
    latency_ms = (time.perf_counter() - start_time) * 1000

    database = CheckResult(
        healthy=db_result["healthy"],
        latency_ms=round(latency_ms, 2),
        error=db_result.get("error"),
    )

    return HealthResponse(
        status=HealthStatus.OK if database.healthy else HealthStatus.DEGRADED,
        service=settings.app_name,
        environment=settings.app_env,
        stripe_mode="TEST" if settings.is_stripe_test_mode else "LIVE",
        database=database,
    )


@router.get(
    "/warmup",
    response_model=WarmupResponse,
    summary="Warm-up ping",
    description="No-op endpoint the frontend calls to wake the instance before checkout.",
)
async def warmup() -> WarmupResponse:
    """Answer immediately without touching any dependency."""
    logger.info("Server warmed by request")
    return WarmupResponse()

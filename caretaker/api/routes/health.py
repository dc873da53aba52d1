"""
Health check endpoint for the gateway and its Redis backend.
"""

import time

import structlog
from fastapi import APIRouter, Depends

from caretaker import __version__
from caretaker.api.dependencies import get_redis_client
from caretaker.api.models import ComponentHealth, HealthResponse

router = APIRouter()
logger = structlog.get_logger(__name__)


async def _check_redis(redis_client) -> ComponentHealth:
    """Check Redis connectivity and measure latency."""
    start = time.perf_counter()
    try:
        await redis_client.ping()
        latency_ms = (time.perf_counter() - start) * 1000
        return ComponentHealth(
            status="healthy",
            latency_ms=round(latency_ms, 2),
        )
    except Exception as e:
        latency_ms = (time.perf_counter() - start) * 1000
        return ComponentHealth(
            status="unhealthy",
            latency_ms=round(latency_ms, 2),
            details={"error": str(e)},
        )


@router.get("/health", response_model=HealthResponse, summary="Service health")
async def health(redis_client=Depends(get_redis_client)) -> HealthResponse:
    redis_health = await _check_redis(redis_client)
    if redis_health.status != "healthy":
        logger.warning("Health check: redis unhealthy", details=redis_health.details)

    return HealthResponse(
        status=redis_health.status,
        version=__version__,
        components={"redis": redis_health},
    )

"""
Dependency injection for FastAPI endpoints.
"""

from typing import AsyncGenerator

import redis.asyncio as redis

from caretaker.alerts.config import AlertConfig
from caretaker.alerts.store import RedisAlertStore, RemoteAlertStore
from caretaker.config.settings import get_settings

# Global instances (initialized on first request)
_redis_client: redis.Redis | None = None
_alert_store: RedisAlertStore | None = None


def _get_or_create_redis() -> redis.Redis:
    global _redis_client

    if _redis_client is None:
        settings = get_settings()
        _redis_client = redis.from_url(
            str(settings.redis_url),
            encoding="utf-8",
            decode_responses=True,
        )
    return _redis_client


async def get_redis_client() -> AsyncGenerator[redis.Redis, None]:
    """Get the shared Redis client."""
    yield _get_or_create_redis()


async def get_alert_store() -> RemoteAlertStore:
    """Get the alert store singleton."""
    global _alert_store

    if _alert_store is None:
        _alert_store = RedisAlertStore(_get_or_create_redis(), AlertConfig())
    return _alert_store


async def cleanup_dependencies() -> None:
    """Clean up global dependencies on shutdown."""
    global _redis_client, _alert_store

    _alert_store = None

    if _redis_client is not None:
        await _redis_client.aclose()
        _redis_client = None

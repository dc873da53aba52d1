"""Remote alert store backed by Redis.

Layout (prefix from ``AlertConfig.key_prefix``):

- ``<prefix>:<id>``  hash with ``type``, ``acknowledged`` (0/1),
  ``timestamp`` (epoch ms) and optional ``deviceId``
- ``<prefix>:ids``   set of every alert id

Every write publishes the affected id on ``AlertConfig.change_channel`` so
the live feed can push a fresh snapshot.
"""

import logging
import time
import uuid
from abc import ABC, abstractmethod
from typing import Any

import redis.asyncio as redis

from caretaker.alerts.config import AlertConfig
from caretaker.alerts.schemas import AlertSnapshot, parse_snapshot

logger = logging.getLogger(__name__)


def now_ms() -> int:
    """Current time in epoch milliseconds."""
    return int(time.time() * 1000)


class RemoteAlertStore(ABC):
    """Writable remote collection of alert records."""

    @abstractmethod
    async def create_alert(self, alert_type: str, device_id: str | None = None) -> str:
        """Create an unacknowledged alert stamped with the current time.

        Returns:
            Store-assigned alert id.
        """

    @abstractmethod
    async def load_snapshot(self) -> AlertSnapshot:
        """Read the entire collection."""

    @abstractmethod
    async def mark_acknowledged(self, alert_id: str) -> None:
        """Set ``acknowledged = true`` on a record (overwrite, idempotent)."""


class RedisAlertStore(RemoteAlertStore):
    """Alert store using one Redis hash per record.

    Usage:
        client = redis.from_url(url, decode_responses=True)
        store = RedisAlertStore(client)
        alert_id = await store.create_alert("FALL_DETECTED")
        snapshot = await store.load_snapshot()
    """

    def __init__(
        self,
        redis_client: redis.Redis,
        config: AlertConfig | None = None,
    ) -> None:
        self._redis = redis_client
        self._config = config or AlertConfig()

    @property
    def config(self) -> AlertConfig:
        return self._config

    async def create_alert(self, alert_type: str, device_id: str | None = None) -> str:
        alert_id = uuid.uuid4().hex
        fields = {
            "type": alert_type,
            "acknowledged": "0",
            "timestamp": str(now_ms()),
            "deviceId": device_id or self._config.default_device_id,
        }

        pipe = self._redis.pipeline(transaction=True)
        pipe.hset(self._config.record_key(alert_id), mapping=fields)
        pipe.sadd(self._config.index_key, alert_id)
        pipe.publish(self._config.change_channel, alert_id)
        await pipe.execute()

        logger.info("Created alert %s (%s)", alert_id, alert_type)
        return alert_id

    async def load_snapshot(self) -> AlertSnapshot:
        alert_ids = sorted(await self._redis.smembers(self._config.index_key))
        if not alert_ids:
            return AlertSnapshot()

        pipe = self._redis.pipeline(transaction=False)
        for alert_id in alert_ids:
            pipe.hgetall(self._config.record_key(alert_id))
        rows = await pipe.execute()

        raw: dict[str, Any] = {}
        for alert_id, fields in zip(alert_ids, rows):
            # Index entries whose hash has expired or been deleted are skipped
            if fields:
                raw[alert_id] = fields
        return parse_snapshot(raw)

    async def mark_acknowledged(self, alert_id: str) -> None:
        pipe = self._redis.pipeline(transaction=True)
        pipe.hset(self._config.record_key(alert_id), "acknowledged", "1")
        pipe.publish(self._config.change_channel, alert_id)
        await pipe.execute()

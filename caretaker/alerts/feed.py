"""Live alert feed using Redis pub/sub change notifications.

Each notification on the change channel triggers a full re-read of the
store; consumers always receive a complete ``AlertSnapshot``, never a
diff. Snapshots are delivered serially: the handler for one snapshot
finishes before the next read starts.

Failure policy:
- A failed snapshot read is reported and listening continues.
- A failed subscription (subscribe or pub/sub read) is reported and ends
  the run. There is no reconnect or retry.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from caretaker.alerts.config import AlertConfig
from caretaker.alerts.errors import FeedDeliveryError
from caretaker.alerts.schemas import AlertSnapshot
from caretaker.alerts.store import RemoteAlertStore

logger = logging.getLogger(__name__)

SnapshotHandler = Callable[[AlertSnapshot], Awaitable[None]]
ErrorHandler = Callable[[FeedDeliveryError], None]


class RedisAlertFeed:
    """Pushes full alert snapshots to a handler whenever the store changes.

    Lifecycle:
        1. ``run(on_snapshot, on_error)`` subscribes, delivers the current
           snapshot, then one snapshot per change notification
        2. ``stop()`` ends the loop; pub/sub is closed on exit
    """

    def __init__(
        self,
        redis_client: Any,
        store: RemoteAlertStore,
        config: AlertConfig | None = None,
    ) -> None:
        self._redis = redis_client
        self._store = store
        self._config = config or AlertConfig()
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def stop(self) -> None:
        """Ask the listen loop to exit after the current poll."""
        self._running = False

    async def run(self, on_snapshot: SnapshotHandler, on_error: ErrorHandler) -> None:
        """Subscribe and deliver snapshots until stopped or the subscription fails.

        Args:
            on_snapshot: Awaited with every successfully read snapshot.
            on_error: Called with each delivery failure.
        """
        channel = self._config.change_channel
        pubsub = self._redis.pubsub()
        self._running = True

        try:
            await pubsub.subscribe(channel)
        except Exception as e:
            self._running = False
            on_error(FeedDeliveryError(f"Subscription to {channel} failed: {e}", fatal=True))
            await self._close(pubsub)
            return

        logger.info("Alert feed subscribed (channel=%s)", channel)

        try:
            await self._deliver(on_snapshot, on_error)

            while self._running:
                try:
                    message = await pubsub.get_message(
                        ignore_subscribe_messages=True,
                        timeout=self._config.feed_poll_seconds,
                    )
                except asyncio.CancelledError:
                    raise
                except Exception as e:
                    on_error(FeedDeliveryError(f"Subscription to {channel} lost: {e}", fatal=True))
                    break

                if message is not None and message.get("type") == "message":
                    await self._deliver(on_snapshot, on_error)
        finally:
            self._running = False
            await self._close(pubsub)
            logger.info("Alert feed stopped (channel=%s)", channel)

    async def _deliver(self, on_snapshot: SnapshotHandler, on_error: ErrorHandler) -> None:
        try:
            snapshot = await self._store.load_snapshot()
        except Exception as e:
            on_error(FeedDeliveryError(f"Snapshot read failed: {e}"))
            return
        await on_snapshot(snapshot)

    async def _close(self, pubsub: Any) -> None:
        try:
            await pubsub.unsubscribe(self._config.change_channel)
            await pubsub.aclose()
        except Exception as e:
            logger.warning("Error closing alert feed pub/sub: %s", e)

"""Alert sync service owning the process-wide synchronization state.

``AlertSyncService`` is constructed once at startup and holds the latest
``AlertViews`` and the ``NotifiedSet``. Only its snapshot path mutates
that state; readers get the derived views and issue acknowledge commands.

The snapshot path assumes serial delivery (one snapshot projected and
dispatched before the next arrives); ``RedisAlertFeed`` provides that.
"""

import logging
import time
from datetime import datetime, timezone

from caretaker.alerts.acknowledge import AcknowledgeCoordinator
from caretaker.alerts.dispatcher import NotificationDispatcher, NotifiedSet
from caretaker.alerts.errors import FeedDeliveryError
from caretaker.alerts.feed import RedisAlertFeed
from caretaker.alerts.projector import AlertProjector, AlertViews
from caretaker.alerts.schemas import AlertRecord, AlertSnapshot
from caretaker.observability.metrics import get_metrics

logger = logging.getLogger(__name__)


class AlertSyncService:
    """Orchestrator for snapshot projection, surfacing, and acknowledgement.

    Combines the stateless projector with the dispatcher (which owns no
    state of its own) and the acknowledge coordinator.
    """

    def __init__(
        self,
        dispatcher: NotificationDispatcher,
        acknowledger: AcknowledgeCoordinator,
        projector: AlertProjector | None = None,
    ) -> None:
        self._dispatcher = dispatcher
        self._acknowledger = acknowledger
        self._projector = projector or AlertProjector()
        self._views = AlertViews()
        self._notified = NotifiedSet()
        self._last_snapshot_at: datetime | None = None
        self._last_feed_error: FeedDeliveryError | None = None

    @property
    def views(self) -> AlertViews:
        return self._views

    @property
    def active(self) -> tuple[AlertRecord, ...]:
        """Unacknowledged alerts from the latest snapshot, newest first."""
        return self._views.active

    @property
    def history(self) -> tuple[AlertRecord, ...]:
        """All alerts from the latest snapshot, newest first."""
        return self._views.history

    @property
    def notified(self) -> NotifiedSet:
        return self._notified

    @property
    def last_snapshot_at(self) -> datetime | None:
        return self._last_snapshot_at

    @property
    def last_feed_error(self) -> FeedDeliveryError | None:
        """Most recent feed failure since the last good snapshot."""
        return self._last_feed_error

    @property
    def is_stale(self) -> bool:
        """True when the feed has failed since the views were last refreshed."""
        return self._last_feed_error is not None

    async def handle_snapshot(self, snapshot: AlertSnapshot) -> None:
        """Project a fresh snapshot and surface newly active alerts.

        Args:
            snapshot: Entire remote alert state.
        """
        start = time.perf_counter()

        views = self._projector.project(snapshot)
        self._views = views
        self._last_snapshot_at = datetime.now(timezone.utc)
        self._last_feed_error = None

        raised = await self._dispatcher.dispatch(views.active, self._notified)

        latency = time.perf_counter() - start
        get_metrics().record_snapshot(len(views.active), len(views.history), latency)
        logger.debug(
            "Snapshot processed: active=%d history=%d raised=%d",
            len(views.active), len(views.history), len(raised),
        )

    def handle_feed_error(self, error: FeedDeliveryError) -> None:
        """Record a feed failure. The last good views stay authoritative."""
        self._last_feed_error = error
        get_metrics().record_feed_error()
        logger.error("Alert feed delivery failed: %s", error)

    def acknowledge(self, alert_id: str) -> None:
        """Fire-and-forget acknowledge of one alert.

        Retracts the local surface and writes the remote flag in the
        background. An empty id is ignored. The alert leaves the active
        view only once a later snapshot reflects the write.
        """
        self._acknowledger.submit(alert_id)

    async def run(self, feed: RedisAlertFeed) -> None:
        """Consume the feed until it stops or its subscription fails."""
        await feed.run(self.handle_snapshot, self.handle_feed_error)
        await self._acknowledger.drain()

"""Notification dispatcher raising one local surface per new active alert.

The ``NotifiedSet`` is the only dedup gate: an alert id is claimed before
its surface is raised, and claimed ids are never released. This gives
at-most-once surfacing per id for the life of the process. The set is not
persisted, so a restart can re-raise a surface for an alert that is still
active.

Notifier failures never block the rest of the batch (graceful degradation).
"""

import logging
import threading
from collections.abc import Iterable, Iterator

from caretaker.alerts.classifier import classify
from caretaker.alerts.config import AlertConfig
from caretaker.alerts.notifier import Notifier
from caretaker.alerts.schemas import AlertCategory, AlertRecord
from caretaker.observability.metrics import get_metrics

logger = logging.getLogger(__name__)


class NotifiedSet:
    """Process-lifetime, grow-only set of alert ids already surfaced.

    ``claim`` is an atomic check-and-insert so that overlapping snapshot
    passes (or threads) can never both win the same id.
    """

    def __init__(self) -> None:
        self._ids: set[str] = set()
        self._lock = threading.Lock()

    def claim(self, alert_id: str) -> bool:
        """Record ``alert_id`` as surfaced.

        Returns:
            True if this call added the id, False if it was already present.
        """
        with self._lock:
            if alert_id in self._ids:
                return False
            self._ids.add(alert_id)
            return True

    def __contains__(self, alert_id: object) -> bool:
        return alert_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def __iter__(self) -> Iterator[str]:
        with self._lock:
            return iter(frozenset(self._ids))


class NotificationDispatcher:
    """Raises local surfaces for active alerts not yet in the NotifiedSet."""

    def __init__(
        self,
        notifier: Notifier,
        config: AlertConfig | None = None,
    ) -> None:
        self._notifier = notifier
        self._config = config or AlertConfig()

    def notification_body(self, record: AlertRecord, category: AlertCategory) -> str:
        """Body text for a record's surface."""
        if category is AlertCategory.URGENT:
            return self._config.urgent_body
        return record.type if record.type.strip() else self._config.blank_type_body

    async def dispatch(
        self,
        active: Iterable[AlertRecord],
        notified: NotifiedSet,
    ) -> list[str]:
        """Raise a surface for every active alert seen for the first time.

        Args:
            active: Active view of the latest snapshot.
            notified: Process-lifetime NotifiedSet; extended in place.

        Returns:
            Ids of the alerts claimed during this pass.
        """
        raised: list[str] = []

        for record in active:
            if not record.alert_id or not notified.claim(record.alert_id):
                continue

            raised.append(record.alert_id)
            classification = classify(record.type)
            body = self.notification_body(record, classification.category)

            try:
                delivered = await self._notifier.raise_alert(
                    record.alert_id,
                    classification.category,
                    classification.label,
                    body,
                )
            except Exception as e:
                delivered = False
                logger.error(
                    "Unexpected error raising surface for alert %s: %s",
                    record.alert_id, e,
                )

            if delivered:
                get_metrics().record_surface_raised(classification.category.value)
                logger.info(
                    "Surface raised for alert %s (%s)",
                    record.alert_id, record.type,
                )
            else:
                get_metrics().record_surface_error()
                logger.warning(
                    "Surface for alert %s was not delivered by %s",
                    record.alert_id, self._notifier.name,
                )

        return raised

"""Acknowledge command: retract the local surface, then write the remote flag.

``submit`` is the caller-facing entry point and returns immediately; the
work runs as a background task. ``acknowledge`` does the work and reports
an ``AcknowledgeOutcome`` instead of raising. Callers that want to react to
failures pass ``on_outcome``; by default failures are only logged.
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Literal

from caretaker.alerts.errors import RemoteWriteError
from caretaker.alerts.notifier import Notifier
from caretaker.alerts.store import RemoteAlertStore
from caretaker.observability.metrics import get_metrics

logger = logging.getLogger(__name__)

AcknowledgeStatus = Literal["acknowledged", "ignored", "failed"]


@dataclass(frozen=True)
class AcknowledgeOutcome:
    """Result of one acknowledge command."""

    alert_id: str
    status: AcknowledgeStatus
    error: RemoteWriteError | None = None

    @property
    def ok(self) -> bool:
        return self.status != "failed"


class AcknowledgeCoordinator:
    """Executes acknowledge commands against the notifier and remote store."""

    def __init__(
        self,
        notifier: Notifier,
        store: RemoteAlertStore,
        on_outcome: Callable[[AcknowledgeOutcome], None] | None = None,
    ) -> None:
        self._notifier = notifier
        self._store = store
        self._on_outcome = on_outcome
        self._pending: set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        """Number of acknowledge commands still in flight."""
        return len(self._pending)

    def submit(self, alert_id: str) -> None:
        """Fire-and-forget acknowledge. Must be called from the event loop.

        An empty id is ignored without scheduling anything.
        """
        if not alert_id or not alert_id.strip():
            return

        task = asyncio.get_running_loop().create_task(
            self.acknowledge(alert_id), name=f"acknowledge-{alert_id}",
        )
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def drain(self) -> None:
        """Wait for every in-flight acknowledge command to finish."""
        if self._pending:
            await asyncio.gather(*list(self._pending))

    async def acknowledge(self, alert_id: str) -> AcknowledgeOutcome:
        """Retract the surface for ``alert_id`` and mark it acknowledged remotely.

        Never raises. Safe to repeat: the retract is a no-op for a missing
        surface and the remote write overwrites the same flag.

        Args:
            alert_id: Alert to acknowledge.

        Returns:
            Outcome of the command.
        """
        if not alert_id or not alert_id.strip():
            return AcknowledgeOutcome(alert_id=alert_id, status="ignored")

        try:
            if await self._notifier.retract(alert_id):
                get_metrics().record_surface_retracted()
        except Exception as e:
            # The remote write still runs after a failed retract
            logger.warning("Failed to retract surface for alert %s: %s", alert_id, e)

        try:
            await self._store.mark_acknowledged(alert_id)
        except Exception as e:
            error = RemoteWriteError(alert_id, str(e))
            logger.error("Acknowledge write failed for alert %s: %s", alert_id, e)
            outcome = AcknowledgeOutcome(alert_id=alert_id, status="failed", error=error)
        else:
            logger.info("Alert %s acknowledged", alert_id)
            outcome = AcknowledgeOutcome(alert_id=alert_id, status="acknowledged")

        get_metrics().record_acknowledge(outcome.status)
        self._report(outcome)
        return outcome

    def _report(self, outcome: AcknowledgeOutcome) -> None:
        if self._on_outcome is None:
            return
        try:
            self._on_outcome(outcome)
        except Exception as e:
            logger.warning("Acknowledge outcome listener failed: %s", e)

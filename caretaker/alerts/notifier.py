"""Local alert surface backends.

A ``Notifier`` raises and retracts the caretaker-facing surface for an
alert. Both operations are idempotent and safe on unknown ids. Surfaces are
addressed by ``surface_key(alert_id)`` so the surface raised by the
dispatcher is exactly the one the acknowledge path retracts.

Backends:
- LogNotifier: in-process registry of raised surfaces, logged via structlog.
- WebhookNotifier: POSTs raise/retract events to an HTTP endpoint.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone

import httpx

from caretaker.alerts.config import NotifierConfig
from caretaker.alerts.schemas import AlertCategory
from caretaker.observability.logging import get_logger

logger = logging.getLogger(__name__)

SURFACE_KEY_PREFIX = "caretaker-alert"


def surface_key(alert_id: str) -> str:
    """Deterministic, unique surface identifier for an alert id."""
    return f"{SURFACE_KEY_PREFIX}:{alert_id}"


class Notifier(ABC):
    """Abstract base for local alert surface backends."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique identifier for this backend (e.g. 'log', 'webhook')."""

    @abstractmethod
    async def raise_alert(
        self,
        alert_id: str,
        category: AlertCategory,
        title: str,
        body: str,
    ) -> bool:
        """Raise (or replace) the surface for an alert.

        Returns:
            True if the surface was delivered, False otherwise.
        """

    @abstractmethod
    async def retract(self, alert_id: str) -> bool:
        """Retract the surface for an alert. No-op if none is raised.

        Returns:
            True if the retraction was delivered, False otherwise.
        """


@dataclass
class Surface:
    """A raised local alert surface."""

    alert_id: str
    category: AlertCategory
    title: str
    body: str
    raised_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )


class LogNotifier(Notifier):
    """Keeps raised surfaces in memory and writes them to the log.

    Used by the ``watch`` command when no external surface is configured.
    """

    def __init__(self) -> None:
        self._surfaces: dict[str, Surface] = {}
        self._log = get_logger("caretaker.surface")

    @property
    def name(self) -> str:
        return "log"

    @property
    def surfaces(self) -> dict[str, Surface]:
        """Currently raised surfaces keyed by surface key."""
        return dict(self._surfaces)

    async def raise_alert(
        self,
        alert_id: str,
        category: AlertCategory,
        title: str,
        body: str,
    ) -> bool:
        key = surface_key(alert_id)
        self._surfaces[key] = Surface(
            alert_id=alert_id, category=category, title=title, body=body,
        )
        log = self._log.warning if category is AlertCategory.URGENT else self._log.info
        log(title, surface=key, body=body, category=category.value)
        return True

    async def retract(self, alert_id: str) -> bool:
        key = surface_key(alert_id)
        if self._surfaces.pop(key, None) is not None:
            self._log.info("Surface retracted", surface=key)
        return True


class WebhookNotifier(Notifier):
    """Delivers raise/retract events as JSON POST to an HTTP endpoint.

    Creates a new ``httpx.AsyncClient`` per call (short-lived, no pooling).
    The receiving side is expected to treat both events idempotently by
    ``surface_id``.
    """

    def __init__(
        self,
        url: str,
        headers: dict[str, str] | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._url = url
        self._headers = headers or {}
        self._timeout = timeout

    @property
    def name(self) -> str:
        return "webhook"

    def _build_payload(
        self,
        action: str,
        alert_id: str,
        category: AlertCategory | None = None,
        title: str | None = None,
        body: str | None = None,
    ) -> dict:
        payload: dict = {
            "action": action,
            "surface_id": surface_key(alert_id),
            "alert_id": alert_id,
        }
        if action == "raise":
            payload["category"] = category.value if category else None
            payload["title"] = title
            payload["body"] = body
        return payload

    async def _post(self, payload: dict) -> bool:
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                resp = await client.post(
                    self._url,
                    json=payload,
                    headers=self._headers,
                )
                if resp.is_success:
                    return True
                logger.warning(
                    "Notifier webhook %s returned %d for %s %s",
                    self._url, resp.status_code, payload["action"], payload["alert_id"],
                )
                return False
        except httpx.TimeoutException:
            logger.warning(
                "Notifier webhook %s timed out for %s %s",
                self._url, payload["action"], payload["alert_id"],
            )
            return False
        except Exception as e:
            logger.warning(
                "Notifier webhook %s failed for %s %s: %s",
                self._url, payload["action"], payload["alert_id"], e,
            )
            return False

    async def raise_alert(
        self,
        alert_id: str,
        category: AlertCategory,
        title: str,
        body: str,
    ) -> bool:
        return await self._post(
            self._build_payload("raise", alert_id, category, title, body)
        )

    async def retract(self, alert_id: str) -> bool:
        return await self._post(self._build_payload("retract", alert_id))


def build_notifier(config: NotifierConfig | None = None) -> Notifier:
    """Create the notifier backend selected by configuration.

    Raises:
        ValueError: If the webhook backend is selected without a URL.
    """
    config = config or NotifierConfig()
    if config.backend == "webhook":
        if not config.webhook_url:
            raise ValueError("NOTIFIER_WEBHOOK_URL is required for the webhook backend")
        return WebhookNotifier(url=config.webhook_url, timeout=config.webhook_timeout)
    return LogNotifier()

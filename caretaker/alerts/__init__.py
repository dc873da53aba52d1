"""Alert synchronization core.

Components:
- AlertRecord / AlertSnapshot: Alert data shapes and wire parsing
- AlertType / AlertCategory: Enumerated type tokens and urgency buckets
- classify: Type token to category + display label
- AlertProjector / AlertViews: Full-snapshot projection into active/history
- Notifier / LogNotifier / WebhookNotifier: Local alert surface backends
- NotifiedSet / NotificationDispatcher: At-most-once surfacing per alert id
- AcknowledgeCoordinator: Surface retraction + remote acknowledge write
- RedisAlertStore / RedisAlertFeed: Remote store and live change feed
- AlertSyncService: Context object owning views and the NotifiedSet
- AlertConfig / NotifierConfig: Pydantic settings
"""

from caretaker.alerts.acknowledge import AcknowledgeCoordinator, AcknowledgeOutcome
from caretaker.alerts.classifier import AlertClassification, classify
from caretaker.alerts.config import AlertConfig, NotifierConfig
from caretaker.alerts.dispatcher import NotificationDispatcher, NotifiedSet
from caretaker.alerts.errors import FeedDeliveryError, RemoteWriteError
from caretaker.alerts.feed import RedisAlertFeed
from caretaker.alerts.notifier import (
    LogNotifier,
    Notifier,
    WebhookNotifier,
    build_notifier,
    surface_key,
)
from caretaker.alerts.projector import AlertProjector, AlertViews
from caretaker.alerts.schemas import (
    AlertCategory,
    AlertRecord,
    AlertSnapshot,
    AlertType,
    parse_snapshot,
)
from caretaker.alerts.service import AlertSyncService
from caretaker.alerts.store import RedisAlertStore, RemoteAlertStore

__all__ = [
    "AcknowledgeCoordinator",
    "AcknowledgeOutcome",
    "AlertCategory",
    "AlertClassification",
    "AlertConfig",
    "AlertProjector",
    "AlertRecord",
    "AlertSnapshot",
    "AlertSyncService",
    "AlertType",
    "AlertViews",
    "FeedDeliveryError",
    "LogNotifier",
    "NotificationDispatcher",
    "NotifiedSet",
    "Notifier",
    "NotifierConfig",
    "RedisAlertFeed",
    "RedisAlertStore",
    "RemoteAlertStore",
    "RemoteWriteError",
    "WebhookNotifier",
    "build_notifier",
    "classify",
    "parse_snapshot",
    "surface_key",
]

"""Schema definitions for alert records and snapshots.

An ``AlertRecord`` is one event reported by a wearable device. The remote
store keeps records keyed by an id it assigns at creation time; the id is the
key of the record, not a field of its wire shape::

    {"type": str, "acknowledged": bool, "timestamp": int, "deviceId": str?}

An ``AlertSnapshot`` is the entire remote collection at one instant, delivered
wholesale on every change. It is never a diff.
"""

import enum
import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

logger = logging.getLogger(__name__)


class AlertType(str, enum.Enum):
    """Alert type tokens emitted by known devices.

    The set is open: records carrying a token outside this enum are kept
    with their raw ``type`` string and classified as standard alerts.
    """

    FALL_DETECTED = "FALL_DETECTED"
    PROLONGED_INACTIVITY = "PROLONGED_INACTIVITY"
    SHORT_HUM = "SHORT_HUM"
    LONG_HUM = "LONG_HUM"
    GESTURE_LEFT = "GESTURE_LEFT"
    GESTURE_RIGHT = "GESTURE_RIGHT"

    @classmethod
    def parse(cls, token: str) -> "AlertType | None":
        """Return the enum member for ``token``, or None if unrecognized."""
        try:
            return cls(token)
        except ValueError:
            return None


class AlertCategory(str, enum.Enum):
    """Urgency bucket used for surfacing alerts."""

    URGENT = "urgent"
    STANDARD = "standard"


def _parse_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes")
    return bool(value)


def _parse_timestamp(value: Any) -> int:
    if value is None or value == "":
        return 0
    return int(value)


@dataclass(frozen=True)
class AlertRecord:
    """One reported emergency event.

    Attributes:
        alert_id: Store-assigned key, unique within a snapshot.
        type: Alert type token (see ``AlertType``; open set).
        acknowledged: Whether the caretaker has acknowledged the alert.
            Only ever transitions from False to True.
        timestamp: Creation time in epoch milliseconds, set by the producer.
        device_id: Reporting device, if known.
    """

    alert_id: str
    type: str = ""
    acknowledged: bool = False
    timestamp: int = 0
    device_id: str | None = None

    @property
    def alert_type(self) -> AlertType | None:
        """Known alert type, or None for an unrecognized token."""
        return AlertType.parse(self.type)

    def to_wire(self) -> dict[str, Any]:
        """Convert to the wire shape stored under the record's key."""
        data: dict[str, Any] = {
            "type": self.type,
            "acknowledged": self.acknowledged,
            "timestamp": self.timestamp,
        }
        if self.device_id is not None:
            data["deviceId"] = self.device_id
        return data

    @classmethod
    def from_wire(cls, alert_id: str, data: Mapping[str, Any]) -> "AlertRecord":
        """Create a record from its key and wire shape.

        Missing fields fall back to the dataclass defaults. String-encoded
        booleans and integers (as stored in Redis hashes) are accepted.

        Args:
            alert_id: Key under which the record is stored.
            data: Wire shape mapping.

        Returns:
            AlertRecord instance.
        """
        device_id = data.get("deviceId")
        return cls(
            alert_id=alert_id,
            type=str(data.get("type") or ""),
            acknowledged=_parse_bool(data.get("acknowledged", False)),
            timestamp=_parse_timestamp(data.get("timestamp")),
            device_id=str(device_id) if device_id else None,
        )


class AlertSnapshot(Mapping[str, AlertRecord]):
    """Read-only mapping of alert id to record for the whole remote state."""

    __slots__ = ("_records",)

    def __init__(self, records: Mapping[str, AlertRecord] | None = None) -> None:
        self._records = MappingProxyType(dict(records or {}))

    def __getitem__(self, alert_id: str) -> AlertRecord:
        return self._records[alert_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return f"AlertSnapshot({len(self._records)} records)"

    @classmethod
    def of(cls, *records: AlertRecord) -> "AlertSnapshot":
        """Build a snapshot from records, keyed by their ids."""
        return cls({r.alert_id: r for r in records})


def parse_snapshot(raw: Mapping[str, Any] | None) -> AlertSnapshot:
    """Build an AlertSnapshot from the raw ``{key: wire}`` collection.

    Entries with a blank key or a non-mapping value are invalid and dropped.
    Entries whose fields cannot be parsed are dropped as well. Nothing here
    raises on bad data.

    Args:
        raw: Remote collection keyed by alert id.

    Returns:
        Parsed snapshot.
    """
    records: dict[str, AlertRecord] = {}
    for key, data in (raw or {}).items():
        alert_id = str(key) if key is not None else ""
        if not alert_id.strip():
            logger.debug("Dropping alert entry with blank key")
            continue
        if not isinstance(data, Mapping):
            logger.debug("Dropping malformed alert entry %s", alert_id)
            continue
        try:
            records[alert_id] = AlertRecord.from_wire(alert_id, data)
        except (TypeError, ValueError) as e:
            logger.debug("Dropping unparseable alert entry %s: %s", alert_id, e)
    return AlertSnapshot(records)

"""Alert sync and notifier configuration.

Controls the Redis key layout of the remote alert store, the change
channel the live feed subscribes to, gateway defaults, and notification
copy. All settings can be overridden via ``ALERTS_*`` / ``NOTIFIER_*``
environment variables.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AlertConfig(BaseSettings):
    """Configuration for the alert store, feed, and dispatcher."""

    model_config = SettingsConfigDict(
        env_prefix="ALERTS_",
        case_sensitive=False,
        extra="ignore",
    )

    # Remote store layout: one hash per record plus an id index set
    key_prefix: str = Field(
        default="alerts",
        min_length=1,
        description="Redis key prefix for alert records (<prefix>:<id>)",
    )
    change_channel: str = Field(
        default="alerts:changed",
        min_length=1,
        description="Redis pub/sub channel announcing alert collection changes",
    )
    feed_poll_seconds: float = Field(
        default=1.0,
        gt=0.0,
        le=30.0,
        description="Pub/sub poll interval for the live feed",
    )

    # Gateway
    default_device_id: str = Field(
        default="wearable_01",
        min_length=1,
        description="Device id recorded when an inbound alert omits deviceId",
    )

    # Notification copy
    urgent_body: str = Field(
        default="Immediate attention required!",
        description="Notification body for urgent alerts",
    )
    blank_type_body: str = Field(
        default="Emergency detected",
        description="Notification body for standard alerts with a blank type",
    )

    @property
    def index_key(self) -> str:
        """Redis set holding every alert id."""
        return f"{self.key_prefix}:ids"

    def record_key(self, alert_id: str) -> str:
        """Redis hash key for one alert record."""
        return f"{self.key_prefix}:{alert_id}"


class NotifierConfig(BaseSettings):
    """Configuration for the local alert surface backend."""

    model_config = SettingsConfigDict(
        env_prefix="NOTIFIER_",
        case_sensitive=False,
        extra="ignore",
    )

    backend: Literal["log", "webhook"] = Field(
        default="log",
        description="Surface backend: in-process log registry or HTTP webhook",
    )
    webhook_url: str | None = Field(
        default=None,
        description="Endpoint receiving raise/retract events (webhook backend)",
    )
    webhook_timeout: float = Field(
        default=10.0,
        gt=0.0,
        le=120.0,
        description="HTTP timeout in seconds for webhook calls",
    )

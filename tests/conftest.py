"""Pytest fixtures for caretaker tests."""

from unittest.mock import AsyncMock

import pytest

from caretaker.alerts.config import AlertConfig
from caretaker.alerts.notifier import Notifier
from caretaker.alerts.schemas import AlertCategory, AlertRecord
from caretaker.alerts.store import RedisAlertStore
from caretaker.config.settings import Settings


class RecordingNotifier(Notifier):
    """Notifier that records every call and keeps a surface registry."""

    def __init__(self, fail_raise: bool = False) -> None:
        self.calls: list[tuple] = []
        self.raised: dict[str, tuple[AlertCategory, str, str]] = {}
        self._fail_raise = fail_raise

    @property
    def name(self) -> str:
        return "recording"

    async def raise_alert(self, alert_id, category, title, body) -> bool:
        self.calls.append(("raise", alert_id, category, title, body))
        if self._fail_raise:
            raise RuntimeError("surface backend down")
        self.raised[alert_id] = (category, title, body)
        return True

    async def retract(self, alert_id) -> bool:
        self.calls.append(("retract", alert_id))
        self.raised.pop(alert_id, None)
        return True

    def calls_for(self, action: str) -> list[tuple]:
        return [c for c in self.calls if c[0] == action]


def make_record(
    alert_id: str = "A",
    type: str = "FALL_DETECTED",
    acknowledged: bool = False,
    timestamp: int = 100,
    device_id: str | None = "wearable_01",
) -> AlertRecord:
    """Helper to create an AlertRecord with sensible defaults."""
    return AlertRecord(
        alert_id=alert_id,
        type=type,
        acknowledged=acknowledged,
        timestamp=timestamp,
        device_id=device_id,
    )


@pytest.fixture
def test_settings() -> Settings:
    """Settings configured for testing."""
    return Settings(
        environment="development",
        log_level="DEBUG",
        redis_url="redis://localhost:6379/1",  # Use DB 1 for tests
    )


@pytest.fixture
def alert_config() -> AlertConfig:
    return AlertConfig()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def mock_store():
    store = AsyncMock(spec=RedisAlertStore)
    store.mark_acknowledged.return_value = None
    return store

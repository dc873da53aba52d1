"""Tests for the NotifiedSet and NotificationDispatcher."""

import threading

import pytest

from caretaker.alerts.config import AlertConfig
from caretaker.alerts.dispatcher import NotificationDispatcher, NotifiedSet
from caretaker.alerts.schemas import AlertCategory
from tests.conftest import RecordingNotifier, make_record


# ── NotifiedSet ─────────────────────────────────────────


class TestNotifiedSet:
    def test_starts_empty(self):
        notified = NotifiedSet()
        assert len(notified) == 0
        assert "A" not in notified

    def test_claim_once(self):
        notified = NotifiedSet()
        assert notified.claim("A") is True
        assert notified.claim("A") is False
        assert "A" in notified
        assert len(notified) == 1

    def test_no_removal_api(self):
        notified = NotifiedSet()
        assert not hasattr(notified, "discard")
        assert not hasattr(notified, "remove")

    def test_iteration_is_a_copy(self):
        notified = NotifiedSet()
        notified.claim("A")
        ids = iter(notified)
        notified.claim("B")
        assert list(ids) == ["A"]

    def test_concurrent_claims_have_single_winner(self):
        notified = NotifiedSet()
        wins: list[bool] = []
        barrier = threading.Barrier(8)

        def worker():
            barrier.wait()
            wins.append(notified.claim("same-id"))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert wins.count(True) == 1


# ── NotificationDispatcher ──────────────────────────────


@pytest.fixture
def dispatcher(notifier):
    return NotificationDispatcher(notifier, AlertConfig())


class TestDispatch:
    @pytest.mark.asyncio
    async def test_raises_new_alert(self, dispatcher, notifier):
        notified = NotifiedSet()
        raised = await dispatcher.dispatch([make_record("A")], notified)

        assert raised == ["A"]
        assert "A" in notified
        assert notifier.calls == [
            ("raise", "A", AlertCategory.URGENT, "⚠️🆘 Fall Detected", "Immediate attention required!"),
        ]

    @pytest.mark.asyncio
    async def test_standard_body_is_raw_type(self, dispatcher, notifier):
        await dispatcher.dispatch([make_record("A", type="GESTURE_RIGHT")], NotifiedSet())
        assert notifier.calls == [
            ("raise", "A", AlertCategory.STANDARD, "🚨 Gesture Right", "GESTURE_RIGHT"),
        ]

    @pytest.mark.asyncio
    async def test_blank_type_body(self, dispatcher, notifier):
        await dispatcher.dispatch([make_record("A", type="")], NotifiedSet())
        assert notifier.calls[0][4] == "Emergency detected"

    @pytest.mark.asyncio
    async def test_urgent_body_is_configurable(self, notifier):
        config = AlertConfig(urgent_body="Check on them now")
        dispatcher = NotificationDispatcher(notifier, config)
        await dispatcher.dispatch([make_record("A", type="PROLONGED_INACTIVITY")], NotifiedSet())
        assert notifier.calls[0][4] == "Check on them now"

    @pytest.mark.asyncio
    async def test_dedup_across_snapshots(self, dispatcher, notifier):
        notified = NotifiedSet()
        record = make_record("A")

        for _ in range(5):
            await dispatcher.dispatch([record], notified)

        assert len(notifier.calls_for("raise")) == 1

    @pytest.mark.asyncio
    async def test_dedup_key_is_id_not_type(self, dispatcher, notifier):
        notified = NotifiedSet()
        raised = await dispatcher.dispatch(
            [make_record("A", type="SHORT_HUM"), make_record("B", type="SHORT_HUM")],
            notified,
        )
        assert sorted(raised) == ["A", "B"]
        assert len(notifier.calls_for("raise")) == 2

    @pytest.mark.asyncio
    async def test_all_new_alerts_raised(self, dispatcher, notifier):
        notified = NotifiedSet()
        notified.claim("B")
        records = [make_record(k, timestamp=i) for i, k in enumerate("ABCD")]

        raised = await dispatcher.dispatch(records, notified)

        assert sorted(raised) == ["A", "C", "D"]
        assert {c[1] for c in notifier.calls_for("raise")} == {"A", "C", "D"}

    @pytest.mark.asyncio
    async def test_empty_id_is_never_surfaced(self, dispatcher, notifier):
        notified = NotifiedSet()
        raised = await dispatcher.dispatch([make_record("")], notified)
        assert raised == []
        assert notifier.calls == []
        assert len(notified) == 0

    @pytest.mark.asyncio
    async def test_notifier_failure_isolated(self):
        notifier = RecordingNotifier(fail_raise=True)
        dispatcher = NotificationDispatcher(notifier)
        notified = NotifiedSet()

        raised = await dispatcher.dispatch([make_record("A"), make_record("B")], notified)

        # Both attempted, both claimed, nothing propagated
        assert sorted(raised) == ["A", "B"]
        assert len(notifier.calls_for("raise")) == 2
        assert "A" in notified and "B" in notified

    @pytest.mark.asyncio
    async def test_failed_surface_not_retried(self):
        notifier = RecordingNotifier(fail_raise=True)
        dispatcher = NotificationDispatcher(notifier)
        notified = NotifiedSet()

        await dispatcher.dispatch([make_record("A")], notified)
        await dispatcher.dispatch([make_record("A")], notified)

        assert len(notifier.calls_for("raise")) == 1

    @pytest.mark.asyncio
    async def test_undelivered_surface_still_claimed(self, notifier):
        class RejectingNotifier(RecordingNotifier):
            async def raise_alert(self, alert_id, category, title, body) -> bool:
                self.calls.append(("raise", alert_id))
                return False

        rejecting = RejectingNotifier()
        notified = NotifiedSet()
        await NotificationDispatcher(rejecting).dispatch([make_record("A")], notified)
        assert "A" in notified

"""Tests for alert record parsing and snapshot construction."""

import pytest

from caretaker.alerts.schemas import (
    AlertRecord,
    AlertSnapshot,
    AlertType,
    parse_snapshot,
)


class TestAlertRecord:
    """Test wire shape conversion."""

    def test_from_wire_full(self):
        record = AlertRecord.from_wire(
            "k1",
            {"type": "FALL_DETECTED", "acknowledged": False, "timestamp": 100, "deviceId": "wearable_01"},
        )
        assert record.alert_id == "k1"
        assert record.type == "FALL_DETECTED"
        assert record.acknowledged is False
        assert record.timestamp == 100
        assert record.device_id == "wearable_01"

    def test_from_wire_defaults(self):
        record = AlertRecord.from_wire("k1", {})
        assert record.type == ""
        assert record.acknowledged is False
        assert record.timestamp == 0
        assert record.device_id is None

    def test_from_wire_string_encoded(self):
        record = AlertRecord.from_wire(
            "k1", {"type": "LONG_HUM", "acknowledged": "1", "timestamp": "1700000000000"},
        )
        assert record.acknowledged is True
        assert record.timestamp == 1_700_000_000_000

    @pytest.mark.parametrize("raw", ["0", "false", "False", ""])
    def test_from_wire_false_strings(self, raw):
        assert AlertRecord.from_wire("k1", {"acknowledged": raw}).acknowledged is False

    def test_to_wire_omits_missing_device(self):
        record = AlertRecord(alert_id="k1", type="SHORT_HUM", timestamp=5)
        assert record.to_wire() == {"type": "SHORT_HUM", "acknowledged": False, "timestamp": 5}

    def test_to_wire_has_no_id(self):
        record = AlertRecord(alert_id="k1", type="SHORT_HUM", device_id="d1")
        assert "alert_id" not in record.to_wire()
        assert record.to_wire()["deviceId"] == "d1"

    def test_alert_type_known_and_unknown(self):
        assert AlertRecord(alert_id="a", type="FALL_DETECTED").alert_type is AlertType.FALL_DETECTED
        assert AlertRecord(alert_id="a", type="BATTERY_LOW").alert_type is None

    def test_records_are_immutable(self):
        record = AlertRecord(alert_id="a")
        with pytest.raises(AttributeError):
            record.acknowledged = True


class TestParseSnapshot:
    """Test snapshot parsing from the raw remote collection."""

    def test_injects_keys_as_ids(self):
        snapshot = parse_snapshot({
            "A": {"type": "FALL_DETECTED", "acknowledged": False, "timestamp": 100},
            "B": {"type": "SHORT_HUM", "acknowledged": True, "timestamp": 50},
        })
        assert set(snapshot) == {"A", "B"}
        assert snapshot["A"].alert_id == "A"
        assert snapshot["B"].acknowledged is True

    def test_drops_blank_keys(self):
        snapshot = parse_snapshot({
            "": {"type": "FALL_DETECTED"},
            "   ": {"type": "FALL_DETECTED"},
            "A": {"type": "FALL_DETECTED"},
        })
        assert list(snapshot) == ["A"]

    def test_padded_key_kept_verbatim(self):
        snapshot = parse_snapshot({" A ": {"type": "FALL_DETECTED", "timestamp": 1}})
        assert list(snapshot) == [" A "]
        assert snapshot[" A "].alert_id == " A "

    def test_drops_malformed_entries(self):
        snapshot = parse_snapshot({
            "A": "not-a-mapping",
            "B": {"type": "SHORT_HUM", "timestamp": "not-a-number"},
            "C": {"type": "LONG_HUM", "timestamp": 1},
        })
        assert list(snapshot) == ["C"]

    def test_none_is_empty(self):
        assert len(parse_snapshot(None)) == 0

    def test_unknown_type_is_kept(self):
        snapshot = parse_snapshot({"A": {"type": "BATTERY_LOW", "timestamp": 1}})
        assert snapshot["A"].type == "BATTERY_LOW"


class TestAlertSnapshot:
    def test_of_keys_by_id(self):
        a = AlertRecord(alert_id="A")
        b = AlertRecord(alert_id="B")
        snapshot = AlertSnapshot.of(a, b)
        assert snapshot["A"] is a
        assert len(snapshot) == 2

    def test_is_read_only(self):
        snapshot = AlertSnapshot.of(AlertRecord(alert_id="A"))
        with pytest.raises(TypeError):
            snapshot["B"] = AlertRecord(alert_id="B")

    def test_copy_is_detached_from_source(self):
        source = {"A": AlertRecord(alert_id="A")}
        snapshot = AlertSnapshot(source)
        source["B"] = AlertRecord(alert_id="B")
        assert "B" not in snapshot

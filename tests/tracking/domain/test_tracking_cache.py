"""Tests for the TTL-bound tracking cache."""

import pytest
from shared.clock import FrozenClock
from shared.store.memory import InMemoryStore
from shared.store.port import TRACKING_CACHE_KEY, read_json, write_json
from tracking.cache.cache import TrackingCache
from tracking.cache.records import TrackingEvent, TrackingResult
from tracking.status.stage import DeliveryStage


class _ReadOnlyStore(InMemoryStore):
    def set(self, key, value):
        raise OSError("quota exceeded")


def _result(stage=DeliveryStage.IN_TRANSIT, **overrides):
    data = dict(
        success=True,
        carrier="EKART",
        tracking_number="FMPP1234567",
        stage=stage,
        last_update="2024-01-01T09:30:00+00:00",
        location="Bengaluru Hub",
        events=[TrackingEvent(status="Picked up", location="Mumbai", time="2024-01-01T08:00:00+00:00")],
    )
    data.update(overrides)
    return TrackingResult(**data)


@pytest.fixture()
def cache():
    return TrackingCache(InMemoryStore(), FrozenClock(), ttl=300)


class TestFreshness:
    def test_put_then_get(self, cache):
        cache.put("FMPP1234567", _result())
        assert cache.get("FMPP1234567") == _result()

    def test_fresh_just_before_ttl(self, cache):
        cache.put("FMPP1234567", _result())
        cache.clock.advance(seconds=299)
        assert cache.get("FMPP1234567") is not None

    def test_stale_at_ttl(self, cache):
        cache.put("FMPP1234567", _result())
        cache.clock.advance(seconds=300)
        assert cache.get("FMPP1234567") is None

    def test_missing_key(self, cache):
        assert cache.get("nope") is None

    def test_custom_ttl(self):
        cache = TrackingCache(InMemoryStore(), FrozenClock(), ttl=10)
        cache.put("FMPP1", _result())
        cache.clock.advance(seconds=11)
        assert cache.get("FMPP1") is None


class TestMisses:
    def test_remembered_miss_is_recent(self, cache):
        cache.remember_miss("AWB1", "2024-01-01T00:00:00+00:00")
        assert cache.recent_miss("AWB1") == "2024-01-01T00:00:00+00:00"

    def test_miss_is_not_a_result(self, cache):
        cache.remember_miss("AWB1", "2024-01-01T00:00:00+00:00")
        assert cache.get("AWB1") is None

    def test_miss_expires(self, cache):
        cache.remember_miss("AWB1", "2024-01-01T00:00:00+00:00")
        cache.clock.advance(seconds=301)
        assert cache.recent_miss("AWB1") is None

    def test_result_is_not_a_miss(self, cache):
        cache.put("FMPP1", _result())
        assert cache.recent_miss("FMPP1") is None


class TestPersistence:
    def test_entries_are_one_json_map(self, cache):
        cache.put("FMPP1", _result())
        cache.put("FMPP2", _result(tracking_number="FMPP2"))
        entries = read_json(cache.store, TRACKING_CACHE_KEY)
        assert set(entries) == {"FMPP1", "FMPP2"}
        assert entries["FMPP1"]["data"]["status"] == {"status": "in_transit", "stage": 3, "label": "In Transit"}
        assert entries["FMPP1"]["timestamp"] == cache.clock.timestamp_ms()

    def test_clear_removes_only_that_key(self, cache):
        cache.put("FMPP1", _result())
        cache.put("FMPP2", _result(tracking_number="FMPP2"))
        cache.clear("FMPP1")
        assert cache.get("FMPP1") is None
        assert cache.get("FMPP2") is not None

    def test_malformed_entry_is_discarded(self, cache):
        write_json(
            cache.store,
            TRACKING_CACHE_KEY,
            {"FMPP1": {"data": {"status": {"status": "teleported"}}, "timestamp": cache.clock.timestamp_ms()}},
        )
        assert cache.get("FMPP1") is None

    def test_corrupt_map_reads_empty(self, cache):
        cache.store.set(TRACKING_CACHE_KEY, "[1, 2")
        assert cache.get("FMPP1") is None

    def test_write_failure_is_not_raised(self):
        cache = TrackingCache(_ReadOnlyStore(), FrozenClock())
        cache.put("FMPP1", _result())
        assert cache.get("FMPP1") is None


class TestTrackingResultRecord:
    def test_dict_round_trip_keeps_flags(self):
        result = _result(DeliveryStage.CANCELLED, carrier="MANUAL", is_manual=True, is_cancelled=True)
        assert TrackingResult.from_dict(result.to_dict()) == result

    def test_event_from_carrier_aliases(self):
        event = TrackingEvent.from_carrier({"description": "Arrived", "timestamp": "t1"})
        assert event == TrackingEvent(status="Arrived", location="", time="t1")

"""Application tests for live status lookups through the cache."""

from unittest.mock import MagicMock

import pytest
from shared.errors import NetworkError
from tracking.cache.records import TrackingEvent
from tracking.status.stage import DeliveryStage


class TestCarrierHit:
    def test_live_result(self, orchestrator, carrier):
        carrier.set_report(
            "FMPP1234567",
            "In Transit",
            "Departed from facility",
            last_update="2024-01-01T08:00:00+00:00",
            current_location="Bhiwandi Hub",
            events=[{"status": "Picked up", "location": "Mumbai", "time": "2024-01-01T06:00:00+00:00"}],
        )

        result = orchestrator.get_live_status("FMPP1234567", "Ekart")

        assert result.success is True
        assert result.is_fallback is False
        assert result.carrier == "EKART"
        assert result.stage is DeliveryStage.IN_TRANSIT
        assert result.location == "Bhiwandi Hub"
        assert result.last_update == "2024-01-01T08:00:00+00:00"
        assert result.events == [TrackingEvent("Picked up", "Mumbai", "2024-01-01T06:00:00+00:00")]

    def test_missing_carrier_timestamp_uses_now(self, orchestrator, carrier, clock):
        carrier.set_report("FMPP1", "Shipped")
        assert orchestrator.get_live_status("FMPP1").last_update == clock.now().isoformat()

    def test_carrier_hint_reaches_the_tracker(self, orchestrator, carrier):
        orchestrator.get_live_status("AWB1", "Blue Dart")
        assert carrier.calls == [{"tracking_number": "AWB1", "carrier": "BLUEDART"}]

    def test_served_from_cache_within_ttl(self, orchestrator, carrier, clock):
        carrier.set_report("FMPP1", "In Transit")
        first = orchestrator.get_live_status("FMPP1")
        carrier.set_report("FMPP1", "Delivered")
        clock.advance(seconds=120)

        assert orchestrator.get_live_status("FMPP1") == first
        assert len(carrier.calls) == 1

    def test_refreshed_after_ttl(self, orchestrator, carrier, clock):
        carrier.set_report("FMPP1", "In Transit")
        orchestrator.get_live_status("FMPP1")
        carrier.set_report("FMPP1", "Delivered")
        clock.advance(seconds=300)

        assert orchestrator.get_live_status("FMPP1").stage is DeliveryStage.DELIVERED
        assert len(carrier.calls) == 2

    def test_clear_forces_a_lookup(self, orchestrator, carrier):
        carrier.set_report("FMPP1", "In Transit")
        orchestrator.get_live_status("FMPP1")
        orchestrator.clear("FMPP1")
        orchestrator.get_live_status("FMPP1")
        assert len(carrier.calls) == 2


class TestFallback:
    def test_platform_status_when_carrier_has_nothing(self, orchestrator, clock):
        result = orchestrator.get_live_status("AWB-404", "Shadowfax", "fulfilled")

        assert result.success is False
        assert result.is_fallback is True
        assert result.carrier == "SHADOWFAX"
        assert result.stage is DeliveryStage.SHIPPED
        assert result.last_update == clock.now().isoformat()

    def test_no_fallback_status_is_processing(self, orchestrator):
        assert orchestrator.get_live_status("AWB-404").stage is DeliveryStage.PROCESSING

    def test_repeated_fallback_is_identical(self, orchestrator, carrier, clock):
        first = orchestrator.get_live_status("AWB-404", None, "in_transit")
        clock.advance(seconds=60)
        second = orchestrator.get_live_status("AWB-404", None, "in_transit")

        assert second == first
        assert len(carrier.calls) == 1

    def test_fallback_is_never_served_as_a_cached_result(self, orchestrator):
        orchestrator.get_live_status("AWB-404", None, "fulfilled")
        assert orchestrator.cache.get("AWB-404") is None

    def test_carrier_asked_again_once_the_miss_expires(self, orchestrator, carrier, clock):
        orchestrator.get_live_status("FMPP9")
        carrier.set_report("FMPP9", "Out for delivery")
        clock.advance(seconds=301)

        result = orchestrator.get_live_status("FMPP9")
        assert result.stage is DeliveryStage.OUT_FOR_DELIVERY
        assert result.is_fallback is False

    def test_carrier_error_falls_back(self, store, clock, settings):
        from tracking.orchestrator import DeliveryTrackingOrchestrator

        tracker = MagicMock()
        tracker.fetch.side_effect = NetworkError("timeout")
        orchestrator = DeliveryTrackingOrchestrator(carrier=tracker, store=store, clock=clock, settings=settings)

        result = orchestrator.get_live_status("FMPP1", None, "fulfilled")
        assert result.is_fallback is True
        assert result.stage is DeliveryStage.SHIPPED


class TestManualOverride:
    def test_override_wins_over_live_data(self, orchestrator, carrier):
        carrier.set_report("FMPP1", "Delivered")
        orchestrator.set_manual_status("FMPP1", DeliveryStage.OUT_FOR_DELIVERY)

        result = orchestrator.get_live_status("FMPP1")
        assert result.stage is DeliveryStage.OUT_FOR_DELIVERY
        assert result.is_manual is True
        assert result.carrier == "MANUAL"
        assert carrier.calls == []

    def test_override_expires_with_the_cache(self, orchestrator, carrier, clock):
        carrier.set_report("FMPP1", "Delivered")
        orchestrator.set_manual_status("FMPP1", "out_for_delivery")
        clock.advance(seconds=300)

        result = orchestrator.get_live_status("FMPP1")
        assert result.stage is DeliveryStage.DELIVERED
        assert result.is_manual is False

    def test_override_replaces_a_cached_result(self, orchestrator, carrier):
        carrier.set_report("FMPP1", "In Transit")
        orchestrator.get_live_status("FMPP1")
        orchestrator.set_manual_status("FMPP1", "delivered")
        assert orchestrator.get_live_status("FMPP1").stage is DeliveryStage.DELIVERED

    def test_cancelled_override_sets_flag(self, orchestrator):
        result = orchestrator.set_cancelled("1001")
        assert result.stage is DeliveryStage.CANCELLED
        assert result.is_cancelled is True

    def test_unknown_stage_is_rejected(self, orchestrator):
        with pytest.raises(ValueError):
            orchestrator.set_manual_status("FMPP1", "teleported")

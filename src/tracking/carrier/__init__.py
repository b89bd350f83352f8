"""Carrier tracker registry: pluggable live carrier integration."""

from shared.config import get_settings
from tracking.carrier.port import CarrierTrackingPort

_tracker_instance: CarrierTrackingPort | None = None


def get_carrier_tracker() -> CarrierTrackingPort:
    """Return the configured carrier tracker (singleton).

    Uses FakeCarrierTracker by default; CARRIER_ADAPTER=ekart selects the
    live Ekart integration.
    """
    global _tracker_instance
    if _tracker_instance is None:
        adapter = get_settings().adapter("carrier")
        if adapter == "fake":
            from tracking.carrier.fake_adapter import FakeCarrierTracker

            _tracker_instance = FakeCarrierTracker()
        elif adapter == "ekart":
            from tracking.carrier.ekart import EkartTracker

            _tracker_instance = EkartTracker()
        else:
            raise ValueError(f"Unknown carrier adapter: {adapter}")
    return _tracker_instance


def set_carrier_tracker(tracker: CarrierTrackingPort) -> None:
    global _tracker_instance
    _tracker_instance = tracker


def reset_carrier_tracker():
    """Reset the carrier singleton (useful for testing)."""
    global _tracker_instance
    _tracker_instance = None

"""Fake carrier tracker: deterministic reports for testing and development."""

from tracking.carrier.detection import Carrier
from tracking.carrier.port import CarrierReport, CarrierTrackingPort


class FakeCarrierTracker(CarrierTrackingPort):
    """Answers only for tracking numbers it has been given reports for."""

    def __init__(self) -> None:
        self.reports: dict[str, CarrierReport] = {}
        self.calls: list[dict] = []

    def set_report(self, tracking_number: str, current_status: str, status_details: str = "", **extra) -> None:
        self.reports[tracking_number] = CarrierReport(
            current_status=current_status,
            status_details=status_details,
            **extra,
        )

    def remove_report(self, tracking_number: str) -> None:
        self.reports.pop(tracking_number, None)

    def fetch(self, tracking_number: str, carrier: Carrier) -> CarrierReport | None:
        self.calls.append({"tracking_number": tracking_number, "carrier": carrier.value})
        return self.reports.get(tracking_number)

"""Ekart live tracking adapter.

Only Ekart exposes a public endpoint we can poll; every other carrier
yields None so the orchestrator falls back to the platform's status.
"""

import requests
import structlog

from tracking.carrier.detection import Carrier
from tracking.carrier.port import CarrierReport, CarrierTrackingPort

logger = structlog.get_logger(__name__)

EKART_TRACKING_URL = "https://ekartlogistics.com/ws/getTrackingDetails"


class EkartTracker(CarrierTrackingPort):
    def __init__(self, timeout: int = 10) -> None:
        self.timeout = timeout

    def fetch(self, tracking_number: str, carrier: Carrier) -> CarrierReport | None:
        if carrier is not Carrier.EKART:
            return None

        try:
            response = requests.get(
                EKART_TRACKING_URL,
                params={"trackingId": tracking_number},
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.info("Ekart tracking not reachable", tracking_number=tracking_number, error=str(exc))
            return None

        if not response.ok:
            logger.info("Ekart tracking unavailable", tracking_number=tracking_number, status=response.status_code)
            return None

        try:
            data = response.json()
        except ValueError:
            logger.info("Ekart tracking returned non-JSON", tracking_number=tracking_number)
            return None

        if not data or not data.get("currentStatus"):
            return None

        return CarrierReport(
            current_status=data["currentStatus"],
            status_details=data.get("statusDetails") or "",
            last_update=data.get("lastUpdate"),
            current_location=data.get("currentLocation") or "",
            delivery_date=data.get("deliveryDate"),
            events=list(data.get("events") or []),
        )

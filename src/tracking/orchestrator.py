"""Delivery Tracking Orchestrator.

Resolves the delivery stage for a tracking number by layering, in order:
a fresh cache entry (live result, manual override or cancellation mark),
a live carrier lookup, and finally the platform's own fulfillment status.
Results from that last step are flagged ``is_fallback`` and never cached.

Cancellation requests are recorded first, then the order is marked
Cancelled in the cache, then the seller is notified. Notification is best
effort; the recorded request stands whether or not it goes out.
"""

from dataclasses import dataclass, field

import structlog

from notifications.seller import NotificationOutcome, SellerNotifier
from orders.admin import get_admin
from orders.admin.port import AdminPort
from orders.order.order import Order
from shared.clock import Clock, system_clock
from shared.config import Settings, get_settings
from shared.errors import StorefrontError, retry_once
from shared.store import get_store
from shared.store.port import KeyValueStore
from tracking.cache.cache import TrackingCache
from tracking.cache.records import TrackingEvent, TrackingResult
from tracking.cancellation.request import CancellationLedger, CancellationRequest
from tracking.carrier import get_carrier_tracker
from tracking.carrier.detection import Carrier, carrier_tracking_url, detect_carrier
from tracking.carrier.port import CarrierTrackingPort
from tracking.status.normalizer import is_order_cancelled, normalize_platform_status, normalize_status
from tracking.status.stage import DeliveryStage

logger = structlog.get_logger(__name__)

_UNFULFILLED = ("", "unfulfilled", "pending")


@dataclass(frozen=True)
class CancellationReceipt:
    request: CancellationRequest
    notification: NotificationOutcome | None


@dataclass(frozen=True)
class FulfillmentTracking:
    fulfillment_id: str
    tracking_number: str | None
    carrier: str
    tracking_url: str | None
    stage: DeliveryStage
    result: TrackingResult | None = None

    def to_dict(self) -> dict:
        return {
            "fulfillment_id": self.fulfillment_id,
            "tracking_number": self.tracking_number,
            "carrier": self.carrier,
            "tracking_url": self.tracking_url,
            "status": self.stage.to_dict(),
            "result": self.result.to_dict() if self.result else None,
        }


@dataclass(frozen=True)
class OrderTracking:
    order_id: str
    order_number: str
    stage: DeliveryStage
    financial_status: str | None = None
    fulfillment_status: str | None = None
    cancellation_request: dict | None = None
    fulfillments: list[FulfillmentTracking] = field(default_factory=list)

    @property
    def is_cancelled(self) -> bool:
        return self.stage is DeliveryStage.CANCELLED

    @property
    def is_delivered(self) -> bool:
        return self.stage is DeliveryStage.DELIVERED

    def to_dict(self) -> dict:
        return {
            "order_id": self.order_id,
            "order_number": self.order_number,
            "status": self.stage.to_dict(),
            "financial_status": self.financial_status,
            "fulfillment_status": self.fulfillment_status,
            "is_cancelled": self.is_cancelled,
            "cancellation_request": self.cancellation_request,
            "fulfillments": [f.to_dict() for f in self.fulfillments],
        }


def _as_stage(stage) -> DeliveryStage:
    return stage if isinstance(stage, DeliveryStage) else DeliveryStage.from_status(stage)


class DeliveryTrackingOrchestrator:
    def __init__(
        self,
        carrier: CarrierTrackingPort | None = None,
        store: KeyValueStore | None = None,
        clock: Clock | None = None,
        notifier: SellerNotifier | None = None,
        admin: AdminPort | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.clock = clock or system_clock
        self.carrier = carrier or get_carrier_tracker()
        store = store or get_store()
        self.cache = TrackingCache(store, self.clock, ttl=self.settings.tracking_cache_ttl)
        self.ledger = CancellationLedger(store)
        self._notifier = notifier
        self._admin = admin

    @property
    def notifier(self) -> SellerNotifier:
        if self._notifier is None:
            self._notifier = SellerNotifier(settings=self.settings, clock=self.clock)
        return self._notifier

    @property
    def admin(self) -> AdminPort:
        if self._admin is None:
            self._admin = get_admin()
        return self._admin

    def _now(self) -> str:
        return self.clock.now().isoformat()

    # ------------------------------------------------------------------
    # Live status
    # ------------------------------------------------------------------
    def get_live_status(
        self,
        tracking_number: str,
        carrier_hint: str | None = None,
        fallback_status: str | None = "",
    ) -> TrackingResult:
        carrier = detect_carrier(carrier_hint, tracking_number)

        cached = self.cache.get(tracking_number)
        if cached is not None:
            logger.debug("Using cached tracking data", tracking_number=tracking_number)
            return cached

        missed_at = self.cache.recent_miss(tracking_number)
        if missed_at is None:
            result = self._lookup(tracking_number, carrier)
            if result is not None:
                self.cache.put(tracking_number, result)
                return result
            missed_at = self._now()
            self.cache.remember_miss(tracking_number, missed_at)

        return TrackingResult(
            success=False,
            carrier=carrier.value,
            tracking_number=tracking_number,
            stage=normalize_platform_status(fallback_status),
            last_update=missed_at,
            is_fallback=True,
        )

    def _lookup(self, tracking_number: str, carrier: Carrier) -> TrackingResult | None:
        try:
            report = self.carrier.fetch(tracking_number, carrier)
        except StorefrontError as exc:
            logger.info("Carrier lookup failed", tracking_number=tracking_number, carrier=carrier.value, error=str(exc))
            return None
        if report is None:
            return None

        stage = normalize_status(report.current_status, report.status_details)
        logger.info(
            "Live tracking status",
            tracking_number=tracking_number,
            carrier=carrier.value,
            raw_status=report.current_status,
            stage=stage.status,
        )
        return TrackingResult(
            success=True,
            carrier=carrier.value,
            tracking_number=tracking_number,
            stage=stage,
            last_update=report.last_update or self._now(),
            location=report.current_location,
            delivery_date=report.delivery_date,
            events=[TrackingEvent.from_carrier(event) for event in report.events],
        )

    # ------------------------------------------------------------------
    # Overrides
    # ------------------------------------------------------------------
    def set_manual_status(self, tracking_number: str, stage) -> TrackingResult:
        stage = _as_stage(stage)
        result = TrackingResult(
            success=True,
            carrier=Carrier.MANUAL.value,
            tracking_number=tracking_number,
            stage=stage,
            last_update=self._now(),
            is_manual=True,
            is_cancelled=stage is DeliveryStage.CANCELLED,
        )
        self.cache.put(tracking_number, result)
        logger.info("Tracking status set manually", tracking_number=tracking_number, stage=stage.status)
        return result

    def set_cancelled(self, identifier: str) -> TrackingResult:
        return self.set_manual_status(identifier, DeliveryStage.CANCELLED)

    def clear(self, tracking_number: str) -> None:
        self.cache.clear(tracking_number)

    # ------------------------------------------------------------------
    # Cancellation
    # ------------------------------------------------------------------
    def get_cancellation_request(self, order_id: str) -> dict | None:
        return self.ledger.get(order_id)

    def _record_cancellation(self, order_id: str, order_number, reason: str) -> CancellationRequest:
        request = CancellationRequest.submit(order_id, order_number, reason, requested_at=self.clock.now())
        self.ledger.record(request)
        logger.info("Cancellation requested", order_id=request.order_id, order_number=request.order_number)
        return request

    def request_cancellation(
        self,
        order_id: str,
        order_number,
        reason: str = "",
        details: dict | None = None,
    ) -> bool:
        """Run the full cancellation workflow; False when the ledger cannot be written."""
        try:
            self.submit_cancellation(order_id, order_number, reason, details)
        except OSError as exc:
            logger.error("Failed to store cancellation request", order_id=order_id, error=str(exc))
            return False
        return True

    def submit_cancellation(
        self,
        order_id: str,
        order_number,
        reason: str = "",
        details: dict | None = None,
    ) -> CancellationReceipt:
        """Record the request, mark the order Cancelled and tell the seller."""
        request = self._record_cancellation(order_id, order_number, reason)
        self.set_cancelled(request.order_id)

        try:
            notification = self.notifier.notify_cancellation(
                {
                    **(details or {}),
                    "order_number": request.order_number,
                    "reason": request.reason,
                }
            )
        except StorefrontError as exc:
            logger.warning("Cancellation notification failed", order_id=request.order_id, error=str(exc))
            notification = NotificationOutcome(success=False, method="api", error=str(exc))
        return CancellationReceipt(request=request, notification=notification)

    # ------------------------------------------------------------------
    # Orders
    # ------------------------------------------------------------------
    def track_order(self, order_id: str) -> OrderTracking | None:
        """Pull the order from the platform and resolve every fulfillment's stage."""
        data = retry_once(lambda: self.admin.fetch_order(order_id), operation_name="fetch_order")
        if data is None:
            return None
        order = Order.from_admin(data)

        fulfillments = []
        for fulfillment in order.fulfillments:
            company = fulfillment.tracking_company
            number = fulfillment.tracking_number
            if number:
                result = self.get_live_status(number, company, fulfillment.shipment_status or order.fulfillment_status)
                stage = result.stage
            else:
                result = None
                stage = normalize_platform_status(fulfillment.shipment_status or order.fulfillment_status)
            fulfillments.append(
                FulfillmentTracking(
                    fulfillment_id=fulfillment.id,
                    tracking_number=number,
                    carrier=detect_carrier(company, number or "").value,
                    tracking_url=fulfillment.tracking_url or (carrier_tracking_url(number, company) if number else None),
                    stage=stage,
                    result=result,
                )
            )

        request = self.ledger.get(order.id)
        if request is not None or self._is_cancelled(order):
            stage = DeliveryStage.CANCELLED
        elif fulfillments:
            stage = fulfillments[0].stage
            for entry in fulfillments[1:]:
                if entry.stage.is_further_than(stage):
                    stage = entry.stage
        elif (order.fulfillment_status or "").lower() in _UNFULFILLED:
            stage = DeliveryStage.ORDERED
        else:
            stage = normalize_platform_status(order.fulfillment_status)

        return OrderTracking(
            order_id=order.id,
            order_number=order.display_number,
            stage=stage,
            financial_status=order.financial_status,
            fulfillment_status=order.fulfillment_status,
            cancellation_request=request,
            fulfillments=fulfillments,
        )

    def _is_cancelled(self, order: Order) -> bool:
        if order.cancelled_at or is_order_cancelled(order.fulfillment_status, order.financial_status):
            return True
        for key in (order.id, order.display_number, order.name):
            mark = self.cache.get(key) if key else None
            if mark is not None and mark.is_cancelled:
                return True
        return False


_orchestrator: DeliveryTrackingOrchestrator | None = None


def get_tracking_orchestrator() -> DeliveryTrackingOrchestrator:
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = DeliveryTrackingOrchestrator()
    return _orchestrator


def set_tracking_orchestrator(orchestrator: DeliveryTrackingOrchestrator) -> None:
    global _orchestrator
    _orchestrator = orchestrator


def reset_tracking_orchestrator() -> None:
    global _orchestrator
    _orchestrator = None

"""Carrier Status Normalizer.

Raw carrier strings are classified by an ordered list of rules, first
match wins. Anything mentioning "delivered" is Delivered, "undelivered"
included, so the Failed rule only sees what the earlier rules let
through. Unrecognised text falls to Processing.
"""

from collections.abc import Callable

from tracking.status.stage import DeliveryStage

Predicate = Callable[[str, str], bool]


def _contains(*phrases: str) -> Predicate:
    def predicate(status: str, combined: str) -> bool:
        return any(phrase in combined for phrase in phrases)

    return predicate


def _either(*predicates: Predicate) -> Predicate:
    def predicate(status: str, combined: str) -> bool:
        return any(p(status, combined) for p in predicates)

    return predicate


def _status_is(*codes: str) -> Predicate:
    def predicate(status: str, combined: str) -> bool:
        return status in codes

    return predicate


STATUS_RULES: list[tuple[DeliveryStage, Predicate]] = [
    (
        DeliveryStage.DELIVERED,
        _either(
            _contains("delivered", "dlvd", "received by", "handed over"),
            _status_is("dl", "pod"),
        ),
    ),
    (
        DeliveryStage.OUT_FOR_DELIVERY,
        _contains(
            "out for delivery",
            "ofd",
            "out-for-delivery",
            "with delivery boy",
            "dispatched to customer",
            "on vehicle for delivery",
        ),
    ),
    (
        DeliveryStage.IN_TRANSIT,
        _contains(
            "in transit",
            "in-transit",
            "reached",
            "arrived",
            "departed",
            "forwarded",
            "hub",
            "received at",
            "facility",
        ),
    ),
    (
        DeliveryStage.SHIPPED,
        _contains("shipped", "picked up", "pickup", "manifested", "dispatched", "shipment created"),
    ),
    (
        DeliveryStage.FAILED,
        _contains("failed", "undelivered", "refused", "not delivered", "delivery attempt"),
    ),
    (
        DeliveryStage.RTO,
        _contains("rto", "return to origin", "returning", "cancelled"),
    ),
]


def normalize_status(raw_status: str | None, raw_details: str | None = "") -> DeliveryStage:
    """Classify a carrier status (and its free-text details) into a DeliveryStage."""
    status = (raw_status or "").strip().lower()
    details = (raw_details or "").strip().lower()
    combined = f"{status} {details}"
    for stage, predicate in STATUS_RULES:
        if predicate(status, combined):
            return stage
    return DeliveryStage.PROCESSING


_PLATFORM_STATUS = {
    "delivered": DeliveryStage.DELIVERED,
    "complete": DeliveryStage.DELIVERED,
    "completed": DeliveryStage.DELIVERED,
    "out_for_delivery": DeliveryStage.OUT_FOR_DELIVERY,
    "out for delivery": DeliveryStage.OUT_FOR_DELIVERY,
    "in_transit": DeliveryStage.IN_TRANSIT,
    "fulfilled": DeliveryStage.SHIPPED,
    "shipped": DeliveryStage.SHIPPED,
    "in_progress": DeliveryStage.PROCESSING,
    "partial": DeliveryStage.PROCESSING,
}


def normalize_platform_status(status: str | None) -> DeliveryStage:
    """Stage implied by the platform's own fulfillment or shipment status."""
    return _PLATFORM_STATUS.get((status or "").strip().lower(), DeliveryStage.PROCESSING)


def _stage_of(result) -> DeliveryStage | None:
    return getattr(result, "stage", None) if result is not None else None


def is_order_delivered(fulfillment_status: str | None, result=None) -> bool:
    if _stage_of(result) is DeliveryStage.DELIVERED:
        return True
    return (fulfillment_status or "").lower() in ("delivered", "complete", "completed")


def is_order_out_for_delivery(fulfillment_status: str | None, result=None) -> bool:
    if _stage_of(result) is DeliveryStage.OUT_FOR_DELIVERY:
        return True
    return (fulfillment_status or "").lower() in ("out_for_delivery", "out for delivery", "in_transit")


def is_order_cancelled(fulfillment_status: str | None, financial_status: str | None, result=None) -> bool:
    if _stage_of(result) is DeliveryStage.CANCELLED:
        return True
    fulfillment = (fulfillment_status or "").lower()
    financial = (financial_status or "").lower()
    return fulfillment in ("cancelled", "canceled", "restocked") or financial in ("refunded", "voided")


def delivery_stage_from_status(fulfillment_status: str | None, result=None) -> int:
    """Rank of a live result when there is one, else of the platform status."""
    stage = _stage_of(result)
    if stage is not None:
        return stage.rank
    return normalize_platform_status(fulfillment_status).rank

"""FastAPI routes for the Tracking domain.

Handlers are plain functions: their adapters block on HTTP, so FastAPI
runs them in its threadpool.
"""

from fastapi import APIRouter, HTTPException
from protean.utils.globals import current_domain

from tracking.api.schemas import (
    CancellationRequestBody,
    CancellationRequestSchema,
    CancellationResponse,
    CarrierResponse,
    ManualStatusRequest,
    OrderTrackingResponse,
    StatusResponse,
    TrackingResultResponse,
)
from tracking.carrier.detection import carrier_tracking_url, detect_carrier
from tracking.commands import MarkOrderCancelled, RequestCancellation, SetManualTrackingStatus
from tracking.orchestrator import get_tracking_orchestrator

router = APIRouter(prefix="/tracking", tags=["tracking"])


@router.get("/shipments/{tracking_number}", response_model=TrackingResultResponse)
def get_live_status(
    tracking_number: str,
    carrier: str | None = None,
    fallback_status: str = "",
) -> TrackingResultResponse:
    """Live status for a shipment, from cache, carrier or platform fallback."""
    result = get_tracking_orchestrator().get_live_status(tracking_number, carrier, fallback_status)
    return TrackingResultResponse.model_validate(result.to_dict())


@router.put("/shipments/{tracking_number}/status", response_model=TrackingResultResponse)
def set_manual_status(tracking_number: str, body: ManualStatusRequest) -> TrackingResultResponse:
    command = SetManualTrackingStatus(tracking_number=tracking_number, status=body.status)
    result = current_domain.process(command, asynchronous=False)
    return TrackingResultResponse.model_validate(result.to_dict())


@router.delete("/shipments/{tracking_number}/cache", response_model=StatusResponse)
def clear_cache(tracking_number: str) -> StatusResponse:
    get_tracking_orchestrator().clear(tracking_number)
    return StatusResponse(status="cleared")


@router.get("/carriers/detect", response_model=CarrierResponse)
def detect(company: str | None = None, tracking_number: str = "") -> CarrierResponse:
    return CarrierResponse(
        carrier=detect_carrier(company, tracking_number).value,
        tracking_url=carrier_tracking_url(tracking_number, company) if tracking_number else None,
    )


@router.get("/orders/{order_id}", response_model=OrderTrackingResponse)
def track_order(order_id: str) -> OrderTrackingResponse:
    """Delivery stage of an order and each of its fulfillments."""
    tracking = get_tracking_orchestrator().track_order(order_id)
    if tracking is None:
        raise HTTPException(status_code=404, detail=f"Order {order_id} not found")
    return OrderTrackingResponse.model_validate(tracking.to_dict())


@router.put("/orders/{identifier}/cancelled", response_model=TrackingResultResponse)
def mark_cancelled(identifier: str) -> TrackingResultResponse:
    result = current_domain.process(MarkOrderCancelled(identifier=identifier), asynchronous=False)
    return TrackingResultResponse.model_validate(result.to_dict())


@router.post("/orders/{order_id}/cancellation-request", status_code=201, response_model=CancellationResponse)
def request_cancellation(order_id: str, body: CancellationRequestBody) -> CancellationResponse:
    """Record a cancellation request. The seller is notified on a best-effort basis."""
    command = RequestCancellation(
        order_id=order_id,
        order_number=body.order_number,
        reason=body.reason,
        customer_name=body.customer_name,
        customer_email=body.customer_email,
        order_total=body.order_total,
        shipping_address=body.shipping_address,
    )
    receipt = current_domain.process(command, asynchronous=False)
    notification = receipt.notification
    return CancellationResponse(
        recorded=True,
        request=CancellationRequestSchema.model_validate(receipt.request.to_ledger_entry()),
        notification_method=notification.method if notification else None,
        mailto_link=notification.link if notification else None,
    )


@router.get("/orders/{order_id}/cancellation-request", response_model=CancellationRequestSchema)
def get_cancellation_request(order_id: str) -> CancellationRequestSchema:
    request = get_tracking_orchestrator().get_cancellation_request(order_id)
    if request is None:
        raise HTTPException(status_code=404, detail=f"No cancellation request for order {order_id}")
    return CancellationRequestSchema.model_validate(request)

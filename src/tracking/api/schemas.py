"""Pydantic API schemas for the Tracking domain.

These are the external API contracts, separate from domain commands.
"""

from pydantic import BaseModel


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------
class ManualStatusRequest(BaseModel):
    status: str


class CancellationRequestBody(BaseModel):
    order_number: str
    reason: str = ""
    customer_name: str | None = None
    customer_email: str | None = None
    order_total: str | None = None
    shipping_address: str | None = None


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------
class StageSchema(BaseModel):
    status: str
    stage: int
    label: str


class TrackingEventSchema(BaseModel):
    status: str
    location: str = ""
    time: str | None = None


class TrackingResultResponse(BaseModel):
    success: bool
    carrier: str
    tracking_number: str
    status: StageSchema
    last_update: str
    location: str = ""
    delivery_date: str | None = None
    events: list[TrackingEventSchema] = []
    is_fallback: bool = False
    is_manual: bool = False
    is_cancelled: bool = False


class FulfillmentTrackingSchema(BaseModel):
    fulfillment_id: str
    tracking_number: str | None = None
    carrier: str
    tracking_url: str | None = None
    status: StageSchema
    result: TrackingResultResponse | None = None


class CancellationRequestSchema(BaseModel):
    order_id: str
    order_number: str
    reason: str = ""
    requested_at: str
    status: str


class OrderTrackingResponse(BaseModel):
    order_id: str
    order_number: str
    status: StageSchema
    financial_status: str | None = None
    fulfillment_status: str | None = None
    is_cancelled: bool
    cancellation_request: CancellationRequestSchema | None = None
    fulfillments: list[FulfillmentTrackingSchema] = []


class CancellationResponse(BaseModel):
    recorded: bool
    request: CancellationRequestSchema
    notification_method: str | None = None
    mailto_link: str | None = None


class CarrierResponse(BaseModel):
    carrier: str
    tracking_url: str | None = None


class StatusResponse(BaseModel):
    status: str

"""FastAPI routes for the Orders domain.

Handlers are plain functions: their adapters block on HTTP, so FastAPI
runs them in its threadpool.
"""

from dataclasses import asdict

from fastapi import APIRouter, HTTPException

from checkout.session.contact import validate_contact
from orders.admin import get_admin
from orders.api.schemas import (
    FulfillmentSchema,
    OrderDetailResponse,
    OrderSummaryResponse,
    SubmitOrderRequest,
)
from orders.order.order import Order
from orders.submission.placement import OrderPlacement
from orders.submission.service import OrderFulfillmentService
from payments.intent.intent import PaymentProof

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("", status_code=201, response_model=OrderSummaryResponse)
def submit_order(body: SubmitOrderRequest) -> OrderSummaryResponse:
    """Record a paid order. Without ``cart_items`` the open checkout is used."""
    proof = PaymentProof(
        payment_id=body.razorpay_payment_id,
        intent_id=body.razorpay_order_id,
        signature=body.razorpay_signature,
    )
    contact = validate_contact(body.email, body.phone, require_phone=False)
    address = body.shipping_address.model_dump()

    if body.cart_items is None:
        result = OrderPlacement().complete(proof, address, contact, amount=body.total_amount)
    else:
        result = OrderFulfillmentService().submit_order(
            body.cart_items, proof, address, contact, amount=body.total_amount
        )

    summary = result.unwrap()
    return OrderSummaryResponse(
        order_id=summary.order_id,
        name=summary.name,
        order_number=summary.order_number,
        total_price=summary.total_price,
        currency=summary.currency,
        financial_status=summary.financial_status,
        order_status_url=summary.order_status_url,
        replayed=summary.replayed,
    )


@router.get("/{order_id}", response_model=OrderDetailResponse)
def get_order(order_id: str) -> OrderDetailResponse:
    data = get_admin().fetch_order(order_id)
    if data is None:
        raise HTTPException(status_code=404, detail="Order not found")
    order = Order.from_admin(data)
    return OrderDetailResponse(
        id=order.id,
        name=order.name,
        order_number=order.order_number,
        financial_status=order.financial_status,
        fulfillment_status=order.fulfillment_status,
        cancelled_at=order.cancelled_at,
        total_price=order.total_price,
        currency=order.currency,
        fulfillments=[
            FulfillmentSchema(**{k: v for k, v in asdict(f).items() if k in FulfillmentSchema.model_fields})
            for f in order.fulfillments
        ],
    )

"""Pydantic request/response schemas for the Orders API.

These are external contracts (anti-corruption layer), separate from
internal domain records.
"""

from pydantic import BaseModel


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class ShippingAddressSchema(BaseModel):
    first_name: str = ""
    last_name: str = ""
    address1: str = ""
    address2: str = ""
    city: str = ""
    province: str = ""
    zip: str = ""
    country: str = "India"
    phone: str = ""


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class SubmitOrderRequest(BaseModel):
    razorpay_payment_id: str
    razorpay_order_id: str | None = None
    razorpay_signature: str | None = None
    cart_items: list[dict] | None = None
    shipping_address: ShippingAddressSchema
    email: str
    phone: str | None = None
    total_amount: float | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "razorpay_payment_id": "pay_29QQoUBi66xm2f",
                    "razorpay_order_id": "order_9A33XWu170gUtm",
                    "razorpay_signature": "9ef4dffbfd84f1318f6739a3ce19f9d85851857ae648f114332d8401e0949a3d",
                    "shipping_address": {
                        "first_name": "Asha",
                        "last_name": "Rao",
                        "address1": "12 MG Road",
                        "city": "Mumbai",
                        "province": "Maharashtra",
                        "zip": "400001",
                    },
                    "email": "asha@example.com",
                    "phone": "9876543210",
                    "total_amount": 4998.0,
                }
            ]
        }
    }


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class OrderSummaryResponse(BaseModel):
    success: bool = True
    order_id: str
    name: str
    order_number: int | None = None
    total_price: str | None = None
    currency: str | None = None
    financial_status: str | None = None
    order_status_url: str | None = None
    replayed: bool = False


class FulfillmentSchema(BaseModel):
    id: str
    status: str | None = None
    shipment_status: str | None = None
    tracking_company: str | None = None
    tracking_number: str | None = None
    tracking_url: str | None = None


class OrderDetailResponse(BaseModel):
    id: str
    name: str
    order_number: int | None = None
    financial_status: str | None = None
    fulfillment_status: str | None = None
    cancelled_at: str | None = None
    total_price: str | None = None
    currency: str | None = None
    fulfillments: list[FulfillmentSchema] = []

"""Pydantic request/response schemas for the Payments API.

These are external contracts (anti-corruption layer), separate from
internal Protean commands.
"""

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class PrefillSchema(BaseModel):
    name: str = ""
    email: str = ""
    contact: str = ""


class CreateIntentRequest(BaseModel):
    amount: int = Field(gt=0, description="Amount in minor units (paise)")
    currency: str = "INR"
    receipt: str | None = Field(default=None, max_length=40)
    prefill: PrefillSchema = PrefillSchema()
    notes: dict[str, str] = {}

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "amount": 499800,
                    "currency": "INR",
                    "prefill": {"name": "Asha Rao", "email": "asha@example.com", "contact": "9876543210"},
                }
            ]
        }
    }


class PaymentSuccessRequest(BaseModel):
    razorpay_payment_id: str
    razorpay_order_id: str | None = None
    razorpay_signature: str | None = None


class PaymentFailureRequest(BaseModel):
    code: str | None = None
    description: str | None = None
    payment_id: str | None = None


class VerifySignatureRequest(BaseModel):
    razorpay_order_id: str
    razorpay_payment_id: str
    razorpay_signature: str


class ConfigureGatewayRequest(BaseModel):
    should_succeed: bool = True
    failure_reason: str = "Order creation declined"
    reachable: bool = True


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class IntentResponse(BaseModel):
    intent_id: str
    gateway_order_id: str | None = None
    amount: int
    currency: str
    receipt: str
    sandbox: bool
    checkout_options: dict


class CaptureResponse(BaseModel):
    intent_id: str
    status: str
    payment_id: str
    signature: str


class VerifySignatureResponse(BaseModel):
    status: str
    verified: bool


class StatusResponse(BaseModel):
    status: str


class GatewayConfigResponse(BaseModel):
    gateway: str
    should_succeed: bool
    failure_reason: str
    reachable: bool

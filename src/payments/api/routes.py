"""FastAPI routes for the Payments domain: intents and proof verification."""

import os

from fastapi import APIRouter, HTTPException
from protean.utils.globals import current_domain

from payments.api.schemas import (
    CaptureResponse,
    ConfigureGatewayRequest,
    CreateIntentRequest,
    GatewayConfigResponse,
    IntentResponse,
    PaymentFailureRequest,
    PaymentSuccessRequest,
    StatusResponse,
    VerifySignatureRequest,
    VerifySignatureResponse,
)
from payments.gateway import get_gateway
from payments.gateway.fake_adapter import FakeGateway
from payments.handshake.coordinator import CheckoutHandle, PaymentHandshakeCoordinator
from payments.handshake.signature import SignatureCheck, check_signature
from payments.intent.intent import PaymentIntent, PaymentProof
from shared.config import get_settings
from shared.errors import SignatureError

router = APIRouter(prefix="/payments", tags=["payments"])


def _noop(*args) -> None:
    return None


@router.post("/intents", status_code=201, response_model=IntentResponse)
def create_intent(body: CreateIntentRequest) -> IntentResponse:
    """Create a payment intent and the options for the gateway's client checkout."""
    coordinator = PaymentHandshakeCoordinator()
    intent = coordinator.create_payment_intent(body.amount, body.currency, body.receipt, body.notes or None)
    handle = coordinator.open_gateway_checkout(intent, body.prefill.model_dump(), _noop, _noop, notes=body.notes)
    return IntentResponse(
        intent_id=str(intent.id),
        gateway_order_id=intent.gateway_order_id,
        amount=intent.amount,
        currency=intent.currency,
        receipt=intent.receipt,
        sandbox=intent.sandbox,
        checkout_options=handle.options,
    )


@router.post("/intents/{intent_id}/success", response_model=CaptureResponse)
async def record_success(intent_id: str, body: PaymentSuccessRequest) -> CaptureResponse:
    """Record the gateway's success callback after checking its signature."""
    intent = current_domain.repository_for(PaymentIntent).get(intent_id)
    coordinator = PaymentHandshakeCoordinator()
    response = body.model_dump()
    if intent.gateway_order_id:
        # The signature must cover the order this intent was issued for
        response["razorpay_order_id"] = intent.gateway_order_id
        if not response.get("razorpay_signature"):
            raise SignatureError("Payment signature missing", payment_id=body.razorpay_payment_id)

    proof = PaymentProof.from_gateway_response(response)
    check = coordinator.check_proof(proof)
    if check is SignatureCheck.INVALID:
        raise SignatureError("Payment signature mismatch", payment_id=proof.payment_id)

    CheckoutHandle(coordinator, intent, {}, _noop, _noop).complete(response)
    return CaptureResponse(
        intent_id=intent_id,
        status=intent.status,
        payment_id=proof.payment_id,
        signature=check.value,
    )


@router.post("/intents/{intent_id}/failure", response_model=StatusResponse)
async def record_failure(intent_id: str, body: PaymentFailureRequest) -> StatusResponse:
    """Record a gateway-reported failure. The cart is left untouched."""
    intent = current_domain.repository_for(PaymentIntent).get(intent_id)
    handle = CheckoutHandle(PaymentHandshakeCoordinator(), intent, {}, _noop, _noop)
    error = handle.fail(
        {
            "code": body.code,
            "description": body.description,
            "metadata": {"payment_id": body.payment_id},
        }
    )
    return StatusResponse(status=error.message)


@router.post("/verify", response_model=VerifySignatureResponse)
async def verify_payment(body: VerifySignatureRequest) -> VerifySignatureResponse:
    check = check_signature(
        body.razorpay_order_id,
        body.razorpay_payment_id,
        body.razorpay_signature,
        get_settings().razorpay_key_secret,
    )
    if check is SignatureCheck.INVALID:
        raise SignatureError("Payment signature mismatch", payment_id=body.razorpay_payment_id)
    return VerifySignatureResponse(status=check.value, verified=check is SignatureCheck.VERIFIED)


@router.post("/gateway/configure", response_model=GatewayConfigResponse)
async def configure_gateway(body: ConfigureGatewayRequest) -> GatewayConfigResponse:
    """Configure the FakeGateway behavior (non-production only).

    This endpoint is only available when PROTEAN_ENV is not 'production'.
    """
    if os.environ.get("PROTEAN_ENV") == "production":
        raise HTTPException(status_code=403, detail="Gateway configuration not available in production")

    gateway = get_gateway()
    if not isinstance(gateway, FakeGateway):
        raise HTTPException(status_code=400, detail="Gateway configuration only available for FakeGateway")

    gateway.configure(
        should_succeed=body.should_succeed,
        failure_reason=body.failure_reason,
        reachable=body.reachable,
    )
    return GatewayConfigResponse(
        gateway=type(gateway).__name__,
        should_succeed=gateway.should_succeed,
        failure_reason=gateway.failure_reason,
        reachable=gateway.reachable,
    )

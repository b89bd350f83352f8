"""PaymentIntent aggregate: one attempt to collect payment for a cart.

State Machine:
    CREATED → CAPTURED (terminal)
    CREATED → FAILED → CAPTURED (the buyer may retry inside the same modal)

A sandbox intent has no gateway order id. It exists only while the gateway
runs with a test key and its proof cannot be signature-checked.
"""

import secrets
import string
from datetime import datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Integer, String, ValueObject

from payments.domain import payments
from payments.intent.events import PaymentCaptured, PaymentFailed, PaymentIntentCreated

_RECEIPT_ALPHABET = string.ascii_lowercase + string.digits


class IntentStatus(Enum):
    CREATED = "Created"
    CAPTURED = "Captured"
    FAILED = "Failed"


def generate_receipt(timestamp_ms: int) -> str:
    """``rcpt_<epoch-ms>_<random>``, unique per payment attempt."""
    suffix = "".join(secrets.choice(_RECEIPT_ALPHABET) for _ in range(7))
    return f"rcpt_{timestamp_ms}_{suffix}"


@payments.value_object(part_of="PaymentIntent")
class PaymentProof:
    """The triple the gateway hands back on success."""

    payment_id = String(required=True, max_length=255)
    intent_id = String(max_length=255)
    signature = String(max_length=255)

    @classmethod
    def from_gateway_response(cls, response: dict) -> "PaymentProof":
        return cls(
            payment_id=response.get("razorpay_payment_id") or response.get("payment_id"),
            intent_id=response.get("razorpay_order_id") or response.get("order_id") or None,
            signature=response.get("razorpay_signature") or response.get("signature") or None,
        )


@payments.aggregate
class PaymentIntent:
    gateway_order_id = String(max_length=255)
    amount = Integer(required=True, min_value=1)  # minor units (paise)
    currency = String(max_length=3, default="INR")
    receipt = String(required=True, max_length=40)
    sandbox = Boolean(default=False)
    status = String(max_length=20, choices=IntentStatus, default=IntentStatus.CREATED.value)
    proof = ValueObject(PaymentProof)
    failure_reason = String(max_length=500)
    created_at = DateTime()

    @classmethod
    def create(
        cls,
        amount: int,
        currency: str,
        receipt: str,
        created_at: datetime,
        gateway_order_id: str | None = None,
    ) -> "PaymentIntent":
        intent = cls(
            gateway_order_id=gateway_order_id,
            amount=amount,
            currency=currency,
            receipt=receipt,
            sandbox=gateway_order_id is None,
            created_at=created_at,
        )
        intent.raise_(
            PaymentIntentCreated(
                intent_id=str(intent.id),
                receipt=receipt,
                amount=amount,
                currency=currency,
                gateway_order_id=gateway_order_id,
                sandbox=intent.sandbox,
                created_at=created_at,
            )
        )
        return intent

    @property
    def amount_major(self) -> float:
        return self.amount / 100

    @property
    def is_captured(self) -> bool:
        return self.status == IntentStatus.CAPTURED.value

    def capture(self, proof: PaymentProof, captured_at: datetime) -> None:
        if self.is_captured:
            raise ValidationError({"status": ["Payment is already captured"]})
        if self.gateway_order_id and proof.intent_id and proof.intent_id != self.gateway_order_id:
            raise ValidationError({"intent_id": ["Payment proof belongs to a different order"]})

        self.proof = proof
        self.status = IntentStatus.CAPTURED.value
        self.failure_reason = None
        self.raise_(
            PaymentCaptured(
                intent_id=str(self.id),
                payment_id=proof.payment_id,
                gateway_order_id=self.gateway_order_id,
                amount=self.amount,
                currency=self.currency,
                captured_at=captured_at,
            )
        )

    def fail(self, reason: str, failed_at: datetime, payment_id: str | None = None) -> None:
        if self.is_captured:
            raise ValidationError({"status": ["Payment is already captured"]})

        self.status = IntentStatus.FAILED.value
        self.failure_reason = reason
        self.raise_(
            PaymentFailed(
                intent_id=str(self.id),
                reason=reason,
                payment_id=payment_id,
                failed_at=failed_at,
            )
        )

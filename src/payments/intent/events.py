"""Domain events for the PaymentIntent aggregate."""

from protean.fields import Boolean, DateTime, Identifier, Integer, String

from payments.domain import payments


@payments.event(part_of="PaymentIntent")
class PaymentIntentCreated:
    """A payment intent was created, at the gateway or as a sandbox intent."""

    __version__ = 1

    intent_id = Identifier(required=True)
    receipt = String(required=True)
    amount = Integer(required=True)
    currency = String(required=True)
    gateway_order_id = String()
    sandbox = Boolean(default=False)
    created_at = DateTime(required=True)


@payments.event(part_of="PaymentIntent")
class PaymentCaptured:
    """The gateway returned a success proof for this intent."""

    __version__ = 1

    intent_id = Identifier(required=True)
    payment_id = String(required=True)
    gateway_order_id = String()
    amount = Integer(required=True)
    currency = String(required=True)
    captured_at = DateTime(required=True)


@payments.event(part_of="PaymentIntent")
class PaymentFailed:
    """The gateway reported the payment as failed."""

    __version__ = 1

    intent_id = Identifier(required=True)
    reason = String(required=True)
    payment_id = String()
    failed_at = DateTime(required=True)

"""Payment Handshake Coordinator.

Three steps, in order:

1. ``create_payment_intent`` asks the gateway backend for an order id. If
   no backend is reachable and the configured key is a test key, a sandbox
   intent without a gateway id is issued instead. A live key never falls
   back; it raises ConfigurationError before the buyer sees a checkout.
2. ``open_gateway_checkout`` builds the client checkout options and
   returns a CheckoutHandle standing in for the gateway modal. The handle
   reports success, failure or dismissal back through the callbacks.
3. The success proof is checked with ``payments.handshake.signature``.

Nothing here touches the cart. A failed or dismissed payment leaves the
checkout session exactly as it was so the buyer can retry.
"""

from collections.abc import Callable

import structlog
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from payments.gateway import get_gateway
from payments.gateway.port import PaymentGateway
from payments.handshake.signature import SignatureCheck, check_signature
from payments.intent.intent import PaymentIntent, PaymentProof, generate_receipt
from shared.clock import Clock, system_clock
from shared.config import Settings, get_settings
from shared.errors import ConfigurationError, GatewayError, GatewayUnreachableError

logger = structlog.get_logger(__name__)

LIVE_KEY_PREFIX = "rzp_live_"
MAX_RETRY_COUNT = 3


def is_production_key(key_id: str | None) -> bool:
    """Production is decided by the key, never by the environment name."""
    return bool(key_id) and key_id.startswith(LIVE_KEY_PREFIX)


class CheckoutHandle:
    """The open gateway checkout, as seen by the caller.

    ``processing`` is true while the modal is open and is reset by every
    outcome, including dismissal.
    """

    def __init__(
        self,
        coordinator: "PaymentHandshakeCoordinator",
        intent: PaymentIntent,
        options: dict,
        on_success: Callable[[PaymentProof], None],
        on_failure: Callable[[GatewayError], None],
        on_dismiss: Callable[[], None] | None = None,
    ) -> None:
        self.coordinator = coordinator
        self.intent = intent
        self.options = options
        self.processing = True
        self._on_success = on_success
        self._on_failure = on_failure
        self._on_dismiss = on_dismiss

    def complete(self, response: dict) -> PaymentProof:
        """Gateway handler callback with ``razorpay_payment_id`` / ``_order_id`` / ``_signature``."""
        proof = PaymentProof.from_gateway_response(response)
        self.processing = False
        self.intent.capture(proof, captured_at=self.coordinator.clock.now())
        self.coordinator.save(self.intent)
        logger.info(
            "Payment captured",
            intent_id=str(self.intent.id),
            payment_id=proof.payment_id,
            sandbox=self.intent.sandbox,
        )
        self._on_success(proof)
        return proof

    def fail(self, error: dict | None = None) -> GatewayError:
        """Gateway ``payment.failed`` event; surfaces a readable reason."""
        error = error or {}
        reason = error.get("description") or error.get("reason") or "Payment failed"
        payment_id = (error.get("metadata") or {}).get("payment_id")
        self.processing = False
        self.intent.fail(reason, failed_at=self.coordinator.clock.now(), payment_id=payment_id)
        self.coordinator.save(self.intent)
        logger.warning("Payment failed", intent_id=str(self.intent.id), reason=reason, code=error.get("code"))
        exc = GatewayError(reason, code=error.get("code"), payment_id=payment_id, amount=self.intent.amount)
        self._on_failure(exc)
        return exc

    def dismiss(self) -> None:
        """The buyer closed the modal. No side effects beyond clearing ``processing``."""
        self.processing = False
        logger.info("Payment checkout dismissed", intent_id=str(self.intent.id))
        if self._on_dismiss is not None:
            self._on_dismiss()


class PaymentHandshakeCoordinator:
    def __init__(
        self,
        gateway: PaymentGateway | None = None,
        settings: Settings | None = None,
        clock: Clock | None = None,
    ) -> None:
        self.gateway = gateway or get_gateway()
        self.settings = settings or get_settings()
        self.clock = clock or system_clock

    @property
    def key_id(self) -> str:
        return self.settings.razorpay_key_id

    @property
    def is_production(self) -> bool:
        return is_production_key(self.key_id)

    def save(self, intent: PaymentIntent) -> None:
        current_domain.repository_for(PaymentIntent).add(intent)

    def create_payment_intent(
        self,
        amount_minor_units: int,
        currency: str = "INR",
        receipt: str | None = None,
        notes: dict | None = None,
    ) -> PaymentIntent:
        if not isinstance(amount_minor_units, int) or amount_minor_units < 1:
            raise ValidationError({"amount": ["Amount must be a positive number of minor units"]})

        receipt = receipt or generate_receipt(self.clock.timestamp_ms())
        try:
            order = self.gateway.create_order(amount_minor_units, currency, receipt, notes)
            gateway_order_id = order.id
        except GatewayUnreachableError as exc:
            if self.is_production:
                logger.error("Payment backend unreachable with live key", receipt=receipt, error=str(exc))
                raise ConfigurationError(
                    "Payment backend is required in production mode",
                    receipt=receipt,
                ) from exc
            logger.warning("Payment sandbox fallback", receipt=receipt, reason=str(exc))
            gateway_order_id = None

        intent = PaymentIntent.create(
            amount=amount_minor_units,
            currency=currency,
            receipt=receipt,
            created_at=self.clock.now(),
            gateway_order_id=gateway_order_id,
        )
        self.save(intent)
        logger.info(
            "Payment intent created",
            intent_id=str(intent.id),
            gateway_order_id=gateway_order_id,
            amount=amount_minor_units,
            sandbox=intent.sandbox,
        )
        return intent

    def build_checkout_options(
        self,
        intent: PaymentIntent,
        prefill: dict | None = None,
        notes: dict | None = None,
    ) -> dict:
        """Options object handed to the gateway's client checkout."""
        if not self.key_id:
            raise ConfigurationError("Payment gateway key is not configured")

        prefill = prefill or {}
        options = {
            "key": self.key_id,
            "amount": intent.amount,
            "currency": intent.currency,
            "name": self.settings.store_name,
            "description": f"Order #{intent.receipt}",
            "prefill": {
                "name": prefill.get("name", ""),
                "email": prefill.get("email", ""),
                "contact": prefill.get("contact") or prefill.get("phone", ""),
            },
            "notes": dict(notes or {}),
            "modal": {"confirm_close": True},
            "retry": {"enabled": True, "max_count": MAX_RETRY_COUNT},
        }
        if intent.gateway_order_id:
            options["order_id"] = intent.gateway_order_id
        return options

    def open_gateway_checkout(
        self,
        intent: PaymentIntent,
        prefill: dict | None,
        on_success: Callable[[PaymentProof], None],
        on_failure: Callable[[GatewayError], None],
        on_dismiss: Callable[[], None] | None = None,
        notes: dict | None = None,
    ) -> CheckoutHandle:
        if intent.is_captured:
            raise ValidationError({"status": ["Payment is already captured"]})
        options = self.build_checkout_options(intent, prefill, notes)
        logger.info("Opening payment checkout", intent_id=str(intent.id), sandbox=intent.sandbox)
        return CheckoutHandle(self, intent, options, on_success, on_failure, on_dismiss)

    def check_proof(self, proof: PaymentProof) -> SignatureCheck:
        return check_signature(
            proof.intent_id,
            proof.payment_id,
            proof.signature,
            self.settings.razorpay_key_secret,
        )

    def verify_signature(self, order_id: str, payment_id: str, signature: str, secret: str | None = None) -> bool:
        secret = secret if secret is not None else self.settings.razorpay_key_secret
        return check_signature(order_id, payment_id, signature, secret) is not SignatureCheck.INVALID

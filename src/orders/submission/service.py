"""Order Fulfillment Service.

Checks run strictly before the network, in this order: required fields,
payment signature, idempotency ledger, platform credentials. Only then is
the order posted, exactly once. A failed post is never retried here: a
timeout may have created the order, and a second post would duplicate it.
Once the platform has accepted the order the result is a success, even if
the ledger cannot be written.
"""

import structlog

from checkout.session.contact import is_valid_email
from orders.admin import get_admin
from orders.admin.port import AdminPort
from orders.submission.ledger import OrderLedger
from orders.submission.mapping import build_order_payload, format_amount
from orders.submission.results import OrderError, OrderResult, OrderSummary
from payments.handshake.signature import SignatureCheck, check_signature
from payments.intent.intent import PaymentProof
from shared.config import Settings, get_settings
from shared.errors import NetworkError, PlatformError
from shared.store import get_store
from shared.store.port import KeyValueStore

logger = structlog.get_logger(__name__)


def cart_items_of(session) -> list[dict]:
    """Cart items from a CheckoutSession snapshot or an already-flat list."""
    if session is None:
        return []
    if hasattr(session, "to_cart_items"):
        return session.to_cart_items()
    return list(session)


def _proof_of(payment_proof) -> PaymentProof | None:
    if payment_proof is None or isinstance(payment_proof, PaymentProof):
        return payment_proof
    if not (payment_proof.get("razorpay_payment_id") or payment_proof.get("payment_id")):
        return None
    return PaymentProof.from_gateway_response(payment_proof)


class OrderFulfillmentService:
    def __init__(
        self,
        admin: AdminPort | None = None,
        store: KeyValueStore | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.admin = admin or get_admin()
        self.settings = settings or get_settings()
        self.ledger = OrderLedger(store or get_store())

    def submit_order(
        self,
        session,
        payment_proof,
        shipping_address,
        buyer_contact: dict,
        amount=None,
    ) -> OrderResult:
        """Commit a paid cart to the platform.

        ``session`` is a CheckoutSession snapshot or a list of cart items;
        ``amount`` is the charged total in major units and is omitted from
        the order when missing or zero.
        """
        proof = _proof_of(payment_proof)
        cart_items = cart_items_of(session)
        buyer_contact = buyer_contact or {}
        email = (buyer_contact.get("email") or "").strip()
        phone = buyer_contact.get("phone") or ""
        charged = format_amount(amount)

        errors = {}
        if proof is None or not proof.payment_id:
            errors["payment_id"] = ["Missing payment id"]
        if not cart_items:
            errors["cart_items"] = ["Missing or empty cart items"]
        if not email:
            errors["email"] = ["Missing email"]
        elif not is_valid_email(email):
            errors["email"] = ["Valid email required"]
        if shipping_address is None:
            errors["shipping_address"] = ["Missing shipping address"]
        if errors:
            logger.info("Order submission rejected", errors=errors)
            return OrderResult.failure(
                OrderError(
                    kind="validation",
                    message=next(iter(errors.values()))[0],
                    status_code=400,
                    details=errors,
                    payment_id=proof.payment_id if proof else None,
                    amount=charged,
                )
            )

        payment_id = proof.payment_id
        check = check_signature(proof.intent_id, payment_id, proof.signature, self.settings.razorpay_key_secret)
        if check is SignatureCheck.INVALID:
            return OrderResult.failure(
                OrderError(
                    kind="signature",
                    message="Invalid payment signature. Payment verification failed.",
                    status_code=400,
                    payment_id=payment_id,
                    amount=charged,
                )
            )

        recorded = self.ledger.get(payment_id)
        if recorded is not None:
            logger.info("Order already recorded for payment", payment_id=payment_id, order_id=recorded.order_id)
            return OrderResult.success(OrderSummary.from_dict({**recorded.to_dict(), "replayed": True}))

        if not self.admin.is_configured:
            logger.error("Admin API is not configured", payment_id=payment_id)
            return OrderResult.failure(
                OrderError(
                    kind="configuration",
                    message="Commerce platform is not configured. Missing admin access token.",
                    status_code=500,
                    payment_id=payment_id,
                    amount=charged,
                    payment_captured=True,
                )
            )

        payload = build_order_payload(
            cart_items,
            payment_id=payment_id,
            intent_id=proof.intent_id,
            shipping_address=shipping_address,
            email=email,
            phone=phone,
            amount=charged,
            payment_verified="true" if check is SignatureCheck.VERIFIED else "skipped",
        )

        logger.info(
            "Submitting order",
            payment_id=payment_id,
            line_items=len(cart_items),
            amount=charged,
            signature=check.value,
        )
        try:
            order = self.admin.create_order(payload)
        except PlatformError as exc:
            logger.error(
                "Payment captured, order not recorded",
                payment_id=payment_id,
                amount=charged,
                status=exc.status_code,
                error=exc.message,
            )
            return OrderResult.failure(
                OrderError(
                    kind="platform",
                    message=exc.message,
                    status_code=exc.status_code,
                    details=exc.details,
                    payment_id=payment_id,
                    amount=charged,
                    payment_captured=True,
                )
            )
        except NetworkError as exc:
            logger.error(
                "Payment captured, order not recorded",
                payment_id=payment_id,
                amount=charged,
                error=str(exc),
            )
            return OrderResult.failure(
                OrderError(
                    kind="network",
                    message=str(exc),
                    payment_id=payment_id,
                    amount=charged,
                    payment_captured=True,
                )
            )

        summary = OrderSummary.from_platform(order, payment_id)
        try:
            self.ledger.record(payment_id, summary)
        except OSError as exc:
            logger.error(
                "Order ledger write failed",
                payment_id=payment_id,
                order_id=summary.order_id,
                error=str(exc),
            )
        logger.info(
            "Order created",
            order_id=summary.order_id,
            name=summary.name,
            total=summary.total_price,
            payment_id=payment_id,
        )
        return OrderResult.success(summary)

    def fetch_order(self, order_id: str) -> dict | None:
        return self.admin.fetch_order(order_id)

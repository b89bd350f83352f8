"""Order placement: the step after the gateway hands back a success proof.

Submits the open checkout as an order and clears the checkout only once
the platform has confirmed the order. Every failure keeps the cart.
"""

import structlog

from checkout.session.manager import CheckoutSessionManager, get_session_manager
from orders.submission.results import OrderResult
from orders.submission.service import OrderFulfillmentService

logger = structlog.get_logger(__name__)


class OrderPlacement:
    def __init__(
        self,
        service: OrderFulfillmentService | None = None,
        session_manager: CheckoutSessionManager | None = None,
    ) -> None:
        self.service = service or OrderFulfillmentService()
        self.session_manager = session_manager or get_session_manager()

    def complete(self, proof, shipping_address, buyer_contact: dict, session=None, amount=None) -> OrderResult:
        session = session or self.session_manager.snapshot or self.session_manager.get_or_create_session()
        if amount is None:
            amount = session.total

        result = self.service.submit_order(session, proof, shipping_address, buyer_contact, amount=amount)

        if result.ok:
            self.session_manager.invalidate(str(session.id))
            logger.info(
                "Order placed",
                order_id=result.summary.order_id,
                replayed=result.summary.replayed,
                checkout_id=str(session.id),
            )
        elif result.error.payment_captured:
            logger.error(
                "Order placement needs manual reconciliation",
                payment_id=result.error.payment_id,
                amount=result.error.amount,
                kind=result.error.kind,
            )
        return result

"""Configurable fake payment gateway for development and testing.

Simulates the gateway's order endpoint without any external calls. It can
be configured at runtime to be unreachable (no backend present) or to
reject requests, which makes the sandbox fallback testable.
"""

from uuid import uuid4

from payments.gateway.port import GatewayOrder, PaymentGateway
from shared.errors import GatewayError, GatewayUnreachableError


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self) -> None:
        self.reachable: bool = True
        self.should_succeed: bool = True
        self.failure_reason: str = "Order creation declined"
        self.calls: list[dict] = []

    def configure(
        self,
        should_succeed: bool = True,
        failure_reason: str = "Order creation declined",
        reachable: bool = True,
    ) -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.reachable = reachable

    def create_order(
        self,
        amount: int,
        currency: str,
        receipt: str,
        notes: dict | None = None,
    ) -> GatewayOrder:
        call = {
            "method": "create_order",
            "amount": amount,
            "currency": currency,
            "receipt": receipt,
            "notes": notes or {},
        }
        self.calls.append(call)

        if not self.reachable:
            raise GatewayUnreachableError("Payment backend is not reachable")
        if not self.should_succeed:
            raise GatewayError(self.failure_reason, receipt=receipt)

        return GatewayOrder(
            id=f"order_{uuid4().hex[:14]}",
            amount=amount,
            currency=currency,
            receipt=receipt,
            notes=dict(notes or {}),
        )

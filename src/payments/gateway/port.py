"""Payment gateway port (abstract interface).

Defines the contract that gateway adapters implement. This enables swapping
between FakeGateway (dev/test) and RazorpayGateway (production) without
changing the handshake coordinator.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass(frozen=True)
class GatewayOrder:
    """Server-side order (intent) created at the gateway."""

    id: str
    amount: int
    currency: str
    receipt: str
    status: str = "created"
    notes: dict = field(default_factory=dict)


class PaymentGateway(ABC):
    """Abstract payment gateway interface.

    ``create_order`` raises GatewayUnreachableError when no backend is
    configured or reachable, and GatewayError when the gateway rejects the
    request.
    """

    @abstractmethod
    def create_order(
        self,
        amount: int,
        currency: str,
        receipt: str,
        notes: dict | None = None,
    ) -> GatewayOrder:
        """Create a gateway order for ``amount`` minor units."""
        ...

"""In-memory Admin API for development and tests.

Numbers orders the way the platform does (``#1001``, ``#1002``...) and
computes totals from the submitted line items. Can be configured to
reject the next submissions or to be unreachable.
"""

from datetime import UTC, datetime
from decimal import Decimal

from orders.admin.errors import parse_platform_error
from orders.admin.port import AdminPort
from shared.errors import NetworkError


class FakeAdmin(AdminPort):
    def __init__(self) -> None:
        self.orders: dict[str, dict] = {}
        self.calls: list[dict] = []
        self.configured = True
        self.offline = False
        self.failure: tuple[int, str] | None = None
        self._next_number = 1001

    def configure(
        self,
        configured: bool = True,
        offline: bool = False,
        failure: tuple[int, str] | None = None,
    ) -> None:
        """``failure`` is a ``(status, body)`` pair returned for every create."""
        self.configured = configured
        self.offline = offline
        self.failure = failure

    @property
    def is_configured(self) -> bool:
        return self.configured

    def create_order(self, payload: dict) -> dict:
        self.calls.append({"method": "create_order", "payload": payload})
        if self.offline:
            raise NetworkError("Admin API unreachable")
        if self.failure is not None:
            status, body = self.failure
            raise parse_platform_error(status, body)

        data = payload["order"]
        number = self._next_number
        self._next_number += 1
        order_id = str(450789469000 + number)
        subtotal = sum(
            (Decimal(item["price"]) * item["quantity"] for item in data.get("line_items", [])),
            Decimal("0.00"),
        )
        order = {
            **data,
            "id": int(order_id),
            "name": f"#{number}",
            "order_number": number,
            "subtotal_price": f"{subtotal:.2f}",
            "total_price": f"{subtotal:.2f}",
            "total_tax": "0.00",
            "currency": "INR",
            "order_status_url": f"https://fake-store.example.com/orders/{order_id}/status",
            "created_at": datetime.now(UTC).isoformat(),
            "cancelled_at": None,
            "fulfillments": [],
        }
        self.orders[order_id] = order
        return dict(order)

    def fetch_order(self, order_id: str) -> dict | None:
        self.calls.append({"method": "fetch_order", "order_id": order_id})
        if self.offline:
            raise NetworkError("Admin API unreachable")
        order = self.orders.get(str(order_id))
        return dict(order) if order else None

    # -- test helpers --------------------------------------------------------

    def add_fulfillment(self, order_id: str, **fulfillment) -> None:
        """Attach a fulfillment as the platform would after shipping."""
        order = self.orders[str(order_id)]
        order["fulfillments"].append(
            {
                "id": len(order["fulfillments"]) + 1,
                "status": "success",
                "shipment_status": None,
                "updated_at": datetime.now(UTC).isoformat(),
                **fulfillment,
            }
        )
        order["fulfillment_status"] = "fulfilled"

    def update_order(self, order_id: str, **changes) -> None:
        self.orders[str(order_id)].update(changes)

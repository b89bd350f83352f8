"""In-memory Storefront for development and tests.

Behaves like the platform for the operations the checkout manager uses:
totals are recomputed server-side on every mutation, completed checkouts
reject mutations, unknown ids fetch as None.
"""

from datetime import UTC, datetime
from uuid import uuid4

from checkout.storefront.port import StorefrontPort
from shared.errors import NetworkError, PlatformError, SessionUnavailableError

_DEFAULT_VARIANTS = {
    "gid://shopify/ProductVariant/1001": {"title": "Handcrafted Walnut Watch Box", "variant_title": "Natural Finish", "price": 4999.00},
    "gid://shopify/ProductVariant/1002": {"title": "Premium Leather Wallet", "variant_title": "Midnight Black", "price": 2499.00},
    "gid://shopify/ProductVariant/1003": {"title": "Engraved Pen Stand", "variant_title": "Default Title", "price": 899.50},
}


class FakeStorefront(StorefrontPort):
    def __init__(self, variants: dict[str, dict] | None = None, currency: str = "INR") -> None:
        self.variants = dict(_DEFAULT_VARIANTS if variants is None else variants)
        self.currency = currency
        self.checkouts: dict[str, dict] = {}
        self.customers: dict[str, dict] = {}
        self.calls: list[dict] = []
        self.offline = False

    # -- test helpers --------------------------------------------------------

    def configure(self, offline: bool = False) -> None:
        """Simulate the platform being unreachable."""
        self.offline = offline

    def complete(self, checkout_id: str) -> None:
        """Mark a checkout completed, as the platform does after payment."""
        self.checkouts[checkout_id]["completed_at"] = datetime.now(UTC).isoformat()

    def forget(self, checkout_id: str) -> None:
        """Drop a checkout, as the platform does when it expires."""
        self.checkouts.pop(checkout_id, None)

    # -- internals -----------------------------------------------------------

    def _record(self, method: str, **kwargs) -> None:
        self.calls.append({"method": method, **kwargs})
        if self.offline:
            raise NetworkError("Storefront unreachable")

    def _open(self, checkout_id: str) -> dict:
        checkout = self.checkouts.get(checkout_id)
        if checkout is None:
            raise SessionUnavailableError("Checkout does not exist", checkout_id=checkout_id)
        if checkout["completed_at"]:
            raise SessionUnavailableError("Checkout is already completed", checkout_id=checkout_id)
        return checkout

    def _recompute(self, checkout: dict) -> dict:
        subtotal = sum(item["unit_price"] * item["quantity"] for item in checkout["line_items"])
        checkout["subtotal"] = round(subtotal, 2)
        checkout["total"] = round(subtotal, 2)
        return self._snapshot(checkout)

    @staticmethod
    def _snapshot(checkout: dict) -> dict:
        copy = dict(checkout)
        copy["line_items"] = [dict(item) for item in checkout["line_items"]]
        return copy

    # -- port ----------------------------------------------------------------

    def create_checkout(self) -> dict:
        self._record("create_checkout")
        checkout_id = f"gid://shopify/Checkout/{uuid4().hex}"
        self.checkouts[checkout_id] = {
            "id": checkout_id,
            "web_url": f"https://fake-store.example.com/checkouts/{checkout_id[-12:]}",
            "email": None,
            "phone": None,
            "completed_at": None,
            "subtotal": 0.0,
            "total": 0.0,
            "currency": self.currency,
            "shipping_address": None,
            "line_items": [],
        }
        return self._snapshot(self.checkouts[checkout_id])

    def fetch_checkout(self, checkout_id: str) -> dict | None:
        self._record("fetch_checkout", checkout_id=checkout_id)
        checkout = self.checkouts.get(checkout_id)
        return self._snapshot(checkout) if checkout else None

    def add_line_items(self, checkout_id: str, line_items: list[dict]) -> dict:
        self._record("add_line_items", checkout_id=checkout_id, line_items=line_items)
        checkout = self._open(checkout_id)
        for item in line_items:
            variant = self.variants.get(item["variant_id"])
            if variant is None:
                raise PlatformError("Variant not found", status_code=200, details={"variantId": item["variant_id"]})
            checkout["line_items"].append(
                {
                    "id": f"gid://shopify/CheckoutLineItem/{uuid4().hex[:10]}",
                    "variant_id": item["variant_id"],
                    "title": variant["title"],
                    "variant_title": variant.get("variant_title"),
                    "quantity": item["quantity"],
                    "unit_price": variant["price"],
                    "currency": self.currency,
                    "custom_attributes": list(item.get("custom_attributes") or []),
                }
            )
        return self._recompute(checkout)

    def update_line_items(self, checkout_id: str, line_items: list[dict]) -> dict:
        self._record("update_line_items", checkout_id=checkout_id, line_items=line_items)
        checkout = self._open(checkout_id)
        by_id = {item["id"]: item for item in checkout["line_items"]}
        for update in line_items:
            if update["id"] not in by_id:
                raise PlatformError("Line item not found", status_code=200, details={"id": update["id"]})
            by_id[update["id"]]["quantity"] = update["quantity"]
        return self._recompute(checkout)

    def remove_line_items(self, checkout_id: str, line_item_ids: list[str]) -> dict:
        self._record("remove_line_items", checkout_id=checkout_id, line_item_ids=line_item_ids)
        checkout = self._open(checkout_id)
        checkout["line_items"] = [i for i in checkout["line_items"] if i["id"] not in set(line_item_ids)]
        return self._recompute(checkout)

    def update_email(self, checkout_id: str, email: str) -> dict:
        self._record("update_email", checkout_id=checkout_id, email=email)
        checkout = self._open(checkout_id)
        checkout["email"] = email
        return self._snapshot(checkout)

    def update_shipping_address(self, checkout_id: str, address: dict) -> dict:
        self._record("update_shipping_address", checkout_id=checkout_id, address=address)
        checkout = self._open(checkout_id)
        checkout["shipping_address"] = dict(address)
        return self._snapshot(checkout)

    def associate_customer(self, checkout_id: str, access_token: str) -> dict:
        self._record("associate_customer", checkout_id=checkout_id)
        checkout = self._open(checkout_id)
        customer = self.customers.get(access_token)
        if customer is None:
            raise PlatformError("Customer access token is invalid", status_code=200)
        checkout["email"] = customer.get("email")
        return self._snapshot(checkout)

    def fetch_customer(self, access_token: str) -> dict:
        self._record("fetch_customer")
        customer = self.customers.get(access_token)
        if customer is None:
            raise PlatformError("Session expired. Please authenticate again.", status_code=401)
        return dict(customer)

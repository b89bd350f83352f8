"""CheckoutSession aggregate: a local, read-only snapshot of the platform's checkout.

The checkout itself lives on the commerce platform; this aggregate is
rebuilt from every server response so derived totals always reflect the
latest server-confirmed state, never an optimistic local delta.

Lifecycle:
    OPEN (completed_at is null) → COMPLETED (terminal, never reused)
"""

import json
from datetime import datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Integer, String, Text, ValueObject

from checkout.address.address import Address
from checkout.domain import checkout

MAX_ATTRIBUTE_LENGTH = 50


def normalize_custom_attributes(attrs) -> list[dict]:
    """Accept a mapping or a sequence of key/value pairs and return an ordered list of dicts.

    Raises ValidationError when a key is empty or a value exceeds the
    catalog's length limit.
    """
    if not attrs:
        return []

    if isinstance(attrs, dict):
        pairs = list(attrs.items())
    else:
        pairs = []
        for attr in attrs:
            if isinstance(attr, dict):
                pairs.append((attr.get("key") or attr.get("name"), attr.get("value")))
            else:
                key, value = attr
                pairs.append((key, value))

    errors = []
    normalized = []
    for key, value in pairs:
        key = (key or "").strip()
        value = "" if value is None else str(value).strip()
        if not key:
            errors.append("Attribute key is required")
            continue
        if len(value) > MAX_ATTRIBUTE_LENGTH:
            errors.append(f"{key} must be at most {MAX_ATTRIBUTE_LENGTH} characters")
            continue
        normalized.append({"key": key, "value": value})

    if errors:
        raise ValidationError({"custom_attributes": errors})
    return normalized


@checkout.entity(part_of="CheckoutSession")
class LineItem:
    """One variant + quantity + customisation within a checkout."""

    variant_id = String(max_length=255)
    title = String(max_length=255, default="Product")
    variant_title = String(max_length=255)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(default=0.0)
    currency = String(max_length=3, default="INR")
    custom_attributes = Text()  # JSON list of {"key", "value"}

    @property
    def attributes(self) -> list[dict]:
        return json.loads(self.custom_attributes) if self.custom_attributes else []

    @property
    def line_total(self) -> float:
        return round((self.unit_price or 0.0) * self.quantity, 2)


@checkout.aggregate
class CheckoutSession:
    email = String(max_length=254)
    phone = String(max_length=20)
    shipping_address = ValueObject(Address)
    line_items = HasMany(LineItem)
    subtotal = Float(default=0.0)
    total = Float(default=0.0)
    currency = String(max_length=3, default="INR")
    web_url = String(max_length=1000)
    completed_at = DateTime()

    @invariant.post
    def attribute_values_fit_catalog_limits(self):
        for item in self.line_items or []:
            for attr in item.attributes:
                if len(attr.get("value") or "") > MAX_ATTRIBUTE_LENGTH:
                    raise ValidationError(
                        {"custom_attributes": [f"{attr.get('key')} must be at most {MAX_ATTRIBUTE_LENGTH} characters"]}
                    )

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def from_payload(cls, payload: dict) -> "CheckoutSession":
        """Build a snapshot from a normalised Storefront checkout payload."""
        completed_at = payload.get("completed_at")
        if isinstance(completed_at, str):
            completed_at = datetime.fromisoformat(completed_at.replace("Z", "+00:00"))

        session = cls(
            id=payload["id"],
            email=payload.get("email") or None,
            phone=payload.get("phone") or None,
            shipping_address=Address.from_storefront(payload.get("shipping_address")),
            subtotal=float(payload.get("subtotal") or 0.0),
            total=float(payload.get("total") or 0.0),
            currency=payload.get("currency") or "INR",
            web_url=payload.get("web_url"),
            completed_at=completed_at,
        )
        items = [
            LineItem(
                id=item["id"],
                variant_id=item.get("variant_id"),
                title=item.get("title") or "Product",
                variant_title=item.get("variant_title"),
                quantity=int(item.get("quantity") or 1),
                unit_price=float(item.get("unit_price") or 0.0),
                currency=item.get("currency") or session.currency,
                custom_attributes=json.dumps(item.get("custom_attributes") or []),
            )
            for item in payload.get("line_items") or []
        ]
        if items:
            session.add_line_items(items)
        return session

    # -------------------------------------------------------------------
    # Derived state
    # -------------------------------------------------------------------
    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.line_items or [])

    def find_item(self, line_item_id: str) -> LineItem | None:
        return next((i for i in self.line_items or [] if str(i.id) == str(line_item_id)), None)

    def to_cart_items(self) -> list[dict]:
        """Cart representation consumed by order submission."""
        return [
            {
                "id": str(item.id),
                "title": item.title,
                "quantity": item.quantity,
                "variant": {
                    "id": item.variant_id,
                    "title": item.variant_title,
                    "price": {"amount": f"{item.unit_price:.2f}", "currencyCode": item.currency},
                },
                "custom_attributes": item.attributes,
            }
            for item in self.line_items or []
        ]

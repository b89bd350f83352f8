"""Order read model parsed from the Admin API.

The platform owns orders; these records are a read-through view used by
tracking. They are never written back.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Fulfillment:
    id: str
    status: str | None = None
    shipment_status: str | None = None
    tracking_company: str | None = None
    tracking_number: str | None = None
    tracking_url: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_admin(cls, data: dict) -> "Fulfillment":
        numbers = data.get("tracking_numbers") or []
        urls = data.get("tracking_urls") or []
        return cls(
            id=str(data.get("id")),
            status=data.get("status"),
            shipment_status=data.get("shipment_status"),
            tracking_company=data.get("tracking_company"),
            tracking_number=data.get("tracking_number") or (numbers[0] if numbers else None),
            tracking_url=data.get("tracking_url") or (urls[0] if urls else None),
            updated_at=data.get("updated_at"),
        )


@dataclass(frozen=True)
class Order:
    id: str
    name: str
    order_number: int | None = None
    financial_status: str | None = None
    fulfillment_status: str | None = None
    cancelled_at: str | None = None
    created_at: str | None = None
    email: str | None = None
    total_price: str | None = None
    currency: str | None = None
    line_items: list[dict] = field(default_factory=list)
    shipping_address: dict | None = None
    fulfillments: list[Fulfillment] = field(default_factory=list)

    @classmethod
    def from_admin(cls, data: dict) -> "Order":
        return cls(
            id=str(data["id"]),
            name=data.get("name") or f"#{data.get('order_number')}",
            order_number=data.get("order_number"),
            financial_status=data.get("financial_status"),
            fulfillment_status=data.get("fulfillment_status"),
            cancelled_at=data.get("cancelled_at"),
            created_at=data.get("created_at"),
            email=data.get("email"),
            total_price=data.get("total_price"),
            currency=data.get("currency"),
            line_items=list(data.get("line_items") or []),
            shipping_address=data.get("shipping_address"),
            fulfillments=[Fulfillment.from_admin(f) for f in data.get("fulfillments") or []],
        )

    @property
    def display_number(self) -> str:
        return self.name.lstrip("#") if self.name else str(self.order_number or self.id)

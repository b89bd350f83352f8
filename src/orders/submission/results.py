"""Outcome records for order submission.

``submit_order`` never raises for expected failures; it returns an
OrderResult carrying either an OrderSummary or an OrderError so the
caller can tell "payment captured, order not recorded" apart from
problems found before any money moved.
"""

from dataclasses import asdict, dataclass, fields

from protean.exceptions import ValidationError

from shared.errors import ConfigurationError, NetworkError, PlatformError, SignatureError


@dataclass(frozen=True)
class OrderSummary:
    order_id: str
    name: str
    order_number: int | None = None
    total_price: str | None = None
    subtotal_price: str | None = None
    total_tax: str | None = None
    currency: str | None = None
    financial_status: str | None = None
    fulfillment_status: str | None = None
    order_status_url: str | None = None
    created_at: str | None = None
    email: str | None = None
    phone: str | None = None
    payment_id: str | None = None
    replayed: bool = False

    @classmethod
    def from_platform(cls, order: dict, payment_id: str) -> "OrderSummary":
        return cls(
            order_id=str(order["id"]),
            name=order.get("name") or f"#{order.get('order_number')}",
            order_number=order.get("order_number"),
            total_price=order.get("total_price"),
            subtotal_price=order.get("subtotal_price"),
            total_tax=order.get("total_tax"),
            currency=order.get("currency"),
            financial_status=order.get("financial_status"),
            fulfillment_status=order.get("fulfillment_status"),
            order_status_url=order.get("order_status_url"),
            created_at=order.get("created_at"),
            email=order.get("email"),
            phone=order.get("phone"),
            payment_id=payment_id,
        )

    @classmethod
    def from_dict(cls, data: dict) -> "OrderSummary":
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class OrderError:
    """Why an order was not recorded.

    ``kind`` is one of ``validation``, ``configuration``, ``signature``,
    ``platform`` or ``network``. ``payment_captured`` is true when the
    buyer has been charged and the failure needs manual reconciliation.
    """

    kind: str
    message: str
    status_code: int | None = None
    details: dict | None = None
    payment_id: str | None = None
    amount: str | None = None
    payment_captured: bool = False

    @property
    def is_retryable(self) -> bool:
        if self.kind == "network":
            return True
        return self.kind == "platform" and (self.status_code is None or self.status_code >= 500)

    @property
    def support_message(self) -> str:
        if not self.payment_captured:
            return self.message
        amount = f" of {self.amount}" if self.amount else ""
        return (
            f"Your payment{amount} was captured but the order could not be recorded. "
            f"Please contact support with payment ID {self.payment_id}."
        )

    def to_exception(self) -> Exception:
        context = {"payment_id": self.payment_id, "amount": self.amount}
        if self.kind == "validation":
            return ValidationError(self.details or {"order": [self.message]})
        if self.kind == "configuration":
            return ConfigurationError(self.message, **context)
        if self.kind == "signature":
            return SignatureError(self.message, **context)
        if self.kind == "network":
            return NetworkError(self.support_message, **context)
        return PlatformError(self.support_message, status_code=self.status_code, details=self.details, **context)


@dataclass(frozen=True)
class OrderResult:
    summary: OrderSummary | None = None
    error: OrderError | None = None

    @classmethod
    def success(cls, summary: OrderSummary) -> "OrderResult":
        return cls(summary=summary)

    @classmethod
    def failure(cls, error: OrderError) -> "OrderResult":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.summary is not None

    def unwrap(self) -> OrderSummary:
        if self.summary is None:
            raise self.error.to_exception()
        return self.summary

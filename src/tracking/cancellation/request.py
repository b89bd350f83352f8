"""CancellationRequest aggregate and the ledger that persists it.

A request is only ever ``Pending`` here: approving or refusing it is the
seller's job on the commerce platform. Asking again for the same order
replaces the earlier request.
"""

from datetime import datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, String, Text

from shared.store.port import CANCELLATION_REQUESTS_KEY, KeyValueStore, read_json, write_json
from tracking.cancellation.events import CancellationRequested
from tracking.domain import tracking


class CancellationStatus(Enum):
    PENDING = "pending"


@tracking.aggregate
class CancellationRequest:
    order_id = Identifier(identifier=True, required=True)
    order_number = String(required=True, max_length=50)
    reason = Text()
    requested_at = DateTime(required=True)
    status = String(max_length=20, choices=CancellationStatus, default=CancellationStatus.PENDING.value)

    @classmethod
    def submit(cls, order_id: str, order_number, reason: str, requested_at: datetime) -> "CancellationRequest":
        if not order_id:
            raise ValidationError({"order_id": ["Order id is required"]})
        if order_number in (None, ""):
            raise ValidationError({"order_number": ["Order number is required"]})

        request = cls(
            order_id=str(order_id),
            order_number=str(order_number),
            reason=reason or "",
            requested_at=requested_at,
        )
        request._announce()
        return request

    def renew(self, reason: str, requested_at: datetime) -> None:
        self.reason = reason or ""
        self.requested_at = requested_at
        self.status = CancellationStatus.PENDING.value
        self._announce()

    def _announce(self) -> None:
        self.raise_(
            CancellationRequested(
                order_id=self.order_id,
                order_number=self.order_number,
                reason=self.reason,
                requested_at=self.requested_at,
            )
        )

    def to_ledger_entry(self) -> dict:
        return {
            "order_id": self.order_id,
            "order_number": self.order_number,
            "reason": self.reason or "",
            "requested_at": self.requested_at.isoformat(),
            "status": self.status,
        }


class CancellationLedger:
    """order id → latest cancellation request, kept in the key-value store."""

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    def _entries(self) -> dict:
        entries = read_json(self.store, CANCELLATION_REQUESTS_KEY, {})
        return entries if isinstance(entries, dict) else {}

    def get(self, order_id: str) -> dict | None:
        return self._entries().get(str(order_id))

    def record(self, request: CancellationRequest) -> None:
        entries = self._entries()
        entries[request.order_id] = request.to_ledger_entry()
        write_json(self.store, CANCELLATION_REQUESTS_KEY, entries)

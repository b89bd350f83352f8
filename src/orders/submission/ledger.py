"""Idempotency ledger: payment id → recorded order summary.

Consulted before every submission so a retry after a successful but
unacknowledged submission returns the recorded order instead of creating
a second one. Last writer wins across processes sharing the store.
"""

from orders.submission.results import OrderSummary
from shared.store.port import ORDER_LEDGER_KEY, KeyValueStore, read_json, write_json


class OrderLedger:
    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    def _entries(self) -> dict:
        return read_json(self.store, ORDER_LEDGER_KEY, {})

    def get(self, payment_id: str) -> OrderSummary | None:
        entry = self._entries().get(payment_id)
        return OrderSummary.from_dict(entry) if entry else None

    def record(self, payment_id: str, summary: OrderSummary) -> None:
        entries = self._entries()
        entries[payment_id] = summary.to_dict()
        write_json(self.store, ORDER_LEDGER_KEY, entries)

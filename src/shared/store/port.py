"""Key-value store port: the persisted client-side state.

Everything the storefront keeps between page loads lives behind this
interface: the open checkout session id, the tracking cache, the
cancellation ledger, the order idempotency ledger and the bearer token.
Values are strings; callers own (de)serialisation.

Several browsing contexts may share one store. No locking is performed:
the last writer wins.
"""

import json
from abc import ABC, abstractmethod

import structlog

logger = structlog.get_logger(__name__)

CHECKOUT_ID_KEY = "checkoutId"
TRACKING_CACHE_KEY = "tracking_cache"
CANCELLATION_REQUESTS_KEY = "cancellation_requests"
ORDER_LEDGER_KEY = "order_ledger"
ACCESS_TOKEN_KEY = "customerAccessToken"


class KeyValueStore(ABC):
    """Abstract persistent key-value store."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the value stored under ``key``, or None."""
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove ``key``. Removing a missing key is not an error."""
        ...


def read_json(store: KeyValueStore, key: str, default=None):
    """Parse the JSON value under ``key``; unparsable values read as ``default``."""
    raw = store.get(key)
    if raw is None:
        return default
    try:
        return json.loads(raw)
    except ValueError:
        logger.warning("Discarding unparsable stored value", key=key)
        return default


def write_json(store: KeyValueStore, key: str, value) -> None:
    store.set(key, json.dumps(value))

"""Admin API port (abstract interface).

Defines the contract for the commerce platform's order endpoints. Adapters
return the platform's ``order`` object as a dict and raise:

    PlatformError: the platform rejected the request (status + parsed body)
    NetworkError: transport failure; the order may or may not exist
"""

from abc import ABC, abstractmethod


class AdminPort(ABC):
    """Abstract Admin API interface."""

    @property
    @abstractmethod
    def is_configured(self) -> bool:
        """False when credentials are missing or still placeholders."""
        ...

    @abstractmethod
    def create_order(self, payload: dict) -> dict:
        """``POST /orders.json`` with ``{"order": {...}}``; returns the created order."""
        ...

    @abstractmethod
    def fetch_order(self, order_id: str) -> dict | None:
        """``GET /orders/{id}.json``; None when the order does not exist."""
        ...

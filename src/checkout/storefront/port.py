"""Storefront port: the commerce platform's checkout and customer API.

Adapters return normalised checkout payloads (snake_case dicts) so the
aggregate never sees a wire format:

    {"id", "web_url", "email", "phone", "completed_at", "subtotal", "total",
     "currency", "shipping_address", "line_items": [{"id", "variant_id",
     "title", "variant_title", "quantity", "unit_price", "currency",
     "custom_attributes": [{"key", "value"}]}]}

Errors:
    SessionUnavailableError: checkout missing or already completed
    PlatformError: user errors reported by the platform
    NetworkError: transport failure
"""

from abc import ABC, abstractmethod


class StorefrontPort(ABC):
    """Abstract Storefront API interface."""

    @abstractmethod
    def create_checkout(self) -> dict:
        """Create a new, empty checkout."""
        ...

    @abstractmethod
    def fetch_checkout(self, checkout_id: str) -> dict | None:
        """Fetch a checkout by id. Returns None when the platform does not know it."""
        ...

    @abstractmethod
    def add_line_items(self, checkout_id: str, line_items: list[dict]) -> dict:
        """Add ``[{"variant_id", "quantity", "custom_attributes"}]`` to a checkout."""
        ...

    @abstractmethod
    def update_line_items(self, checkout_id: str, line_items: list[dict]) -> dict:
        """Update quantities for ``[{"id", "quantity"}]``."""
        ...

    @abstractmethod
    def remove_line_items(self, checkout_id: str, line_item_ids: list[str]) -> dict:
        """Remove line items by id."""
        ...

    @abstractmethod
    def update_email(self, checkout_id: str, email: str) -> dict:
        ...

    @abstractmethod
    def update_shipping_address(self, checkout_id: str, address: dict) -> dict:
        """Set the shipping address (MailingAddressInput shape)."""
        ...

    @abstractmethod
    def associate_customer(self, checkout_id: str, access_token: str) -> dict:
        """Attach a logged-in customer to the checkout."""
        ...

    @abstractmethod
    def fetch_customer(self, access_token: str) -> dict:
        """Customer profile with their most recent orders."""
        ...

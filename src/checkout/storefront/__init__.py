"""Storefront adapter factory.

STOREFRONT_ADAPTER=shopify selects the GraphQL adapter; anything else
falls back to the in-memory FakeStorefront.
"""

from checkout.storefront.port import StorefrontPort
from shared.config import get_settings

_storefront_instance: StorefrontPort | None = None


def get_storefront() -> StorefrontPort:
    """Return the configured storefront adapter (singleton)."""
    global _storefront_instance
    if _storefront_instance is None:
        settings = get_settings()
        adapter = settings.adapter("storefront")
        if adapter == "fake":
            from checkout.storefront.fake_adapter import FakeStorefront

            _storefront_instance = FakeStorefront()
        elif adapter == "shopify":
            from checkout.storefront.shopify_adapter import ShopifyStorefront

            _storefront_instance = ShopifyStorefront(
                shop_domain=settings.shop_domain,
                access_token=settings.storefront_token,
                api_version=settings.api_version,
            )
        else:
            raise ValueError(f"Unknown storefront adapter: {adapter}")
    return _storefront_instance


def set_storefront(storefront: StorefrontPort) -> None:
    global _storefront_instance
    _storefront_instance = storefront


def reset_storefront() -> None:
    global _storefront_instance
    _storefront_instance = None

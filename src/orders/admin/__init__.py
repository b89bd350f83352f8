"""Admin API adapter factory.

ADMIN_ADAPTER=shopify selects the REST adapter; the default is FakeAdmin.
"""

from orders.admin.port import AdminPort
from shared.config import get_settings

_current_admin: AdminPort | None = None


def get_admin() -> AdminPort:
    global _current_admin
    if _current_admin is None:
        settings = get_settings()
        adapter = settings.adapter("admin")
        if adapter == "shopify":
            from orders.admin.shopify_admin import ShopifyAdmin

            _current_admin = ShopifyAdmin(settings.shop_domain, settings.admin_token, settings.api_version)
        elif adapter == "fake":
            from orders.admin.fake_adapter import FakeAdmin

            _current_admin = FakeAdmin()
        else:
            raise ValueError(f"Unknown admin adapter: {adapter}")
    return _current_admin


def set_admin(admin: AdminPort) -> None:
    global _current_admin
    _current_admin = admin


def reset_admin() -> None:
    global _current_admin
    _current_admin = None

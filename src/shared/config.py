"""Runtime settings read from the environment."""

import os
from dataclasses import dataclass, field

DEFAULT_API_VERSION = "2024-01"
DEFAULT_SELLER_EMAIL = "orders@rootstore.example.com"


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    """Credentials and tunables for the external collaborators."""

    shop_domain: str = ""
    storefront_token: str = ""
    admin_token: str = ""
    api_version: str = DEFAULT_API_VERSION
    razorpay_key_id: str = ""
    razorpay_key_secret: str = ""
    web3forms_key: str = ""
    seller_email: str = DEFAULT_SELLER_EMAIL
    store_name: str = "Root Store"
    tracking_cache_ttl: int = 300
    tracking_poll_interval: int = 30
    adapters: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            shop_domain=os.environ.get("SHOPIFY_STORE_DOMAIN", ""),
            storefront_token=os.environ.get("SHOPIFY_STOREFRONT_TOKEN", ""),
            admin_token=os.environ.get("SHOPIFY_ADMIN_TOKEN", ""),
            api_version=os.environ.get("SHOPIFY_API_VERSION", DEFAULT_API_VERSION),
            razorpay_key_id=os.environ.get("RAZORPAY_KEY_ID", ""),
            razorpay_key_secret=os.environ.get("RAZORPAY_KEY_SECRET", ""),
            web3forms_key=os.environ.get("WEB3FORMS_KEY", ""),
            seller_email=os.environ.get("SELLER_EMAIL", DEFAULT_SELLER_EMAIL),
            store_name=os.environ.get("STORE_NAME", "Root Store"),
            tracking_cache_ttl=_int_env("TRACKING_CACHE_TTL", 300),
            tracking_poll_interval=_int_env("TRACKING_POLL_INTERVAL", 30),
            adapters={
                "storefront": os.environ.get("STOREFRONT_ADAPTER", "fake"),
                "admin": os.environ.get("ADMIN_ADAPTER", "fake"),
                "gateway": os.environ.get("GATEWAY_ADAPTER", "fake"),
                "email": os.environ.get("EMAIL_ADAPTER", "fake"),
                "postal": os.environ.get("POSTAL_ADAPTER", "fake"),
                "carrier": os.environ.get("CARRIER_ADAPTER", "fake"),
            },
        )

    def adapter(self, name: str) -> str:
        return self.adapters.get(name, "fake")


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def set_settings(settings: Settings) -> None:
    global _settings
    _settings = settings


def reset_settings() -> None:
    global _settings
    _settings = None

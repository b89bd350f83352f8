"""Shopify Admin REST adapter.

Orders are created with ``POST https://{shop}/admin/api/{version}/orders.json``
authenticated by the ``X-Shopify-Access-Token`` header.
"""

import requests
import structlog

from orders.admin.errors import parse_platform_error
from orders.admin.port import AdminPort
from shared.errors import NetworkError

logger = structlog.get_logger(__name__)

PLACEHOLDER_MARKER = "YOUR_"


class ShopifyAdmin(AdminPort):
    def __init__(self, shop_domain: str, access_token: str, api_version: str = "2024-01", timeout: int = 30) -> None:
        self.base_url = f"https://{shop_domain}/admin/api/{api_version}"
        self.access_token = access_token or ""
        self.timeout = timeout

    @property
    def is_configured(self) -> bool:
        return bool(self.access_token) and PLACEHOLDER_MARKER not in self.access_token

    def _headers(self) -> dict:
        return {
            "Content-Type": "application/json",
            "X-Shopify-Access-Token": self.access_token,
        }

    def create_order(self, payload: dict) -> dict:
        url = f"{self.base_url}/orders.json"
        try:
            response = requests.post(url, json=payload, headers=self._headers(), timeout=self.timeout)
        except requests.RequestException as exc:
            raise NetworkError(f"Admin API request failed: {exc}") from exc

        if not response.ok:
            logger.error("Admin API rejected order", status=response.status_code, body=response.text[:500])
            raise parse_platform_error(response.status_code, response.text)

        return response.json()["order"]

    def fetch_order(self, order_id: str) -> dict | None:
        url = f"{self.base_url}/orders/{order_id}.json"
        try:
            response = requests.get(url, headers=self._headers(), timeout=self.timeout)
        except requests.RequestException as exc:
            raise NetworkError(f"Admin API request failed: {exc}") from exc

        if response.status_code == 404:
            return None
        if not response.ok:
            raise parse_platform_error(response.status_code, response.text)
        return response.json().get("order")

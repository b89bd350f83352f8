"""Razorpay gateway adapter.

Creates orders through ``POST https://api.razorpay.com/v1/orders`` using
HTTP basic auth with the key id and key secret. Without a key secret there
is no server-side backend, which is reported as unreachable so the
coordinator can decide whether a sandbox intent is acceptable.
"""

import requests
import structlog

from payments.gateway.port import GatewayOrder, PaymentGateway
from shared.errors import GatewayError, GatewayUnreachableError

logger = structlog.get_logger(__name__)

RAZORPAY_ORDERS_URL = "https://api.razorpay.com/v1/orders"


class RazorpayGateway(PaymentGateway):
    def __init__(self, key_id: str, key_secret: str, timeout: int = 15) -> None:
        self.key_id = key_id
        self.key_secret = key_secret
        self.timeout = timeout

    def create_order(
        self,
        amount: int,
        currency: str,
        receipt: str,
        notes: dict | None = None,
    ) -> GatewayOrder:
        if not self.key_id or not self.key_secret:
            raise GatewayUnreachableError("No payment backend configured")

        try:
            response = requests.post(
                RAZORPAY_ORDERS_URL,
                auth=(self.key_id, self.key_secret),
                json={
                    "amount": amount,
                    "currency": currency,
                    "receipt": receipt,
                    "notes": notes or {},
                },
                timeout=self.timeout,
            )
        except (requests.ConnectionError, requests.Timeout) as exc:
            raise GatewayUnreachableError(f"Payment backend unreachable: {exc}") from exc
        except requests.RequestException as exc:
            raise GatewayError(f"Payment gateway request failed: {exc}") from exc

        if response.status_code >= 400:
            try:
                error = response.json().get("error") or {}
            except ValueError:
                error = {}
            reason = error.get("description") or response.text or "Failed to create payment order"
            logger.warning(
                "Gateway rejected order creation",
                status=response.status_code,
                code=error.get("code"),
                receipt=receipt,
            )
            raise GatewayError(reason, status_code=response.status_code, code=error.get("code"))

        data = response.json()
        return GatewayOrder(
            id=data["id"],
            amount=int(data.get("amount", amount)),
            currency=data.get("currency", currency),
            receipt=data.get("receipt", receipt),
            status=data.get("status", "created"),
            notes=data.get("notes") or {},
        )

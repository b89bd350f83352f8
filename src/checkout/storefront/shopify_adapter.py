"""Shopify Storefront API adapter (GraphQL over HTTPS).

Talks to ``https://{shop}/api/{version}/graphql.json`` with the
``X-Shopify-Storefront-Access-Token`` header. Every checkout mutation
selects the same field set so responses normalise identically.
"""

import requests
import structlog

from checkout.storefront.port import StorefrontPort
from shared.errors import NetworkError, PlatformError, SessionUnavailableError

logger = structlog.get_logger(__name__)

_CHECKOUT_FIELDS = """
fragment CheckoutFields on Checkout {
  id
  webUrl
  email
  completedAt
  subtotalPrice { amount currencyCode }
  totalPrice { amount currencyCode }
  shippingAddress {
    firstName lastName address1 address2 city province provinceCode country zip phone
  }
  lineItems(first: 250) {
    edges {
      node {
        id
        title
        quantity
        customAttributes { key value }
        variant { id title price { amount currencyCode } }
      }
    }
  }
}
"""

_USER_ERRORS = "checkoutUserErrors { code field message }"

CREATE_CHECKOUT = (
    _CHECKOUT_FIELDS
    + """
mutation checkoutCreate($input: CheckoutCreateInput!) {
  checkoutCreate(input: $input) { checkout { ...CheckoutFields } %s }
}
"""
    % _USER_ERRORS
)

FETCH_CHECKOUT = (
    _CHECKOUT_FIELDS
    + """
query checkoutNode($id: ID!) {
  node(id: $id) { ...CheckoutFields }
}
"""
)

ADD_LINE_ITEMS = (
    _CHECKOUT_FIELDS
    + """
mutation checkoutLineItemsAdd($checkoutId: ID!, $lineItems: [CheckoutLineItemInput!]!) {
  checkoutLineItemsAdd(checkoutId: $checkoutId, lineItems: $lineItems) { checkout { ...CheckoutFields } %s }
}
"""
    % _USER_ERRORS
)

UPDATE_LINE_ITEMS = (
    _CHECKOUT_FIELDS
    + """
mutation checkoutLineItemsUpdate($checkoutId: ID!, $lineItems: [CheckoutLineItemUpdateInput!]!) {
  checkoutLineItemsUpdate(checkoutId: $checkoutId, lineItems: $lineItems) { checkout { ...CheckoutFields } %s }
}
"""
    % _USER_ERRORS
)

REMOVE_LINE_ITEMS = (
    _CHECKOUT_FIELDS
    + """
mutation checkoutLineItemsRemove($checkoutId: ID!, $lineItemIds: [ID!]!) {
  checkoutLineItemsRemove(checkoutId: $checkoutId, lineItemIds: $lineItemIds) { checkout { ...CheckoutFields } %s }
}
"""
    % _USER_ERRORS
)

UPDATE_EMAIL = (
    _CHECKOUT_FIELDS
    + """
mutation checkoutEmailUpdateV2($checkoutId: ID!, $email: String!) {
  checkoutEmailUpdateV2(checkoutId: $checkoutId, email: $email) { checkout { ...CheckoutFields } %s }
}
"""
    % _USER_ERRORS
)

UPDATE_SHIPPING_ADDRESS = (
    _CHECKOUT_FIELDS
    + """
mutation checkoutShippingAddressUpdateV2($checkoutId: ID!, $shippingAddress: MailingAddressInput!) {
  checkoutShippingAddressUpdateV2(checkoutId: $checkoutId, shippingAddress: $shippingAddress) {
    checkout { ...CheckoutFields } %s
  }
}
"""
    % _USER_ERRORS
)

ASSOCIATE_CUSTOMER = (
    _CHECKOUT_FIELDS
    + """
mutation checkoutCustomerAssociateV2($checkoutId: ID!, $customerAccessToken: String!) {
  checkoutCustomerAssociateV2(checkoutId: $checkoutId, customerAccessToken: $customerAccessToken) {
    checkout { ...CheckoutFields } %s
  }
}
"""
    % _USER_ERRORS
)

FETCH_CUSTOMER = """
query getCustomerData($token: String!) {
  customer(customerAccessToken: $token) {
    firstName lastName email phone
    defaultAddress { formatted firstName lastName address1 address2 city province country zip phone }
    orders(first: 10, reverse: true) {
      edges {
        node {
          id orderNumber processedAt fulfillmentStatus financialStatus
          totalPrice { amount currencyCode }
          lineItems(first: 5) { edges { node { title variant { image { url } } } } }
        }
      }
    }
  }
}
"""

# User error codes meaning the checkout can no longer be mutated
_UNAVAILABLE_CODES = {"ALREADY_COMPLETED", "INVALID_CHECKOUT", "NOT_FOUND"}


def _money(value: dict | None) -> tuple[float, str | None]:
    if not value:
        return 0.0, None
    return float(value.get("amount") or 0.0), value.get("currencyCode")


def normalize_checkout(node: dict) -> dict:
    """Translate a Checkout GraphQL node into the port's payload shape."""
    subtotal, currency = _money(node.get("subtotalPrice"))
    total, total_currency = _money(node.get("totalPrice"))
    line_items = []
    for edge in (node.get("lineItems") or {}).get("edges", []):
        item = edge["node"]
        variant = item.get("variant") or {}
        price, price_currency = _money(variant.get("price"))
        line_items.append(
            {
                "id": item["id"],
                "variant_id": variant.get("id"),
                "title": item.get("title"),
                "variant_title": variant.get("title"),
                "quantity": item.get("quantity") or 1,
                "unit_price": price,
                "currency": price_currency or currency,
                "custom_attributes": [
                    {"key": a["key"], "value": a.get("value") or ""} for a in item.get("customAttributes") or []
                ],
            }
        )
    return {
        "id": node["id"],
        "web_url": node.get("webUrl"),
        "email": node.get("email"),
        "phone": (node.get("shippingAddress") or {}).get("phone"),
        "completed_at": node.get("completedAt"),
        "subtotal": subtotal,
        "total": total,
        "currency": currency or total_currency or "INR",
        "shipping_address": node.get("shippingAddress"),
        "line_items": line_items,
    }


class ShopifyStorefront(StorefrontPort):
    def __init__(self, shop_domain: str, access_token: str, api_version: str = "2024-01", timeout: int = 30) -> None:
        if not shop_domain or not access_token:
            raise ValueError("Storefront access requires SHOPIFY_STORE_DOMAIN and SHOPIFY_STOREFRONT_TOKEN")
        self.endpoint = f"https://{shop_domain}/api/{api_version}/graphql.json"
        self.timeout = timeout
        self._session = requests.Session()
        self._session.headers.update(
            {
                "Content-Type": "application/json",
                "X-Shopify-Storefront-Access-Token": access_token,
            }
        )

    # -- HTTP layer ----------------------------------------------------------

    def _execute(self, query: str, variables: dict) -> dict:
        try:
            response = self._session.post(
                self.endpoint,
                json={"query": query, "variables": variables},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise NetworkError(f"Storefront request failed: {exc}") from exc

        if response.status_code >= 400:
            raise PlatformError(
                f"Storefront API error: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            result = response.json()
        except ValueError as exc:
            raise PlatformError("Storefront returned invalid JSON", status_code=response.status_code) from exc

        if result.get("errors"):
            logger.error("Storefront GraphQL errors", errors=result["errors"])
            message = result["errors"][0].get("message") or "GraphQL Error"
            raise PlatformError(message, status_code=response.status_code, details={"errors": result["errors"]})

        return result.get("data") or {}

    def _mutate(self, query: str, root: str, variables: dict) -> dict:
        data = self._execute(query, variables)
        payload = data.get(root) or {}
        errors = payload.get("checkoutUserErrors") or []
        if errors:
            first = errors[0]
            if first.get("code") in _UNAVAILABLE_CODES:
                raise SessionUnavailableError(first.get("message") or "Checkout unavailable", code=first.get("code"))
            raise PlatformError(first.get("message") or "Checkout error", status_code=200, details={"errors": errors})
        node = payload.get("checkout")
        if node is None:
            raise SessionUnavailableError("Checkout not returned by the platform")
        return normalize_checkout(node)

    # -- port ----------------------------------------------------------------

    def create_checkout(self) -> dict:
        return self._mutate(CREATE_CHECKOUT, "checkoutCreate", {"input": {}})

    def fetch_checkout(self, checkout_id: str) -> dict | None:
        node = self._execute(FETCH_CHECKOUT, {"id": checkout_id}).get("node")
        return normalize_checkout(node) if node else None

    def add_line_items(self, checkout_id: str, line_items: list[dict]) -> dict:
        items = [
            {
                "variantId": item["variant_id"],
                "quantity": item["quantity"],
                "customAttributes": item.get("custom_attributes") or [],
            }
            for item in line_items
        ]
        return self._mutate(ADD_LINE_ITEMS, "checkoutLineItemsAdd", {"checkoutId": checkout_id, "lineItems": items})

    def update_line_items(self, checkout_id: str, line_items: list[dict]) -> dict:
        items = [{"id": item["id"], "quantity": item["quantity"]} for item in line_items]
        return self._mutate(
            UPDATE_LINE_ITEMS, "checkoutLineItemsUpdate", {"checkoutId": checkout_id, "lineItems": items}
        )

    def remove_line_items(self, checkout_id: str, line_item_ids: list[str]) -> dict:
        return self._mutate(
            REMOVE_LINE_ITEMS,
            "checkoutLineItemsRemove",
            {"checkoutId": checkout_id, "lineItemIds": list(line_item_ids)},
        )

    def update_email(self, checkout_id: str, email: str) -> dict:
        return self._mutate(UPDATE_EMAIL, "checkoutEmailUpdateV2", {"checkoutId": checkout_id, "email": email})

    def update_shipping_address(self, checkout_id: str, address: dict) -> dict:
        return self._mutate(
            UPDATE_SHIPPING_ADDRESS,
            "checkoutShippingAddressUpdateV2",
            {"checkoutId": checkout_id, "shippingAddress": address},
        )

    def associate_customer(self, checkout_id: str, access_token: str) -> dict:
        return self._mutate(
            ASSOCIATE_CUSTOMER,
            "checkoutCustomerAssociateV2",
            {"checkoutId": checkout_id, "customerAccessToken": access_token},
        )

    def fetch_customer(self, access_token: str) -> dict:
        customer = self._execute(FETCH_CUSTOMER, {"token": access_token}).get("customer")
        if not customer:
            raise PlatformError("Session expired. Please authenticate again.", status_code=401)

        orders = []
        for edge in (customer.get("orders") or {}).get("edges", []):
            node = edge["node"]
            orders.append(
                {
                    "id": node["id"],
                    "order_number": node.get("orderNumber"),
                    "processed_at": node.get("processedAt"),
                    "total_price": node.get("totalPrice"),
                    "financial_status": node.get("financialStatus"),
                    "fulfillment_status": node.get("fulfillmentStatus"),
                    "line_items": [
                        {
                            "title": li["node"].get("title"),
                            "image_url": ((li["node"].get("variant") or {}).get("image") or {}).get("url"),
                        }
                        for li in (node.get("lineItems") or {}).get("edges", [])
                    ],
                }
            )

        return {
            "first_name": customer.get("firstName") or "",
            "last_name": customer.get("lastName") or "",
            "email": customer.get("email"),
            "phone": customer.get("phone"),
            "default_address": customer.get("defaultAddress"),
            "orders": orders,
        }

"""Cart to Admin API order payload mapping.

The payload shape is a compatibility contract with the platform; field
names and defaults here must not drift.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

PAYMENT_GATEWAY = "Razorpay"
ORDER_TAGS = "razorpay, online-payment, website-order"
DEFAULT_VARIANT_TITLE = "Default Title"

PROVINCE_CODES = {
    "Andhra Pradesh": "AP",
    "Arunachal Pradesh": "AR",
    "Assam": "AS",
    "Bihar": "BR",
    "Chhattisgarh": "CT",
    "Goa": "GA",
    "Gujarat": "GJ",
    "Haryana": "HR",
    "Himachal Pradesh": "HP",
    "Jharkhand": "JH",
    "Karnataka": "KA",
    "Kerala": "KL",
    "Madhya Pradesh": "MP",
    "Maharashtra": "MH",
    "Manipur": "MN",
    "Meghalaya": "ML",
    "Mizoram": "MZ",
    "Nagaland": "NL",
    "Odisha": "OR",
    "Punjab": "PB",
    "Rajasthan": "RJ",
    "Sikkim": "SK",
    "Tamil Nadu": "TN",
    "Telangana": "TG",
    "Tripura": "TR",
    "Uttar Pradesh": "UP",
    "Uttarakhand": "UK",
    "West Bengal": "WB",
    "Delhi": "DL",
    "Jammu and Kashmir": "JK",
    "Ladakh": "LA",
    "Puducherry": "PY",
    "Chandigarh": "CH",
    "Andaman and Nicobar Islands": "AN",
    "Dadra and Nagar Haveli and Daman and Diu": "DN",
    "Lakshadweep": "LD",
}

_PROVINCE_CODES_FOLDED = {name.casefold(): code for name, code in PROVINCE_CODES.items()}


def province_code(name: str | None) -> str:
    """Two-letter region code, or "" for anything the table does not know."""
    return _PROVINCE_CODES_FOLDED.get((name or "").strip().casefold(), "")


def extract_variant_id(ref) -> int | None:
    """Numeric id from ``gid://shopify/ProductVariant/123``; None when there is no numeric suffix."""
    if ref is None or isinstance(ref, bool):
        return None
    if isinstance(ref, int):
        return ref
    segment = str(ref).strip().rsplit("/", 1)[-1]
    return int(segment) if segment.isdigit() else None


def format_amount(value) -> str | None:
    """Two-decimal string, or None for a missing or zero amount."""
    if value is None or value == "":
        return None
    try:
        amount = Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    except InvalidOperation:
        return None
    return f"{amount:.2f}" if amount else None


def _price_of(item: dict):
    variant = item.get("variant") or {}
    price = variant.get("price")
    if isinstance(price, dict):
        price = price.get("amount")
    return price if price not in (None, "") else item.get("price", 0)


def map_line_item(item: dict) -> dict:
    title = item.get("title") or "Product"
    variant = item.get("variant") or {}
    line_item = {
        "title": title,
        "name": title,
        "quantity": int(item.get("quantity") or 1),
        "price": format_amount(_price_of(item)) or "0.00",
        "requires_shipping": True,
        "taxable": True,
        "fulfillment_status": None,
    }

    variant_id = extract_variant_id(variant.get("id") or item.get("variant_id"))
    if variant_id is not None:
        line_item["variant_id"] = variant_id

    variant_title = variant.get("title")
    if variant_title and variant_title != DEFAULT_VARIANT_TITLE:
        line_item["variant_title"] = variant_title

    attributes = item.get("custom_attributes") or item.get("customAttributes") or []
    if attributes:
        line_item["properties"] = [
            {"name": attr.get("key") or attr.get("name"), "value": attr.get("value")} for attr in attributes
        ]
    return line_item


def _address_values(address) -> dict:
    if address is None:
        return {}
    if isinstance(address, dict):
        return address
    return address.to_dict()


def map_address(address, phone: str | None = None) -> dict:
    """Admin API address from an Address value object or a plain dict.

    Plain dicts may use the storefront's camelCase or form field names.
    """
    values = _address_values(address)
    province = values.get("province") or values.get("state") or ""
    country = values.get("country") or "India"
    mapped = {
        "first_name": values.get("first_name") or values.get("firstName") or "",
        "last_name": values.get("last_name") or values.get("lastName") or "",
        "address1": values.get("address1") or values.get("address") or "",
        "address2": values.get("address2") or values.get("apartment") or "",
        "city": values.get("city") or "",
        "province": province,
        "province_code": province_code(province),
        "zip": values.get("zip") or values.get("pincode") or "",
        "country": country,
        "phone": phone or values.get("phone") or "",
    }
    if country.strip().lower() in ("india", "in"):
        mapped["country_code"] = "IN"
    return mapped


def build_order_payload(
    cart_items: list[dict],
    payment_id: str,
    intent_id: str | None,
    shipping_address,
    email: str,
    phone: str | None,
    amount=None,
    payment_verified: str = "true",
) -> dict:
    """The full ``{"order": {...}}`` body for ``POST /orders.json``."""
    shipping = map_address(shipping_address, phone)
    order = {
        "email": email,
        "phone": phone or shipping.get("phone") or "",
        "financial_status": "paid",
        "fulfillment_status": None,
        "line_items": [map_line_item(item) for item in cart_items],
        "shipping_address": shipping,
        "billing_address": dict(shipping),
        "note": f"Paid via {PAYMENT_GATEWAY} (Payment ID: {payment_id})",
        "note_attributes": [
            {"name": "razorpay_payment_id", "value": payment_id},
            {"name": "razorpay_order_id", "value": intent_id or "N/A"},
            {"name": "payment_method", "value": PAYMENT_GATEWAY},
            {"name": "payment_verified", "value": payment_verified},
        ],
        "tags": ORDER_TAGS,
        "send_receipt": True,
        "send_fulfillment_receipt": True,
    }

    charged = format_amount(amount)
    if charged is not None:
        order["transactions"] = [
            {
                "kind": "sale",
                "status": "success",
                "amount": charged,
                "gateway": PAYMENT_GATEWAY,
                "source_name": "web",
            }
        ]
    return {"order": order}

"""Pydantic request/response schemas for the Checkout API.

These are external contracts (anti-corruption layer), separate from
internal Protean commands.
"""

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class AttributeSchema(BaseModel):
    key: str
    value: str = ""


class AddressSchema(BaseModel):
    first_name: str = ""
    last_name: str = ""
    address1: str = ""
    address2: str = ""
    city: str = ""
    province: str = ""
    zip: str = ""
    country: str = "India"
    phone: str = ""


class LineItemSchema(BaseModel):
    id: str
    variant_id: str | None = None
    title: str
    variant_title: str | None = None
    quantity: int
    unit_price: float
    line_total: float
    custom_attributes: list[AttributeSchema] = []


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class AddLineItemRequest(BaseModel):
    session_id: str | None = None
    variant_id: str
    quantity: int = Field(ge=1, default=1)
    custom_attributes: list[AttributeSchema] = []

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "variant_id": "gid://shopify/ProductVariant/1001",
                    "quantity": 1,
                    "custom_attributes": [{"key": "Engraving", "value": "For Asha"}],
                }
            ]
        }
    }


class UpdateLineItemRequest(BaseModel):
    session_id: str | None = None
    line_item_id: str
    quantity: int = Field(ge=1)


class RemoveLineItemRequest(BaseModel):
    session_id: str | None = None
    line_item_id: str


class UpdateEmailRequest(BaseModel):
    session_id: str | None = None
    email: str


class UpdateAddressRequest(AddressSchema):
    session_id: str | None = None
    autofill: bool = True


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class SessionResponse(BaseModel):
    id: str
    web_url: str | None = None
    email: str | None = None
    completed: bool = False
    item_count: int = 0
    subtotal: float = 0.0
    total: float = 0.0
    currency: str = "INR"
    shipping_address: AddressSchema | None = None
    line_items: list[LineItemSchema] = []


class PostalLookupResponse(BaseModel):
    postal_code: str
    city: str
    province: str
    country: str


class StatusResponse(BaseModel):
    status: str = "ok"

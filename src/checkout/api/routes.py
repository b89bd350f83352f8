"""FastAPI routes for the Checkout domain.

Handlers are plain functions: their adapters block on HTTP, so FastAPI
runs them in its threadpool.
"""

import json

from fastapi import APIRouter, HTTPException
from protean.utils.globals import current_domain

from checkout.address import autofill_address, lookup_postal_code
from checkout.address.address import Address
from checkout.api.schemas import (
    AddLineItemRequest,
    AddressSchema,
    AttributeSchema,
    LineItemSchema,
    PostalLookupResponse,
    RemoveLineItemRequest,
    SessionResponse,
    StatusResponse,
    UpdateAddressRequest,
    UpdateEmailRequest,
    UpdateLineItemRequest,
)
from checkout.session.items import AddLineItem, RemoveLineItem, UpdateLineItemQuantity
from checkout.session.manager import get_session_manager
from checkout.session.session import CheckoutSession

router = APIRouter(prefix="/checkout", tags=["checkout"])


def _session_response(session: CheckoutSession) -> SessionResponse:
    address = session.shipping_address
    return SessionResponse(
        id=str(session.id),
        web_url=session.web_url,
        email=session.email,
        completed=session.is_completed,
        item_count=session.item_count,
        subtotal=session.subtotal or 0.0,
        total=session.total or 0.0,
        currency=session.currency or "INR",
        shipping_address=(
            AddressSchema(**{k: v or "" for k, v in address.to_dict().items() if k in AddressSchema.model_fields})
            if address
            else None
        ),
        line_items=[
            LineItemSchema(
                id=str(item.id),
                variant_id=item.variant_id,
                title=item.title,
                variant_title=item.variant_title,
                quantity=item.quantity,
                unit_price=item.unit_price or 0.0,
                line_total=item.line_total,
                custom_attributes=[AttributeSchema(**attr) for attr in item.attributes],
            )
            for item in session.line_items or []
        ],
    )


@router.get("/session", response_model=SessionResponse)
def get_session() -> SessionResponse:
    return _session_response(get_session_manager().get_or_create_session())


def _resolve(session_id: str | None) -> str:
    """Fall back to the open checkout when the client sends no id."""
    return session_id or str(get_session_manager().get_or_create_session().id)


@router.delete("/session", response_model=StatusResponse)
def invalidate_session(session_id: str | None = None) -> StatusResponse:
    get_session_manager().invalidate(session_id)
    return StatusResponse()


@router.post("/session/items", response_model=SessionResponse)
def add_line_item(body: AddLineItemRequest) -> SessionResponse:
    command = AddLineItem(
        session_id=_resolve(body.session_id),
        variant_id=body.variant_id,
        quantity=body.quantity,
        custom_attributes=json.dumps([attr.model_dump() for attr in body.custom_attributes]),
    )
    session = current_domain.process(command, asynchronous=False)
    return _session_response(session)


@router.put("/session/items", response_model=SessionResponse)
def update_line_item(body: UpdateLineItemRequest) -> SessionResponse:
    command = UpdateLineItemQuantity(
        session_id=_resolve(body.session_id),
        line_item_id=body.line_item_id,
        quantity=body.quantity,
    )
    session = current_domain.process(command, asynchronous=False)
    return _session_response(session)


@router.post("/session/items/remove", response_model=SessionResponse)
def remove_line_item(body: RemoveLineItemRequest) -> SessionResponse:
    command = RemoveLineItem(session_id=_resolve(body.session_id), line_item_id=body.line_item_id)
    session = current_domain.process(command, asynchronous=False)
    return _session_response(session)


@router.put("/session/email", response_model=SessionResponse)
def update_email(body: UpdateEmailRequest) -> SessionResponse:
    return _session_response(get_session_manager().update_email(_resolve(body.session_id), body.email))


@router.put("/session/address", response_model=SessionResponse)
def update_address(body: UpdateAddressRequest) -> SessionResponse:
    address = Address(**body.model_dump(exclude={"autofill", "session_id"}))
    if body.autofill:
        address = autofill_address(address)
    return _session_response(get_session_manager().update_shipping_address(_resolve(body.session_id), address))


@router.get("/postal-codes/{postal_code}", response_model=PostalLookupResponse)
def get_postal_code(postal_code: str) -> PostalLookupResponse:
    location = lookup_postal_code(postal_code)
    if location is None:
        raise HTTPException(status_code=404, detail="Unknown PIN code")
    return PostalLookupResponse(
        postal_code=postal_code,
        city=location.city,
        province=location.province,
        country=location.country,
    )

"""Checkout line item management: commands and handler."""

import json

from protean import handle
from protean.fields import Identifier, Integer, String, Text

from checkout.domain import checkout
from checkout.session.manager import get_session_manager
from checkout.session.session import CheckoutSession


@checkout.command(part_of="CheckoutSession")
class AddLineItem:
    session_id = Identifier(required=True)
    variant_id = String(required=True, max_length=255)
    quantity = Integer(default=1, min_value=1)
    custom_attributes = Text()  # JSON: list of {"key", "value"} or a mapping


@checkout.command(part_of="CheckoutSession")
class UpdateLineItemQuantity:
    session_id = Identifier(required=True)
    line_item_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@checkout.command(part_of="CheckoutSession")
class RemoveLineItem:
    session_id = Identifier(required=True)
    line_item_id = Identifier(required=True)


@checkout.command_handler(part_of=CheckoutSession)
class ManageLineItemsHandler:
    @handle(AddLineItem)
    def add_line_item(self, command):
        attrs = json.loads(command.custom_attributes) if command.custom_attributes else None
        return get_session_manager().add_line_item(
            command.session_id,
            command.variant_id,
            quantity=command.quantity or 1,
            attrs=attrs,
        )

    @handle(UpdateLineItemQuantity)
    def update_line_item_quantity(self, command):
        return get_session_manager().update_line_item_quantity(
            command.session_id,
            command.line_item_id,
            command.quantity,
        )

    @handle(RemoveLineItem)
    def remove_line_item(self, command):
        return get_session_manager().remove_line_item(command.session_id, command.line_item_id)

"""Application tests for line item commands via domain.process()."""

import json

import pytest
from checkout.session.items import AddLineItem, RemoveLineItem, UpdateLineItemQuantity
from protean import current_domain
from protean.exceptions import ValidationError

PEN_STAND = "gid://shopify/ProductVariant/1003"


class TestLineItemCommands:
    def test_add(self, manager):
        session_id = manager.get_or_create_session().id
        session = current_domain.process(
            AddLineItem(
                session_id=session_id,
                variant_id=PEN_STAND,
                quantity=2,
                custom_attributes=json.dumps([{"key": "Engraving", "value": "R.S."}]),
            ),
            asynchronous=False,
        )
        assert session.item_count == 2
        assert session.subtotal == 1799.0
        assert session.line_items[0].attributes == [{"key": "Engraving", "value": "R.S."}]

    def test_update_and_remove(self, manager):
        session_id = manager.get_or_create_session().id
        session = current_domain.process(AddLineItem(session_id=session_id, variant_id=PEN_STAND), asynchronous=False)
        line_item_id = session.line_items[0].id

        session = current_domain.process(
            UpdateLineItemQuantity(session_id=session_id, line_item_id=line_item_id, quantity=3),
            asynchronous=False,
        )
        assert session.item_count == 3

        session = current_domain.process(
            RemoveLineItem(session_id=session_id, line_item_id=line_item_id),
            asynchronous=False,
        )
        assert session.item_count == 0
        assert session.subtotal == 0.0

    def test_zero_quantity_rejected_by_command(self, manager):
        with pytest.raises(ValidationError):
            AddLineItem(session_id="gid://shopify/Checkout/x", variant_id=PEN_STAND, quantity=0)

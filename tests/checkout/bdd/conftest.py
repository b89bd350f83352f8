"""Shared BDD fixtures and step definitions for the Checkout domain."""

import pytest
from pytest_bdd import given, parsers, then


@pytest.fixture()
def variants():
    return {
        "watch box": "gid://shopify/ProductVariant/1001",
        "wallet": "gid://shopify/ProductVariant/1002",
        "pen stand": "gid://shopify/ProductVariant/1003",
    }


@pytest.fixture()
def cart():
    """The checkout the buyer started with and the latest one they see."""
    return {"original": None, "current": None}


@given(parsers.cfparse('a checkout with {quantity:d} "{product}"'))
def checkout_with(manager, cart, variants, quantity, product):
    session = manager.add_line_item(None, variants[product], quantity)
    cart["original"] = cart["current"] = session


@then(parsers.cfparse("the checkout holds {count:d} item"))
@then(parsers.cfparse("the checkout holds {count:d} items"))
def checkout_holds(cart, count):
    assert cart["current"].item_count == count


@then(parsers.cfparse("the subtotal is {amount:f}"))
def subtotal_is(cart, amount):
    assert cart["current"].subtotal == pytest.approx(amount)


@then("it is the same checkout")
def same_checkout(cart):
    assert cart["current"].id == cart["original"].id


@then("it is a new checkout")
def new_checkout(cart):
    assert cart["current"].id != cart["original"].id

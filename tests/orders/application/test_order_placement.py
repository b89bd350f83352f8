"""Tests for OrderPlacement: the checkout is cleared only on success."""

import pytest
from checkout.session.manager import CheckoutSessionManager
from checkout.storefront.fake_adapter import FakeStorefront
from orders.submission.placement import OrderPlacement
from payments.intent.intent import PaymentProof
from shared.store.port import CHECKOUT_ID_KEY


@pytest.fixture()
def storefront():
    return FakeStorefront()


@pytest.fixture()
def session_manager(storefront, store):
    return CheckoutSessionManager(storefront, store)


@pytest.fixture()
def placement(service, session_manager):
    return OrderPlacement(service, session_manager)


@pytest.fixture()
def filled_session(session_manager):
    session = session_manager.get_or_create_session()
    return session_manager.add_line_item(
        str(session.id), "gid://shopify/ProductVariant/1002", 2, {"Engraving": "ASHA"}
    )


def _proof(payment_id):
    return PaymentProof(payment_id=payment_id)


class TestOrderPlacement:
    def test_success_invalidates_checkout(self, placement, session_manager, store, filled_session, shipping_address, buyer):
        result = placement.complete(_proof("pay_Place0001"), shipping_address, buyer)

        assert result.ok
        assert result.summary.total_price == "4998.00"
        assert store.get(CHECKOUT_ID_KEY) is None
        assert session_manager.snapshot is None

        fresh = session_manager.get_or_create_session()
        assert str(fresh.id) != str(filled_session.id)
        assert fresh.item_count == 0

    def test_amount_defaults_to_session_total(self, placement, admin, filled_session, shipping_address, buyer):
        placement.complete(_proof("pay_Place0002"), shipping_address, buyer)
        assert admin.calls[0]["payload"]["order"]["transactions"][0]["amount"] == "4998.00"

    def test_failure_keeps_checkout(self, placement, admin, session_manager, store, filled_session, shipping_address, buyer):
        admin.configure(failure=(500, '{"errors": "Internal error"}'))

        result = placement.complete(_proof("pay_Place0003"), shipping_address, buyer)

        assert not result.ok
        assert result.error.payment_captured is True
        assert store.get(CHECKOUT_ID_KEY) == str(filled_session.id)
        assert session_manager.get_or_create_session().item_count == 2

    def test_validation_failure_keeps_checkout(self, placement, store, filled_session, shipping_address):
        result = placement.complete(_proof("pay_Place0004"), shipping_address, {"email": ""})
        assert result.error.kind == "validation"
        assert store.get(CHECKOUT_ID_KEY) == str(filled_session.id)

    def test_explicit_session(self, placement, session_manager, filled_session, shipping_address, buyer):
        result = placement.complete(_proof("pay_Place0005"), shipping_address, buyer, session=filled_session, amount=5000)
        assert result.ok
        assert session_manager.snapshot is None

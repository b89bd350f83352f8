"""Tests for OrderFulfillmentService.submit_order."""

import pytest
from orders.submission.ledger import OrderLedger
from orders.submission.service import OrderFulfillmentService
from payments.handshake.signature import compute_signature
from payments.intent.intent import PaymentProof
from shared.store.memory import InMemoryStore
from shared.store.port import ORDER_LEDGER_KEY

SECRET = "test_key_secret"


class UnwritableLedgerStore(InMemoryStore):
    def set(self, key: str, value: str) -> None:
        if key == ORDER_LEDGER_KEY:
            raise OSError("disk full")
        super().set(key, value)


def _proof(payment_id="pay_Submit0001", order_id="order_Submit0001", signature=None):
    if signature is None and order_id:
        signature = compute_signature(order_id, payment_id, SECRET)
    return PaymentProof(payment_id=payment_id, intent_id=order_id, signature=signature)


class TestSubmitOrder:
    def test_creates_order(self, service, admin, cart_items, shipping_address, buyer):
        result = service.submit_order(cart_items, _proof(), shipping_address, buyer, amount=4998)

        assert result.ok
        summary = result.summary
        assert summary.name == "#1001"
        assert summary.total_price == "4998.00"
        assert summary.payment_id == "pay_Submit0001"
        assert summary.replayed is False

        [call] = admin.calls
        order = call["payload"]["order"]
        assert order["email"] == "asha@example.com"
        assert order["transactions"][0]["amount"] == "4998.00"
        assert order["shipping_address"]["province_code"] == "MH"

    def test_accepts_gateway_response_dict(self, service, cart_items, shipping_address, buyer):
        response = {
            "razorpay_payment_id": "pay_Submit0002",
            "razorpay_order_id": "order_Submit0002",
            "razorpay_signature": compute_signature("order_Submit0002", "pay_Submit0002", SECRET),
        }
        assert service.submit_order(cart_items, response, shipping_address, buyer).ok

    def test_sandbox_proof_is_submitted_unverified(self, service, admin, cart_items, shipping_address, buyer):
        result = service.submit_order(
            cart_items, _proof(payment_id="pay_Sandbox0001", order_id=None), shipping_address, buyer
        )

        assert result.ok
        attributes = {a["name"]: a["value"] for a in admin.calls[0]["payload"]["order"]["note_attributes"]}
        assert attributes["payment_verified"] == "skipped"
        assert attributes["razorpay_order_id"] == "N/A"

    def test_zero_amount_omits_transaction(self, service, admin, cart_items, shipping_address, buyer):
        service.submit_order(cart_items, _proof(payment_id="pay_Submit0003", order_id=None), shipping_address, buyer, amount=0)
        assert "transactions" not in admin.calls[0]["payload"]["order"]


class TestValidation:
    @pytest.mark.parametrize(
        "field, overrides",
        [
            ("payment_id", {"proof": None}),
            ("payment_id", {"proof": {}}),
            ("cart_items", {"cart": []}),
            ("email", {"buyer": {"email": ""}}),
            ("email", {"buyer": {"email": "not-an-email"}}),
            ("shipping_address", {"address": None}),
        ],
    )
    def test_rejected_before_network(self, service, admin, cart_items, shipping_address, buyer, field, overrides):
        result = service.submit_order(
            overrides.get("cart", cart_items),
            overrides.get("proof", _proof(payment_id="pay_Invalid0001")),
            overrides.get("address", shipping_address),
            overrides.get("buyer", buyer),
        )

        assert not result.ok
        assert result.error.kind == "validation"
        assert result.error.status_code == 400
        assert field in result.error.details
        assert result.error.payment_captured is False
        assert admin.calls == []

    def test_every_problem_is_reported(self, service):
        result = service.submit_order([], None, None, {})
        assert set(result.error.details) == {"payment_id", "cart_items", "email", "shipping_address"}


class TestIdempotency:
    def test_retry_returns_recorded_order(self, service, admin, cart_items, shipping_address, buyer):
        proof = _proof(payment_id="pay_Replay0001", order_id="order_Replay0001")
        first = service.submit_order(cart_items, proof, shipping_address, buyer, amount=4998)
        second = service.submit_order(cart_items, proof, shipping_address, buyer, amount=4998)

        assert second.ok
        assert second.summary.order_id == first.summary.order_id
        assert second.summary.replayed is True
        assert len(admin.calls) == 1

    def test_ledger_is_shared_through_store(self, admin, store, settings, cart_items, shipping_address, buyer):
        proof = _proof(payment_id="pay_Replay0002", order_id="order_Replay0002")
        OrderFulfillmentService(admin, store, settings).submit_order(cart_items, proof, shipping_address, buyer)

        assert OrderLedger(store).get("pay_Replay0002").name == "#1001"
        replay = OrderFulfillmentService(admin, store, settings).submit_order(cart_items, proof, shipping_address, buyer)
        assert replay.summary.replayed is True

    def test_failed_submission_is_not_recorded(self, service, admin, store, cart_items, shipping_address, buyer):
        admin.configure(offline=True)
        service.submit_order(cart_items, _proof(payment_id="pay_Replay0003"), shipping_address, buyer)
        assert OrderLedger(store).get("pay_Replay0003") is None

    def test_replay_with_forged_signature_is_rejected(self, service, admin, cart_items, shipping_address, buyer):
        proof = _proof(payment_id="pay_Replay0004", order_id="order_Replay0004")
        assert service.submit_order(cart_items, proof, shipping_address, buyer).ok

        forged = _proof(payment_id="pay_Replay0004", order_id="order_Replay0004", signature="0" * 64)
        result = service.submit_order(cart_items, forged, shipping_address, buyer)

        assert result.error.kind == "signature"
        assert len(admin.calls) == 1

    def test_ledger_write_failure_still_reports_the_order(self, admin, settings, cart_items, shipping_address, buyer):
        service = OrderFulfillmentService(admin, UnwritableLedgerStore(), settings)

        result = service.submit_order(cart_items, _proof(payment_id="pay_Ledger0001"), shipping_address, buyer)

        assert result.ok
        assert result.summary.name == "#1001"
        assert len(admin.calls) == 1


class TestFailures:
    def test_unconfigured_platform(self, service, admin, cart_items, shipping_address, buyer):
        admin.configure(configured=False)
        result = service.submit_order(cart_items, _proof(payment_id="pay_Config0001"), shipping_address, buyer, amount=4998)

        assert result.error.kind == "configuration"
        assert result.error.payment_captured is True
        assert result.error.amount == "4998.00"
        assert admin.calls == []

    def test_forged_signature(self, service, admin, cart_items, shipping_address, buyer):
        proof = _proof(payment_id="pay_Forged0001", signature="0" * 64)
        result = service.submit_order(cart_items, proof, shipping_address, buyer)

        assert result.error.kind == "signature"
        assert result.error.status_code == 400
        assert admin.calls == []

    def test_platform_rejection(self, service, admin, cart_items, shipping_address, buyer):
        admin.configure(failure=(422, '{"errors": {"line_items": ["is invalid"]}}'))
        result = service.submit_order(cart_items, _proof(payment_id="pay_Reject0001"), shipping_address, buyer, amount=4998)

        error = result.error
        assert error.kind == "platform"
        assert error.status_code == 422
        assert error.message == "line_items: is invalid"
        assert error.details == {"line_items": ["is invalid"]}
        assert error.payment_captured is True
        assert error.payment_id == "pay_Reject0001"
        assert error.is_retryable is False

    def test_network_failure_is_not_retried(self, service, admin, cart_items, shipping_address, buyer):
        admin.configure(offline=True)
        result = service.submit_order(cart_items, _proof(payment_id="pay_Offline0001"), shipping_address, buyer)

        assert result.error.kind == "network"
        assert result.error.payment_captured is True
        assert len(admin.calls) == 1


def test_fetch_order(service, cart_items, shipping_address, buyer):
    summary = service.submit_order(cart_items, _proof(payment_id="pay_Fetch0001"), shipping_address, buyer).summary
    assert service.fetch_order(summary.order_id)["name"] == summary.name
    assert service.fetch_order("999") is None

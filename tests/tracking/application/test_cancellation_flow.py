"""Application tests for buyer cancellation requests."""

from unittest.mock import MagicMock

import pytest
from protean.exceptions import ValidationError
from shared.errors import NetworkError
from shared.store.memory import InMemoryStore
from tracking.status.stage import DeliveryStage

DETAILS = {
    "customer_name": "Asha Rao",
    "customer_email": "asha@example.com",
    "order_total": "₹9,998.00",
    "shipping_address": "12 MG Road, Bengaluru, Karnataka 560001",
}


class _ReadOnlyStore(InMemoryStore):
    def set(self, key, value):
        raise OSError("quota exceeded")


class TestSubmitCancellation:
    def test_records_marks_and_notifies(self, orchestrator, email):
        receipt = orchestrator.submit_cancellation("450789470001", "1001", "Ordered twice", DETAILS)

        assert receipt.request.order_id == "450789470001"
        assert orchestrator.get_cancellation_request("450789470001")["reason"] == "Ordered twice"

        mark = orchestrator.cache.get("450789470001")
        assert mark.stage is DeliveryStage.CANCELLED
        assert mark.is_cancelled is True

        assert receipt.notification.method == "api"
        assert len(email.sent_emails) == 1
        sent = email.sent_emails[0]
        assert sent["to"] == "seller@rootstore.example.com"
        assert sent["subject"] == "[URGENT] Cancellation Request - Order #1001"
        assert sent["reply_to"] == "asha@example.com"
        assert "Ordered twice" in sent["body"]

    def test_email_failure_still_succeeds_with_mailto(self, orchestrator, email):
        email.configure(offline=True)

        receipt = orchestrator.submit_cancellation("450789470001", "1001", "Wrong size", DETAILS)

        assert orchestrator.get_cancellation_request("450789470001") is not None
        assert orchestrator.cache.get("450789470001").is_cancelled is True
        assert receipt.notification.method == "mailto"
        assert receipt.notification.link.startswith("mailto:seller@rootstore.example.com?subject=")
        assert email.sent_emails == []

    def test_rejected_email_falls_back_to_mailto(self, orchestrator, email):
        email.configure(should_succeed=False, failure_reason="Invalid access key")
        receipt = orchestrator.submit_cancellation("450789470001", "1001")
        assert receipt.notification.method == "mailto"
        assert receipt.notification.error == "Invalid access key"

    def test_notifier_error_does_not_undo_the_request(self, store, clock, settings, carrier):
        from tracking.orchestrator import DeliveryTrackingOrchestrator

        notifier = MagicMock()
        notifier.notify_cancellation.side_effect = NetworkError("down")
        orchestrator = DeliveryTrackingOrchestrator(
            carrier=carrier, store=store, clock=clock, notifier=notifier, settings=settings
        )

        receipt = orchestrator.submit_cancellation("450789470001", "1001")
        assert receipt.notification.success is False
        assert receipt.notification.error == "down"
        assert orchestrator.get_cancellation_request("450789470001") is not None

    def test_notification_carries_order_number_and_reason(self, store, clock, settings, carrier):
        from tracking.orchestrator import DeliveryTrackingOrchestrator

        notifier = MagicMock()
        orchestrator = DeliveryTrackingOrchestrator(
            carrier=carrier, store=store, clock=clock, notifier=notifier, settings=settings
        )
        orchestrator.submit_cancellation("450789470001", 1001, "Late", {"customer_name": "Asha"})

        notifier.notify_cancellation.assert_called_once_with(
            {"customer_name": "Asha", "order_number": "1001", "reason": "Late"}
        )

    def test_missing_order_number_is_rejected(self, orchestrator, email):
        with pytest.raises(ValidationError):
            orchestrator.submit_cancellation("450789470001", "")
        assert orchestrator.get_cancellation_request("450789470001") is None
        assert email.sent_emails == []


class TestRequestCancellation:
    def test_returns_true_when_recorded(self, orchestrator):
        assert orchestrator.request_cancellation("450789470001", "1001", "Duplicate") is True
        assert orchestrator.get_cancellation_request("450789470001")["status"] == "pending"

    def test_marks_cancelled_and_notifies_seller(self, orchestrator, email):
        orchestrator.request_cancellation("450789470001", "1001", "Duplicate", DETAILS)

        assert orchestrator.cache.get("450789470001").is_cancelled is True
        [sent] = email.sent_emails
        assert sent["subject"] == "[URGENT] Cancellation Request - Order #1001"
        assert "Duplicate" in sent["body"]

    def test_notification_failure_still_returns_true(self, orchestrator, email):
        email.configure(offline=True)
        assert orchestrator.request_cancellation("450789470001", "1001") is True
        assert orchestrator.cache.get("450789470001").is_cancelled is True

    def test_returns_false_when_store_fails(self, clock, settings, carrier):
        from tracking.orchestrator import DeliveryTrackingOrchestrator

        orchestrator = DeliveryTrackingOrchestrator(
            carrier=carrier, store=_ReadOnlyStore(), clock=clock, settings=settings
        )
        assert orchestrator.request_cancellation("450789470001", "1001") is False

"""Seller notifications.

Best effort only: the email API is tried first and a ``mailto:`` link is
returned when it is unavailable or fails. A notification outcome never
affects the record that triggered it.
"""

from dataclasses import dataclass

import structlog

from notifications.channel import get_email_channel
from notifications.channel.email_port import EmailPort
from notifications.mailto import build_mailto_link
from notifications.templates.cancellation_request import CancellationRequestTemplate
from shared.clock import Clock, system_clock
from shared.config import Settings, get_settings
from shared.errors import NetworkError

logger = structlog.get_logger(__name__)

DEFAULT_REPLY_TO = "no-reply@rootstore.example.com"


@dataclass(frozen=True)
class NotificationOutcome:
    success: bool
    method: str  # "api" or "mailto"
    link: str | None = None
    message_id: str | None = None
    error: str | None = None


class SellerNotifier:
    def __init__(
        self,
        channel: EmailPort | None = None,
        settings: Settings | None = None,
        clock: Clock | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.channel = channel or get_email_channel()
        self.clock = clock or system_clock

    def notify_cancellation(self, details: dict) -> NotificationOutcome:
        context = {
            **details,
            "requested_at": details.get("requested_at") or self.clock.now().strftime("%d/%m/%Y, %H:%M:%S"),
            "store_name": self.settings.store_name,
        }
        message = CancellationRequestTemplate.render(context)
        seller = self.settings.seller_email

        try:
            response = self.channel.send(
                to=seller,
                subject=message["subject"],
                body=message["body"],
                from_name=details.get("customer_name") or "Website Customer",
                reply_to=details.get("customer_email") or DEFAULT_REPLY_TO,
            )
        except NetworkError as exc:
            response = {"status": "failed", "error": str(exc)}

        if response.get("status") == "sent":
            logger.info(
                "Cancellation notification sent",
                order_number=details.get("order_number"),
                message_id=response.get("message_id"),
            )
            return NotificationOutcome(success=True, method="api", message_id=response.get("message_id"))

        error = response.get("error")
        logger.warning(
            "Cancellation notification fell back to mailto",
            order_number=details.get("order_number"),
            error=error,
        )
        return NotificationOutcome(
            success=True,
            method="mailto",
            link=build_mailto_link(seller, message["subject"], message["body"]),
            error=error,
        )

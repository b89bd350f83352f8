"""Web3Forms email adapter.

A single ``POST https://api.web3forms.com/submit`` carrying the access
key, subject, sender display name, reply-to address, body text and
recipient.
"""

import requests
import structlog

from notifications.channel.email_port import EmailPort
from shared.errors import NetworkError

logger = structlog.get_logger(__name__)

WEB3FORMS_URL = "https://api.web3forms.com/submit"


class Web3FormsEmailAdapter(EmailPort):
    def __init__(self, access_key: str, timeout: int = 15) -> None:
        self.access_key = access_key
        self.timeout = timeout

    def send(
        self,
        to: str,
        subject: str,
        body: str,
        from_name: str | None = None,
        reply_to: str | None = None,
    ) -> dict:
        if not self.access_key:
            return {"message_id": None, "status": "failed", "error": "Web3Forms access key is not configured"}

        try:
            response = requests.post(
                WEB3FORMS_URL,
                json={
                    "access_key": self.access_key,
                    "subject": subject,
                    "from_name": from_name or "Website Customer",
                    "email": reply_to,
                    "message": body,
                    "to": to,
                },
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise NetworkError(f"Email API request failed: {exc}") from exc

        if not response.ok:
            logger.warning("Email API rejected message", status=response.status_code)
            return {"message_id": None, "status": "failed", "error": f"HTTP {response.status_code}"}

        try:
            data = response.json()
        except ValueError:
            data = {}
        if data.get("success") is False:
            return {"message_id": None, "status": "failed", "error": data.get("message") or "Rejected"}
        return {"message_id": (data.get("data") or {}).get("id"), "status": "sent"}

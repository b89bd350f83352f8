"""Error taxonomy shared by every bounded context.

Validation problems use protean's ValidationError (a dict of field →
messages) and never reach the network. Everything else raised by ports,
adapters and services derives from StorefrontError.
"""

from collections.abc import Callable
from typing import TypeVar

import structlog

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class StorefrontError(Exception):
    """Base class for non-validation failures."""

    kind = "error"

    def __init__(self, message: str = "", **context) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        return self.message


class ConfigurationError(StorefrontError):
    """Required credentials or settings are missing or unsafe."""

    kind = "configuration"


class SignatureError(StorefrontError):
    """The payment proof failed its cryptographic check. Hard stop."""

    kind = "signature"


class GatewayError(StorefrontError):
    """The payment gateway declined or rejected a request. Retryable by the user."""

    kind = "gateway"


class GatewayUnreachableError(GatewayError):
    """No payment backend is configured or it could not be reached."""


class PlatformError(StorefrontError):
    """The commerce platform rejected a request."""

    kind = "platform"

    def __init__(
        self,
        message: str = "",
        status_code: int | None = None,
        details: dict | None = None,
        **context,
    ) -> None:
        super().__init__(message, **context)
        self.status_code = status_code
        self.details = details

    @property
    def is_retryable(self) -> bool:
        return self.status_code is None or self.status_code >= 500


class SessionUnavailableError(PlatformError):
    """The checkout session is missing or already completed on the platform."""


class NetworkError(StorefrontError):
    """Transient I/O failure talking to an external service."""

    kind = "network"


def retry_once(operation: Callable[[], T], *, operation_name: str = "operation") -> T:
    """Run ``operation``, retrying exactly once on NetworkError.

    Only for idempotent reads. Order submission never goes through here.
    """
    try:
        return operation()
    except NetworkError as exc:
        logger.info("Retrying after network error", operation=operation_name, error=str(exc))
        return operation()

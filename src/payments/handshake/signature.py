"""Payment proof signature verification.

The gateway signs ``<order_id>|<payment_id>`` with HMAC-SHA256 using the
merchant's key secret. When no secret or no signature is available the
check is reported as SKIPPED, which is distinct from INVALID: a skipped
check lets the order through, an invalid one never does.
"""

import hashlib
import hmac
from enum import Enum

import structlog

logger = structlog.get_logger(__name__)


class SignatureCheck(Enum):
    VERIFIED = "verified"
    SKIPPED = "skipped"
    INVALID = "invalid"


def compute_signature(order_id: str, payment_id: str, secret: str) -> str:
    message = f"{order_id}|{payment_id}".encode()
    return hmac.new(secret.encode(), message, hashlib.sha256).hexdigest()


def check_signature(
    order_id: str | None,
    payment_id: str | None,
    signature: str | None,
    secret: str | None,
) -> SignatureCheck:
    if not secret or not signature or not order_id:
        logger.warning(
            "Payment signature verification skipped",
            payment_id=payment_id,
            order_id=order_id,
            has_secret=bool(secret),
            has_signature=bool(signature),
        )
        return SignatureCheck.SKIPPED

    if not payment_id:
        logger.error("Payment signature invalid", order_id=order_id, reason="missing payment id")
        return SignatureCheck.INVALID

    expected = compute_signature(order_id, payment_id, secret)
    if hmac.compare_digest(expected.encode(), signature.encode()):
        logger.info("Payment signature verified", payment_id=payment_id, order_id=order_id)
        return SignatureCheck.VERIFIED

    logger.error("Payment signature invalid", payment_id=payment_id, order_id=order_id)
    return SignatureCheck.INVALID


def verify_signature(
    order_id: str | None,
    payment_id: str | None,
    signature: str | None,
    secret: str | None,
) -> bool:
    """True unless the proof is provably forged. Skipped checks count as passing."""
    return check_signature(order_id, payment_id, signature, secret) is not SignatureCheck.INVALID

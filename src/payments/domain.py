"""Payments bounded context: the payment gateway handshake.

Creates gateway orders (payment intents), hands the buyer to the gateway's
client checkout and validates the signed proof the gateway returns on
success. Order creation on the commerce platform happens elsewhere; this
context only says whether a payment can be trusted.
"""

import structlog
from protean.domain import Domain

payments = Domain(name="payments")

logger = structlog.get_logger(__name__)

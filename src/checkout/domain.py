"""Checkout bounded context: the durable, resumable checkout session.

Owns the lifecycle of the single open checkout resource held by the
commerce platform's Storefront API: create, fetch, resume, mutate and
invalidate. The platform is authoritative; the local side keeps only the
session id and the latest server-confirmed snapshot.
"""

import structlog
from protean.domain import Domain

checkout = Domain(name="checkout")

logger = structlog.get_logger(__name__)

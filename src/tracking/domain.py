"""Tracking bounded context: delivery status after an order is placed.

Normalises carrier and platform status strings into one ordered delivery
stage, caches live lookups for a short window, and layers manual
overrides and buyer cancellation requests on top. Everything here is an
advisory overlay; the platform's own fulfillment state is never changed.
"""

import structlog
from protean.domain import Domain

tracking = Domain(name="tracking")

logger = structlog.get_logger(__name__)

"""Orders bounded context: committing paid carts to the commerce platform.

Maps the local cart into the platform's Admin API order payload, submits
it once per successful payment and classifies the outcome. The platform
owns the resulting order; this side keeps only an idempotency ledger of
payment id to order summary.
"""

import structlog
from protean.domain import Domain

orders = Domain(name="orders")

logger = structlog.get_logger(__name__)

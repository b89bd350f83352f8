"""Root Store FastAPI application.

Headless storefront backend: checkout sessions, payment handshake, order
submission and delivery tracking. Each request is wrapped in the correct
domain context based on URL prefix.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# Domains are initialized at module level so uvicorn workers share them.
from checkout.domain import checkout  # noqa: E402
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from orders.domain import orders  # noqa: E402
from payments.domain import payments  # noqa: E402
from shared.api import register_error_handlers
from shared.logging import add_context, clear_context, configure_logging
from tracking.domain import tracking  # noqa: E402

configure_logging()

checkout.init()
payments.init()
orders.init()
tracking.init()

# ---------------------------------------------------------------------------
# Route-to-domain mapping
# ---------------------------------------------------------------------------
_ROUTE_DOMAIN_MAP = {
    "/checkout": checkout,
    "/payments": payments,
    "/orders": orders,
    "/tracking": tracking,
}


def _resolve_domain(path: str):
    """Return the domain for the given request path, or None."""
    for prefix, domain in _ROUTE_DOMAIN_MAP.items():
        if path.startswith(prefix):
            return domain
    return None


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Root Store API",
    description="Headless storefront: checkout, payments, orders and delivery tracking",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the correct Protean domain context for each request."""
    domain = _resolve_domain(request.url.path)
    clear_context()
    if domain is not None:
        add_context(domain=domain.name, path=request.url.path)
        with domain.domain_context():
            response = await call_next(request)
        return response
    # No domain match: pass through (health check, docs, etc.)
    return await call_next(request)


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from checkout.api import router as checkout_router  # noqa: E402
from orders.api import router as orders_router  # noqa: E402
from payments.api import router as payments_router  # noqa: E402
from tracking.api import router as tracking_router  # noqa: E402

app.include_router(checkout_router)
app.include_router(payments_router)
app.include_router(orders_router)
app.include_router(tracking_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domains": {
                "checkout": {"name": checkout.name},
                "payments": {"name": payments.name},
                "orders": {"name": orders.name},
                "tracking": {"name": tracking.name},
            },
        }
    )

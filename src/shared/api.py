"""HTTP mapping for the shared error taxonomy.

Protean's own handlers (``register_exception_handlers``) cover
ValidationError; this module adds the storefront errors on top.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

from shared.errors import (
    ConfigurationError,
    GatewayError,
    NetworkError,
    PlatformError,
    SignatureError,
    StorefrontError,
)

logger = structlog.get_logger(__name__)


def status_for(exc: StorefrontError) -> int:
    if isinstance(exc, SignatureError):
        return 400
    if isinstance(exc, ConfigurationError):
        return 500
    if isinstance(exc, GatewayError):
        return 502
    if isinstance(exc, PlatformError):
        status = exc.status_code or 502
        # A 200 carrying user errors is still a rejection
        return status if status >= 400 else 422
    if isinstance(exc, NetworkError):
        return 503
    return 500


def error_body(exc: StorefrontError) -> dict:
    body = {"error": exc.kind, "message": exc.message}
    if isinstance(exc, PlatformError) and exc.details:
        body["details"] = exc.details
    if exc.context:
        body["context"] = {k: v for k, v in exc.context.items() if v is not None}
    return body


async def _storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
    status = status_for(exc)
    log = logger.error if status >= 500 else logger.info
    log("Request failed", path=request.url.path, kind=exc.kind, status=status, error=exc.message)
    return JSONResponse(status_code=status, content=error_body(exc))


def register_error_handlers(app: FastAPI) -> None:
    register_exception_handlers(app)
    app.add_exception_handler(StorefrontError, _storefront_error_handler)

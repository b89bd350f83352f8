"""Orders domain API package."""

from orders.api.routes import router

__all__ = ["router"]

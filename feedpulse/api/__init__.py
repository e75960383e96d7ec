"""HTTP layer: routes, request/response schemas and middleware."""

from feedpulse.api.middleware import (
    CORSHeadersMiddleware,
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
    register_exception_handlers,
)
from feedpulse.api.routes import router

__all__ = [
    "CORSHeadersMiddleware",
    "ErrorHandlingMiddleware",
    "RequestLoggingMiddleware",
    "configure_cors",
    "register_exception_handlers",
    "router",
]

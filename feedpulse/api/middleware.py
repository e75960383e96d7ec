"""API middleware - CORS, request logging, and error handling.

# ─── MIDDLEWARE EXECUTION ORDER ───────────────────────────────────────
#
# Starlette middleware is a stack (LIFO - last added, first executed):
#
#   In main.py:
#     app.add_middleware(ErrorHandlingMiddleware)    # innermost
#     app.add_middleware(RequestLoggingMiddleware)
#     configure_cors(app)                            # outermost
#
#   Request flow:
#     Client → CORS → RequestLogging → ErrorHandling → route handler
#
# CORS sits outside everything so that preflight requests never reach the
# router and every response, including 500s, carries the allow-all headers.
#
# Expected errors (FeedbackPulseError subclasses, Starlette HTTP errors,
# request validation) are rendered by the exception handlers registered in
# ``register_exception_handlers``; ErrorHandlingMiddleware only sees what
# nothing else handled and turns it into a 500.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import time

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from feedpulse.api.schemas import ErrorResponse
from feedpulse.utils.errors import FeedbackPulseError, InternalError
from feedpulse.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

_CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET,OPTIONS,PATCH,DELETE,POST,PUT",
    "Access-Control-Allow-Headers": (
        "X-CSRF-Token, X-Requested-With, Accept, Accept-Version, Content-Length, "
        "Content-MD5, Content-Type, Date, X-Api-Version"
    ),
}


def _error_body(error: str, message: str | None = None) -> dict:
    return ErrorResponse(error=error, message=message).model_dump(exclude_none=True)


# ---------------------------------------------------------------------------
# CORS
# ---------------------------------------------------------------------------


class CORSHeadersMiddleware(BaseHTTPMiddleware):
    """Allow-all CORS: stamp headers on every response, answer every OPTIONS.

    Unlike Starlette's ``CORSMiddleware`` this does not depend on the
    request carrying an ``Origin`` header, so plain OPTIONS requests get an
    empty 200 as well.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        if request.method == "OPTIONS":
            response: Response = Response(status_code=200)
        else:
            response = await call_next(request)
        response.headers.update(_CORS_HEADERS)
        return response


def configure_cors(app: FastAPI) -> None:
    """Add the allow-all CORS middleware to the FastAPI application."""
    app.add_middleware(CORSHeadersMiddleware)


# ---------------------------------------------------------------------------
# Request Logging
# ---------------------------------------------------------------------------


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every HTTP request with method, path, status code, and duration."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        start = time.perf_counter()
        response: Response | None = None

        try:
            response = await call_next(request)
            return response
        finally:
            duration_ms = round((time.perf_counter() - start) * 1000, 2)
            status_code = response.status_code if response else 500
            _logger.info(
                "http_request",
                method=request.method,
                path=str(request.url.path),
                status=status_code,
                duration_ms=duration_ms,
            )


# ---------------------------------------------------------------------------
# Error Handling
# ---------------------------------------------------------------------------


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Turn any exception nothing else handled into ``500 {error, message}``.

    Stack traces are logged server-side only.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            _logger.exception(
                "unhandled_error",
                error_type=type(exc).__name__,
                path=str(request.url.path),
            )
            error = InternalError(message=str(exc))
            return JSONResponse(
                status_code=error.status_code,
                content=_error_body("Internal server error", error.message),
            )


async def _feedpulse_error_handler(request: Request, exc: FeedbackPulseError) -> JSONResponse:
    log = _logger.warning if exc.status_code < 500 else _logger.error
    log(
        "application_error",
        error_type=type(exc).__name__,
        message=exc.message,
        provider=exc.provider_name,
        path=str(request.url.path),
    )
    if exc.status_code < 500:
        body = _error_body(exc.message)
    elif isinstance(exc, InternalError):
        body = _error_body("Internal server error", exc.message)
    else:
        body = _error_body(type(exc).__name__, exc.message)
    return JSONResponse(status_code=exc.status_code, content=body)


async def _http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 405:
        error = "Method not allowed"
    else:
        error = str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(error),
        headers=getattr(exc, "headers", None),
    )


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        problems.append(f"{location}: {err.get('msg')}" if location else str(err.get("msg")))
    return JSONResponse(
        status_code=400,
        content=_error_body("Invalid request: " + "; ".join(problems)),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Render every expected error as an ``{error}`` JSON body."""
    app.add_exception_handler(FeedbackPulseError, _feedpulse_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)

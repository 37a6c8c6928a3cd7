"""Global exception handler — maps exceptions to structured JSON responses."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse, Response

logger = logging.getLogger(__name__)

TYPE_MAP = {
    400: "validation_error",
    401: "authentication_error",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
    409: "conflict",
    413: "payload_too_large",
    429: "rate_limit",
    502: "upstream_error",
}


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "unknown")


def _error_response(status: int, error_type: str, message: str, request_id: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status,
        content={
            "status": "error",
            "error": {
                "type": error_type,
                "message": message,
                "request_id": request_id,
            },
        },
        headers=headers,
    )


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        messages = "; ".join(
            f"{'.'.join(str(part) for part in e['loc'])}: {e['msg']}" for e in exc.errors()
        )
        return _error_response(400, "validation_error", messages, _request_id(request))

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        error_type = getattr(exc, "error_type", None) or TYPE_MAP.get(exc.status_code, "http_error")
        if exc.status_code == 502:
            logger.warning("Upstream failure on %s %s: %s", request.method, request.url.path, exc.detail)
        return _error_response(
            exc.status_code, error_type, str(exc.detail), _request_id(request),
            headers=getattr(exc, "headers", None),
        )

    # Last resort for failures raised by the middlewares themselves
    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        return unhandled_error_response(request, exc)


def unhandled_error_response(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path, exc_info=exc)
    if request.app.state.settings.is_production:
        message = "An unexpected error occurred"
    else:
        message = str(exc) or exc.__class__.__name__
    return _error_response(500, "internal_error", message, _request_id(request))


class UnhandledErrorMiddleware(BaseHTTPMiddleware):
    """Innermost middleware: turns handler crashes into a 500 that still passes
    back through the header, CORS and request-id middlewares."""

    async def dispatch(self, request: Request, call_next) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            return unhandled_error_response(request, exc)

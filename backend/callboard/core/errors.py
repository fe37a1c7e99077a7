"""Error kinds surfaced by the HTTP layer.

Every failure a handler can report is one of the classes below. Each carries
the fixed HTTP status it maps to and the generic message shown to clients;
the raw error text travels in ``str(exc)``.
"""
import logging

from fastapi import Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class CallboardError(Exception):
    status_code = 500
    message = "Request failed"

    def __init__(self, detail: str, message: str | None = None) -> None:
        super().__init__(detail)
        if message:
            self.message = message


class ValidationError(CallboardError):
    status_code = 400
    message = "Invalid request"


class UpstreamAuthError(CallboardError):
    status_code = 502
    message = "RingCentral authentication failed"


class UpstreamRequestError(CallboardError):
    status_code = 502
    message = "RingCentral request failed"


class PersistenceError(CallboardError):
    status_code = 500
    message = "Error processing webhook"


def error_envelope(exc: CallboardError) -> dict:
    return {"success": False, "message": exc.message, "error": str(exc)}


async def callboard_error_handler(request: Request, exc: CallboardError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s: %s", request.method, request.url.path, type(exc).__name__, exc)
    else:
        logger.warning("%s %s rejected: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=exc.status_code, content=error_envelope(exc))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "%s %s crashed: %s", request.method, request.url.path, type(exc).__name__, exc_info=exc
    )
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "message": "Internal server error",
            "error": f"{type(exc).__name__}: {exc}",
        },
    )

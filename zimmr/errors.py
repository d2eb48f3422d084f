"""
API error taxonomy and the JSON error envelope.

Every error leaves the service as ``{"error": <message>}`` with the status code
of its class. Upstream and tenant-resolution failures keep their cause for the
server log but only return a generic message.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

logger = logging.getLogger(__name__)


class ApiError(Exception):
    status_code = 500
    default_message = "Server error processing your request"

    def __init__(self, message: Optional[str] = None, cause: Optional[BaseException] = None):
        self.message = message or self.default_message
        self.cause = cause
        super().__init__(self.message)


class UnauthenticatedError(ApiError):
    status_code = 401
    default_message = "Unauthorized"


class ForbiddenError(ApiError):
    status_code = 403
    default_message = "Forbidden"


class NotFoundError(ApiError):
    status_code = 404
    default_message = "Not found"


class ValidationFailure(ApiError):
    status_code = 400
    default_message = "Invalid request"


class UpstreamError(ApiError):
    status_code = 500
    default_message = "Server error processing your request"


class TenantResolutionError(ApiError):
    """Both lookup and creation of the craftsman row failed"""

    status_code = 500
    default_message = "Failed to retrieve or create craftsman profile"

    def __init__(self, step: str, cause: Optional[BaseException] = None, not_found: bool = False):
        self.step = step
        if not_found:
            # Creation conflicted but no row is visible to this principal
            self.status_code = 404
            super().__init__("Craftsman profile not found", cause=cause)
        else:
            super().__init__(cause=cause)


def error_response(message: str, status_code: int, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


async def api_error_handler(request: Request, exc: ApiError):
    if exc.status_code >= 500:
        logger.error(
            f"{request.method} {request.url.path} - {type(exc).__name__}: {exc.message}"
            + (f" (cause: {type(exc.cause).__name__}: {exc.cause})" if exc.cause else "")
        )
    else:
        logger.info(f"{request.method} {request.url.path} - {exc.status_code}: {exc.message}")
    return error_response(exc.message, exc.status_code)


async def http_exception_handler(request: Request, exc: HTTPException):
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return error_response(message, exc.status_code, headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Missing Authorization headers become 401; body and query problems become a
    400 naming the offending field.
    """
    errors = exc.errors()
    for error in errors:
        if error.get("loc") and "authorization" in str(error.get("loc")).lower():
            logger.warning(f"Authentication failed for {request.url.path}: missing Authorization header")
            return error_response("Unauthorized", 401)

    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path"))
    reason = first.get("msg", "invalid value")
    message = f"Invalid field '{field}': {reason}" if field else f"Invalid request: {reason}"
    logger.warning(f"Validation error for {request.url.path}: {errors}")
    return error_response(message, 400)


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"{request.method} {request.url.path} - Unhandled {type(exc).__name__}: {exc}")
    return error_response(UpstreamError.default_message, 500)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

"""Exception handlers that render failures in the ``{"success": false, ...}`` envelope."""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from farmer_social.core.errors import AppError, UnexpectedError, ValidationError
from farmer_social.schemas.common import ErrorResponse

logger = logging.getLogger(__name__)

_HTTP_ERROR_KINDS = {
    status.HTTP_400_BAD_REQUEST: "ValidationError",
    status.HTTP_401_UNAUTHORIZED: "AuthenticationError",
    status.HTTP_403_FORBIDDEN: "AuthorizationError",
    status.HTTP_404_NOT_FOUND: "NotFoundError",
}


def _render(status_code: int, body: ErrorResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


def error_response(err: AppError) -> JSONResponse:
    """Build the JSON response for a domain error."""
    return _render(err.status_code, ErrorResponse(error=err.error, message=err.message))


def _format_validation_error(error: dict) -> str:
    location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
    message = error.get("msg", "Invalid value")
    return f"{location}: {message}" if location else message


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return error_response(exc)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [_format_validation_error(error) for error in exc.errors()]
    return _render(
        ValidationError.status_code,
        ErrorResponse(error=ValidationError.error, message="Validation failed", errors=errors),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    kind = _HTTP_ERROR_KINDS.get(exc.status_code, "HTTPError")
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    if exc.status_code == status.HTTP_404_NOT_FOUND and message == "Not Found":
        message = f"Route {request.url.path} not found"
    response = _render(exc.status_code, ErrorResponse(error=kind, message=message))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    body = ErrorResponse(
        error=UnexpectedError.error,
        message=UnexpectedError.default_message,
        detail=repr(exc) if request.app.state.settings.debug else None,
    )
    return _render(UnexpectedError.status_code, body)


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the envelope handlers to ``app``."""
    app.add_exception_handler(AppError, app_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, request_validation_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unhandled_exception_handler)

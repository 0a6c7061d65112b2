"""
Custom Exception Handlers for API Responses

Every error leaves the API in the same envelope:
``{"success": false, "error": {"code", "message", "details"?}}``.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import AppError

logger = logging.getLogger(__name__)


def error_response(
    status_code: int,
    code: str,
    message: str,
    details: Optional[Any] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    """Build the uniform error envelope."""
    error: Dict[str, Any] = {"code": code, "message": message}
    if details is not None:
        error["details"] = details
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": error},
        headers=headers,
    )


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Render an AppError with its own status, code and details."""
    if exc.status_code >= 500:
        logger.error(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
    else:
        logger.debug(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
    return error_response(exc.status_code, exc.code, exc.message, exc.details, exc.headers)


def _format_validation_errors(errors: List[Dict[str, Any]]) -> List[Dict[str, str]]:
    formatted = []
    for error in errors:
        # Drop the leading "body"/"query"/"path" segment
        loc = [str(part) for part in error.get("loc", ())]
        if loc and loc[0] in ("body", "query", "path", "header"):
            loc = loc[1:]
        formatted.append({"path": ".".join(loc), "message": error.get("msg", "Invalid value")})
    return formatted


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle request validation errors as 400 VALIDATION_ERROR."""
    return error_response(
        400,
        "VALIDATION_ERROR",
        "Validation failed",
        {"errors": _format_validation_errors(list(exc.errors()))},
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle routing and framework HTTP errors."""
    if exc.status_code == 404:
        return error_response(404, "NOT_FOUND", "Route not found")
    if exc.status_code == 405:
        return error_response(
            405, "METHOD_NOT_ALLOWED", f"Method {request.method} not allowed", headers=exc.headers
        )

    message = exc.detail if isinstance(exc.detail, str) else f"HTTP {exc.status_code} error"
    return error_response(exc.status_code, f"HTTP_{exc.status_code}", message, headers=exc.headers)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort: log the failure and hide its details from the client."""
    logger.error(
        f"Unhandled exception on {request.method} {request.url.path}: {type(exc).__name__}: {exc}",
        exc_info=exc,
    )
    return error_response(500, "INTERNAL_ERROR", "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

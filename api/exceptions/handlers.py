"""
MODULE_DESCRIPTION: Exception Handlers - Centralized Error Processing for FastAPI

===================================================================================
PURPOSE AND OVERVIEW
===================================================================================

This module provides centralized exception handling for the Wellness Sessions
API. Every error raised inside a route is converted into the failure envelope

    {"success": false, "kind": ..., "code": ..., "message": ..., "errors"?: {...}}

with the HTTP status of its kind, so clients categorize failures the same way
regardless of which layer produced them.

Exception Handler Types:
    1. api_error_handler: ApiError raised by routes         -> status of its kind
    2. validation_exception_handler: RequestValidationError -> 400 validation
    3. http_exception_handler: HTTPException                -> kind from status
    4. store_error_handler: persistence errors              -> 404 / 403 / 409
    5. value_error_handler: ValueError                      -> 400 validation
    6. general_exception_handler: anything else             -> 500 server

===================================================================================
AUTHENTICATION DEBUGGING
===================================================================================

401 responses log the request URL, method, client IP and (with
print__token_debug enabled) the request headers. The Authorization and Cookie
headers carry the session token and are printed as "[redacted]".

===================================================================================
SECURITY CONSIDERATIONS
===================================================================================

500 responses carry a generic message. The exception text and traceback are
only returned when DEBUG_TRACEBACK=1 (see api.helpers.traceback_json_response).
"""

# CRITICAL: Set Windows event loop policy FIRST, before any other imports
# This must be the very first thing that happens to fix psycopg compatibility
import sys

if sys.platform == "win32":
    import asyncio

    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

# Load environment variables early
from dotenv import load_dotenv

load_dotenv()

# Standard imports
from typing import Dict

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.helpers import error_response, traceback_json_response
from api.utils.debug import print__debug, print__token_debug, print__validation_debug
from editor.result import ApiError, Err, ErrorKind
from persistence.errors import ConflictError, ForbiddenError, NotFoundError, StoreError


# ==============================================================================
# HELPERS
# ==============================================================================


REDACTED_HEADERS = ("authorization", "cookie")


def _redacted_headers(request: Request) -> Dict[str, str]:
    """Request headers safe for debug output; credentials are masked."""
    return {
        name: "[redacted]" if name.lower() in REDACTED_HEADERS else value
        for name, value in request.headers.items()
    }


def _field_errors_from_pydantic(errors) -> Dict[str, str]:
    """Collapse pydantic error entries into one message per field."""
    field_errors: Dict[str, str] = {}
    for error in jsonable_encoder(errors):
        loc = [str(part) for part in error.get("loc", []) if part not in ("body", "query", "path")]
        field = loc[0] if loc else "body"
        field_errors.setdefault(field, error.get("msg") or "Invalid value")
    return field_errors


# ==============================================================================
# EXCEPTION HANDLERS
# ==============================================================================


async def api_error_handler(_request: Request, exc: ApiError):
    """Render an ApiError raised by a route."""
    print__debug(f"ApiError: {exc.error.kind.value}: {exc.error.message}")
    return error_response(exc.error)


async def validation_exception_handler(_request: Request, exc: RequestValidationError):
    """Handle request body/query validation errors as a 400 validation envelope.

    Field names come from the first element of each error location, so the
    client can map them back onto form fields; list indexes and union
    members further down the location are dropped.
    """
    print__validation_debug(f"Request validation error: {exc.errors()}")
    field_errors = _field_errors_from_pydantic(exc.errors())
    message = next(iter(field_errors.values()), "Validation failed")
    return error_response(Err(ErrorKind.VALIDATION, message, field_errors))


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions with extra tracing for 401 errors."""
    if exc.status_code == 401:
        client_ip = request.client.host if request.client else "unknown"
        print__token_debug(f"🚨 HTTP 401 UNAUTHORIZED: {exc.detail}")
        print__token_debug(f"🚨 HTTP 401 TRACE: Request URL: {request.url}")
        print__token_debug(f"🚨 HTTP 401 TRACE: Request method: {request.method}")
        print__token_debug(f"🚨 HTTP 401 TRACE: Request headers: {_redacted_headers(request)}")
        print__token_debug(f"🚨 HTTP 401 CLIENT: IP address: {client_ip}")
    elif exc.status_code >= 400:
        print__debug(
            f"🚨 HTTP {exc.status_code} ERROR: {exc.detail} ({request.method} {request.url})"
        )

    message = exc.detail if isinstance(exc.detail, str) else ""
    response = error_response(
        Err(ErrorKind.from_status(exc.status_code), message, status=exc.status_code)
    )
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def store_error_handler(_request: Request, exc: StoreError):
    """Map persistence errors onto not_found / authorization / conflict."""
    if isinstance(exc, NotFoundError):
        kind = ErrorKind.NOT_FOUND
    elif isinstance(exc, ForbiddenError):
        kind = ErrorKind.AUTHORIZATION
    elif isinstance(exc, ConflictError):
        kind = ErrorKind.CONFLICT
    else:
        kind = ErrorKind.SERVER
    print__debug(f"StoreError: {type(exc).__name__}: {exc}")
    return error_response(Err(kind, str(exc)))


async def value_error_handler(_request: Request, exc: ValueError):
    """Handle ValueError exceptions as 400 validation failures."""
    print__debug(f"ValueError: {str(exc)}")
    return error_response(Err(ErrorKind.VALIDATION, str(exc)))


async def general_exception_handler(_request: Request, exc: Exception):
    """Handle unexpected exceptions (500 Internal Server Error)."""
    print__debug(f"Unexpected error: {type(exc).__name__}: {str(exc)}")
    debug_response = traceback_json_response(exc, status_code=500)
    if debug_response:
        return debug_response
    return error_response(Err(ErrorKind.SERVER, "Internal server error"))


def register_exception_handlers(app: FastAPI) -> None:
    """Attach all handlers to ``app``."""
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(StoreError, store_error_handler)
    app.add_exception_handler(ValueError, value_error_handler)
    app.add_exception_handler(Exception, general_exception_handler)

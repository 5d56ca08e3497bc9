"""
MODULE_DESCRIPTION: Tagged Result Type - One Error Taxonomy For Client And Server

===================================================================================
PURPOSE AND OVERVIEW
===================================================================================

Every API response of the Wellness Sessions service is either a success or a
categorized failure. This module defines that shape once:

    Ok(data, message)                     -> {"success": true, **data, "message"?}
    Err(kind, message, field_errors, ...) -> {"success": false, "kind", "code",
                                              "message", "errors"?}

The FastAPI exception handlers render Err values into JSON, and the HTTP client
parses JSON (plus the status code) back into Ok/Err. Both sides share ErrorKind,
so retry and notification decisions are made on the same categories.

===================================================================================
ERROR KINDS
===================================================================================

    kind            status  code              retryable
    validation      400     VALIDATION_ERROR  no
    authentication  401     UNAUTHORIZED      no
    authorization   403     FORBIDDEN         no
    not_found       404     NOT_FOUND         no
    conflict        409     CONFLICT          no
    network         0       NETWORK_ERROR     yes
    server          500     INTERNAL_ERROR    yes
    unknown         500     UNKNOWN_ERROR     no
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Union


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    NETWORK = "network"
    SERVER = "server"
    UNKNOWN = "unknown"

    @property
    def status_code(self) -> int:
        return _KIND_STATUS[self]

    @property
    def code(self) -> str:
        return _KIND_CODE[self]

    @property
    def retryable(self) -> bool:
        return self in (ErrorKind.NETWORK, ErrorKind.SERVER)

    @classmethod
    def from_status(cls, status_code: int) -> "ErrorKind":
        """Categorize an HTTP status code."""
        if status_code == 400 or status_code == 422:
            return cls.VALIDATION
        if status_code == 401:
            return cls.AUTHENTICATION
        if status_code == 403:
            return cls.AUTHORIZATION
        if status_code == 404:
            return cls.NOT_FOUND
        if status_code == 409:
            return cls.CONFLICT
        if status_code >= 500:
            return cls.SERVER
        return cls.UNKNOWN


_KIND_STATUS = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.AUTHENTICATION: 401,
    ErrorKind.AUTHORIZATION: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.NETWORK: 0,
    ErrorKind.SERVER: 500,
    ErrorKind.UNKNOWN: 500,
}

_KIND_CODE = {
    ErrorKind.VALIDATION: "VALIDATION_ERROR",
    ErrorKind.AUTHENTICATION: "UNAUTHORIZED",
    ErrorKind.AUTHORIZATION: "FORBIDDEN",
    ErrorKind.NOT_FOUND: "NOT_FOUND",
    ErrorKind.CONFLICT: "CONFLICT",
    ErrorKind.NETWORK: "NETWORK_ERROR",
    ErrorKind.SERVER: "INTERNAL_ERROR",
    ErrorKind.UNKNOWN: "UNKNOWN_ERROR",
}

# Fallback messages when a failed response carries none
_DEFAULT_MESSAGES = {
    ErrorKind.VALIDATION: "Validation failed",
    ErrorKind.AUTHENTICATION: "Please log in to continue",
    ErrorKind.AUTHORIZATION: "You do not have permission to perform this action",
    ErrorKind.NOT_FOUND: "The requested resource was not found",
    ErrorKind.CONFLICT: "The resource already exists",
    ErrorKind.NETWORK: "Network error. Please check your connection and try again.",
    ErrorKind.SERVER: "Server error. Please try again later.",
    ErrorKind.UNKNOWN: "An unexpected error occurred",
}


@dataclass
class Ok:
    data: Dict[str, Any] = field(default_factory=dict)
    message: Optional[str] = None
    status: int = 200

    ok = True

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"success": True, **self.data}
        if self.message:
            payload["message"] = self.message
        return payload


@dataclass
class Err:
    kind: ErrorKind
    message: str = ""
    field_errors: Dict[str, str] = field(default_factory=dict)
    status: Optional[int] = None

    ok = False

    def __post_init__(self):
        if not self.message:
            self.message = _DEFAULT_MESSAGES[self.kind]
        if self.status is None:
            self.status = self.kind.status_code

    @property
    def code(self) -> str:
        return self.kind.code

    @property
    def retryable(self) -> bool:
        return self.kind.retryable

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "success": False,
            "kind": self.kind.value,
            "code": self.code,
            "message": self.message,
        }
        if self.field_errors:
            payload["errors"] = dict(self.field_errors)
        return payload


Result = Union[Ok, Err]


class ApiError(Exception):
    """Raised to abort a request (server) or an unwrap (client) with an Err."""

    def __init__(self, error: Err):
        super().__init__(error.message)
        self.error = error

    @classmethod
    def of(
        cls,
        kind: ErrorKind,
        message: str = "",
        field_errors: Optional[Dict[str, str]] = None,
    ) -> "ApiError":
        return cls(Err(kind, message, field_errors or {}))


def from_response(status_code: int, payload: Any) -> Result:
    """Parse a decoded JSON body plus its HTTP status into a Result."""
    body = payload if isinstance(payload, dict) else {}

    if 200 <= status_code < 300 and body.get("success", True) is not False:
        data = {k: v for k, v in body.items() if k not in ("success", "message")}
        return Ok(data=data, message=body.get("message"), status=status_code)

    kind = None
    if body.get("kind"):
        try:
            kind = ErrorKind(body["kind"])
        except ValueError:
            kind = None
    if kind is None:
        kind = ErrorKind.from_status(status_code)

    message = body.get("message") or body.get("detail")
    if not isinstance(message, str):
        message = ""
    errors = body.get("errors") if isinstance(body.get("errors"), dict) else {}
    return Err(kind, message, errors, status=status_code)


def unwrap(result: Result) -> Dict[str, Any]:
    """Return the data of an Ok, raise ApiError for an Err."""
    if isinstance(result, Err):
        raise ApiError(result)
    return result.data

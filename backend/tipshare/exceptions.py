"""
TipShare Backend: Custom Exception Hierarchy
==============================================

What:  Application-specific exceptions, each carrying a status classification.
Why:   Services report failures without knowing about HTTP; the boundary
       (exception handlers in main.py) is the only place that maps a
       classification to a status code.
How:   Each exception class carries a message and optional context dict.
       The message is safe to show to the client. The context is logged only.
Who:   Raised by services and the store; caught by global handlers.

Exception Hierarchy:
    TipShareError (base)
    ├── ValidationError      → BAD_REQUEST   → 400
    ├── ConflictError        → CONFLICT      → 400
    ├── UnauthorizedError    → UNAUTHORIZED  → 401
    ├── NotFoundError        → NOT_FOUND     → 404
    └── StoreError           → INTERNAL      → 500

Note on NotFoundError:
    "Tip does not exist" and "tip belongs to someone else" share this one
    category. The caller can never tell the two apart.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    """Status classification attached to every application error."""

    BAD_REQUEST = "bad_request"
    CONFLICT = "conflict"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
    INTERNAL = "internal"


# Transport mapping used by the HTTP boundary
HTTP_STATUS_BY_KIND: Dict[ErrorKind, int] = {
    ErrorKind.BAD_REQUEST: 400,
    ErrorKind.CONFLICT: 400,
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.INTERNAL: 500,
}


class TipShareError(Exception):
    """
    Base exception for all TipShare application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
        kind:     Status classification, overridden by each subclass
    """

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return HTTP_STATUS_BY_KIND[self.kind]


class ValidationError(TipShareError):
    """
    Raised when a required field is missing or empty.

    When:    Register/login without username or password, tip without title,
             update/delete without id, malformed request body.
    HTTP:    400 Bad Request
    """

    kind = ErrorKind.BAD_REQUEST

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class ConflictError(TipShareError):
    """
    Raised when a write would break a uniqueness invariant.

    When:    Registering a username that already exists.
    HTTP:    400 Bad Request (the browser client treats it as a bad request)
    """

    kind = ErrorKind.CONFLICT

    def __init__(
        self,
        message: str = "Username already taken",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class UnauthorizedError(TipShareError):
    """
    Raised when the caller's identity cannot be established.

    When:    Wrong credentials at login; missing, malformed, forged or
             expired bearer token on a protected route.
    HTTP:    401 Unauthorized (with WWW-Authenticate: Bearer)
    """

    kind = ErrorKind.UNAUTHORIZED

    def __init__(
        self,
        message: str = "Invalid username or password",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(TipShareError):
    """
    Raised when a record is absent OR not owned by the caller.

    HTTP:    404 Not Found, with a message that never reveals which case applied.
    """

    kind = ErrorKind.NOT_FOUND

    def __init__(
        self,
        message: str = "Tip not found or not yours",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class StoreError(TipShareError):
    """
    Raised when the persisted document cannot be read, parsed or written.

    When:    Permission denied, disk full, invalid JSON on disk, records that
             do not match the expected shape.
    HTTP:    500 Internal Server Error

    Security Note:
        The message returned to the client is always generic. File paths and
        OS error text only travel in `context`, which is logged server-side.
    """

    kind = ErrorKind.INTERNAL

    def __init__(
        self,
        message: str = "A storage error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)

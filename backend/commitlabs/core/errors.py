"""Error Hierarchy — typed, categorized exceptions for every API failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
      and an HTTP status
    - Errors are the only failure signal from validators/services — no sentinel returns
    - to_response() produces the uniform failure envelope
    - normalize_error() maps anything outside the hierarchy to INTERNAL_ERROR (500)
      and never leaks its message unless expose_internal is set

Design Decisions:
    - Single hierarchy with CommitLabsError base: one global handler catches all
      (ADR: uniform error shape)
    - Closed taxonomy: seven kinds, no ad-hoc status codes at call sites
"""

from enum import Enum
from typing import Any


GENERIC_INTERNAL_MESSAGE = "An unexpected error occurred."


class ErrorSeverity(str, Enum):
    """Error severity for observability."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and logging."""
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    RATE_LIMIT = "rate_limit"
    INTERNAL = "internal"


class CommitLabsError(Exception):
    """Base exception for all CommitLabs API errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        http_status: int = 500,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.http_status = http_status
        self.details = details

    def to_response(self) -> dict:
        """Convert to the standardized failure envelope."""
        error: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            error["details"] = self.details
        return {"success": False, "error": error}


# ─── Client Errors (400-level) ──────────────────────────────────

class ValidationError(CommitLabsError):
    """Request input failed validation."""
    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        field: str | None = None,
    ):
        if field and not (details and "field" in details):
            details = {**(details or {}), "field": field}
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, 400, details,
        )
        self.field = field


class UnauthorizedError(CommitLabsError):
    """Caller is not authenticated."""
    def __init__(
        self,
        message: str = "Authentication required.",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            message, "UNAUTHORIZED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, 401, details,
        )


class ForbiddenError(CommitLabsError):
    """Caller is authenticated but not allowed to perform the action."""
    def __init__(
        self,
        message: str = "You do not have permission to perform this action.",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            message, "FORBIDDEN", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, 403, details,
        )


class NotFoundError(CommitLabsError):
    """Requested resource does not exist."""
    def __init__(self, resource_type: str, details: dict[str, Any] | None = None):
        super().__init__(
            f"{resource_type} not found.",
            "NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, 404, details,
        )
        self.resource_type = resource_type


class ConflictError(CommitLabsError):
    """Request conflicts with the current state of a resource."""
    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            message, "CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, 409, details,
        )


class TooManyRequestsError(CommitLabsError):
    """Rate limit exceeded — carries Retry-After seconds."""
    def __init__(
        self,
        message: str = "Too many requests. Please wait before trying again.",
        retry_after: int = 60,
    ):
        super().__init__(
            message, "TOO_MANY_REQUESTS", ErrorCategory.RATE_LIMIT,
            ErrorSeverity.WARNING, 429, {"retryAfter": retry_after},
        )
        self.retry_after = retry_after


# ─── Server Errors (500-level) ──────────────────────────────────

class InternalError(CommitLabsError):
    """Unexpected failure. Message is generic unless explicitly exposed."""
    def __init__(
        self,
        message: str = GENERIC_INTERNAL_MESSAGE,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            message, "INTERNAL_ERROR", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, 500, details,
        )


def normalize_error(
    exc: BaseException, expose_internal: bool = False,
) -> CommitLabsError:
    """Map any exception onto the closed taxonomy.

    Known errors pass through unchanged. Everything else becomes
    INTERNAL_ERROR; the original message is only kept when
    expose_internal is True (development builds).
    """
    if isinstance(exc, CommitLabsError):
        return exc
    if expose_internal:
        return InternalError(str(exc) or GENERIC_INTERNAL_MESSAGE)
    return InternalError()

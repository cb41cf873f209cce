"""Error Handlers — turn any exception into a failure envelope response.

Invariants:
    - CommitLabsError → envelope with its own status, code, message, details
    - RequestValidationError → 400 VALIDATION_ERROR with field-level details
    - Framework HTTPException → mapped onto the taxonomy by status code
    - Exception (catch-all) → 500 INTERNAL_ERROR, message hidden outside development
    - Exactly one log line per handled error: warning for 429, error (with
      traceback) for 5xx, info for other 4xx

Design Decisions:
    - error_response() shared by the global handlers and with_api_handler so both
      paths produce byte-identical envelopes
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from commitlabs.core.errors import (
    CommitLabsError,
    ConflictError,
    ForbiddenError,
    InternalError,
    NotFoundError,
    TooManyRequestsError,
    UnauthorizedError,
    ValidationError,
    normalize_error,
)
from commitlabs.schemas.envelope import fail

logger = logging.getLogger(__name__)


def _expose_internal(request: Request | None) -> bool:
    settings = getattr(request.app.state, "settings", None) if request else None
    return bool(settings and settings.is_development)


def _log_error(
    request: Request | None, error: CommitLabsError, exc: BaseException,
) -> None:
    path = request.url.path if request else None
    extra = {
        "path": path,
        "method": request.method if request else None,
        "error_code": error.code,
        "status_code": error.http_status,
    }
    if isinstance(error, TooManyRequestsError):
        logger.warning(f"[429] Rate limit triggered on {path}", extra=extra)
    elif error.http_status >= 500:
        logger.error(
            f"[{error.http_status}] Unhandled error on {path}: {exc}",
            extra=extra,
            exc_info=(type(exc), exc, exc.__traceback__),
        )
    else:
        logger.info(
            f"[{error.http_status}] {error.code} on {path}: {error.message}",
            extra=extra,
        )


def error_response(request: Request | None, exc: BaseException) -> JSONResponse:
    """Normalize, log and render any exception as a failure envelope."""
    error = normalize_error(exc, expose_internal=_expose_internal(request))
    _log_error(request, error, exc)
    return fail(error)


def _error_from_http_exception(exc: StarletteHTTPException) -> CommitLabsError:
    detail = exc.detail if isinstance(exc.detail, str) else None
    if exc.status_code == 401:
        return UnauthorizedError(detail or "Authentication required.")
    if exc.status_code == 403:
        return ForbiddenError(detail or "Forbidden.")
    if exc.status_code == 404:
        return NotFoundError("Resource")
    if exc.status_code == 409:
        return ConflictError(detail or "Conflict.")
    if exc.status_code == 429:
        return TooManyRequestsError()
    if exc.status_code >= 500:
        return InternalError()
    error = ValidationError(detail or "Invalid request.")
    error.http_status = exc.status_code
    return error


def _build_validation_error(exc: RequestValidationError) -> ValidationError:
    return ValidationError(
        "Invalid request data",
        details={
            "errors": [
                {
                    "field": ".".join(str(loc) for loc in e["loc"]),
                    "message": e["msg"],
                    "type": e["type"],
                }
                for e in exc.errors()
            ],
        },
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""

    @app.exception_handler(CommitLabsError)
    async def commitlabs_error_handler(request: Request, exc: CommitLabsError):
        return error_response(request, exc)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        return error_response(request, _build_validation_error(exc))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return error_response(request, _error_from_http_exception(exc))

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details outside development."""
        return error_response(request, exc)

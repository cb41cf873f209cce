"""Response Envelope — uniform success/failure JSON shapes for every route.

Invariants:
    - Success: {"success": true, "data": <payload>}
    - Failure: {"success": false, "error": {"code", "message", "details"?}}
    - 429 failures carry a Retry-After header

Design Decisions:
    - Functions returning JSONResponse over response_model: status code is
      chosen per call (200 default, 201 on create, error status on failure)
"""

from typing import Any

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from commitlabs.core.errors import CommitLabsError, TooManyRequestsError


def ok(data: Any, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    """Wrap a payload in the success envelope."""
    return JSONResponse(
        status_code=status_code,
        content={"success": True, "data": jsonable_encoder(data)},
    )


def fail(error: CommitLabsError) -> JSONResponse:
    """Wrap a taxonomy error in the failure envelope with its HTTP status."""
    headers = None
    if isinstance(error, TooManyRequestsError):
        headers = {"Retry-After": str(error.retry_after)}
    return JSONResponse(
        status_code=error.http_status,
        content=jsonable_encoder(error.to_response()),
        headers=headers,
    )

"""Auth Route — rate-limited authentication entry point."""

from fastapi import APIRouter, Request

from commitlabs.api.dependencies import enforce_rate_limit
from commitlabs.api.handler import with_api_handler
from commitlabs.schemas.envelope import ok

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("")
@with_api_handler
async def authenticate(request: Request):
    await enforce_rate_limit(request, "api/auth")
    # TODO: verify the wallet signature and issue a session cookie + CSRF token
    return ok({"message": "Authentication successful."})

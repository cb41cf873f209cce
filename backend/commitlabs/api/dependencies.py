"""Route Dependencies — access to app-scoped services and per-request helpers.

Invariants:
    - Services and config live on app.state, built once in create_app()
    - Rate limiting runs before any parsing or business logic in a route
    - Rate-limit key is the socket peer unless a trusted proxy is configured
"""

from datetime import datetime, timezone

from fastapi import Request

from commitlabs.config import BackendConfig, Settings
from commitlabs.core.errors import TooManyRequestsError
from commitlabs.core.repository_protocols import RateLimiter
from commitlabs.infrastructure.mock_store import MockDataStore
from commitlabs.services.marketplace import MarketplaceService


def get_settings_from_app(request: Request) -> Settings:
    return request.app.state.settings


def get_backend_config(request: Request) -> BackendConfig:
    return request.app.state.backend_config


def get_marketplace_service(request: Request) -> MarketplaceService:
    return request.app.state.marketplace_service


def get_mock_store(request: Request) -> MockDataStore:
    return request.app.state.mock_store


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def client_key(request: Request) -> str:
    """Socket peer, else "anonymous".

    X-Forwarded-For is client-controlled; its first hop is used only when
    settings.trust_forwarded_for says a reverse proxy sets it.
    """
    settings = getattr(request.app.state, "settings", None)
    if settings is not None and settings.trust_forwarded_for:
        forwarded = request.headers.get("x-forwarded-for", "")
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop
    if request.client and request.client.host:
        return request.client.host
    return "anonymous"


async def enforce_rate_limit(request: Request, route: str) -> str:
    """Raise TooManyRequestsError when the client exceeded its quota for route."""
    limiter: RateLimiter = request.app.state.rate_limiter
    key = client_key(request)
    if not await limiter.check(key, route):
        raise TooManyRequestsError(retry_after=limiter.retry_after(key, route))
    return key

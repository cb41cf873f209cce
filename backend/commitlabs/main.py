"""CommitLabs API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Settings and BackendConfig built once per app in create_app(); request
      code reads them from app.state, never from the environment
    - Global error handlers map every exception onto the failure envelope
    - CORS configured from settings (not hardcoded)

Design Decisions:
    - App factory over a bare module-level app: tests build isolated apps with
      their own Settings, repository and rate limiter
    - Lifespan over @app.on_event: FastAPI recommended pattern
    - No module-level app: importing this module reads no environment or .env.
      Serve with `uvicorn commitlabs.main:create_app --factory`
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from commitlabs.api.error_handlers import register_error_handlers
from commitlabs.api.routes import (
    attestations, auth, commitments, health, marketplace, seed,
)
from commitlabs.config import BackendConfig, Settings, get_settings
from commitlabs.infrastructure.listing_repository import InMemoryListingRepository
from commitlabs.infrastructure.mock_store import MockDataStore
from commitlabs.infrastructure.observability import setup_logging
from commitlabs.infrastructure.rate_limiter import InMemoryRateLimiter
from commitlabs.services.marketplace import MarketplaceService

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application with its app-scoped services."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup/shutdown lifecycle."""
        setup_logging(settings.log_level, settings.log_format)
        logger.info(
            f"CommitLabs API started (environment={settings.environment}, "
            f"chain_writes={settings.chain_writes_enabled})",
        )
        yield
        logger.info("CommitLabs API shutting down")

    app = FastAPI(title="CommitLabs API", version="0.1.0", lifespan=lifespan)

    app.state.settings = settings
    app.state.backend_config = BackendConfig.from_settings(settings)
    app.state.marketplace_service = MarketplaceService(InMemoryListingRepository())
    app.state.rate_limiter = InMemoryRateLimiter(
        settings.rate_limit_max_requests, settings.rate_limit_window_seconds,
    )
    app.state.mock_store = MockDataStore(settings.mock_db_path)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(commitments.router)
    app.include_router(attestations.router)
    app.include_router(marketplace.router)
    app.include_router(seed.router)

    return app

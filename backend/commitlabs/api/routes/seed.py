"""Seed Route — development-only reset of the mock data store.

Invariants:
    - Outside the development environment the route behaves as if absent (404)
"""

from fastapi import APIRouter, Depends, Request

from commitlabs.api.dependencies import get_mock_store, get_settings_from_app
from commitlabs.api.handler import with_api_handler
from commitlabs.config import Settings
from commitlabs.core.errors import NotFoundError
from commitlabs.infrastructure.mock_store import MockDataStore
from commitlabs.schemas.envelope import ok
from commitlabs.services.seed import seed_mock_data

router = APIRouter(prefix="/api/seed", tags=["seed"])


@router.post("")
@with_api_handler
async def seed(
    request: Request,
    settings: Settings = Depends(get_settings_from_app),
    store: MockDataStore = Depends(get_mock_store),
):
    if not settings.is_development:
        raise NotFoundError("Route")
    data = await seed_mock_data(store)
    return ok({
        "message": "Mock data seeded successfully.",
        "commitments": len(data.commitments),
        "attestations": len(data.attestations),
    })

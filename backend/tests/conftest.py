"""Root conftest — shared fixtures: isolated settings, app and HTTP client.

Invariants:
    - Every test gets its own app (fresh listing repository and rate limiter)
    - The mock data store lives in tmp_path, never in the working directory
    - No .env file is read; chain writes are off and no RPC URL is configured

Design Decisions:
    - create_app(settings) over dependency_overrides: all app-scoped state is
      built from Settings, so a fresh Settings gives a fresh app
    - ASGITransport does not run lifespan; create_app sets up state eagerly
"""

import pytest

from commitlabs.main import create_app
from tests.sample_data import client_for, make_settings


@pytest.fixture
def settings(tmp_path):
    return make_settings(tmp_path)


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
async def client(app):
    async with client_for(app) as ac:
        yield ac

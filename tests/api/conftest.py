"""API test fixtures — httpx client over the ASGI app with in-memory components.

Invariants:
    - The lifespan is not run: components are injected via dependency_overrides
    - Repositories share the root fixtures, so tests can inject store failures
    - Overrides cleared after every test
"""

import pytest
from httpx import ASGITransport, AsyncClient

from onboarding.api.dependencies import (
    get_blob_provider, get_config_loader, get_partner_repository,
    get_submission_repository,
)
from onboarding.infrastructure.blob_store import InMemoryBlobStoreProvider
from onboarding.infrastructure.config_loader import ConfigCache, ConfigLoader
from onboarding.main import app


@pytest.fixture
def config_dir(tmp_path):
    (tmp_path / "questionnaires").mkdir()
    return tmp_path


@pytest.fixture
def blob_provider():
    return InMemoryBlobStoreProvider()


@pytest.fixture
async def client(partner_repo, submission_repo, blob_provider, config_dir):
    loader = ConfigLoader(config_dir, ConfigCache())
    app.dependency_overrides[get_partner_repository] = lambda: partner_repo
    app.dependency_overrides[get_submission_repository] = lambda: submission_repo
    app.dependency_overrides[get_config_loader] = lambda: loader
    app.dependency_overrides[get_blob_provider] = lambda: blob_provider

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()

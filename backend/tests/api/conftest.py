"""API test fixtures — FastAPI app driven in-process through httpx.

Design Decisions:
    - ASGITransport instead of a live server: no ports, no lifespan side effects
    - Settings overridden per test through dependency_overrides, never via env
"""

import pytest
from httpx import ASGITransport, AsyncClient

from gencore.config import Settings, get_settings
from gencore.main import app


@pytest.fixture
def settings() -> Settings:
    return Settings(default_max_resources=4, graph_strict_dependencies=False)


@pytest.fixture
async def client(settings):
    """FastAPI test client with settings dependency overridden."""
    app.dependency_overrides[get_settings] = lambda: settings
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()

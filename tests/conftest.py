"""Shared test fixtures."""

import os

# Settings() requires a JWT secret; set it before anything imports config.settings
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("OPERATOR_USER_IDS", '["operator-1"]')
os.environ.setdefault("AUTOBOOK_SCHEDULER_ENABLED", "false")

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from src.main import app  # noqa: E402


@pytest.fixture
async def client() -> AsyncClient:
    """Async HTTP client for testing FastAPI endpoints (lifespan not run)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()

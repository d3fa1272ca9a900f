"""Integration-test fixtures.

Needs a migrated PostgreSQL at DATABASE_URL. Skipped unless RUN_INTEGRATION=1.

All integration tests share a single event loop so that the module-level
SQLAlchemy async engine pool stays valid across the session.
"""

import os
import uuid

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from src.main import app


def pytest_collection_modifyitems(config, items):  # noqa: ARG001
    if os.environ.get("RUN_INTEGRATION") == "1":
        return
    skip = pytest.mark.skip(reason="set RUN_INTEGRATION=1 to run against PostgreSQL")
    for item in items:
        if "integration" in item.nodeid:
            item.add_marker(skip)


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def client() -> AsyncClient:  # type: ignore[override]
    """Session-scoped async HTTP client — keeps the engine pool alive."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def register_user(client: AsyncClient):
    """Factory: register + log in a fresh user, return (user_id, auth headers)."""

    async def _register(prefix: str) -> tuple[str, dict[str, str]]:
        username = f"{prefix}_{uuid.uuid4().hex[:8]}"
        password = "TestPass123"
        reg = await client.post(
            "/api/v1/auth/register",
            json={"username": username, "email": f"{username}@example.com", "password": password},
        )
        assert reg.status_code == 201, reg.text
        login = await client.post(
            "/api/v1/auth/login", json={"username": username, "password": password}
        )
        token = login.json()["data"]["access_token"]
        return reg.json()["data"]["user_id"], {"Authorization": f"Bearer {token}"}

    return _register

"""Integration-test fixtures.

The FastAPI app runs in-process over ASGITransport with the redis-backed
store dependency swapped for the in-memory store, so the full HTTP path
(auth header -> identity -> service -> store) is exercised without redis.
The lifespan hook (redis ping) is not triggered by ASGITransport.
"""

import pytest
from httpx import ASGITransport, AsyncClient

from src.main import app
from src.wl_common.redis_client import get_kv_store


@pytest.fixture
async def client(store) -> AsyncClient:
    app.dependency_overrides[get_kv_store] = lambda: store
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def login(client: AsyncClient):
    """Register (if needed) and log in; returns (user_id, auth headers)."""

    async def _login(name: str) -> tuple[str, dict[str, str]]:
        await client.post("/api/v1/auth/register", json={"name": name, "password": "pw"})
        resp = await client.post("/api/v1/auth/login", json={"name": name, "password": "pw"})
        data = resp.json()["data"]
        return data["user"]["id"], {"Authorization": f"Bearer {data['token']}"}

    return _login

"""Request id correlation between header, envelope and error bodies."""

from httpx import AsyncClient

API = "/api/v1"


class TestRequestId:
    async def test_minted_id_matches_header(self, client: AsyncClient) -> None:
        resp = await client.post(f"{API}/auth/register", json={"name": "alice", "password": "pw"})
        assert resp.json()["request_id"] == resp.headers["X-Request-ID"]
        assert resp.headers["X-Request-ID"].startswith("req_")

    async def test_caller_id_is_kept(self, client: AsyncClient) -> None:
        resp = await client.get(f"{API}/users/ghost", headers={"X-Request-ID": "trace-42"})
        assert resp.status_code == 404
        assert resp.headers["X-Request-ID"] == "trace-42"
        assert resp.json()["request_id"] == "trace-42"

    async def test_unsafe_caller_id_is_replaced(self, client: AsyncClient) -> None:
        resp = await client.get(
            f"{API}/users/ghost", headers={"X-Request-ID": "bad id; drop table"}
        )
        assert resp.headers["X-Request-ID"].startswith("req_")
        assert resp.json()["request_id"] == resp.headers["X-Request-ID"]

    async def test_validation_failure_carries_id(self, client: AsyncClient) -> None:
        resp = await client.post(f"{API}/auth/register", json={})
        assert resp.status_code == 400
        assert resp.json()["request_id"] == resp.headers["X-Request-ID"]

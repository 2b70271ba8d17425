"""Shared test fixtures."""

import os

# Settings() is built at import time and AUTH_SALT has no default
os.environ.setdefault("AUTH_SALT", "test-salt")

from collections.abc import Awaitable, Callable  # noqa: E402

import pytest  # noqa: E402

from src.wl_common.kv_store import KeyPage  # noqa: E402
from src.wl_gateway.user.models import User  # noqa: E402
from src.wl_gateway.user.service import UserService  # noqa: E402


class InMemoryKeyValueStore:
    """Dict-backed KeyValueStore: lexically ordered listing, last key as cursor."""

    def __init__(self) -> None:
        self.data: dict[str, str] = {}

    async def get(self, key: str) -> str | None:
        return self.data.get(key)

    async def put(self, key: str, value: str) -> None:
        self.data[key] = value

    async def delete(self, key: str) -> None:
        self.data.pop(key, None)

    async def list_keys(
        self, prefix: str, limit: int, cursor: str | None = None
    ) -> KeyPage:
        matching = sorted(k for k in self.data if k.startswith(prefix))
        if cursor is not None:
            matching = [k for k in matching if k > cursor]
        page = matching[:limit]
        complete = len(matching) <= limit
        return KeyPage(
            keys=page,
            cursor=None if complete or not page else page[-1],
            list_complete=complete,
        )


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def user_service() -> UserService:
    return UserService()


@pytest.fixture
def register(
    store: InMemoryKeyValueStore, user_service: UserService
) -> Callable[[str], Awaitable[User]]:
    """Register a user with password "pw" and return the stored record."""

    async def _register(name: str) -> User:
        return await user_service.register(None, name, "pw", store)

    return _register

"""Redis client factory and the redis-backed KeyValueStore.

Redis is the only storage engine: every record is a JSON string under a
plain key (see src.wl_common.keys). Prefix listing uses SCAN, whose cursor
is passed through to callers as the opaque pagination cursor.
"""

import re

import redis.asyncio as aioredis

from config.settings import settings
from src.wl_common.errors import ValidationError
from src.wl_common.kv_store import KeyPage

_redis_pool: aioredis.Redis | None = None

_GLOB_SPECIAL = re.compile(r"([\\*?\[\]])")


async def get_redis() -> aioredis.Redis:
    """Get or create the Redis connection pool."""
    global _redis_pool  # noqa: PLW0603
    if _redis_pool is None:
        _redis_pool = aioredis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
        )
    return _redis_pool


async def close_redis() -> None:
    """Close the Redis connection pool."""
    global _redis_pool  # noqa: PLW0603
    if _redis_pool is not None:
        await _redis_pool.aclose()
        _redis_pool = None


class RedisKeyValueStore:
    """KeyValueStore over a single redis database.

    SCAN gives no ordering guarantee and COUNT is only a hint, so a page may
    hold more or fewer keys than `limit`; a key may also show up on two pages
    if it is written during the walk. `list_complete` is True once redis
    returns cursor 0.
    """

    def __init__(self, client: aioredis.Redis) -> None:
        self._client = client

    async def get(self, key: str) -> str | None:
        value = await self._client.get(key)
        return None if value is None else str(value)

    async def put(self, key: str, value: str) -> None:
        await self._client.set(key, value)

    async def delete(self, key: str) -> None:
        await self._client.delete(key)

    async def list_keys(
        self, prefix: str, limit: int, cursor: str | None = None
    ) -> KeyPage:
        match = _GLOB_SPECIAL.sub(r"\\\1", prefix) + "*"
        try:
            position = int(cursor) if cursor else 0
        except ValueError:
            raise ValidationError("Invalid cursor") from None
        if position < 0:
            raise ValidationError("Invalid cursor")
        keys: list[str] = []
        seen: set[str] = set()
        while True:
            position, batch = await self._client.scan(
                cursor=position, match=match, count=limit
            )
            for key in batch:
                if key not in seen:
                    seen.add(key)
                    keys.append(key)
            if position == 0 or len(keys) >= limit:
                break
        return KeyPage(
            keys=keys,
            cursor=str(position) if position != 0 else None,
            list_complete=position == 0,
        )


async def get_kv_store() -> RedisKeyValueStore:
    """FastAPI dependency: the shared redis pool wrapped as a KeyValueStore."""
    return RedisKeyValueStore(await get_redis())

"""User directory and credential vault persistence over the KeyValueStore."""

from src.wl_common.keys import AUTH_PREFIX, auth_key, user_key
from src.wl_common.kv_store import (
    KeyPage,
    KeyValueStore,
    read_page,
    read_record,
    read_record_or_none,
    write_record,
)
from src.wl_gateway.user.models import Credential, User


class UserRepository:
    async def get(self, store: KeyValueStore, user_id: str) -> User:
        return await read_record(store, user_key(user_id), User)

    async def get_or_none(self, store: KeyValueStore, user_id: str) -> User | None:
        return await read_record_or_none(store, user_key(user_id), User)

    async def save(self, store: KeyValueStore, user: User) -> None:
        await write_record(store, user_key(user.id), user)


class CredentialRepository:
    """Keys are already-normalized usernames; callers normalize first."""

    async def get_or_none(
        self, store: KeyValueStore, normalized_name: str
    ) -> Credential | None:
        return await read_record_or_none(store, auth_key(normalized_name), Credential)

    async def save(
        self, store: KeyValueStore, normalized_name: str, credential: Credential
    ) -> None:
        await write_record(store, auth_key(normalized_name), credential)

    async def list_page(
        self,
        store: KeyValueStore,
        name_prefix: str,
        limit: int,
        cursor: str | None,
    ) -> tuple[list[Credential], KeyPage]:
        return await read_page(store, f"{AUTH_PREFIX}{name_prefix}", Credential, limit, cursor)

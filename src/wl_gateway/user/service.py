"""User domain service: registration, login, identity resolution, directory lookups.

All store operations use the injected KeyValueStore. There are no
transactions: registration writes the User and then the Credential as two
independent puts.
"""

import logging
import re

from src.wl_common.errors import AuthError, ConflictError, NotFoundError, ValidationError
from src.wl_common.id_generator import generate_id
from src.wl_common.keys import normalize_username
from src.wl_common.kv_store import KeyValueStore
from src.wl_common.models import EntityRef
from src.wl_gateway.auth.guards import require_identity
from src.wl_gateway.auth.password import hash_password, verify_password
from src.wl_gateway.auth.token_handler import TokenService, token_service
from src.wl_gateway.user.models import Credential, User
from src.wl_gateway.user.persistence import CredentialRepository, UserRepository
from src.wl_gateway.user.schemas import UserListResponse

logger = logging.getLogger(__name__)

_NAME_PATTERN = re.compile(r"^[0-9a-zA-Z]+$")


def _validate_name(name: str) -> None:
    if not _NAME_PATTERN.fullmatch(name):
        raise ValidationError(
            "Name can only include numbers, upper and lowercase characters!"
        )


class UserService:
    """Stateless service; instantiate once, reuse across requests."""

    def __init__(
        self,
        users: UserRepository | None = None,
        credentials: CredentialRepository | None = None,
        tokens: TokenService | None = None,
    ) -> None:
        self._users = users or UserRepository()
        self._credentials = credentials or CredentialRepository()
        self._tokens = tokens or token_service

    async def register(
        self, me: User | None, name: str, password: str, store: KeyValueStore
    ) -> User:
        """Create a User and its Credential.

        The User is written first: a crash before the Credential write leaves
        an unreachable profile but keeps the username free for a retry.
        Two concurrent registrations of the same name can both pass the
        uniqueness check (no compare-and-swap); the later credential wins.
        """
        if me is not None:
            raise ValidationError("Already logged in!")
        _validate_name(name)
        if len(password) == 0:
            raise ValidationError("Password cannot be empty!")

        normalized = normalize_username(name)
        if await self._credentials.get_or_none(store, normalized) is not None:
            raise ConflictError("Name is already in use!")

        user = User(id=generate_id(), name=name, wallets=[])
        await self._users.save(store, user)
        await self._credentials.save(
            store, normalized, Credential(id=user.id, password=hash_password(password))
        )
        logger.info("Registered user: id=%s name=%s", user.id, normalized)
        return user

    async def verify_credentials(
        self, name: str, password: str, store: KeyValueStore
    ) -> User:
        credential = await self._credentials.get_or_none(store, normalize_username(name))
        if credential is None:
            raise NotFoundError("Cannot find this user!")
        if not verify_password(password, credential.password):
            raise AuthError("Wrong password!")
        return await self._users.get(store, credential.id)

    async def login(
        self, me: User | None, name: str, password: str, store: KeyValueStore
    ) -> tuple[User, str]:
        """Check the password and issue a bearer token. Returns (user, token)."""
        if me is not None:
            raise ValidationError("Already logged in!")
        user = await self.verify_credentials(name, password, store)
        return user, self._tokens.issue(user.id)

    async def authenticate(self, token: str, store: KeyValueStore) -> User:
        """Resolve a bearer token to the stored User it names."""
        user_id = self._tokens.verify(token)
        user = await self._users.get_or_none(store, user_id)
        if user is None:
            raise AuthError()
        return user

    async def get_user_by_id(self, user_id: str, store: KeyValueStore) -> EntityRef:
        """Public profile only; the wallet membership cache is never exposed."""
        return (await self._users.get(store, user_id)).ref()

    async def resolve_user_id_by_name(
        self, me: User | None, name: str, store: KeyValueStore
    ) -> str:
        require_identity(me)
        _validate_name(name)
        credential = await self._credentials.get_or_none(store, normalize_username(name))
        if credential is None:
            raise NotFoundError()
        return credential.id

    async def list_users(
        self,
        me: User | None,
        prefix: str,
        limit: int,
        cursor: str | None,
        store: KeyValueStore,
    ) -> UserListResponse:
        require_identity(me)
        credentials, page = await self._credentials.list_page(
            store, normalize_username(prefix), limit, cursor
        )
        users: list[EntityRef] = []
        for credential in credentials:
            try:
                user = await self._users.get_or_none(store, credential.id)
            except ValidationError:
                logger.debug("Skipping corrupt user record: id=%s", credential.id)
                continue
            if user is not None:
                users.append(user.ref())
        return UserListResponse(
            users=users, has_more=not page.list_complete, cursor=page.cursor
        )

    async def list_my_wallets(self, me: User | None, store: KeyValueStore) -> list[EntityRef]:
        me = require_identity(me)
        return (await self._users.get(store, me.id)).wallets

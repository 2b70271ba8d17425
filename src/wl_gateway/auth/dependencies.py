"""FastAPI dependency: get_current_user.

Identity is optional at this layer. No Authorization header (or a non-Bearer
scheme) means an anonymous caller and resolves to None; a Bearer token that
fails verification is an AuthError, never silently anonymous. Services that
need an identity call require_identity() themselves.

Usage in any router:
    from src.wl_gateway.auth.dependencies import get_current_user

    @router.get("/thing")
    async def thing(me: User | None = Depends(get_current_user)):
        ...
"""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.wl_common.kv_store import KeyValueStore
from src.wl_common.redis_client import get_kv_store
from src.wl_gateway.user.models import User
from src.wl_gateway.user.service import UserService

bearer_scheme = HTTPBearer(auto_error=False)

_service = UserService()


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    store: Annotated[KeyValueStore, Depends(get_kv_store)],
) -> User | None:
    if credentials is None:
        return None
    return await _service.authenticate(credentials.credentials, store)

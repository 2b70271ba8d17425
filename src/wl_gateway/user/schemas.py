"""Pydantic request/response schemas for wl_gateway.

Fields are deliberately loose: pattern and emptiness checks happen in
UserService so the HTTP layer and direct callers get the same errors.
All responses are wrapped in ApiResponse at the router layer.
"""

from typing import Any

from src.wl_common.models import CamelModel, EntityRef
from src.wl_gateway.user.models import User


class RegisterRequest(CamelModel):
    name: str = ""
    password: str = ""


class LoginRequest(CamelModel):
    name: str = ""
    password: str = ""


class UserSearchRequest(CamelModel):
    name: str = ""


class UserListRequest(CamelModel):
    prefix: str = ""
    limit: Any = None
    cursor: str | None = None


class LoginResponse(CamelModel):
    token: str
    user: User


class UserIdResponse(CamelModel):
    id: str


class UserListResponse(CamelModel):
    users: list[EntityRef]
    has_more: bool
    cursor: str | None

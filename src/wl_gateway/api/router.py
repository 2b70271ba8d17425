"""Auth and user-directory API routers.

All endpoints return ApiResponse stamped with the request id that
RequestLogMiddleware placed on request.state.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status

from src.wl_common.kv_store import KeyValueStore
from src.wl_common.pagination import parse_limit
from src.wl_common.redis_client import get_kv_store
from src.wl_common.response import ApiResponse, success_response
from src.wl_gateway.auth.dependencies import get_current_user
from src.wl_gateway.user.models import User
from src.wl_gateway.user.schemas import (
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    UserIdResponse,
    UserListRequest,
    UserSearchRequest,
)
from src.wl_gateway.user.service import UserService

router = APIRouter(prefix="/auth", tags=["auth"])
users_router = APIRouter(prefix="/users", tags=["users"])
_service = UserService()

Identity = Annotated[User | None, Depends(get_current_user)]
Store = Annotated[KeyValueStore, Depends(get_kv_store)]


def _respond(request: Request, data: object, message: str = "success") -> ApiResponse:
    resp = success_response(data, request)
    resp.message = message
    return resp


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse,
    summary="User registration",
)
async def register(
    request: Request, body: RegisterRequest, me: Identity, store: Store
) -> ApiResponse:
    user = await _service.register(me, body.name, body.password, store)
    return _respond(request, user.model_dump(by_alias=True), "User registered successfully")


@router.post("/login", response_model=ApiResponse, summary="User login")
async def login(
    request: Request, body: LoginRequest, me: Identity, store: Store
) -> ApiResponse:
    user, token = await _service.login(me, body.name, body.password, store)
    data = LoginResponse(token=token, user=user)
    return _respond(request, data.model_dump(by_alias=True), "Login successful")


@users_router.post("/search", response_model=ApiResponse, summary="Resolve user id by name")
async def search_user(
    request: Request, body: UserSearchRequest, me: Identity, store: Store
) -> ApiResponse:
    user_id = await _service.resolve_user_id_by_name(me, body.name, store)
    return _respond(request, UserIdResponse(id=user_id).model_dump(by_alias=True))


@users_router.post("/list", response_model=ApiResponse, summary="List users by name prefix")
async def list_users(
    request: Request, body: UserListRequest, me: Identity, store: Store
) -> ApiResponse:
    data = await _service.list_users(
        me, body.prefix, parse_limit(body.limit), body.cursor, store
    )
    return _respond(request, data.model_dump(by_alias=True))


@users_router.get("/{user_id}", response_model=ApiResponse, summary="Public user profile")
async def get_user(request: Request, user_id: str, store: Store) -> ApiResponse:
    data = await _service.get_user_by_id(user_id, store)
    return _respond(request, data.model_dump(by_alias=True))

"""Wallet, access and transaction REST API.

Routers only parse payloads and resolve the caller; every access decision
is made by the services. Identity is optional here on purpose: anonymous
callers reach the service, which raises AuthError before touching the store.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query, Request, status

from src.wl_common.kv_store import KeyValueStore
from src.wl_common.pagination import parse_limit
from src.wl_common.redis_client import get_kv_store
from src.wl_common.response import ApiResponse, success_response
from src.wl_gateway.auth.dependencies import get_current_user
from src.wl_gateway.user.models import User
from src.wl_gateway.user.service import UserService
from src.wl_wallet.application.access import AccessControl
from src.wl_wallet.application.ledger import WalletLedger
from src.wl_wallet.application.schemas import (
    AccessRequest,
    CreateTransactionRequest,
    CreateWalletRequest,
    TransactionPatch,
)
from src.wl_wallet.application.transactions import TransactionLog

wallets_router = APIRouter(prefix="/wallets", tags=["wallets"])
public_router = APIRouter(prefix="/public", tags=["public"])
transactions_router = APIRouter(prefix="/transactions", tags=["transactions"])

_ledger = WalletLedger()
_access = AccessControl(ledger=_ledger)
_transactions = TransactionLog(ledger=_ledger)
_users = UserService()

Identity = Annotated[User | None, Depends(get_current_user)]
Store = Annotated[KeyValueStore, Depends(get_kv_store)]


def _respond(request: Request, data: Any) -> ApiResponse:
    return success_response(data, request)


# ---------------------------------------------------------------------------
# Wallets
# ---------------------------------------------------------------------------


@wallets_router.get("", response_model=ApiResponse, summary="Wallets the caller can access")
async def list_my_wallets(request: Request, me: Identity, store: Store) -> ApiResponse:
    wallets = await _users.list_my_wallets(me, store)
    return _respond(request, [w.model_dump(by_alias=True) for w in wallets])


@wallets_router.get("/all", response_model=ApiResponse, summary="Every wallet (full scan)")
async def list_all_wallets(request: Request, me: Identity, store: Store) -> ApiResponse:
    wallets = await _ledger.list_all(me, store)
    return _respond(request, [w.model_dump(by_alias=True) for w in wallets])


@wallets_router.post(
    "", status_code=status.HTTP_201_CREATED, response_model=ApiResponse, summary="Create wallet"
)
async def create_wallet(
    request: Request, body: CreateWalletRequest, me: Identity, store: Store
) -> ApiResponse:
    wallet = await _ledger.create(me, body.name, body.description, body.extra, store)
    return _respond(request, wallet.model_dump(by_alias=True))


@wallets_router.get("/{wallet_id}", response_model=ApiResponse, summary="Wallet (members only)")
async def get_wallet_for_user(
    request: Request, wallet_id: str, me: Identity, store: Store
) -> ApiResponse:
    wallet = await _ledger.get_for_user(me, wallet_id, store)
    return _respond(request, wallet.model_dump(by_alias=True))


@public_router.get(
    "/wallets/{wallet_id}",
    response_model=ApiResponse,
    summary="Wallet lookup without membership check",
)
async def get_wallet(request: Request, wallet_id: str, store: Store) -> ApiResponse:
    # SECURITY: no identity, no access check. Kept for existing clients.
    wallet = await _ledger.get(wallet_id, store)
    return _respond(request, wallet.model_dump(by_alias=True))


@wallets_router.post("/{wallet_id}/close", response_model=ApiResponse, summary="Lock wallet")
async def close_wallet(
    request: Request, wallet_id: str, me: Identity, store: Store
) -> ApiResponse:
    wallet = await _ledger.close(wallet_id, store, me)
    return _respond(request, wallet.model_dump(by_alias=True))


@wallets_router.delete("/{wallet_id}", response_model=ApiResponse, summary="Delete wallet")
async def delete_wallet(
    request: Request, wallet_id: str, me: Identity, store: Store
) -> ApiResponse:
    wallet = await _ledger.delete(me, wallet_id, store)
    return _respond(request, wallet.model_dump(by_alias=True))


@wallets_router.post("/{wallet_id}/access", response_model=ApiResponse, summary="Grant access")
async def grant_access(
    request: Request, wallet_id: str, body: AccessRequest, me: Identity, store: Store
) -> ApiResponse:
    wallet = await _access.grant(me, wallet_id, body.user_id, store)
    return _respond(request, wallet.model_dump(by_alias=True))


@wallets_router.delete(
    "/{wallet_id}/access/{user_id}", response_model=ApiResponse, summary="Revoke access"
)
async def revoke_access(
    request: Request, wallet_id: str, user_id: str, me: Identity, store: Store
) -> ApiResponse:
    wallet = await _access.revoke(me, wallet_id, user_id, store)
    return _respond(request, wallet.model_dump(by_alias=True))


# ---------------------------------------------------------------------------
# Transactions
# ---------------------------------------------------------------------------


@wallets_router.post(
    "/{wallet_id}/transactions",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse,
    summary="Post transaction",
)
async def create_transaction(
    request: Request,
    wallet_id: str,
    body: CreateTransactionRequest,
    me: Identity,
    store: Store,
) -> ApiResponse:
    title = body.title if body.title is not None else body.name
    transaction = await _transactions.create(
        me, wallet_id, body.amount, title, body.extra, store
    )
    return _respond(request, transaction.model_dump(by_alias=True))


@wallets_router.get(
    "/{wallet_id}/transactions", response_model=ApiResponse, summary="Page of transactions"
)
async def list_transactions(
    request: Request,
    wallet_id: str,
    me: Identity,
    store: Store,
    cursor: str | None = Query(None, description="Opaque store cursor from the previous page"),
    limit: str | None = Query(None, description="Items per page (default 5)"),
) -> ApiResponse:
    data = await _transactions.list_for_wallet(me, wallet_id, parse_limit(limit), cursor, store)
    return _respond(request, data.model_dump(by_alias=True))


@transactions_router.get(
    "/mine", response_model=ApiResponse, summary="Transactions created by the caller"
)
async def list_my_transactions(request: Request, me: Identity, store: Store) -> ApiResponse:
    data = await _transactions.list_by_creator(me, store)
    return _respond(request, data.model_dump(by_alias=True))


@transactions_router.get("/{transaction_id}", response_model=ApiResponse)
async def get_transaction(
    request: Request, transaction_id: str, me: Identity, store: Store
) -> ApiResponse:
    transaction = await _transactions.get(me, transaction_id, store)
    return _respond(request, transaction.model_dump(by_alias=True))


@transactions_router.patch("/{transaction_id}", response_model=ApiResponse)
async def update_transaction(
    request: Request,
    transaction_id: str,
    body: TransactionPatch,
    me: Identity,
    store: Store,
) -> ApiResponse:
    transaction = await _transactions.update(me, transaction_id, body, store)
    return _respond(request, transaction.model_dump(by_alias=True))


@transactions_router.delete("/{transaction_id}", response_model=ApiResponse)
async def delete_transaction(
    request: Request, transaction_id: str, me: Identity, store: Store
) -> ApiResponse:
    transaction = await _transactions.delete(me, transaction_id, store)
    return _respond(request, transaction.model_dump(by_alias=True))

"""Pydantic request/response schemas for the wallet and transaction APIs."""

from typing import Any

from src.wl_common.models import CamelModel
from src.wl_wallet.domain.models import Transaction

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class CreateWalletRequest(CamelModel):
    name: str = ""
    description: str = ""
    extra: Any = None


class AccessRequest(CamelModel):
    user_id: str


class CreateTransactionRequest(CamelModel):
    # Amount stays untyped: non-numeric input is coerced to 0, not rejected
    amount: Any = None
    title: str | None = None
    name: str | None = None
    extra: Any = None


class TransactionPatch(CamelModel):
    """Only fields the client actually sent are applied (see model_fields_set)."""

    amount: Any = None
    name: Any = None
    extra: Any = None


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class TransactionPage(CamelModel):
    transactions: list[Transaction]
    has_more: bool
    cursor: str | None


class CreatorTransactions(CamelModel):
    transactions: list[Transaction]

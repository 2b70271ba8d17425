"""Stored wallet-side records.

Wallet.balance is a running float accumulator. It must always equal the sum
of `amount` over the wallet's stored transactions; only TransactionLog
changes it, incrementally, never by rescanning.
"""

from dataclasses import dataclass
from typing import Any

from pydantic import Field

from src.wl_common.models import CamelModel, EntityRef


class Wallet(CamelModel):
    id: str
    name: str
    description: str = ""
    access: list[EntityRef]         # order-preserving, unique by id, never empty
    balance: float = 0.0
    extra: Any = Field(default_factory=dict)
    created_by: EntityRef
    created_at: str
    locked: bool = False

    def ref(self) -> EntityRef:
        return EntityRef(id=self.id, name=self.name)

    def is_member(self, user_id: str) -> bool:
        return any(member.id == user_id for member in self.access)


class Transaction(CamelModel):
    id: str                         # <walletId>_<suffix>
    amount: float
    name: str
    extra: Any = Field(default_factory=dict)
    wallet_id: str
    created_by: EntityRef
    created_at: str


@dataclass
class MemberPatchOutcome:
    """Result of scrubbing one member's wallet cache during wallet deletion."""

    user_id: str
    ok: bool
    error: str | None = None

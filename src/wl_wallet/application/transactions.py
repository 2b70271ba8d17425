"""TransactionLog: per-wallet ledger entries and the balance bookkeeping they drive.

Every mutation keeps Wallet.balance equal to the sum of the wallet's stored
transaction amounts by applying a delta, in a fixed write order:

  create: transaction, then wallet (+amount)
  update: wallet (+new-old), then transaction
  delete: wallet (-amount), then drop the transaction key

Writes are independent puts; a crash between the two leaves the balance off
by exactly that one delta.
"""

import logging

from src.wl_common.datetime_utils import utc_now_iso
from src.wl_common.id_generator import generate_id
from src.wl_common.kv_store import KeyValueStore
from src.wl_gateway.auth.guards import require_identity
from src.wl_gateway.user.models import User
from src.wl_wallet.application.ledger import WalletLedger
from src.wl_wallet.application.schemas import (
    CreatorTransactions,
    TransactionPage,
    TransactionPatch,
)
from src.wl_wallet.domain.amounts import parse_amount
from src.wl_wallet.domain.models import Transaction, Wallet
from src.wl_wallet.infrastructure.persistence import TransactionRepository

logger = logging.getLogger(__name__)


class TransactionLog:
    def __init__(
        self,
        ledger: WalletLedger | None = None,
        transactions: TransactionRepository | None = None,
    ) -> None:
        self._ledger = ledger or WalletLedger()
        self._transactions = transactions or TransactionRepository()

    async def _owning_wallet(
        self, me: User | None, transaction_id: str, store: KeyValueStore
    ) -> tuple[Transaction, Wallet]:
        me = require_identity(me)
        transaction = await self._transactions.get(store, transaction_id)
        wallet = await self._ledger.get(transaction.wallet_id, store, me)
        return transaction, wallet

    async def create(
        self,
        me: User | None,
        wallet_id: str,
        amount: object,
        title: str | None,
        extra: object,
        store: KeyValueStore,
    ) -> Transaction:
        """Post a new entry. Non-numeric amounts are recorded as 0."""
        creator = require_identity(me)
        wallet = await self._ledger.get(wallet_id, store, creator)
        transaction = Transaction(
            id=f"{wallet.id}_{generate_id()}",
            amount=parse_amount(amount),
            name=title if title is not None else wallet.name,
            extra=extra if extra is not None else {},
            wallet_id=wallet.id,
            created_by=creator.ref(),
            created_at=utc_now_iso(),
        )
        await self._transactions.save(store, transaction)
        await self._ledger.apply_balance_delta(wallet, transaction.amount, store)
        logger.info(
            "Posted transaction: id=%s amount=%f wallet=%s",
            transaction.id, transaction.amount, wallet.id,
        )
        return transaction

    async def get(
        self, me: User | None, transaction_id: str, store: KeyValueStore
    ) -> Transaction:
        transaction, _ = await self._owning_wallet(me, transaction_id, store)
        return transaction

    async def update(
        self,
        me: User | None,
        transaction_id: str,
        patch: TransactionPatch,
        store: KeyValueStore,
    ) -> Transaction:
        """Apply only the fields present in `patch`.

        An amount change moves the wallet balance by (new - old) and the
        wallet is written before the transaction. Equal amounts are a no-op
        for the wallet.
        """
        transaction, wallet = await self._owning_wallet(me, transaction_id, store)
        sent = patch.model_fields_set

        if "name" in sent:
            transaction.name = "" if patch.name is None else str(patch.name)
        if "extra" in sent:
            transaction.extra = patch.extra
        if "amount" in sent:
            new_amount = parse_amount(patch.amount)
            if new_amount != transaction.amount:
                await self._ledger.apply_balance_delta(
                    wallet, new_amount - transaction.amount, store
                )
                transaction.amount = new_amount

        await self._transactions.save(store, transaction)
        return transaction

    async def delete(
        self, me: User | None, transaction_id: str, store: KeyValueStore
    ) -> Transaction:
        """Reverse the entry's contribution, then remove it.

        The balance correction is made durable first so a crash cannot drop
        the record while keeping its amount in the balance.
        """
        transaction, wallet = await self._owning_wallet(me, transaction_id, store)
        await self._ledger.apply_balance_delta(wallet, -transaction.amount, store)
        await self._transactions.delete(store, transaction.id)
        logger.info("Deleted transaction: id=%s wallet=%s", transaction.id, wallet.id)
        return transaction

    async def list_for_wallet(
        self,
        me: User | None,
        wallet_id: str,
        limit: int,
        cursor: str | None,
        store: KeyValueStore,
    ) -> TransactionPage:
        """One page of the wallet's transactions, using the store's own cursor.

        Undecodable entries are skipped, so a page can be shorter than `limit`
        even when `has_more` is True.
        """
        wallet = await self._ledger.get_for_user(me, wallet_id, store)
        transactions, page = await self._transactions.list_page(
            store, wallet.id, limit, cursor
        )
        return TransactionPage(
            transactions=transactions,
            has_more=not page.list_complete,
            cursor=page.cursor,
        )

    async def list_by_creator(
        self, me: User | None, store: KeyValueStore
    ) -> CreatorTransactions:
        """All transactions the caller created, across every wallet.

        There is no index by creator: this scans the whole transaction
        keyspace and filters in process.
        """
        me = require_identity(me)
        mine = [
            t async for t in self._transactions.iter_all(store) if t.created_by.id == me.id
        ]
        return CreatorTransactions(transactions=mine)

"""Wallet and transaction persistence over the KeyValueStore."""

from collections.abc import AsyncIterator

from src.wl_common.keys import (
    TRANSACTION_PREFIX,
    WALLET_PREFIX,
    transaction_key,
    wallet_key,
    wallet_transactions_prefix,
)
from src.wl_common.kv_store import (
    KeyPage,
    KeyValueStore,
    iter_records,
    read_page,
    read_record,
    write_record,
)
from src.wl_wallet.domain.models import Transaction, Wallet


class WalletRepository:
    async def get(self, store: KeyValueStore, wallet_id: str) -> Wallet:
        return await read_record(store, wallet_key(wallet_id), Wallet)

    async def save(self, store: KeyValueStore, wallet: Wallet) -> None:
        await write_record(store, wallet_key(wallet.id), wallet)

    async def delete(self, store: KeyValueStore, wallet_id: str) -> None:
        await store.delete(wallet_key(wallet_id))

    def iter_all(self, store: KeyValueStore) -> AsyncIterator[Wallet]:
        return iter_records(store, WALLET_PREFIX, Wallet)


class TransactionRepository:
    async def get(self, store: KeyValueStore, transaction_id: str) -> Transaction:
        return await read_record(store, transaction_key(transaction_id), Transaction)

    async def save(self, store: KeyValueStore, transaction: Transaction) -> None:
        await write_record(store, transaction_key(transaction.id), transaction)

    async def delete(self, store: KeyValueStore, transaction_id: str) -> None:
        await store.delete(transaction_key(transaction_id))

    async def list_page(
        self,
        store: KeyValueStore,
        wallet_id: str,
        limit: int,
        cursor: str | None,
    ) -> tuple[list[Transaction], KeyPage]:
        return await read_page(
            store, wallet_transactions_prefix(wallet_id), Transaction, limit, cursor
        )

    def iter_all(self, store: KeyValueStore) -> AsyncIterator[Transaction]:
        return iter_records(store, TRANSACTION_PREFIX, Transaction)

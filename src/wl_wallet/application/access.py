"""AccessControl: grant and revoke wallet membership on both stored copies.

Each call updates Wallet.access and the target's User.wallets together,
target user first, then wallet. There is no cross-key atomicity: a failure
after the first put leaves the two copies disagreeing about membership.
"""

import logging

from src.wl_common.errors import ConflictError, InvariantError, NotFoundError, ValidationError
from src.wl_common.kv_store import KeyValueStore
from src.wl_gateway.user.models import User
from src.wl_gateway.user.persistence import UserRepository
from src.wl_wallet.application.ledger import WalletLedger
from src.wl_wallet.domain.models import Wallet
from src.wl_wallet.infrastructure.persistence import WalletRepository

logger = logging.getLogger(__name__)


class AccessControl:
    def __init__(
        self,
        ledger: WalletLedger | None = None,
        wallets: WalletRepository | None = None,
        users: UserRepository | None = None,
    ) -> None:
        self._ledger = ledger or WalletLedger()
        self._wallets = wallets or WalletRepository()
        self._users = users or UserRepository()

    async def grant(
        self,
        me: User | None,
        wallet_id: str,
        target_user_id: str,
        store: KeyValueStore,
    ) -> Wallet:
        wallet = await self._ledger.get_for_user(me, wallet_id, store)
        if wallet.is_member(target_user_id):
            raise ConflictError("Access is already granted to that user!")
        target = await self._users.get_or_none(store, target_user_id)
        if target is None:
            raise NotFoundError("Cannot find user!")

        if not target.has_wallet(wallet.id):
            target.wallets.append(wallet.ref())
        wallet.access.append(target.ref())

        await self._users.save(store, target)
        await self._wallets.save(store, wallet)
        logger.info("Granted access: wallet=%s user=%s", wallet.id, target.id)
        return wallet

    async def revoke(
        self,
        me: User | None,
        wallet_id: str,
        target_user_id: str,
        store: KeyValueStore,
    ) -> Wallet:
        """Remove a member. A wallet never loses its last member."""
        wallet = await self._ledger.get_for_user(me, wallet_id, store)
        if not wallet.is_member(target_user_id):
            raise ValidationError("User has no access to the wallet!")
        if len(wallet.access) <= 1:
            raise InvariantError("Cannot remove last user from a wallet!")

        target = await self._users.get(store, target_user_id)
        target.wallets = [w for w in target.wallets if w.id != wallet.id]
        wallet.access = [m for m in wallet.access if m.id != target_user_id]

        await self._users.save(store, target)
        await self._wallets.save(store, wallet)
        logger.info("Revoked access: wallet=%s user=%s", wallet.id, target_user_id)
        return wallet

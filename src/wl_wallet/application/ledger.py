"""WalletLedger: owns wallet records, their lookups and their lifecycle.

Membership is stored twice: in Wallet.access and in every member's
User.wallets cache. Operations here write both copies as separate puts with
no atomicity; a failure between them leaves the copies out of step until a
later operation overwrites them. Nothing reconciles them automatically.
"""

import logging
from typing import Any

from src.wl_common.datetime_utils import utc_now_iso
from src.wl_common.errors import AuthError
from src.wl_common.id_generator import generate_id
from src.wl_common.kv_store import KeyValueStore
from src.wl_gateway.auth.guards import require_identity
from src.wl_gateway.user.models import User
from src.wl_gateway.user.persistence import UserRepository
from src.wl_wallet.domain.models import MemberPatchOutcome, Wallet
from src.wl_wallet.infrastructure.persistence import WalletRepository

logger = logging.getLogger(__name__)


class WalletLedger:
    def __init__(
        self,
        wallets: WalletRepository | None = None,
        users: UserRepository | None = None,
    ) -> None:
        self._wallets = wallets or WalletRepository()
        self._users = users or UserRepository()

    async def create(
        self,
        me: User | None,
        name: str,
        description: str,
        extra: Any,
        store: KeyValueStore,
    ) -> Wallet:
        """Create a wallet with the caller as its only member.

        Wallet first, then the owner's cache: a crash in between leaves a
        wallet the owner can open by id but not see in their listing.
        """
        owner = require_identity(me)
        # Re-read so the cache append works on the latest stored copy
        owner = await self._users.get(store, owner.id)
        wallet = Wallet(
            id=generate_id(),
            name=name,
            description=description,
            access=[owner.ref()],
            balance=0.0,
            extra=extra if extra is not None else {},
            created_by=owner.ref(),
            created_at=utc_now_iso(),
        )
        owner.wallets.append(wallet.ref())
        await self._wallets.save(store, wallet)
        await self._users.save(store, owner)
        logger.info("Created wallet: id=%s owner=%s", wallet.id, owner.id)
        return wallet

    async def get(
        self,
        wallet_id: str,
        store: KeyValueStore,
        requesting_user: User | None = None,
    ) -> Wallet:
        """Load a wallet, checking membership only when a requester is given.

        SECURITY: the requester-less form skips the access check entirely.
        It exists for trusted internal lookups and for the flagged public
        lookup route; anything caller-facing should use get_for_user().
        """
        wallet = await self._wallets.get(store, wallet_id)
        if requesting_user is not None and not wallet.is_member(requesting_user.id):
            raise AuthError("Cannot access this wallet!")
        return wallet

    async def get_for_user(
        self, me: User | None, wallet_id: str, store: KeyValueStore
    ) -> Wallet:
        return await self.get(wallet_id, store, require_identity(me))

    async def list_all(self, me: User | None, store: KeyValueStore) -> list[Wallet]:
        """Every decodable wallet in the store. Full scan, small deployments only."""
        require_identity(me)
        return [wallet async for wallet in self._wallets.iter_all(store)]

    async def close(
        self,
        wallet_id: str,
        store: KeyValueStore,
        requesting_user: User | None = None,
    ) -> Wallet:
        """Mark the wallet locked.

        The flag is informational: transactions can still be posted,
        updated and deleted against a locked wallet.
        """
        wallet = await self.get(wallet_id, store, requesting_user)
        wallet.locked = True
        await self._wallets.save(store, wallet)
        logger.info("Closed wallet: id=%s", wallet.id)
        return wallet

    async def delete(self, me: User | None, wallet_id: str, store: KeyValueStore) -> Wallet:
        """Detach every member, then drop the wallet key.

        Transactions under the wallet are left in place (orphaned).
        """
        wallet = await self.get_for_user(me, wallet_id, store)
        outcomes = await self.detach_members(wallet, store)
        failed = [o.user_id for o in outcomes if not o.ok]
        if failed:
            logger.warning(
                "Wallet %s deleted with stale member caches: users=%s", wallet.id, failed
            )
        await self._wallets.delete(store, wallet.id)
        logger.info("Deleted wallet: id=%s members=%d", wallet.id, len(outcomes))
        return wallet

    async def detach_members(
        self, wallet: Wallet, store: KeyValueStore
    ) -> list[MemberPatchOutcome]:
        """Remove `wallet` from each member's cache, tolerating per-member failures."""
        outcomes: list[MemberPatchOutcome] = []
        for member in wallet.access:
            try:
                user = await self._users.get(store, member.id)
                user.wallets = [w for w in user.wallets if w.id != wallet.id]
                await self._users.save(store, user)
            except Exception as exc:  # noqa: BLE001
                logger.warning(
                    "Could not patch member %s of wallet %s", member.id, wallet.id,
                    exc_info=True,
                )
                outcomes.append(MemberPatchOutcome(member.id, ok=False, error=str(exc)))
            else:
                outcomes.append(MemberPatchOutcome(member.id, ok=True))
        return outcomes

    async def apply_balance_delta(
        self, wallet: Wallet, delta: float, store: KeyValueStore
    ) -> Wallet:
        """Persist `wallet` with `delta` added to its balance.

        Only TransactionLog calls this. Read-modify-write without versioning:
        two concurrent deltas on the same wallet can lose one update.
        """
        wallet.balance += delta
        await self._wallets.save(store, wallet)
        logger.debug("Wallet %s balance %+f -> %f", wallet.id, delta, wallet.balance)
        return wallet

"""Unit tests for AccessControl: grant, revoke and last-member protection."""

import pytest

from src.wl_common.errors import (
    AuthError,
    ConflictError,
    InvariantError,
    NotFoundError,
    ValidationError,
)
from src.wl_gateway.user.persistence import UserRepository
from src.wl_wallet.application.access import AccessControl
from src.wl_wallet.application.ledger import WalletLedger


@pytest.fixture
def ledger() -> WalletLedger:
    return WalletLedger()


@pytest.fixture
def access(ledger: WalletLedger) -> AccessControl:
    return AccessControl(ledger=ledger)


async def _assert_symmetric(store, ledger: WalletLedger, wallet_id: str, user_ids: list[str]) -> None:
    """W.id in U.wallets  <=>  U.id in W.access, for every listed user."""
    wallet = await ledger.get(wallet_id, store)
    users = UserRepository()
    for user_id in user_ids:
        user = await users.get(store, user_id)
        assert user.has_wallet(wallet_id) == wallet.is_member(user_id)


class TestGrant:
    async def test_updates_both_sides(self, store, ledger, access, register) -> None:
        alice = await register("alice")
        bob = await register("bob")
        wallet = await ledger.create(alice, "W1", "", None, store)

        updated = await access.grant(alice, wallet.id, bob.id, store)

        assert [m.id for m in updated.access] == [alice.id, bob.id]
        bob_stored = await UserRepository().get(store, bob.id)
        assert [(w.id, w.name) for w in bob_stored.wallets] == [(wallet.id, "W1")]
        await _assert_symmetric(store, ledger, wallet.id, [alice.id, bob.id])

    async def test_duplicate_grant_conflicts(self, store, ledger, access, register) -> None:
        alice = await register("alice")
        bob = await register("bob")
        wallet = await ledger.create(alice, "W1", "", None, store)
        await access.grant(alice, wallet.id, bob.id, store)

        with pytest.raises(ConflictError):
            await access.grant(alice, wallet.id, bob.id, store)

    async def test_unknown_target(self, store, ledger, access, register) -> None:
        alice = await register("alice")
        wallet = await ledger.create(alice, "W1", "", None, store)
        with pytest.raises(NotFoundError):
            await access.grant(alice, wallet.id, "ghost", store)

    async def test_non_member_cannot_grant(self, store, ledger, access, register) -> None:
        alice = await register("alice")
        mallory = await register("mallory")
        wallet = await ledger.create(alice, "W1", "", None, store)
        with pytest.raises(AuthError):
            await access.grant(mallory, wallet.id, mallory.id, store)

    async def test_anonymous_rejected_without_writes(
        self, store, ledger, access, register
    ) -> None:
        alice = await register("alice")
        bob = await register("bob")
        wallet = await ledger.create(alice, "W1", "", None, store)
        snapshot = dict(store.data)

        with pytest.raises(AuthError):
            await access.grant(None, wallet.id, bob.id, store)
        assert store.data == snapshot


class TestRevoke:
    async def test_revoke_until_last_member(self, store, ledger, access, register) -> None:
        alice = await register("alice")
        bob = await register("bob")
        wallet = await ledger.create(alice, "W1", "", None, store)
        await access.grant(alice, wallet.id, bob.id, store)

        after = await access.revoke(alice, wallet.id, alice.id, store)
        assert [m.id for m in after.access] == [bob.id]
        await _assert_symmetric(store, ledger, wallet.id, [alice.id, bob.id])

        with pytest.raises(InvariantError):
            await access.revoke(bob, wallet.id, bob.id, store)
        assert [m.id for m in (await ledger.get(wallet.id, store)).access] == [bob.id]

    async def test_former_member_cannot_revoke_remaining_member(
        self, store, ledger, access, register
    ) -> None:
        alice = await register("alice")
        bob = await register("bob")
        wallet = await ledger.create(alice, "W1", "", None, store)
        await access.grant(alice, wallet.id, bob.id, store)
        await access.revoke(alice, wallet.id, alice.id, store)
        snapshot = dict(store.data)

        # alice is no longer a member, so the caller check fails before the
        # last-member rule is reached
        with pytest.raises(AuthError):
            await access.revoke(alice, wallet.id, bob.id, store)
        assert store.data == snapshot

        with pytest.raises(InvariantError):
            await access.revoke(bob, wallet.id, bob.id, store)

    async def test_sole_member_cannot_leave(self, store, ledger, access, register) -> None:
        alice = await register("alice")
        wallet = await ledger.create(alice, "W1", "", None, store)
        with pytest.raises(InvariantError):
            await access.revoke(alice, wallet.id, alice.id, store)

    async def test_target_without_access(self, store, ledger, access, register) -> None:
        alice = await register("alice")
        bob = await register("bob")
        wallet = await ledger.create(alice, "W1", "", None, store)
        with pytest.raises(ValidationError):
            await access.revoke(alice, wallet.id, bob.id, store)

    async def test_revoked_member_loses_access(self, store, ledger, access, register) -> None:
        alice = await register("alice")
        bob = await register("bob")
        wallet = await ledger.create(alice, "W1", "", None, store)
        await access.grant(alice, wallet.id, bob.id, store)
        await access.revoke(alice, wallet.id, bob.id, store)

        with pytest.raises(AuthError):
            await ledger.get_for_user(bob, wallet.id, store)
        assert (await UserRepository().get(store, bob.id)).wallets == []

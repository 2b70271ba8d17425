"""Stored user-side records: the User profile and its login Credential."""

from pydantic import Field

from src.wl_common.models import CamelModel, EntityRef


class User(CamelModel):
    id: str
    name: str
    # Denormalized mirror of every wallet whose access list holds this user
    wallets: list[EntityRef] = Field(default_factory=list)

    def ref(self) -> EntityRef:
        return EntityRef(id=self.id, name=self.name)

    def has_wallet(self, wallet_id: str) -> bool:
        return any(w.id == wallet_id for w in self.wallets)


class Credential(CamelModel):
    """Stored under auth_<normalizedUsername>; immutable after registration."""

    id: str
    password: str

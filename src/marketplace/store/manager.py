"""Manager aggregate: the person running a store's order desk."""

from datetime import UTC, datetime

from protean.fields import DateTime, Identifier, String

from marketplace.domain import marketplace
from marketplace.store.events import ManagerRegistered


@marketplace.aggregate
class Manager:
    name = String(required=True, max_length=150)
    phone = String(max_length=20)
    email = String(max_length=254)
    store_id = Identifier()
    registered_at = DateTime()

    @classmethod
    def register(cls, name: str, phone: str | None = None, email: str | None = None):
        now = datetime.now(UTC)
        manager = cls(name=name, phone=phone, email=email, registered_at=now)
        manager.raise_(
            ManagerRegistered(
                manager_id=str(manager.id),
                name=name,
                registered_at=now,
            )
        )
        return manager

    def assign_store(self, store_id: str) -> None:
        self.store_id = store_id

    def release_store(self) -> None:
        self.store_id = None

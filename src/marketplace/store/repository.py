"""Store queries used by checkout's store resolution."""

from marketplace.domain import marketplace
from marketplace.store.store import Store


@marketplace.repository(part_of=Store)
class StoreRepository:
    def find_active_in_pincode_band(self, pincode: int, band: int) -> list[Store]:
        """Active stores whose pincode lies within ``pincode ± band``."""
        return (
            self._dao.query.filter(
                is_active=True,
                pincode__gte=pincode - band,
                pincode__lte=pincode + band,
            )
            .all()
            .items
        )

    def find_active(self) -> list[Store]:
        return self._dao.query.filter(is_active=True).all().items

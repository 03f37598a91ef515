"""Delivery partner counters, incremented with compare-and-set writes."""

from protean.utils.query import Q

from marketplace.delivery.partner import DeliveryPartner
from marketplace.domain import marketplace
from marketplace.errors import ConflictError, NotFoundError

COUNTERS = ("total_deliveries", "total_accepted", "total_rejected")

_MAX_ATTEMPTS = 5


@marketplace.repository(part_of=DeliveryPartner)
class DeliveryPartnerRepository:
    def increment(self, partner_id: str, counter: str) -> int:
        """Add one to a counter without overwriting concurrent increments."""
        if counter not in COUNTERS:
            raise ValueError(f"Unknown counter: {counter}")

        for _ in range(_MAX_ATTEMPTS):
            partner = self._dao.query.filter(id=partner_id).all().first
            if partner is None:
                raise NotFoundError("Delivery partner not found")

            current = getattr(partner, counter) or 0
            updated = self._dao._update_all(Q(id=partner_id, **{counter: current}), **{counter: current + 1})
            if updated:
                return current + 1

        raise ConflictError(f"Could not update {counter} for delivery partner {partner_id}")

"""Order persistence helpers: the pickup claim and read-side lookups."""

from datetime import datetime

from protean.utils.query import Q

from marketplace.domain import marketplace
from marketplace.errors import OrderNotFoundError
from marketplace.order.order import ASSIGNED_STATUSES, OPEN_STATUSES, Order, OrderStatus


@marketplace.repository(part_of=Order)
class OrderRepository:
    def fetch(self, order_id: str) -> Order:
        """Read the stored order, bypassing any copy cached in the unit of work."""
        order = self._dao.query.filter(id=order_id).all().first
        if order is None:
            raise OrderNotFoundError()
        return order

    def claim_for_pickup(self, order_id: str, partner_id: str, picked_up_at: datetime) -> bool:
        """Assign an unclaimed READY order to a partner in one conditional write.

        Returns True when this call made the claim, False when the order was
        not READY or already had a partner.
        """
        updated = self._dao._update_all(
            Q(id=order_id, status=OrderStatus.READY.value, delivery_partner_id__isnull=True),
            status=OrderStatus.PICKED_UP.value,
            delivery_partner_id=partner_id,
            picked_up_by=partner_id,
            picked_up_at=picked_up_at,
            updated_at=picked_up_at,
        )
        return updated > 0

    def is_held_by(self, order_id: str, partner_id: str) -> bool:
        held = self._dao.query.filter(
            id=order_id,
            delivery_partner_id=partner_id,
            status=OrderStatus.PICKED_UP.value,
        ).all()
        return held.total > 0

    def find_for_customer(self, customer_id: str) -> list[Order]:
        orders = self._dao.query.filter(customer_id=customer_id).all().items
        return sorted(orders, key=lambda o: o.created_at, reverse=True)

    def find_open_for_manager(self, manager_id: str, status: str | None = None) -> list[Order]:
        statuses = [status] if status else [s.value for s in OPEN_STATUSES]
        return self._dao.query.filter(manager_id=manager_id, status__in=statuses).all().items

    def find_assigned_to_partner(self, partner_id: str) -> list[Order]:
        return (
            self._dao.query.filter(
                delivery_partner_id=partner_id,
                status__in=[s.value for s in ASSIGNED_STATUSES],
            )
            .all()
            .items
        )

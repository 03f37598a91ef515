"""Order status feed: append-only log of order status changes.

Notification senders poll this feed instead of being called from the order
workflow. Entries are never updated.
"""

from uuid import uuid4

from protean.core.projector import on
from protean.fields import DateTime, Identifier, String
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.order.events import OrderPlaced, OrderStatusChanged
from marketplace.order.order import Order, OrderStatus


@marketplace.projection
class OrderStatusFeed:
    entry_id = Identifier(identifier=True, required=True)
    order_id = Identifier(required=True)
    from_status = String()
    to_status = String(required=True)
    actor = String()
    actor_id = Identifier()
    changed_at = DateTime(required=True)


@marketplace.projector(projector_for=OrderStatusFeed, aggregates=[Order])
class OrderStatusFeedProjector:
    def _append(self, **fields):
        current_domain.repository_for(OrderStatusFeed).add(OrderStatusFeed(entry_id=str(uuid4()), **fields))

    @on(OrderPlaced)
    def on_order_placed(self, event):
        self._append(
            order_id=event.order_id,
            to_status=OrderStatus.PENDING.value,
            actor="customer",
            actor_id=event.customer_id,
            changed_at=event.placed_at,
        )

    @on(OrderStatusChanged)
    def on_order_status_changed(self, event):
        self._append(
            order_id=event.order_id,
            from_status=event.from_status,
            to_status=event.to_status,
            actor=event.actor,
            actor_id=event.actor_id,
            changed_at=event.changed_at,
        )


def status_feed(order_id: str | None = None) -> list[OrderStatusFeed]:
    """Feed entries in the order they happened, optionally for one order."""
    query = current_domain.repository_for(OrderStatusFeed)._dao.query
    if order_id:
        query = query.filter(order_id=order_id)
    return sorted(query.all().items, key=lambda entry: entry.changed_at)

"""Order domain events: immutable facts about order lifecycle changes.

Every status change raises ``OrderStatusChanged`` so downstream consumers can
follow an order through one event type; cancellations and delivery rejections
additionally carry their own detail.
"""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from marketplace.domain import marketplace


@marketplace.event(part_of="Order")
class OrderPlaced:
    """A customer's checkout produced a new order."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    store_id = Identifier(required=True)
    manager_id = Identifier(required=True)
    item_count = Integer(required=True)
    amount = Float(required=True)
    wallet_points_used = Integer()
    coupon_id = Identifier()
    is_urgent = String()
    placed_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderStatusChanged:
    """The order moved from one lifecycle state to another."""

    __version__ = 1

    order_id = Identifier(required=True)
    from_status = String(required=True)
    to_status = String(required=True)
    actor = String()  # customer, manager or delivery_partner
    actor_id = Identifier()
    changed_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderCancelled:
    """The order was cancelled before delivery."""

    __version__ = 1

    order_id = Identifier(required=True)
    cancelled_by = String(required=True)
    note = Text()
    cancelled_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class DeliveryRejected:
    """The assigned delivery partner abandoned the delivery."""

    __version__ = 1

    order_id = Identifier(required=True)
    delivery_partner_id = Identifier(required=True)
    reason = String(required=True)
    notes = Text()
    rejected_at = DateTime(required=True)

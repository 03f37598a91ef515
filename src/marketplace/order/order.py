"""Order aggregate (CQRS): one customer's purchase fulfilled by a single store.

State Machine:
    PENDING → CONFIRMED → PREPARING → READY → PICKED_UP → IN_TRANSIT → DELIVERED
    {every state except DELIVERED and CANCELLED} → CANCELLED

Line items are a snapshot of product name and price at checkout and never
change afterwards. The delivery-partner claim on a READY order is written by
``OrderRepository.claim_for_pickup`` as a single conditional update; the
aggregate only announces it.
"""

from datetime import UTC, datetime, timedelta
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, HasMany, Identifier, Integer, String, Text

from marketplace.domain import marketplace
from marketplace.order.events import (
    DeliveryRejected,
    OrderCancelled,
    OrderPlaced,
    OrderStatusChanged,
)

DELIVERY_WINDOW = timedelta(hours=1)


class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    READY = "ready"
    PICKED_UP = "picked_up"
    IN_TRANSIT = "in_transit"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class CancelledBy(Enum):
    CUSTOMER = "customer"
    DELIVERY_PARTNER = "delivery_partner"


_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.PREPARING, OrderStatus.CANCELLED},
    OrderStatus.PREPARING: {OrderStatus.READY, OrderStatus.CANCELLED},
    OrderStatus.READY: {OrderStatus.PICKED_UP, OrderStatus.CANCELLED},
    OrderStatus.PICKED_UP: {OrderStatus.IN_TRANSIT, OrderStatus.CANCELLED},
    OrderStatus.IN_TRANSIT: {OrderStatus.DELIVERED, OrderStatus.CANCELLED},
    OrderStatus.DELIVERED: set(),  # terminal
    OrderStatus.CANCELLED: set(),  # terminal
}

# Statuses a store manager sets while preparing an order
MANAGER_STATUSES = {OrderStatus.CONFIRMED, OrderStatus.PREPARING, OrderStatus.READY}

OPEN_STATUSES = [s for s, targets in _VALID_TRANSITIONS.items() if targets]

# Orders a delivery partner is currently carrying
ASSIGNED_STATUSES = [OrderStatus.PICKED_UP, OrderStatus.IN_TRANSIT]


@marketplace.entity(part_of="Order")
class OrderLine:
    """Snapshot of a cart line at checkout."""

    product_id = Identifier(required=True)
    name = String(required=True, max_length=200)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)


@marketplace.aggregate
class Order:
    customer_id = Identifier(required=True)
    store_id = Identifier(required=True)
    manager_id = Identifier(required=True)
    delivery_partner_id = Identifier()
    picked_up_by = Identifier()
    items = HasMany(OrderLine)

    subtotal = Float(required=True)
    discount = Float(default=0.0)
    wallet_points_used = Integer(default=0)
    coupon_id = Identifier()
    delivery_charge = Float(required=True)
    amount = Float(required=True)

    client_name = String(max_length=150)
    phone = String(max_length=20)
    location = String(max_length=500)
    pincode = String(max_length=10)
    latitude = Float(required=True)
    longitude = Float(required=True)
    notes = Text()
    is_urgent = Boolean(default=False)

    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    estimated_delivery_time = DateTime()
    actual_delivery_time = DateTime()
    picked_up_at = DateTime()
    cancellation_note = Text()
    cancelled_by = String(choices=CancelledBy)
    delivery_rejection_reason = String(max_length=50)
    delivery_rejection_notes = Text()
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        customer_id: str,
        store_id: str,
        manager_id: str,
        lines: list[dict],
        quote,
        latitude: float,
        longitude: float,
        client_name: str | None = None,
        phone: str | None = None,
        location: str | None = None,
        pincode: str | None = None,
        notes: str | None = None,
        is_urgent: bool = False,
    ):
        """Create a pending order from priced cart lines."""
        now = datetime.now(UTC)
        order = cls(
            customer_id=customer_id,
            store_id=store_id,
            manager_id=manager_id,
            subtotal=quote.subtotal,
            discount=quote.discount,
            wallet_points_used=quote.wallet_points_used,
            coupon_id=quote.coupon_id,
            delivery_charge=quote.delivery_charge,
            amount=quote.amount,
            client_name=client_name,
            phone=phone,
            location=location,
            pincode=pincode,
            latitude=latitude,
            longitude=longitude,
            notes=notes,
            is_urgent=bool(is_urgent),
            status=OrderStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )
        for line in lines:
            order.add_items(OrderLine(**line))

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                customer_id=customer_id,
                store_id=store_id,
                manager_id=manager_id,
                item_count=len(lines),
                amount=quote.amount,
                wallet_points_used=quote.wallet_points_used,
                coupon_id=quote.coupon_id,
                is_urgent=str(bool(is_urgent)),
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # State transition helpers
    # -------------------------------------------------------------------
    def can_transition_to(self, target_status: OrderStatus) -> bool:
        return target_status in _VALID_TRANSITIONS.get(OrderStatus(self.status), set())

    def _assert_can_transition(self, target_status: OrderStatus) -> None:
        if not self.can_transition_to(target_status):
            raise ValidationError({"status": [f"Cannot transition from {self.status} to {target_status.value}"]})

    def _transition(self, target_status: OrderStatus, actor: str, actor_id: str | None, now: datetime) -> None:
        self._assert_can_transition(target_status)
        previous = self.status
        self.status = target_status.value
        self.updated_at = now
        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                from_status=previous,
                to_status=target_status.value,
                actor=actor,
                actor_id=actor_id,
                changed_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Store preparation
    # -------------------------------------------------------------------
    def advance(self, target_status: OrderStatus, manager_id: str) -> None:
        """Move the order one preparation step forward."""
        if target_status not in MANAGER_STATUSES:
            raise ValidationError({"status": [f"Managers cannot set status {target_status.value}"]})
        self._transition(target_status, "manager", manager_id, datetime.now(UTC))

    # -------------------------------------------------------------------
    # Delivery
    # -------------------------------------------------------------------
    def record_pickup(self) -> None:
        """Announce a claim already written by the conditional pickup update."""
        if self.status != OrderStatus.PICKED_UP.value or not self.delivery_partner_id:
            raise ValidationError({"status": ["Order has not been picked up"]})

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                from_status=OrderStatus.READY.value,
                to_status=OrderStatus.PICKED_UP.value,
                actor="delivery_partner",
                actor_id=str(self.delivery_partner_id),
                changed_at=self.picked_up_at or datetime.now(UTC),
            )
        )

    def start_transit(self) -> None:
        now = datetime.now(UTC)
        self._transition(OrderStatus.IN_TRANSIT, "delivery_partner", str(self.delivery_partner_id), now)
        self.estimated_delivery_time = now + DELIVERY_WINDOW

    def complete_delivery(self) -> None:
        now = datetime.now(UTC)
        self._transition(OrderStatus.DELIVERED, "delivery_partner", str(self.delivery_partner_id), now)
        self.actual_delivery_time = now

    def reject_delivery(self, reason: str, notes: str | None = None) -> None:
        """The assigned partner gives the order up after pickup; it is cancelled."""
        if self.status not in (OrderStatus.PICKED_UP.value, OrderStatus.IN_TRANSIT.value):
            raise ValidationError({"status": ["Only picked up orders can be rejected by the delivery partner"]})

        now = datetime.now(UTC)
        partner_id = str(self.delivery_partner_id)
        self._transition(OrderStatus.CANCELLED, "delivery_partner", partner_id, now)
        self.cancelled_by = CancelledBy.DELIVERY_PARTNER.value
        self.delivery_rejection_reason = reason
        self.delivery_rejection_notes = notes
        self.raise_(
            DeliveryRejected(
                order_id=str(self.id),
                delivery_partner_id=partner_id,
                reason=reason,
                notes=notes,
                rejected_at=now,
            )
        )
        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                cancelled_by=CancelledBy.DELIVERY_PARTNER.value,
                note=notes,
                cancelled_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Cancellation
    # -------------------------------------------------------------------
    def cancel_by_customer(self, note: str) -> None:
        if not note or not note.strip():
            raise ValidationError({"notes": ["A cancellation note is required"]})
        if self.status in (OrderStatus.DELIVERED.value, OrderStatus.CANCELLED.value):
            raise ValidationError({"status": [f"Cannot cancel an order that is {self.status}"]})

        now = datetime.now(UTC)
        self._transition(OrderStatus.CANCELLED, "customer", str(self.customer_id), now)
        self.cancelled_by = CancelledBy.CUSTOMER.value
        self.cancellation_note = note.strip()
        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                cancelled_by=CancelledBy.CUSTOMER.value,
                note=self.cancellation_note,
                cancelled_at=now,
            )
        )

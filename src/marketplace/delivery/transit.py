"""Delivery run: the holding partner starts, completes or abandons a delivery."""

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from marketplace.delivery.partner import DeliveryPartner
from marketplace.delivery.pickup import active_partner
from marketplace.delivery.rejection import DeliveryRejection, RejectionReason
from marketplace.domain import marketplace
from marketplace.errors import OrderNotFoundError
from marketplace.order.order import Order, OrderStatus


def _held_order(order_id: str, partner_id: str, statuses: tuple[OrderStatus, ...]) -> Order:
    order = current_domain.repository_for(Order).fetch(order_id)
    if str(order.delivery_partner_id) != str(partner_id) or OrderStatus(order.status) not in statuses:
        raise OrderNotFoundError()
    return order


@marketplace.command(part_of="Order")
class InitiateDelivery:
    order_id = Identifier(required=True)
    partner_id = Identifier(required=True)


@marketplace.command(part_of="Order")
class CompleteDelivery:
    order_id = Identifier(required=True)
    partner_id = Identifier(required=True)


@marketplace.command(part_of="Order")
class RejectDelivery:
    """Abandon a picked-up order; it is cancelled and leaves the partner's list."""

    order_id = Identifier(required=True)
    partner_id = Identifier(required=True)
    reason = String(required=True, choices=RejectionReason)
    notes = Text()


@marketplace.command_handler(part_of=Order)
class TransitHandler:
    @handle(InitiateDelivery)
    def initiate_delivery(self, command):
        active_partner(command.partner_id)
        order = _held_order(command.order_id, command.partner_id, (OrderStatus.PICKED_UP,))
        order.start_transit()
        current_domain.repository_for(Order).add(order)

    @handle(CompleteDelivery)
    def complete_delivery(self, command):
        active_partner(command.partner_id)
        order = _held_order(command.order_id, command.partner_id, (OrderStatus.IN_TRANSIT,))
        order.complete_delivery()
        current_domain.repository_for(Order).add(order)
        current_domain.repository_for(DeliveryPartner).increment(str(command.partner_id), "total_deliveries")

    @handle(RejectDelivery)
    def reject_delivery(self, command):
        active_partner(command.partner_id)
        order = _held_order(
            command.order_id,
            command.partner_id,
            (OrderStatus.PICKED_UP, OrderStatus.IN_TRANSIT),
        )
        order.reject_delivery(command.reason, command.notes)
        current_domain.repository_for(Order).add(order)

        current_domain.repository_for(DeliveryRejection).add(
            DeliveryRejection.log(
                partner_id=str(command.partner_id),
                order_id=str(command.order_id),
                reason=command.reason,
                notes=command.notes,
            )
        )
        current_domain.repository_for(DeliveryPartner).increment(str(command.partner_id), "total_rejected")


def assigned_orders(partner_id: str) -> list[Order]:
    """Orders the partner is currently carrying."""
    return current_domain.repository_for(Order).find_assigned_to_partner(partner_id)

"""Order pickup: a delivery partner scans a READY order and accepts or rejects it.

Acceptance is decided by a single conditional write on the order, so when two
partners accept the same order exactly one wins and the other gets a
conflict. Accepting an order the partner already holds is a no-op.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from marketplace.delivery.partner import DeliveryPartner
from marketplace.delivery.rejection import DeliveryRejection, RejectionReason
from marketplace.domain import marketplace
from marketplace.errors import AuthorizationError, ConflictError, NotFoundError, OrderNotFoundError
from marketplace.order.order import Order, OrderStatus
from marketplace.utils.logging import get_logger

logger = get_logger(__name__)


class PickupAction(Enum):
    ACCEPT = "accept"
    REJECT = "reject"


def active_partner(partner_id: str) -> DeliveryPartner:
    try:
        partner = current_domain.repository_for(DeliveryPartner).get(partner_id)
    except ObjectNotFoundError:
        raise NotFoundError("Delivery partner not found") from None
    if not partner.is_active:
        raise AuthorizationError("Delivery partner is not active")
    return partner


def _open_for(order: Order, partner_id: str) -> bool:
    """A READY order that nobody, or this partner, has claimed."""
    return order.status == OrderStatus.READY.value and (
        order.delivery_partner_id is None or str(order.delivery_partner_id) == str(partner_id)
    )


def scan_order(order_id: str, partner_id: str) -> Order:
    """The order behind a scanned code, if the partner may pick it up."""
    active_partner(partner_id)
    order = current_domain.repository_for(Order).fetch(order_id)
    if not _open_for(order, partner_id):
        raise OrderNotFoundError()
    return order


@marketplace.command(part_of="Order")
class RespondToOrder:
    order_id = Identifier(required=True)
    partner_id = Identifier(required=True)
    action = String(required=True, choices=PickupAction)
    reason = String(choices=RejectionReason)
    notes = Text()


@marketplace.command_handler(part_of=Order)
class PickupHandler:
    @handle(RespondToOrder)
    def respond_to_order(self, command):
        active_partner(command.partner_id)
        if command.action == PickupAction.ACCEPT.value:
            self._accept(str(command.order_id), str(command.partner_id))
        else:
            self._reject(command)

    def _accept(self, order_id: str, partner_id: str) -> None:
        order_repo = current_domain.repository_for(Order)
        order_repo.fetch(order_id)

        if order_repo.claim_for_pickup(order_id, partner_id, datetime.now(UTC)):
            order = order_repo.fetch(order_id)
            order.record_pickup()
            order_repo.add(order)
            current_domain.repository_for(DeliveryPartner).increment(partner_id, "total_accepted")
            logger.info("Order accepted for delivery", order_id=order_id, partner_id=partner_id)
            return

        if order_repo.is_held_by(order_id, partner_id):
            return

        current = order_repo.fetch(order_id)
        claimed_by_other = current.delivery_partner_id is not None and str(current.delivery_partner_id) != partner_id
        if claimed_by_other and current.status in (OrderStatus.READY.value, OrderStatus.PICKED_UP.value):
            logger.info("Order already claimed", order_id=order_id, partner_id=partner_id)
            raise ConflictError("Order has already been accepted by another delivery partner")
        raise OrderNotFoundError()

    def _reject(self, command) -> None:
        order = current_domain.repository_for(Order).fetch(command.order_id)
        if not _open_for(order, command.partner_id):
            raise OrderNotFoundError()

        current_domain.repository_for(DeliveryRejection).add(
            DeliveryRejection.log(
                partner_id=str(command.partner_id),
                order_id=str(command.order_id),
                reason=command.reason or RejectionReason.OTHER.value,
                notes=command.notes,
            )
        )
        current_domain.repository_for(DeliveryPartner).increment(str(command.partner_id), "total_rejected")

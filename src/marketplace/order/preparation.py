"""Store preparation: the manager moves an order towards READY."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.errors import OrderNotFoundError
from marketplace.order.order import MANAGER_STATUSES, Order, OrderStatus


@marketplace.command(part_of="Order")
class AdvanceOrderStatus:
    order_id = Identifier(required=True)
    manager_id = Identifier(required=True)
    status = String(required=True, max_length=20)


@marketplace.command_handler(part_of=Order)
class PreparationHandler:
    @handle(AdvanceOrderStatus)
    def advance_order_status(self, command):
        allowed = sorted(s.value for s in MANAGER_STATUSES)
        if command.status not in allowed:
            raise ValidationError({"status": [f"Status must be one of: {', '.join(allowed)}"]})
        target = OrderStatus(command.status)

        repo = current_domain.repository_for(Order)
        order = repo.fetch(command.order_id)
        if str(order.manager_id) != str(command.manager_id) or not order.can_transition_to(target):
            raise OrderNotFoundError()

        order.advance(target, str(command.manager_id))
        repo.add(order)

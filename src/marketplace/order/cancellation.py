"""Customer cancellation: command and handler."""

from protean import handle
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.errors import OrderNotFoundError
from marketplace.order.order import Order


@marketplace.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    notes = Text(required=True)


@marketplace.command_handler(part_of=Order)
class CancellationHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.fetch(command.order_id)
        if str(order.customer_id) != str(command.customer_id):
            raise OrderNotFoundError()

        order.cancel_by_customer(command.notes)
        repo.add(order)

"""Cart management: commands and handler.

Cart lines reference products by id only; prices are read from the catalogue
when the order is placed.
"""

from protean import handle
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from marketplace.catalogue.product import Product
from marketplace.customer.customer import Customer
from marketplace.domain import marketplace


@marketplace.command(part_of="Customer")
class AddToCart:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    count = Integer(required=True)


@marketplace.command(part_of="Customer")
class UpdateCartQuantity:
    customer_id = Identifier(required=True)
    line_id = Identifier(required=True)
    count = Integer(required=True)


@marketplace.command(part_of="Customer")
class RemoveFromCart:
    customer_id = Identifier(required=True)
    line_id = Identifier(required=True)


@marketplace.command_handler(part_of=Customer)
class CartHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        # Unknown products fail here with a not-found error
        current_domain.repository_for(Product).get(command.product_id)

        repo = current_domain.repository_for(Customer)
        customer = repo.get(command.customer_id)
        line = customer.add_to_cart(command.product_id, command.count)
        repo.add(customer)
        return str(line.id)

    @handle(UpdateCartQuantity)
    def update_cart_quantity(self, command):
        repo = current_domain.repository_for(Customer)
        customer = repo.get(command.customer_id)
        customer.update_cart_count(command.line_id, command.count)
        repo.add(customer)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        repo = current_domain.repository_for(Customer)
        customer = repo.get(command.customer_id)
        customer.remove_from_cart(command.line_id)
        repo.add(customer)

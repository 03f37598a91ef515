"""Customer registration: command and handler."""

from protean import handle
from protean.fields import Integer, String
from protean.utils.globals import current_domain

from marketplace.customer.customer import Customer
from marketplace.domain import marketplace


@marketplace.command(part_of="Customer")
class RegisterCustomer:
    name = String(required=True, max_length=150)
    phone = String(required=True, max_length=20)
    wallet = Integer(min_value=0, default=0)


@marketplace.command_handler(part_of=Customer)
class RegisterCustomerHandler:
    @handle(RegisterCustomer)
    def register_customer(self, command):
        customer = Customer.register(name=command.name, phone=command.phone, wallet=command.wallet or 0)
        current_domain.repository_for(Customer).add(customer)
        return str(customer.id)

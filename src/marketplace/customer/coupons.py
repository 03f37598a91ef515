"""Customer coupons: assignment command and the available-coupons query."""

from datetime import UTC, datetime

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from marketplace.catalogue.coupon import Coupon
from marketplace.customer.customer import Customer
from marketplace.domain import marketplace


@marketplace.command(part_of="Customer")
class AssignCoupon:
    customer_id = Identifier(required=True)
    coupon_id = Identifier(required=True)


@marketplace.command_handler(part_of=Customer)
class CouponAssignmentHandler:
    @handle(AssignCoupon)
    def assign_coupon(self, command):
        current_domain.repository_for(Coupon).get(command.coupon_id)

        repo = current_domain.repository_for(Customer)
        customer = repo.get(command.customer_id)
        customer.assign_coupon(command.coupon_id)
        repo.add(customer)


def available_coupons(customer_id: str, at: datetime | None = None) -> list[Coupon]:
    """Unexpired coupons the customer has not been given yet."""
    customer = current_domain.repository_for(Customer).get(customer_id)
    assigned = set(customer.assigned_coupon_ids)
    moment = at or datetime.now(UTC)

    coupons = current_domain.repository_for(Coupon).find_usable(moment)
    return [c for c in coupons if str(c.id) not in assigned]

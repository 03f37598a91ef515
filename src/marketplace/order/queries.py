"""Order read operations scoped to the calling principal."""

from enum import Enum

from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from marketplace.errors import OrderNotFoundError
from marketplace.order.order import OPEN_STATUSES, Order


class Role(Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    CUSTOMER = "customer"
    DELIVERY_PARTNER = "delivery_partner"


def _visible_to(order: Order, principal_id: str, role: Role) -> bool:
    if role == Role.ADMIN:
        return True
    if role == Role.CUSTOMER:
        return str(order.customer_id) == str(principal_id)
    if role == Role.MANAGER:
        return str(order.manager_id) == str(principal_id)
    if role == Role.DELIVERY_PARTNER:
        return order.delivery_partner_id is not None and str(order.delivery_partner_id) == str(principal_id)
    return False


def order_for_principal(order_id: str, principal_id: str, role: Role) -> Order:
    """The order, if the principal may see it; otherwise not found."""
    order = current_domain.repository_for(Order).fetch(order_id)
    if not _visible_to(order, principal_id, role):
        raise OrderNotFoundError()
    return order


def order_history(customer_id: str) -> list[Order]:
    """A customer's orders, newest first."""
    return current_domain.repository_for(Order).find_for_customer(customer_id)


def live_orders(manager_id: str, status: str | None = None) -> dict:
    """Open orders for a manager's store, grouped by status.

    Urgent orders come first, then the oldest. The summary counts orders per
    open status and in total.
    """
    if status is not None and status not in {s.value for s in OPEN_STATUSES}:
        raise ValidationError({"status": [f"Not a live order status: {status}"]})

    orders = current_domain.repository_for(Order).find_open_for_manager(manager_id, status)
    orders = sorted(orders, key=lambda o: (not o.is_urgent, o.created_at))

    grouped = {s.value: [] for s in OPEN_STATUSES}
    for order in orders:
        grouped.setdefault(order.status, []).append(order)

    summary = {name: len(items) for name, items in grouped.items()}
    summary["total"] = len(orders)
    return {"orders": grouped, "summary": summary}

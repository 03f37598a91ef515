"""Checkout: turns a cart (or a past order) into a new order.

Placement runs in one unit of work: the order is stored, the customer's cart
is cleared and the order is appended to their history, and the wallet is
debited last with a conditional write. Any failure rolls all of it back, so a
failed checkout leaves the cart and wallet as they were.
"""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from marketplace.catalogue.coupon import Coupon
from marketplace.catalogue.product import Product
from marketplace.customer.customer import Customer
from marketplace.domain import marketplace
from marketplace.errors import EmptyCartError, InsufficientWalletError, OrderNotFoundError
from marketplace.order.order import Order
from marketplace.order.pricing import price_order
from marketplace.store.resolution import resolve_store
from marketplace.utils.logging import get_logger

logger = get_logger(__name__)


@marketplace.command(part_of="Order")
class PlaceOrder:
    """Place an order for everything in the customer's cart."""

    customer_id = Identifier(required=True)
    address_id = Identifier()
    client_name = String(max_length=150)
    phone = String(max_length=20)
    location = String(max_length=500)
    pincode = String(max_length=10)
    latitude = Float()
    longitude = Float()
    notes = Text()
    is_urgent = Boolean(default=False)
    wallet_points = Integer(min_value=0, default=0)
    coupon_id = Identifier()


@marketplace.command(part_of="Order")
class ReOrder:
    """Place a new order with the items of one of the customer's past orders."""

    customer_id = Identifier(required=True)
    order_id = Identifier(required=True)
    address_id = Identifier()
    client_name = String(max_length=150)
    phone = String(max_length=20)
    location = String(max_length=500)
    pincode = String(max_length=10)
    latitude = Float()
    longitude = Float()
    notes = Text()
    is_urgent = Boolean(default=False)
    wallet_points = Integer(min_value=0, default=0)
    coupon_id = Identifier()


def _snapshot(product_id: str, quantity: int) -> dict:
    product = current_domain.repository_for(Product).get(product_id)
    return {
        "product_id": str(product.id),
        "name": product.name,
        "quantity": quantity,
        "unit_price": product.price,
    }


def _find_coupon(coupon_id: str | None) -> Coupon | None:
    if not coupon_id:
        return None
    return current_domain.repository_for(Coupon).find(coupon_id)


def _delivery_details(customer: Customer, command, fallback: Order | None = None) -> dict:
    """Collect delivery fields from the command, a saved address, or a past order."""
    details = {
        "client_name": command.client_name or customer.name,
        "phone": command.phone or customer.phone,
        "location": command.location,
        "pincode": command.pincode,
        "latitude": command.latitude,
        "longitude": command.longitude,
    }

    sources = []
    if command.address_id:
        sources.append(customer.find_address(command.address_id))
    if fallback is not None:
        sources.append(fallback)
    for source in sources:
        for field in ("location", "pincode", "latitude", "longitude"):
            if details[field] is None:
                details[field] = getattr(source, field)

    if details["latitude"] is None or details["longitude"] is None:
        raise ValidationError({"coordinates": ["Latitude and longitude are required"]})
    return details


def _place(customer: Customer, lines: list[dict], details: dict, command) -> Order:
    resolution = resolve_store(details["pincode"], details["latitude"], details["longitude"])

    wallet_points = command.wallet_points or 0
    coupon = None if wallet_points > 0 else _find_coupon(command.coupon_id)
    quote = price_order(lines, wallet_points=wallet_points, coupon=coupon, wallet_balance=customer.wallet)

    order = Order.place(
        customer_id=str(customer.id),
        store_id=str(resolution.store.id),
        manager_id=str(resolution.manager.id),
        lines=lines,
        quote=quote,
        notes=command.notes,
        is_urgent=command.is_urgent,
        **details,
    )
    current_domain.repository_for(Order).add(order)
    return order


def _settle(customer: Customer, order: Order, clear_cart: bool) -> None:
    repo = current_domain.repository_for(Customer)

    customer.record_order(str(order.id), order.created_at)
    if clear_cart:
        customer.clear_cart()
    repo.add(customer)

    if not repo.debit_wallet(str(customer.id), customer.wallet, order.wallet_points_used or 0):
        raise InsufficientWalletError()


@marketplace.command_handler(part_of=Order)
class CheckoutHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        customer = current_domain.repository_for(Customer).get(command.customer_id)
        if not customer.cart_lines:
            raise EmptyCartError()

        details = _delivery_details(customer, command)
        lines = [_snapshot(str(line.product_id), line.count) for line in customer.cart_lines]

        order = _place(customer, lines, details, command)
        _settle(customer, order, clear_cart=True)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            customer_id=str(customer.id),
            store_id=str(order.store_id),
            amount=order.amount,
        )
        return str(order.id)

    @handle(ReOrder)
    def reorder(self, command):
        customer = current_domain.repository_for(Customer).get(command.customer_id)

        previous = current_domain.repository_for(Order).fetch(command.order_id)
        if str(previous.customer_id) != str(customer.id):
            raise OrderNotFoundError()

        details = _delivery_details(customer, command, fallback=previous)
        lines = [_snapshot(str(item.product_id), item.quantity) for item in previous.items]

        order = _place(customer, lines, details, command)
        _settle(customer, order, clear_cart=False)

        logger.info(
            "Order placed from a previous order",
            order_id=str(order.id),
            previous_order_id=str(previous.id),
            customer_id=str(customer.id),
        )
        return str(order.id)

"""Customer aggregate with cart, address book, coupons and order history.

The cart lives on the customer so that checkout can clear it and append to the
order history in the same write. Each product appears on at most one cart
line; adding it again is rejected rather than merged.
"""

import json
from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, Text

from marketplace.customer.events import AddressAdded, CouponAssigned, CustomerRegistered
from marketplace.domain import marketplace
from marketplace.errors import NotFoundError


@marketplace.entity(part_of="Customer")
class CartLine:
    product_id = Identifier(required=True)
    count = Integer(required=True, min_value=1)


@marketplace.entity(part_of="Customer")
class Address:
    """A delivery location; coordinates may be missing when geocoding failed."""

    label = String(max_length=50, default="Home")
    location = String(required=True, max_length=500)
    pincode = String(max_length=10)
    latitude = Float(min_value=-90.0, max_value=90.0)
    longitude = Float(min_value=-180.0, max_value=180.0)


@marketplace.entity(part_of="Customer")
class OrderHistoryEntry:
    order_id = Identifier(required=True)
    ordered_at = DateTime(required=True)


@marketplace.aggregate
class Customer:
    name = String(required=True, max_length=150)
    phone = String(required=True, max_length=20, unique=True)
    wallet = Integer(min_value=0, default=0)
    addresses = HasMany(Address)
    coupon_ids = Text(default="[]")  # JSON list of assigned coupon ids
    cart_lines = HasMany(CartLine)
    order_history = HasMany(OrderHistoryEntry)
    registered_at = DateTime()

    @invariant.post
    def cart_lines_must_reference_distinct_products(self):
        product_ids = [str(line.product_id) for line in self.cart_lines or []]
        if len(product_ids) != len(set(product_ids)):
            raise ValidationError({"cart": ["Item already exists in cart"]})

    @classmethod
    def register(cls, name: str, phone: str, wallet: int = 0):
        now = datetime.now(UTC)
        customer = cls(name=name, phone=phone, wallet=wallet, registered_at=now)
        customer.raise_(
            CustomerRegistered(
                customer_id=str(customer.id),
                name=name,
                phone=phone,
                registered_at=now,
            )
        )
        return customer

    # -------------------------------------------------------------------
    # Cart
    # -------------------------------------------------------------------
    def _find_cart_line(self, line_id: str) -> CartLine:
        line = next((c for c in (self.cart_lines or []) if str(c.id) == str(line_id)), None)
        if line is None:
            raise NotFoundError("Item not found in cart")
        return line

    def add_to_cart(self, product_id: str, count: int) -> CartLine:
        if count is None or count < 1:
            raise ValidationError({"count": ["Count must be greater than 0"]})
        if any(str(c.product_id) == str(product_id) for c in (self.cart_lines or [])):
            raise ValidationError({"cart": ["Item already exists in cart"]})

        line = CartLine(product_id=product_id, count=count)
        self.add_cart_lines(line)
        return line

    def update_cart_count(self, line_id: str, count: int) -> None:
        if count is None or count < 1:
            raise ValidationError({"count": ["Count must be greater than 0"]})
        self._find_cart_line(line_id).count = count

    def remove_from_cart(self, line_id: str) -> None:
        self.remove_cart_lines(self._find_cart_line(line_id))

    def clear_cart(self) -> None:
        for line in list(self.cart_lines or []):
            self.remove_cart_lines(line)

    # -------------------------------------------------------------------
    # Orders
    # -------------------------------------------------------------------
    def record_order(self, order_id: str, ordered_at: datetime) -> None:
        self.add_order_history(OrderHistoryEntry(order_id=order_id, ordered_at=ordered_at))

    # -------------------------------------------------------------------
    # Addresses
    # -------------------------------------------------------------------
    def add_address(
        self,
        location: str,
        pincode: str | None = None,
        latitude: float | None = None,
        longitude: float | None = None,
        label: str | None = None,
    ) -> Address:
        address = Address(
            label=label or "Home",
            location=location,
            pincode=pincode,
            latitude=latitude,
            longitude=longitude,
        )
        self.add_addresses(address)
        self.raise_(
            AddressAdded(
                customer_id=str(self.id),
                address_id=str(address.id),
                location=location,
                pincode=pincode,
                latitude=latitude,
                longitude=longitude,
            )
        )
        return address

    def find_address(self, address_id: str) -> Address:
        address = next((a for a in (self.addresses or []) if str(a.id) == str(address_id)), None)
        if address is None:
            raise NotFoundError("Address not found")
        return address

    # -------------------------------------------------------------------
    # Coupons
    # -------------------------------------------------------------------
    @property
    def assigned_coupon_ids(self) -> list[str]:
        return json.loads(self.coupon_ids) if self.coupon_ids else []

    def assign_coupon(self, coupon_id: str) -> None:
        assigned = self.assigned_coupon_ids
        if str(coupon_id) in assigned:
            raise ValidationError({"coupon_id": ["Coupon already assigned"]})

        assigned.append(str(coupon_id))
        self.coupon_ids = json.dumps(assigned)
        self.raise_(
            CouponAssigned(
                customer_id=str(self.id),
                coupon_id=str(coupon_id),
                assigned_at=datetime.now(UTC),
            )
        )

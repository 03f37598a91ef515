"""Customer domain events."""

from protean.fields import DateTime, Float, Identifier, String

from marketplace.domain import marketplace


@marketplace.event(part_of="Customer")
class CustomerRegistered:
    __version__ = 1

    customer_id = Identifier(required=True)
    name = String(required=True)
    phone = String(required=True)
    registered_at = DateTime(required=True)


@marketplace.event(part_of="Customer")
class AddressAdded:
    __version__ = 1

    customer_id = Identifier(required=True)
    address_id = Identifier(required=True)
    location = String(required=True)
    pincode = String()
    latitude = Float()
    longitude = Float()


@marketplace.event(part_of="Customer")
class CouponAssigned:
    __version__ = 1

    customer_id = Identifier(required=True)
    coupon_id = Identifier(required=True)
    assigned_at = DateTime(required=True)

"""Pydantic API schemas for the marketplace.

These are the external API contracts, kept separate from domain commands.
The API layer translates between these schemas and domain commands.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    product_id: str
    count: int = Field(gt=0)


class UpdateCartQuantityRequest(BaseModel):
    count: int = Field(gt=0)


class AddAddressRequest(BaseModel):
    location: str
    label: str | None = None
    pincode: str | None = None
    latitude: float | None = None
    longitude: float | None = None


class AssignCouponRequest(BaseModel):
    coupon_id: str


class CheckoutRequest(BaseModel):
    address_id: str | None = None
    client_name: str | None = None
    phone: str | None = None
    location: str | None = None
    pincode: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    notes: str | None = None
    is_urgent: bool = False
    wallet_points: int = Field(default=0, ge=0)
    coupon_id: str | None = None


class CancelOrderRequest(BaseModel):
    notes: str


class AdvanceStatusRequest(BaseModel):
    status: str


class UpdateStockRequest(BaseModel):
    count: int = Field(ge=0)


class UpdateStoreRequest(BaseModel):
    name: str | None = None
    address: str | None = None
    phone: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    pincode: int | None = None
    categories: dict[str, bool] | None = None


class RespondToOrderRequest(BaseModel):
    action: str
    reason: str | None = None
    notes: str | None = None


class RejectDeliveryRequest(BaseModel):
    reason: str
    notes: str | None = None


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------
class StatusResponse(BaseModel):
    status: str


class LineIdResponse(BaseModel):
    line_id: str


class AddressIdResponse(BaseModel):
    address_id: str


class OrderIdResponse(BaseModel):
    order_id: str


class CartLineResponse(BaseModel):
    line_id: str
    product_id: str
    count: int


class CouponResponse(BaseModel):
    coupon_id: str
    code: str
    discount: float
    expiry_date: datetime


class OrderLineResponse(BaseModel):
    product_id: str
    name: str
    quantity: int
    unit_price: float


class OrderResponse(BaseModel):
    order_id: str
    status: str
    customer_id: str
    store_id: str
    manager_id: str
    delivery_partner_id: str | None = None
    items: list[OrderLineResponse]
    subtotal: float
    discount: float
    wallet_points_used: int
    coupon_id: str | None = None
    delivery_charge: float
    amount: float
    client_name: str | None = None
    phone: str | None = None
    location: str | None = None
    pincode: str | None = None
    latitude: float
    longitude: float
    notes: str | None = None
    is_urgent: bool
    estimated_delivery_time: datetime | None = None
    actual_delivery_time: datetime | None = None
    picked_up_at: datetime | None = None
    cancellation_note: str | None = None
    cancelled_by: str | None = None
    delivery_rejection_reason: str | None = None
    created_at: datetime | None = None

    @classmethod
    def from_order(cls, order) -> "OrderResponse":
        return cls(
            order_id=str(order.id),
            status=order.status,
            customer_id=str(order.customer_id),
            store_id=str(order.store_id),
            manager_id=str(order.manager_id),
            delivery_partner_id=str(order.delivery_partner_id) if order.delivery_partner_id else None,
            items=[
                OrderLineResponse(
                    product_id=str(item.product_id),
                    name=item.name,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                )
                for item in order.items
            ],
            subtotal=order.subtotal,
            discount=order.discount or 0.0,
            wallet_points_used=order.wallet_points_used or 0,
            coupon_id=str(order.coupon_id) if order.coupon_id else None,
            delivery_charge=order.delivery_charge,
            amount=order.amount,
            client_name=order.client_name,
            phone=order.phone,
            location=order.location,
            pincode=order.pincode,
            latitude=order.latitude,
            longitude=order.longitude,
            notes=order.notes,
            is_urgent=bool(order.is_urgent),
            estimated_delivery_time=order.estimated_delivery_time,
            actual_delivery_time=order.actual_delivery_time,
            picked_up_at=order.picked_up_at,
            cancellation_note=order.cancellation_note,
            cancelled_by=order.cancelled_by,
            delivery_rejection_reason=order.delivery_rejection_reason,
            created_at=order.created_at,
        )


class LiveOrdersResponse(BaseModel):
    orders: dict[str, list[OrderResponse]]
    summary: dict[str, int]

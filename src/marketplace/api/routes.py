"""FastAPI routes for the marketplace.

Each router serves one role; the caller's identity comes from the principal
headers and is never taken from the request body.
"""

import json

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from marketplace.api.principal import Principal, get_principal, require_role
from marketplace.api.schemas import (
    AddAddressRequest,
    AddressIdResponse,
    AddToCartRequest,
    AdvanceStatusRequest,
    AssignCouponRequest,
    CancelOrderRequest,
    CartLineResponse,
    CheckoutRequest,
    CouponResponse,
    LineIdResponse,
    LiveOrdersResponse,
    OrderIdResponse,
    OrderResponse,
    RejectDeliveryRequest,
    RespondToOrderRequest,
    StatusResponse,
    UpdateCartQuantityRequest,
    UpdateStockRequest,
    UpdateStoreRequest,
)
from marketplace.catalogue.management import UpdateProductStock
from marketplace.customer.addresses import AddAddress
from marketplace.customer.cart import AddToCart, RemoveFromCart, UpdateCartQuantity
from marketplace.customer.coupons import AssignCoupon, available_coupons
from marketplace.customer.customer import Customer
from marketplace.delivery.pickup import RespondToOrder, scan_order
from marketplace.delivery.transit import CompleteDelivery, InitiateDelivery, RejectDelivery, assigned_orders
from marketplace.errors import NotFoundError
from marketplace.order.cancellation import CancelOrder
from marketplace.order.checkout import PlaceOrder, ReOrder
from marketplace.order.preparation import AdvanceOrderStatus
from marketplace.order.queries import Role, live_orders, order_for_principal, order_history
from marketplace.store.manager import Manager
from marketplace.store.registration import UpdateStoreDetails

customer_only = require_role(Role.CUSTOMER)
manager_only = require_role(Role.MANAGER)
partner_only = require_role(Role.DELIVERY_PARTNER)


# ---------------------------------------------------------------------------
# Customer Router
# ---------------------------------------------------------------------------
customer_router = APIRouter(prefix="/customer", tags=["customer"])


@customer_router.get("/cart", response_model=list[CartLineResponse])
async def get_cart(principal: Principal = Depends(customer_only)) -> list[CartLineResponse]:
    customer = current_domain.repository_for(Customer).get(principal.id)
    return [
        CartLineResponse(line_id=str(line.id), product_id=str(line.product_id), count=line.count)
        for line in customer.cart_lines
    ]


@customer_router.post("/cart", status_code=201, response_model=LineIdResponse)
async def add_to_cart(body: AddToCartRequest, principal: Principal = Depends(customer_only)) -> LineIdResponse:
    command = AddToCart(customer_id=principal.id, product_id=body.product_id, count=body.count)
    line_id = current_domain.process(command, asynchronous=False)
    return LineIdResponse(line_id=line_id)


@customer_router.put("/cart/{line_id}", response_model=StatusResponse)
async def update_cart_quantity(
    line_id: str, body: UpdateCartQuantityRequest, principal: Principal = Depends(customer_only)
) -> StatusResponse:
    command = UpdateCartQuantity(customer_id=principal.id, line_id=line_id, count=body.count)
    current_domain.process(command, asynchronous=False)
    return StatusResponse(status="cart_updated")


@customer_router.delete("/cart/{line_id}", response_model=StatusResponse)
async def remove_from_cart(line_id: str, principal: Principal = Depends(customer_only)) -> StatusResponse:
    current_domain.process(RemoveFromCart(customer_id=principal.id, line_id=line_id), asynchronous=False)
    return StatusResponse(status="item_removed")


@customer_router.post("/addresses", status_code=201, response_model=AddressIdResponse)
async def add_address(body: AddAddressRequest, principal: Principal = Depends(customer_only)) -> AddressIdResponse:
    command = AddAddress(customer_id=principal.id, **body.model_dump())
    address_id = current_domain.process(command, asynchronous=False)
    return AddressIdResponse(address_id=address_id)


@customer_router.get("/coupons/available", response_model=list[CouponResponse])
async def get_available_coupons(principal: Principal = Depends(customer_only)) -> list[CouponResponse]:
    return [
        CouponResponse(coupon_id=str(c.id), code=c.code, discount=c.discount, expiry_date=c.expiry_date)
        for c in available_coupons(principal.id)
    ]


@customer_router.post("/coupons", response_model=StatusResponse)
async def assign_coupon(body: AssignCouponRequest, principal: Principal = Depends(customer_only)) -> StatusResponse:
    current_domain.process(AssignCoupon(customer_id=principal.id, coupon_id=body.coupon_id), asynchronous=False)
    return StatusResponse(status="coupon_assigned")


@customer_router.post("/orders", status_code=201, response_model=OrderIdResponse)
async def place_order(body: CheckoutRequest, principal: Principal = Depends(customer_only)) -> OrderIdResponse:
    command = PlaceOrder(customer_id=principal.id, **body.model_dump())
    order_id = current_domain.process(command, asynchronous=False)
    return OrderIdResponse(order_id=order_id)


@customer_router.post("/orders/{order_id}/reorder", status_code=201, response_model=OrderIdResponse)
async def reorder(order_id: str, body: CheckoutRequest, principal: Principal = Depends(customer_only)) -> OrderIdResponse:
    command = ReOrder(customer_id=principal.id, order_id=order_id, **body.model_dump())
    new_order_id = current_domain.process(command, asynchronous=False)
    return OrderIdResponse(order_id=new_order_id)


@customer_router.put("/orders/{order_id}/cancel", response_model=StatusResponse)
async def cancel_order(
    order_id: str, body: CancelOrderRequest, principal: Principal = Depends(customer_only)
) -> StatusResponse:
    command = CancelOrder(order_id=order_id, customer_id=principal.id, notes=body.notes)
    current_domain.process(command, asynchronous=False)
    return StatusResponse(status="cancelled")


@customer_router.get("/orders", response_model=list[OrderResponse])
async def get_order_history(principal: Principal = Depends(customer_only)) -> list[OrderResponse]:
    return [OrderResponse.from_order(order) for order in order_history(principal.id)]


# ---------------------------------------------------------------------------
# Order Router (any role)
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, principal: Principal = Depends(get_principal)) -> OrderResponse:
    return OrderResponse.from_order(order_for_principal(order_id, principal.id, principal.role))


# ---------------------------------------------------------------------------
# Manager Router
# ---------------------------------------------------------------------------
manager_router = APIRouter(prefix="/manager", tags=["manager"])


@manager_router.get("/orders/live", response_model=LiveOrdersResponse)
async def get_live_orders(status: str | None = None, principal: Principal = Depends(manager_only)) -> LiveOrdersResponse:
    result = live_orders(principal.id, status)
    return LiveOrdersResponse(
        orders={name: [OrderResponse.from_order(o) for o in orders] for name, orders in result["orders"].items()},
        summary=result["summary"],
    )


@manager_router.put("/orders/{order_id}/status", response_model=StatusResponse)
async def advance_order_status(
    order_id: str, body: AdvanceStatusRequest, principal: Principal = Depends(manager_only)
) -> StatusResponse:
    command = AdvanceOrderStatus(order_id=order_id, manager_id=principal.id, status=body.status)
    current_domain.process(command, asynchronous=False)
    return StatusResponse(status=body.status)


@manager_router.put("/products/{product_id}/stock", response_model=StatusResponse)
async def update_stock(
    product_id: str, body: UpdateStockRequest, principal: Principal = Depends(manager_only)
) -> StatusResponse:
    command = UpdateProductStock(product_id=product_id, manager_id=principal.id, count=body.count)
    current_domain.process(command, asynchronous=False)
    return StatusResponse(status="stock_updated")


@manager_router.patch("/store", response_model=StatusResponse)
async def update_store(body: UpdateStoreRequest, principal: Principal = Depends(manager_only)) -> StatusResponse:
    manager = current_domain.repository_for(Manager).get(principal.id)
    if not manager.store_id:
        raise NotFoundError("Manager has no store")

    changes = body.model_dump(exclude_none=True)
    if "categories" in changes:
        changes["categories"] = json.dumps(changes["categories"])
    current_domain.process(UpdateStoreDetails(store_id=str(manager.store_id), **changes), asynchronous=False)
    return StatusResponse(status="store_updated")


# ---------------------------------------------------------------------------
# Delivery Router
# ---------------------------------------------------------------------------
delivery_router = APIRouter(prefix="/delivery", tags=["delivery"])


@delivery_router.get("/orders", response_model=list[OrderResponse])
async def get_assigned_orders(principal: Principal = Depends(partner_only)) -> list[OrderResponse]:
    return [OrderResponse.from_order(order) for order in assigned_orders(principal.id)]


@delivery_router.get("/orders/{order_id}/scan", response_model=OrderResponse)
async def scan(order_id: str, principal: Principal = Depends(partner_only)) -> OrderResponse:
    return OrderResponse.from_order(scan_order(order_id, principal.id))


@delivery_router.post("/orders/{order_id}/respond", response_model=StatusResponse)
async def respond_to_order(
    order_id: str, body: RespondToOrderRequest, principal: Principal = Depends(partner_only)
) -> StatusResponse:
    command = RespondToOrder(
        order_id=order_id,
        partner_id=principal.id,
        action=body.action,
        reason=body.reason,
        notes=body.notes,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse(status="accepted" if body.action == "accept" else "rejected")


@delivery_router.put("/orders/{order_id}/initiate", response_model=StatusResponse)
async def initiate_delivery(order_id: str, principal: Principal = Depends(partner_only)) -> StatusResponse:
    current_domain.process(InitiateDelivery(order_id=order_id, partner_id=principal.id), asynchronous=False)
    return StatusResponse(status="in_transit")


@delivery_router.put("/orders/{order_id}/deliver", response_model=StatusResponse)
async def complete_delivery(order_id: str, principal: Principal = Depends(partner_only)) -> StatusResponse:
    current_domain.process(CompleteDelivery(order_id=order_id, partner_id=principal.id), asynchronous=False)
    return StatusResponse(status="delivered")


@delivery_router.put("/orders/{order_id}/reject", response_model=StatusResponse)
async def reject_delivery(
    order_id: str, body: RejectDeliveryRequest, principal: Principal = Depends(partner_only)
) -> StatusResponse:
    command = RejectDelivery(order_id=order_id, partner_id=principal.id, reason=body.reason, notes=body.notes)
    current_domain.process(command, asynchronous=False)
    return StatusResponse(status="cancelled")

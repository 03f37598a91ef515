"""Marketplace API package."""

from marketplace.api.routes import customer_router, delivery_router, manager_router, order_router

__all__ = ["customer_router", "order_router", "manager_router", "delivery_router"]

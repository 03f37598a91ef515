"""Marketplace bounded context: ordering and store assignment for a meat-delivery marketplace.

Customers build a cart, checkout resolves the fulfilling store by pincode band
and geographic proximity, and the order moves through manager preparation and
delivery-partner hand-off. Uses CQRS: every aggregate is persisted as current
state, projections are fed from domain events.
"""

from protean.domain import Domain

from marketplace.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

marketplace = Domain(name="marketplace")

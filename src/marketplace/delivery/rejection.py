"""Delivery rejection log: why a partner turned an order down."""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import DateTime, Identifier, String, Text

from marketplace.domain import marketplace


class RejectionReason(Enum):
    CUSTOMER_NOT_AVAILABLE = "customer_not_available"
    WRONG_ADDRESS = "wrong_address"
    PAYMENT_ISSUE = "payment_issue"
    ORDER_CANCELLED = "order_cancelled"
    OTHER = "other"


@marketplace.aggregate
class DeliveryRejection:
    partner_id = Identifier(required=True)
    order_id = Identifier(required=True)
    reason = String(required=True, choices=RejectionReason)
    notes = Text()
    rejected_at = DateTime(required=True)

    @classmethod
    def log(cls, partner_id: str, order_id: str, reason: str, notes: str | None = None):
        return cls(
            partner_id=partner_id,
            order_id=order_id,
            reason=reason,
            notes=notes,
            rejected_at=datetime.now(UTC),
        )

"""Coupon aggregate: a percentage discount code with an expiry."""

from datetime import UTC, datetime

from protean.fields import DateTime, Float, Integer, String

from marketplace.domain import marketplace


def _as_utc(moment: datetime) -> datetime:
    return moment if moment.tzinfo else moment.replace(tzinfo=UTC)


@marketplace.aggregate
class Coupon:
    code = String(required=True, max_length=50, unique=True)
    discount = Float(required=True, min_value=0.0, max_value=100.0)
    expiry_date = DateTime(required=True)
    limit = Integer(min_value=0)
    created_at = DateTime()

    @classmethod
    def create(cls, code: str, discount: float, expiry_date: datetime, limit: int | None = None):
        return cls(
            code=code,
            discount=discount,
            expiry_date=expiry_date,
            limit=limit,
            created_at=datetime.now(UTC),
        )

    def is_usable(self, at: datetime | None = None) -> bool:
        """A coupon is usable strictly before its expiry."""
        moment = _as_utc(at or datetime.now(UTC))
        return moment < _as_utc(self.expiry_date)

"""Coupon lookups used at checkout and when listing a customer's coupons."""

from datetime import datetime

from marketplace.catalogue.coupon import Coupon
from marketplace.domain import marketplace


@marketplace.repository(part_of=Coupon)
class CouponRepository:
    def find(self, coupon_id: str) -> Coupon | None:
        """The coupon with this id, or None when there is none."""
        return self._dao.query.filter(id=coupon_id).all().first

    def find_usable(self, at: datetime) -> list[Coupon]:
        return [coupon for coupon in self._dao.query.all().items if coupon.is_usable(at)]

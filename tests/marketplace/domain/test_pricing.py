"""Tests for order pricing: wallet points, coupons and the delivery surcharge."""

from datetime import UTC, datetime, timedelta

import pytest

from marketplace.catalogue.coupon import Coupon
from marketplace.errors import InsufficientWalletError, MinimumOrderNotMetError
from marketplace.order.pricing import DELIVERY_CHARGE, price_order


def _lines(*pairs):
    return [{"quantity": quantity, "unit_price": price} for quantity, price in pairs]


def _coupon(discount=10.0, days=1):
    return Coupon.create(code="MEAT10", discount=discount, expiry_date=datetime.now(UTC) + timedelta(days=days))


class TestSubtotal:
    def test_subtotal_sums_quantity_times_price(self):
        quote = price_order(_lines((2, 250.0), (1, 100.0)))
        assert quote.subtotal == 600.0

    def test_plain_order_adds_delivery_charge(self):
        quote = price_order(_lines((2, 250.0)))
        assert quote.amount == 500.0 + DELIVERY_CHARGE
        assert quote.discount == 0.0
        assert quote.delivery_charge == 39


class TestWalletPoints:
    def test_wallet_points_deducted(self):
        quote = price_order(_lines((1, 600.0)), wallet_points=100, wallet_balance=200)
        assert quote.amount == 539.0
        assert quote.wallet_points_used == 100

    def test_subtotal_below_threshold_rejected(self):
        with pytest.raises(MinimumOrderNotMetError):
            price_order(_lines((1, 400.0)), wallet_points=50, wallet_balance=1000)

    def test_subtotal_at_threshold_allowed(self):
        quote = price_order(_lines((1, 500.0)), wallet_points=50, wallet_balance=50)
        assert quote.amount == 489.0

    def test_insufficient_balance_rejected(self):
        with pytest.raises(InsufficientWalletError):
            price_order(_lines((1, 800.0)), wallet_points=300, wallet_balance=200)

    def test_threshold_checked_before_balance(self):
        with pytest.raises(MinimumOrderNotMetError):
            price_order(_lines((1, 100.0)), wallet_points=300, wallet_balance=0)

    def test_wallet_takes_precedence_over_coupon(self):
        quote = price_order(_lines((1, 1000.0)), wallet_points=100, coupon=_coupon(), wallet_balance=100)
        assert quote.discount == 100
        assert quote.coupon_id is None
        assert quote.amount == 939.0


class TestCoupon:
    def test_coupon_percentage_applied(self):
        coupon = _coupon(discount=10.0)
        quote = price_order(_lines((1, 1000.0)), coupon=coupon)
        assert quote.amount == 939.0
        assert quote.discount == 100.0
        assert quote.coupon_id == str(coupon.id)
        assert quote.wallet_points_used == 0

    def test_expired_coupon_still_applied(self):
        quote = price_order(_lines((1, 1000.0)), coupon=_coupon(discount=20.0, days=-1))
        assert quote.amount == 839.0

    def test_coupon_ignores_wallet_threshold(self):
        quote = price_order(_lines((1, 100.0)), coupon=_coupon(discount=50.0))
        assert quote.amount == 89.0


class TestNegativeTotals:
    def test_negative_total_passes_through(self):
        quote = price_order(_lines((1, 500.0)), wallet_points=600, wallet_balance=600)
        assert quote.amount == -61.0

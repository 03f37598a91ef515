"""Order pricing: wallet points or coupon, then the delivery surcharge.

Wallet points take precedence over a coupon; the two are never combined. A
coupon is applied whenever one was found, whether or not it has expired;
expired redemptions are logged so they can be audited.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime

from marketplace.catalogue.coupon import Coupon
from marketplace.errors import InsufficientWalletError, MinimumOrderNotMetError
from marketplace.utils.logging import get_logger

logger = get_logger(__name__)

DELIVERY_CHARGE = 39
WALLET_MINIMUM_ORDER = 500


@dataclass(frozen=True)
class Quote:
    subtotal: float
    discount: float
    wallet_points_used: int
    coupon_id: str | None
    delivery_charge: float
    amount: float


def price_order(
    lines: Iterable[dict],
    wallet_points: int = 0,
    coupon: Coupon | None = None,
    wallet_balance: int = 0,
    at: datetime | None = None,
) -> Quote:
    """Price order lines given as dicts with ``quantity`` and ``unit_price``."""
    subtotal = sum(line["quantity"] * line["unit_price"] for line in lines)

    discount = 0.0
    points_used = 0
    coupon_id = None

    if wallet_points and wallet_points > 0:
        if subtotal < WALLET_MINIMUM_ORDER:
            raise MinimumOrderNotMetError()
        if wallet_balance < wallet_points:
            raise InsufficientWalletError()
        discount = wallet_points
        points_used = wallet_points
    elif coupon is not None:
        if not coupon.is_usable(at):
            logger.warning("Redeeming expired coupon", coupon_id=str(coupon.id), code=coupon.code)
        discount = subtotal * coupon.discount / 100
        coupon_id = str(coupon.id)

    amount = subtotal - discount + DELIVERY_CHARGE
    if amount < 0:
        logger.warning("Order total is negative", subtotal=subtotal, discount=discount, amount=amount)

    return Quote(
        subtotal=subtotal,
        discount=discount,
        wallet_points_used=points_used,
        coupon_id=coupon_id,
        delivery_charge=DELIVERY_CHARGE,
        amount=amount,
    )

"""Product aggregate: a sellable meat item with a per-manager stock ledger."""

from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, Text

from marketplace.domain import marketplace

# Sentinel for distinguishing "not provided" from None in partial updates
_UNSET = object()


def discounted_price(price: float, discount: float) -> float:
    """Price after a percentage discount, rounded half up to two decimals."""
    value = Decimal(str(price)) * (Decimal(100) - Decimal(str(discount or 0))) / Decimal(100)
    return float(value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


@marketplace.entity(part_of="Product")
class StockLevel:
    """Units of the product held by one store manager."""

    manager_id = Identifier(required=True)
    count = Integer(required=True, min_value=0)


@marketplace.aggregate
class Product:
    name = String(required=True, max_length=200)
    description = Text()
    price = Float(required=True, min_value=0.0)
    discount = Float(min_value=0.0, max_value=100.0, default=0.0)
    discount_price = Float()
    stock = HasMany(StockLevel)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(cls, name: str, price: float, discount: float = 0.0, description: str | None = None):
        now = datetime.now(UTC)
        return cls(
            name=name,
            description=description,
            price=price,
            discount=discount,
            discount_price=discounted_price(price, discount),
            created_at=now,
            updated_at=now,
        )

    def reprice(self, price=_UNSET, discount=_UNSET) -> None:
        """Change the base price and/or discount; the derived price follows."""
        new_price = price if price is not _UNSET else self.price
        new_discount = discount if discount is not _UNSET else self.discount

        self.price = new_price
        self.discount = new_discount
        self.discount_price = discounted_price(new_price, new_discount)
        self.updated_at = datetime.now(UTC)

    def set_stock(self, manager_id: str, count: int) -> None:
        if count < 0:
            raise ValidationError({"count": ["Stock count cannot be negative"]})

        level = next((s for s in (self.stock or []) if str(s.manager_id) == str(manager_id)), None)
        if level is None:
            self.add_stock(StockLevel(manager_id=manager_id, count=count))
        else:
            level.count = count
        self.updated_at = datetime.now(UTC)

    def stock_for(self, manager_id: str) -> int:
        level = next((s for s in (self.stock or []) if str(s.manager_id) == str(manager_id)), None)
        return level.count if level else 0

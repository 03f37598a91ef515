"""Catalogue management: products, stock ledger and coupons."""

from protean import handle
from protean.fields import DateTime, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from marketplace.catalogue.coupon import Coupon
from marketplace.catalogue.product import Product
from marketplace.domain import marketplace


@marketplace.command(part_of="Product")
class CreateProduct:
    name = String(required=True, max_length=200)
    price = Float(required=True, min_value=0.0)
    discount = Float(min_value=0.0, max_value=100.0, default=0.0)
    description = Text()


@marketplace.command(part_of="Product")
class RepriceProduct:
    product_id = Identifier(required=True)
    price = Float(min_value=0.0)
    discount = Float(min_value=0.0, max_value=100.0)


@marketplace.command(part_of="Product")
class UpdateProductStock:
    """Set the units a manager holds of a product."""

    product_id = Identifier(required=True)
    manager_id = Identifier(required=True)
    count = Integer(required=True, min_value=0)


@marketplace.command(part_of="Coupon")
class CreateCoupon:
    code = String(required=True, max_length=50)
    discount = Float(required=True, min_value=0.0, max_value=100.0)
    expiry_date = DateTime(required=True)
    limit = Integer(min_value=0)


@marketplace.command_handler(part_of=Product)
class ProductManagementHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        product = Product.create(
            name=command.name,
            price=command.price,
            discount=command.discount or 0.0,
            description=command.description,
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)

    @handle(RepriceProduct)
    def reprice_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)

        kwargs = {}
        if command.price is not None:
            kwargs["price"] = command.price
        if command.discount is not None:
            kwargs["discount"] = command.discount

        product.reprice(**kwargs)
        repo.add(product)

    @handle(UpdateProductStock)
    def update_product_stock(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.set_stock(command.manager_id, command.count)
        repo.add(product)


@marketplace.command_handler(part_of=Coupon)
class CouponManagementHandler:
    @handle(CreateCoupon)
    def create_coupon(self, command):
        coupon = Coupon.create(
            code=command.code,
            discount=command.discount,
            expiry_date=command.expiry_date,
            limit=command.limit,
        )
        current_domain.repository_for(Coupon).add(coupon)
        return str(coupon.id)

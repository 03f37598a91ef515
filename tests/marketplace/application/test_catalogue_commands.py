"""Application tests for product pricing and stock commands."""

import pytest
from protean import current_domain
from protean.exceptions import ValidationError

from marketplace.catalogue.management import RepriceProduct, UpdateProductStock
from marketplace.catalogue.product import Product


def _process(command):
    current_domain.process(command, asynchronous=False)


def _product(product_id):
    return current_domain.repository_for(Product).get(product_id)


class TestRepriceProduct:
    def test_discount_price_recomputed(self, make_product):
        product_id = make_product(price=400.0)

        _process(RepriceProduct(product_id=product_id, discount=25.0))

        product = _product(product_id)
        assert product.price == 400.0
        assert product.discount_price == 300.0

    def test_price_change_keeps_discount(self, make_product):
        product_id = make_product(price=400.0, discount=10.0)

        _process(RepriceProduct(product_id=product_id, price=500.0))

        assert _product(product_id).discount_price == 450.0


class TestUpdateProductStock:
    def test_stock_tracked_per_manager(self, make_product, make_store):
        product_id = make_product()
        first = make_store()
        second = make_store(pincode=560002)

        _process(UpdateProductStock(product_id=product_id, manager_id=first["manager_id"], count=12))
        _process(UpdateProductStock(product_id=product_id, manager_id=second["manager_id"], count=3))
        _process(UpdateProductStock(product_id=product_id, manager_id=first["manager_id"], count=8))

        product = _product(product_id)
        assert product.stock_for(first["manager_id"]) == 8
        assert product.stock_for(second["manager_id"]) == 3

    def test_negative_stock_rejected(self, make_product, make_store):
        product_id = make_product()
        store = make_store()

        with pytest.raises(ValidationError):
            UpdateProductStock(product_id=product_id, manager_id=store["manager_id"], count=-1)

"""Application tests for placing an order again from a past order."""

import pytest
from protean import current_domain

from marketplace.catalogue.management import RepriceProduct
from marketplace.customer.cart import AddToCart
from marketplace.customer.customer import Customer
from marketplace.errors import OrderNotFoundError
from marketplace.order.checkout import ReOrder
from marketplace.order.order import Order, OrderStatus


def _reorder(customer_id, order_id, **fields):
    return current_domain.process(ReOrder(customer_id=customer_id, order_id=order_id, **fields), asynchronous=False)


class TestReOrder:
    def test_reorder_copies_items_at_current_prices(self, make_store, make_product, make_customer, checkout):
        make_store()
        product_id = make_product(name="Prawns", price=400.0)
        customer_id = make_customer()
        first_id = checkout(customer_id, [(product_id, 2)])

        current_domain.process(RepriceProduct(product_id=product_id, price=450.0), asynchronous=False)
        second_id = _reorder(customer_id, first_id)

        second = current_domain.repository_for(Order).get(second_id)
        assert second_id != first_id
        assert second.status == OrderStatus.PENDING.value
        assert [(str(i.product_id), i.quantity, i.unit_price) for i in second.items] == [(product_id, 2, 450.0)]
        assert second.location == "12 Brigade Road"
        assert second.amount == 939.0

    def test_reorder_appends_history_and_keeps_cart(self, make_store, make_product, make_customer, checkout):
        make_store()
        product_id = make_product()
        customer_id = make_customer()
        first_id = checkout(customer_id, [(product_id, 1)])
        current_domain.process(
            AddToCart(customer_id=customer_id, product_id=make_product(name="Eggs"), count=6),
            asynchronous=False,
        )

        second_id = _reorder(customer_id, first_id)

        customer = current_domain.repository_for(Customer).get(customer_id)
        assert [str(h.order_id) for h in customer.order_history] == [first_id, second_id]
        assert len(customer.cart_lines) == 1

    def test_reorder_of_another_customers_order_not_found(self, make_store, make_product, make_customer, checkout):
        make_store()
        first_id = checkout(make_customer(), [(make_product(), 1)])

        with pytest.raises(OrderNotFoundError):
            _reorder(make_customer(name="Someone Else"), first_id)

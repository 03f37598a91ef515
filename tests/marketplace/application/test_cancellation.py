"""Application tests for customer cancellation."""

import pytest
from protean import current_domain
from protean.exceptions import ValidationError

from marketplace.errors import OrderNotFoundError
from marketplace.order.cancellation import CancelOrder
from marketplace.order.order import Order, OrderStatus


def _cancel(order_id, customer_id, notes):
    current_domain.process(CancelOrder(order_id=order_id, customer_id=customer_id, notes=notes), asynchronous=False)


class TestCancelOrder:
    def test_customer_cancels_with_note(self, make_store, make_product, make_customer, checkout):
        make_store()
        customer_id = make_customer()
        order_id = checkout(customer_id, [(make_product(), 1)])

        _cancel(order_id, customer_id, "Ordered the wrong cut")

        order = current_domain.repository_for(Order).get(order_id)
        assert order.status == OrderStatus.CANCELLED.value
        assert order.cancellation_note == "Ordered the wrong cut"

    @pytest.mark.parametrize("notes", ["", "    "])
    def test_note_required(self, make_store, make_product, make_customer, checkout, notes):
        make_store()
        customer_id = make_customer()
        order_id = checkout(customer_id, [(make_product(), 1)])

        with pytest.raises(ValidationError):
            _cancel(order_id, customer_id, notes)

        assert current_domain.repository_for(Order).get(order_id).status == OrderStatus.PENDING.value

    def test_other_customer_gets_not_found(self, make_store, make_product, make_customer, checkout):
        make_store()
        order_id = checkout(make_customer(), [(make_product(), 1)])

        with pytest.raises(OrderNotFoundError):
            _cancel(order_id, make_customer(name="Intruder"), "Not mine")

    def test_already_cancelled_rejected(self, make_store, make_product, make_customer, checkout):
        make_store()
        customer_id = make_customer()
        order_id = checkout(customer_id, [(make_product(), 1)])
        _cancel(order_id, customer_id, "Changed my mind")

        with pytest.raises(ValidationError):
            _cancel(order_id, customer_id, "Again")

"""Integration tests for the order status feed projection."""

from protean import current_domain

from marketplace.delivery.pickup import RespondToOrder
from marketplace.order.cancellation import CancelOrder
from marketplace.projections.order_status_feed import status_feed


class TestOrderStatusFeed:
    def test_placement_starts_the_feed(self, make_store, make_customer, make_product, checkout):
        make_store()
        customer_id = make_customer()
        order_id = checkout(customer_id, [(make_product(), 1)])

        entries = status_feed(order_id)
        assert len(entries) == 1
        assert entries[0].from_status is None
        assert entries[0].to_status == "pending"
        assert entries[0].actor == "customer"
        assert str(entries[0].actor_id) == customer_id

    def test_each_transition_is_appended(self, ready_order, make_partner):
        order = ready_order()
        partner_id = make_partner()
        current_domain.process(
            RespondToOrder(order_id=order["order_id"], partner_id=partner_id, action="accept"),
            asynchronous=False,
        )

        entries = status_feed(order["order_id"])
        assert [(e.from_status, e.to_status) for e in entries] == [
            (None, "pending"),
            ("pending", "confirmed"),
            ("confirmed", "preparing"),
            ("preparing", "ready"),
            ("ready", "picked_up"),
        ]
        assert entries[-1].actor == "delivery_partner"
        assert str(entries[-1].actor_id) == partner_id

    def test_cancellation_recorded(self, make_store, make_customer, make_product, checkout):
        make_store()
        customer_id = make_customer()
        order_id = checkout(customer_id, [(make_product(), 1)])
        current_domain.process(
            CancelOrder(order_id=order_id, customer_id=customer_id, notes="Ordered twice"),
            asynchronous=False,
        )

        assert status_feed(order_id)[-1].to_status == "cancelled"

    def test_feed_filters_by_order(self, make_store, make_customer, make_product, checkout):
        make_store()
        product_id = make_product()
        first = checkout(make_customer(), [(product_id, 1)])
        checkout(make_customer(), [(product_id, 1)])

        assert len(status_feed()) == 2
        assert {str(e.order_id) for e in status_feed(first)} == {first}

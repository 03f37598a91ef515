"""Application tests for scanning, accepting and rejecting READY orders."""

from datetime import UTC, datetime

import pytest
from protean import current_domain

from marketplace.delivery.partner import DeliveryPartner
from marketplace.delivery.pickup import RespondToOrder, scan_order
from marketplace.delivery.rejection import DeliveryRejection
from marketplace.delivery.transit import assigned_orders
from marketplace.errors import AuthorizationError, ConflictError, NotFoundError, OrderNotFoundError
from marketplace.order.order import Order, OrderStatus


def _respond(order_id, partner_id, action, **fields):
    current_domain.process(
        RespondToOrder(order_id=order_id, partner_id=partner_id, action=action, **fields),
        asynchronous=False,
    )


def _order(order_id):
    return current_domain.repository_for(Order).get(order_id)


def _partner(partner_id):
    return current_domain.repository_for(DeliveryPartner).get(partner_id)


class TestScanOrder:
    def test_scan_returns_ready_order(self, ready_order, make_partner):
        order = ready_order()
        partner_id = make_partner()

        scanned = scan_order(order["order_id"], partner_id)
        assert str(scanned.id) == order["order_id"]

    def test_scan_of_unprepared_order_not_found(self, make_store, make_product, make_customer, checkout, make_partner):
        make_store()
        order_id = checkout(make_customer(), [(make_product(), 1)])

        with pytest.raises(OrderNotFoundError):
            scan_order(order_id, make_partner())

    def test_inactive_partner_cannot_scan(self, ready_order, make_partner):
        order = ready_order()
        with pytest.raises(AuthorizationError):
            scan_order(order["order_id"], make_partner(activate=False))


class TestAcceptOrder:
    def test_accept_assigns_order_to_partner(self, ready_order, make_partner):
        order = ready_order()
        partner_id = make_partner()

        _respond(order["order_id"], partner_id, "accept")

        accepted = _order(order["order_id"])
        assert accepted.status == OrderStatus.PICKED_UP.value
        assert str(accepted.delivery_partner_id) == partner_id
        assert str(accepted.picked_up_by) == partner_id
        assert accepted.picked_up_at is not None
        assert [str(o.id) for o in assigned_orders(partner_id)] == [order["order_id"]]
        assert _partner(partner_id).total_accepted == 1

    def test_accepting_twice_is_idempotent(self, ready_order, make_partner):
        order = ready_order()
        partner_id = make_partner()

        _respond(order["order_id"], partner_id, "accept")
        _respond(order["order_id"], partner_id, "accept")

        assert len(assigned_orders(partner_id)) == 1
        assert _partner(partner_id).total_accepted == 1

    def test_second_partner_gets_conflict(self, ready_order, make_partner):
        order = ready_order()
        first = make_partner(name="First")
        second = make_partner(name="Second")

        _respond(order["order_id"], first, "accept")
        with pytest.raises(ConflictError):
            _respond(order["order_id"], second, "accept")

        assert str(_order(order["order_id"]).delivery_partner_id) == first
        assert assigned_orders(second) == []
        assert _partner(second).total_accepted == 0

    def test_claim_succeeds_only_once(self, ready_order, make_partner):
        order = ready_order()
        first = make_partner(name="First")
        second = make_partner(name="Second")
        repo = current_domain.repository_for(Order)

        assert repo.claim_for_pickup(order["order_id"], first, datetime.now(UTC)) is True
        assert repo.claim_for_pickup(order["order_id"], second, datetime.now(UTC)) is False
        assert repo.is_held_by(order["order_id"], first)
        assert not repo.is_held_by(order["order_id"], second)

    def test_accepting_unprepared_order_not_found(
        self, make_store, make_product, make_customer, checkout, make_partner
    ):
        make_store()
        order_id = checkout(make_customer(), [(make_product(), 1)])

        with pytest.raises(OrderNotFoundError):
            _respond(order_id, make_partner(), "accept")

        assert _order(order_id).status == OrderStatus.PENDING.value

    def test_inactive_partner_cannot_accept(self, ready_order, make_partner):
        order = ready_order()
        with pytest.raises(AuthorizationError):
            _respond(order["order_id"], make_partner(activate=False), "accept")

        assert _order(order["order_id"]).status == OrderStatus.READY.value


class TestRejectAtPickup:
    def test_reject_logs_reason_and_leaves_order_ready(self, ready_order, make_partner):
        order = ready_order()
        partner_id = make_partner()

        _respond(order["order_id"], partner_id, "reject", reason="wrong_address", notes="Too far")

        assert _order(order["order_id"]).status == OrderStatus.READY.value
        assert _partner(partner_id).total_rejected == 1

        rejections = current_domain.repository_for(DeliveryRejection)._dao.query.all().items
        assert len(rejections) == 1
        assert rejections[0].reason == "wrong_address"
        assert rejections[0].notes == "Too far"

    def test_reject_without_reason_records_other(self, ready_order, make_partner):
        order = ready_order()
        _respond(order["order_id"], make_partner(), "reject")

        rejection = current_domain.repository_for(DeliveryRejection)._dao.query.all().first
        assert rejection.reason == "other"

    def test_rejected_order_still_open_to_others(self, ready_order, make_partner):
        order = ready_order()
        _respond(order["order_id"], make_partner(name="First"), "reject")

        second = make_partner(name="Second")
        _respond(order["order_id"], second, "accept")
        assert str(_order(order["order_id"]).delivery_partner_id) == second

    def test_cannot_reject_order_claimed_by_someone_else(self, ready_order, make_partner):
        order = ready_order()
        _respond(order["order_id"], make_partner(name="First"), "accept")

        with pytest.raises(OrderNotFoundError):
            _respond(order["order_id"], make_partner(name="Second"), "reject")


class TestPartnerCounters:
    def test_each_increment_adds_one(self, make_partner):
        partner_id = make_partner()
        repo = current_domain.repository_for(DeliveryPartner)

        assert repo.increment(partner_id, "total_deliveries") == 1
        assert repo.increment(partner_id, "total_deliveries") == 2
        assert _partner(partner_id).total_deliveries == 2
        assert _partner(partner_id).total_accepted == 0

    def test_unknown_partner_not_found(self):
        with pytest.raises(NotFoundError):
            current_domain.repository_for(DeliveryPartner).increment("no-such-partner", "total_accepted")

    def test_unknown_counter_rejected(self, make_partner):
        with pytest.raises(ValueError):
            current_domain.repository_for(DeliveryPartner).increment(make_partner(), "rating")

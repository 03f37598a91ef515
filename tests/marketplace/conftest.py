import pytest
from protean import current_domain
from protean.integrations.pytest import DomainFixture

from marketplace.catalogue.management import CreateProduct
from marketplace.customer.cart import AddToCart
from marketplace.customer.registration import RegisterCustomer
from marketplace.delivery.partner import REQUIRED_DOCUMENTS
from marketplace.delivery.registration import (
    ActivateDeliveryPartner,
    RegisterDeliveryPartner,
    UpdateDocumentStatus,
)
from marketplace.geo.geocoding import reset_geocoder
from marketplace.order.checkout import PlaceOrder
from marketplace.order.preparation import AdvanceOrderStatus
from marketplace.store.registration import AssignStoreManager, RegisterManager, RegisterStore

# Central Bengaluru; stores and customers in tests sit a few kilometres apart
CUSTOMER_LAT, CUSTOMER_LNG = 12.9716, 77.5946


@pytest.fixture(scope="session")
def marketplace_bed():
    from marketplace.domain import marketplace

    bed = DomainFixture(marketplace)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(marketplace_bed):
    with marketplace_bed.domain_context():
        yield

        for _, provider in current_domain.providers.items():
            provider._data_reset()
        current_domain.event_store.store._data_reset()
        reset_geocoder()


def _process(command):
    return current_domain.process(command, asynchronous=False)


@pytest.fixture()
def make_store():
    """Register a store, optionally with a manager assigned."""
    counter = iter(range(1, 1000))

    def _make(pincode=560001, latitude=12.9750, longitude=77.6000, with_manager=True, name=None):
        store_id = _process(
            RegisterStore(
                name=name or f"Fresh Cuts {next(counter)}",
                pincode=pincode,
                latitude=latitude,
                longitude=longitude,
                address="MG Road",
            )
        )
        manager_id = None
        if with_manager:
            manager_id = _process(RegisterManager(name="Ravi", phone="9000000001"))
            _process(AssignStoreManager(store_id=store_id, manager_id=manager_id))
        return {"store_id": store_id, "manager_id": manager_id}

    return _make


@pytest.fixture()
def make_product():
    def _make(name="Chicken Curry Cut", price=250.0, discount=0.0):
        return _process(CreateProduct(name=name, price=price, discount=discount))

    return _make


@pytest.fixture()
def make_customer():
    counter = iter(range(1, 1000))

    def _make(wallet=0, name="Asha"):
        return _process(RegisterCustomer(name=name, phone=f"98{next(counter):08d}", wallet=wallet))

    return _make


@pytest.fixture()
def make_partner():
    """Register a delivery partner with verified documents and activate them."""
    counter = iter(range(1, 1000))

    def _make(name="Kiran", activate=True):
        partner_id = _process(RegisterDeliveryPartner(name=name, phone=f"97{next(counter):08d}"))
        if activate:
            for document in REQUIRED_DOCUMENTS:
                _process(UpdateDocumentStatus(partner_id=partner_id, document=document, status="verified"))
            _process(ActivateDeliveryPartner(partner_id=partner_id))
        return partner_id

    return _make


@pytest.fixture()
def checkout():
    """Fill the customer's cart and place an order at the default location."""

    def _checkout(customer_id, items, **overrides):
        for product_id, count in items:
            _process(AddToCart(customer_id=customer_id, product_id=product_id, count=count))
        fields = {
            "customer_id": customer_id,
            "location": "12 Brigade Road",
            "pincode": "560001",
            "latitude": CUSTOMER_LAT,
            "longitude": CUSTOMER_LNG,
        }
        fields.update(overrides)
        return _process(PlaceOrder(**fields))

    return _checkout


@pytest.fixture()
def ready_order(make_store, make_product, make_customer, checkout):
    """An order that the store has prepared and marked READY."""

    def _make():
        store = make_store()
        product_id = make_product(price=300.0)
        customer_id = make_customer()
        order_id = checkout(customer_id, [(product_id, 2)])
        for status in ("confirmed", "preparing", "ready"):
            _process(AdvanceOrderStatus(order_id=order_id, manager_id=store["manager_id"], status=status))
        return {"order_id": order_id, "customer_id": customer_id, **store}

    return _make

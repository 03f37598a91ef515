"""Application tests for the customer address book."""

from protean import current_domain

from marketplace.customer.addresses import AddAddress
from marketplace.customer.customer import Customer
from marketplace.geo.geocoding import get_geocoder


def _add(customer_id, **fields):
    return current_domain.process(AddAddress(customer_id=customer_id, **fields), asynchronous=False)


def _address(customer_id, address_id):
    return current_domain.repository_for(Customer).get(customer_id).find_address(address_id)


class TestAddAddress:
    def test_explicit_coordinates_are_kept(self, make_customer):
        customer_id = make_customer()
        address_id = _add(customer_id, location="4 Church Street", pincode="560001", latitude=12.975, longitude=77.605)

        address = _address(customer_id, address_id)
        assert (address.latitude, address.longitude) == (12.975, 77.605)
        assert address.label == "Home"

    def test_missing_coordinates_are_geocoded(self, make_customer):
        customer_id = make_customer()
        address_id = _add(customer_id, location="MG Road", pincode="560001", label="Office")

        address = _address(customer_id, address_id)
        assert (address.latitude, address.longitude) == (12.9767, 77.5713)
        assert address.label == "Office"

    def test_geocoder_failure_stores_address_without_coordinates(self, make_customer):
        get_geocoder().configure(should_succeed=False)
        customer_id = make_customer()

        address_id = _add(customer_id, location="Somewhere", pincode="560001")

        address = _address(customer_id, address_id)
        assert address.location == "Somewhere"
        assert address.latitude is None
        assert address.longitude is None

    def test_unknown_pincode_stores_address_without_coordinates(self, make_customer):
        customer_id = make_customer()
        address_id = _add(customer_id, location="Hill Road", pincode="999999")

        assert _address(customer_id, address_id).latitude is None

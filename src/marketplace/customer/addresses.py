"""Customer address book: command and handler.

Addresses submitted without coordinates are geocoded. A geocoding failure does
not reject the address; it is stored without coordinates and checkout will
ask for them explicitly.
"""

from protean import handle
from protean.fields import Float, Identifier, String
from protean.utils.globals import current_domain

from marketplace.customer.customer import Customer
from marketplace.domain import marketplace
from marketplace.geo.geocoding import get_geocoder
from marketplace.geo.geocoding.port import GeocodingError
from marketplace.utils.logging import get_logger

logger = get_logger(__name__)


@marketplace.command(part_of="Customer")
class AddAddress:
    customer_id = Identifier(required=True)
    location = String(required=True, max_length=500)
    label = String(max_length=50)
    pincode = String(max_length=10)
    latitude = Float()
    longitude = Float()


@marketplace.command_handler(part_of=Customer)
class ManageAddressesHandler:
    @handle(AddAddress)
    def add_address(self, command):
        repo = current_domain.repository_for(Customer)
        customer = repo.get(command.customer_id)

        latitude, longitude = command.latitude, command.longitude
        if latitude is None or longitude is None:
            try:
                latitude, longitude = get_geocoder().locate(command.location, command.pincode)
            except GeocodingError as exc:
                logger.warning(
                    "Geocoding failed, storing address without coordinates",
                    customer_id=str(command.customer_id),
                    reason=str(exc),
                )
                latitude, longitude = None, None

        address = customer.add_address(
            location=command.location,
            pincode=command.pincode,
            latitude=latitude,
            longitude=longitude,
            label=command.label,
        )
        repo.add(customer)
        return str(address.id)

"""Fake geocoder adapter: deterministic geocoding for testing and development.

Resolves known pincodes from a fixed table. Configurable failure behavior for
exercising degraded paths.
"""

from marketplace.geo.geocoding.port import GeocoderPort, GeocodingError

_KNOWN_PINCODES = {
    "110001": (28.6328, 77.2197),
    "400001": (18.9388, 72.8354),
    "560001": (12.9767, 77.5713),
    "600001": (13.0878, 80.2785),
    "700001": (22.5726, 88.3639),
}


class FakeGeocoder(GeocoderPort):
    """Fake geocoder that resolves a fixed set of pincodes."""

    def __init__(self):
        self.should_succeed = True
        self.failure_reason = "Geocoder unavailable"
        self.locations = dict(_KNOWN_PINCODES)

    def configure(self, should_succeed: bool = True, failure_reason: str = "Geocoder unavailable"):
        """Configure the fake geocoder behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def register(self, pincode: str, latitude: float, longitude: float) -> None:
        self.locations[str(pincode)] = (latitude, longitude)

    def locate(self, location: str, pincode: str | None = None) -> tuple[float, float]:
        if not self.should_succeed:
            raise GeocodingError(self.failure_reason)

        coordinates = self.locations.get(str(pincode).strip()) if pincode else None
        if coordinates is None:
            raise GeocodingError(f"Could not geocode address: {location}")
        return coordinates

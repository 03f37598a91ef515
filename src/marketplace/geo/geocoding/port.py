"""Geocoder port: abstract interface for address geocoding services.

Domain code programs against the port; adapters are swapped via configuration.
"""

from abc import ABC, abstractmethod


class GeocodingError(Exception):
    """Raised when an address cannot be resolved to coordinates."""


class GeocoderPort(ABC):
    """Abstract interface for geocoder adapters."""

    @abstractmethod
    def locate(self, location: str, pincode: str | None = None) -> tuple[float, float]:
        """Resolve a free-text address to coordinates.

        Returns:
            (latitude, longitude)

        Raises:
            GeocodingError: when the address cannot be resolved.
        """
        ...

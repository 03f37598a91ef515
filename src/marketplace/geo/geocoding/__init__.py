"""Geocoder adapter abstraction: pluggable address-to-coordinates lookup."""

import os

_geocoder_instance = None


def get_geocoder():
    """Return the configured geocoder adapter (singleton).

    Uses FakeGeocoder by default. In production, configure via
    GEOCODER_ADAPTER environment variable.
    """
    global _geocoder_instance
    if _geocoder_instance is None:
        adapter = os.environ.get("GEOCODER_ADAPTER", "fake")
        if adapter == "fake":
            from marketplace.geo.geocoding.fake_adapter import FakeGeocoder

            _geocoder_instance = FakeGeocoder()
        else:
            raise ValueError(f"Unknown geocoder adapter: {adapter}")
    return _geocoder_instance


def reset_geocoder():
    """Reset the geocoder singleton (useful for testing)."""
    global _geocoder_instance
    _geocoder_instance = None

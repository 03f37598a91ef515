"""Nearest-store selection by great-circle distance."""

import math
from collections.abc import Iterable
from typing import Any

EARTH_RADIUS_KM = 6371


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance between two points in kilometers."""
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lng = math.radians(lng2 - lng1)

    a = math.sin(delta_lat / 2) ** 2 + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(delta_lng / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def select_nearest(candidates: Iterable[Any], target_lat: float, target_lng: float) -> Any | None:
    """Return the candidate closest to the target point, or None.

    Candidates are any objects exposing ``latitude`` and ``longitude``; those
    missing either coordinate are skipped. On equal distances the earliest
    candidate wins, so callers control tie-breaking through ordering.
    """
    nearest = None
    min_distance = math.inf

    for candidate in candidates:
        if candidate.latitude is None or candidate.longitude is None:
            continue

        distance = haversine_km(target_lat, target_lng, candidate.latitude, candidate.longitude)
        if distance < min_distance:
            min_distance = distance
            nearest = candidate

    return nearest

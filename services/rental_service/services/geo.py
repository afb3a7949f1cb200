"""Great-circle helpers for store proximity search."""

import math
from typing import Optional

from geopy.distance import EARTH_RADIUS, great_circle


def distance_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Spherical distance between two points in kilometres."""
    return great_circle((lat1, lng1), (lat2, lng2)).km


def bounding_box(
    latitude: float, longitude: float, radius_km: float
) -> tuple[float, float, Optional[float], Optional[float]]:
    """Return ``(min_lat, max_lat, min_lng, max_lng)`` enclosing the circle.

    Longitude bounds are ``None`` when the circle reaches a pole or crosses
    the antimeridian; callers then filter on latitude only and rely on the
    exact distance check.
    """
    angular = radius_km / EARTH_RADIUS
    lat_delta = math.degrees(angular)
    min_lat = latitude - lat_delta
    max_lat = latitude + lat_delta
    if min_lat <= -90 or max_lat >= 90:
        return max(min_lat, -90.0), min(max_lat, 90.0), None, None

    ratio = math.sin(angular) / math.cos(math.radians(latitude))
    if ratio >= 1:
        return min_lat, max_lat, None, None

    lng_delta = math.degrees(math.asin(ratio))
    min_lng = longitude - lng_delta
    max_lng = longitude + lng_delta
    if min_lng < -180 or max_lng > 180:
        return min_lat, max_lat, None, None
    return min_lat, max_lat, min_lng, max_lng

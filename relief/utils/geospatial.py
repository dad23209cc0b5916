"""Great-circle distance helpers used by proximity queries."""

import math
from typing import NamedTuple

EARTH_RADIUS_KM = 6371.0


class Coordinates(NamedTuple):
    latitude: float
    longitude: float


def distance_km(a: Coordinates, b: Coordinates) -> float:
    """Haversine distance between two points, in kilometres.

    The intermediate term is clamped to [0, 1] so rounding near antipodal or
    coincident points never hands sqrt a negative number.
    """
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    d_lat = math.radians(b.latitude - a.latitude)
    d_lon = math.radians(b.longitude - a.longitude)

    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    )
    h = min(1.0, max(0.0, h))

    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_KM * c


def is_within_radius(center: Coordinates, point: Coordinates, radius_km: float) -> bool:
    """True when `point` lies within `radius_km` of `center` (inclusive)."""
    return distance_km(center, point) <= radius_km

"""Great-circle helpers."""

import math

from disaster_info.utils.constants import EARTH_RADIUS_KM


def to_radians(degrees: float) -> float:
    return degrees * (math.pi / 180)


def to_degrees(radians: float) -> float:
    return radians * (180 / math.pi)


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Distance between two WGS84 points on a sphere of radius 6371 km."""
    d_lat = to_radians(lat2 - lat1)
    d_lon = to_radians(lon2 - lon1)

    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(to_radians(lat1)) * math.cos(to_radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c

"""
Geographic utility functions.

Pure distance and travel-time helpers shared by matching and dispatch.
"""

import math
from math import radians, cos, sin, asin, sqrt

EARTH_RADIUS_KM = 6371.0

# Assumed urban average speed used for arrival estimates
AVERAGE_SPEED_KMH = 30.0


def haversine_km(lat1, lon1, lat2, lon2) -> float:
    """
    Calculate great-circle distance between two points in kilometers.

    Args:
        lat1: Latitude of first point
        lon1: Longitude of first point
        lat2: Latitude of second point
        lon2: Longitude of second point

    Returns:
        Distance in kilometers
    """
    lat1, lon1, lat2, lon2 = map(radians, [float(lat1), float(lon1), float(lat2), float(lon2)])
    dlat = lat2 - lat1
    dlon = lon2 - lon1
    a = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
    # Clamp against float drift above 1.0 for antipodal points
    c = 2 * asin(sqrt(min(1.0, a)))
    return c * EARTH_RADIUS_KM


def estimate_arrival_minutes(distance_km: float, average_speed_kmh: float = AVERAGE_SPEED_KMH) -> int:
    """Whole minutes needed to cover ``distance_km``, rounded up."""
    if average_speed_kmh <= 0:
        raise ValueError("average_speed_kmh must be positive")
    return int(math.ceil(distance_km / average_speed_kmh * 60))

"""Common utility functions."""

from .geo import haversine_km, estimate_arrival_minutes

__all__ = [
    "haversine_km",
    "estimate_arrival_minutes",
]

"""
Purpose: Great-circle distance between two coordinates.
What it does:
- Haversine distance on a spherical Earth (radius 6371 km)
- Works on signed decimal degrees, no validation beyond numeric input

Rule: Pure math only. No dispatch rules, no scoring.
"""

from __future__ import annotations

import math
from typing import Tuple

# Internal coordinate type: (lat, lon)
LatLon = Tuple[float, float]

EARTH_RADIUS_KM = 6371.0


def distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Haversine distance in kilometers.

    Symmetric and zero for identical points (a == 0 -> atan2(0, 1) == 0),
    so no special-casing of degenerate geometry is needed.
    """
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def distance_between(origin: LatLon, destination: LatLon) -> float:
    """(lat, lon) tuple form of `distance`."""
    return distance(origin[0], origin[1], destination[0], destination[1])

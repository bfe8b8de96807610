#Marks routing as a package.
#Re-exports the geospatial helpers so other modules import from routing
#without knowing internal file names.
#No business logic.

from .haversine import LatLon, distance, distance_between
from .eta_service import battery_consumption, eta

__all__ = [
    "LatLon",
    "distance",
    "distance_between",
    "eta",
    "battery_consumption",
]

#Purpose: ETA and battery-cost estimation for a drone trip.
#Converts straight-line distances into the numbers dispatch decisions use:
#ETA in minutes from distance + drone speed
#battery percentage points needed for a leg at a given payload
#Keeps estimation policy separate from distance math (haversine.py).

from __future__ import annotations

import math

DEFAULT_SPEED_KMH = 50.0

# linear consumption model, percentage points
BATTERY_PER_KM = 2.0
BATTERY_PER_KG = 0.5


def eta(distance_km: float, speed_kmh: float = DEFAULT_SPEED_KMH) -> int:
    """
    Minutes to cover `distance_km` at `speed_kmh`, rounded up.

    Raises ValueError for a non-positive speed: a drone that cannot move
    must be treated as non-dispatchable before it gets here.
    """
    if speed_kmh <= 0:
        raise ValueError(f"speed_kmh must be > 0, got {speed_kmh}")

    time_hours = distance_km / speed_kmh
    return math.ceil(time_hours * 60)


def battery_consumption(distance_km: float, payload_kg: float) -> float:
    """
    Battery percentage points needed to fly `distance_km` carrying `payload_kg`.
    Pass distance * 2 for a round trip.
    """
    base_consumption = distance_km * BATTERY_PER_KM
    payload_consumption = payload_kg * BATTERY_PER_KG
    return base_consumption + payload_consumption

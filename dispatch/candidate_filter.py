#Purpose: Non-scoring hard eligibility filtering (rule gates).
#Builds the base candidate set before scoring.
#A drone passes only if:
#status is available
#battery is at or above the policy floor (30%), whatever the trip costs
#its one-way distance to the restaurant is within max_range
#
#Output: "rule-qualified drones" (still not ranked), in pool order.

from __future__ import annotations

from typing import List, Optional, Sequence

from drones.models import Drone, DroneStatus
from drones.policy import DispatchPolicy, default_dispatch_policy
from routing import LatLon, distance


def drone_position(drone: Drone, restaurant_lat: float, restaurant_lon: float) -> LatLon:
    """
    Where the drone is for distance purposes; at the restaurant when unknown.
    """
    if drone.location is None:
        return (restaurant_lat, restaurant_lon)
    return drone.location


def distance_to_restaurant(drone: Drone, restaurant_lat: float, restaurant_lon: float) -> float:
    drone_lat, drone_lon = drone_position(drone, restaurant_lat, restaurant_lon)
    return distance(drone_lat, drone_lon, restaurant_lat, restaurant_lon)


def is_eligible(
    drone: Drone,
    restaurant_lat: float,
    restaurant_lon: float,
    policy: Optional[DispatchPolicy] = None,
) -> bool:
    policy = policy or default_dispatch_policy()

    if drone.status != DroneStatus.AVAILABLE:
        return False

    if drone.battery_level < policy.min_battery_level:
        return False

    if distance_to_restaurant(drone, restaurant_lat, restaurant_lon) > drone.max_range:
        return False

    return True


def filter_eligible_drones(
    drones: Sequence[Drone],
    restaurant_lat: float,
    restaurant_lon: float,
    policy: Optional[DispatchPolicy] = None,
) -> List[Drone]:
    """
    Returns only drones that clear every hard gate, preserving pool order.
    """
    policy = policy or default_dispatch_policy()
    return [
        drone for drone in drones
        if is_eligible(drone, restaurant_lat, restaurant_lon, policy)
    ]

"""
Purpose: Ranking model (the "who is best" layer).
Takes one drone + one order and produces a single comparable score.

Higher is better. There is no guaranteed upper bound, so callers rank on the
score and never threshold on its absolute value.

score = 1/(d+1) * 0.25 * 100          closer to the restaurant is better
      + battery_level * 0.20          already 0-100, not rescaled
      + headroom/max_payload * 0.15 * 100
      + available * 0.15 * 100
      + mean(battery_ok, payload_ok, range_ok) * 0.25 * 100

The battery term is the only one not lifted onto the x100 scale. Existing
rankings depend on that asymmetry, so it is kept as is.

The three capability checks are soft here: hard gating happens in
candidate_filter before scores are consulted.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from drones.models import Drone, DroneStatus
from drones.policy import DispatchPolicy, default_dispatch_policy
from orders.models import Order
from orders.priority import estimate_weight
from routing import battery_consumption, distance

from .candidate_filter import distance_to_restaurant


@dataclass(frozen=True)
class DroneScore:
    """
    Result of evaluating one drone for one order. Never persisted.
    """
    drone: Drone
    score: float
    distance: float  # one-way drone -> restaurant, km
    eta: int  # minutes to reach the restaurant


@dataclass(frozen=True)
class ScoreBreakdown:
    """
    Every intermediate of the score, for operators asking "why this drone".
    """
    drone_to_restaurant_km: float
    restaurant_to_delivery_km: float
    total_distance_km: float
    order_weight_kg: float
    battery_needed: float

    battery_ok: bool
    payload_ok: bool
    range_ok: bool

    distance_term: float
    battery_term: float
    payload_term: float
    availability_term: float
    capability_term: float

    @property
    def capability_ratio(self) -> float:
        return (int(self.battery_ok) + int(self.payload_ok) + int(self.range_ok)) / 3

    @property
    def total(self) -> float:
        return (
            self.distance_term
            + self.battery_term
            + self.payload_term
            + self.availability_term
            + self.capability_term
        )


def score_breakdown(
    drone: Drone,
    order: Order,
    restaurant_lat: float,
    restaurant_lon: float,
    policy: Optional[DispatchPolicy] = None,
) -> ScoreBreakdown:
    policy = policy or default_dispatch_policy()
    scale = policy.factor_scale

    drone_to_restaurant = distance_to_restaurant(drone, restaurant_lat, restaurant_lon)
    delivery_lat, delivery_lon = order.delivery_location
    restaurant_to_delivery = distance(restaurant_lat, restaurant_lon, delivery_lat, delivery_lon)

    # one-way mission distance; the round trip is modelled as twice this
    total_distance = drone_to_restaurant + restaurant_to_delivery

    order_weight = estimate_weight(order.total)
    battery_needed = battery_consumption(total_distance * 2, order_weight)

    battery_ok = drone.battery_level >= battery_needed * policy.battery_safety_margin
    payload_ok = drone.payload_headroom >= order_weight
    range_ok = total_distance <= drone.max_range

    capability = (int(battery_ok) + int(payload_ok) + int(range_ok)) / 3
    available = 1 if drone.status == DroneStatus.AVAILABLE else 0

    return ScoreBreakdown(
        drone_to_restaurant_km=drone_to_restaurant,
        restaurant_to_delivery_km=restaurant_to_delivery,
        total_distance_km=total_distance,
        order_weight_kg=order_weight,
        battery_needed=battery_needed,
        battery_ok=battery_ok,
        payload_ok=payload_ok,
        range_ok=range_ok,
        distance_term=(1 / (drone_to_restaurant + 1)) * policy.distance_weight * scale,
        battery_term=drone.battery_level * policy.battery_weight,
        payload_term=(drone.payload_headroom / drone.max_payload) * policy.payload_weight * scale,
        availability_term=available * policy.availability_weight * scale,
        capability_term=capability * policy.capability_weight * scale,
    )


def score_drone(
    drone: Drone,
    order: Order,
    restaurant_lat: float,
    restaurant_lon: float,
    policy: Optional[DispatchPolicy] = None,
) -> float:
    return score_breakdown(drone, order, restaurant_lat, restaurant_lon, policy).total

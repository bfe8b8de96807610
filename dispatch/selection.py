"""
Purpose: Business rules for choosing the single best drone for an order.
What it does:
Accepts an order and a pool of drones, filters out ineligible drones,
scores the survivors and returns the best one with its distance and ETA.

"No drone" is a normal outcome (None), never an exception: callers retry
later on a refreshed pool or tell the operator nothing is dispatchable.
Inputs are never mutated; marking a drone busy is the caller's job.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from drones.models import Drone
from drones.policy import DispatchPolicy, default_dispatch_policy
from orders.models import Order
from routing import eta

from .candidate_filter import distance_to_restaurant, filter_eligible_drones
from .scoring import DroneScore, score_drone

logger = logging.getLogger(__name__)


def _evaluate(
    drone: Drone,
    order: Order,
    restaurant_lat: float,
    restaurant_lon: float,
    policy: DispatchPolicy,
) -> DroneScore:
    one_way_km = distance_to_restaurant(drone, restaurant_lat, restaurant_lon)
    return DroneScore(
        drone=drone,
        score=score_drone(drone, order, restaurant_lat, restaurant_lon, policy),
        distance=one_way_km,
        eta=eta(one_way_km, drone.max_speed),
    )


def _best_first(scored: List[DroneScore]) -> List[DroneScore]:
    # sorted() is stable: equal scores keep pool order
    return sorted(scored, key=lambda candidate: candidate.score, reverse=True)


def rank_drones(
    order: Order,
    drones: Sequence[Drone],
    restaurant_lat: float,
    restaurant_lon: float,
    policy: Optional[DispatchPolicy] = None,
) -> List[DroneScore]:
    """
    Score the whole pool, best first, without the eligibility gate.
    This is the operator's view for picking a drone by hand.
    """
    policy = policy or default_dispatch_policy()
    scored = [_evaluate(drone, order, restaurant_lat, restaurant_lon, policy) for drone in drones]
    return _best_first(scored)


def select_best_drone(
    order: Order,
    drones: Sequence[Drone],
    restaurant_lat: float,
    restaurant_lon: float,
    policy: Optional[DispatchPolicy] = None,
) -> Optional[DroneScore]:
    """
    Returns the highest-scoring eligible drone for the order, or None.
    """
    if not drones:
        logger.info("Order %s: drone pool is empty", order.id)
        return None

    policy = policy or default_dispatch_policy()

    eligible = filter_eligible_drones(drones, restaurant_lat, restaurant_lon, policy)
    if not eligible:
        logger.info("Order %s: none of %d drones is dispatchable", order.id, len(drones))
        return None

    scored = [_evaluate(drone, order, restaurant_lat, restaurant_lon, policy) for drone in eligible]
    best = _best_first(scored)[0]

    logger.debug(
        "Order %s: picked drone %s (score %.2f, %.2f km, eta %d min) out of %d eligible",
        order.id, best.drone.id, best.score, best.distance, best.eta, len(eligible),
    )
    return best

"""
Purpose: Central configuration for drone selection and order urgency.
What it does:

Stores all tunable thresholds/weights for scoring drones and ranking orders:

DISTANCE_WEIGHT = 0.25, BATTERY_WEIGHT = 0.20, PAYLOAD_WEIGHT = 0.15,
AVAILABILITY_WEIGHT = 0.15, CAPABILITY_WEIGHT = 0.25
MIN_BATTERY_LEVEL = 30
URGENCY_THRESHOLDS_MINUTES = [10, 20, 30]

Rule: No logic here—just parameters so you can tune without rewriting code.
"""

from __future__ import annotations

import math
import os
from dataclasses import dataclass, field, replace
from typing import List, Tuple

from dotenv import load_dotenv

LatLon = Tuple[float, float]


@dataclass(frozen=True)
class DispatchPolicy:
    """
    Central configuration for drone scoring and dispatch thresholds.
    """

    # --- Scoring weights (must sum to 1.0) ---
    distance_weight: float = 0.25
    battery_weight: float = 0.20
    payload_weight: float = 0.15
    availability_weight: float = 0.15
    capability_weight: float = 0.25

    # Every factor except raw battery level is a 0-1 ratio lifted onto this scale.
    # Battery is already 0-100 and is deliberately left unscaled.
    factor_scale: float = 100.0

    # --- Eligibility gate ---
    # Hard floor, independent of what the trip would actually cost.
    min_battery_level: float = 30.0

    # --- Capability checks ---
    # Round-trip battery need is inflated by this before comparing to the battery level.
    battery_safety_margin: float = 1.2

    # --- Order urgency ---
    # Waiting minutes at which an order becomes MEDIUM, HIGH, URGENT.
    urgency_thresholds_minutes: List[int] = field(default_factory=lambda: [10, 20, 30])

    # Used when an order arrives without its restaurant coordinates.
    default_restaurant_location: LatLon = (10.762622, 106.660172)

    @property
    def weights(self) -> List[float]:
        return [
            self.distance_weight,
            self.battery_weight,
            self.payload_weight,
            self.availability_weight,
            self.capability_weight,
        ]

    def validate(self) -> None:
        """
        Basic sanity checks.
        """
        if any(w < 0 for w in self.weights):
            raise ValueError("scoring weights must be >= 0")

        if not math.isclose(sum(self.weights), 1.0, abs_tol=1e-9):
            raise ValueError(f"scoring weights must sum to 1.0, got {sum(self.weights)}")

        if not 0 <= self.min_battery_level <= 100:
            raise ValueError("min_battery_level must be within 0-100")

        if self.battery_safety_margin < 1.0:
            raise ValueError("battery_safety_margin must be >= 1.0")

        thresholds = self.urgency_thresholds_minutes
        if len(thresholds) != 3:
            raise ValueError("Must provide exactly 3 urgency thresholds (medium, high, urgent).")
        if any(b <= a for a, b in zip(thresholds, thresholds[1:])) or thresholds[0] <= 0:
            raise ValueError("urgency thresholds must be positive and strictly increasing")


def default_dispatch_policy() -> DispatchPolicy:
    """
    Convenience factory for the default policy.
    """
    p = DispatchPolicy()
    p.validate()
    return p


def policy_from_env() -> DispatchPolicy:
    """
    Default policy with overrides read from the environment (.env supported).

    DISPATCH_MIN_BATTERY_LEVEL=30
    DISPATCH_BATTERY_SAFETY_MARGIN=1.2
    DISPATCH_DEFAULT_RESTAURANT_LAT=10.762622
    DISPATCH_DEFAULT_RESTAURANT_LON=106.660172
    """
    load_dotenv()
    policy = DispatchPolicy()
    overrides = {}

    min_battery = os.getenv("DISPATCH_MIN_BATTERY_LEVEL")
    if min_battery:
        overrides["min_battery_level"] = float(min_battery)

    margin = os.getenv("DISPATCH_BATTERY_SAFETY_MARGIN")
    if margin:
        overrides["battery_safety_margin"] = float(margin)

    lat = os.getenv("DISPATCH_DEFAULT_RESTAURANT_LAT")
    lon = os.getenv("DISPATCH_DEFAULT_RESTAURANT_LON")
    if lat and lon:
        overrides["default_restaurant_location"] = (float(lat), float(lon))

    if overrides:
        policy = replace(policy, **overrides)

    policy.validate()
    return policy

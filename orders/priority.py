"""
Purpose: Physical and temporal estimates derived from an order.
What it does:

- estimate_weight: package weight (kg) from the order's monetary total.
  Heuristic: 10,000 in currency ~ 0.1 kg of food, plus 0.5 kg packaging,
  capped at 5 kg so payload checks stay bounded for huge orders.

- order_priority: urgency level from how long the order has been waiting.
  Pure function of (now - created_at); recomputed on every scheduling pass.

Rule: No queue state here. Estimates only.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Optional, Sequence

from .models import OrderPriority, PriorityLevel

PACKAGING_WEIGHT_KG = 0.5
CURRENCY_PER_STEP = 10000
KG_PER_STEP = 0.1
MAX_ORDER_WEIGHT_KG = 5.0

DEFAULT_URGENCY_THRESHOLDS = (10, 20, 30)


def estimate_weight(order_total: float) -> float:
    food_weight = (order_total / CURRENCY_PER_STEP) * KG_PER_STEP
    return min(PACKAGING_WEIGHT_KG + food_weight, MAX_ORDER_WEIGHT_KG)


def waiting_minutes(created_at: datetime, now: Optional[datetime] = None) -> int:
    """
    Whole minutes elapsed since `created_at` (floored).
    `now` defaults to the current time in created_at's timezone.
    """
    now = now or datetime.now(created_at.tzinfo)
    return math.floor((now - created_at).total_seconds() / 60)


def order_priority(
    created_at: datetime,
    now: Optional[datetime] = None,
    thresholds: Sequence[int] = DEFAULT_URGENCY_THRESHOLDS,
) -> OrderPriority:
    """
    <10 min LOW, <20 MEDIUM, <30 HIGH, otherwise URGENT.
    Each threshold belongs to the higher level (exactly 10 minutes is MEDIUM).
    """
    minutes = waiting_minutes(created_at, now)
    medium_at, high_at, urgent_at = thresholds

    if minutes < medium_at:
        level = PriorityLevel.LOW
    elif minutes < high_at:
        level = PriorityLevel.MEDIUM
    elif minutes < urgent_at:
        level = PriorityLevel.HIGH
    else:
        level = PriorityLevel.URGENT

    return OrderPriority(level=level, waiting_minutes=minutes)
